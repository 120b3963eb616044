"""Coercion of loosely-typed attribute values into Kubernetes field types.

Tool callers hand over attribute bags decoded from JSON, so any value may be a
string, number, boolean, list or nested mapping. The functions here turn those
values into the canonical forms the Kubernetes models expect.

Attribute bags degrade gracefully: an entry whose value has an unsupported
shape is dropped, never reported, and a bag or list that is not a mapping or
list at all is treated as not given. Port and number fields are the exception
since there is no sensible default for them; those raise ValidationError.
"""

from __future__ import annotations

import base64
import logging
import math
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from kai_mcp.utils.errors import ValidationError

logger = logging.getLogger(__name__)


class AttrType(str, Enum):
    """Shapes an attribute value can take."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    LIST = "list"
    MAP = "map"
    UNSUPPORTED = "unsupported"


def classify(value: Any) -> AttrType:
    """Classify an attribute value.

    Booleans are checked before integers because ``bool`` subclasses ``int``.
    """
    if isinstance(value, bool):
        return AttrType.BOOLEAN
    if isinstance(value, int):
        return AttrType.INTEGER
    if isinstance(value, float):
        return AttrType.FLOAT
    if isinstance(value, str):
        return AttrType.STRING
    if isinstance(value, Mapping):
        return AttrType.MAP
    if isinstance(value, list | tuple):
        return AttrType.LIST
    return AttrType.UNSUPPORTED


def _format_float(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_string(value: Any) -> str | None:
    """Render a scalar as text, or return None for unsupported shapes."""
    attr_type = classify(value)
    if attr_type is AttrType.STRING:
        return value
    if attr_type is AttrType.BOOLEAN:
        return "true" if value else "false"
    if attr_type is AttrType.INTEGER:
        return str(value)
    if attr_type is AttrType.FLOAT:
        return _format_float(value)
    # LIST, MAP and UNSUPPORTED have no scalar text form
    return None


def to_string_map(bag: Mapping[str, Any] | None) -> dict[str, str] | None:
    """Convert an attribute bag into a string-to-string map.

    ``None`` stays ``None`` and an empty bag stays empty, so callers can tell
    "not given" from "explicitly cleared".

    Examples:
        >>> to_string_map({"a": 1, "b": True, "c": "x"})
        {'a': '1', 'b': 'true', 'c': 'x'}
    """
    if bag is None:
        return None
    if classify(bag) is not AttrType.MAP:
        logger.debug(f"Ignoring attribute bag that is not a mapping: {bag!r}")
        return None
    result: dict[str, str] = {}
    for key, value in bag.items():
        text = to_string(value)
        if text is None:
            logger.debug(f"Dropping attribute {key!r} with unsupported value {value!r}")
            continue
        result[str(key)] = text
    return result


def to_string_list(items: Iterable[Any] | None) -> list[str] | None:
    """Keep the string elements of a list, in order."""
    if items is None:
        return None
    attr_type = classify(items)
    if attr_type is AttrType.STRING:
        return [items]
    if attr_type is not AttrType.LIST:
        logger.debug(f"Ignoring list attribute with unsupported value {items!r}")
        return None
    return [item for item in items if classify(item) is AttrType.STRING]


def to_env_pairs(bag: Mapping[str, Any] | None) -> list[tuple[str, str]] | None:
    """Convert an attribute bag into (name, value) pairs for container env."""
    mapping = to_string_map(bag)
    if mapping is None:
        return None
    return list(mapping.items())


def to_reference_list(items: Iterable[Any] | None) -> list[str] | None:
    """Collect object names from a list, skipping non-strings and blanks."""
    if items is None:
        return None
    attr_type = classify(items)
    if attr_type is AttrType.STRING:
        items = [items]
    elif attr_type is not AttrType.LIST:
        logger.debug(f"Ignoring reference list with unsupported value {items!r}")
        return None
    return [item for item in items if isinstance(item, str) and item]


def to_port(value: Any, field: str) -> int | str:
    """Coerce a port value that may also be a named port.

    Args:
        value: Integer, float (truncated) or string.
        field: Field name reported in errors.

    Returns:
        The port number, or the port name for non-numeric strings.

    Raises:
        ValidationError: If the value cannot be a port.
    """
    attr_type = classify(value)
    if attr_type is AttrType.INTEGER:
        return value
    if attr_type is AttrType.FLOAT and math.isfinite(value):
        return int(value)
    if attr_type is AttrType.STRING:
        text = value.strip()
        if text.isdecimal():
            return int(text)
        if text:
            return text
    raise ValidationError(
        f"Invalid value for {field}: {value!r} is not a port number or name",
        field=field,
        value=value,
    )


def to_port_number(value: Any, field: str) -> int:
    """Coerce a value that must be a numeric port in 1..65535."""
    port = to_port(value, field)
    if isinstance(port, str) or not 1 <= port <= 65535:
        raise ValidationError(
            f"Invalid value for {field}: {value!r} must be a port number between 1 and 65535",
            field=field,
            value=value,
        )
    return port


def to_int(value: Any, field: str, minimum: int | None = 0) -> int:
    """Coerce a count-like value to an int."""
    attr_type = classify(value)
    number: int | None = None
    if attr_type is AttrType.INTEGER:
        number = value
    elif attr_type is AttrType.FLOAT and math.isfinite(value):
        number = int(value)
    elif attr_type is AttrType.STRING:
        text = value.strip()
        if text.removeprefix("-").isdecimal():
            number = int(text)

    if number is None:
        raise ValidationError(
            f"Invalid value for {field}: {value!r} is not a number",
            field=field,
            value=value,
        )
    if minimum is not None and number < minimum:
        raise ValidationError(
            f"Invalid value for {field}: {number} must be at least {minimum}",
            field=field,
            value=value,
        )
    return number


def to_bool(value: Any, field: str) -> bool:
    """Coerce a boolean flag, accepting "true" and "false" strings."""
    if classify(value) is AttrType.BOOLEAN:
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValidationError(
        f"Invalid value for {field}: {value!r} is not a boolean",
        field=field,
        value=value,
    )


def to_mapping_list(items: Any, field: str) -> list[Mapping[str, Any]]:
    """Validate a list of nested objects such as ports or rules."""
    if classify(items) is not AttrType.LIST:
        raise ValidationError(
            f"Invalid value for {field}: expected a list of objects",
            field=field,
            value=items,
        )
    for index, item in enumerate(items):
        if classify(item) is not AttrType.MAP:
            raise ValidationError(
                f"Invalid value for {field}[{index}]: expected an object, got {item!r}",
                field=f"{field}[{index}]",
                value=item,
            )
    return list(items)


def lookup(entry: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key of a nested object.

    Nested entries accept both snake_case and the camelCase spelling used by
    the Kubernetes API, e.g. ``lookup(port, "node_port", "nodePort")``.
    """
    for key in keys:
        if key in entry and entry[key] is not None:
            return entry[key]
    return default


def to_base64_map(bag: Mapping[str, Any] | None) -> dict[str, str] | None:
    """Base64-encode the values of an attribute bag.

    The kubernetes client sends ``data`` of Secrets and ``binary_data`` of
    ConfigMaps as is, so raw values must be encoded first. Values follow the
    same rules as ``to_string_map``.
    """
    mapping = to_string_map(bag)
    if mapping is None:
        return None
    return {
        key: base64.b64encode(value.encode("utf-8")).decode("ascii")
        for key, value in mapping.items()
    }
