"""Response shaping helpers shared by MCP tools."""

from __future__ import annotations

from typing import Any, TypeVar

from kai_mcp.utils.errors import (
    ConflictError,
    KaiError,
    NotConfiguredError,
    NotFoundError,
    ValidationError,
)

T = TypeVar("T")


def paginate(
    items: list[T],
    offset: int = 0,
    limit: int | None = None,
) -> tuple[list[T], int]:
    """Slice a list for pagination.

    Args:
        items: Full list of items.
        offset: Index of the first item to return.
        limit: Maximum number of items to return (None for all).

    Returns:
        Tuple of (page items, total item count).
    """
    total = len(items)
    if limit is None:
        return items[offset:], total
    return items[offset : offset + limit], total


class PaginatedResponse:
    """Builder for paginated list responses."""

    @staticmethod
    def build(
        items: list[Any],
        total: int,
        offset: int,
        limit: int | None,
        **extra: Any,
    ) -> dict[str, Any]:
        """Build a paginated response dict."""
        response: dict[str, Any] = {
            "items": items,
            "total": total,
            "offset": offset,
            "limit": limit,
            "has_more": offset + len(items) < total,
        }
        response.update(extra)
        return response


_ERROR_TITLES: list[tuple[type[KaiError], str]] = [
    (ValidationError, "Invalid request"),
    (ConflictError, "Conflicting fields"),
    (NotFoundError, "Not found"),
    (NotConfiguredError, "No cluster context"),
]


def error_response(exc: KaiError) -> dict[str, Any]:
    """Turn a kai-mcp error into the dict returned by a failed tool call."""
    title = "Operation failed"
    for error_type, error_title in _ERROR_TITLES:
        if isinstance(exc, error_type):
            title = error_title
            break
    response: dict[str, Any] = {
        "error": title,
        "message": exc.message,
        "kind": exc.kind,
        "name": exc.name,
        "namespace": exc.namespace,
    }
    if isinstance(exc, ValidationError) and exc.field:
        response["field"] = exc.field
    return response
