"""Helpers shared by the resource tool modules."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from kai_mcp.utils.errors import KaiError
from kai_mcp.utils.response import PaginatedResponse, error_response, paginate

if TYPE_CHECKING:
    from kai_mcp.domains.base import ResourceController
    from kai_mcp.models.common import ListResult, OperationResult
    from kai_mcp.server import KaiServer

logger = logging.getLogger(__name__)


def run_operation(
    server: KaiServer,
    operation: str,
    call: Callable[[], OperationResult | dict[str, Any]],
) -> dict[str, Any]:
    """Run a tool operation after the safety check, mapping errors to dicts.

    Args:
        server: The kai-mcp server instance.
        operation: "read", "create", "update" or "delete".
        call: Performs the operation.

    Returns:
        The operation's result dict, or an error dict.
    """
    allowed, reason = server.config.is_operation_allowed(operation)
    if not allowed:
        return {"error": "Operation not allowed", "message": reason}

    try:
        result = call()
    except KaiError as e:
        logger.info(f"{operation} failed: {e}")
        return error_response(e)

    if isinstance(result, dict):
        return result
    return result.to_dict()


def confirm_required(kind: str, target: str) -> dict[str, Any]:
    """Response for a delete that was not confirmed."""
    return {
        "error": "Deletion not confirmed",
        "message": f"To delete {kind} '{target}', set confirm=True.",
    }


def list_response(
    server: KaiServer,
    controller: ResourceController,
    result: ListResult,
    limit: int | None,
    offset: int,
) -> dict[str, Any]:
    """Paginate a list result and render each item."""
    effective_limit = limit
    if effective_limit is not None:
        effective_limit = min(effective_limit, server.config.max_list_limit)
    elif server.config.default_list_limit is not None:
        effective_limit = min(server.config.default_list_limit, server.config.max_list_limit)

    page, total = paginate(result.items, offset, effective_limit)
    items = [controller.describe(item) for item in page]
    extra: dict[str, Any] = {
        "kind": result.kind,
        "namespace": result.namespace,
        "all_namespaces": result.all_namespaces,
    }
    if result.label_selector:
        extra["label_selector"] = result.label_selector
    if result.field_selector:
        extra["field_selector"] = result.field_selector
    if result.message:
        extra["message"] = result.message
    return PaginatedResponse.build(items, total, offset, effective_limit, **extra)


def resolve_namespace(server: KaiServer, namespace: str | None) -> str:
    """Use the given namespace, or the current context's namespace."""
    return namespace or server.registry.get_current_namespace()
