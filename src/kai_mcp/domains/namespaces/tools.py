"""MCP Tools for Namespace operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.domains.namespaces.client import NamespaceController
from kai_mcp.domains.tooling import confirm_required, list_response, run_operation
from kai_mcp.models.common import ResourceSpec

if TYPE_CHECKING:
    from kai_mcp.server import KaiServer


def register_tools(mcp: FastMCP, server: KaiServer) -> None:
    """Register namespace tools with the MCP server."""

    def controller() -> NamespaceController:
        return NamespaceController(server.registry, server.config)

    @mcp.tool()
    def create_namespace(
        name: str,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create a Namespace.

        Args:
            name: Namespace name.
            labels: Namespace labels.
            annotations: Namespace annotations.
        """
        spec = ResourceSpec(
            kind="Namespace",
            name=name,
            attributes={"labels": labels, "annotations": annotations},
        )
        return run_operation(server, "create", lambda: controller().create(spec))

    @mcp.tool()
    def get_namespace(name: str) -> dict[str, Any]:
        """Get a Namespace's phase, labels and annotations.

        Args:
            name: Namespace name.
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            return ctl.describe(ctl.get(name))

        return run_operation(server, "read", call)

    @mcp.tool()
    def list_namespaces(
        label_selector: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """List Namespaces with pagination.

        Args:
            label_selector: Kubernetes label selector.
            limit: Maximum number of items to return.
            offset: Starting offset for pagination.
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            result = ctl.list(label_selector=label_selector)
            return list_response(server, ctl, result, limit, offset)

        return run_operation(server, "read", call)

    @mcp.tool()
    def update_namespace(
        name: str,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Add or change labels and annotations of a Namespace.

        Args:
            name: Namespace name.
            labels: Labels to add or change.
            annotations: Annotations to add or change.
        """
        changes = {"labels": labels, "annotations": annotations}
        return run_operation(server, "update", lambda: controller().update(name, None, changes))

    @mcp.tool()
    def delete_namespace(name: str, force: bool = False, confirm: bool = False) -> dict[str, Any]:
        """Delete a Namespace and everything in it.

        Args:
            name: Namespace name.
            force: Delete with a zero grace period.
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("Namespace", name)
        return run_operation(server, "delete", lambda: controller().delete(name, None, force))

    @mcp.tool()
    def delete_namespaces_by_selector(
        label_selector: str, force: bool = False, confirm: bool = False
    ) -> dict[str, Any]:
        """Delete every Namespace matching a label selector.

        Args:
            label_selector: Kubernetes label selector, e.g. "env=preview".
            force: Delete with a zero grace period.
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("namespaces matching", label_selector)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete_by_selector(None, label_selector, force),
        )
