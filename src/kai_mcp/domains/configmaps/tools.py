"""MCP Tools for ConfigMap operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.domains.configmaps.client import ConfigMapController
from kai_mcp.domains.tooling import (
    confirm_required,
    list_response,
    resolve_namespace,
    run_operation,
)
from kai_mcp.models.common import ResourceSpec

if TYPE_CHECKING:
    from kai_mcp.server import KaiServer


def register_tools(mcp: FastMCP, server: KaiServer) -> None:
    """Register configmap tools with the MCP server."""

    def controller() -> ConfigMapController:
        return ConfigMapController(server.registry, server.config)

    @mcp.tool()
    def create_configmap(
        name: str,
        namespace: str | None = None,
        data: dict[str, Any] | None = None,
        binary_data: dict[str, Any] | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create a ConfigMap.

        Args:
            name: ConfigMap name.
            namespace: Target namespace (defaults to the current context's).
            data: Key/value configuration; numbers and booleans become strings.
            binary_data: Raw values stored base64-encoded.
            labels: ConfigMap labels.
            annotations: ConfigMap annotations.
        """

        def call() -> Any:
            spec = ResourceSpec(
                kind="ConfigMap",
                name=name,
                namespace=resolve_namespace(server, namespace),
                attributes={
                    "data": data,
                    "binary_data": binary_data,
                    "labels": labels,
                    "annotations": annotations,
                },
            )
            return controller().create(spec)

        return run_operation(server, "create", call)

    @mcp.tool()
    def get_configmap(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Get a ConfigMap and its data.

        Args:
            name: ConfigMap name.
            namespace: Namespace (defaults to the current context's).
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            return ctl.describe(ctl.get(name, resolve_namespace(server, namespace)))

        return run_operation(server, "read", call)

    @mcp.tool()
    def list_configmaps(
        namespace: str | None = None,
        label_selector: str | None = None,
        all_namespaces: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """List ConfigMaps with pagination.

        Args:
            namespace: Namespace (defaults to the current context's).
            label_selector: Kubernetes label selector.
            all_namespaces: List across the whole cluster.
            limit: Maximum number of items to return.
            offset: Starting offset for pagination.
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            result = ctl.list(namespace, label_selector, all_namespaces)
            return list_response(server, ctl, result, limit, offset)

        return run_operation(server, "read", call)

    @mcp.tool()
    def update_configmap(
        name: str,
        namespace: str | None = None,
        data: dict[str, Any] | None = None,
        binary_data: dict[str, Any] | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Update a ConfigMap. All maps are merged key by key.

        Args:
            name: ConfigMap name.
            namespace: Namespace (defaults to the current context's).
            data: Keys to add or change.
            binary_data: Binary keys to add or change.
            labels: Labels to add or change.
            annotations: Annotations to add or change.
        """
        changes = {
            "data": data,
            "binary_data": binary_data,
            "labels": labels,
            "annotations": annotations,
        }
        return run_operation(
            server,
            "update",
            lambda: controller().update(name, resolve_namespace(server, namespace), changes),
        )

    @mcp.tool()
    def delete_configmap(
        name: str,
        namespace: str | None = None,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete a ConfigMap.

        Args:
            name: ConfigMap name.
            namespace: Namespace (defaults to the current context's).
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("ConfigMap", name)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete(name, resolve_namespace(server, namespace)),
        )
