"""MCP Tools for Secret operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.domains.secrets.client import SecretController
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
    """Register secret tools with the MCP server."""

    def controller() -> SecretController:
        return SecretController(server.registry, server.config)

    @mcp.tool()
    def create_secret(
        name: str,
        namespace: str | None = None,
        type: str = "Opaque",
        data: dict[str, Any] | None = None,
        string_data: dict[str, Any] | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create a Secret.

        Args:
            name: Secret name.
            namespace: Target namespace (defaults to the current context's).
            type: Secret type, e.g. Opaque or kubernetes.io/tls.
            data: Raw values; they are base64-encoded before sending.
            string_data: Plain string values the cluster encodes itself.
            labels: Secret labels.
            annotations: Secret annotations.
        """

        def call() -> Any:
            spec = ResourceSpec(
                kind="Secret",
                name=name,
                namespace=resolve_namespace(server, namespace),
                attributes={
                    "type": type,
                    "data": data,
                    "string_data": string_data,
                    "labels": labels,
                    "annotations": annotations,
                },
            )
            return controller().create(spec)

        return run_operation(server, "create", call)

    @mcp.tool()
    def get_secret(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Get a Secret's type and key names. Values are never returned.

        Args:
            name: Secret name.
            namespace: Namespace (defaults to the current context's).
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            return ctl.describe(ctl.get(name, resolve_namespace(server, namespace)))

        return run_operation(server, "read", call)

    @mcp.tool()
    def list_secrets(
        namespace: str | None = None,
        label_selector: str | None = None,
        all_namespaces: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """List Secrets with pagination.

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
    def update_secret(
        name: str,
        namespace: str | None = None,
        type: str | None = None,
        data: dict[str, Any] | None = None,
        string_data: dict[str, Any] | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Update a Secret. Data, labels and annotations are merged key by key.

        Args:
            name: Secret name.
            namespace: Namespace (defaults to the current context's).
            type: New Secret type.
            data: Raw values to add or change.
            string_data: Plain string values to add or change.
            labels: Labels to add or change.
            annotations: Annotations to add or change.
        """
        changes = {
            "type": type,
            "data": data,
            "string_data": string_data,
            "labels": labels,
            "annotations": annotations,
        }
        return run_operation(
            server,
            "update",
            lambda: controller().update(name, resolve_namespace(server, namespace), changes),
        )

    @mcp.tool()
    def delete_secret(
        name: str,
        namespace: str | None = None,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete a Secret.

        Args:
            name: Secret name.
            namespace: Namespace (defaults to the current context's).
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("Secret", name)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete(name, resolve_namespace(server, namespace)),
        )
