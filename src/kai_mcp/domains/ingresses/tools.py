"""MCP Tools for Ingress operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.domains.ingresses.client import IngressController
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
    """Register ingress tools with the MCP server."""

    def controller() -> IngressController:
        return IngressController(server.registry, server.config)

    @mcp.tool()
    def create_ingress(
        name: str,
        namespace: str | None = None,
        ingress_class: str | None = None,
        rules: list[dict[str, Any]] | None = None,
        default_backend: dict[str, Any] | None = None,
        tls: list[dict[str, Any]] | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create an Ingress for HTTP/HTTPS routing.

        Args:
            name: Ingress name.
            namespace: Target namespace (defaults to the current context's).
            ingress_class: Ingress class name, e.g. "nginx".
            rules: Objects with "host" and "paths"; each path has "path",
                "path_type" (Exact, Prefix or ImplementationSpecific),
                "service_name" and "service_port".
            default_backend: Object with "service_name" and "service_port",
                required when no rules are given.
            tls: Objects with "hosts" and "secret_name".
            labels: Ingress labels.
            annotations: Ingress annotations, e.g. controller settings.
        """

        def call() -> Any:
            spec = ResourceSpec(
                kind="Ingress",
                name=name,
                namespace=resolve_namespace(server, namespace),
                attributes={
                    "ingress_class_name": ingress_class,
                    "rules": rules,
                    "default_backend": default_backend,
                    "tls": tls,
                    "labels": labels,
                    "annotations": annotations,
                },
            )
            return controller().create(spec)

        return run_operation(server, "create", call)

    @mcp.tool()
    def get_ingress(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Get an Ingress's rules, TLS settings and load balancer addresses.

        Args:
            name: Ingress name.
            namespace: Namespace (defaults to the current context's).
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            return ctl.describe(ctl.get(name, resolve_namespace(server, namespace)))

        return run_operation(server, "read", call)

    @mcp.tool()
    def list_ingresses(
        namespace: str | None = None,
        label_selector: str | None = None,
        all_namespaces: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """List Ingresses with pagination.

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
    def update_ingress(
        name: str,
        namespace: str | None = None,
        ingress_class: str | None = None,
        rules: list[dict[str, Any]] | None = None,
        default_backend: dict[str, Any] | None = None,
        tls: list[dict[str, Any]] | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Update an existing Ingress.

        Rules and tls replace the existing lists entirely; labels and
        annotations are merged.

        Args:
            name: Ingress name.
            namespace: Namespace (defaults to the current context's).
            ingress_class: New ingress class name.
            rules: Replacement rules.
            default_backend: Replacement default backend.
            tls: Replacement TLS configuration.
            labels: Labels to add or change.
            annotations: Annotations to add or change.
        """
        changes = {
            "ingress_class_name": ingress_class,
            "rules": rules,
            "default_backend": default_backend,
            "tls": tls,
            "labels": labels,
            "annotations": annotations,
        }
        return run_operation(
            server,
            "update",
            lambda: controller().update(name, resolve_namespace(server, namespace), changes),
        )

    @mcp.tool()
    def delete_ingress(
        name: str,
        namespace: str | None = None,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete an Ingress.

        Args:
            name: Ingress name.
            namespace: Namespace (defaults to the current context's).
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("Ingress", name)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete(name, resolve_namespace(server, namespace)),
        )
