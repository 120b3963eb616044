"""MCP Tools for Service operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.domains.services.client import ServiceController
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
    """Register service tools with the MCP server."""

    def controller() -> ServiceController:
        return ServiceController(server.registry, server.config)

    @mcp.tool()
    def create_service(
        name: str,
        ports: list[dict[str, Any]],
        namespace: str | None = None,
        type: str = "ClusterIP",
        selector: dict[str, Any] | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
        cluster_ip: str | None = None,
        external_ips: list[str] | None = None,
        external_name: str | None = None,
        session_affinity: str | None = None,
    ) -> dict[str, Any]:
        """Create a Service exposing pods selected by labels.

        Args:
            name: Service name.
            ports: Port entries, each with "port" and optionally "target_port",
                "node_port", "protocol" (TCP, UDP or SCTP) and "name".
            namespace: Target namespace (defaults to the current context's).
            type: ClusterIP, NodePort, LoadBalancer or ExternalName.
            selector: Pod labels the service routes to.
            labels: Labels for the service itself.
            annotations: Annotations for the service.
            cluster_ip: Fixed cluster IP, or "None" for a headless service.
            external_ips: Additional external IPs.
            external_name: DNS name for ExternalName services.
            session_affinity: None or ClientIP.

        Returns:
            The created service with its type, cluster IP and port mappings.
        """

        def call() -> Any:
            spec = ResourceSpec(
                kind="Service",
                name=name,
                namespace=resolve_namespace(server, namespace),
                attributes={
                    "type": type,
                    "ports": ports,
                    "selector": selector,
                    "labels": labels,
                    "annotations": annotations,
                    "cluster_ip": cluster_ip,
                    "external_ips": external_ips,
                    "external_name": external_name,
                    "session_affinity": session_affinity,
                },
            )
            return controller().create(spec)

        return run_operation(server, "create", call)

    @mcp.tool()
    def get_service(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Get a Service's type, addresses, selector and ports.

        Args:
            name: Service name.
            namespace: Namespace (defaults to the current context's).
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            return ctl.describe(ctl.get(name, resolve_namespace(server, namespace)))

        return run_operation(server, "read", call)

    @mcp.tool()
    def list_services(
        namespace: str | None = None,
        label_selector: str | None = None,
        all_namespaces: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """List Services with pagination.

        Args:
            namespace: Namespace (defaults to the current context's).
            label_selector: Kubernetes label selector, e.g. "app=web,tier!=db".
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
    def update_service(
        name: str,
        namespace: str | None = None,
        type: str | None = None,
        ports: list[dict[str, Any]] | None = None,
        selector: dict[str, Any] | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
        external_ips: list[str] | None = None,
        external_name: str | None = None,
        session_affinity: str | None = None,
    ) -> dict[str, Any]:
        """Update an existing Service.

        Labels, annotations and selector are merged into the existing values.
        A new ports list replaces the current ports entirely.

        Args:
            name: Service name.
            namespace: Namespace (defaults to the current context's).
            type: New exposure type.
            ports: Replacement port list.
            selector: Selector entries to add or change.
            labels: Labels to add or change.
            annotations: Annotations to add or change.
            external_ips: Replacement external IPs.
            external_name: New external DNS name.
            session_affinity: None or ClientIP.
        """
        changes = {
            "type": type,
            "ports": ports,
            "selector": selector,
            "labels": labels,
            "annotations": annotations,
            "external_ips": external_ips,
            "external_name": external_name,
            "session_affinity": session_affinity,
        }
        return run_operation(
            server,
            "update",
            lambda: controller().update(name, resolve_namespace(server, namespace), changes),
        )

    @mcp.tool()
    def delete_service(
        name: str,
        namespace: str | None = None,
        force: bool = False,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete a Service.

        Args:
            name: Service name.
            namespace: Namespace (defaults to the current context's).
            force: Delete with a zero grace period.
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("Service", name)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete(name, resolve_namespace(server, namespace), force),
        )

    @mcp.tool()
    def delete_services_by_selector(
        label_selector: str,
        namespace: str | None = None,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete every Service matching a label selector.

        Deletion continues past individual failures and reports which
        services were deleted.

        Args:
            label_selector: Kubernetes label selector, e.g. "app=web".
            namespace: Namespace (defaults to the current context's).
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("services matching", label_selector)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete_by_selector(
                resolve_namespace(server, namespace), label_selector
            ),
        )
