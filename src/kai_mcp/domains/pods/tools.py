"""MCP Tools for Pod operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.domains.pods.client import PodController
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
    """Register pod tools with the MCP server."""

    def controller() -> PodController:
        return PodController(server.registry, server.config)

    @mcp.tool()
    def create_pod(
        name: str,
        image: str,
        namespace: str | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
        container_port: str | None = None,
        env: dict[str, Any] | None = None,
        command: list[str] | None = None,
        args: list[str] | None = None,
        restart_policy: str | None = None,
        image_pull_policy: str | None = None,
        image_pull_secrets: list[str] | None = None,
        service_account: str | None = None,
        node_selector: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create a standalone Pod.

        Args:
            name: Pod name.
            image: Container image.
            namespace: Target namespace (defaults to the current context's).
            labels: Pod labels.
            annotations: Pod annotations.
            container_port: Port as "8080" or "8080/TCP".
            env: Environment variables.
            command: Container entrypoint override.
            args: Container arguments.
            restart_policy: Always (default), OnFailure or Never.
            image_pull_policy: Always, IfNotPresent or Never.
            image_pull_secrets: Names of registry credential secrets.
            service_account: Service account to run as.
            node_selector: Node labels the pod must be scheduled on.
        """

        def call() -> Any:
            spec = ResourceSpec(
                kind="Pod",
                name=name,
                namespace=resolve_namespace(server, namespace),
                attributes={
                    "image": image,
                    "labels": labels,
                    "annotations": annotations,
                    "container_port": container_port,
                    "env": env,
                    "command": command,
                    "args": args,
                    "restart_policy": restart_policy,
                    "image_pull_policy": image_pull_policy,
                    "image_pull_secrets": image_pull_secrets,
                    "service_account": service_account,
                    "node_selector": node_selector,
                },
            )
            return controller().create(spec)

        return run_operation(server, "create", call)

    @mcp.tool()
    def get_pod(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Get a Pod's phase, containers and conditions.

        Args:
            name: Pod name.
            namespace: Namespace (defaults to the current context's).
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            return ctl.describe(ctl.get(name, resolve_namespace(server, namespace)))

        return run_operation(server, "read", call)

    @mcp.tool()
    def list_pods(
        namespace: str | None = None,
        label_selector: str | None = None,
        all_namespaces: bool = False,
        field_selector: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """List Pods with pagination.

        Args:
            namespace: Namespace (defaults to the current context's).
            label_selector: Kubernetes label selector, e.g. "app=web".
            all_namespaces: List across the whole cluster.
            field_selector: Kubernetes field selector, e.g. "status.phase=Running"
                or "spec.nodeName=node-1".
            limit: Maximum number of items to return.
            offset: Starting offset for pagination.
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            result = ctl.list(namespace, label_selector, all_namespaces, field_selector)
            return list_response(server, ctl, result, limit, offset)

        return run_operation(server, "read", call)

    @mcp.tool()
    def update_pod(
        name: str,
        namespace: str | None = None,
        image: str | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Update a Pod's labels, annotations or container image.

        Args:
            name: Pod name.
            namespace: Namespace (defaults to the current context's).
            image: New image for the pod's first container.
            labels: Labels to add or change.
            annotations: Annotations to add or change.
        """
        changes = {"image": image, "labels": labels, "annotations": annotations}
        return run_operation(
            server,
            "update",
            lambda: controller().update(name, resolve_namespace(server, namespace), changes),
        )

    @mcp.tool()
    def get_pod_logs(
        name: str,
        namespace: str | None = None,
        container: str | None = None,
        tail: int | None = None,
        previous: bool = False,
        since_seconds: int | None = None,
    ) -> dict[str, Any]:
        """Get logs from a container in a Pod.

        Output is limited to 100 KiB; use tail or since_seconds to narrow it.

        Args:
            name: Pod name.
            namespace: Namespace (defaults to the current context's).
            container: Container name (required for multi-container pods).
            tail: Number of lines from the end of the log.
            previous: Logs of the previous terminated container instance.
            since_seconds: Only logs newer than this many seconds.
        """

        def call() -> dict[str, Any]:
            logs = controller().logs(
                name,
                resolve_namespace(server, namespace),
                container=container,
                tail_lines=tail,
                previous=previous,
                since_seconds=since_seconds,
            )
            return logs.model_dump()

        return run_operation(server, "read", call)

    @mcp.tool()
    def delete_pod(
        name: str,
        namespace: str | None = None,
        force: bool = False,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete a Pod.

        Args:
            name: Pod name.
            namespace: Namespace (defaults to the current context's).
            force: Delete immediately with a zero grace period.
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("Pod", name)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete(name, resolve_namespace(server, namespace), force),
        )

    @mcp.tool()
    def delete_pods_by_selector(
        label_selector: str,
        namespace: str | None = None,
        force: bool = False,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete every Pod matching a label selector.

        Deletion continues past individual failures; the result lists which
        pods were deleted and which failed.

        Args:
            label_selector: Kubernetes label selector, e.g. "app=web".
            namespace: Namespace (defaults to the current context's).
            force: Delete immediately with a zero grace period.
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("pods matching", label_selector)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete_by_selector(
                resolve_namespace(server, namespace), label_selector, force
            ),
        )
