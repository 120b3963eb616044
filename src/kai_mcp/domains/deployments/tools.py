"""MCP Tools for Deployment operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.domains.deployments.client import DeploymentController
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
    """Register deployment tools with the MCP server."""

    def controller() -> DeploymentController:
        return DeploymentController(server.registry, server.config)

    @mcp.tool()
    def create_deployment(
        name: str,
        image: str,
        namespace: str | None = None,
        replicas: int = 1,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
        container_port: str | None = None,
        env: dict[str, Any] | None = None,
        command: list[str] | None = None,
        args: list[str] | None = None,
        image_pull_policy: str | None = None,
        image_pull_secrets: list[str] | None = None,
    ) -> dict[str, Any]:
        """Create a Deployment running one container image.

        Args:
            name: Deployment name.
            image: Container image, e.g. "nginx:1.27".
            namespace: Target namespace (defaults to the current context's).
            replicas: Number of pods.
            labels: Pod and deployment labels (defaults to app=<name>).
            annotations: Deployment annotations.
            container_port: Port as "8080" or "8080/TCP" (defaults to 8080/TCP).
            env: Environment variables.
            command: Container entrypoint override.
            args: Container arguments.
            image_pull_policy: Always, IfNotPresent or Never.
            image_pull_secrets: Names of registry credential secrets.
        """

        def call() -> Any:
            spec = ResourceSpec(
                kind="Deployment",
                name=name,
                namespace=resolve_namespace(server, namespace),
                attributes={
                    "image": image,
                    "replicas": replicas,
                    "labels": labels,
                    "annotations": annotations,
                    "container_port": container_port,
                    "env": env,
                    "command": command,
                    "args": args,
                    "image_pull_policy": image_pull_policy,
                    "image_pull_secrets": image_pull_secrets,
                },
            )
            return controller().create(spec)

        return run_operation(server, "create", call)

    @mcp.tool()
    def get_deployment(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Get a Deployment's replicas, containers and conditions.

        Args:
            name: Deployment name.
            namespace: Namespace (defaults to the current context's).
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            return ctl.describe(ctl.get(name, resolve_namespace(server, namespace)))

        return run_operation(server, "read", call)

    @mcp.tool()
    def list_deployments(
        namespace: str | None = None,
        label_selector: str | None = None,
        all_namespaces: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """List Deployments with pagination.

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
    def update_deployment(
        name: str,
        namespace: str | None = None,
        image: str | None = None,
        replicas: int | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
        env: dict[str, Any] | None = None,
        container_port: str | None = None,
        image_pull_policy: str | None = None,
        image_pull_secrets: list[str] | None = None,
    ) -> dict[str, Any]:
        """Update an existing Deployment.

        Labels, annotations and env are merged into the existing values;
        container_port replaces the container's ports.

        Args:
            name: Deployment name.
            namespace: Namespace (defaults to the current context's).
            image: New container image.
            replicas: New replica count.
            labels: Labels to add or change.
            annotations: Annotations to add or change.
            env: Environment variables to add or change.
            container_port: Replacement container port.
            image_pull_policy: Always, IfNotPresent or Never.
            image_pull_secrets: Replacement registry credential secrets.
        """
        changes = {
            "image": image,
            "replicas": replicas,
            "labels": labels,
            "annotations": annotations,
            "env": env,
            "container_port": container_port,
            "image_pull_policy": image_pull_policy,
            "image_pull_secrets": image_pull_secrets,
        }
        return run_operation(
            server,
            "update",
            lambda: controller().update(name, resolve_namespace(server, namespace), changes),
        )

    @mcp.tool()
    def scale_deployment(name: str, replicas: int, namespace: str | None = None) -> dict[str, Any]:
        """Scale a Deployment to a replica count.

        Args:
            name: Deployment name.
            replicas: Desired number of pods.
            namespace: Namespace (defaults to the current context's).
        """
        return run_operation(
            server,
            "update",
            lambda: controller().scale(name, resolve_namespace(server, namespace), replicas),
        )

    @mcp.tool()
    def restart_deployment(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Restart all pods of a Deployment with a rolling update.

        Args:
            name: Deployment name.
            namespace: Namespace (defaults to the current context's).
        """
        return run_operation(
            server,
            "update",
            lambda: controller().restart(name, resolve_namespace(server, namespace)),
        )

    @mcp.tool()
    def pause_deployment(
        name: str, namespace: str | None = None, paused: bool = True
    ) -> dict[str, Any]:
        """Pause (or with paused=False, resume) rollouts of a Deployment.

        Args:
            name: Deployment name.
            namespace: Namespace (defaults to the current context's).
            paused: True to pause, False to resume.
        """
        return run_operation(
            server,
            "update",
            lambda: controller().set_paused(name, resolve_namespace(server, namespace), paused),
        )

    @mcp.tool()
    def get_deployment_rollout_status(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Report how far the current rollout of a Deployment has progressed.

        Args:
            name: Deployment name.
            namespace: Namespace (defaults to the current context's).
        """
        return run_operation(
            server,
            "read",
            lambda: controller().rollout_status(name, resolve_namespace(server, namespace)),
        )

    @mcp.tool()
    def delete_deployment(
        name: str,
        namespace: str | None = None,
        force: bool = False,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete a Deployment and, in the background, its pods.

        Args:
            name: Deployment name.
            namespace: Namespace (defaults to the current context's).
            force: Delete with a zero grace period.
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("Deployment", name)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete(name, resolve_namespace(server, namespace), force),
        )
