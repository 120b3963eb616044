"""MCP Tools for Job operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.domains.jobs.client import JobController
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
    """Register job tools with the MCP server."""

    def controller() -> JobController:
        return JobController(server.registry, server.config)

    @mcp.tool()
    def create_job(
        name: str,
        image: str,
        namespace: str | None = None,
        command: list[str] | None = None,
        args: list[str] | None = None,
        env: dict[str, Any] | None = None,
        restart_policy: str | None = None,
        backoff_limit: int | None = None,
        completions: int | None = None,
        parallelism: int | None = None,
        image_pull_policy: str | None = None,
        image_pull_secrets: list[str] | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create a Job that runs a container to completion.

        Args:
            name: Job name.
            image: Container image.
            namespace: Target namespace (defaults to the current context's).
            command: Container entrypoint override.
            args: Container arguments.
            env: Environment variables.
            restart_policy: OnFailure or Never (default).
            backoff_limit: Retries before the job is marked failed.
            completions: Successful pods required.
            parallelism: Pods running at the same time.
            image_pull_policy: Always, IfNotPresent or Never.
            image_pull_secrets: Names of registry credential secrets.
            labels: Job and pod labels.
            annotations: Job annotations.
        """

        def call() -> Any:
            spec = ResourceSpec(
                kind="Job",
                name=name,
                namespace=resolve_namespace(server, namespace),
                attributes={
                    "image": image,
                    "command": command,
                    "args": args,
                    "env": env,
                    "restart_policy": restart_policy,
                    "backoff_limit": backoff_limit,
                    "completions": completions,
                    "parallelism": parallelism,
                    "image_pull_policy": image_pull_policy,
                    "image_pull_secrets": image_pull_secrets,
                    "labels": labels,
                    "annotations": annotations,
                },
            )
            return controller().create(spec)

        return run_operation(server, "create", call)

    @mcp.tool()
    def get_job(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Get a Job's progress and status.

        Args:
            name: Job name.
            namespace: Namespace (defaults to the current context's).
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            return ctl.describe(ctl.get(name, resolve_namespace(server, namespace)))

        return run_operation(server, "read", call)

    @mcp.tool()
    def list_jobs(
        namespace: str | None = None,
        label_selector: str | None = None,
        all_namespaces: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """List Jobs with pagination.

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
    def update_job(
        name: str,
        namespace: str | None = None,
        parallelism: int | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Update a Job's parallelism, labels or annotations.

        Args:
            name: Job name.
            namespace: Namespace (defaults to the current context's).
            parallelism: New number of pods running at the same time.
            labels: Labels to add or change.
            annotations: Annotations to add or change.
        """
        changes = {"parallelism": parallelism, "labels": labels, "annotations": annotations}
        return run_operation(
            server,
            "update",
            lambda: controller().update(name, resolve_namespace(server, namespace), changes),
        )

    @mcp.tool()
    def delete_job(
        name: str,
        namespace: str | None = None,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete a Job and, in the background, its pods.

        Args:
            name: Job name.
            namespace: Namespace (defaults to the current context's).
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("Job", name)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete(name, resolve_namespace(server, namespace)),
        )
