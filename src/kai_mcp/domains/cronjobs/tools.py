"""MCP Tools for CronJob operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.domains.cronjobs.client import CronJobController
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
    """Register cronjob tools with the MCP server."""

    def controller() -> CronJobController:
        return CronJobController(server.registry, server.config)

    @mcp.tool()
    def create_cronjob(
        name: str,
        schedule: str,
        image: str,
        namespace: str | None = None,
        command: list[str] | None = None,
        args: list[str] | None = None,
        env: dict[str, Any] | None = None,
        restart_policy: str | None = None,
        concurrency_policy: str | None = None,
        suspend: bool | None = None,
        successful_jobs_history_limit: int | None = None,
        failed_jobs_history_limit: int | None = None,
        starting_deadline_seconds: int | None = None,
        backoff_limit: int | None = None,
        image_pull_policy: str | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Create a CronJob that runs a container on a schedule.

        Args:
            name: CronJob name.
            schedule: Cron expression, e.g. "*/5 * * * *" or "@hourly".
            image: Container image.
            namespace: Target namespace (defaults to the current context's).
            command: Container entrypoint override.
            args: Container arguments.
            env: Environment variables.
            restart_policy: OnFailure (default) or Never.
            concurrency_policy: Allow, Forbid or Replace.
            suspend: Create the CronJob suspended.
            successful_jobs_history_limit: Finished jobs to keep.
            failed_jobs_history_limit: Failed jobs to keep.
            starting_deadline_seconds: Deadline for starting a missed run.
            backoff_limit: Retries of each job before it is marked failed.
            image_pull_policy: Always, IfNotPresent or Never.
            labels: CronJob and pod labels.
            annotations: CronJob annotations.
        """

        def call() -> Any:
            spec = ResourceSpec(
                kind="CronJob",
                name=name,
                namespace=resolve_namespace(server, namespace),
                attributes={
                    "schedule": schedule,
                    "image": image,
                    "command": command,
                    "args": args,
                    "env": env,
                    "restart_policy": restart_policy,
                    "concurrency_policy": concurrency_policy,
                    "suspend": suspend,
                    "successful_jobs_history_limit": successful_jobs_history_limit,
                    "failed_jobs_history_limit": failed_jobs_history_limit,
                    "starting_deadline_seconds": starting_deadline_seconds,
                    "backoff_limit": backoff_limit,
                    "image_pull_policy": image_pull_policy,
                    "labels": labels,
                    "annotations": annotations,
                },
            )
            return controller().create(spec)

        return run_operation(server, "create", call)

    @mcp.tool()
    def get_cronjob(name: str, namespace: str | None = None) -> dict[str, Any]:
        """Get a CronJob's schedule, policies and recent runs.

        Args:
            name: CronJob name.
            namespace: Namespace (defaults to the current context's).
        """

        def call() -> dict[str, Any]:
            ctl = controller()
            return ctl.describe(ctl.get(name, resolve_namespace(server, namespace)))

        return run_operation(server, "read", call)

    @mcp.tool()
    def list_cronjobs(
        namespace: str | None = None,
        label_selector: str | None = None,
        all_namespaces: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> dict[str, Any]:
        """List CronJobs with pagination.

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
    def update_cronjob(
        name: str,
        namespace: str | None = None,
        schedule: str | None = None,
        suspend: bool | None = None,
        concurrency_policy: str | None = None,
        successful_jobs_history_limit: int | None = None,
        failed_jobs_history_limit: int | None = None,
        labels: dict[str, Any] | None = None,
        annotations: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Update an existing CronJob.

        Args:
            name: CronJob name.
            namespace: Namespace (defaults to the current context's).
            schedule: New cron expression.
            suspend: Suspend or resume scheduling.
            concurrency_policy: Allow, Forbid or Replace.
            successful_jobs_history_limit: Finished jobs to keep.
            failed_jobs_history_limit: Failed jobs to keep.
            labels: Labels to add or change.
            annotations: Annotations to add or change.
        """
        changes = {
            "schedule": schedule,
            "suspend": suspend,
            "concurrency_policy": concurrency_policy,
            "successful_jobs_history_limit": successful_jobs_history_limit,
            "failed_jobs_history_limit": failed_jobs_history_limit,
            "labels": labels,
            "annotations": annotations,
        }
        return run_operation(
            server,
            "update",
            lambda: controller().update(name, resolve_namespace(server, namespace), changes),
        )

    @mcp.tool()
    def suspend_cronjob(
        name: str, namespace: str | None = None, suspend: bool = True
    ) -> dict[str, Any]:
        """Suspend (or with suspend=False, resume) a CronJob.

        Args:
            name: CronJob name.
            namespace: Namespace (defaults to the current context's).
            suspend: True to stop scheduling new jobs, False to resume.
        """
        return run_operation(
            server,
            "update",
            lambda: controller().set_suspended(name, resolve_namespace(server, namespace), suspend),
        )

    @mcp.tool()
    def delete_cronjob(
        name: str,
        namespace: str | None = None,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Delete a CronJob and, in the background, its jobs.

        Args:
            name: CronJob name.
            namespace: Namespace (defaults to the current context's).
            confirm: Must be True to actually delete.
        """
        if not confirm:
            return confirm_required("CronJob", name)
        return run_operation(
            server,
            "delete",
            lambda: controller().delete(name, resolve_namespace(server, namespace)),
        )
