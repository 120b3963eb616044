"""CronJob operations."""

from __future__ import annotations

from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import ResourceController, check_choice
from kai_mcp.domains.cronjobs.models import ConcurrencyPolicy, CronJob
from kai_mcp.domains.jobs.client import JOB_RESTART_POLICIES, optional_count
from kai_mcp.domains.workloads import build_pod_spec, validate_container
from kai_mcp.models.common import OperationResult, ResourceSpec
from kai_mcp.utils.coercion import to_bool, to_string_map
from kai_mcp.utils.deadline import Deadline

CONCURRENCY_POLICIES = tuple(p.value for p in ConcurrencyPolicy)
_LIMIT_FIELDS = (
    "successful_jobs_history_limit",
    "failed_jobs_history_limit",
    "starting_deadline_seconds",
    "backoff_limit",
)


class CronJobController(ResourceController):
    """CronJobs create Jobs on a repeating schedule."""

    kind = "CronJob"
    plural = "cronjobs"
    api_version = "batch/v1"
    api_group = "batch_v1"
    resource = "cron_job"
    required_fields = ("schedule", "image")
    view = CronJob

    def validate(self, spec: ResourceSpec) -> None:
        validate_container(spec)
        self._check_schedule(spec)
        if spec.has("restart_policy"):
            check_choice(spec.get("restart_policy"), JOB_RESTART_POLICIES, "restart_policy")
        self._check_policy_fields(spec)

    def build(self, spec: ResourceSpec) -> Any:
        labels = to_string_map(spec.get("labels"))
        job_spec = k8s_client.V1JobSpec(
            backoff_limit=optional_count(spec, "backoff_limit"),
            template=k8s_client.V1PodTemplateSpec(
                metadata=k8s_client.V1ObjectMeta(labels=labels),
                spec=build_pod_spec(spec, restart_policy=spec.get("restart_policy", "OnFailure")),
            ),
        )
        return k8s_client.V1CronJob(
            api_version="batch/v1",
            kind="CronJob",
            metadata=self.build_metadata(spec),
            spec=k8s_client.V1CronJobSpec(
                schedule=spec.get("schedule").strip(),
                concurrency_policy=spec.get("concurrency_policy"),
                suspend=to_bool(spec.get("suspend"), "suspend") if spec.has("suspend") else None,
                successful_jobs_history_limit=optional_count(spec, "successful_jobs_history_limit"),
                failed_jobs_history_limit=optional_count(spec, "failed_jobs_history_limit"),
                starting_deadline_seconds=optional_count(spec, "starting_deadline_seconds"),
                job_template=k8s_client.V1JobTemplateSpec(
                    metadata=k8s_client.V1ObjectMeta(labels=labels),
                    spec=job_spec,
                ),
            ),
        )

    def created_message(self, obj: Any, namespace: str | None) -> str:
        return (
            f"CronJob '{obj.metadata.name}' created successfully in namespace "
            f"'{namespace}' with schedule '{obj.spec.schedule}'"
        )

    def validate_update(self, spec: ResourceSpec) -> None:
        if spec.has("schedule"):
            self._check_schedule(spec)
        self._check_policy_fields(spec)

    def update_spec(self, existing: Any, spec: ResourceSpec) -> None:
        cron_spec = existing.spec
        if spec.has("schedule"):
            cron_spec.schedule = spec.get("schedule").strip()
        if spec.has("suspend"):
            cron_spec.suspend = to_bool(spec.get("suspend"), "suspend")
        if spec.has("concurrency_policy"):
            cron_spec.concurrency_policy = spec.get("concurrency_policy")
        for field in ("successful_jobs_history_limit", "failed_jobs_history_limit"):
            if spec.has(field):
                setattr(cron_spec, field, optional_count(spec, field))

    def set_suspended(
        self,
        name: str,
        namespace: str,
        suspend: bool,
        deadline: Deadline | None = None,
    ) -> OperationResult:
        """Suspend or resume scheduling of new jobs."""
        result = self.update(name, namespace, {"suspend": suspend}, deadline)
        state = "suspended" if suspend else "resumed"
        result.message = f"CronJob '{name}' {state} in namespace '{namespace}'"
        return result

    def _check_schedule(self, spec: ResourceSpec) -> None:
        schedule = spec.get("schedule")
        if not isinstance(schedule, str) or not schedule.strip():
            raise self.invalid(
                "schedule must be a non-empty cron expression", spec, "schedule", schedule
            )
        text = schedule.strip()
        # Either a macro such as @hourly or the five standard cron fields
        if not text.startswith("@") and len(text.split()) != 5:
            raise self.invalid(
                f"Invalid schedule {schedule!r}: expected 5 fields (minute hour day month weekday)",
                spec,
                "schedule",
                schedule,
            )

    def _check_policy_fields(self, spec: ResourceSpec) -> None:
        if spec.has("concurrency_policy"):
            check_choice(spec.get("concurrency_policy"), CONCURRENCY_POLICIES, "concurrency_policy")
        if spec.has("suspend"):
            to_bool(spec.get("suspend"), "suspend")
        for field in _LIMIT_FIELDS:
            optional_count(spec, field)
