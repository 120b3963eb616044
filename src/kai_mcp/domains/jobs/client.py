"""Job operations."""

from __future__ import annotations

from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import ResourceController, check_choice
from kai_mcp.domains.jobs.models import Job
from kai_mcp.domains.workloads import build_pod_spec, validate_container
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.coercion import to_int, to_string_map

# Jobs may not restart their pods with Always
JOB_RESTART_POLICIES = ("OnFailure", "Never")
_COUNT_FIELDS = ("backoff_limit", "completions", "parallelism")


def optional_count(spec: ResourceSpec, field: str) -> int | None:
    if not spec.has(field):
        return None
    return to_int(spec.get(field), field)


class JobController(ResourceController):
    """Jobs run pods until a number of them complete successfully."""

    kind = "Job"
    plural = "jobs"
    api_version = "batch/v1"
    api_group = "batch_v1"
    resource = "job"
    required_fields = ("image",)
    view = Job

    def validate(self, spec: ResourceSpec) -> None:
        validate_container(spec)
        if spec.has("restart_policy"):
            check_choice(spec.get("restart_policy"), JOB_RESTART_POLICIES, "restart_policy")
        for field in _COUNT_FIELDS:
            optional_count(spec, field)

    def build(self, spec: ResourceSpec) -> Any:
        return k8s_client.V1Job(
            api_version="batch/v1",
            kind="Job",
            metadata=self.build_metadata(spec),
            spec=k8s_client.V1JobSpec(
                backoff_limit=optional_count(spec, "backoff_limit"),
                completions=optional_count(spec, "completions"),
                parallelism=optional_count(spec, "parallelism"),
                template=k8s_client.V1PodTemplateSpec(
                    metadata=k8s_client.V1ObjectMeta(labels=to_string_map(spec.get("labels"))),
                    spec=build_pod_spec(
                        spec, restart_policy=spec.get("restart_policy", "Never")
                    ),
                ),
            ),
        )

    def validate_update(self, spec: ResourceSpec) -> None:
        optional_count(spec, "parallelism")

    def update_spec(self, existing: Any, spec: ResourceSpec) -> None:
        # The pod template of a job is immutable once created
        if spec.has("parallelism"):
            existing.spec.parallelism = optional_count(spec, "parallelism")
