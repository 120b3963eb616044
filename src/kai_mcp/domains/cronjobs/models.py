"""Pydantic models for CronJobs."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from kai_mcp.models.common import ContainerSummary, ResourceMetadata


class ConcurrencyPolicy(str, Enum):
    """What to do when a run is due while the previous one is still active."""

    ALLOW = "Allow"
    FORBID = "Forbid"
    REPLACE = "Replace"


class CronJob(BaseModel):
    """CronJob representation."""

    metadata: ResourceMetadata
    schedule: str
    suspend: bool = False
    concurrency_policy: str = ConcurrencyPolicy.ALLOW.value
    successful_jobs_history_limit: int | None = None
    failed_jobs_history_limit: int | None = None
    starting_deadline_seconds: int | None = None
    active_jobs: list[str] = Field(default_factory=list)
    last_schedule_time: datetime | None = None
    last_successful_time: datetime | None = None
    containers: list[ContainerSummary] = Field(default_factory=list)

    @classmethod
    def from_k8s(cls, cron_job: Any) -> CronJob:
        """Create from a Kubernetes V1CronJob."""
        spec = cron_job.spec
        status = cron_job.status
        job_template = spec.job_template.spec if spec.job_template else None
        pod_spec = (
            job_template.template.spec if job_template and job_template.template else None
        )

        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(
                cron_job.metadata, kind="CronJob", api_version="batch/v1"
            ),
            schedule=spec.schedule,
            suspend=bool(spec.suspend),
            concurrency_policy=spec.concurrency_policy or ConcurrencyPolicy.ALLOW.value,
            successful_jobs_history_limit=spec.successful_jobs_history_limit,
            failed_jobs_history_limit=spec.failed_jobs_history_limit,
            starting_deadline_seconds=spec.starting_deadline_seconds,
            active_jobs=[ref.name for ref in ((status.active or []) if status else [])],
            last_schedule_time=status.last_schedule_time if status else None,
            last_successful_time=status.last_successful_time if status else None,
            containers=[
                ContainerSummary.from_k8s_container(c)
                for c in (pod_spec.containers if pod_spec else [])
            ],
        )
