"""Pydantic models for Jobs."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, computed_field

from kai_mcp.models.common import Condition, ContainerSummary, ResourceMetadata


class Job(BaseModel):
    """Job representation."""

    metadata: ResourceMetadata
    completions: int | None = None
    parallelism: int | None = None
    backoff_limit: int | None = None
    active: int = 0
    succeeded: int = 0
    failed: int = 0
    start_time: datetime | None = None
    completion_time: datetime | None = None
    containers: list[ContainerSummary] = Field(default_factory=list)
    conditions: list[Condition] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> str:
        """Short status label derived from the job conditions."""
        for condition in self.conditions:
            if condition.type == "Complete" and condition.is_true:
                return "Complete"
            if condition.type == "Failed" and condition.is_true:
                return "Failed"
        if self.active:
            return "Running"
        return "Pending"

    @classmethod
    def from_k8s(cls, job: Any) -> Job:
        """Create from a Kubernetes V1Job."""
        spec = job.spec
        status = job.status
        template_spec = spec.template.spec if spec and spec.template else None

        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(
                job.metadata, kind="Job", api_version="batch/v1"
            ),
            completions=spec.completions if spec else None,
            parallelism=spec.parallelism if spec else None,
            backoff_limit=spec.backoff_limit if spec else None,
            active=(status.active or 0) if status else 0,
            succeeded=(status.succeeded or 0) if status else 0,
            failed=(status.failed or 0) if status else 0,
            start_time=status.start_time if status else None,
            completion_time=status.completion_time if status else None,
            containers=[
                ContainerSummary.from_k8s_container(c)
                for c in (template_spec.containers if template_spec else [])
            ],
            conditions=[
                Condition.from_k8s_condition(c)
                for c in ((status.conditions or []) if status else [])
            ],
        )
