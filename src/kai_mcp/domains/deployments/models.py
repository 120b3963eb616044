"""Pydantic models for Deployments."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from kai_mcp.models.common import Condition, ContainerSummary, ResourceMetadata


class Deployment(BaseModel):
    """Deployment representation."""

    metadata: ResourceMetadata
    replicas: int = Field(0, description="Desired replicas")
    ready_replicas: int = Field(0, description="Replicas passing readiness checks")
    updated_replicas: int = Field(0, description="Replicas running the latest template")
    available_replicas: int = Field(0, description="Replicas available to serve")
    paused: bool = False
    selector: dict[str, str] = Field(default_factory=dict)
    containers: list[ContainerSummary] = Field(default_factory=list)
    conditions: list[Condition] = Field(default_factory=list)

    @property
    def rollout_complete(self) -> bool:
        return (
            self.updated_replicas == self.replicas
            and self.available_replicas == self.replicas
            and self.ready_replicas == self.replicas
        )

    @classmethod
    def from_k8s(cls, deployment: Any) -> Deployment:
        """Create from a Kubernetes V1Deployment."""
        spec = deployment.spec
        status = deployment.status
        template_spec = spec.template.spec if spec and spec.template else None
        selector = spec.selector.match_labels if spec and spec.selector else None

        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(
                deployment.metadata, kind="Deployment", api_version="apps/v1"
            ),
            replicas=(spec.replicas if spec and spec.replicas is not None else 1),
            ready_replicas=(status.ready_replicas or 0) if status else 0,
            updated_replicas=(status.updated_replicas or 0) if status else 0,
            available_replicas=(status.available_replicas or 0) if status else 0,
            paused=bool(spec.paused) if spec else False,
            selector=dict(selector or {}),
            containers=[
                ContainerSummary.from_k8s_container(c)
                for c in (template_spec.containers if template_spec else [])
            ],
            conditions=[
                Condition.from_k8s_condition(c)
                for c in ((status.conditions or []) if status else [])
            ],
        )
