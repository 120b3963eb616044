"""Pydantic models for Pods."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from kai_mcp.models.common import Condition, ContainerSummary, ResourceMetadata


class PodPhase(str, Enum):
    """Pod lifecycle phases."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"


class ContainerState(BaseModel):
    """Runtime state of one container."""

    name: str
    ready: bool = False
    restart_count: int = 0
    state: str = Field("unknown", description="running, waiting or terminated")
    reason: str | None = None

    @classmethod
    def from_k8s_status(cls, status: Any) -> ContainerState:
        state = "unknown"
        reason = None
        current = status.state
        if current is not None:
            if current.running is not None:
                state = "running"
            elif current.waiting is not None:
                state = "waiting"
                reason = current.waiting.reason
            elif current.terminated is not None:
                state = "terminated"
                reason = current.terminated.reason
        return cls(
            name=status.name,
            ready=bool(status.ready),
            restart_count=status.restart_count or 0,
            state=state,
            reason=reason,
        )


class Pod(BaseModel):
    """Pod representation."""

    metadata: ResourceMetadata
    phase: PodPhase = PodPhase.UNKNOWN
    node_name: str | None = None
    pod_ip: str | None = None
    restart_policy: str | None = None
    service_account: str | None = None
    containers: list[ContainerSummary] = Field(default_factory=list)
    container_states: list[ContainerState] = Field(default_factory=list)
    conditions: list[Condition] = Field(default_factory=list)

    @property
    def container_names(self) -> list[str]:
        return [c.name for c in self.containers]

    @classmethod
    def from_k8s(cls, pod: Any) -> Pod:
        """Create from a Kubernetes V1Pod."""
        spec = pod.spec
        status = pod.status

        phase = PodPhase.UNKNOWN
        if status is not None and status.phase in PodPhase._value2member_map_:
            phase = PodPhase(status.phase)

        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(pod.metadata, kind="Pod", api_version="v1"),
            phase=phase,
            node_name=spec.node_name if spec else None,
            pod_ip=status.pod_ip if status else None,
            restart_policy=spec.restart_policy if spec else None,
            service_account=spec.service_account_name if spec else None,
            containers=[ContainerSummary.from_k8s_container(c) for c in (spec.containers or [])]
            if spec
            else [],
            container_states=[
                ContainerState.from_k8s_status(s)
                for s in ((status.container_statuses or []) if status else [])
            ],
            conditions=[
                Condition.from_k8s_condition(c)
                for c in ((status.conditions or []) if status else [])
            ],
        )


class PodLogs(BaseModel):
    """Log output of one container."""

    pod: str
    namespace: str
    container: str
    logs: str
    previous: bool = False
    tail_lines: int | None = None
    since_seconds: int | None = None
    truncated: bool = Field(False, description="Output was cut at the size limit")
