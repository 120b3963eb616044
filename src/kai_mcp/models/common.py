"""Common models shared across resource kinds."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ResourceSpec(BaseModel):
    """Loosely-typed description of a resource as a caller supplies it.

    ``attributes`` holds the kind-specific fields exactly as decoded from
    the tool call: strings, numbers, booleans, lists and nested maps.
    """

    kind: str = Field(..., description="Resource kind")
    name: str = Field("", description="Resource name")
    namespace: str | None = Field(None, description="Target namespace")
    attributes: dict[str, Any] = Field(default_factory=dict, description="Attribute bag")

    def get(self, key: str, default: Any = None) -> Any:
        """Return an attribute, treating an explicit None as absent."""
        value = self.attributes.get(key)
        return default if value is None else value

    def has(self, key: str) -> bool:
        return self.attributes.get(key) is not None


class OperationResult(BaseModel):
    """Outcome of a successful create, update or delete."""

    kind: str
    name: str
    namespace: str | None = None
    message: str
    details: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the dict returned by MCP tools."""
        result: dict[str, Any] = {
            "kind": self.kind,
            "name": self.name,
            "namespace": self.namespace,
            "message": self.message,
        }
        result.update(self.details)
        return result


class ListResult(BaseModel):
    """Items returned by a list call plus the empty-result explanation."""

    kind: str
    items: list[Any] = Field(default_factory=list)
    namespace: str | None = None
    label_selector: str | None = None
    field_selector: str | None = None
    all_namespaces: bool = False
    message: str | None = Field(None, description="Set when no items were found")

    @property
    def empty(self) -> bool:
        return not self.items


class ResourceMetadata(BaseModel):
    """Common metadata for Kubernetes resources."""

    name: str = Field(..., description="Resource name")
    namespace: str | None = Field(None, description="Resource namespace")
    uid: str | None = Field(None, description="Kubernetes UID")
    kind: str | None = Field(None, description="Resource kind")
    api_version: str | None = Field(None, description="API version")
    creation_timestamp: datetime | None = Field(None, description="When the resource was created")
    labels: dict[str, str] = Field(default_factory=dict, description="Resource labels")
    annotations: dict[str, str] = Field(default_factory=dict, description="Resource annotations")

    def to_source_dict(self) -> dict[str, Any]:
        """Return _source metadata for grounding responses to K8s resources."""
        return {
            "kind": self.kind,
            "api_version": self.api_version,
            "name": self.name,
            "namespace": self.namespace,
            "uid": self.uid,
        }

    @classmethod
    def from_k8s_metadata(
        cls,
        metadata: Any,
        kind: str | None = None,
        api_version: str | None = None,
    ) -> ResourceMetadata:
        """Create from a Kubernetes V1ObjectMeta.

        Args:
            metadata: Kubernetes metadata object.
            kind: Resource kind (e.g., "Service").
            api_version: API version (e.g., "v1").
        """
        return cls(
            name=metadata.name,
            namespace=getattr(metadata, "namespace", None),
            uid=getattr(metadata, "uid", None),
            kind=kind,
            api_version=api_version,
            creation_timestamp=getattr(metadata, "creation_timestamp", None),
            labels=dict(metadata.labels or {}),
            annotations=dict(metadata.annotations or {}),
        )


class Condition(BaseModel):
    """Kubernetes-style condition."""

    type: str = Field(..., description="Condition type")
    status: str = Field(..., description="Condition status (True, False, Unknown)")
    reason: str | None = Field(None, description="Machine-readable reason")
    message: str | None = Field(None, description="Human-readable message")
    last_transition_time: datetime | None = Field(None, description="Last transition time")

    @property
    def is_true(self) -> bool:
        """Check if condition status is True."""
        return self.status == "True"

    @classmethod
    def from_k8s_condition(cls, condition: Any) -> Condition:
        """Create from Kubernetes condition object."""
        return cls(
            type=condition.type,
            status=condition.status,
            reason=getattr(condition, "reason", None),
            message=getattr(condition, "message", None),
            last_transition_time=getattr(condition, "last_transition_time", None),
        )


class ContainerSummary(BaseModel):
    """Container image and ports of a pod template."""

    name: str
    image: str | None = None
    ports: list[str] = Field(default_factory=list, description="Ports as '<port>/<protocol>'")

    @classmethod
    def from_k8s_container(cls, container: Any) -> ContainerSummary:
        ports = [
            f"{port.container_port}/{port.protocol or 'TCP'}" for port in container.ports or []
        ]
        return cls(name=container.name, image=container.image, ports=ports)
