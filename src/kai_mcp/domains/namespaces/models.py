"""Pydantic models for Namespaces."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from kai_mcp.models.common import ResourceMetadata


class Namespace(BaseModel):
    """Namespace representation."""

    metadata: ResourceMetadata
    phase: str = "Active"

    @classmethod
    def from_k8s(cls, namespace: Any) -> Namespace:
        """Create from a Kubernetes V1Namespace."""
        status = namespace.status
        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(
                namespace.metadata, kind="Namespace", api_version="v1"
            ),
            phase=(status.phase if status and status.phase else "Active"),
        )
