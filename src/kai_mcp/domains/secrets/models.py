"""Pydantic models for Secrets."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from kai_mcp.models.common import ResourceMetadata


class Secret(BaseModel):
    """Secret representation. Values are never included, only key names."""

    metadata: ResourceMetadata
    type: str = "Opaque"
    keys: list[str] = Field(default_factory=list)

    @classmethod
    def from_k8s(cls, secret: Any) -> Secret:
        """Create from a Kubernetes V1Secret."""
        keys = set(secret.data or {}) | set(secret.string_data or {})
        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(
                secret.metadata, kind="Secret", api_version="v1"
            ),
            type=secret.type or "Opaque",
            keys=sorted(keys),
        )
