"""Pydantic models for ConfigMaps."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from kai_mcp.models.common import ResourceMetadata


class ConfigMap(BaseModel):
    """ConfigMap representation."""

    metadata: ResourceMetadata
    data: dict[str, str] = Field(default_factory=dict)
    binary_data_keys: list[str] = Field(
        default_factory=list, description="Keys of binary entries; values are not shown"
    )

    @classmethod
    def from_k8s(cls, config_map: Any) -> ConfigMap:
        """Create from a Kubernetes V1ConfigMap."""
        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(
                config_map.metadata, kind="ConfigMap", api_version="v1"
            ),
            data=dict(config_map.data or {}),
            binary_data_keys=sorted(config_map.binary_data or {}),
        )
