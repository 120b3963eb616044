"""ConfigMap operations."""

from __future__ import annotations

from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import ResourceController, merge_string_map
from kai_mcp.domains.configmaps.models import ConfigMap
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.coercion import to_base64_map, to_string_map


class ConfigMapController(ResourceController):
    """ConfigMaps hold non-confidential key/value configuration."""

    kind = "ConfigMap"
    plural = "configmaps"
    resource = "config_map"
    view = ConfigMap

    def build(self, spec: ResourceSpec) -> Any:
        return k8s_client.V1ConfigMap(
            api_version="v1",
            kind="ConfigMap",
            metadata=self.build_metadata(spec),
            data=to_string_map(spec.get("data")),
            binary_data=to_base64_map(spec.get("binary_data")),
        )

    def created_message(self, obj: Any, namespace: str | None) -> str:
        count = len(obj.data or {}) + len(obj.binary_data or {})
        return (
            f"ConfigMap '{obj.metadata.name}' created successfully in namespace "
            f"'{namespace}' with {count} key(s)"
        )

    def update_spec(self, existing: Any, spec: ResourceSpec) -> None:
        existing.data = merge_string_map(existing.data, spec.get("data"))
        existing.binary_data = merge_string_map(
            existing.binary_data, to_base64_map(spec.get("binary_data"))
        )
