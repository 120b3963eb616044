"""Secret operations."""

from __future__ import annotations

from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import ResourceController, merge_string_map
from kai_mcp.domains.secrets.models import Secret
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.coercion import to_base64_map, to_string, to_string_map

DEFAULT_SECRET_TYPE = "Opaque"


class SecretController(ResourceController):
    """Secrets hold confidential data such as passwords and tokens."""

    kind = "Secret"
    plural = "secrets"
    resource = "secret"
    view = Secret

    def validate(self, spec: ResourceSpec) -> None:
        if spec.has("type") and not to_string(spec.get("type")):
            raise self.invalid("Secret type must be a non-empty string", spec, "type")

    def build(self, spec: ResourceSpec) -> Any:
        return k8s_client.V1Secret(
            api_version="v1",
            kind="Secret",
            metadata=self.build_metadata(spec),
            type=to_string(spec.get("type", DEFAULT_SECRET_TYPE)),
            data=to_base64_map(spec.get("data")),
            string_data=to_string_map(spec.get("string_data")),
        )

    def created_message(self, obj: Any, namespace: str | None) -> str:
        return (
            f"Secret '{obj.metadata.name}' created successfully in namespace "
            f"'{namespace}' (Type: {obj.type or DEFAULT_SECRET_TYPE})"
        )

    def validate_update(self, spec: ResourceSpec) -> None:
        self.validate(spec)

    def update_spec(self, existing: Any, spec: ResourceSpec) -> None:
        existing.data = merge_string_map(existing.data, to_base64_map(spec.get("data")))
        if spec.has("string_data"):
            existing.string_data = to_string_map(spec.get("string_data"))
        if spec.has("type"):
            existing.type = to_string(spec.get("type"))
