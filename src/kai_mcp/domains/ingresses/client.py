"""Ingress operations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import ResourceController, check_choice
from kai_mcp.domains.ingresses.models import Ingress, PathType
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.coercion import (
    AttrType,
    classify,
    lookup,
    to_mapping_list,
    to_port,
    to_string,
    to_string_list,
)
from kai_mcp.utils.errors import ValidationError

PATH_TYPES = tuple(p.value for p in PathType)


def build_backend(entry: Mapping[str, Any], field: str) -> Any:
    """Build an ingress backend from ``service_name`` and ``service_port``."""
    service_name = to_string(lookup(entry, "service_name", "serviceName"))
    if not service_name:
        raise ValidationError(
            f"{field}: service_name is required", field=f"{field}.service_name"
        )
    raw_port = lookup(entry, "service_port", "servicePort")
    if raw_port is None:
        raise ValidationError(
            f"{field}: service_port is required", field=f"{field}.service_port"
        )
    port = to_port(raw_port, f"{field}.service_port")
    if isinstance(port, int):
        backend_port = k8s_client.V1ServiceBackendPort(number=port)
    else:
        backend_port = k8s_client.V1ServiceBackendPort(name=port)
    return k8s_client.V1IngressBackend(
        service=k8s_client.V1IngressServiceBackend(name=service_name, port=backend_port)
    )


def build_rules(raw: Any) -> list[Any]:
    """Build ingress rules from ``[{host, paths: [{path, path_type, ...}]}]``."""
    rules = []
    for index, entry in enumerate(to_mapping_list(raw, "rules")):
        field = f"rules[{index}]"
        paths = []
        raw_paths = lookup(entry, "paths", default=[])
        for path_index, path in enumerate(to_mapping_list(raw_paths, f"{field}.paths")):
            path_field = f"{field}.paths[{path_index}]"
            path_type = check_choice(
                to_string(lookup(path, "path_type", "pathType", default=PathType.PREFIX.value)),
                PATH_TYPES,
                f"{path_field}.path_type",
            )
            paths.append(
                k8s_client.V1HTTPIngressPath(
                    path=to_string(lookup(path, "path", default="/")),
                    path_type=path_type,
                    backend=build_backend(path, path_field),
                )
            )
        if not paths:
            raise ValidationError(f"{field}: at least one path is required", field=f"{field}.paths")
        rules.append(
            k8s_client.V1IngressRule(
                host=to_string(lookup(entry, "host")),
                http=k8s_client.V1HTTPIngressRuleValue(paths=paths),
            )
        )
    return rules


def build_tls(raw: Any) -> list[Any]:
    entries = []
    for entry in to_mapping_list(raw, "tls"):
        entries.append(
            k8s_client.V1IngressTLS(
                hosts=to_string_list(lookup(entry, "hosts")),
                secret_name=to_string(lookup(entry, "secret_name", "secretName")),
            )
        )
    return entries


def build_default_backend(raw: Any) -> Any:
    if classify(raw) is not AttrType.MAP:
        raise ValidationError(
            "default_backend must be an object with service_name and service_port",
            field="default_backend",
            value=raw,
        )
    return build_backend(raw, "default_backend")


class IngressController(ResourceController):
    """Ingresses route external HTTP(S) traffic to services."""

    kind = "Ingress"
    plural = "ingresses"
    api_version = "networking.k8s.io/v1"
    api_group = "networking_v1"
    resource = "ingress"
    view = Ingress

    def validate(self, spec: ResourceSpec) -> None:
        rules = build_rules(spec.get("rules", []))
        if not rules and not spec.has("default_backend"):
            raise self.invalid(
                "At least one rule or a default_backend is required", spec, "rules"
            )
        if spec.has("default_backend"):
            build_default_backend(spec.get("default_backend"))
        if spec.has("tls"):
            build_tls(spec.get("tls"))

    def build(self, spec: ResourceSpec) -> Any:
        default_backend = None
        if spec.has("default_backend"):
            default_backend = build_default_backend(spec.get("default_backend"))
        return k8s_client.V1Ingress(
            api_version="networking.k8s.io/v1",
            kind="Ingress",
            metadata=self.build_metadata(spec),
            spec=k8s_client.V1IngressSpec(
                ingress_class_name=to_string(spec.get("ingress_class_name")),
                rules=build_rules(spec.get("rules", [])) or None,
                tls=build_tls(spec.get("tls")) if spec.has("tls") else None,
                default_backend=default_backend,
            ),
        )

    def created_message(self, obj: Any, namespace: str | None) -> str:
        message = f"Ingress '{obj.metadata.name}' created successfully in namespace '{namespace}'"
        if obj.spec and obj.spec.ingress_class_name:
            message += f" (Class: {obj.spec.ingress_class_name})"
        return message

    def validate_update(self, spec: ResourceSpec) -> None:
        if spec.has("rules"):
            build_rules(spec.get("rules"))
        if spec.has("tls"):
            build_tls(spec.get("tls"))
        if spec.has("default_backend"):
            build_default_backend(spec.get("default_backend"))

    def update_spec(self, existing: Any, spec: ResourceSpec) -> None:
        ingress_spec = existing.spec
        if spec.has("ingress_class_name"):
            ingress_spec.ingress_class_name = to_string(spec.get("ingress_class_name"))
        # Rules and TLS entries are replaced as a whole
        if spec.has("rules"):
            ingress_spec.rules = build_rules(spec.get("rules")) or None
        if spec.has("tls"):
            ingress_spec.tls = build_tls(spec.get("tls")) or None
        if spec.has("default_backend"):
            ingress_spec.default_backend = build_default_backend(spec.get("default_backend"))

    def check_conflicts(self, obj: Any) -> None:
        if not obj.spec.rules and obj.spec.default_backend is None:
            raise ValidationError(
                "An ingress needs at least one rule or a default_backend", field="rules"
            )
