"""Container and pod template construction shared by workload kinds."""

from __future__ import annotations

from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import check_choice
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.coercion import (
    AttrType,
    classify,
    to_env_pairs,
    to_port_number,
    to_reference_list,
    to_string,
    to_string_list,
    to_string_map,
)
from kai_mcp.utils.errors import ValidationError

IMAGE_PULL_POLICIES = ("Always", "IfNotPresent", "Never")
PORT_PROTOCOLS = ("TCP", "UDP", "SCTP")


def parse_container_ports(value: Any, field: str = "container_port") -> list[Any] | None:
    """Parse container ports given as ``8080``, ``"8080"`` or ``"8080/UDP"``.

    A list of such values yields one port per entry.
    """
    if value is None:
        return None
    entries = value if classify(value) is AttrType.LIST else [value]
    ports = []
    for index, entry in enumerate(entries):
        entry_field = field if len(entries) == 1 else f"{field}[{index}]"
        protocol = "TCP"
        if isinstance(entry, str) and "/" in entry:
            number, _, protocol = entry.partition("/")
            entry = number
            protocol = check_choice(protocol.upper(), PORT_PROTOCOLS, f"{entry_field}.protocol")
        ports.append(
            k8s_client.V1ContainerPort(
                container_port=to_port_number(entry, entry_field),
                protocol=protocol,
            )
        )
    return ports


def build_env(bag: Any) -> list[Any] | None:
    """Build container env vars from an attribute bag."""
    pairs = to_env_pairs(bag)
    if pairs is None:
        return None
    return [k8s_client.V1EnvVar(name=key, value=value) for key, value in pairs]


def merge_env(existing: list[Any] | None, bag: Any) -> list[Any] | None:
    """Merge env vars by name, keeping variables not mentioned in ``bag``."""
    changes = build_env(bag)
    if changes is None:
        return existing
    merged = {var.name: var for var in existing or []}
    for var in changes:
        merged[var.name] = var
    return list(merged.values())


def pull_secrets(value: Any) -> list[Any] | None:
    names = to_reference_list(value)
    if not names:
        return None
    return [k8s_client.V1LocalObjectReference(name=name) for name in names]


def validate_container(spec: ResourceSpec) -> None:
    """Check the container fields shared by all workload kinds."""
    image = spec.get("image")
    if image is not None and not isinstance(image, str):
        raise ValidationError(f"Invalid image {image!r}", field="image", value=image)
    if spec.has("image_pull_policy"):
        check_choice(spec.get("image_pull_policy"), IMAGE_PULL_POLICIES, "image_pull_policy")
    parse_container_ports(spec.get("container_port"))


def build_container(spec: ResourceSpec, default_port: str | None = None) -> Any:
    """Build the single container of a workload."""
    return k8s_client.V1Container(
        name=to_string(spec.get("container_name")) or spec.name,
        image=spec.get("image"),
        command=to_string_list(spec.get("command")),
        args=to_string_list(spec.get("args")),
        env=build_env(spec.get("env")),
        ports=parse_container_ports(spec.get("container_port", default_port)),
        image_pull_policy=spec.get("image_pull_policy"),
    )


def build_pod_spec(
    spec: ResourceSpec,
    restart_policy: str | None = None,
    default_port: str | None = None,
) -> Any:
    """Build a pod spec around the workload's container."""
    return k8s_client.V1PodSpec(
        containers=[build_container(spec, default_port)],
        restart_policy=restart_policy,
        image_pull_secrets=pull_secrets(spec.get("image_pull_secrets")),
        service_account_name=to_string(spec.get("service_account")),
        node_selector=to_string_map(spec.get("node_selector")),
    )


def template_labels(spec: ResourceSpec) -> dict[str, str]:
    """Pod template labels: the given labels, or ``app=<name>``."""
    return to_string_map(spec.get("labels")) or {"app": spec.name}


def first_container(pod_spec: Any) -> Any:
    return pod_spec.containers[0]
