"""Service operations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import ResourceController, check_choice, merge_string_map
from kai_mcp.domains.services.models import (
    EXTERNAL_IPS_FIELD,
    NODE_PORT_TYPES,
    PortProtocol,
    Service,
    ServiceType,
    SessionAffinity,
)
from kai_mcp.models.common import ResourceSpec
from kai_mcp.utils.coercion import (
    lookup,
    to_mapping_list,
    to_port,
    to_port_number,
    to_string,
    to_string_list,
    to_string_map,
)
from kai_mcp.utils.errors import ConflictError

SERVICE_TYPES = tuple(t.value for t in ServiceType)
PROTOCOLS = tuple(p.value for p in PortProtocol)
SESSION_AFFINITIES = tuple(a.value for a in SessionAffinity)


class ServiceController(ResourceController):
    """Services expose pods inside or outside the cluster."""

    kind = "Service"
    plural = "services"
    resource = "service"
    supports_selector_delete = True
    view = Service

    def validate(self, spec: ResourceSpec) -> None:
        service_type = self._service_type(spec)
        ports = self._ports(spec, required=service_type != ServiceType.EXTERNAL_NAME.value)
        if spec.has("session_affinity"):
            check_choice(spec.get("session_affinity"), SESSION_AFFINITIES, "session_affinity")
        if service_type == ServiceType.EXTERNAL_NAME.value and not spec.get("external_name"):
            raise self.invalid(
                "external_name is required for ExternalName services", spec, "external_name"
            )
        self._check_node_ports(service_type, ports)

    def build(self, spec: ResourceSpec) -> Any:
        service_type = self._service_type(spec)
        ports = self._ports(spec, required=False)
        service_spec = k8s_client.V1ServiceSpec(
            type=service_type,
            selector=to_string_map(spec.get("selector")),
            ports=ports or None,
            cluster_ip=to_string(spec.get("cluster_ip")),
            external_name=to_string(spec.get("external_name")),
            session_affinity=spec.get("session_affinity"),
            **{EXTERNAL_IPS_FIELD: to_string_list(spec.get("external_ips"))},
        )
        return k8s_client.V1Service(
            api_version="v1",
            kind="Service",
            metadata=self.build_metadata(spec),
            spec=service_spec,
        )

    def created_message(self, obj: Any, namespace: str | None) -> str:
        view = Service.from_k8s(obj)
        lines = [
            f"Service '{view.metadata.name}' created successfully in namespace "
            f"'{namespace}' (Type: {view.type})"
        ]
        if view.port_summary:
            lines.append("Ports:")
            lines.extend(f"- {summary}" for summary in view.port_summary)
        if view.cluster_ip and view.cluster_ip != "None":
            lines.append(f"ClusterIP: {view.cluster_ip}")
        return "\n".join(lines)

    def validate_update(self, spec: ResourceSpec) -> None:
        if spec.has("type"):
            self._service_type(spec)
        if spec.has("ports"):
            self._ports(spec, required=True)
        if spec.has("session_affinity"):
            check_choice(spec.get("session_affinity"), SESSION_AFFINITIES, "session_affinity")

    def update_spec(self, existing: Any, spec: ResourceSpec) -> None:
        svc_spec = existing.spec
        if spec.has("type"):
            svc_spec.type = self._service_type(spec)
            if svc_spec.type not in NODE_PORT_TYPES and not spec.has("ports"):
                # Node ports assigned by the cluster do not survive a type change
                for port in svc_spec.ports or []:
                    port.node_port = None
        if spec.has("selector"):
            svc_spec.selector = merge_string_map(svc_spec.selector, spec.get("selector"))
        if spec.has("ports"):
            # Replaced as a whole, never merged entry by entry
            svc_spec.ports = self._ports(spec, required=True)
        if spec.has("external_ips"):
            setattr(svc_spec, EXTERNAL_IPS_FIELD, to_string_list(spec.get("external_ips")))
        if spec.has("external_name"):
            svc_spec.external_name = to_string(spec.get("external_name"))
        if spec.has("session_affinity"):
            svc_spec.session_affinity = spec.get("session_affinity")

    def check_conflicts(self, obj: Any) -> None:
        svc_spec = obj.spec
        self._check_node_ports(svc_spec.type or ServiceType.CLUSTER_IP.value, svc_spec.ports or [])

    def _service_type(self, spec: ResourceSpec) -> str:
        return check_choice(
            spec.get("type", ServiceType.CLUSTER_IP.value), SERVICE_TYPES, "type", self.kind
        )

    def _ports(self, spec: ResourceSpec, required: bool) -> list[Any]:
        raw = spec.get("ports")
        if raw is None or raw == []:
            if required:
                raise self.invalid("At least one port is required", spec, "ports")
            return []
        return [
            self._build_port(entry, f"ports[{index}]")
            for index, entry in enumerate(to_mapping_list(raw, "ports"))
        ]

    def _build_port(self, entry: Mapping[str, Any], field: str) -> Any:
        port = to_port_number(lookup(entry, "port"), f"{field}.port")
        target = lookup(entry, "target_port", "targetPort")
        target_port = to_port(target, f"{field}.target_port") if target is not None else port

        node_port = None
        raw_node_port = lookup(entry, "node_port", "nodePort")
        if raw_node_port is not None and raw_node_port != 0:
            node_port = to_port_number(raw_node_port, f"{field}.node_port")

        protocol = to_string(lookup(entry, "protocol", default=PortProtocol.TCP.value))
        protocol = check_choice(
            protocol.upper() if protocol else protocol, PROTOCOLS, f"{field}.protocol", self.kind
        )
        return k8s_client.V1ServicePort(
            name=to_string(lookup(entry, "name")),
            port=port,
            target_port=target_port,
            node_port=node_port,
            protocol=protocol,
        )

    def _check_node_ports(self, service_type: str, ports: list[Any]) -> None:
        for port in ports:
            if port.node_port and service_type not in NODE_PORT_TYPES:
                raise ConflictError(
                    f"nodePort {port.node_port} on port {port.port} is only allowed for "
                    f"NodePort or LoadBalancer services, not {service_type}",
                    kind=self.kind,
                )

