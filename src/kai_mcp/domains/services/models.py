"""Pydantic models for Services."""

from __future__ import annotations

from enum import Enum
from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]
from pydantic import BaseModel, Field

from kai_mcp.models.common import ResourceMetadata

# Attribute name of spec.externalIPs; kubernetes client releases disagree on it
EXTERNAL_IPS_FIELD = (
    "external_i_ps" if hasattr(k8s_client.V1ServiceSpec, "external_i_ps") else "external_ips"
)


class ServiceType(str, Enum):
    """How a Service is exposed."""

    CLUSTER_IP = "ClusterIP"
    NODE_PORT = "NodePort"
    LOAD_BALANCER = "LoadBalancer"
    EXTERNAL_NAME = "ExternalName"


class PortProtocol(str, Enum):
    """Transport protocols a Service port can carry."""

    TCP = "TCP"
    UDP = "UDP"
    SCTP = "SCTP"


class SessionAffinity(str, Enum):
    NONE = "None"
    CLIENT_IP = "ClientIP"


# Types that open a port on every node
NODE_PORT_TYPES = (ServiceType.NODE_PORT.value, ServiceType.LOAD_BALANCER.value)


class ServicePort(BaseModel):
    """One exposed port."""

    name: str | None = None
    port: int
    target_port: str | None = Field(None, description="Container port number or name")
    node_port: int | None = None
    protocol: str = PortProtocol.TCP.value

    @property
    def summary(self) -> str:
        """Readable mapping, e.g. ``80 → NodePort 30080 [TCP]``."""
        if self.node_port:
            text = f"{self.port} → NodePort {self.node_port}"
        else:
            text = f"{self.port} → {self.target_port or self.port}"
        return f"{text} [{self.protocol}]"

    @classmethod
    def from_k8s(cls, port: Any) -> ServicePort:
        target = port.target_port
        return cls(
            name=port.name,
            port=port.port,
            target_port=str(target) if target is not None else None,
            node_port=port.node_port,
            protocol=port.protocol or PortProtocol.TCP.value,
        )


class Service(BaseModel):
    """Service representation."""

    metadata: ResourceMetadata
    type: str = Field(ServiceType.CLUSTER_IP.value, description="Exposure type")
    cluster_ip: str | None = Field(None, description="Assigned cluster-internal address")
    external_ips: list[str] = Field(default_factory=list)
    external_name: str | None = None
    load_balancer_ingress: list[str] = Field(
        default_factory=list, description="Addresses assigned by the load balancer"
    )
    selector: dict[str, str] = Field(default_factory=dict)
    session_affinity: str | None = None
    ports: list[ServicePort] = Field(default_factory=list)
    port_summary: list[str] = Field(default_factory=list)

    @classmethod
    def from_k8s(cls, svc: Any) -> Service:
        """Create from a Kubernetes V1Service."""
        spec = svc.spec
        status = svc.status
        ports = [ServicePort.from_k8s(p) for p in (spec.ports or [])] if spec else []

        ingress: list[str] = []
        lb = getattr(status, "load_balancer", None) if status else None
        for entry in getattr(lb, "ingress", None) or []:
            address = entry.ip or entry.hostname
            if address:
                ingress.append(address)

        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(
                svc.metadata, kind="Service", api_version="v1"
            ),
            type=(spec.type if spec and spec.type else ServiceType.CLUSTER_IP.value),
            cluster_ip=spec.cluster_ip if spec else None,
            external_ips=list(getattr(spec, EXTERNAL_IPS_FIELD, None) or []) if spec else [],
            external_name=spec.external_name if spec else None,
            load_balancer_ingress=ingress,
            selector=dict(spec.selector or {}) if spec else {},
            session_affinity=spec.session_affinity if spec else None,
            ports=ports,
            port_summary=[p.summary for p in ports],
        )
