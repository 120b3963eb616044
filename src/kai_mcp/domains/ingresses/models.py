"""Pydantic models for Ingresses."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from kai_mcp.models.common import ResourceMetadata


class PathType(str, Enum):
    """How an ingress path is matched."""

    EXACT = "Exact"
    PREFIX = "Prefix"
    IMPLEMENTATION_SPECIFIC = "ImplementationSpecific"


class IngressPath(BaseModel):
    """One path routed to a backend service."""

    path: str = "/"
    path_type: str = PathType.PREFIX.value
    service_name: str | None = None
    service_port: str | None = Field(None, description="Port number or name")

    @property
    def summary(self) -> str:
        target = f"{self.service_name}:{self.service_port}" if self.service_name else "(none)"
        return f"{self.path} ({self.path_type}) → {target}"

    @classmethod
    def from_k8s(cls, path: Any) -> IngressPath:
        service_name, service_port = backend_target(path.backend)
        return cls(
            path=path.path or "/",
            path_type=path.path_type or PathType.PREFIX.value,
            service_name=service_name,
            service_port=service_port,
        )


class IngressRule(BaseModel):
    host: str | None = None
    paths: list[IngressPath] = Field(default_factory=list)


class IngressTLS(BaseModel):
    hosts: list[str] = Field(default_factory=list)
    secret_name: str | None = None


class Ingress(BaseModel):
    """Ingress representation."""

    metadata: ResourceMetadata
    ingress_class_name: str | None = None
    rules: list[IngressRule] = Field(default_factory=list)
    tls: list[IngressTLS] = Field(default_factory=list)
    default_backend: str | None = Field(None, description="service:port of the default backend")
    load_balancer: list[str] = Field(default_factory=list, description="Assigned IPs or hostnames")

    @classmethod
    def from_k8s(cls, ingress: Any) -> Ingress:
        """Create from a Kubernetes V1Ingress."""
        spec = ingress.spec
        status = ingress.status

        default_backend = None
        if spec and spec.default_backend:
            name, port = backend_target(spec.default_backend)
            default_backend = f"{name}:{port}" if name else None

        rules = []
        for rule in (spec.rules or []) if spec else []:
            paths = rule.http.paths if rule.http else []
            rules.append(
                IngressRule(host=rule.host, paths=[IngressPath.from_k8s(p) for p in paths or []])
            )

        load_balancer: list[str] = []
        if status and status.load_balancer and status.load_balancer.ingress:
            for entry in status.load_balancer.ingress:
                if entry.ip or entry.hostname:
                    load_balancer.append(entry.ip or entry.hostname)

        return cls(
            metadata=ResourceMetadata.from_k8s_metadata(
                ingress.metadata, kind="Ingress", api_version="networking.k8s.io/v1"
            ),
            ingress_class_name=spec.ingress_class_name if spec else None,
            rules=rules,
            tls=[
                IngressTLS(hosts=list(t.hosts or []), secret_name=t.secret_name)
                for t in ((spec.tls or []) if spec else [])
            ],
            default_backend=default_backend,
            load_balancer=load_balancer,
        )


def backend_target(backend: Any) -> tuple[str | None, str | None]:
    """Return the service name and port of an ingress backend."""
    if backend is None or backend.service is None:
        return None, None
    service = backend.service
    port = None
    if service.port is not None:
        port = str(service.port.number) if service.port.number else service.port.name
    return service.name, port
