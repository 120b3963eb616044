"""Services domain - exposing pods on the network."""

from kai_mcp.domains.services.client import ServiceController
from kai_mcp.domains.services.models import PortProtocol, Service, ServicePort, ServiceType

__all__ = ["PortProtocol", "Service", "ServiceController", "ServicePort", "ServiceType"]
