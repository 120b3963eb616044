"""Ingresses domain - HTTP(S) routing."""

from kai_mcp.domains.ingresses.client import IngressController
from kai_mcp.domains.ingresses.models import Ingress, PathType

__all__ = ["Ingress", "IngressController", "PathType"]
