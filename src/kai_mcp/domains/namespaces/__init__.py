"""Namespaces domain - cluster-scoped namespace management."""

from kai_mcp.domains.namespaces.client import NamespaceController
from kai_mcp.domains.namespaces.models import Namespace

__all__ = ["Namespace", "NamespaceController"]
