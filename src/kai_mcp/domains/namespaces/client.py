"""Namespace operations."""

from __future__ import annotations

from typing import Any

from kubernetes import client as k8s_client  # type: ignore[import-untyped]

from kai_mcp.domains.base import ResourceController
from kai_mcp.domains.namespaces.models import Namespace
from kai_mcp.models.common import ResourceSpec


class NamespaceController(ResourceController):
    """Namespaces are cluster-scoped; every namespace argument is ignored."""

    kind = "Namespace"
    plural = "namespaces"
    resource = "namespace"
    namespaced = False
    supports_selector_delete = True
    view = Namespace

    def build(self, spec: ResourceSpec) -> Any:
        return k8s_client.V1Namespace(
            api_version="v1",
            kind="Namespace",
            metadata=self.build_metadata(spec),
        )
