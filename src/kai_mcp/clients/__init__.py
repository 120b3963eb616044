"""Cluster clients and the context registry."""

from kai_mcp.clients.base import K8sClient
from kai_mcp.clients.kubeconfig import KubeconfigLoader
from kai_mcp.clients.registry import ClusterContext, ClusterRegistry, ReadWriteLock

__all__ = [
    "ClusterContext",
    "ClusterRegistry",
    "K8sClient",
    "KubeconfigLoader",
    "ReadWriteLock",
]
