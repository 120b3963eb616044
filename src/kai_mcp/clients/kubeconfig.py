"""Load cluster contexts into a ClusterRegistry."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from kubernetes import config as k8s_config  # type: ignore[import-untyped]
from kubernetes.config.config_exception import ConfigException  # type: ignore[import-untyped]

from kai_mcp.clients.base import K8sClient
from kai_mcp.utils.errors import NotConfiguredError, ValidationError

if TYPE_CHECKING:
    from kai_mcp.clients.registry import ClusterRegistry

logger = logging.getLogger(__name__)

SERVICE_ACCOUNT_NAMESPACE_PATH = Path("/var/run/secrets/kubernetes.io/serviceaccount/namespace")
IN_CLUSTER_CONTEXT = "in-cluster"


class KubeconfigLoader:
    """Registers kubeconfig or in-cluster contexts with a registry."""

    def __init__(self, registry: ClusterRegistry, default_namespace: str = "default") -> None:
        self._registry = registry
        self._default_namespace = default_namespace

    def load_kubeconfig(
        self,
        path: str | Path,
        context: str | None = None,
        prefix: str | None = None,
        activate: bool = True,
    ) -> list[str]:
        """Register every context of a kubeconfig file.

        Args:
            path: Kubeconfig file path.
            context: Context to make current (defaults to the file's current context).
            prefix: Optional prefix for registered names, giving "<prefix>-<context>".
            activate: Whether to switch to the selected context.

        Returns:
            Names of the registered contexts.

        Raises:
            ValidationError: If the file is missing or has no contexts.
            NotConfiguredError: If the requested context is not in the file.
        """
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise ValidationError(f"Kubeconfig not found at {config_path}", field="path")

        try:
            contexts, active = k8s_config.list_kube_config_contexts(config_file=str(config_path))
        except ConfigException as e:
            raise ValidationError(f"Invalid kubeconfig {config_path}: {e}", field="path") from e
        if not contexts:
            raise ValidationError(f"Kubeconfig {config_path} defines no contexts", field="path")

        registered: dict[str, str] = {}
        for entry in contexts:
            ctx_name = entry["name"]
            details: dict[str, Any] = entry.get("context") or {}
            name = f"{prefix}-{ctx_name}" if prefix else ctx_name
            try:
                client = K8sClient.from_kubeconfig(str(config_path), ctx_name)
            except ConfigException as e:
                logger.warning(f"Skipping context '{ctx_name}' in {config_path}: {e}")
                continue
            self._registry.register(
                name,
                client,
                namespace=details.get("namespace") or self._default_namespace,
                cluster=details.get("cluster"),
                user=details.get("user"),
                server_url=client.host,
                config_path=str(config_path),
            )
            registered[ctx_name] = name

        if not registered:
            raise ValidationError(
                f"No usable contexts in kubeconfig {config_path}", field="path"
            )

        target = context or (active or {}).get("name")
        if activate and target:
            if target not in registered:
                raise NotConfiguredError(
                    f"Context '{target}' not found in kubeconfig {config_path}", name=target
                )
            self._registry.set_current(registered[target])

        logger.info(f"Loaded {len(registered)} contexts from {config_path}")
        return list(registered.values())

    def load_in_cluster(self, activate: bool = True) -> str:
        """Register the pod's own cluster as the "in-cluster" context."""
        try:
            client = K8sClient.in_cluster()
        except ConfigException as e:
            raise NotConfiguredError(f"Not running inside a cluster: {e}") from e
        namespace = self._default_namespace
        try:
            namespace = SERVICE_ACCOUNT_NAMESPACE_PATH.read_text().strip() or namespace
        except OSError as e:
            logger.debug(f"Service account namespace unavailable, using '{namespace}': {e}")

        self._registry.register(
            IN_CLUSTER_CONTEXT,
            client,
            namespace=namespace,
            cluster=IN_CLUSTER_CONTEXT,
            server_url=client.host,
        )
        if activate:
            self._registry.set_current(IN_CLUSTER_CONTEXT)
        logger.info(f"Loaded in-cluster context (namespace '{namespace}')")
        return IN_CLUSTER_CONTEXT
