"""FastMCP server definition for kai-mcp with pluggy-based plugin discovery."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.clients.kubeconfig import KubeconfigLoader
from kai_mcp.clients.registry import ClusterRegistry
from kai_mcp.config import IN_CLUSTER_TOKEN_PATH, AuthMode, KaiConfig, get_config
from kai_mcp.plugin_manager import PluginManager
from kai_mcp.utils.errors import KaiError

logger = logging.getLogger(__name__)


class KaiServer:
    """kai-mcp server owning the cluster registry and the plugins."""

    def __init__(
        self,
        config: KaiConfig | None = None,
        registry: ClusterRegistry | None = None,
    ) -> None:
        self._config = config or get_config()
        self._registry = registry or ClusterRegistry()
        self._mcp: FastMCP | None = None
        self._plugin_manager: PluginManager | None = None

    @property
    def config(self) -> KaiConfig:
        """Get server configuration."""
        return self._config

    @property
    def registry(self) -> ClusterRegistry:
        """Registry of cluster contexts shared by every tool."""
        return self._registry

    @property
    def mcp(self) -> FastMCP:
        """Get the MCP server instance.

        Raises:
            RuntimeError: If server is not initialized.
        """
        if self._mcp is None:
            raise RuntimeError("Server not initialized.")
        return self._mcp

    @property
    def plugin_manager(self) -> PluginManager:
        """Get the plugin manager.

        Raises:
            RuntimeError: If server is not initialized.
        """
        if self._plugin_manager is None:
            raise RuntimeError("Server not initialized.")
        return self._plugin_manager

    @property
    def plugins(self) -> dict[str, Any]:
        if self._plugin_manager is None:
            return {}
        return self._plugin_manager.registered_plugins

    @property
    def healthy_plugins(self) -> dict[str, Any]:
        if self._plugin_manager is None:
            return {}
        return self._plugin_manager.healthy_plugins

    def load_contexts(self) -> list[str]:
        """Register cluster contexts according to the configured auth mode.

        In auto mode a missing or broken kubeconfig is logged and the server
        starts without contexts; the explicit modes raise instead.

        Returns:
            Names of the registered contexts.
        """
        loader = KubeconfigLoader(self._registry, self._config.default_namespace)
        mode = self._config.auth_mode
        kubeconfig = self._config.effective_kubeconfig_path

        if mode == AuthMode.IN_CLUSTER:
            return [loader.load_in_cluster()]
        if mode == AuthMode.KUBECONFIG:
            return loader.load_kubeconfig(kubeconfig, context=self._config.kubeconfig_context)

        try:
            if kubeconfig.exists():
                return loader.load_kubeconfig(kubeconfig, context=self._config.kubeconfig_context)
            if IN_CLUSTER_TOKEN_PATH.exists():
                return [loader.load_in_cluster()]
        except KaiError as e:
            logger.warning(f"Could not load cluster contexts: {e}")
            return []

        logger.warning("No kubeconfig or in-cluster credentials found; no context loaded")
        return []

    def startup(self) -> None:
        """Load contexts, connect the current one and check plugin health.

        Safe to call more than once: a registry that already has a connected
        current context is left alone.
        """
        current = self._current_client()
        if current is None or not current.is_connected:
            if len(self._registry) == 0:
                self.load_contexts()
            current = self._current_client()
            if current is not None:
                try:
                    current.connect(timeout=self._config.read_timeout)
                except KaiError as e:
                    logger.warning(f"Current context is not reachable: {e}")

        if self._plugin_manager is not None:
            self._plugin_manager.run_health_checks(self)
            logger.info(
                f"kai-mcp started with {len(self._plugin_manager.healthy_plugins)}/"
                f"{len(self._plugin_manager.registered_plugins)} plugins active"
            )

    def shutdown(self) -> None:
        """Close the connection pools of every context."""
        for client in self._registry.clients():
            client.disconnect()

    def _current_client(self) -> Any:
        if self._registry.current_context_name() is None:
            return None
        return self._registry.get_current_client()

    def _create_lifespan(self) -> Callable[[Any], AbstractAsyncContextManager[None]]:
        """Create the lifespan context manager for the MCP server."""
        server_self = self

        @asynccontextmanager
        async def lifespan(_app: Any) -> AsyncIterator[None]:
            logger.info("Starting kai-mcp server...")
            server_self.startup()
            try:
                yield
            finally:
                logger.info("Shutting down kai-mcp server...")
                server_self.shutdown()
                logger.info("kai-mcp server shut down")

        return lifespan

    def create_mcp(self) -> FastMCP:
        """Create and configure the FastMCP server."""
        self._plugin_manager = PluginManager()
        self._plugin_manager.load_core_plugins()
        self._plugin_manager.load_entrypoint_plugins()

        mcp = FastMCP(
            name="kai-mcp",
            instructions="MCP server for Kubernetes - lets AI agents create, inspect, "
            "update and delete namespaces, pods, deployments, services, ingresses, "
            "config maps, secrets, jobs and cron jobs across cluster contexts.",
            lifespan=self._create_lifespan(),
            host=self._config.host,
            port=self._config.port,
        )
        self._mcp = mcp

        self._plugin_manager.register_tools(mcp, self)
        self._register_core_resources(mcp)

        return mcp

    def _register_core_resources(self, mcp: FastMCP) -> None:
        """Register core MCP resources for cluster information."""

        @mcp.resource("kai://cluster/contexts")
        def cluster_contexts() -> dict:
            """Loaded cluster contexts and the active one."""
            contexts = self._registry.list_contexts()
            return {
                "current_context": self._registry.current_context_name(),
                "current_namespace": self._registry.get_current_namespace(),
                "total": len(contexts),
                "contexts": contexts,
            }

        @mcp.resource("kai://cluster/plugins")
        def cluster_plugins() -> dict:
            """Loaded plugins and their health."""
            plugin_info = {}
            for name, plugin in self.plugins.items():
                meta = plugin.kai_get_plugin_metadata()
                plugin_info[name] = {
                    "version": meta.version,
                    "description": meta.description,
                    "maintainer": meta.maintainer,
                    "kinds": meta.kinds,
                    "healthy": name in self.healthy_plugins,
                }
            return {
                "total_plugins": len(self.plugins),
                "active_plugins": len(self.healthy_plugins),
                "plugins": plugin_info,
            }

        logger.info("Registered core MCP resources")


def create_server(config: KaiConfig | None = None) -> FastMCP:
    """Create and return the MCP server instance."""
    return KaiServer(config).create_mcp()
