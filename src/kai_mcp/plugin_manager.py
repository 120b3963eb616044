"""Loading, tool registration and health of kai-mcp plugins.

Built-in resource domains are registered first, then anything published
under the ``kai_mcp.plugins`` entry point group. Plugins are keyed by the
name in their metadata; entry point plugins by their entry point name.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pluggy

from kai_mcp.hooks import PROJECT_NAME, KaiMCPHookSpec

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from kai_mcp.server import KaiServer

logger = logging.getLogger(__name__)

PLUGIN_ENTRY_POINT_GROUP = "kai_mcp.plugins"

HealthReport = dict[str, tuple[bool, str]]


def plugin_name(plugin: Any) -> str:
    """Name a plugin after its metadata, or its class when it has none."""
    if hasattr(plugin, "kai_get_plugin_metadata"):
        return plugin.kai_get_plugin_metadata().name
    return type(plugin).__name__


def check_plugin(plugin: Any, server: KaiServer) -> tuple[bool, str]:
    """Run one plugin's health check, turning a raised error into a failure."""
    if not hasattr(plugin, "kai_health_check"):
        return True, "No health check defined"
    try:
        return plugin.kai_health_check(server=server)
    except Exception as e:
        return False, f"Health check error: {e}"


class PluginManager:
    """The plugins serving one kai-mcp server."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(KaiMCPHookSpec)
        self._plugins: dict[str, Any] = {}
        self._healthy: dict[str, Any] = {}

    @property
    def registered_plugins(self) -> dict[str, Any]:
        return self._plugins

    @property
    def healthy_plugins(self) -> dict[str, Any]:
        """Plugins that passed the last health check."""
        return self._healthy

    def register_plugin(self, plugin: Any) -> str:
        name = plugin_name(plugin)
        self._pm.register(plugin, name=name)
        self._plugins[name] = plugin
        logger.debug(f"Registered plugin {name}")
        return name

    def load_core_plugins(self) -> int:
        """Register one plugin per built-in resource domain."""
        from kai_mcp.domains.registry import get_core_plugins

        plugins = get_core_plugins()
        for plugin in plugins:
            self.register_plugin(plugin)
        logger.info(f"Loaded {len(plugins)} core domain plugins")
        return len(plugins)

    def load_entrypoint_plugins(self) -> int:
        """Register plugins installed by other packages."""
        count = self._pm.load_setuptools_entrypoints(PLUGIN_ENTRY_POINT_GROUP)
        for name, plugin in self._pm.list_name_plugin():
            if name not in self._plugins:
                self._plugins[name] = plugin
                logger.info(f"Loaded plugin {name} from {PLUGIN_ENTRY_POINT_GROUP} entry points")
        return count

    def register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        self._pm.hook.kai_register_tools(mcp=mcp, server=server)
        logger.info(f"Registered tools from {len(self._plugins)} plugins")

    def run_health_checks(self, server: KaiServer) -> HealthReport:
        """Check every plugin; one failing check never stops the rest."""
        report: HealthReport = {}
        self._healthy = {}
        for name, plugin in self._plugins.items():
            healthy, message = check_plugin(plugin, server)
            report[name] = (healthy, message)
            if healthy:
                self._healthy[name] = plugin
                logger.info(f"Plugin {name} is healthy: {message}")
            else:
                logger.warning(f"Plugin {name} is unavailable: {message}")
        return report
