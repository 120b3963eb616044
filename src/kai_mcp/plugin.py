"""Plugin base class and metadata for kai-mcp components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from kai_mcp.hooks import hookimpl

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from kai_mcp.server import KaiServer


@dataclass
class PluginMetadata:
    """Metadata describing a kai-mcp plugin."""

    name: str
    """Unique plugin name, e.g., 'pods', 'services'."""

    version: str
    """Plugin version following semver, e.g., '1.0.0'."""

    description: str
    """Human-readable description of what this plugin provides."""

    maintainer: str
    """Maintainer email or team."""

    kinds: list[str] = field(default_factory=list)
    """Resource kinds the plugin operates on."""


class BasePlugin:
    """Default hook implementations shared by all kai-mcp plugins.

    Example entry point in pyproject.toml for external plugins:
        [project.entry-points."kai_mcp.plugins"]
        my_plugin = "my_package.plugin:MyPlugin"
    """

    def __init__(self, metadata: PluginMetadata) -> None:
        self._metadata = metadata

    @property
    def metadata(self) -> PluginMetadata:
        return self._metadata

    @hookimpl
    def kai_get_plugin_metadata(self) -> PluginMetadata:
        """Return plugin metadata."""
        return self._metadata

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        """Register MCP tools. Override in subclass."""

    @hookimpl
    def kai_health_check(self, server: KaiServer) -> tuple[bool, str]:
        """A plugin is healthy when a cluster context is selected."""
        if server.registry.current_context_name() is None:
            return False, "No cluster context selected"
        return True, "Cluster context available"
