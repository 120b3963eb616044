"""Pluggy hook specifications for kai-mcp plugins.

Every resource domain is a plugin implementing these hooks; external
packages can add more through the ``kai_mcp.plugins`` entry point group.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from kai_mcp.plugin import PluginMetadata
    from kai_mcp.server import KaiServer

PROJECT_NAME = "kai_mcp"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class KaiMCPHookSpec:
    """Hooks a kai-mcp plugin may implement."""

    @hookspec
    def kai_get_plugin_metadata(self) -> PluginMetadata:  # type: ignore[empty-body]
        """Return the plugin's metadata."""

    @hookspec
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        """Register MCP tools with the server."""

    @hookspec
    def kai_health_check(self, server: KaiServer) -> tuple[bool, str]:  # type: ignore[empty-body]
        """Report whether the plugin can serve requests, with a reason."""
