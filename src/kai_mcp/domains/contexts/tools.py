"""MCP Tools for cluster contexts and the working namespace.

These tools only change which cluster and namespace later calls target;
nothing is written to the cluster or to kubeconfig files.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp.server.fastmcp import FastMCP

from kai_mcp.clients.kubeconfig import KubeconfigLoader
from kai_mcp.domains.tooling import run_operation
from kai_mcp.utils.errors import KaiError, ValidationError

if TYPE_CHECKING:
    from kai_mcp.server import KaiServer

logger = logging.getLogger(__name__)


def register_tools(mcp: FastMCP, server: KaiServer) -> None:
    """Register context management tools with the MCP server."""

    @mcp.tool()
    def list_contexts() -> dict[str, Any]:
        """List the loaded cluster contexts and mark the active one."""

        def call() -> dict[str, Any]:
            contexts = server.registry.list_contexts()
            result: dict[str, Any] = {
                "contexts": contexts,
                "total": len(contexts),
                "current_context": server.registry.current_context_name(),
            }
            if not contexts:
                result["message"] = "No contexts available"
            return result

        return run_operation(server, "read", call)

    @mcp.tool()
    def get_current_context() -> dict[str, Any]:
        """Show the active context, its cluster, user, namespace and server."""
        return run_operation(
            server, "read", lambda: server.registry.get_current().describe(active=True)
        )

    @mcp.tool()
    def describe_context(name: str) -> dict[str, Any]:
        """Show one context's details and whether its cluster was reached.

        Args:
            name: Context name.
        """

        def call() -> dict[str, Any]:
            context = server.registry.get(name)
            info = context.describe(active=name == server.registry.current_context_name())
            info["status"] = "connected" if context.client.is_connected else "not connected"
            info["server_version"] = context.client.server_version
            return info

        return run_operation(server, "read", call)

    @mcp.tool()
    def switch_context(name: str) -> dict[str, Any]:
        """Make another loaded context the active one.

        Args:
            name: Context name, as shown by list_contexts.
        """

        def call() -> dict[str, Any]:
            context = server.registry.set_current(name)
            return {
                "context": context.name,
                "namespace": context.namespace,
                "message": f"Switched to context '{context.name}'",
            }

        return run_operation(server, "read", call)

    @mcp.tool()
    def set_namespace(namespace: str) -> dict[str, Any]:
        """Change the namespace used when a tool call omits one.

        Args:
            namespace: Namespace name; empty resets to "default".
        """

        def call() -> dict[str, Any]:
            applied = server.registry.set_current_namespace(namespace)
            return {
                "context": server.registry.current_context_name(),
                "namespace": applied,
                "message": f"Current namespace set to '{applied}'",
            }

        return run_operation(server, "read", call)

    @mcp.tool()
    def rename_context(old_name: str, new_name: str) -> dict[str, Any]:
        """Rename a loaded context.

        Args:
            old_name: Current context name.
            new_name: New context name.
        """

        def call() -> dict[str, Any]:
            server.registry.rename(old_name, new_name)
            return {
                "old_name": old_name,
                "new_name": new_name,
                "message": f"Successfully renamed context '{old_name}' to '{new_name}'",
            }

        return run_operation(server, "read", call)

    @mcp.tool()
    def delete_context(name: str) -> dict[str, Any]:
        """Forget a loaded context. Deleting the active one leaves none active.

        Args:
            name: Context name.
        """

        def call() -> dict[str, Any]:
            context = server.registry.remove(name)
            context.client.disconnect()
            return {"name": name, "message": f"Successfully deleted context '{name}'"}

        return run_operation(server, "read", call)

    @mcp.tool()
    def load_kubeconfig(
        path: str,
        context: str | None = None,
        prefix: str | None = None,
        activate: bool = True,
    ) -> dict[str, Any]:
        """Load every context of a kubeconfig file.

        Args:
            path: Path to the kubeconfig file.
            context: Context to make active (defaults to the file's current context).
            prefix: Register contexts as "<prefix>-<context>" to avoid name clashes.
            activate: Switch to the selected context after loading.
        """

        def call() -> dict[str, Any]:
            if not path:
                raise ValidationError("path is required", field="path")
            loader = KubeconfigLoader(server.registry, server.config.default_namespace)
            names = loader.load_kubeconfig(path, context=context, prefix=prefix, activate=activate)
            current = server.registry.current_context_name()
            if activate and current is not None:
                try:
                    server.registry.get_current_client().connect(timeout=server.config.read_timeout)
                except KaiError as e:
                    logger.warning(f"Loaded context '{current}' is not reachable: {e}")
            return {
                "path": path,
                "contexts": names,
                "current_context": current,
                "message": f"Successfully loaded {len(names)} context(s) from '{path}'",
            }

        return run_operation(server, "read", call)
