"""Plugin registry for the built-in resource domains.

Each domain package contributes one plugin whose tool hook imports and runs
the package's ``register_tools``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from kai_mcp.hooks import hookimpl
from kai_mcp.plugin import BasePlugin, PluginMetadata

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from kai_mcp.server import KaiServer

MAINTAINER = "kai-mcp maintainers"


def _metadata(name: str, description: str, kinds: list[str]) -> PluginMetadata:
    return PluginMetadata(
        name=name,
        version="1.0.0",
        description=description,
        maintainer=MAINTAINER,
        kinds=kinds,
    )


class NamespacesPlugin(BasePlugin):
    def __init__(self) -> None:
        super().__init__(_metadata("namespaces", "Namespace management", ["Namespace"]))

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        from kai_mcp.domains.namespaces.tools import register_tools

        register_tools(mcp, server)


class PodsPlugin(BasePlugin):
    def __init__(self) -> None:
        super().__init__(_metadata("pods", "Pod management and container logs", ["Pod"]))

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        from kai_mcp.domains.pods.tools import register_tools

        register_tools(mcp, server)


class DeploymentsPlugin(BasePlugin):
    def __init__(self) -> None:
        super().__init__(
            _metadata("deployments", "Deployment rollout and scaling", ["Deployment"])
        )

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        from kai_mcp.domains.deployments.tools import register_tools

        register_tools(mcp, server)


class ServicesPlugin(BasePlugin):
    def __init__(self) -> None:
        super().__init__(_metadata("services", "Service exposure", ["Service"]))

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        from kai_mcp.domains.services.tools import register_tools

        register_tools(mcp, server)


class IngressesPlugin(BasePlugin):
    def __init__(self) -> None:
        super().__init__(_metadata("ingresses", "HTTP(S) routing with Ingresses", ["Ingress"]))

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        from kai_mcp.domains.ingresses.tools import register_tools

        register_tools(mcp, server)


class ConfigMapsPlugin(BasePlugin):
    def __init__(self) -> None:
        super().__init__(_metadata("configmaps", "ConfigMap management", ["ConfigMap"]))

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        from kai_mcp.domains.configmaps.tools import register_tools

        register_tools(mcp, server)


class SecretsPlugin(BasePlugin):
    def __init__(self) -> None:
        super().__init__(_metadata("secrets", "Secret management", ["Secret"]))

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        from kai_mcp.domains.secrets.tools import register_tools

        register_tools(mcp, server)


class JobsPlugin(BasePlugin):
    def __init__(self) -> None:
        super().__init__(
            _metadata("jobs", "Batch Jobs and scheduled CronJobs", ["Job", "CronJob"])
        )

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        from kai_mcp.domains.cronjobs.tools import register_tools as register_cronjob_tools
        from kai_mcp.domains.jobs.tools import register_tools as register_job_tools

        register_job_tools(mcp, server)
        register_cronjob_tools(mcp, server)


class ContextsPlugin(BasePlugin):
    def __init__(self) -> None:
        super().__init__(
            _metadata("contexts", "Cluster context and namespace selection", [])
        )

    @hookimpl
    def kai_register_tools(self, mcp: FastMCP, server: KaiServer) -> None:
        from kai_mcp.domains.contexts.tools import register_tools

        register_tools(mcp, server)

    @hookimpl
    def kai_health_check(self, server: KaiServer) -> tuple[bool, str]:  # noqa: ARG002
        return True, "Context tools work without a selected cluster"


def get_core_plugins() -> list[BasePlugin]:
    """Return one instance of every built-in domain plugin."""
    return [
        ContextsPlugin(),
        NamespacesPlugin(),
        PodsPlugin(),
        DeploymentsPlugin(),
        ServicesPlugin(),
        IngressesPlugin(),
        ConfigMapsPlugin(),
        SecretsPlugin(),
        JobsPlugin(),
    ]
