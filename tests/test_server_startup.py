"""Tests for KaiServer startup and MCP construction."""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, Mock, patch

from kai_mcp.__main__ import build_config, parse_args
from kai_mcp.clients.registry import ClusterRegistry
from kai_mcp.config import AuthMode, KaiConfig, TransportMode
from kai_mcp.server import KaiServer
from kai_mcp.utils.errors import TransientError, ValidationError


def _loader_registering(client: Any) -> MagicMock:
    """Build a KubeconfigLoader stand-in that registers one context."""
    loader_cls = MagicMock()

    def load_kubeconfig(*_args: Any, **_kwargs: Any) -> list[str]:
        registry = loader_cls.call_args.args[0]
        registry.register("dev", client)
        registry.set_current("dev")
        return ["dev"]

    loader_cls.return_value.load_kubeconfig.side_effect = load_kubeconfig
    return loader_cls


def test_startup_preserves_connected_context() -> None:
    """startup() should not reload contexts when the current one is connected."""
    registry = ClusterRegistry()
    client = Mock()
    client.is_connected = True
    registry.register("dev", client)
    registry.set_current("dev")
    server = KaiServer(KaiConfig(), registry)

    with patch("kai_mcp.server.KubeconfigLoader") as loader_cls:
        server.startup()
        loader_cls.assert_not_called()

    client.connect.assert_not_called()
    assert registry.get_current_client() is client


def test_startup_loads_kubeconfig_when_registry_empty(tmp_path: Path) -> None:
    """startup() should load contexts and connect the selected one."""
    kubeconfig = tmp_path / "config"
    kubeconfig.write_text("apiVersion: v1\n")
    config = KaiConfig(auth_mode=AuthMode.KUBECONFIG, kubeconfig_path=str(kubeconfig))
    server = KaiServer(config, ClusterRegistry())
    client = MagicMock()
    loader_cls = _loader_registering(client)

    with patch("kai_mcp.server.KubeconfigLoader", loader_cls):
        server.startup()

    loader_cls.return_value.load_kubeconfig.assert_called_once_with(kubeconfig, context=None)
    client.connect.assert_called_once_with(timeout=config.read_timeout)
    assert server.registry.current_context_name() == "dev"


def test_startup_reconnects_disconnected_context() -> None:
    """A registered but unconnected context is connected, not reloaded."""
    registry = ClusterRegistry()
    client = MagicMock()
    client.is_connected = False
    registry.register("dev", client)
    registry.set_current("dev")
    server = KaiServer(KaiConfig(), registry)

    with patch("kai_mcp.server.KubeconfigLoader") as loader_cls:
        server.startup()
        loader_cls.assert_not_called()

    client.connect.assert_called_once()


def test_startup_survives_unreachable_cluster() -> None:
    registry = ClusterRegistry()
    client = MagicMock()
    client.is_connected = False
    client.connect.side_effect = TransientError("Cannot reach https://cluster")
    registry.register("dev", client)
    registry.set_current("dev")

    KaiServer(KaiConfig(), registry).startup()

    client.connect.assert_called_once()


def test_auto_mode_without_credentials(tmp_path: Path) -> None:
    """Auto mode starts without contexts when nothing can be loaded."""
    config = KaiConfig(kubeconfig_path=str(tmp_path / "missing"))
    server = KaiServer(config, ClusterRegistry())

    token_path = MagicMock()
    token_path.exists.return_value = False
    with (
        patch("kai_mcp.server.IN_CLUSTER_TOKEN_PATH", token_path),
        patch("kai_mcp.server.KubeconfigLoader") as loader_cls,
    ):
        assert server.load_contexts() == []
        loader_cls.return_value.load_in_cluster.assert_not_called()


def test_auto_mode_logs_broken_kubeconfig(tmp_path: Path) -> None:
    kubeconfig = tmp_path / "config"
    kubeconfig.write_text("not: [valid")
    server = KaiServer(KaiConfig(kubeconfig_path=str(kubeconfig)), ClusterRegistry())

    with patch("kai_mcp.server.KubeconfigLoader") as loader_cls:
        loader_cls.return_value.load_kubeconfig.side_effect = ValidationError("Invalid kubeconfig")
        assert server.load_contexts() == []


def test_startup_runs_health_checks() -> None:
    """Health checks should run when a plugin manager exists."""
    server = KaiServer(KaiConfig(), ClusterRegistry())
    mock_pm = Mock()
    mock_pm.registered_plugins = {"p1": Mock()}
    mock_pm.healthy_plugins = {"p1": Mock()}
    server._plugin_manager = mock_pm

    with patch("kai_mcp.server.KubeconfigLoader"):
        server.startup()

    mock_pm.run_health_checks.assert_called_once_with(server)


def test_shutdown_disconnects_every_context() -> None:
    registry = ClusterRegistry()
    clients = [MagicMock(), MagicMock()]
    registry.register("a", clients[0])
    registry.register("b", clients[1])

    KaiServer(KaiConfig(), registry).shutdown()

    for client in clients:
        client.disconnect.assert_called_once()


def test_create_mcp_registers_domain_tools(mock_mcp: MagicMock) -> None:
    """Every core domain contributes its tools."""
    server = KaiServer(KaiConfig(), ClusterRegistry())

    with patch("kai_mcp.server.FastMCP", return_value=mock_mcp):
        mcp = server.create_mcp()

    assert mcp is mock_mcp
    tools = mock_mcp._registered_tools
    for name in (
        "create_service",
        "delete_services_by_selector",
        "create_deployment",
        "scale_deployment",
        "get_pod_logs",
        "create_ingress",
        "create_configmap",
        "create_secret",
        "create_job",
        "suspend_cronjob",
        "create_namespace",
        "switch_context",
        "load_kubeconfig",
    ):
        assert name in tools
    assert "services" in server.plugins


class TestCommandLine:
    """Tests for argument parsing."""

    def test_flags_override_defaults(self) -> None:
        config = build_config(
            parse_args(
                [
                    "--transport",
                    "sse",
                    "--context",
                    "dev",
                    "--write-timeout",
                    "45",
                    "--read-only",
                    "--auth-mode",
                    "kubeconfig",
                ]
            )
        )

        assert config.transport == TransportMode.SSE
        assert config.kubeconfig_context == "dev"
        assert config.write_timeout == 45.0
        assert config.read_only_mode is True
        assert config.auth_mode == AuthMode.KUBECONFIG

    def test_no_flags(self) -> None:
        config = build_config(parse_args([]))

        assert config.enable_dangerous_operations is False
        assert config.read_timeout == 20.0
