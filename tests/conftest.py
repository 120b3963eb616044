"""Shared fixtures for kai-mcp tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from kai_mcp.clients.registry import ClusterRegistry
from kai_mcp.config import KaiConfig


@pytest.fixture
def config() -> KaiConfig:
    """Config with instant retries and short timeouts."""
    return KaiConfig(
        read_timeout=5.0,
        write_timeout=5.0,
        retry_steps=5,
        retry_duration=0.0,
        retry_jitter=0.0,
        enable_dangerous_operations=True,
    )


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock K8sClient; every API group is a MagicMock."""
    client = MagicMock()
    client.is_connected = True
    client.server_version = "v1.29.2"
    return client


@pytest.fixture
def registry(mock_client: MagicMock) -> ClusterRegistry:
    """Registry with one current context named 'test' in namespace 'default'."""
    reg = ClusterRegistry()
    reg.register("test", mock_client, namespace="default", cluster="test-cluster")
    reg.set_current("test")
    return reg


@pytest.fixture
def mock_server(registry: ClusterRegistry, config: KaiConfig) -> MagicMock:
    """Create a mock KaiServer holding a real registry and config."""
    server = MagicMock()
    server.registry = registry
    server.config = config
    return server


@pytest.fixture
def mock_mcp() -> MagicMock:
    """Create a mock FastMCP that captures tool registrations.

    The mock captures all @mcp.tool() decorated functions so tests can
    call them directly.
    """
    mock = MagicMock()
    registered_tools: dict[str, Any] = {}

    def capture_tool(*_args: Any, **_kwargs: Any) -> Any:
        def decorator(f: Any) -> Any:
            registered_tools[f.__name__] = f
            return f

        return decorator

    mock.tool = capture_tool
    mock._registered_tools = registered_tools
    return mock
