"""Configuration for the kai-mcp server."""

from __future__ import annotations

import os
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kai_mcp.utils.retry import Backoff

IN_CLUSTER_TOKEN_PATH = Path("/var/run/secrets/kubernetes.io/serviceaccount/token")


class TransportMode(str, Enum):
    """MCP transport mode."""

    STDIO = "stdio"
    SSE = "sse"
    STREAMABLE_HTTP = "streamable-http"


class AuthMode(str, Enum):
    """How cluster contexts are loaded at startup."""

    AUTO = "auto"
    KUBECONFIG = "kubeconfig"
    IN_CLUSTER = "in-cluster"


class LogLevel(str, Enum):
    """Logging level."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class KaiConfig(BaseSettings):
    """Configuration for the kai-mcp server.

    Loaded from environment variables with the KAI_MCP_ prefix or from a
    .env file. Command line flags override both.
    """

    model_config = SettingsConfigDict(
        env_prefix="KAI_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Transport
    transport: TransportMode = Field(default=TransportMode.STDIO, description="MCP transport")
    host: str = Field(default="127.0.0.1", description="Host for HTTP transports")
    port: int = Field(default=8000, description="Port for HTTP transports")

    # Cluster access
    auth_mode: AuthMode = Field(default=AuthMode.AUTO, description="Context loading mode")
    kubeconfig_path: str | None = Field(
        default=None,
        description="Path to kubeconfig (defaults to $KUBECONFIG or ~/.kube/config)",
    )
    kubeconfig_context: str | None = Field(
        default=None,
        description="Context to select on startup (defaults to the kubeconfig's current one)",
    )
    default_namespace: str = Field(
        default="default",
        description="Namespace used when a context does not set one",
    )

    # Timeouts, in seconds. Reads are per attempt since they may be retried.
    read_timeout: float = Field(default=20.0, gt=0, description="Per-attempt read timeout")
    write_timeout: float = Field(default=30.0, gt=0, description="Create/update/delete timeout")

    # Read retries
    retry_steps: int = Field(default=5, ge=1, description="Maximum read attempts")
    retry_duration: float = Field(default=0.01, ge=0, description="Initial retry delay")
    retry_factor: float = Field(default=1.0, ge=1.0, description="Retry delay multiplier")
    retry_jitter: float = Field(default=0.1, ge=0, description="Retry delay jitter fraction")

    # Safety
    read_only_mode: bool = Field(default=False, description="Disable all write operations")
    enable_dangerous_operations: bool = Field(
        default=False,
        description="Allow delete operations",
    )

    # Listing
    default_list_limit: int | None = Field(
        default=None,
        description="Default page size for list tools (None returns everything)",
    )
    max_list_limit: int = Field(default=100, ge=1, description="Maximum page size")

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    @property
    def effective_kubeconfig_path(self) -> Path:
        """Kubeconfig path after applying $KUBECONFIG and the home default."""
        if self.kubeconfig_path:
            return Path(self.kubeconfig_path).expanduser()
        env_path = os.environ.get("KUBECONFIG")
        if env_path:
            # Only the first entry of a path list is used
            return Path(env_path.split(os.pathsep)[0]).expanduser()
        return Path.home() / ".kube" / "config"

    def retry_backoff(self) -> Backoff:
        """Build the read retry schedule."""
        return Backoff(
            steps=self.retry_steps,
            duration=self.retry_duration,
            factor=self.retry_factor,
            jitter=self.retry_jitter,
        )

    def is_operation_allowed(self, operation: str) -> tuple[bool, str | None]:
        """Check whether an operation type is allowed.

        Args:
            operation: One of "read", "create", "update" or "delete".

        Returns:
            Tuple of (allowed, reason when not allowed).
        """
        if operation == "read":
            return True, None
        if self.read_only_mode:
            return False, "Server is running in read-only mode"
        if operation == "delete" and not self.enable_dangerous_operations:
            return False, (
                "Delete operations are disabled. Start the server with "
                "--enable-dangerous or KAI_MCP_ENABLE_DANGEROUS_OPERATIONS=true"
            )
        return True, None

    def validate_auth_config(self) -> list[str]:
        """Check the cluster access settings.

        Returns:
            Warnings worth logging.

        Raises:
            ValueError: If the settings cannot work.
        """
        warnings: list[str] = []
        kubeconfig = self.effective_kubeconfig_path

        if self.auth_mode == AuthMode.KUBECONFIG and not kubeconfig.exists():
            raise ValueError(f"Kubeconfig not found at {kubeconfig}")
        if self.auth_mode == AuthMode.IN_CLUSTER and not IN_CLUSTER_TOKEN_PATH.exists():
            raise ValueError("In-cluster mode requested but no service account token is mounted")
        if self.auth_mode == AuthMode.AUTO and not (
            kubeconfig.exists() or IN_CLUSTER_TOKEN_PATH.exists()
        ):
            warnings.append(
                f"No kubeconfig at {kubeconfig} and not running in a cluster; "
                "contexts must be loaded with the load_kubeconfig tool"
            )
        if self.kubeconfig_context and self.auth_mode == AuthMode.IN_CLUSTER:
            warnings.append("kubeconfig_context is ignored in in-cluster mode")
        if self.default_list_limit is not None and self.default_list_limit > self.max_list_limit:
            warnings.append(
                f"default_list_limit {self.default_list_limit} exceeds max_list_limit "
                f"{self.max_list_limit}; the maximum applies"
            )
        return warnings


@lru_cache
def get_config() -> KaiConfig:
    """Get the process-wide configuration loaded from the environment."""
    return KaiConfig()
