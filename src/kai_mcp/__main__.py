"""Entry point for the kai-mcp server."""

import argparse
import logging
import os
import sys
from typing import Any

from kai_mcp import __version__
from kai_mcp.config import (
    AuthMode,
    KaiConfig,
    LogLevel,
    TransportMode,
)


def setup_logging(level: LogLevel) -> None:
    """Configure logging on stderr; stdout carries the stdio transport."""
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="kai-mcp",
        description="MCP server for managing Kubernetes resources",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Transport options
    parser.add_argument(
        "--transport",
        choices=[mode.value for mode in TransportMode],
        default=None,
        help="Transport mode (default: from config or stdio)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind HTTP server to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind HTTP server to (default: 8000)",
    )

    # Cluster access
    parser.add_argument(
        "--auth-mode",
        choices=[mode.value for mode in AuthMode],
        default=None,
        help="How to load cluster contexts (default: auto)",
    )
    parser.add_argument(
        "--kubeconfig",
        default=None,
        help="Path to kubeconfig file",
    )
    parser.add_argument(
        "--context",
        default=None,
        help="Kubeconfig context to use",
    )
    parser.add_argument(
        "--namespace",
        default=None,
        help="Namespace for contexts that do not set one (default: default)",
    )

    # Timeouts
    parser.add_argument(
        "--read-timeout",
        type=float,
        default=None,
        help="Per-attempt timeout for reads in seconds (default: 20)",
    )
    parser.add_argument(
        "--write-timeout",
        type=float,
        default=None,
        help="Timeout for create, update and delete in seconds (default: 30)",
    )

    # Safety options
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Run in read-only mode (disable all write operations)",
    )
    parser.add_argument(
        "--enable-dangerous",
        action="store_true",
        help="Enable dangerous operations like delete",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=None,
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> KaiConfig:
    """Build config from args, falling back to environment/defaults."""
    config_kwargs: dict[str, Any] = {}

    if args.transport:
        config_kwargs["transport"] = TransportMode(args.transport)
    if args.host:
        config_kwargs["host"] = args.host
    if args.port:
        config_kwargs["port"] = args.port
    if args.auth_mode:
        config_kwargs["auth_mode"] = AuthMode(args.auth_mode)
    if args.kubeconfig:
        config_kwargs["kubeconfig_path"] = args.kubeconfig
    if args.context:
        config_kwargs["kubeconfig_context"] = args.context
    if args.namespace:
        config_kwargs["default_namespace"] = args.namespace
    if args.read_timeout:
        config_kwargs["read_timeout"] = args.read_timeout
    if args.write_timeout:
        config_kwargs["write_timeout"] = args.write_timeout
    if args.read_only:
        config_kwargs["read_only_mode"] = True
    if args.enable_dangerous:
        config_kwargs["enable_dangerous_operations"] = True
    if args.log_level:
        config_kwargs["log_level"] = LogLevel(args.log_level)

    return KaiConfig(**config_kwargs)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    config = build_config(parse_args(argv))
    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting kai-mcp server v{__version__}")

    try:
        warnings = config.validate_auth_config()
        for warning in warnings:
            logger.warning(warning)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    from kai_mcp.server import create_server

    mcp = create_server(config)

    os.environ.setdefault("UVICORN_HOST", config.host)
    os.environ.setdefault("UVICORN_PORT", str(config.port))

    if config.transport == TransportMode.STDIO:
        logger.info("Running with stdio transport")
    else:
        logger.info(
            f"Running with {config.transport.value} transport on {config.host}:{config.port}"
        )
    mcp.run(transport=config.transport.value)

    return 0


if __name__ == "__main__":
    sys.exit(main())
