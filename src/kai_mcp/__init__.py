"""kai-mcp: MCP server for managing Kubernetes resources."""

__version__ = "0.1.0"
