"""Resource domains. Each package holds models, a controller and MCP tools."""
