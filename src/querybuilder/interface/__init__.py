"""External surfaces: CLI and MCP studio server."""
