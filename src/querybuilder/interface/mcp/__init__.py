"""MCP studio server: tools, observability, server factory."""
