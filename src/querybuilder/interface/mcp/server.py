"""MCP server factory for the query-builder studio."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from .tools import register_studio_tools

SERVER_NAME = "querybuilder-studio"


def create_server() -> FastMCP:
    """Build and return a FastMCP server with the studio tools registered."""
    server = FastMCP(SERVER_NAME)
    register_studio_tools(server)
    return server


if __name__ == "__main__":
    server = create_server()
    server.run(transport="stdio")
