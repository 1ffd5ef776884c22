"""Studio entrypoint.

Starts the MCP studio server holding one query-builder session.

Usage:
    python -m querybuilder.interface.mcp_studio
    # or:
    querybuilder-studio
"""

from __future__ import annotations

import logging

from ..config.runtime import get_settings
from .mcp.server import create_server


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    server = create_server()
    server.run(transport="stdio")


if __name__ == "__main__":
    main()
