"""MCP server exposing the ticket tools over the official protocol.

Same registry and repository semantics as the line protocol; only the
transport differs (JSON-RPC via the MCP SDK instead of the legacy line shapes).

Usage:
    itsm-tools-mcp                         # stdio, defaults
    itsm-tools-mcp --config itsm.json      # url_base / id_start / log_dir from file
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from itsm_tools.dispatcher import Dispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "itsm-tools"


def _text(content: object) -> list[TextContent]:
    if isinstance(content, str):
        return [TextContent(type="text", text=content)]
    return [TextContent(type="text", text=json.dumps(content, indent=2, default=str))]


async def list_tools(dispatcher: Dispatcher) -> list[Tool]:
    return dispatcher.tools


async def call_tool(dispatcher: Dispatcher, name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
    """Run one tool and wrap its result as a single JSON text block."""
    return _text(await dispatcher.call(name, arguments or {}))


def create_server(dispatcher: Dispatcher) -> Server:
    """Build an MCP ``Server`` bound to *dispatcher*."""
    server = Server(SERVER_NAME)

    @server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
    async def _list_tools() -> list[Tool]:
        return await list_tools(dispatcher)

    @server.call_tool()  # type: ignore[untyped-decorator]
    async def _call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        return await call_tool(dispatcher, name, arguments)

    return server


async def run_stdio(dispatcher: Dispatcher) -> None:
    server = create_server(dispatcher)
    logger.info("mcp_server_start", extra={"tool": "server", "args_data": {"tools": dispatcher.tool_names}})
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    import anyio

    from itsm_tools.config import read_config
    from itsm_tools.logging import setup_logging
    from itsm_tools.repository import TicketRepository

    parser = argparse.ArgumentParser(description="ITSM tools MCP server")
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    args = parser.parse_args()

    try:
        config = read_config(args.config)
    except ValueError as e:
        parser.error(str(e))
    log_dir = config.get("log_dir")
    setup_logging(Path(log_dir) if log_dir else None, level=config.get("log_level", "INFO"))

    dispatcher = Dispatcher(TicketRepository(id_start=config["id_start"]), url_base=config["url_base"])
    anyio.run(run_stdio, dispatcher)


if __name__ == "__main__":
    main()
