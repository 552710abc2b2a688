from __future__ import annotations

import functools
import logging
from typing import Any

import anyio.to_thread
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from design_compare.conf import Settings, get_settings
from design_compare.server.tools import (
    COMPARE_DESIGN,
    ToolCallFailed,
    ToolContent,
    call_compare_design,
    compare_design_tool,
)

logger = logging.getLogger(__name__)


def create_server(settings: Settings | None = None) -> Server:
    """Build the MCP server exposing ``compare_design``.

    Framing, initialization and protocol negotiation are handled by the SDK.
    Exceptions raised by the tool handler reach the client as ``isError``
    results carrying the exception message.
    """
    if settings is None:
        settings = get_settings()

    server: Server = Server(settings.server_name, version=settings.server_version)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [compare_design_tool(settings)]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[ToolContent]:
        if name != COMPARE_DESIGN:
            raise ToolCallFailed(f"Unknown tool: {name}")
        # The comparison is CPU bound; keep the event loop free for other messages.
        return await anyio.to_thread.run_sync(
            functools.partial(call_compare_design, arguments, settings)
        )

    return server


async def serve_stdio(settings: Settings | None = None) -> None:
    if settings is None:
        settings = get_settings()
    server = create_server(settings)

    logger.info("%s %s running on stdio", settings.server_name, settings.server_version)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("stdin closed, shutting down")
