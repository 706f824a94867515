"""Oura MCP server implementation."""

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated

import anyio
from mcp.server.fastmcp import FastMCP
from mcp.server.stdio import stdio_server
from pydantic import Field

from .catalog import ENDPOINTS
from .consts import RESOURCE_SCHEME, SERVER_NAME, TOOL_PREFIX
from .dispatcher import RequestDispatcher
from .output_guard import OutputGuard

logger = logging.getLogger("oura-mcp.server")

INSTRUCTIONS = """
Oura MCP server.

Resources (oura://<category>) return the last 7 days of data, or the
current state for personal_info and ring_configuration.
Tools (get_<category>) take startDate and endDate in YYYY-MM-DD format.
Payloads are returned exactly as the Oura API sends them.
"""


def resource_uri(category: str) -> str:
    return f"{RESOURCE_SCHEME}://{category}"


def tool_name(category: str) -> str:
    return f"{TOOL_PREFIX}{category}"


def _resource_reader(
    dispatcher: RequestDispatcher, category: str
) -> Callable[[], Awaitable[str]]:
    async def read() -> str:
        return await dispatcher.read_resource(category)

    return read


def _tool_caller(dispatcher: RequestDispatcher, category: str):
    async def call(
        startDate: Annotated[str, Field(description="Start date in YYYY-MM-DD format")],
        endDate: Annotated[str, Field(description="End date in YYYY-MM-DD format")],
    ) -> str:
        return await dispatcher.call_tool(
            category, {"startDate": startDate, "endDate": endDate}
        )

    return call


def create_mcp_server(
    dispatcher: RequestDispatcher, log_level: str = "INFO"
) -> FastMCP:
    """Create the MCP server and register one resource per catalog entry,
    plus a get_<category> tool for each date-ranged entry.

    Args:
        dispatcher: Handles the reads and calls.
        log_level: FastMCP log level.

    Returns:
        Configured FastMCP server instance.
    """
    mcp = FastMCP(name=SERVER_NAME, instructions=INSTRUCTIONS, log_level=log_level)

    tool_count = 0
    for endpoint in ENDPOINTS:
        mcp.resource(
            resource_uri(endpoint.name),
            name=endpoint.name,
            description=endpoint.description,
            mime_type="application/json",
        )(_resource_reader(dispatcher, endpoint.name))

        if endpoint.requires_date_range:
            mcp.add_tool(
                _tool_caller(dispatcher, endpoint.name),
                name=tool_name(endpoint.name),
                description=endpoint.description,
            )
            tool_count += 1

    logger.info(f"Registered {len(ENDPOINTS)} resources and {tool_count} tools")
    return mcp


async def serve(mcp: FastMCP, guard: OutputGuard) -> None:
    """Run the MCP server over stdin and the guard's protocol stream."""
    stdout = anyio.wrap_file(guard.protocol_stream)
    async with stdio_server(stdout=stdout) as (read_stream, write_stream):
        server = mcp._mcp_server
        await server.run(
            read_stream, write_stream, server.create_initialization_options()
        )
