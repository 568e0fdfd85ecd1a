"""Load tool descriptors from an MCP server or a JSON file.

Servers are reached over stdio (spawned command) or streamable HTTP
(server URL). A JSON file holding a ``tools/list`` result, or a bare
list of tools, can stand in for a live server.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.client.streamable_http import streamablehttp_client
from mcp.types import Implementation

from .errors import CodegenError, ConfigurationError

CLIENT_NAME = "mcp-codegen"
CLIENT_VERSION = "1.0.0"

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool as reported by the server."""

    name: str
    input_schema: dict[str, Any]
    description: str | None = None
    output_schema: dict[str, Any] | None = None

    @classmethod
    def from_mcp(cls, tool: Any) -> ToolDescriptor:
        """Build from an ``mcp.types.Tool``."""
        return cls(
            name=tool.name,
            input_schema=tool.inputSchema or {},
            description=tool.description,
            output_schema=getattr(tool, "outputSchema", None),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolDescriptor:
        """Build from a JSON tool object (``inputSchema``/``outputSchema`` keys)."""
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise CodegenError(f"Tool entry has no name: {data!r}")
        return cls(
            name=name,
            input_schema=data.get("inputSchema") or {},
            description=data.get("description"),
            output_schema=data.get("outputSchema"),
        )


def load_tools_file(path: Path) -> list[ToolDescriptor]:
    """Load tools from a JSON file: a list of tools or ``{"tools": [...]}``."""
    with open(path) as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("tools")
    if not isinstance(data, list):
        raise CodegenError(f"{path} does not contain a list of tools")
    return [ToolDescriptor.from_dict(entry) for entry in data]


@asynccontextmanager
async def open_session(
    command: str | None = None,
    args: Sequence[str] = (),
    server_url: str | None = None,
) -> AsyncIterator[ClientSession]:
    """Connect to an MCP server and yield an initialized session.

    The server URL wins when both a URL and a command are given.
    """
    client_info = Implementation(name=CLIENT_NAME, version=CLIENT_VERSION)

    if server_url:
        logger.info("codegen.connecting", transport="http", url=server_url)
        async with streamablehttp_client(server_url) as (read, write, _):
            async with ClientSession(read, write, client_info=client_info) as session:
                await session.initialize()
                yield session
        return

    if command:
        logger.info("codegen.connecting", transport="stdio", command=command, args=list(args))
        params = StdioServerParameters(command=command, args=list(args))
        async with stdio_client(params) as (read, write):
            async with ClientSession(read, write, client_info=client_info) as session:
                await session.initialize()
                yield session
        return

    raise ConfigurationError("Must specify either a server command or a server URL")


async def list_tools(session: ClientSession) -> list[ToolDescriptor]:
    """List every tool on the server, following pagination cursors."""
    tools: list[ToolDescriptor] = []
    result = await session.list_tools()
    while True:
        tools.extend(ToolDescriptor.from_mcp(tool) for tool in result.tools)
        cursor = getattr(result, "nextCursor", None)
        if not cursor:
            break
        result = await session.list_tools(cursor=cursor)
    logger.info("codegen.tools_listed", count=len(tools))
    return tools


async def fetch_tools(
    command: str | None = None,
    args: Sequence[str] = (),
    server_url: str | None = None,
) -> list[ToolDescriptor]:
    """Open a session, list its tools and close it again."""
    async with open_session(command=command, args=args, server_url=server_url) as session:
        return await list_tools(session)
