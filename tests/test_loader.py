"""Tests for the loader module (tool descriptor sources)."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest
from mcp.types import ListToolsResult, Tool

from mcp_codegen.errors import CodegenError, ConfigurationError
from mcp_codegen.loader import (
    ToolDescriptor,
    fetch_tools,
    list_tools,
    load_tools_file,
    open_session,
)


def _tool(name: str, **kwargs) -> Tool:
    return Tool(name=name, inputSchema={"type": "object"}, **kwargs)


def _mock_session_cls(session: AsyncMock) -> MagicMock:
    """A ClientSession stand-in whose instances enter as ``session``."""
    session_cls = MagicMock()
    session_cls.return_value.__aenter__ = AsyncMock(return_value=session)
    session_cls.return_value.__aexit__ = AsyncMock(return_value=False)
    return session_cls


class TestToolDescriptor:
    """Test descriptor construction."""

    def test_from_dict(self, tool_dicts):
        tool = ToolDescriptor.from_dict(tool_dicts[0])
        assert tool.name == "get-weather"
        assert tool.description == "Get the current weather for a city"
        assert tool.input_schema["required"] == ["city"]
        assert tool.output_schema is not None

    def test_from_dict_defaults(self):
        tool = ToolDescriptor.from_dict({"name": "ping"})
        assert tool.input_schema == {}
        assert tool.description is None
        assert tool.output_schema is None

    def test_from_dict_requires_name(self):
        with pytest.raises(CodegenError):
            ToolDescriptor.from_dict({"inputSchema": {}})

    def test_from_mcp(self):
        tool = ToolDescriptor.from_mcp(_tool(
            "echo",
            description="Echo back",
            outputSchema={"type": "object", "properties": {"text": {"type": "string"}}},
        ))
        assert tool.name == "echo"
        assert tool.description == "Echo back"
        assert tool.input_schema == {"type": "object"}
        assert tool.output_schema == {"type": "object", "properties": {"text": {"type": "string"}}}

    def test_immutable(self):
        tool = ToolDescriptor(name="a", input_schema={})
        with pytest.raises(AttributeError):
            tool.name = "b"


class TestLoadToolsFile:
    """Test reading tools from JSON files."""

    def test_tools_list_result(self, tools_file):
        tools = load_tools_file(tools_file)
        assert [t.name for t in tools] == ["get-weather", "search files"]

    def test_bare_list(self, tmp_path, tool_dicts):
        path = tmp_path / "tools.json"
        path.write_text(json.dumps(tool_dicts))
        assert len(load_tools_file(path)) == 2

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "tools.json"
        path.write_text(json.dumps({"items": []}))
        with pytest.raises(CodegenError):
            load_tools_file(path)


class TestListTools:
    """Test tool listing over a session."""

    @pytest.mark.asyncio
    async def test_single_page(self):
        session = AsyncMock()
        session.list_tools.return_value = ListToolsResult(tools=[_tool("a"), _tool("b")])
        tools = await list_tools(session)
        assert [t.name for t in tools] == ["a", "b"]
        session.list_tools.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_follows_cursor(self):
        session = AsyncMock()
        session.list_tools.side_effect = [
            ListToolsResult(tools=[_tool("a")], nextCursor="page-2"),
            ListToolsResult(tools=[_tool("b")], nextCursor="page-3"),
            ListToolsResult(tools=[_tool("c")]),
        ]
        tools = await list_tools(session)
        assert [t.name for t in tools] == ["a", "b", "c"]
        assert session.list_tools.await_args_list == [
            call(), call(cursor="page-2"), call(cursor="page-3"),
        ]

    @pytest.mark.asyncio
    async def test_empty(self):
        session = AsyncMock()
        session.list_tools.return_value = ListToolsResult(tools=[])
        assert await list_tools(session) == []


class TestOpenSession:
    """Test transport selection."""

    @pytest.mark.asyncio
    async def test_no_source(self):
        with pytest.raises(ConfigurationError):
            async with open_session():
                pass

    @pytest.mark.asyncio
    async def test_stdio(self):
        captured = []

        @asynccontextmanager
        async def fake_stdio(params):
            captured.append(params)
            yield ("read", "write")

        session = AsyncMock()
        session.list_tools.return_value = ListToolsResult(tools=[_tool("echo")])
        session_cls = _mock_session_cls(session)

        with patch("mcp_codegen.loader.stdio_client", fake_stdio), \
                patch("mcp_codegen.loader.ClientSession", session_cls):
            tools = await fetch_tools(command="mcp-server", args=["--port", "3000"])

        assert [t.name for t in tools] == ["echo"]
        assert captured[0].command == "mcp-server"
        assert captured[0].args == ["--port", "3000"]
        session.initialize.assert_awaited_once()
        assert session_cls.call_args.args == ("read", "write")
        session_cls.return_value.__aexit__.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_url_wins_over_command(self):
        urls = []

        @asynccontextmanager
        async def fake_http(url):
            urls.append(url)
            yield ("read", "write", lambda: None)

        @asynccontextmanager
        async def unexpected_stdio(params):
            raise AssertionError("stdio transport should not be used")
            yield

        session = AsyncMock()
        session_cls = _mock_session_cls(session)

        with patch("mcp_codegen.loader.streamablehttp_client", fake_http), \
                patch("mcp_codegen.loader.stdio_client", unexpected_stdio), \
                patch("mcp_codegen.loader.ClientSession", session_cls):
            async with open_session(command="mcp-server", server_url="http://localhost:3000/mcp") as s:
                assert s is session

        assert urls == ["http://localhost:3000/mcp"]
        session.initialize.assert_awaited_once()
