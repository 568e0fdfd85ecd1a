"""Shared fixtures for the code generator tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import structlog

from mcp_codegen.loader import ToolDescriptor


WEATHER_TOOL: dict[str, Any] = {
    "name": "get-weather",
    "description": "Get the current weather for a city",
    "inputSchema": {
        "type": "object",
        "properties": {
            "city": {"type": "string", "description": "City name"},
            "units": {"enum": ["metric", "imperial"]},
        },
        "required": ["city"],
    },
    "outputSchema": {
        "type": "object",
        "properties": {
            "temperature": {"type": "number"},
            "conditions": {"type": "string"},
        },
        "required": ["temperature", "conditions"],
    },
}

SEARCH_TOOL: dict[str, Any] = {
    "name": "search files",
    "inputSchema": {
        "type": "object",
        "properties": {
            "query": {"type": "string"},
            "limit": {"type": "integer", "default": None},
        },
        "required": ["query"],
    },
}


@pytest.fixture
def tool_dicts() -> list[dict[str, Any]]:
    """Raw tool objects, as a tools/list result would carry them."""
    return [WEATHER_TOOL, SEARCH_TOOL]


@pytest.fixture
def tools(tool_dicts) -> list[ToolDescriptor]:
    return [ToolDescriptor.from_dict(t) for t in tool_dicts]


@pytest.fixture
def tools_file(tmp_path: Path, tool_dicts) -> Path:
    """A tools/list result saved to disk."""
    path = tmp_path / "tools.json"
    path.write_text(json.dumps({"tools": tool_dicts}))
    return path


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo logging configuration done by CLI runs."""
    yield
    structlog.reset_defaults()
