"""Build Jinja2 template context from MCP tool descriptors.

Translates each tool's input/output schema (TypeScript types or zod
schemas, depending on the mode), derives declaration names, and
assembles the full context dict for the <mode>.ts.j2 templates.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import structlog

from .errors import UnsupportedSchemaError
from .loader import ToolDescriptor
from .naming import declared_name, lower_first, type_base_name
from .schema_parser import resolve_schema_type
from .zod_schema import ANY, fix_nullable_defaults, schema_to_zod

GENERATOR_NAME = "mcp-codegen"

MODES = ("types", "zod")

logger = structlog.get_logger(__name__)


def _js(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _zod_expression(tool_name: str, schema: Any, which: str) -> str:
    """Convert one schema to zod, falling back to z.any() for this schema only."""
    try:
        return fix_nullable_defaults(schema_to_zod(schema))
    except UnsupportedSchemaError as exc:
        logger.warning(
            "codegen.schema_fallback",
            tool=tool_name,
            schema=which,
            reason=str(exc),
            fallback=ANY,
        )
        return ANY


def _translate(tool_name: str, schema: Any, mode: str, which: str) -> str:
    if mode == "zod":
        return _zod_expression(tool_name, schema, which)
    return resolve_schema_type(schema)


def build_declaration(tool: ToolDescriptor, prefix: str = "", mode: str = "types") -> dict[str, Any]:
    """Build the declarations for a single tool."""
    base = declared_name(f"{prefix}{type_base_name(tool.name)}")
    has_output = tool.output_schema is not None

    return {
        "tool_name": tool.name,
        "description": tool.description or f"Parameters for {tool.name}",
        "params_type": f"{base}Params",
        "params_expr": _translate(tool.name, tool.input_schema, mode, "input"),
        "schema_name": f"{base}Schema",
        "output_type": f"{base}Output" if has_output else None,
        "output_expr": _translate(tool.name, tool.output_schema, mode, "output") if has_output else None,
        "output_schema_name": f"{base}OutputSchema" if has_output else None,
    }


def exported_names(decl: dict[str, Any], mode: str) -> set[str]:
    """Names a declaration adds to the generated module's exports."""
    keys = ["params_type", "output_type"]
    if mode == "zod":
        keys += ["schema_name", "output_schema_name"]
    return {decl[key] for key in keys if decl[key] is not None}


def build_context(
    tools: Sequence[ToolDescriptor],
    prefix: str = "",
    mode: str = "types",
    source: str = "",
) -> dict[str, Any]:
    """Build the full template context for a list of tools.

    When a tool's declarations reuse any name exported by an earlier
    tool (``do-thing``/``do_thing``, or ``search``'s output schema and
    ``search-output``'s schema), the earlier declarations are dropped;
    the last such tool wins. Every tool name still appears in the name
    union and the name list, in source order.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown output mode {mode!r}, expected one of {MODES}")

    per_tool = [build_declaration(tool, prefix, mode) for tool in tools]

    declarations: list[dict[str, Any]] = []
    for decl in per_tool:
        claimed = exported_names(decl, mode)
        declarations = [d for d in declarations if claimed.isdisjoint(exported_names(d, mode))]
        declarations.append(decl)

    # Registry entries may only point at schemas that survived the merge
    owners = {decl["schema_name"]: decl for decl in declarations}
    registry: list[dict[str, Any]] = []
    for tool, decl in zip(tools, per_tool):
        owner = owners.get(decl["schema_name"])
        if owner is None:
            continue
        registry.append({
            "tool_name": tool.name,
            "doc": tool.description or tool.name,
            "description": tool.description,
            "schema_name": owner["schema_name"],
            "output_schema_name": owner["output_schema_name"],
        })

    names = [tool.name for tool in tools]
    literals = [_js(name) for name in names]

    return {
        "mode": mode,
        "generator": GENERATOR_NAME,
        "source": source,
        "declarations": declarations,
        "registry": registry,
        "tool_names": names,
        "tool_count": len(names),
        "tool_name_type": declared_name(f"{prefix}ToolName"),
        "tool_name_union": "\n".join(f"  | {lit}" for lit in literals) or "  never",
        "tool_names_const": declared_name(lower_first(f"{prefix}ToolNames")),
        "tool_names_list": ",\n".join(f"  {lit}" for lit in literals),
        "registry_name": declared_name(lower_first(f"{prefix}McpTools")),
    }
