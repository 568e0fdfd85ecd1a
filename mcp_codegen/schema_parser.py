"""Translate MCP tool JSON schemas into TypeScript type expressions.

Handles:
- Primitive types (string, number/integer, boolean, null)
- Arrays, nested to any depth, and untyped arrays
- Objects with required/optional fields, in property order
- enum literal unions (order and duplicates kept)
- oneOf/anyOf unions and allOf intersections
- additionalProperties maps (Record<string, T>)
- Field descriptions as JSDoc comments
- Type lists ("type": ["string", "null"])
- Malformed or type-less fragments (fall back to unknown)

Rules are tried in a fixed order and the first match wins:
enum, then oneOf/anyOf (oneOf beats anyOf), then allOf, then type.
$ref is not resolved; a $ref-only node becomes unknown.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

UNKNOWN = "unknown"
OPEN_MAP = "Record<string, unknown>"
INDENT = "  "

_PRIMITIVES: dict[str, str] = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "null": "null",
}

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Binding strength of the outermost operator of an expression
_UNION = 0
_INTERSECTION = 1
_ATOM = 2


def resolve_schema_type(schema: Any, indent: int = 0) -> str:
    """Resolve a JSON schema node to a TypeScript type expression.

    Never raises: anything that can't be read as a schema becomes
    ``unknown``. ``indent`` is the nesting level used to lay out
    multi-line object types.
    """
    expr, _ = _translate(schema, indent)
    return expr


def _translate(schema: Any, indent: int) -> tuple[str, int]:
    if not isinstance(schema, dict):
        return UNKNOWN, _ATOM

    enum = schema.get("enum")
    if _non_empty_list(enum):
        literals = [_literal(value) for value in enum]
        return " | ".join(literals), _UNION if len(literals) > 1 else _ATOM

    for key in ("oneOf", "anyOf"):
        if _non_empty_list(schema.get(key)):
            return _union([_translate(sub, indent) for sub in schema[key]])

    if _non_empty_list(schema.get("allOf")):
        return _intersection([_translate(sub, indent) for sub in schema["allOf"]])

    schema_type = schema.get("type")
    if isinstance(schema_type, str) and schema_type in _PRIMITIVES:
        return _PRIMITIVES[schema_type], _ATOM
    if schema_type == "array":
        return _array_type(schema, indent), _ATOM
    if schema_type == "object" or (schema_type is None and "properties" in schema):
        return _object_type(schema, indent), _ATOM
    if _non_empty_list(schema_type):
        return _union([_translate({**schema, "type": t}, indent) for t in schema_type])
    if schema_type is None:
        return _fallback(schema, indent), _ATOM

    return UNKNOWN, _ATOM


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def _literal(value: Any) -> str:
    """Render a JSON value as a TypeScript literal type."""
    if isinstance(value, float) and not math.isfinite(value):
        return "number"
    return json.dumps(value, ensure_ascii=False, default=str)


def _wrap(part: tuple[str, int], min_strength: int) -> str:
    expr, strength = part
    if strength < min_strength:
        return f"({expr})"
    return expr


def _union(parts: list[tuple[str, int]]) -> tuple[str, int]:
    if len(parts) == 1:
        return parts[0]
    return " | ".join(expr for expr, _ in parts), _UNION


def _intersection(parts: list[tuple[str, int]]) -> tuple[str, int]:
    if len(parts) == 1:
        return parts[0]
    return " & ".join(_wrap(p, _INTERSECTION) for p in parts), _INTERSECTION


def _array_type(schema: dict[str, Any], indent: int) -> str:
    if "items" not in schema:
        return f"{UNKNOWN}[]"
    return _wrap(_translate(schema["items"], indent), _ATOM) + "[]"


def _fallback(schema: dict[str, Any], indent: int) -> str:
    """Type for a node with no usable type or properties."""
    extra = schema.get("additionalProperties")
    if extra is True:
        return OPEN_MAP
    if isinstance(extra, dict):
        return f"Record<string, {resolve_schema_type(extra, indent)}>"
    return UNKNOWN


def _field_name(key: str) -> str:
    if _IDENTIFIER.match(key):
        return key
    return json.dumps(key, ensure_ascii=False)


def _field_comment(schema: Any) -> str | None:
    if not isinstance(schema, dict):
        return None
    description = schema.get("description")
    if not isinstance(description, str) or not description.strip():
        return None
    text = " ".join(description.split()).replace("*/", "*\\/")
    return f"/** {text} */"


def _object_type(schema: dict[str, Any], indent: int) -> str:
    """Translate an object schema into an anonymous object type."""
    properties = schema.get("properties")
    if not isinstance(properties, dict) or not properties:
        return _fallback(schema, indent)

    required = schema.get("required")
    if isinstance(required, list):
        required_fields = {name for name in required if isinstance(name, str)}
    else:
        required_fields = set()

    fields: list[tuple[str | None, str]] = []
    for key, child in properties.items():
        key = str(key)
        marker = "" if key in required_fields else "?"
        field_type = resolve_schema_type(child, indent + 1)
        fields.append((_field_comment(child), f"{_field_name(key)}{marker}: {field_type}"))

    expanded = any(comment or "\n" in field for comment, field in fields)
    if not expanded:
        return "{ " + "; ".join(field for _, field in fields) + " }"

    pad = INDENT * (indent + 1)
    lines = ["{"]
    for i, (comment, field) in enumerate(fields):
        if comment:
            lines.append(pad + comment)
        separator = ";" if i < len(fields) - 1 else ""
        lines.append(pad + field + separator)
    lines.append(INDENT * indent + "}")
    return "\n".join(lines)
