"""Convert MCP tool JSON schemas into zod schema expressions.

Used by the ``zod`` output mode. Unlike the TypeScript translator in
schema_parser this converter is strict: a construct it can't express
raises UnsupportedSchemaError, and the caller substitutes ``z.any()``
for that one schema.

Handles:
- Primitive types (integer becomes z.number().int())
- enum / const literals
- oneOf/anyOf unions and allOf intersections (same precedence as the
  TypeScript translator)
- Objects, optional fields, additionalProperties (catchall/strict/record)
- description -> .describe(), default -> .default()
"""

from __future__ import annotations

import json
import re
from typing import Any

from .errors import UnsupportedSchemaError

ANY = "z.any()"

_PRIMITIVES: dict[str, str] = {
    "string": "z.string()",
    "number": "z.number()",
    "integer": "z.number().int()",
    "boolean": "z.boolean()",
    "null": "z.null()",
}

# A primitive call (integers keep their .int() refinement), then any chain
# of modifier calls, then .default(null). Call arguments may hold quoted
# strings with parentheses in them. Quoted strings elsewhere (keys,
# descriptions) are matched whole and left untouched.
_STRING_LITERAL = r"\"(?:[^\"\\]|\\.)*\""
_NULLABLE_DEFAULT = re.compile(
    rf"(?P<literal>{_STRING_LITERAL})"
    r"|(?P<primitive>\.(?:string|number|boolean|date|bigint|symbol)\(\)(?:\.int\(\))?)"
    r"(?!\.int\(\)|\.nullable\(\))"
    rf"(?P<chain>(?:\.[a-z]+\((?:{_STRING_LITERAL}|[^()\"])*\))*?)"
    r"\.default\(null\)"
)


def _insert_nullable(match: re.Match[str]) -> str:
    if match["literal"] is not None:
        return match["literal"]
    return f"{match['primitive']}.nullable(){match['chain']}.default(null)"


def fix_nullable_defaults(expr: str) -> str:
    """Insert .nullable() on primitives whose default is null.

    zod rejects ``.default(null)`` on a schema that isn't nullable, so
    ``z.string().describe("x").default(null)`` becomes
    ``z.string().nullable().describe("x").default(null)``.
    """
    return _NULLABLE_DEFAULT.sub(_insert_nullable, expr)


def _js(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def schema_to_zod(schema: Any) -> str:
    """Convert a schema node to a zod expression string."""
    if schema is True:
        return ANY
    if not isinstance(schema, dict):
        raise UnsupportedSchemaError(
            f"Expected a schema object, got {type(schema).__name__}", schema,
        )
    if "$ref" in schema:
        raise UnsupportedSchemaError(f"$ref is not supported ({schema['$ref']})", schema)

    expr = _base_expression(schema)

    description = schema.get("description")
    if isinstance(description, str) and description:
        expr += f".describe({_js(description)})"
    if "default" in schema:
        expr += f".default({_js(schema['default'])})"
    return expr


def _base_expression(schema: dict[str, Any]) -> str:
    enum = schema.get("enum")
    if isinstance(enum, list) and enum:
        return _enum(enum, schema)
    if "const" in schema:
        return _literal(schema["const"], schema)

    for key in ("oneOf", "anyOf"):
        members = schema.get(key)
        if isinstance(members, list) and members:
            return _union([schema_to_zod(m) for m in members])

    members = schema.get("allOf")
    if isinstance(members, list) and members:
        parts = [schema_to_zod(m) for m in members]
        expr = parts[0]
        for part in parts[1:]:
            expr = f"z.intersection({expr}, {part})"
        return expr

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        if not schema_type:
            return ANY
        return _union([_base_expression({**schema, "type": t}) for t in schema_type])
    if schema_type is None:
        if "properties" in schema:
            return _object(schema)
        return ANY
    if not isinstance(schema_type, str):
        raise UnsupportedSchemaError(f"Invalid type {schema_type!r}", schema)
    if schema_type in _PRIMITIVES:
        return _PRIMITIVES[schema_type]
    if schema_type == "array":
        if "items" not in schema:
            return f"z.array({ANY})"
        return f"z.array({schema_to_zod(schema['items'])})"
    if schema_type == "object":
        return _object(schema)

    raise UnsupportedSchemaError(f"Unsupported type {schema_type!r}", schema)


def _literal(value: Any, schema: dict[str, Any]) -> str:
    if value is not None and not isinstance(value, (str, int, float, bool)):
        raise UnsupportedSchemaError(f"Cannot express literal {value!r}", schema)
    return f"z.literal({_js(value)})"


def _enum(values: list[Any], schema: dict[str, Any]) -> str:
    if len(values) == 1:
        return _literal(values[0], schema)
    if all(isinstance(v, str) for v in values):
        return f"z.enum([{', '.join(_js(v) for v in values)}])"
    return _union([_literal(v, schema) for v in values])


def _union(parts: list[str]) -> str:
    if len(parts) == 1:
        return parts[0]
    return f"z.union([{', '.join(parts)}])"


def _object(schema: dict[str, Any]) -> str:
    properties = schema.get("properties") or {}
    if not isinstance(properties, dict):
        raise UnsupportedSchemaError("properties must be an object", schema)

    required = schema.get("required")
    if isinstance(required, list):
        required_fields = {name for name in required if isinstance(name, str)}
    else:
        required_fields = set()
    extra = schema.get("additionalProperties")

    if not properties:
        if extra is True:
            return f"z.record(z.string(), {ANY})"
        if isinstance(extra, dict):
            return f"z.record(z.string(), {schema_to_zod(extra)})"
        return "z.object({}).strict()" if extra is False else "z.object({})"

    fields = []
    for key, child in properties.items():
        field = schema_to_zod(child)
        if key not in required_fields:
            field += ".optional()"
        fields.append(f"{_js(key)}: {field}")

    expr = "z.object({ " + ", ".join(fields) + " })"
    if extra is True:
        expr += f".catchall({ANY})"
    elif isinstance(extra, dict):
        expr += f".catchall({schema_to_zod(extra)})"
    elif extra is False:
        expr += ".strict()"
    return expr
