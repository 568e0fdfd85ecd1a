"""Convert MCP tool names to TypeScript identifiers.

Pattern: <Prefix><PascalToolId><Suffix>
  - raw identifier: every char outside [A-Za-z0-9_] -> "_"
  - Pascal form:    split on "-", "_" and whitespace, capitalize each word
  - camel form:     Pascal form with a lower-case first char

Examples:
  get-weather        -> get_weather  -> GetWeather   -> getWeather
  search.files       -> search_files -> SearchFiles  -> searchFiles
  list users (v2)    -> list_users__v2_ -> ListUsersV2 -> listUsersV2

No collision handling: "do-thing" and "do_thing" both become DoThing,
and whichever tool comes last owns the declarations.

A declared name that would start with a digit gets a leading underscore:
  3d-render          -> 3d_render    -> 3dRender     -> _3dRenderParams
"""

from __future__ import annotations

import re

_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_]")
_WORD_SEPARATORS = re.compile(r"[-_\s]+")

PREFIX_STYLES = ("raw", "pascal")


def to_valid_identifier(name: str) -> str:
    """Replace every non-identifier character with an underscore."""
    return _INVALID_CHARS.sub("_", name)


def to_pascal_case(name: str) -> str:
    """Return ``name`` with each word capitalized and separators removed."""
    words = _WORD_SEPARATORS.split(name)
    return "".join(word[0].upper() + word[1:] for word in words if word)


def lower_first(name: str) -> str:
    """Lower-case the first character only."""
    if not name:
        return name
    return name[0].lower() + name[1:]


def to_camel_case(name: str) -> str:
    """Return the Pascal form of ``name`` with a lower-case first character."""
    return lower_first(to_pascal_case(name))


def type_base_name(tool_name: str) -> str:
    """Build the shared stem of a tool's declarations, e.g. 'GetWeather'."""
    return to_pascal_case(to_valid_identifier(tool_name))


def declared_name(name: str) -> str:
    """Make a generated name a valid TypeScript identifier (no leading digit)."""
    if name[:1].isdigit():
        return "_" + name
    return name


def format_prefix(prefix: str | None, style: str = "raw") -> str:
    """Normalize a caller-supplied name prefix.

    ``raw`` keeps the prefix as typed (invalid characters replaced),
    ``pascal`` converts it to PascalCase.
    """
    if not prefix:
        return ""
    if style not in PREFIX_STYLES:
        raise ValueError(f"Unknown prefix style {style!r}, expected one of {PREFIX_STYLES}")
    ident = to_valid_identifier(prefix)
    if style == "pascal":
        return to_pascal_case(ident)
    return ident
