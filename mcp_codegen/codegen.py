"""Render templates and write generated output.

Takes the context from context_builder and produces the TypeScript
module (default: generated/mcp-tools.ts).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2
import structlog

TEMPLATE_DIR = Path(__file__).parent / "templates"
DEFAULT_OUTPUT = Path("generated") / "mcp-tools.ts"

logger = structlog.get_logger(__name__)


def js_literal(value: Any) -> str:
    """Render a value as a JavaScript literal."""
    return json.dumps(value, ensure_ascii=False)


def doc_comment(text: str, indent: str = "") -> str:
    """Render text as a JSDoc block, one ``*`` line per source line."""
    lines = str(text).replace("*/", "*\\/").splitlines() or [""]
    body = "\n".join(f"{indent} * {line}".rstrip() for line in lines)
    return f"{indent}/**\n{body}\n{indent} */"


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["js"] = js_literal
    env.filters["doc_comment"] = doc_comment
    return env


def render_module(context: dict[str, Any]) -> str:
    """Render the template for the context's mode."""
    template = _environment().get_template(f"{context['mode']}.ts.j2")
    return template.render(**context)


def write_output(path: Path, text: str) -> Path:
    """Write text to path, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def generate(context: dict[str, Any], output_path: Path = DEFAULT_OUTPUT) -> Path:
    """Render the module and write it to output_path."""
    output = render_module(context)
    written = write_output(output_path, output)
    logger.info("codegen.generated", path=str(written), tools=context["tool_count"])
    return written
