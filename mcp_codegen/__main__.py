"""Entry point: python -m mcp_codegen

Connects to an MCP server (or reads a saved tools/list JSON file),
generates TypeScript declarations for its tools, and writes them to
generated/mcp-tools.ts by default.

Examples:
  mcp-codegen --command "mcp-server"
  mcp-codegen --command "node" --args "./server.js,--port,3000"
  mcp-codegen --server "http://localhost:3000/mcp" --prefix acme --prefix-style pascal
  mcp-codegen --input tools.json --mode zod
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import httpx
import structlog
from mcp.shared.exceptions import McpError

from .codegen import DEFAULT_OUTPUT, generate
from .context_builder import MODES, build_context
from .errors import CodegenError
from .loader import ToolDescriptor, fetch_tools, load_tools_file
from .logging_config import configure_logging
from .naming import PREFIX_STYLES, format_prefix

logger = structlog.get_logger(__name__)

_CONNECTION_ERRORS = (OSError, httpx.HTTPError, McpError, ExceptionGroup)

_EXAMPLES = """\
examples:
  mcp-codegen --command "mcp-server"
  mcp-codegen --command "node" --args "./server.js,--port,3000"
  mcp-codegen --server "http://localhost:3000/mcp"
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="mcp-codegen",
        description="Generate TypeScript types from MCP server tools",
        epilog=_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--command", help="Command to spawn the MCP server (stdio transport)")
    parser.add_argument("-a", "--args", help="Comma-separated args for the command")
    parser.add_argument("-s", "--server", help="URL of an HTTP MCP server (streamable HTTP transport)")
    parser.add_argument("-i", "--input", help="Read tools from a JSON file instead of a server")
    parser.add_argument(
        "-o", "--output",
        default=str(DEFAULT_OUTPUT),
        help=f"Output file path (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument("-p", "--prefix", default="", help="Prefix for every generated name")
    parser.add_argument(
        "--prefix-style",
        choices=PREFIX_STYLES,
        default="raw",
        help="Use the prefix as typed (raw) or PascalCased (default: raw)",
    )
    parser.add_argument(
        "-m", "--mode",
        choices=MODES,
        default="types",
        help="Emit plain TypeScript types or zod schemas (default: types)",
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Print raw tool schemas from the server",
    )
    return parser


def _split_args(args: str | None) -> list[str]:
    return args.split(",") if args else []


def _describe_source(args: argparse.Namespace) -> str:
    if args.input:
        return args.input
    if args.server:
        return args.server
    return " ".join([args.command, *_split_args(args.args)])


def print_schemas(tools: list[ToolDescriptor]) -> None:
    """Dump raw input/output schemas to the console."""
    print("\nRaw tool schemas from server:")
    for tool in tools:
        print(f"\n--- {tool.name} ---")
        print("inputSchema:", json.dumps(tool.input_schema, indent=2))
        if tool.output_schema is not None:
            print("outputSchema:", json.dumps(tool.output_schema, indent=2))
        else:
            print("outputSchema: (not defined)")
    print()


def collect_tools(args: argparse.Namespace) -> list[ToolDescriptor]:
    """Fetch tool descriptors from the configured source."""
    if args.input:
        return load_tools_file(Path(args.input))
    return asyncio.run(fetch_tools(
        command=args.command,
        args=_split_args(args.args),
        server_url=args.server,
    ))


def run(args: argparse.Namespace) -> int:
    """Run the fetch -> translate -> render -> write pipeline."""
    try:
        tools = collect_tools(args)
    except _CONNECTION_ERRORS as exc:
        logger.error("codegen.source_failed", source=_describe_source(args), error=repr(exc))
        return 1

    if args.debug:
        print_schemas(tools)

    if not tools:
        logger.warning("codegen.no_tools", source=_describe_source(args))
        return 0

    context = build_context(
        tools,
        prefix=format_prefix(args.prefix, args.prefix_style),
        mode=args.mode,
        source=_describe_source(args),
    )
    generate(context, Path(args.output).resolve())
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.debug else "INFO")

    if not (args.command or args.server or args.input):
        print("Error: Must specify either --command, --server or --input\n", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    try:
        return run(args)
    except CodegenError as exc:
        logger.error("codegen.failed", error=str(exc))
        return 1
    except Exception:
        logger.exception("codegen.failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
