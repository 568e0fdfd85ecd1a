"""Generate TypeScript types from the tools of an MCP server."""

__version__ = "1.0.0"
