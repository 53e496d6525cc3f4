"""Command client and MCP server for the GoXLR Utility daemon."""

__version__ = "0.1.0"
