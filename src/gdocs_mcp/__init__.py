"""
gdocs-mcp: MCP server for Google Docs editing.

This package provides a FastMCP-based server that exposes Google Docs
creation, reading, formatting and content editing through the Model Context
Protocol (MCP). All document state lives in Google Docs; every tool call
fetches the current document structure, resolves a text anchor against it and
submits one atomic batch of range mutations.
"""

__version__ = "0.1.0"
