"""Filesystem tools confined to allowed directories, returning MCP-style tool results."""

__version__ = "0.1.0"