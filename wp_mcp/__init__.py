"""
WordPress MCP server package.

Exposes configured WordPress sites to MCP clients through two tools:
endpoint discovery and generic REST calls.
"""

__all__ = []
