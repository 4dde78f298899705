"""
Core server bootstrap for the WordPress MCP server.

Wires the FastMCP instance, the site registry, and the tool registrations.
"""

import asyncio
import logging

from fastmcp import FastMCP

from wp_mcp.registry import SiteRegistry
from wp_mcp.settings import Settings
from wp_mcp.tools import SiteToolDependencies, register_site_tools

SERVER_NAME = "server-wp-mcp"


class ServerApp:
    """Owns the FastMCP app and the per-site clients for the process lifetime."""

    def __init__(self, settings: Settings) -> None:
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._registry: SiteRegistry | None = None
        self._tool_dependencies = SiteToolDependencies()
        self._mcp_app = FastMCP(
            name=SERVER_NAME,
            instructions=(
                "Discover and call REST API endpoints on the configured WordPress sites. "
                "Run wp_discover_endpoints first to learn which routes a site supports."
            ),
        )
        register_site_tools(self._mcp_app, self._tool_dependencies)

    def startup(self) -> None:
        """Build one client per configured site and attach them to the tools."""
        self._logger.info("Starting server bootstrap")
        self._registry = SiteRegistry.from_settings(self._settings)
        self._tool_dependencies.attach_registry(self._registry)

    def shutdown(self) -> None:
        """Release acquired resources."""
        self._logger.info("Shutting down server bootstrap")
        if self._registry is not None:
            asyncio.run(self._registry.aclose())
            self._registry = None
        self._tool_dependencies.detach_registry()

    def serve_forever(self) -> None:
        """Run the configured transport until interrupted."""
        transport = self._settings.mcp_transport
        if transport == "stdio":
            self._logger.info("Starting stdio transport")
            self._mcp_app.run(transport="stdio")
            return

        host = "0.0.0.0"
        port = self._settings.mcp_sse_port
        self._logger.info(
            "Starting %s transport", transport, extra={"host": host, "port": port}
        )
        self._mcp_app.run(transport=transport, host=host, port=port)

    async def serve_sse_async(self, host: str = "0.0.0.0") -> None:
        """Async helper for running the SSE transport (used by smoke tests)."""
        await self._mcp_app.run_http_async(
            transport="sse",
            host=host,
            port=self._settings.mcp_sse_port,
        )

    @property
    def registry(self) -> SiteRegistry | None:
        return self._registry

    @property
    def mcp(self) -> FastMCP:
        """Expose the configured FastMCP instance."""
        return self._mcp_app


def build_server(settings: Settings) -> ServerApp:
    """Factory used by main.py to create the configured server instance."""
    return ServerApp(settings)
