"""MCP tool registrations for the WordPress server."""

import json
import logging
from dataclasses import dataclass
from typing import Annotated, Any, Awaitable, Callable, Literal

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from wp_mcp.client import SiteApiError
from wp_mcp.registry import InvalidParamsError, SiteRegistry

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH"]


@dataclass
class SiteToolDependencies:
    """Runtime dependencies required by the MCP tools."""

    registry: SiteRegistry | None = None

    def attach_registry(self, registry: SiteRegistry) -> None:
        self.registry = registry

    def detach_registry(self) -> None:
        self.registry = None

    def require_registry(self) -> SiteRegistry:
        if self.registry is None:
            raise RuntimeError("Site registry is not initialized.")
        return self.registry


def render_json(payload: Any) -> str:
    """Pretty-print a tool result the way MCP clients expect to read it."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


def register_site_tools(
    mcp: FastMCP,
    dependencies: SiteToolDependencies,
) -> None:
    """Register MCP tools that proxy to the configured WordPress sites."""

    def _log_tool_event(tool_name: str, event: str, **fields: object) -> None:
        logger.info(
            "site_tool_event",
            extra={"tool": tool_name, "event": event, **fields},
        )

    async def _with_error_handling(
        tool_name: str,
        site: str,
        action: Callable[[], Awaitable[Any]],
    ) -> str:
        try:
            result = await action()
        except InvalidParamsError as exc:
            _log_tool_event(tool_name, "invalid_params", site=site, error=str(exc))
            raise ToolError(f"Invalid params: {exc}") from exc
        except SiteApiError as exc:
            logger.warning("%s failed due to site error", tool_name, exc_info=True)
            _log_tool_event(tool_name, "api_error", site=site, error=str(exc))
            raise ToolError(f"Site request failed: {exc}") from exc
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s failed unexpectedly", tool_name)
            _log_tool_event(tool_name, "unexpected_error", site=site, error=str(exc))
            raise ToolError(f"Unexpected error: {exc}") from exc

        _log_tool_event(tool_name, "success", site=site)
        return render_json(result)

    @mcp.tool(
        name="wp_discover_endpoints",
        description="The discovery operation maps all available REST API endpoints on a WordPress site and returns their methods and namespaces. This allows you to understand what operations are possible on a target WordPress site without having to manually specify endpoints, which is important because different WordPress websites can have many different and varying endpoints.",
    )
    async def wp_discover_endpoints(
        site: Annotated[str, Field(description="Site alias")],
    ) -> str:
        """Return the routes advertised by the site's REST index."""
        registry = dependencies.require_registry()
        return await _with_error_handling(
            "wp_discover_endpoints",
            site,
            lambda: registry.discover_endpoints(site),
        )

    @mcp.tool(
        name="wp_call_endpoint",
        description="The call operation executes specific REST API requests to the target WordPress sites using provided parameters and authentication. It handles both read and write operations. It determines which endpoint to use after the discovery operation is conducted.",
    )
    async def wp_call_endpoint(
        site: Annotated[str, Field(description="Site alias")],
        endpoint: Annotated[str, Field(description="REST route, e.g. '/wp/v2/posts'. A leading '/wp-json' is ignored.")],
        method: Annotated[HttpMethod, Field(description="HTTP method.")] = "GET",
        params: Annotated[
            dict[str, Any] | None,
            Field(description="Query parameters for GET, JSON body for every other method."),
        ] = None,
    ) -> str:
        """Forward a REST call to the site and return its response body."""
        registry = dependencies.require_registry()
        return await _with_error_handling(
            "wp_call_endpoint",
            site,
            lambda: registry.call_endpoint(site, endpoint, method, params),
        )

    logger.info("WordPress MCP tools registered.")
