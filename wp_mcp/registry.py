"""Alias-keyed registry of live site clients and the two dispatch operations."""

import logging
from typing import Any, Iterator, Mapping

from wp_mcp.client import WordPressClient
from wp_mcp.settings import Settings

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")


class InvalidParamsError(ValueError):
    """Raised when a tool invocation names an unknown site or has bad arguments."""


def _require_non_empty(value: Any, field_name: str) -> str:
    """Normalize and validate non-empty string arguments."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidParamsError(f"{field_name} must be a non-empty string.")
    return value.strip()


class SiteRegistry:
    """Read-only mapping of lower-cased alias to WordPressClient."""

    def __init__(self, clients: Mapping[str, WordPressClient]) -> None:
        self._clients = dict(clients)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SiteRegistry":
        """Build one client per resolved site."""
        clients = {
            alias: WordPressClient.from_site(
                site,
                timeout=settings.api_timeout,
                allow_insecure_tls=settings.allow_insecure_tls,
            )
            for alias, site in settings.sites.items()
        }
        return cls(clients)

    @property
    def aliases(self) -> list[str]:
        return list(self._clients)

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, alias: object) -> bool:
        return isinstance(alias, str) and alias.strip().lower() in self._clients

    def __iter__(self) -> Iterator[str]:
        return iter(self._clients)

    def get(self, site: Any) -> WordPressClient:
        """Look up a client by alias, case-insensitively."""
        alias = _require_non_empty(site, "site")
        client = self._clients.get(alias.lower())
        if client is None:
            raise InvalidParamsError(f"Unknown site: {alias}")
        return client

    async def aclose(self) -> None:
        """Close every client's HTTP resources."""
        for client in self._clients.values():
            await client.aclose()

    async def discover_endpoints(self, site: Any) -> list[dict[str, Any]]:
        client = self.get(site)
        return await client.discover_endpoints()

    async def call_endpoint(
        self,
        site: Any,
        endpoint: Any,
        method: Any = None,
        params: Any = None,
    ) -> Any:
        """
        Validate the call arguments, then forward the request to the site.

        ``method`` is matched case-insensitively here for direct callers; the
        MCP tool schema already restricts it to the upper-case names.
        """
        client = self.get(site)
        endpoint_value = _require_non_empty(endpoint, "endpoint")

        if method is None:
            method_value = "GET"
        elif isinstance(method, str) and method.strip().upper() in ALLOWED_METHODS:
            method_value = method.strip().upper()
        else:
            raise InvalidParamsError(
                f"method must be one of: {', '.join(ALLOWED_METHODS)}."
            )

        if params is not None and not isinstance(params, dict):
            raise InvalidParamsError("params must be an object.")

        return await client.make_request(endpoint_value, method_value, params)
