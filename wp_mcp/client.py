"""
WordPress REST client wrapper.

One instance per configured site. Each call is independent; the only state
is the httpx client configured at construction time.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx

from wp_mcp.http_client import REST_ROOT, create_site_client
from wp_mcp.sites import SiteConfig

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "wp/v2"

_REST_ROOT_PREFIX = re.compile(rf"^{re.escape(REST_ROOT)}")


class SiteApiError(RuntimeError):
    """Represents failures when communicating with a WordPress site."""


def normalize_endpoint(endpoint: str) -> str:
    """Strip an optional ``/wp-json`` prefix and force a single leading slash."""
    path = _REST_ROOT_PREFIX.sub("", endpoint.strip())
    return "/" + path.lstrip("/")


@dataclass(slots=True)
class WordPressClient:
    """Typed wrapper around one site's AsyncClient."""

    _client: httpx.AsyncClient

    @classmethod
    def from_site(
        cls,
        site: SiteConfig,
        *,
        timeout: float,
        allow_insecure_tls: bool = False,
    ) -> "WordPressClient":
        """Factory that builds the client from a resolved site."""
        return cls(
            create_site_client(site, timeout=timeout, allow_insecure_tls=allow_insecure_tls)
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP resources."""
        await self._client.aclose()

    async def discover_endpoints(self) -> list[dict[str, Any]]:
        """List the routes advertised by the REST index, in the order returned."""
        index = await self._request("GET", "/")
        routes = index.get("routes") if isinstance(index, dict) else None
        if not isinstance(routes, dict):
            routes = {}

        endpoints = []
        for path, info in routes.items():
            info = info if isinstance(info, dict) else {}
            methods = info.get("methods")
            namespace = info.get("namespace")
            endpoints.append(
                {
                    "methods": methods if methods is not None else [],
                    "namespace": namespace if namespace is not None else DEFAULT_NAMESPACE,
                    "endpoints": [path],
                }
            )
        logger.debug("Discovered endpoints", extra={"count": len(endpoints)})
        return endpoints

    async def make_request(
        self,
        endpoint: str,
        method: str = "GET",
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Forward a request to the site and return the decoded body untouched."""
        method = (method or "GET").upper()
        path = normalize_endpoint(endpoint)

        kwargs: dict[str, Any] = {}
        if params is not None:
            if method == "GET":
                kwargs["params"] = params
            else:
                kwargs["json"] = params

        logger.debug("Forwarding request", extra={"method": method, "path": path})
        return await self._request(method, path, **kwargs)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Normalized request handler for all outgoing API calls."""

        def _transport_error(message: str, *, exc: Exception | None = None) -> SiteApiError:
            logger.error(
                message,
                extra={"method": method, "path": path},
                exc_info=exc,
            )
            return SiteApiError(message)

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise _transport_error(
                f"WordPress request timed out ({method} {path}).",
                exc=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise _transport_error(
                f"WordPress request failed ({method} {path}): {exc!s}",
                exc=exc,
            ) from exc

        if response.is_error:
            snippet = response.text.strip()
            if len(snippet) > 512:
                snippet = f"{snippet[:512]}..."
            logger.warning(
                "WordPress site responded with error",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "content": snippet,
                },
            )
            raise SiteApiError(
                f"WordPress API error ({response.status_code}) during {method} {path}: {snippet or 'no body provided.'}"
            )

        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            # Non-JSON bodies are passed through as text.
            return response.text
