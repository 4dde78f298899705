"""HTTP client factory for talking to a WordPress REST API."""

import base64
import logging
import re

import httpx

from wp_mcp.sites import SiteConfig

logger = logging.getLogger(__name__)

REST_ROOT = "/wp-json"

_WHITESPACE = re.compile(r"\s+")


def build_basic_auth(username: str, secret: str) -> str:
    """
    Build the Basic auth header value for a site.

    Whitespace is removed from the secret only: WordPress application
    passwords are displayed in space-separated groups and often pasted that way.
    """
    credentials = f"{username}:{_WHITESPACE.sub('', secret)}"
    token = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def create_site_client(
    site: SiteConfig,
    *,
    timeout: float,
    allow_insecure_tls: bool = False,
) -> httpx.AsyncClient:
    """Build an AsyncClient bound to the site's REST root."""
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if site.secret:
        headers["Authorization"] = build_basic_auth(site.username, site.secret)

    if allow_insecure_tls:
        logger.warning(
            "TLS certificate verification is disabled for site %s",
            site.alias,
            extra={"site": site.alias, "url": site.url},
        )

    return httpx.AsyncClient(
        base_url=f"{site.url}{REST_ROOT}",
        headers=headers,
        timeout=timeout,
        verify=not allow_insecure_tls,
    )
