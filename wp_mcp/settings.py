"""Environment-driven configuration utilities for the MCP server."""

import math
import os
from dataclasses import dataclass, field
from typing import Mapping

from dotenv import load_dotenv

from wp_mcp.sites import ConfigError, SiteConfig, resolve_sites

INSECURE_TLS_VAR = "WP_ALLOW_INSECURE_TLS"
TRANSPORTS = ("stdio", "sse", "http")


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for runtime configuration."""

    sites: dict[str, SiteConfig] = field(default_factory=dict)
    config_source: str = "environment"
    config_warnings: tuple[str, ...] = ()
    api_timeout: float = 30.0
    allow_insecure_tls: bool = False
    mcp_transport: str = "stdio"
    mcp_sse_port: int = 8000

    @classmethod
    def load(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can rely on a local .env file without
        exporting variables globally. Passing ``environ`` skips the .env lookup
        and reads only the given mapping.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        api_timeout_raw = environ.get("API_TIMEOUT", "").strip() or "30"
        try:
            api_timeout = float(api_timeout_raw)
        except ValueError as exc:
            raise ConfigError("API_TIMEOUT must be a numeric value.") from exc
        if not math.isfinite(api_timeout):
            raise ConfigError("API_TIMEOUT must be a finite number.")
        if api_timeout <= 0:
            raise ConfigError("API_TIMEOUT must be greater than zero.")

        mcp_sse_port_raw = environ.get("MCP_SSE_PORT", "").strip() or "8000"
        try:
            mcp_sse_port = int(mcp_sse_port_raw)
        except ValueError as exc:
            raise ConfigError("MCP_SSE_PORT must be an integer.") from exc
        if mcp_sse_port <= 0:
            raise ConfigError("MCP_SSE_PORT must be greater than zero.")

        mcp_transport = environ.get("MCP_TRANSPORT", "").strip().lower() or "stdio"
        if mcp_transport not in TRANSPORTS:
            raise ConfigError(f"MCP_TRANSPORT must be one of: {', '.join(TRANSPORTS)}.")

        allow_insecure_tls = environ.get(INSECURE_TLS_VAR, "").strip().lower() == "true"

        resolution = resolve_sites(environ)

        return cls(
            sites=resolution.sites,
            config_source=resolution.source,
            config_warnings=resolution.warnings,
            api_timeout=api_timeout,
            allow_insecure_tls=allow_insecure_tls,
            mcp_transport=mcp_transport,
            mcp_sse_port=mcp_sse_port,
        )
