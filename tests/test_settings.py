import pytest

from wp_mcp.settings import Settings
from wp_mcp.sites import ConfigError

SITE_ENV = {
    "WP_NAME": "blog",
    "WP_URL_OVERRIDE": "https://blog.example",
    "WP_USER_OVERRIDE": "admin",
    "WP_PASS_OVERRIDE": "secret",
}


def test_defaults() -> None:
    settings = Settings.load(SITE_ENV)
    assert list(settings.sites) == ["blog"]
    assert settings.config_source == "environment"
    assert settings.api_timeout == 30.0
    assert settings.allow_insecure_tls is False
    assert settings.mcp_transport == "stdio"
    assert settings.mcp_sse_port == 8000


@pytest.mark.parametrize(
    ("value", "expected"),
    [("true", True), (" TRUE ", True), ("1", False), ("yes", False), ("", False)],
)
def test_insecure_tls_toggle(value: str, expected: bool) -> None:
    settings = Settings.load({**SITE_ENV, "WP_ALLOW_INSECURE_TLS": value})
    assert settings.allow_insecure_tls is expected


def test_overrides() -> None:
    settings = Settings.load(
        {**SITE_ENV, "API_TIMEOUT": "2.5", "MCP_TRANSPORT": "SSE", "MCP_SSE_PORT": "9000"}
    )
    assert settings.api_timeout == 2.5
    assert settings.mcp_transport == "sse"
    assert settings.mcp_sse_port == 9000


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"API_TIMEOUT": "soon"}, "API_TIMEOUT"),
        ({"API_TIMEOUT": "0"}, "API_TIMEOUT"),
        ({"API_TIMEOUT": "inf"}, "API_TIMEOUT must be a finite number"),
        ({"API_TIMEOUT": "nan"}, "API_TIMEOUT must be a finite number"),
        ({"MCP_SSE_PORT": "http"}, "MCP_SSE_PORT"),
        ({"MCP_TRANSPORT": "carrier-pigeon"}, "MCP_TRANSPORT"),
    ],
)
def test_invalid_scalars_raise_config_error(overrides: dict, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        Settings.load({**SITE_ENV, **overrides})


def test_missing_site_configuration_is_fatal() -> None:
    with pytest.raises(ConfigError, match="WP_SITES_PATH"):
        Settings.load({})
