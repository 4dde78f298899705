import json

import httpx
import pytest

from wp_mcp.client import SiteApiError, WordPressClient
from wp_mcp.registry import InvalidParamsError, SiteRegistry
from wp_mcp.settings import Settings
from wp_mcp.sites import SiteConfig


def _build_registry(handler) -> SiteRegistry:
    transport = httpx.MockTransport(handler)
    return SiteRegistry(
        {
            "blog": WordPressClient(
                httpx.AsyncClient(transport=transport, base_url="http://blog.local/wp-json")
            ),
            "shop": WordPressClient(
                httpx.AsyncClient(transport=transport, base_url="http://shop.local/wp-json")
            ),
        }
    )


def test_from_settings_builds_one_client_per_site() -> None:
    settings = Settings(
        sites={
            "blog": SiteConfig(alias="blog", url="https://blog.example", username="u", secret="p"),
            "shop": SiteConfig(alias="shop", url="https://shop.example", username="u", secret="p"),
        }
    )
    registry = SiteRegistry.from_settings(settings)
    assert registry.aliases == ["blog", "shop"]
    assert len(registry) == 2
    assert "BLOG" in registry


@pytest.mark.anyio
async def test_lookup_is_case_insensitive() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"host": request.url.host})

    registry = _build_registry(handler)
    assert await registry.call_endpoint(" Shop ", "/") == {"host": "shop.local"}
    await registry.aclose()


@pytest.mark.anyio
async def test_unknown_site_is_invalid_params_and_registry_is_untouched() -> None:
    calls: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    registry = _build_registry(handler)
    with pytest.raises(InvalidParamsError, match="Unknown site: nowhere"):
        await registry.discover_endpoints("nowhere")
    with pytest.raises(InvalidParamsError):
        await registry.call_endpoint("nowhere", "/wp/v2/posts")

    assert calls == []
    assert registry.aliases == ["blog", "shop"]
    await registry.aclose()


@pytest.mark.anyio
@pytest.mark.parametrize(
    ("arguments", "message"),
    [
        ({"site": "", "endpoint": "/"}, "site"),
        ({"site": "blog", "endpoint": "  "}, "endpoint"),
        ({"site": "blog", "endpoint": "/", "method": "TRACE"}, "method"),
        ({"site": "blog", "endpoint": "/", "params": ["a"]}, "params"),
    ],
)
async def test_bad_arguments_are_invalid_params(arguments: dict, message: str) -> None:
    registry = _build_registry(lambda req: httpx.Response(200, json={}))
    with pytest.raises(InvalidParamsError, match=message):
        await registry.call_endpoint(**arguments)
    await registry.aclose()


@pytest.mark.anyio
async def test_call_endpoint_normalizes_method_case() -> None:
    seen: dict[str, httpx.Request] = {}

    async def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json={"id": 3})

    registry = _build_registry(handler)
    await registry.call_endpoint("blog", "/wp/v2/posts/3", "patch", {"status": "publish"})

    request = seen["request"]
    assert request.method == "PATCH"
    assert json.loads(request.content.decode()) == {"status": "publish"}
    await registry.aclose()


@pytest.mark.anyio
async def test_remote_failure_is_not_invalid_params() -> None:
    registry = _build_registry(lambda req: httpx.Response(500, text="boom"))
    with pytest.raises(SiteApiError):
        await registry.discover_endpoints("blog")
    await registry.aclose()
