"""Tests for the origin client and the project configuration service."""

import httpx
import pytest

from conftest import API_BASE, ORIGIN, FakeRemote
from linguaedge.core.cache.ttl_store import TTLStore
from linguaedge.core.edge.messages import EdgeRequest, get_header
from linguaedge.core.edge.origin import OriginClient
from linguaedge.core.edge.project_config import ProjectConfigService
from linguaedge.core.exceptions import OriginError


def make_service(remote: FakeRemote) -> ProjectConfigService:
    return ProjectConfigService(
        httpx.AsyncClient(transport=remote.transport()),
        store=TTLStore(default_ttl=3600),
        base_url=API_BASE,
        config_ttl=3600,
        language_names_ttl=3600 * 24,
    )


class TestOriginClient:
    """Forwarding rules."""

    def test_build_url_swaps_host_and_keeps_query(self):
        client = OriginClient(httpx.AsyncClient(), origin_url=ORIGIN + "/")
        assert client.build_url("https://shop.test/fr/about?x=1", path="/about") == ORIGIN + "/about?x=1"
        assert client.build_url("https://shop.test/a b") == ORIGIN + "/a%20b"

    def test_build_url_without_origin_uses_the_request_url(self):
        client = OriginClient(httpx.AsyncClient())
        assert client.build_url("https://shop.test/fr/about?x=1", path="/about") == "https://shop.test/about?x=1"

    @pytest.mark.asyncio
    async def test_fetch_strips_hop_by_hop_headers(self):
        seen = {}

        def handler(request):
            seen["headers"] = request.headers
            seen["content"] = request.content
            return httpx.Response(
                201,
                headers={"content-type": "text/plain", "connection": "close", "x-origin": "1"},
                content=b"created",
            )

        client = OriginClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)), origin_url=ORIGIN)
        response = await client.fetch(EdgeRequest(
            method="POST",
            url="https://shop.test/form",
            headers=[("Host", "shop.test"), ("Connection", "keep-alive"), ("Cookie", "a=1")],
            body=b"name=x",
        ))

        assert seen["headers"]["host"] == "origin.test"
        assert seen["headers"]["cookie"] == "a=1"
        assert seen["content"] == b"name=x"
        assert response.status == 201
        assert response.body == b"created"
        assert get_header(response.headers, "x-origin") == "1"
        assert get_header(response.headers, "connection") is None

    @pytest.mark.asyncio
    async def test_method_override_drops_the_body(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["content"] = request.content
            return httpx.Response(200)

        client = OriginClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)), origin_url=ORIGIN)
        await client.fetch(EdgeRequest(method="HEAD", url="https://shop.test/x", body=b""), method="GET")
        assert seen == {"method": "GET", "content": b""}

    @pytest.mark.asyncio
    async def test_redirects_are_returned_not_followed(self):
        def handler(request):
            return httpx.Response(302, headers={"location": "/elsewhere"})

        client = OriginClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)), origin_url=ORIGIN)
        response = await client.fetch(EdgeRequest(method="GET", url="https://shop.test/old"))
        assert response.status == 302
        assert get_header(response.headers, "location") == "/elsewhere"

    @pytest.mark.asyncio
    async def test_unreachable_origin_raises(self):
        remote = FakeRemote()
        remote.origin_down = True
        client = OriginClient(httpx.AsyncClient(transport=remote.transport()), origin_url=ORIGIN)
        with pytest.raises(OriginError):
            await client.fetch(EdgeRequest(method="GET", url="https://shop.test/"))


class TestProjectConfigService:
    """Cached lookups that never raise."""

    @pytest.mark.asyncio
    async def test_config_is_fetched_once_then_cached(self):
        remote = FakeRemote()
        service = make_service(remote)

        first = await service.get_project_config("test-key")
        second = await service.get_project_config("test-key")

        assert first == second
        assert first.default_language == "en"
        assert first.enabled_languages == ["fr", "de"]
        calls = remote.requests_to("/plan-status/")
        assert len(calls) == 1
        assert calls[0].url.params["api_key"] == "test-key"

    @pytest.mark.asyncio
    async def test_failure_returns_none_and_is_not_cached(self):
        remote = FakeRemote()
        remote.config_status = 503
        service = make_service(remote)

        assert await service.get_project_config("test-key") is None

        remote.config_status = 200
        assert (await service.get_project_config("test-key")).is_configured
        assert len(remote.requests_to("/plan-status/")) == 2

    @pytest.mark.asyncio
    async def test_missing_targets_is_not_configured(self):
        remote = FakeRemote()
        remote.project_config = {"default_language": "en"}
        config = await make_service(remote).get_project_config("test-key")
        assert config is not None
        assert not config.is_configured

    @pytest.mark.asyncio
    async def test_language_names_map(self):
        remote = FakeRemote()
        remote.languages.append({"code": "xx"})
        remote.languages.append("junk")
        service = make_service(remote)

        names = await service.get_language_names()
        await service.get_language_names()

        assert names == {"en": "English", "fr": "Français", "de": "Deutsch"}
        assert len(remote.requests_to("/languages/")) == 1

    @pytest.mark.asyncio
    async def test_language_names_failure_is_empty(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        service = ProjectConfigService(
            httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            store=TTLStore(default_ttl=60),
            base_url=API_BASE,
            config_ttl=60,
            language_names_ttl=60,
        )
        assert await service.get_language_names() == {}
        assert await service.get_project_config("test-key") is None
