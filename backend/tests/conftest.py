"""
Pytest configuration and fixtures for all tests.

Remote collaborators (origin site, configuration, language list and
translation services) are faked behind an ``httpx.MockTransport``; no
test touches the network.
"""

import asyncio
import json
from typing import Callable, Optional

import httpx
import pytest
from bs4 import BeautifulSoup

from linguaedge.config import Settings
from linguaedge.core.exceptions import CollaboratorError
from linguaedge.core.engine.batching import BatchTranslator
from linguaedge.core.engine.context import EngineContext
from linguaedge.core.inject.injectors import ENGINE_MARKER
from linguaedge.models.schemas import TranslationPair

API_BASE = "https://api.test"
ORIGIN = "https://origin.test"
SITE = "https://shop.test"


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def tagged(language: str, text: str) -> str:
    """Translation the fakes produce for ``text``."""
    return f"[{language}] {text}"


def engine_config(html: str) -> dict:
    """Config object embedded in the injected engine script."""
    script = parse(html).find("script", id=ENGINE_MARKER).string
    line = next(l for l in script.splitlines() if "var config =" in l)
    return json.loads(line.split("=", 1)[1].strip().rstrip(";"))


class FakeTranslationClient:
    """Stands in for ``TranslationClient`` and records every batch."""

    def __init__(
        self,
        translate: Optional[Callable[[str, str], Optional[str]]] = tagged,
        fail: bool = False,
        delay: float = 0.0,
    ):
        self._translate = translate
        self.fail = fail
        self.delay = delay
        self.calls: list[tuple[str, list[str]]] = []

    @property
    def requested(self) -> list[str]:
        return [text for _, texts in self.calls for text in texts]

    async def translate(self, language: str, texts: list[str]) -> list[TranslationPair]:
        self.calls.append((language, list(texts)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise CollaboratorError("Translate request failed", endpoint="/translate/")

        pairs = []
        for text in texts:
            translated = self._translate(language, text)
            if translated is not None:
                pairs.append(TranslationPair(original=text, translated=translated))
        return pairs


class FakeRemote:
    """Origin site plus the three remote services, served from memory."""

    def __init__(self):
        self.pages: dict[str, tuple[int, str, str]] = {}
        self.project_config: dict = {"default_language": "en", "target_languages": ["fr", "de"]}
        self.config_status = 200
        self.translate_status = 200
        self.languages = [
            {"code": "en", "name": "English"},
            {"code": "fr", "name": "Français"},
            {"code": "de", "name": "Deutsch"},
        ]
        self.origin_down = False
        self.requests: list[httpx.Request] = []

    def add_page(self, path: str, body: str, status: int = 200, content_type: str = "text/html; charset=utf-8"):
        self.pages[path] = (status, content_type, body)

    def requests_to(self, path: str, host: Optional[str] = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.path == path and (host is None or r.url.host == host)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.url.host == httpx.URL(API_BASE).host:
            return self._api(request)

        if self.origin_down:
            raise httpx.ConnectError("origin unreachable", request=request)

        page = self.pages.get(request.url.path)
        if page is None:
            return httpx.Response(404, headers={"content-type": "text/plain"}, text="not found")
        status, content_type, body = page
        return httpx.Response(status, headers={"content-type": content_type}, content=body.encode("utf-8"))

    def _api(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/plan-status/":
            return httpx.Response(self.config_status, json=self.project_config)
        if request.url.path == "/languages/":
            return httpx.Response(200, json={"languages": self.languages})
        if request.url.path == "/translate/":
            if self.translate_status != 200:
                return httpx.Response(self.translate_status)
            body = json.loads(request.content)
            translations = [
                {"original": text, "translated": tagged(body["language"], text)}
                for text in body["texts"]
            ]
            return httpx.Response(200, json={"translations": translations})
        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_settings(**overrides) -> Settings:
    values = {
        "api_key": "test-key",
        "api_base_url": API_BASE,
        "origin_url": ORIGIN,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def ctx():
    """Fresh per-page-view state for French."""
    return EngineContext(language="fr")


@pytest.fixture
def fake_client():
    return FakeTranslationClient()


@pytest.fixture
def translator(fake_client):
    return BatchTranslator(fake_client)


@pytest.fixture
def remote():
    remote = FakeRemote()
    remote.add_page(
        "/about",
        "<html><head><title>About us</title></head>"
        "<body><h1>About</h1><a href=\"/team\">Team</a></body></html>",
    )
    remote.add_page(
        "/",
        "<html><head><title>Home</title></head><body><p>Welcome</p></body></html>",
    )
    return remote


@pytest.fixture
def settings():
    return make_settings()
