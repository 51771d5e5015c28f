"""Tests for locale-prefix routing and the edge message helpers."""

import pytest

from linguaedge.core.cache.page_cache import PageCacheEntry
from linguaedge.core.edge.messages import EdgeRequest, EdgeResponse, get_header, with_headers
from linguaedge.core.edge.routing import resolve_locale
from linguaedge.models.enums import PipelineKind

ENABLED = ["fr", "de"]


class TestResolveLocale:
    @pytest.mark.parametrize("path, language, canonical", [
        ("/fr/about", "fr", "/about"),
        ("/fr", "fr", "/"),
        ("/fr/", "fr", "/"),
        ("/de/shop/item/", "de", "/shop/item/"),
        ("/about", None, "/about"),
        ("/", None, "/"),
        ("/es/about", None, "/es/about"),
        ("/french/about", None, "/french/about"),
    ])
    def test_resolution(self, path, language, canonical):
        route = resolve_locale(path, ENABLED)
        assert route.language == language
        assert route.canonical_path == canonical
        assert route.is_translated is (language is not None)

    def test_no_targets_means_default(self):
        assert not resolve_locale("/fr/about", []).is_translated


class TestMessages:
    def test_request_path_and_origin(self):
        request = EdgeRequest(method="GET", url="https://shop.test:8443/fr/about?x=1")
        assert request.path == "/fr/about"
        assert request.origin == "https://shop.test:8443"

    def test_with_headers_replaces_case_insensitively(self):
        headers = with_headers(
            [("content-language", "en"), ("Content-Type", "text/html")],
            content_language="fr",
            cache_control="public, max-age=3600",
        )
        assert get_header(headers, "Content-Language") == "fr"
        assert get_header(headers, "cache-control") == "public, max-age=3600"
        assert len([h for h in headers if h[0].lower() == "content-language"]) == 1

    def test_text_round_trip_keeps_charset(self):
        response = EdgeResponse(
            status=200,
            headers=[("Content-Type", "text/html; charset=iso-8859-1"), ("Content-Length", "4")],
            body="café".encode("iso-8859-1"),
        )
        assert response.is_html
        assert response.text == "café"

        rewritten = response.with_text("crème")
        assert rewritten.body == "crème".encode("iso-8859-1")
        assert get_header(rewritten.headers, "content-length") is None

    def test_cache_entry_round_trip_is_byte_identical(self):
        response = EdgeResponse(
            status=200,
            headers=[("Content-Type", "text/html"), ("Content-Language", "fr")],
            body=b"<p>Bonjour</p>",
            pipeline=PipelineKind.TRANSLATED,
        )
        restored = EdgeResponse.from_cache_entry(response.to_cache_entry())
        assert isinstance(response.to_cache_entry(), PageCacheEntry)
        assert (restored.status, restored.headers, restored.body) == (
            response.status,
            response.headers,
            response.body,
        )
