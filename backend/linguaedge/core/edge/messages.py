"""Framework-independent request/response values used by the edge."""

from dataclasses import dataclass, field
from email.message import Message
from typing import Iterable, Optional

import httpx

from linguaedge.core.cache.page_cache import PageCacheEntry
from linguaedge.models.enums import PipelineKind

Headers = list[tuple[str, str]]


def get_header(headers: Iterable[tuple[str, str]], name: str) -> Optional[str]:
    name = name.lower()
    for key, value in headers:
        if key.lower() == name:
            return value
    return None


def without_headers(headers: Iterable[tuple[str, str]], *names: str) -> Headers:
    drop = {n.lower() for n in names}
    return [(k, v) for k, v in headers if k.lower() not in drop]


def with_headers(headers: Iterable[tuple[str, str]], **overrides: str) -> Headers:
    """Replace headers by name. ``content_language`` -> ``Content-Language``."""
    named = {k.replace("_", "-").title(): v for k, v in overrides.items()}
    result = without_headers(headers, *named)
    result.extend(named.items())
    return result


@dataclass
class EdgeRequest:
    """Inbound request as seen by the orchestrator."""

    method: str
    url: str
    headers: Headers = field(default_factory=list)
    body: bytes = b""

    @property
    def path(self) -> str:
        return httpx.URL(self.url).path or "/"

    @property
    def origin(self) -> str:
        """Scheme and host of the inbound URL."""
        url = httpx.URL(self.url)
        port = f":{url.port}" if url.port else ""
        return f"{url.scheme}://{url.host}{port}"


@dataclass
class EdgeResponse:
    """Response returned to the client.

    ``pipeline`` records which path produced the response; it is never
    sent to the client nor stored in the page cache.
    """

    status: int
    headers: Headers = field(default_factory=list)
    body: bytes = b""
    pipeline: PipelineKind = PipelineKind.PASSTHROUGH

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def content_type(self) -> str:
        return get_header(self.headers, "content-type") or ""

    @property
    def is_html(self) -> bool:
        return "html" in self.content_type.lower()

    @property
    def charset(self) -> str:
        message = Message()
        message["content-type"] = self.content_type or "text/html"
        return message.get_content_charset() or "utf-8"

    @property
    def text(self) -> str:
        try:
            return self.body.decode(self.charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")

    def with_text(self, text: str, headers: Optional[Headers] = None) -> "EdgeResponse":
        """New response carrying ``text`` re-encoded in this response's charset."""
        try:
            body = text.encode(self.charset, errors="xmlcharrefreplace")
        except LookupError:
            body = text.encode("utf-8")
        base = self.headers if headers is None else headers
        return EdgeResponse(
            status=self.status,
            headers=without_headers(base, "content-length"),
            body=body,
        )

    def to_cache_entry(self) -> PageCacheEntry:
        return PageCacheEntry(status=self.status, headers=tuple(self.headers), body=self.body)

    @classmethod
    def from_cache_entry(cls, entry: PageCacheEntry) -> "EdgeResponse":
        return cls(status=entry.status, headers=list(entry.headers), body=entry.body)
