"""Per-page-view engine state.

Everything the translation phases share lives on one ``EngineContext``
that is passed by reference into each phase. Both the cache and the
translated-marker are append-only for the lifetime of a page view.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional


class TranslationCache:
    """Mapping ``source text -> translated text`` for one page view.

    Once a source text is present (even mapped to itself) it is never
    requested again and its value is never replaced.
    """

    def __init__(self):
        self._entries: dict[str, str] = {}

    def get(self, source: str) -> Optional[str]:
        return self._entries.get(source)

    def set(self, source: str, translated: str) -> bool:
        """Record a translation. Returns False if the source was already known."""
        if source in self._entries:
            return False
        self._entries[source] = translated
        return True

    def __contains__(self, source: object) -> bool:
        return source in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class TranslatedMarker:
    """Identity set of nodes whose content came from a translation result.

    Membership is by object identity; the marker keeps a reference to
    each marked node so an identity can never be recycled for another
    node while the page view lives.
    """

    def __init__(self):
        self._nodes: dict[int, object] = {}

    def mark(self, node: object) -> None:
        self._nodes[id(node)] = node

    def __contains__(self, node: object) -> bool:
        return self._nodes.get(id(node)) is node

    def __len__(self) -> int:
        return len(self._nodes)


@dataclass
class EngineContext:
    """State owned by a single page view."""

    language: str
    cache: TranslationCache = field(default_factory=TranslationCache)
    marker: TranslatedMarker = field(default_factory=TranslatedMarker)
    # Source texts of batches currently on the wire
    pending: dict[str, "asyncio.Future[None]"] = field(default_factory=dict)
    started: bool = False
    revealed: bool = False
