"""Inject module - HTML fragments added to proxied pages."""

from linguaedge.core.inject.injectors import (
    AUTO_DETECT_MARKER,
    CONTEXT_MARKER,
    ENGINE_MARKER,
    HREFLANG_MARKER,
    SWITCHER_MARKER,
    add_hreflang_links,
    inject_auto_language_detection,
    inject_language_context,
    inject_language_switcher,
    inject_translation_engine,
)
from linguaedge.core.inject.loader import AssetLoader, js_literal

__all__ = [
    "AUTO_DETECT_MARKER",
    "CONTEXT_MARKER",
    "ENGINE_MARKER",
    "HREFLANG_MARKER",
    "SWITCHER_MARKER",
    "add_hreflang_links",
    "inject_auto_language_detection",
    "inject_language_context",
    "inject_language_switcher",
    "inject_translation_engine",
    "AssetLoader",
    "js_literal",
]
