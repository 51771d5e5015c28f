"""Centralized enum definitions.

All classification and dispatch enums are defined here for consistency.
"""

from enum import Enum
from typing import Optional


# =============================================================================
# Document Classification Enums
# =============================================================================


class TagKind(str, Enum):
    """Element kinds the translation engine distinguishes."""

    # Opaque: text directly inside is never sent for translation
    SCRIPT = "script"
    STYLE = "style"
    NOSCRIPT = "noscript"
    IFRAME = "iframe"
    CODE = "code"
    PRE = "pre"
    TEMPLATE = "template"

    # Document regions with special extraction rules
    HEAD = "head"
    BODY = "body"
    TITLE = "title"
    META = "meta"
    ANCHOR = "a"

    OTHER = "other"

    @classmethod
    def of(cls, name: Optional[str]) -> "TagKind":
        """Classify a tag name (case-insensitive)."""
        if not name:
            return cls.OTHER
        try:
            return cls(name.lower())
        except ValueError:
            return cls.OTHER

    @property
    def is_opaque(self) -> bool:
        return self in OPAQUE_KINDS


OPAQUE_KINDS = frozenset({
    TagKind.SCRIPT,
    TagKind.STYLE,
    TagKind.NOSCRIPT,
    TagKind.IFRAME,
    TagKind.CODE,
    TagKind.PRE,
    TagKind.TEMPLATE,
})


class TranslatableAttribute(str, Enum):
    """Attributes whose values are user-visible text."""

    ALT = "alt"
    TITLE = "title"
    PLACEHOLDER = "placeholder"
    ARIA_LABEL = "aria-label"


class HeadMeta(Enum):
    """Meta elements in <head> whose ``content`` is translated.

    Each value is the (attribute, value) selector of the meta element.
    ``og:site_name`` and ``author`` are never translated.
    """

    TITLE = ("name", "title")
    DESCRIPTION = ("name", "description")
    KEYWORDS = ("name", "keywords")
    OG_TITLE = ("property", "og:title")
    OG_DESCRIPTION = ("property", "og:description")
    TWITTER_TITLE = ("name", "twitter:title")
    TWITTER_DESCRIPTION = ("name", "twitter:description")

    @property
    def selector(self) -> dict[str, str]:
        key, value = self.value
        return {key: value}


class CandidateKind(str, Enum):
    """Origin of a translation candidate."""

    TEXT = "text"
    ATTRIBUTE = "attribute"


# =============================================================================
# Edge Dispatch Enums
# =============================================================================


class PipelineKind(str, Enum):
    """Which pipeline served an inbound request."""

    PASSTHROUGH = "passthrough"
    TRANSLATED = "translated"
    DEFAULT = "default"
    CACHED = "cached"
