"""Locale-prefix routing."""

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class LocaleRoute:
    """Result of matching a request path against the enabled languages.

    ``language`` is None for default-language requests, in which case
    ``canonical_path`` is the path unchanged.
    """

    language: Optional[str]
    canonical_path: str

    @property
    def is_translated(self) -> bool:
        return self.language is not None


def resolve_locale(path: str, enabled_languages: Sequence[str]) -> LocaleRoute:
    """Match the first path segment against the enabled target languages.

    ``/fr/about`` with ``fr`` enabled resolves to ``("fr", "/about")``;
    ``/fr`` resolves to ``("fr", "/")``.
    """
    segment, _, rest = path.lstrip("/").partition("/")
    if segment and segment in enabled_languages:
        return LocaleRoute(language=segment, canonical_path="/" + rest)
    return LocaleRoute(language=None, canonical_path=path or "/")
