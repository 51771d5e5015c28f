"""Wire schemas for the remote collaborators.

These models describe the JSON exchanged with the configuration,
language-list and translation services.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


DEFAULT_LANGUAGE = "en"


class ProjectConfig(BaseModel):
    """Project plan: default language plus ordered target languages.

    ``target_languages`` stays ``None`` when the service omits it, which
    the orchestrator treats as "not configured". A value that is present
    but not a list degrades to an empty list.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    default_language: str = DEFAULT_LANGUAGE
    target_languages: Optional[list[str]] = None

    @field_validator("default_language", mode="before")
    @classmethod
    def _default_language(cls, value: Any) -> str:
        if isinstance(value, str) and value:
            return value
        return DEFAULT_LANGUAGE

    @field_validator("target_languages", mode="before")
    @classmethod
    def _target_languages(cls, value: Any) -> Optional[list[str]]:
        if value is None:
            return None
        if not isinstance(value, list):
            return []
        return [code for code in value if isinstance(code, str) and code]

    @property
    def enabled_languages(self) -> list[str]:
        return list(self.target_languages or [])

    @property
    def is_configured(self) -> bool:
        """A plan without a ``target_languages`` field is not usable."""
        return self.target_languages is not None


class LanguageEntry(BaseModel):
    """Single entry of the language-list response."""

    model_config = ConfigDict(extra="ignore")

    code: Optional[str] = None
    name: Optional[str] = None


class LanguageListResponse(BaseModel):
    """Response of ``GET /languages/``."""

    model_config = ConfigDict(extra="ignore")

    languages: list[Any] = []

    def to_name_map(self) -> dict[str, str]:
        """Convert to a code -> display name mapping, skipping malformed entries."""
        names: dict[str, str] = {}
        for raw in self.languages:
            if not isinstance(raw, dict):
                continue
            entry = LanguageEntry.model_validate(raw)
            if isinstance(entry.code, str) and entry.code and isinstance(entry.name, str) and entry.name:
                names[entry.code] = entry.name
        return names


class TranslateRequest(BaseModel):
    """Body of ``POST /translate/``."""

    project_api_key: str
    language: str
    texts: list[str]


class TranslationPair(BaseModel):
    """One ``{original, translated}`` entry of a translate response."""

    model_config = ConfigDict(extra="ignore")

    original: str
    translated: str


def parse_translation_pairs(payload: Any) -> list[TranslationPair]:
    """Extract the well-formed pairs from a translate response.

    Malformed or incomplete entries are skipped so a partially valid
    batch still yields its usable translations.
    """
    if not isinstance(payload, dict):
        return []
    entries = payload.get("translations")
    if not isinstance(entries, list):
        return []

    pairs = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        original = entry.get("original")
        translated = entry.get("translated")
        if isinstance(original, str) and original and isinstance(translated, str) and translated:
            pairs.append(TranslationPair(original=original, translated=translated))
    return pairs
