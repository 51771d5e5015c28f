"""Models package - enums and wire schemas."""

from linguaedge.models.enums import (
    CandidateKind,
    HeadMeta,
    OPAQUE_KINDS,
    PipelineKind,
    TagKind,
    TranslatableAttribute,
)
from linguaedge.models.schemas import (
    DEFAULT_LANGUAGE,
    LanguageEntry,
    LanguageListResponse,
    ProjectConfig,
    TranslationPair,
    TranslateRequest,
    parse_translation_pairs,
)

__all__ = [
    "CandidateKind",
    "HeadMeta",
    "OPAQUE_KINDS",
    "PipelineKind",
    "TagKind",
    "TranslatableAttribute",
    "DEFAULT_LANGUAGE",
    "LanguageEntry",
    "LanguageListResponse",
    "ProjectConfig",
    "TranslationPair",
    "TranslateRequest",
    "parse_translation_pairs",
]
