"""Translation engine - extraction, batching, application and link rewriting."""

from linguaedge.core.engine.apply import PassResult, apply_translations, translate_candidates
from linguaedge.core.engine.batching import BatchTranslator, TranslationClient
from linguaedge.core.engine.context import EngineContext, TranslatedMarker, TranslationCache
from linguaedge.core.engine.engine import PRERENDERED_ATTRIBUTE, TranslationEngine, is_prerendered
from linguaedge.core.engine.extraction import (
    Candidate,
    collect_attribute_candidates,
    collect_text_candidates,
    extract,
    is_opted_out,
)
from linguaedge.core.engine.layout import (
    AttributeLayout,
    EstimatedLayout,
    Layout,
    partition,
)
from linguaedge.core.engine.links import rewrite_href, rewrite_links
from linguaedge.core.engine.prerender import PrerenderResult, prerender, remove_blur

__all__ = [
    "PassResult",
    "apply_translations",
    "translate_candidates",
    "BatchTranslator",
    "TranslationClient",
    "EngineContext",
    "TranslatedMarker",
    "TranslationCache",
    "PRERENDERED_ATTRIBUTE",
    "TranslationEngine",
    "is_prerendered",
    "Candidate",
    "collect_attribute_candidates",
    "collect_text_candidates",
    "extract",
    "is_opted_out",
    "AttributeLayout",
    "EstimatedLayout",
    "Layout",
    "partition",
    "rewrite_href",
    "rewrite_links",
    "PrerenderResult",
    "prerender",
    "remove_blur",
]
