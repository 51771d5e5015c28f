"""Write translation results back into the document."""

import logging
from dataclasses import dataclass
from typing import Sequence

from bs4.element import NavigableString

from linguaedge.core.engine.batching import BatchTranslator
from linguaedge.core.engine.context import EngineContext
from linguaedge.core.engine.extraction import Candidate
from linguaedge.models.enums import CandidateKind

logger = logging.getLogger(__name__)


@dataclass
class PassResult:
    """Outcome of one extraction -> batch -> apply pass."""

    candidates: int = 0
    new_translations: int = 0
    applied: int = 0


def _with_surrounding_whitespace(original: str, translated: str) -> str:
    stripped = original.strip()
    if not stripped:
        return translated
    start = original.find(stripped)
    return original[:start] + translated + original[start + len(stripped):]


def apply_translations(candidates: Sequence[Candidate], ctx: EngineContext) -> int:
    """Apply cached translations to their candidates and mark them.

    A candidate is only written when its location still holds the source
    text, so a location is never translated twice even when two passes
    picked it up. Untranslated candidates stay unmarked and remain
    eligible for a later pass.

    Returns:
        Number of locations written
    """
    applied = 0

    for candidate in candidates:
        translated = ctx.cache.get(candidate.source)
        if not translated or translated == candidate.source:
            continue
        if candidate.current_source() != candidate.source:
            continue

        if candidate.kind is CandidateKind.TEXT:
            replacement = NavigableString(
                _with_surrounding_whitespace(str(candidate.node), translated)
            )
            candidate.node.replace_with(replacement)
            ctx.marker.mark(replacement)
        else:
            candidate.node[candidate.attribute] = translated
            ctx.marker.mark(candidate.node)
        applied += 1

    return applied


async def translate_candidates(
    candidates: Sequence[Candidate],
    ctx: EngineContext,
    translator: BatchTranslator,
) -> PassResult:
    """Run one pass over an already extracted candidate list."""
    if not candidates:
        return PassResult()

    new_translations = await translator.translate(ctx, [c.source for c in candidates])
    applied = apply_translations(candidates, ctx)
    logger.debug(
        "Pass finished: %d candidates, %d new translations, %d applied",
        len(candidates),
        new_translations,
        applied,
    )
    return PassResult(candidates=len(candidates), new_translations=new_translations, applied=applied)
