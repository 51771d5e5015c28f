"""Server-side prerender: run the engine over an HTML string.

The page served to the browser already carries translated text, so
crawlers and slow clients see the target language without waiting on
the client-side engine.
"""

import logging
from dataclasses import dataclass

from bs4 import BeautifulSoup

from linguaedge.core.engine.batching import BatchTranslator
from linguaedge.core.engine.context import EngineContext
from linguaedge.core.engine.engine import PRERENDERED_ATTRIBUTE, TranslationEngine
from linguaedge.core.engine.layout import DEFAULT_FOLD_BUFFER, EstimatedLayout

logger = logging.getLogger(__name__)

BLUR_STYLE_ID = "__LE_BLUR__"
TRANSLATED_CLASS = "le-translated"


@dataclass(frozen=True)
class PrerenderResult:
    """Serialised page plus how many locations were translated."""

    html: str
    translated: int = 0

    @property
    def prerendered(self) -> bool:
        return self.translated > 0


def remove_blur(document: BeautifulSoup) -> None:
    """Drop the blur overlay and flag the document as translated."""
    style = document.find("style", id=BLUR_STYLE_ID)
    if style is not None:
        style.decompose()
    html = document.html
    if html is not None:
        classes = html.get("class") or []
        if TRANSLATED_CLASS not in classes:
            html["class"] = [*classes, TRANSLATED_CLASS]


async def prerender(
    html: str,
    language: str,
    translator: BatchTranslator,
    viewport_height: float,
    fold_buffer: float = DEFAULT_FOLD_BUFFER,
) -> PrerenderResult:
    """Translate ``html`` into ``language``.

    Runs bootstrap, priority and deferred phases to completion. When
    anything was translated the <html> element is flagged with
    ``data-le-prerendered``, which tells the browser engine to skip its
    own initial passes and only handle content inserted later.
    """
    document = BeautifulSoup(html, "lxml")
    context = EngineContext(language=language)
    engine = TranslationEngine(
        document=document,
        context=context,
        translator=translator,
        layout=EstimatedLayout(document, viewport_height),
        fold_buffer=fold_buffer,
        on_reveal=lambda: remove_blur(document),
    )
    try:
        await engine.start()
        await engine.wait_idle()
    finally:
        await engine.close()

    logger.info(
        "Prerendered page [%s]: %d cached texts, %d translated locations",
        language,
        len(context.cache),
        len(context.marker),
    )
    if context.marker and document.html is not None:
        document.html[PRERENDERED_ATTRIBUTE] = language
    return PrerenderResult(html=str(document), translated=len(context.marker))
