"""Incremental translation engine for one page view.

Phases run strictly in order:

1. Bootstrap - rewrite the internal links already in the document
2. Priority - translate <head> and the above-fold part of <body>
   concurrently, then reveal the page (even if either pass failed)
3. Deferred - translate the below-fold part of <body> in the background
4. Incremental - every inserted element subtree is queued and translated
   (and its links rewritten) in insertion order by a single worker
"""

import asyncio
import logging
from typing import Callable, Iterable, Optional

from bs4 import BeautifulSoup
from bs4.element import PageElement, Tag

from linguaedge.core.engine.apply import PassResult, translate_candidates
from linguaedge.core.engine.batching import BatchTranslator
from linguaedge.core.engine.context import EngineContext
from linguaedge.core.engine.extraction import extract, is_opted_out
from linguaedge.core.engine.layout import DEFAULT_FOLD_BUFFER, Layout, partition
from linguaedge.core.engine.links import rewrite_links
from linguaedge.models.enums import TagKind

logger = logging.getLogger(__name__)

# Set on <html> by the server-side prerender, value is the language
PRERENDERED_ATTRIBUTE = "data-le-prerendered"


def is_prerendered(document: BeautifulSoup, language: str) -> bool:
    html = document.html
    return html is not None and html.get(PRERENDERED_ATTRIBUTE) == language


class TranslationEngine:
    """Drives the translation phases over a parsed document."""

    def __init__(
        self,
        document: BeautifulSoup,
        context: EngineContext,
        translator: BatchTranslator,
        layout: Layout,
        fold_buffer: float = DEFAULT_FOLD_BUFFER,
        on_reveal: Optional[Callable[[], None]] = None,
    ):
        """Initialize the engine.

        Args:
            document: Parsed page
            context: Per-page-view state (cache, marker, in-flight texts)
            translator: Batch front-end to the translation service
            layout: Geometry used for the above/below-fold split
            fold_buffer: Extra height below the viewport treated as priority
            on_reveal: Called once, when the priority phase has settled
        """
        self.document = document
        self.context = context
        self.translator = translator
        self.layout = layout
        self.fold_buffer = fold_buffer
        self.on_reveal = on_reveal

        self._queue: "asyncio.Queue[list[Tag]]" = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None
        self._deferred: Optional[asyncio.Task] = None

    @property
    def language(self) -> str:
        return self.context.language

    # =========================================================================
    # Phases
    # =========================================================================

    async def start(self) -> None:
        """Run bootstrap and priority phases, then schedule the deferred one.

        Returns once the page has been revealed. Calling it again is a no-op.
        A document already translated by the prerender is revealed straight
        away; only content inserted afterwards gets translated.
        """
        if self.context.started:
            return
        self.context.started = True

        self.bootstrap()
        self._ensure_worker()
        if is_prerendered(self.document, self.language):
            logger.debug("Document already prerendered [%s], skipping initial passes", self.language)
            self.reveal()
            return
        await self.translate_priority()
        self._deferred = asyncio.create_task(self._run_deferred())

    def bootstrap(self) -> int:
        changed = rewrite_links(self.document, self.language)
        logger.debug("Bootstrap rewrote %d links [%s]", changed, self.language)
        return changed

    async def translate_priority(self) -> None:
        """Head and above-fold body, concurrently; reveal when both settle."""
        jobs = []
        if self.document.head is not None:
            jobs.append(self.translate_root(self.document.head))
        if self.document.body is not None:
            jobs.append(self.translate_region(self.document.body, above_fold=True))

        try:
            results = await asyncio.gather(*jobs, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.warning("Priority translation pass failed: %s", result)
        finally:
            self.reveal()

    async def translate_deferred(self) -> PassResult:
        if self.document.body is None:
            return PassResult()
        return await self.translate_region(self.document.body, above_fold=False)

    def reveal(self) -> None:
        if self.context.revealed:
            return
        self.context.revealed = True
        if self.on_reveal is not None:
            self.on_reveal()

    async def translate_root(self, root: Tag) -> PassResult:
        """Extract, translate and apply over a whole subtree."""
        candidates = extract(root, self.context)
        return await translate_candidates(candidates, self.context, self.translator)

    async def translate_region(self, root: Tag, above_fold: bool) -> PassResult:
        """Translate one side of the fold under ``root``.

        Geometry is read once, when the pass starts.
        """
        candidates = extract(root, self.context)
        self.layout.refresh()
        priority, deferred = partition(candidates, self.layout, self.fold_buffer)
        selected = priority if above_fold else deferred
        return await translate_candidates(selected, self.context, self.translator)

    async def _run_deferred(self) -> None:
        try:
            result = await self.translate_deferred()
            logger.debug("Deferred pass applied %d translations", result.applied)
        except Exception as e:
            logger.warning("Deferred translation pass failed: %s", e)

    # =========================================================================
    # Incremental translation of inserted content
    # =========================================================================

    def notify_inserted(self, nodes: Iterable[PageElement]) -> int:
        """Queue newly inserted nodes for translation.

        Only elements inside <body> that are neither marked translated nor
        under a ``translate="no"`` ancestor are accepted. All accepted nodes
        of one notification form a single task.

        Returns:
            Number of nodes queued
        """
        accepted = [
            node for node in nodes
            if isinstance(node, Tag)
            and node not in self.context.marker
            and self._in_body(node)
            and not is_opted_out(node)
        ]
        if accepted:
            self._ensure_worker()
            self._queue.put_nowait(accepted)
        return len(accepted)

    def insert(self, parent: Tag, node: PageElement, index: Optional[int] = None) -> int:
        """Insert ``node`` under ``parent`` and queue it for translation."""
        if index is None:
            parent.append(node)
        else:
            parent.insert(index, node)
        return self.notify_inserted([node])

    async def translate_inserted(self, node: Tag) -> PassResult:
        result = await self.translate_root(node)
        rewrite_links(node, self.language)
        return result

    async def wait_idle(self) -> None:
        """Wait for the deferred pass and every queued insertion task."""
        if self._deferred is not None:
            await asyncio.shield(self._deferred)
        await self._queue.join()

    async def close(self) -> None:
        for task in (self._worker, self._deferred):
            if task is not None and not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._worker = None

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._drain())

    async def _drain(self) -> None:
        while True:
            nodes = await self._queue.get()
            try:
                for node in nodes:
                    if node.parent is None:
                        # Removed again before its turn
                        continue
                    await self.translate_inserted(node)
            except Exception as e:
                logger.warning("Incremental translation task failed: %s", e)
            finally:
                self._queue.task_done()

    def _in_body(self, node: Tag) -> bool:
        body = self.document.find(TagKind.BODY.value)
        if body is None:
            return False
        if node is body:
            return True
        return any(parent is body for parent in node.parents)
