"""Edge Orchestrator - decides, per request, how a page is served.

Flow:
    no API key / no project config      -> passthrough
    /<lang>/... with <lang> enabled      -> translated page pipeline
    anything else                        -> default page pipeline

Any failure inside a pipeline degrades to forwarding the original
request unmodified; translation problems must never break the site.
"""

import asyncio
import logging
from typing import Mapping, Optional

from linguaedge.config import Settings
from linguaedge.core.cache.page_cache import PageCache
from linguaedge.core.edge.messages import EdgeRequest, EdgeResponse, with_headers
from linguaedge.core.edge.origin import OriginClient
from linguaedge.core.edge.project_config import ProjectConfigService
from linguaedge.core.edge.routing import LocaleRoute, resolve_locale
from linguaedge.core.engine.batching import BatchTranslator
from linguaedge.core.engine.prerender import PrerenderResult, prerender
from linguaedge.core.inject.injectors import (
    add_hreflang_links,
    inject_auto_language_detection,
    inject_language_context,
    inject_language_switcher,
    inject_translation_engine,
)
from linguaedge.models.enums import PipelineKind
from linguaedge.models.schemas import ProjectConfig

logger = logging.getLogger(__name__)

CACHEABLE_METHODS = ("GET", "HEAD")


class EdgeOrchestrator:
    """Routes inbound requests through passthrough, translated or default pipelines."""

    def __init__(
        self,
        settings: Settings,
        origin: OriginClient,
        config_service: ProjectConfigService,
        page_cache: PageCache,
        translator: Optional[BatchTranslator] = None,
    ):
        """Initialize the orchestrator.

        Args:
            settings: Application settings (API key, TTLs, engine tuning)
            origin: Origin fetch collaborator
            config_service: Project config / language names collaborator
            page_cache: Cache of augmented pages keyed by (URL, language)
            translator: Batch translator, only needed when prerender is on
        """
        self.settings = settings
        self.origin = origin
        self.config_service = config_service
        self.page_cache = page_cache
        self.translator = translator
        self._background: set[asyncio.Task] = set()

    async def handle(self, request: EdgeRequest) -> EdgeResponse:
        """Serve one inbound request. Never raises."""
        try:
            return await self._dispatch(request)
        except Exception as e:
            logger.warning("Pipeline failed for %s %s, passing through: %s", request.method, request.url, e)
            return await self.passthrough(request)

    async def passthrough(self, request: EdgeRequest) -> EdgeResponse:
        """Forward the request unmodified."""
        try:
            return await self.origin.fetch(request)
        except Exception as e:
            logger.error("Passthrough failed for %s %s: %s", request.method, request.url, e)
            return EdgeResponse(status=502)

    async def _dispatch(self, request: EdgeRequest) -> EdgeResponse:
        api_key = self.settings.api_key
        if not api_key:
            return await self.passthrough(request)

        project_config = await self.config_service.get_project_config(api_key)
        if project_config is None or not project_config.is_configured:
            logger.debug("No usable project configuration, passing through")
            return await self.passthrough(request)

        language_names = await self.config_service.get_language_names()
        route = resolve_locale(request.path, project_config.enabled_languages)

        if route.is_translated:
            return await self.translated_page(request, route, project_config, language_names)
        return await self.default_page(request, project_config, language_names)

    # =========================================================================
    # Translated page pipeline
    # =========================================================================

    async def translated_page(
        self,
        request: EdgeRequest,
        route: LocaleRoute,
        project_config: ProjectConfig,
        language_names: Mapping[str, str],
    ) -> EdgeResponse:
        language = route.language
        if request.method.upper() not in CACHEABLE_METHODS:
            # Form posts and the like go to the canonical path, untouched
            return await self.origin.fetch(request, path=route.canonical_path)

        cached = await self.page_cache.get(request.url, language)
        if cached is not None:
            response = EdgeResponse.from_cache_entry(cached)
            response.pipeline = PipelineKind.CACHED
            return response

        response = await self.origin.fetch(request, path=route.canonical_path, method="GET")
        if not response.is_success or not response.is_html:
            return response

        html = response.text
        prerendered = False
        if self.settings.prerender and self.translator is not None:
            result = await self._prerender(html, language)
            html, prerendered = result.html, result.prerendered

        html = self.augment_translated(
            html,
            language=language,
            pathname=route.canonical_path,
            project_config=project_config,
            language_names=language_names,
            origin=self.settings.domain or request.origin,
            prerendered=prerendered,
        )

        headers = with_headers(
            response.headers,
            content_language=language,
            cache_control=f"public, max-age={self.settings.page_cache_ttl}",
        )
        final = response.with_text(html, headers=headers)
        final.pipeline = PipelineKind.TRANSLATED

        if request.method.upper() == "GET":
            self._store_in_background(request.url, language, final)
        return final

    def augment_translated(
        self,
        html: str,
        language: str,
        pathname: str,
        project_config: ProjectConfig,
        language_names: Mapping[str, str],
        origin: str,
        prerendered: bool = False,
    ) -> str:
        """Apply the translated-page injectors in order."""
        html = inject_translation_engine(
            html,
            language=language,
            api_key=self.settings.api_key or "",
            translate_url=self.settings.translate_url,
            fold_buffer=self.settings.fold_buffer,
            reveal_delay_ms=self.settings.reveal_delay_ms,
            timeout_ms=int(self.settings.translate_timeout * 1000),
            prerendered=prerendered,
        )
        html = inject_language_context(html, language)
        html = add_hreflang_links(html, pathname, project_config, origin)
        html = inject_language_switcher(html, project_config, language_names)
        return html

    async def _prerender(self, html: str, language: str) -> PrerenderResult:
        try:
            return await prerender(
                html,
                language=language,
                translator=self.translator,
                viewport_height=self.settings.viewport_height,
                fold_buffer=self.settings.fold_buffer,
            )
        except Exception as e:
            logger.warning("Prerender failed [%s], serving client-side engine only: %s", language, e)
            return PrerenderResult(html=html)

    # =========================================================================
    # Default page pipeline
    # =========================================================================

    async def default_page(
        self,
        request: EdgeRequest,
        project_config: ProjectConfig,
        language_names: Mapping[str, str],
    ) -> EdgeResponse:
        response = await self.origin.fetch(request)
        if not response.is_success or not response.is_html:
            return response

        html = inject_auto_language_detection(response.text, project_config)
        html = inject_language_switcher(html, project_config, language_names)
        final = response.with_text(html)
        final.pipeline = PipelineKind.DEFAULT
        return final

    # =========================================================================
    # Fire-and-forget persistence
    # =========================================================================

    def _store_in_background(self, url: str, language: str, response: EdgeResponse) -> None:
        task = asyncio.create_task(self.page_cache.put(url, language, response.to_cache_entry()))
        self._background.add(task)
        task.add_done_callback(self._on_store_done)

    def _on_store_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Background page cache write failed: %s", task.exception())

    async def drain_background(self) -> None:
        """Wait for pending cache writes (shutdown and tests)."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
