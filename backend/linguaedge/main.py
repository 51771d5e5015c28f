"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx
import uvicorn
from fastapi import FastAPI

from linguaedge import __version__
from linguaedge.api.routes import health, proxy
from linguaedge.config import Settings, settings
from linguaedge.core.cache.page_cache import PageCache, PageCacheEntry
from linguaedge.core.cache.ttl_store import TTLStore
from linguaedge.core.edge.orchestrator import EdgeOrchestrator
from linguaedge.core.edge.origin import OriginClient
from linguaedge.core.edge.project_config import ProjectConfigService
from linguaedge.core.engine.batching import BatchTranslator, TranslationClient

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_orchestrator(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
    page_cache: PageCache,
) -> EdgeOrchestrator:
    """Wire the orchestrator and its collaborators around one HTTP client."""
    config_service = ProjectConfigService(
        http_client,
        store=TTLStore[Any](default_ttl=app_settings.config_cache_ttl),
        base_url=app_settings.api_base_url,
        config_ttl=app_settings.config_cache_ttl,
        language_names_ttl=app_settings.language_names_ttl,
        plan_status_endpoint=app_settings.plan_status_endpoint,
        languages_endpoint=app_settings.languages_endpoint,
        timeout=app_settings.collaborator_timeout,
    )
    origin = OriginClient(
        http_client,
        origin_url=app_settings.origin_url,
        timeout=app_settings.origin_timeout,
    )

    translator = None
    if app_settings.prerender and app_settings.api_key:
        translator = BatchTranslator(
            TranslationClient(
                http_client,
                url=app_settings.translate_url,
                api_key=app_settings.api_key,
                timeout=app_settings.translate_timeout,
            )
        )

    return EdgeOrchestrator(
        app_settings,
        origin=origin,
        config_service=config_service,
        page_cache=page_cache,
        translator=translator,
    )


def create_app(
    app_settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Create the application.

    Args:
        app_settings: Settings to run with (defaults to the environment)
        transport: Outbound transport for the shared HTTP client, lets
            tests stand in for the origin and the remote services

    Returns:
        Configured FastAPI application
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        if not app_settings.api_key:
            logger.warning("LINGUAEDGE_API_KEY is not set, every request is passed through")
        if not app_settings.origin_url:
            logger.warning("ORIGIN_URL is not set, inbound URLs are fetched as-is")

        http_client = httpx.AsyncClient(transport=transport)
        page_cache = PageCache(
            TTLStore[PageCacheEntry](
                default_ttl=app_settings.page_cache_ttl,
                max_entries=app_settings.page_cache_max_entries,
            )
        )
        orchestrator = build_orchestrator(app_settings, http_client, page_cache)

        app.state.settings = app_settings
        app.state.page_cache = page_cache
        app.state.orchestrator = orchestrator

        yield

        # Shutdown: let pending cache writes finish, then release connections
        await orchestrator.drain_background()
        await http_client.aclose()

    app = FastAPI(
        title=app_settings.app_name,
        description="On-the-fly per-locale translation proxy",
        version=__version__,
        lifespan=lifespan,
    )

    # Health first: the proxy route matches every path
    app.include_router(health.router, tags=["health"])
    app.include_router(proxy.router, tags=["proxy"])

    return app


app = create_app()


def run() -> None:
    """Console entry point."""
    uvicorn.run(
        "linguaedge.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
