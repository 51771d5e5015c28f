"""API dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from linguaedge.config import Settings
from linguaedge.core.cache.page_cache import PageCache
from linguaedge.core.edge.orchestrator import EdgeOrchestrator


def get_orchestrator(request: Request) -> EdgeOrchestrator:
    """The orchestrator built by the application lifespan."""
    return request.app.state.orchestrator


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_page_cache(request: Request) -> PageCache:
    return request.app.state.page_cache


Orchestrator = Annotated[EdgeOrchestrator, Depends(get_orchestrator)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Pages = Annotated[PageCache, Depends(get_page_cache)]
