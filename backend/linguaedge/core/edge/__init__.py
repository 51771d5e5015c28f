"""Edge module - request routing, origin fetch and page augmentation."""

from linguaedge.core.edge.messages import EdgeRequest, EdgeResponse
from linguaedge.core.edge.orchestrator import EdgeOrchestrator
from linguaedge.core.edge.origin import OriginClient
from linguaedge.core.edge.project_config import ProjectConfigService
from linguaedge.core.edge.routing import LocaleRoute, resolve_locale

__all__ = [
    "EdgeOrchestrator",
    "EdgeRequest",
    "EdgeResponse",
    "LocaleRoute",
    "OriginClient",
    "ProjectConfigService",
    "resolve_locale",
]
