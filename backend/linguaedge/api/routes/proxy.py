"""Catch-all proxy route.

Every method on every path is handed to the Edge Orchestrator; its
result is converted back into a Starlette response.
"""

import logging

from fastapi import APIRouter, Request, Response

from linguaedge.api.dependencies import Orchestrator
from linguaedge.core.edge.messages import EdgeRequest, EdgeResponse

logger = logging.getLogger(__name__)

router = APIRouter()

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def to_edge_request(request: Request, body: bytes) -> EdgeRequest:
    return EdgeRequest(
        method=request.method,
        url=str(request.url),
        headers=list(request.headers.items()),
        body=body,
    )


def to_response(result: EdgeResponse) -> Response:
    """Build a response carrying the exact status, headers and bytes."""
    response = Response(content=result.body, status_code=result.status)
    for name, value in result.headers:
        if name.lower() == "content-length":
            continue
        response.headers.append(name, value)
    return response


@router.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy(request: Request, path: str, orchestrator: Orchestrator) -> Response:
    """Serve any request through the orchestrator."""
    edge_request = to_edge_request(request, await request.body())
    result = await orchestrator.handle(edge_request)
    logger.debug(
        "%s %s -> %d (%s)",
        edge_request.method,
        edge_request.url,
        result.status,
        result.pipeline.value,
    )
    return to_response(result)
