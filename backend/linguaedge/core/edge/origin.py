"""Origin fetch collaborator."""

import logging
from typing import Optional

import httpx

from linguaedge.core.edge.messages import EdgeRequest, EdgeResponse, without_headers
from linguaedge.core.exceptions import OriginError

logger = logging.getLogger(__name__)

# Never forwarded in either direction
HOP_BY_HOP_HEADERS = (
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "proxy-connection",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
)


class OriginClient:
    """Fetches pages from the origin site.

    When ``origin_url`` is unset the inbound URL itself is fetched, which
    is the right thing when the proxy sits on a route in front of the
    origin host.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        origin_url: Optional[str] = None,
        timeout: Optional[float] = 30.0,
    ):
        self.http_client = http_client
        self.origin_url = origin_url.rstrip("/") if origin_url else None
        self.timeout = timeout

    def build_url(self, request_url: str, path: Optional[str] = None) -> str:
        """Origin URL for a request, optionally with its path replaced.

        The query string is always preserved.
        """
        url = httpx.URL(request_url)
        if path is not None:
            url = url.copy_with(path=path or "/")
        if self.origin_url is None:
            return str(url)

        target = f"{self.origin_url}{url.raw_path.decode('ascii')}"
        return target

    async def fetch(
        self,
        request: EdgeRequest,
        path: Optional[str] = None,
        method: Optional[str] = None,
    ) -> EdgeResponse:
        """Forward ``request`` to the origin.

        Args:
            request: Inbound request
            path: Replacement path (canonical path for locale-prefixed requests)
            method: Replacement method; the body is dropped when it changes

        Raises:
            OriginError: When the origin cannot be reached at all
        """
        url = self.build_url(request.url, path)
        method = (method or request.method).upper()
        body = request.body if method == request.method.upper() else b""
        headers = without_headers(
            request.headers,
            "host",
            "content-length",
            "accept-encoding",
            *HOP_BY_HOP_HEADERS,
        )

        try:
            response = await self.http_client.request(
                method,
                url,
                headers=headers,
                content=body or None,
                timeout=self.timeout,
                follow_redirects=False,
            )
        except httpx.HTTPError as e:
            raise OriginError(f"Origin fetch failed: {e}", url=url) from e

        logger.debug("Origin %s %s -> %d", method, url, response.status_code)

        # httpx hands back a decoded body, so the encoding headers no longer apply
        return EdgeResponse(
            status=response.status_code,
            headers=without_headers(
                response.headers.multi_items(),
                "content-encoding",
                "content-length",
                *HOP_BY_HOP_HEADERS,
            ),
            body=response.content,
        )
