"""Batch translation against the remote translation service.

Each pass sends at most one request. A source text is requested at most
once per page view: texts already cached, texts repeated within the
batch, and texts that are on the wire in another pass are dropped from
the request.
"""

import asyncio
import logging
from typing import Iterable, Optional

import httpx

from linguaedge.core.engine.context import EngineContext
from linguaedge.core.exceptions import CollaboratorError
from linguaedge.models.schemas import TranslateRequest, TranslationPair, parse_translation_pairs

logger = logging.getLogger(__name__)


class TranslationClient:
    """Thin client for ``POST /translate/``."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        url: str,
        api_key: str,
        timeout: Optional[float] = 10.0,
    ):
        """Initialize the client.

        Args:
            http_client: Shared async HTTP client
            url: Full URL of the translate endpoint
            api_key: Project API key sent with every batch
            timeout: Per-request timeout in seconds (None = no timeout)
        """
        self.http_client = http_client
        self.url = url
        self.api_key = api_key
        self.timeout = timeout

    async def translate(self, language: str, texts: list[str]) -> list[TranslationPair]:
        """Translate a batch.

        Raises:
            CollaboratorError: On transport failure, non-OK status or a
                non-JSON body
        """
        body = TranslateRequest(project_api_key=self.api_key, language=language, texts=texts)
        try:
            response = await self.http_client.post(
                self.url,
                json=body.model_dump(),
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise CollaboratorError(f"Translate request failed: {e}", endpoint=self.url) from e

        if not response.is_success:
            raise CollaboratorError(
                f"Translate request returned HTTP {response.status_code}",
                endpoint=self.url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise CollaboratorError("Translate response is not JSON", endpoint=self.url) from e

        return parse_translation_pairs(payload)


class BatchTranslator:
    """Deduplicating batch front-end over a ``TranslationClient``."""

    def __init__(self, client: TranslationClient):
        self.client = client

    async def translate(self, ctx: EngineContext, texts: Iterable[str]) -> int:
        """Make sure every text in ``texts`` has been requested once.

        Waits for batches already in flight that carry some of the texts.
        Never raises; a failed batch simply adds nothing to the cache.

        Returns:
            Number of new cache entries added by this call's own request
        """
        unique = list(dict.fromkeys(t for t in texts if t))
        in_flight = {ctx.pending[t] for t in unique if t in ctx.pending}
        to_send = [t for t in unique if t not in ctx.cache and t not in ctx.pending]

        added = 0
        if to_send:
            added = await self._send(ctx, to_send)

        if in_flight:
            await asyncio.gather(*in_flight)

        return added

    async def _send(self, ctx: EngineContext, texts: list[str]) -> int:
        done: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        for text in texts:
            ctx.pending[text] = done

        added = 0
        try:
            logger.debug("Sending batch of %d texts [%s]", len(texts), ctx.language)
            pairs = await self.client.translate(ctx.language, texts)
            for pair in pairs:
                if ctx.cache.set(pair.original, pair.translated):
                    added += 1
            if added < len(texts):
                logger.debug("Batch returned %d/%d translations", added, len(texts))
        except Exception as e:
            logger.warning("Translation batch failed [%s]: %s", ctx.language, e)
        finally:
            for text in texts:
                if ctx.pending.get(text) is done:
                    del ctx.pending[text]
            done.set_result(None)

        return added
