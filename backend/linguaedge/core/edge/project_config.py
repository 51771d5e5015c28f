"""Project configuration and language-name collaborators, with TTL caching."""

import logging
from typing import Any, Optional

import httpx

from linguaedge.core.cache.ttl_store import TTLStore
from linguaedge.core.exceptions import CollaboratorError
from linguaedge.models.schemas import LanguageListResponse, ProjectConfig

logger = logging.getLogger(__name__)

LANGUAGE_NAMES_KEY = "language_names"


def project_config_key(api_key: str) -> str:
    return f"project_config_{api_key}"


class ProjectConfigService:
    """Resolves ``ProjectConfig`` and the language-name map.

    Both are cached in a TTL store; names live ``language_names_ttl`` which
    is much longer than ``config_ttl``. Failures are never raised: a
    missing config comes back as None and missing names as ``{}``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        store: TTLStore[Any],
        base_url: str,
        config_ttl: float,
        language_names_ttl: float,
        plan_status_endpoint: str = "/plan-status/",
        languages_endpoint: str = "/languages/",
        timeout: Optional[float] = 10.0,
    ):
        self.http_client = http_client
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.config_ttl = config_ttl
        self.language_names_ttl = language_names_ttl
        self.plan_status_endpoint = plan_status_endpoint
        self.languages_endpoint = languages_endpoint
        self.timeout = timeout

    async def get_project_config(self, api_key: str) -> Optional[ProjectConfig]:
        key = project_config_key(api_key)
        cached = await self._cache_get(key)
        if isinstance(cached, ProjectConfig):
            return cached

        try:
            payload = await self._get_json(self.plan_status_endpoint, params={"api_key": api_key})
            config = ProjectConfig.model_validate(payload)
        except Exception as e:
            logger.warning("Project configuration unavailable: %s", e)
            return None

        await self._cache_set(key, config, self.config_ttl)
        logger.info(
            "Loaded project configuration: default=%s targets=%s",
            config.default_language,
            config.target_languages,
        )
        return config

    async def get_language_names(self) -> dict[str, str]:
        cached = await self._cache_get(LANGUAGE_NAMES_KEY)
        if isinstance(cached, dict):
            return cached

        try:
            payload = await self._get_json(self.languages_endpoint)
            names = LanguageListResponse.model_validate(payload).to_name_map()
        except Exception as e:
            logger.warning("Language names unavailable: %s", e)
            return {}

        await self._cache_set(LANGUAGE_NAMES_KEY, names, self.language_names_ttl)
        return names

    async def _get_json(self, endpoint: str, params: Optional[dict[str, str]] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = await self.http_client.get(
                url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise CollaboratorError(f"Request failed: {e}", endpoint=url) from e

        if not response.is_success:
            raise CollaboratorError(
                f"HTTP {response.status_code}",
                endpoint=url,
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise CollaboratorError("Response is not JSON", endpoint=url) from e

    async def _cache_get(self, key: str) -> Any:
        try:
            return await self.store.get(key)
        except Exception as e:
            logger.warning("Config cache read failed for %s: %s", key, e)
            return None

    async def _cache_set(self, key: str, value: Any, ttl: float) -> None:
        try:
            await self.store.set(key, value, ttl=ttl)
        except Exception as e:
            logger.warning("Config cache write failed for %s: %s", key, e)
