"""Requêtes HTTP sortantes avec timeout et tentatives bornées."""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from carte_loyers.api.config.settings import settings
from carte_loyers.api.monitoring.prometheus_registry import FETCH_FAILURES_TOTAL
from carte_loyers.api.utils.exceptions import (DownloadFailed, TransportFailure,
                                               UpstreamStatusFailure)

logger = logging.getLogger(__name__)


class ResilientFetcher:
    """
    GET HTTP avec `retries + 1` tentatives au plus.

    Chaque tentative est bornée par `timeout_ms` (requête complète, corps
    inclus). Un statut non 2xx compte comme un échec. Entre deux échecs on
    attend `backoff_ms * (tentative + 1)`. Une fois les tentatives épuisées,
    la dernière erreur est levée telle quelle.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        retries: Optional[int] = None,
        timeout_ms: Optional[int] = None,
        backoff_ms: Optional[int] = None,
    ):
        self._client = client
        self._owns_client = client is None
        self.retries = settings.FETCH_RETRIES if retries is None else retries
        self.timeout_ms = (
            settings.FETCH_TIMEOUT_MS if timeout_ms is None else timeout_ms
        )
        self.backoff_ms = (
            settings.FETCH_BACKOFF_MS if backoff_ms is None else backoff_ms
        )

    async def get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        retries: Optional[int] = None,
        timeout_ms: Optional[int] = None,
    ) -> httpx.Response:
        retries = self.retries if retries is None else retries
        timeout_ms = self.timeout_ms if timeout_ms is None else timeout_ms

        last_error: Optional[DownloadFailed] = None
        for attempt in range(retries + 1):
            try:
                return await asyncio.wait_for(
                    self._get_once(url, params), timeout=timeout_ms / 1000
                )
            except asyncio.TimeoutError:
                last_error = TransportFailure(
                    url, f"délai de {timeout_ms} ms dépassé"
                )
            except DownloadFailed as exc:
                last_error = exc

            FETCH_FAILURES_TOTAL.labels(reason=last_error.error_code).inc()
            logger.warning(
                "⚠️ %s (tentative %d/%d)", last_error.detail, attempt + 1, retries + 1
            )
            if attempt < retries:
                await asyncio.sleep(self.backoff_ms * (attempt + 1) / 1000)

        logger.error("❌ Abandon : %s", url)
        raise last_error

    @property
    def client(self) -> httpx.AsyncClient:
        """Client partagé entre les appels (pool de connexions)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                headers={"User-Agent": settings.HTTP_USER_AGENT},
                timeout=None,
            )
        return self._client

    async def aclose(self) -> None:
        # Un client injecté reste sous la responsabilité de l'appelant
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get_once(
        self, url: str, params: Optional[Dict[str, Any]]
    ) -> httpx.Response:
        try:
            response = await self.client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise TransportFailure(url, str(exc) or type(exc).__name__) from exc

        if not response.is_success:
            raise UpstreamStatusFailure(url, response.status_code)
        return response
