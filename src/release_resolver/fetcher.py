from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .cache import CacheStore
from .rate_limit import RateLimitGuard
from .transport import Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    status: int
    body: Any
    source: str
    headers: Mapping[str, str] = field(default_factory=dict)


class ConditionalFetcher:
    """Issues GitHub requests that revalidate against the etag cache.

    A ``304 Not Modified`` answer is served from the cache. Fresh responses
    update the rate-limit guard and, when they carry an etag, the cache.
    """

    def __init__(
        self,
        *,
        transport: Transport,
        cache_store: CacheStore,
        guard: RateLimitGuard | None = None,
    ):
        self._transport = transport
        self._cache_store = cache_store
        self.guard = guard or RateLimitGuard()
        self._last_response_source: str = "uninitialized"
        self._latest_status: int | None = None

    @property
    def last_response_source(self) -> str:
        return self._last_response_source

    @property
    def latest_status(self) -> int | None:
        return self._latest_status

    async def fetch(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> FetchResult:
        self.guard.assert_can_proceed()

        request_headers = dict(headers or {})
        etag = self._cache_store.etag_for(url)
        if etag:
            request_headers["if-none-match"] = etag

        response = await self._transport.get(url, request_headers)
        self._latest_status = response.status
        response_headers = {str(k).lower(): v for k, v in response.headers.items()}

        if response.status == 304:
            logger.debug("Serving %s from cache", url)
            self._last_response_source = "cache"
            return FetchResult(
                status=304,
                body=self._cache_store.cached_body_for(url),
                source="cache",
                headers=response_headers,
            )

        self.guard.observe(response.status, response_headers)
        if 200 <= response.status < 300:
            self._record(url, response_headers.get("etag"), response.body)
        self._last_response_source = "network"
        return FetchResult(
            status=response.status,
            body=response.body,
            source="network",
            headers=response_headers,
        )

    def _record(self, url: str, etag: str | None, body: Any) -> None:
        """Persist a fresh body to the cache store when the response had an etag."""
        if not etag:
            return
        result = self._cache_store.store(url, etag, body)
        if not result.ok:
            logger.warning("Unable to cache results for %s: %s", url, result.error)
