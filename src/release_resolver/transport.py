from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None


@runtime_checkable
class Transport(Protocol):
    async def get(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> TransportResponse: ...


class HttpxTransport(Transport):
    """HTTPS GET over httpx. JSON bodies are decoded, anything else is returned as bytes."""

    def __init__(self, timeout: float = 30.0):
        self.timeout = timeout

    async def get(
        self, url: str, headers: Mapping[str, str] | None = None
    ) -> TransportResponse:
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True
        ) as client:
            response = await client.get(url, headers=dict(headers or {}))
        logger.debug("GET %s -> %s", url, response.status_code)
        return TransportResponse(
            status=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            body=self._process_response(response),
        )

    @staticmethod
    def _process_response(response: httpx.Response) -> Any:
        if response.status_code == 304 or not response.content:
            return None
        content_type = response.headers.get("content-type", "")
        if "json" in content_type:
            try:
                return response.json()
            except ValueError:
                return response.content
        return response.content
