from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field
from typing_extensions import Annotated


class CacheEntry(BaseModel):
    etag: Annotated[str, Field(description="Validator returned with the response")]
    response: Annotated[Any, Field(description="Response body as returned by GitHub")]


@dataclass(frozen=True)
class CacheWriteResult:
    """Outcome of a cache write. Writes never raise; failures land in ``error``."""

    ok: bool
    error: Optional[Exception] = None


@runtime_checkable
class CacheStore(Protocol):
    """URL keyed store of etags and response bodies."""

    def load(self) -> dict[str, Any] | None: ...

    def etag_for(self, url: str) -> str | None: ...

    def cached_body_for(self, url: str) -> Any | None: ...

    def store(self, url: str, etag: str, response: Any) -> CacheWriteResult: ...
