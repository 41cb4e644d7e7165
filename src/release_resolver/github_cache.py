from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from .cache import CacheEntry, CacheStore, CacheWriteResult
from .config import Config, _resolve_cache_path
from .errors import CacheUnavailable, CacheWriteFailed

logger = logging.getLogger(__name__)


class GithubCache(CacheStore):
    """Persists GitHub responses and their etags in a single JSON document.

    Unauthenticated GitHub requests are limited to 60 per hour. Revalidating
    with a stored etag answers with ``304 Not Modified``, which does not count
    against the limit, so the previous body can be reused.

    The document is read once per instance and kept in memory. Every write
    flushes the whole document back to disk; concurrent writers are not
    coordinated and the last one wins.
    """

    def __init__(
        self,
        cache_path: str | os.PathLike[str] | None = None,
        *,
        config: Config | None = None,
    ):
        self._config = config or Config()
        self.cache_location = _resolve_cache_path(cache_path, self._config)
        self._data: dict[str, Any] | None = None
        self._loaded = False

    @property
    def cache_folder(self) -> Path:
        return self.cache_location.parent

    @property
    def cache_file_name(self) -> str:
        return self.cache_location.name

    def load(self) -> dict[str, Any] | None:
        """Return the cache document, reading it from disk on first use.

        A missing, empty or malformed file yields ``None``. Failing to read an
        existing file raises `CacheUnavailable`.
        """
        if self._loaded:
            return self._data

        try:
            raw = self.cache_location.read_bytes()
        except FileNotFoundError:
            raw = b""
        except OSError as exc:
            raise CacheUnavailable(
                f"Unable to read cache file {self.cache_location}: {exc}"
            ) from exc

        data: dict[str, Any] | None = None
        if raw.strip():
            try:
                parsed = json.loads(raw.decode("utf-8"))
            except ValueError:
                logger.debug("Ignoring malformed cache file %s", self.cache_location)
                parsed = None
            if isinstance(parsed, dict):
                data = parsed

        self._data = data
        self._loaded = True
        return data

    def _entry(self, url: str) -> dict[str, Any] | None:
        data = self.load()
        if not data:
            return None
        entry = data.get(url)
        if not isinstance(entry, dict):
            return None
        return entry

    def etag_for(self, url: str) -> str | None:
        entry = self._entry(url)
        if entry is None or not entry.get("etag"):
            return None
        return entry["etag"]

    def cached_body_for(self, url: str) -> Any | None:
        entry = self._entry(url)
        if entry is None or not entry.get("response"):
            return None
        return entry["response"]

    def store(self, url: str, etag: str, response: Any) -> CacheWriteResult:
        """Record ``response`` for ``url`` and flush the document to disk.

        The in-memory document only changes once the new entry serializes.
        """
        try:
            data = self.load()
        except CacheUnavailable as exc:
            return CacheWriteResult(ok=False, error=CacheWriteFailed(str(exc)))

        candidate = dict(data or {})
        candidate[url] = CacheEntry(etag=etag, response=response).model_dump()
        try:
            payload = json.dumps(candidate)
        except (TypeError, ValueError) as exc:
            return CacheWriteResult(
                ok=False,
                error=CacheWriteFailed(f"Unable to serialize response for {url}: {exc}"),
            )

        self._data = candidate
        self._loaded = True
        return self._flush(payload)

    def _flush(self, payload: str) -> CacheWriteResult:
        try:
            self.cache_location.parent.mkdir(parents=True, exist_ok=True)
            self.cache_location.write_text(payload, encoding="utf-8")
        except OSError as exc:
            return CacheWriteResult(
                ok=False,
                error=CacheWriteFailed(
                    f"Unable to write cache file {self.cache_location}: {exc}"
                ),
            )
        return CacheWriteResult(ok=True)
