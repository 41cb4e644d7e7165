from __future__ import annotations

import logging
from typing import Any

from .cache import CacheStore
from .config import ResolverOptions
from .errors import ResolverError, TagNotFound
from .fetcher import ConditionalFetcher, FetchResult
from .github_cache import GithubCache
from .rate_limit import RateLimitGuard
from .requests import ReleasesListRequest, TagRequest
from .tags import TagPolicy
from .transport import HttpxTransport, Transport

logger = logging.getLogger(__name__)


class GithubResolver:
    """Resolves release information for a GitHub repository.

    Provides the latest supported release, the raw list of releases (one page,
    30 items by default on GitHub's side) and the release for a given tag.
    """

    def __init__(
        self,
        options: ResolverOptions | None = None,
        *,
        cache_store: CacheStore | None = None,
        transport: Transport | None = None,
        guard: RateLimitGuard | None = None,
    ):
        self.options = options or ResolverOptions()
        self.policy = TagPolicy(
            minimum_tag_major=self.options.minimum_tag_major,
            maximum_tag_major=self.options.maximum_tag_major,
        )
        self._fetcher = ConditionalFetcher(
            transport=transport or HttpxTransport(),
            cache_store=cache_store if cache_store is not None else GithubCache(),
            guard=guard,
        )
        self._releases_request = ReleasesListRequest(
            repository=self.options.repository, token=self.options.token
        )

    @property
    def guard(self) -> RateLimitGuard:
        return self._fetcher.guard

    @property
    def last_response_source(self) -> str:
        return self._fetcher.last_response_source

    @property
    def releases_url(self) -> str:
        return self._releases_request.url()

    async def get_latest_info(self) -> Any:
        """Return the newest release that passes the tag policy."""
        releases = await self.get_releases_list()
        return self.policy.latest_of(_as_list(releases))

    async def get_releases_list(self) -> Any:
        """Return the first page of releases exactly as GitHub sent it."""
        result = await self._fetcher.fetch(
            self.releases_url, self._releases_request.headers()
        )
        self._raise_for_status(result, self.releases_url)
        return result.body

    async def get_tag_info(self, tag: str) -> Any:
        """Return the release for ``tag``.

        When GitHub does not know the tag, `TagNotFound` lists the tags that
        are available instead.
        """
        self.policy.assert_tag_acceptable(tag)
        request = TagRequest(
            repository=self.options.repository, token=self.options.token, tag=tag
        )
        url = request.url()
        result = await self._fetcher.fetch(url, request.headers())
        if result.status == 404:
            logger.debug("Tag %s not found, listing available releases", tag)
            releases = await self.get_releases_list()
            raise TagNotFound(
                tag,
                self.options.repository,
                self.policy.acceptable_tag_names(_as_list(releases)),
            )
        self._raise_for_status(result, url)
        return result.body

    @staticmethod
    def _raise_for_status(result: FetchResult, url: str) -> None:
        if result.status >= 400:
            raise ResolverError(f"GitHub responded with status {result.status} for {url}")


def _as_list(releases: Any) -> list[Any]:
    if isinstance(releases, list):
        return releases
    return []


def _resolver_from_env(**overrides) -> GithubResolver:
    return GithubResolver(ResolverOptions.from_env(**overrides))


async def latest_info(**overrides) -> Any:
    """Shorthand for `GithubResolver.get_latest_info` using ``GITHUB_TOKEN``."""
    return await _resolver_from_env(**overrides).get_latest_info()


async def tag_info(tag: str, **overrides) -> Any:
    """Shorthand for `GithubResolver.get_tag_info` using ``GITHUB_TOKEN``."""
    return await _resolver_from_env(**overrides).get_tag_info(tag)


async def releases_info(**overrides) -> Any:
    """Shorthand for `GithubResolver.get_releases_list` using ``GITHUB_TOKEN``."""
    return await _resolver_from_env(**overrides).get_releases_list()
