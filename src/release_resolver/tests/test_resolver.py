from __future__ import annotations

from pathlib import Path
from typing import Mapping

import pytest

from release_resolver import resolver as resolver_module
from release_resolver.config import ResolverOptions
from release_resolver.errors import (
    InvalidTag,
    NoSupportedTags,
    ResolverError,
    TagBelowMinimum,
    TagNotFound,
)
from release_resolver.github_cache import GithubCache
from release_resolver.resolver import GithubResolver
from release_resolver.transport import TransportResponse

RELEASES_URL = "https://api.github.com/repos/mulesoft/api-console/releases"

RELEASES = [
    {"tag_name": "v4.2.0", "prerelease": False},
    {"tag_name": "v5.0.0", "prerelease": False},
    {"tag_name": "5.2.0", "prerelease": False},
    {"tag_name": "v6.0.0-beta", "prerelease": True},
    {"tag_name": "v5.1.3", "prerelease": False},
]


class FakeGithub:
    """Answers like GitHub: 304 when the client sends the current etag."""

    def __init__(self, resources: dict[str, tuple[int, object]], etag: str = '"v1"'):
        self.resources = resources
        self.etag = etag
        self.calls: list[tuple[str, dict[str, str]]] = []

    async def get(self, url: str, headers: Mapping[str, str] | None = None):
        sent = dict(headers or {})
        self.calls.append((url, sent))
        status, body = self.resources.get(url, (404, {"message": "Not Found"}))
        if status == 404:
            return TransportResponse(404, {"x-ratelimit-remaining": "50"}, body)
        if sent.get("if-none-match") == self.etag:
            return TransportResponse(304, {"etag": self.etag})
        return TransportResponse(
            status,
            {"etag": self.etag, "x-ratelimit-remaining": "50", "x-ratelimit-reset": "1700000000"},
            body,
        )


def make_resolver(tmp_path: Path, github: FakeGithub, **options) -> GithubResolver:
    return GithubResolver(
        ResolverOptions(**options),
        cache_store=GithubCache(tmp_path / "cache.json"),
        transport=github,
    )


@pytest.mark.asyncio
async def test_get_latest_info(tmp_path: Path):
    github = FakeGithub({RELEASES_URL: (200, RELEASES)})
    resolver = make_resolver(tmp_path, github)

    latest = await resolver.get_latest_info()

    assert latest == {"tag_name": "5.2.0", "prerelease": False}


@pytest.mark.asyncio
async def test_get_latest_info_without_supported_release(tmp_path: Path):
    github = FakeGithub({RELEASES_URL: (200, [{"tag_name": "v4.2.0"}])})
    resolver = make_resolver(tmp_path, github)

    with pytest.raises(NoSupportedTags):
        await resolver.get_latest_info()


@pytest.mark.asyncio
async def test_get_releases_list_is_unfiltered(tmp_path: Path):
    github = FakeGithub({RELEASES_URL: (200, RELEASES)})
    resolver = make_resolver(tmp_path, github)

    assert await resolver.get_releases_list() == RELEASES


@pytest.mark.asyncio
async def test_get_releases_list_twice_uses_cache(tmp_path: Path):
    github = FakeGithub({RELEASES_URL: (200, RELEASES)})
    cache = GithubCache(tmp_path / "cache.json")
    resolver = GithubResolver(cache_store=cache, transport=github)

    first = await resolver.get_releases_list()
    assert resolver.last_response_source == "network"
    assert cache.etag_for(RELEASES_URL) == '"v1"'

    second = await resolver.get_releases_list()
    assert resolver.last_response_source == "cache"

    assert first == second == RELEASES
    assert "if-none-match" not in github.calls[0][1]
    assert github.calls[1][1]["if-none-match"] == '"v1"'


@pytest.mark.asyncio
async def test_new_resolver_reuses_cache_file(tmp_path: Path):
    github = FakeGithub({RELEASES_URL: (200, RELEASES)})
    await make_resolver(tmp_path, github).get_releases_list()

    other = make_resolver(tmp_path, github)
    assert await other.get_releases_list() == RELEASES
    assert other.last_response_source == "cache"


@pytest.mark.asyncio
async def test_request_headers(tmp_path: Path):
    github = FakeGithub({RELEASES_URL: (200, RELEASES)})
    resolver = make_resolver(tmp_path, github, token="secret")

    await resolver.get_releases_list()

    headers = github.calls[0][1]
    assert headers["authorization"] == "Bearer secret"
    assert headers["accept"] == "application/vnd.github+json"
    assert "user-agent" in headers


@pytest.mark.asyncio
async def test_anonymous_requests_have_no_authorization(tmp_path: Path):
    github = FakeGithub({RELEASES_URL: (200, RELEASES)})
    await make_resolver(tmp_path, github).get_releases_list()
    assert "authorization" not in github.calls[0][1]


@pytest.mark.asyncio
async def test_get_tag_info(tmp_path: Path):
    release = {"tag_name": "v5.1.3", "prerelease": False}
    github = FakeGithub({RELEASES_URL + "/tags/v5.1.3": (200, release)})
    resolver = make_resolver(tmp_path, github)

    assert await resolver.get_tag_info("v5.1.3") == release


@pytest.mark.asyncio
async def test_get_tag_info_rejects_old_tag_without_network(tmp_path: Path):
    github = FakeGithub({})
    resolver = make_resolver(tmp_path, github)

    with pytest.raises(TagBelowMinimum):
        await resolver.get_tag_info("v4.0.0")
    with pytest.raises(InvalidTag):
        await resolver.get_tag_info("does-not-exist")
    assert github.calls == []


@pytest.mark.asyncio
async def test_get_tag_info_not_found_lists_available_tags(tmp_path: Path):
    github = FakeGithub({RELEASES_URL: (200, RELEASES)})
    resolver = make_resolver(tmp_path, github)

    with pytest.raises(TagNotFound) as excinfo:
        await resolver.get_tag_info("5.9.9")

    err = excinfo.value
    assert err.kind == "tag_not_found"
    assert err.available_tags == ["v5.0.0", "5.2.0", "v6.0.0-beta", "v5.1.3"]
    message = str(err)
    assert "5.9.9" in message
    assert "v4.2.0" not in message
    assert "v5.0.0, 5.2.0, v6.0.0-beta, v5.1.3" in message
    assert [url for url, _ in github.calls] == [
        RELEASES_URL + "/tags/5.9.9",
        RELEASES_URL,
    ]


@pytest.mark.asyncio
async def test_other_error_statuses_are_raised(tmp_path: Path):
    github = FakeGithub({RELEASES_URL: (500, {"message": "boom"})})
    resolver = make_resolver(tmp_path, github)

    with pytest.raises(ResolverError) as excinfo:
        await resolver.get_releases_list()
    assert "500" in str(excinfo.value)


@pytest.mark.asyncio
async def test_custom_repository(tmp_path: Path):
    url = "https://api.github.com/repos/octo/widgets/releases"
    github = FakeGithub({url: (200, [{"tag_name": "1.0.0"}])})
    resolver = make_resolver(tmp_path, github, repository="octo/widgets", minimum_tag_major=1)

    assert resolver.releases_url == url
    assert await resolver.get_latest_info() == {"tag_name": "1.0.0"}


@pytest.mark.asyncio
async def test_shorthand_reads_token_from_env(monkeypatch):
    github = FakeGithub({RELEASES_URL: (200, RELEASES)})
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    monkeypatch.setattr(resolver_module, "HttpxTransport", lambda: github)

    latest = await resolver_module.latest_info()
    releases = await resolver_module.releases_info()

    assert latest["tag_name"] == "5.2.0"
    assert releases == RELEASES
    assert github.calls[0][1]["authorization"] == "Bearer from-env"


@pytest.mark.asyncio
async def test_tag_info_shorthand_accepts_overrides(monkeypatch):
    release = {"tag_name": "4.1.0", "prerelease": False}
    github = FakeGithub({RELEASES_URL + "/tags/4.1.0": (200, release)})
    monkeypatch.setattr(resolver_module, "HttpxTransport", lambda: github)

    assert await resolver_module.tag_info("4.1.0", minimum_tag_major=4) == release
    assert "authorization" not in github.calls[0][1]
