from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

GITHUB_API_URL = "https://api.github.com"
USER_AGENT = "release-resolver"
ACCEPT = "application/vnd.github+json"


@dataclass(frozen=True)
class GithubRequest:
    repository: str
    token: str | None = None

    @property
    def releases_url(self) -> str:
        return f"{GITHUB_API_URL}/repos/{self.repository}/releases"

    def headers(self) -> dict[str, str]:
        headers = {"user-agent": USER_AGENT, "accept": ACCEPT}
        if self.token:
            headers["authorization"] = f"Bearer {self.token}"
        return headers


@dataclass(frozen=True)
class ReleasesListRequest(GithubRequest):
    def url(self) -> str:
        return self.releases_url


@dataclass(frozen=True)
class TagRequest(GithubRequest):
    tag: str = ""

    def url(self) -> str:
        return f"{self.releases_url}/tags/{quote(self.tag, safe='')}"
