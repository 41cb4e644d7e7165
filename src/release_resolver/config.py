from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Config:
    cache_file_name: str = "github-http-cache.json"
    cache_namespace: str = "api-console"
    cache_env: str = "RELEASE_RESOLVER_CACHE"
    token_env: str = "GITHUB_TOKEN"
    default_repository: str = "mulesoft/api-console"


@dataclass(frozen=True)
class ResolverOptions:
    """Options for `GithubResolver`.

    token
        GitHub token sent as a bearer credential. Anonymous when ``None``.
    minimum_tag_major
        Releases with a lower major version are rejected.
    maximum_tag_major
        Optional upper bound for the major version; unbounded when ``None``.
    """

    token: str | None = None
    minimum_tag_major: int = 5
    maximum_tag_major: int | None = None
    repository: str = Config.default_repository

    @classmethod
    def from_env(cls, config: Config | None = None, **overrides) -> ResolverOptions:
        cfg = config or Config()
        overrides.setdefault("token", os.environ.get(cfg.token_env) or None)
        return cls(**overrides)


def _platform_config_dir() -> Path:
    appdata = os.environ.get("APPDATA")
    if appdata:
        return Path(appdata)
    home = Path.home()
    if sys.platform == "darwin":
        return home / "Library" / "Preferences"
    if sys.platform.startswith("linux"):
        return home / ".config"
    return Path("/var/local")


def default_cache_dir(config: Config | None = None) -> Path:
    cfg = config or Config()
    return _platform_config_dir() / cfg.cache_namespace / "cache"


def _resolve_cache_path(
    cache_path: str | os.PathLike[str] | None = None,
    config: Config | None = None,
) -> Path:
    cfg = config or Config()
    candidate = cache_path or os.environ.get(cfg.cache_env)
    if candidate:
        return Path(candidate).expanduser()
    return default_cache_dir(cfg) / cfg.cache_file_name
