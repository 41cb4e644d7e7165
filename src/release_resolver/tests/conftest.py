import pytest


@pytest.fixture(autouse=True)
def isolate_cache_file(tmp_path, monkeypatch):
    """Point the default HTTP cache at a per-test file so tests never touch the user's config dir."""
    cache_file = tmp_path / "github-http-cache.json"
    monkeypatch.setenv("RELEASE_RESOLVER_CACHE", str(cache_file))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    yield
