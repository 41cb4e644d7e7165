from __future__ import annotations

from dataclasses import dataclass

from .config import ResolverOptions


@dataclass(frozen=True)
class CliOptions:
    repository: str
    token: str | None
    minimum_major: int
    maximum_major: int | None
    cache_file: str | None
    indent: int
    verbose: bool

    def resolver_options(self) -> ResolverOptions:
        return ResolverOptions(
            token=self.token or None,
            minimum_tag_major=self.minimum_major,
            maximum_tag_major=self.maximum_major,
            repository=self.repository,
        )

    def indent_value(self) -> int | None:
        if self.indent <= 0:
            return None
        return self.indent
