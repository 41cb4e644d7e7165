from __future__ import annotations


class ResolverError(RuntimeError):
    """Base class for errors surfaced by the release resolver.

    ``kind`` is a stable identifier for programmatic handling; the message is
    meant for humans.
    """

    kind = "resolver_error"


class RateLimitExceeded(ResolverError):
    kind = "rate_limit_exceeded"


class Unauthorized(ResolverError):
    kind = "unauthorized"


class InvalidTag(ResolverError, ValueError):
    kind = "invalid_tag"

    def __init__(self, tag: str, message: str | None = None):
        self.tag = tag
        super().__init__(message or f"Invalid tag. Major version is not a number: {tag}")


class TagBelowMinimum(ResolverError, ValueError):
    kind = "tag_below_minimum"

    def __init__(self, tag: str, minimum: int):
        self.tag = tag
        self.minimum = minimum
        super().__init__(
            f"Tag {tag} is not supported. "
            f"This tool will not work with releases prior to version {minimum}.0.0"
        )


class TagAboveMaximum(ResolverError, ValueError):
    kind = "tag_above_maximum"

    def __init__(self, tag: str, maximum: int):
        self.tag = tag
        self.maximum = maximum
        super().__init__(
            f"Tag {tag} is not supported. "
            f"This tool does not support releases with a major version above {maximum}"
        )


class TagNotFound(ResolverError):
    kind = "tag_not_found"

    def __init__(self, tag: str, repository: str, available_tags: list[str]):
        self.tag = tag
        self.repository = repository
        self.available_tags = list(available_tags)
        super().__init__(
            f"Tag for release {tag} does not exist in the {repository} repository. "
            "Please, check if you are requesting a valid tag. "
            f"Available tags are: {', '.join(self.available_tags)}"
        )


class NoSupportedTags(ResolverError):
    kind = "no_supported_tags"


class CacheUnavailable(ResolverError):
    kind = "cache_unavailable"


class CacheWriteFailed(ResolverError):
    kind = "cache_write_failed"
