from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from typing_extensions import Annotated

from .errors import InvalidTag, NoSupportedTags, TagAboveMaximum, TagBelowMinimum

_LEADING_V = re.compile(r"^v")
_NUMBER = re.compile(r"\d+")


class ReleaseRecord(BaseModel):
    """The fields of a GitHub release that tag policy looks at."""

    model_config = ConfigDict(extra="allow")

    tag_name: Annotated[str, Field(description="Git tag of the release")]
    prerelease: Annotated[
        Optional[bool], Field(default=False, description="Release is not production ready")
    ]


@dataclass(frozen=True)
class TagInfo:
    major: int
    minor: int
    patch: int
    suffix: str | None = None

    @property
    def version(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)


def _number(segment: str, tag: str, name: str) -> int:
    if not _NUMBER.fullmatch(segment):
        raise InvalidTag(tag, f"Invalid tag. {name} version is not a number: {tag}")
    return int(segment)


def parse_tag(raw: str) -> TagInfo:
    """Parse ``vX.Y.Z[-suffix]`` or ``X.Y.Z[-suffix]`` into its parts."""
    tag = _LEADING_V.sub("", raw)
    core, sep, suffix = tag.partition("-")
    parts = core.split(".")
    major = _number(parts[0], raw, "Major")
    if len(parts) != 3:
        raise InvalidTag(raw, f"Invalid tag. Expected MAJOR.MINOR.PATCH: {raw}")
    minor = _number(parts[1], raw, "Minor")
    patch = _number(parts[2], raw, "Patch")
    return TagInfo(major=major, minor=minor, patch=patch, suffix=suffix if sep else None)


def _release_tag(release: Any) -> str:
    if isinstance(release, str):
        return release
    return ReleaseRecord.model_validate(release).tag_name


def compare_tags(a: Any, b: Any) -> int:
    """Order releases (or raw tag names) newest first.

    Only major, minor and patch take part; releases differing in suffix alone
    compare equal.
    """
    a_info = parse_tag(_release_tag(a))
    b_info = parse_tag(_release_tag(b))
    if a_info.version < b_info.version:
        return 1
    if a_info.version > b_info.version:
        return -1
    return 0


class TagPolicy:
    """Decides which releases are supported and in which order they rank."""

    def __init__(self, minimum_tag_major: int = 5, maximum_tag_major: int | None = None):
        self.minimum_tag_major = minimum_tag_major
        self.maximum_tag_major = maximum_tag_major

    def assert_tag_acceptable(self, tag: str) -> TagInfo:
        info = parse_tag(tag)
        if info.major < self.minimum_tag_major:
            raise TagBelowMinimum(tag, self.minimum_tag_major)
        if self.maximum_tag_major is not None and info.major > self.maximum_tag_major:
            raise TagAboveMaximum(tag, self.maximum_tag_major)
        return info

    def is_acceptable(self, tag: str) -> bool:
        try:
            self.assert_tag_acceptable(tag)
        except (InvalidTag, TagBelowMinimum, TagAboveMaximum):
            return False
        return True

    def filter_supported_tags(self, releases: Iterable[Any]) -> list[Any]:
        """Keep non-prerelease entries whose tag passes `assert_tag_acceptable`."""
        supported = []
        for item in releases:
            try:
                record = ReleaseRecord.model_validate(item)
            except ValidationError:
                continue
            if record.prerelease:
                continue
            if self.is_acceptable(record.tag_name):
                supported.append(item)
        return supported

    def acceptable_tag_names(self, releases: Iterable[Any]) -> list[str]:
        names = []
        for item in releases:
            try:
                record = ReleaseRecord.model_validate(item)
            except ValidationError:
                continue
            if self.is_acceptable(record.tag_name):
                names.append(record.tag_name)
        return names

    @staticmethod
    def sort_releases(releases: Iterable[Any]) -> list[Any]:
        return sorted(releases, key=cmp_to_key(compare_tags))

    def latest_of(self, releases: Iterable[Any]) -> Any:
        supported = self.sort_releases(self.filter_supported_tags(releases))
        if not supported:
            raise NoSupportedTags(
                "No release matches the supported version range "
                f"(minimum major version {self.minimum_tag_major})."
            )
        return supported[0]
