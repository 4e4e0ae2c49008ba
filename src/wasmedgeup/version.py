"""Semantic version type and release filtering for wasmedgeup."""

from __future__ import annotations

import dataclasses
import functools
import re
from enum import StrEnum

from .exceptions import VersionParseError

# Semantic Versioning 2.0.0, https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
_SEMVER_RE = re.compile(
    r"(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+(?P<build>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?",
    re.ASCII,
)

PrereleaseKey = tuple[tuple[int, int, str], ...]


@functools.total_ordering
@dataclasses.dataclass(frozen=True)
class Version:
    """A parsed semantic version.

    Build metadata is carried for display only; it takes no part in
    equality, hashing or ordering.
    """

    major: int
    minor: int
    patch: int
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = dataclasses.field(default=(), compare=False)

    @classmethod
    def parse(cls, text: str) -> Version:
        """
        Parse a semantic version string.

        Args:
            text: Version text such as '0.14.1' or '0.15.0-alpha.1'

        Returns:
            The parsed Version

        Raises:
            VersionParseError: If the text is not a valid semantic version
        """
        match = _SEMVER_RE.fullmatch(text)
        if match is None:
            raise VersionParseError(f"Invalid semantic version: {text!r}")

        pre = match.group("pre")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            pre=tuple(pre.split(".")) if pre else (),
            build=tuple(build.split(".")) if build else (),
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.pre)

    @property
    def prerelease(self) -> str:
        return ".".join(self.pre)

    def _prerelease_key(self) -> tuple[int, PrereleaseKey]:
        # A release without a prerelease label sorts above any prerelease of
        # the same triple; numeric identifiers sort below alphanumeric ones.
        if not self.pre:
            return (1, ())
        identifiers = tuple(
            (0, int(ident), "") if ident.isdigit() else (1, 0, ident)
            for ident in self.pre
        )
        return (0, identifiers)

    def _key(self) -> tuple[int, int, int, tuple[int, PrereleaseKey]]:
        return (self.major, self.minor, self.patch, self._prerelease_key())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += f"-{self.prerelease}"
        if self.build:
            text += "+" + ".".join(self.build)
        return text


class ReleaseFilter(StrEnum):
    ALL = "all"
    STABLE = "stable"

    def matches(self, version: Version) -> bool:
        """Return True if the version is accepted by this filter."""
        match self:
            case ReleaseFilter.STABLE:
                return not version.is_prerelease
            case _:
                return True
