"""Semantic version parsing and precedence ordering."""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Tuple, Union

from .errors import VersionParseError


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """
    Parsed semantic version.

    Attributes:
        major: Major version component
        minor: Minor version component
        patch: Patch version component
        prerelease: Dot-separated pre-release identifiers (empty for releases)
        build: Dot-separated build metadata identifiers (ignored for ordering)
    """
    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def _precedence_key(self):
        # A release sorts after every pre-release of the same major.minor.patch
        if not self.prerelease:
            pre = (1,)
        else:
            pre = (0,) + tuple(_identifier_key(ident) for ident in self.prerelease)
        return (self.major, self.minor, self.patch, pre)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() == other._precedence_key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._precedence_key() < other._precedence_key()

    def __hash__(self) -> int:
        return hash(self._precedence_key())

    def is_identical(self, other: 'Version') -> bool:
        """Equality including build metadata, which precedence ignores."""
        return self == other and self.build == other.build

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def _identifier_key(identifier: str):
    # Numeric identifiers rank below alphanumeric ones and compare numerically
    if identifier.isdigit():
        return (0, int(identifier), "")
    return (1, 0, identifier)


class VersionParser:
    """Parser for semantic version strings (https://semver.org, 2.0.0)."""

    # Matched with fullmatch; ASCII digits only
    SEMVER_PATTERN = re.compile(
        r'(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)'              # major.minor.patch
        r'(?:-((?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*)'           # pre-release
        r'(?:\.(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*))*))?'
        r'(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?',                   # build metadata
        re.ASCII
    )

    @classmethod
    def parse(cls, version: Union[str, Version]) -> Version:
        """
        Parse a semantic version string.

        Args:
            version: The version string to parse (an already parsed Version is returned as-is)

        Returns:
            The parsed Version

        Raises:
            VersionParseError: If the string is not a well-formed semantic version
        """
        if isinstance(version, Version):
            return version
        if not isinstance(version, str):
            raise VersionParseError(version)

        match = cls.SEMVER_PATTERN.fullmatch(version)
        if not match:
            raise VersionParseError(version)

        prerelease = match.group(4)
        build = match.group(5)
        return Version(
            major=int(match.group(1)),
            minor=int(match.group(2)),
            patch=int(match.group(3)),
            prerelease=tuple(prerelease.split('.')) if prerelease else (),
            build=tuple(build.split('.')) if build else (),
        )

    @classmethod
    def is_valid(cls, version: str) -> bool:
        """Check whether a string is a well-formed semantic version."""
        try:
            cls.parse(version)
        except VersionParseError:
            return False
        return True

    @classmethod
    def compare(cls, v1: str, v2: str) -> int:
        """Compare two versions by precedence. Returns >0 if v1 > v2, <0 if v1 < v2, 0 if equal."""
        parsed1 = cls.parse(v1)
        parsed2 = cls.parse(v2)
        if parsed1 == parsed2:
            return 0
        return 1 if parsed1 > parsed2 else -1
