"""Core data models for depdedupe."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from packageurl import PackageURL


class Criterion(Enum):
    """Version compatibility criteria, ordered most to least specific."""
    EXACT = "exact"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    ANY = "any"


class Comparison(Enum):
    """Outcome of comparing a given version against a cached one."""
    NOT_SATISFIED = "not-satisfied"
    SATISFIED_CACHED_WINS = "cached-wins"
    SATISFIED_GIVEN_WINS = "given-wins"

    @property
    def satisfied(self) -> bool:
        return self is not Comparison.NOT_SATISFIED

    @property
    def cached_is_latest(self) -> bool:
        """Whether the cached version is greater or equal. Only meaningful when satisfied."""
        return self is Comparison.SATISFIED_CACHED_WINS


@dataclass(frozen=True)
class Entry:
    """A cached pairing of an identifier and the package descriptor it was produced for."""

    id: str
    descriptor: Mapping[str, Any]

    @property
    def name(self) -> str:
        return self.descriptor["name"]

    @property
    def version(self) -> str:
        return self.descriptor["version"]


@dataclass(frozen=True)
class DedupeResult:
    """
    Canonical entry a caller should use after deduping.

    Attributes:
        id: Identifier of the canonical entry
        descriptor: Package descriptor of the canonical entry
        replaces_id: Id of the previously cached entry this one supersedes, if any
    """
    id: str
    descriptor: Mapping[str, Any]
    replaces_id: Optional[str] = None

    @property
    def name(self) -> str:
        return self.descriptor["name"]

    @property
    def version(self) -> str:
        return self.descriptor["version"]

    @property
    def is_replacement(self) -> bool:
        return self.replaces_id is not None

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase wire view (replacesId only present when set)."""
        data = {"id": self.id, "descriptor": dict(self.descriptor)}
        if self.replaces_id is not None:
            data["replacesId"] = self.replaces_id
        return data


@dataclass
class Package:
    """Represents a software package occurrence with system, name, and version."""

    system: str  # maven, npm, pypi
    name: str
    version: str
    ref: Optional[str] = None  # Identity of this occurrence in its input (bom-ref, file:line)
    scope: str = "required"  # required or excluded
    scope_reason: Optional[str] = None  # e.g. "duplicate"
    winning_version: Optional[str] = None  # If this is a losing version, what version won?
    defeated_versions: List[str] = field(default_factory=list)  # If this is a winner, versions it absorbed

    def __post_init__(self):
        """Normalize system to lowercase and default the ref to the purl."""
        self.system = self.system.lower()
        if not self.scope:
            self.scope = "required"
        if self.ref is None:
            self.ref = self.purl

    @property
    def full_name(self) -> str:
        """Return the full package name in system:name:version format."""
        return f"{self.system}:{self.name}:{self.version}"

    @property
    def base_key(self) -> str:
        """Return system:name, shared by every version of the same library."""
        return f"{self.system}:{self.name}"

    @property
    def purl(self) -> str:
        """Build a Package URL (purl) string for this package."""
        if self.system == 'maven' and ':' in self.name:
            namespace, name = self.name.split(':', 1)
        elif '/' in self.name:
            # Namespaced purls (npm scopes, golang, github) keep namespace/name
            namespace, name = self.name.rsplit('/', 1)
        else:
            namespace, name = None, self.name
        return PackageURL(type=self.system, namespace=namespace, name=name, version=self.version).to_string()

    def to_descriptor(self) -> Dict[str, Any]:
        """Build the descriptor handed to the deduper for this package."""
        return {
            "name": self.name,
            "version": self.version,
            "system": self.system,
            "purl": self.purl,
            "ref": self.ref,
        }

    def __str__(self) -> str:
        return self.full_name
