"""Version dedupe engine used while building dependency trees."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .cache import CacheStore
from .criteria import compare, to_criterion
from .errors import MissingFieldError
from .models import Criterion, DedupeResult, Entry
from .version_parser import VersionParser

logger = logging.getLogger(__name__)


class Deduper:
    """
    Caches packages by name and decides whether a newly encountered version is
    redundant with one already cached.

    For each dedupe call the cached entries of the same name are scanned in
    insertion order and the first one compatible under the criterion decides:

    - cached version is the same or newer: the caller is redirected to the cached entry
    - given version is newer: it takes over the cached slot and the result names the
      id it replaces so the caller can rewire references
    - nothing compatible: the given entry is appended and returned as-is

    Each instance owns its cache. Instances are not thread safe; give each worker its own.
    """

    def __init__(self, initial_cache: Optional[Mapping[str, Iterable[Entry]]] = None):
        """
        Initialize the deduper.

        Args:
            initial_cache: Optional name -> entries mapping to seed the cache with.
                The mapping is copied, so the caller's lists are never mutated.
        """
        self._store = CacheStore(initial_cache)

    @property
    def cache(self) -> Dict[str, List[Entry]]:
        """Snapshot of the cache, suitable for seeding another Deduper."""
        return self._store.to_dict()

    def dedupe(self, criteria: Union[str, Criterion], id: str, descriptor: Mapping[str, Any]) -> DedupeResult:
        """
        Cache a package and return the entry the caller should use for it.

        Args:
            criteria: One of exact | patch | minor | major | any (most to least specific)
            id: Identification for the package (i.e. its full path)
            descriptor: Package metadata with at least name and version; other fields pass through

        Returns:
            DedupeResult with the matching cached id and descriptor, or the given ones

        Raises:
            MissingFieldError: If the descriptor has no name or version
            InvalidCriteriaError: If the criterion is not recognized
            VersionParseError: If a version is not a well-formed semantic version
        """
        for required in ("name", "version"):
            if not descriptor.get(required):
                raise MissingFieldError(required)
        criterion = to_criterion(criteria)
        VersionParser.parse(descriptor["version"])

        name = descriptor["name"]
        given = Entry(id=id, descriptor=descriptor)
        cached = self._store.get(name)

        if not cached:
            self._store.set(name, [given])
            logger.debug(f"First {name}@{descriptor['version']} cached as {id}")
            return DedupeResult(id=id, descriptor=descriptor)

        for idx, candidate in enumerate(cached):
            comparison = compare(criterion, descriptor["version"], candidate.version)
            if not comparison.satisfied:
                continue

            if comparison.cached_is_latest:
                logger.debug(
                    f"Redirecting {id} ({name}@{descriptor['version']}) to cached {candidate.id} "
                    f"({name}@{candidate.version}) under {criterion.value}"
                )
                return DedupeResult(id=candidate.id, descriptor=candidate.descriptor)

            self._store.replace_at(name, idx, given)
            logger.debug(
                f"Replacing cached {candidate.id} ({name}@{candidate.version}) with {id} "
                f"({name}@{descriptor['version']}) under {criterion.value}"
            )
            return DedupeResult(id=id, descriptor=descriptor, replaces_id=candidate.id)

        others = len(cached)
        self._store.append(name, given)
        logger.debug(f"No {criterion.value} match for {name}@{descriptor['version']}, cached {id} alongside {others} other(s)")
        return DedupeResult(id=id, descriptor=descriptor)

    def reset(self) -> None:
        """Reset the cache."""
        self._store.clear()

    def __len__(self) -> int:
        """Total number of cached entries."""
        return self._store.entry_count()


def create_deduper(initial_cache: Optional[Mapping[str, Iterable[Entry]]] = None) -> Deduper:
    """Create a new deduper with its own cache, optionally seeded from initial_cache."""
    return Deduper(initial_cache)
