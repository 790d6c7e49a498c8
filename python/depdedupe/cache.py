"""In-memory store of cached entries, keyed by package name."""

from typing import Dict, Iterable, List, Mapping, Optional

from .errors import MissingFieldError
from .models import Entry


class CacheStore:
    """
    Maps a package name to the ordered list of entries cached for it.

    Insertion order within a name's list is the order dedupe scans candidates in.
    """

    def __init__(self, initial: Optional[Mapping[str, Iterable[Entry]]] = None):
        self._entries: Dict[str, List[Entry]] = {}
        if initial:
            for name, entries in initial.items():
                self.set(name, entries)

    def get(self, name: str) -> Optional[List[Entry]]:
        """Return the entries cached for a name, or None if the name was never seen."""
        return self._entries.get(name)

    def set(self, name: str, entries: Iterable[Entry]) -> None:
        """Store entries for a name, validating each one. Raises MissingFieldError."""
        self._entries[name] = [_as_entry(entry) for entry in entries]

    def append(self, name: str, entry: Entry) -> None:
        self._entries.setdefault(name, []).append(entry)

    def replace_at(self, name: str, index: int, entry: Entry) -> None:
        self._entries[name][index] = entry

    def clear(self) -> None:
        self._entries = {}

    def names(self) -> List[str]:
        return list(self._entries)

    def entry_count(self) -> int:
        """Total number of entries across all names."""
        return sum(len(entries) for entries in self._entries.values())

    def to_dict(self) -> Dict[str, List[Entry]]:
        """Shallow copy in the shape the constructor accepts."""
        return {name: list(entries) for name, entries in self._entries.items()}

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _as_entry(entry) -> Entry:
    """
    Coerce a seeded entry into an Entry, checking it carries what a dedupe scan reads.

    Raises:
        MissingFieldError: If the entry lacks an id or descriptor, or the descriptor
            lacks a name or version
    """
    # Seed caches may carry plain {"id": ..., "descriptor": ...} mappings
    if not isinstance(entry, Entry):
        for required in ("id", "descriptor"):
            if not entry.get(required):
                raise MissingFieldError(required)
        entry = Entry(id=entry["id"], descriptor=entry["descriptor"])
    elif not entry.descriptor:
        raise MissingFieldError("descriptor")
    for required in ("name", "version"):
        if not entry.descriptor.get(required):
            raise MissingFieldError(required)
    return entry
