"""Feeds package occurrences through the deduper and rewires references to winners."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from .criteria import to_criterion
from .deduper import Deduper, create_deduper
from .errors import DedupeError
from .models import Criterion, Package

logger = logging.getLogger(__name__)

ADDED = "added"
REDIRECTED = "redirected"
REPLACED = "replaced"
SKIPPED = "skipped"

ACTIONS = (ADDED, REDIRECTED, REPLACED, SKIPPED)


@dataclass
class Decision:
    """What the deduper decided for one package occurrence."""

    package: Package
    action: str  # added, redirected, replaced or skipped
    target_ref: str  # Ref the caller should use at the time of the decision
    replaced_ref: Optional[str] = None  # Ref this package took over from (replaced only)


@dataclass
class ResolutionResult:
    """Canonical packages after deduping, plus the losers and every decision taken."""

    criteria: Criterion
    winners: List[Package] = field(default_factory=list)
    losers: List[Package] = field(default_factory=list)
    decisions: List[Decision] = field(default_factory=list)

    def stats(self) -> Dict[str, int]:
        counts = {action: 0 for action in ACTIONS}
        for decision in self.decisions:
            counts[decision.action] += 1
        counts["winners"] = len(self.winners)
        counts["losers"] = len(self.losers)
        return counts


class DedupeSession:
    """
    Dedupes a stream of packages the way a dependency tree builder would.

    One Deduper is kept per package system so that same-named packages from
    different ecosystems never collide. Every redirect and replace is recorded
    so that any ref seen so far can be resolved to the canonical ref.
    """

    def __init__(self, criteria: Union[str, Criterion]):
        """
        Initialize the session.

        Raises:
            InvalidCriteriaError: If the criterion is not recognized
        """
        self.criteria = to_criterion(criteria)
        self.decisions: List[Decision] = []
        self._dedupers: Dict[str, Deduper] = {}  # system -> Deduper
        self._packages: Dict[str, Package] = {}  # ref -> Package
        self._rewired: Dict[str, str] = {}  # ref -> ref it was redirected or replaced by

    def _deduper_for(self, system: str) -> Deduper:
        if system not in self._dedupers:
            self._dedupers[system] = create_deduper()
        return self._dedupers[system]

    def add(self, package: Package) -> Decision:
        """
        Dedupe one package occurrence.

        Packages the deduper rejects (no version, or not a semantic version) are kept
        as-is and never cached.

        Raises:
            ValueError: If a package with the same ref was already added
        """
        if package.ref in self._packages:
            raise ValueError(f"Duplicate package ref: {package.ref}")

        deduper = self._deduper_for(package.system)
        try:
            result = deduper.dedupe(self.criteria, package.ref, package.to_descriptor())
        except DedupeError as e:
            logger.warning(f"Skipping {package.full_name} ({package.ref}): {e}")
            decision = Decision(package=package, action=SKIPPED, target_ref=package.ref)
            self._packages[package.ref] = package
            self.decisions.append(decision)
            return decision

        self._packages[package.ref] = package

        if result.replaces_id is not None:
            self._rewired[result.replaces_id] = package.ref
            decision = Decision(package=package, action=REPLACED, target_ref=package.ref,
                                replaced_ref=result.replaces_id)
        elif result.id != package.ref:
            self._rewired[package.ref] = result.id
            decision = Decision(package=package, action=REDIRECTED, target_ref=result.id)
        else:
            decision = Decision(package=package, action=ADDED, target_ref=package.ref)

        logger.debug(f"{decision.action}: {package.full_name} ({package.ref}) -> {decision.target_ref}")
        self.decisions.append(decision)
        return decision

    def resolve(self, ref: str) -> str:
        """Follow redirects and replacements from ref to the canonical ref."""
        while ref in self._rewired:
            ref = self._rewired[ref]
        return ref

    def result(self) -> ResolutionResult:
        """
        Mark winners and losers for everything added so far.

        Losers get scope excluded with the winning version recorded; winners collect
        the versions they defeated.
        """
        resolution = ResolutionResult(criteria=self.criteria, decisions=list(self.decisions))

        for ref, package in self._packages.items():
            winner_ref = self.resolve(ref)
            if winner_ref == ref:
                resolution.winners.append(package)
                continue

            winner = self._packages[winner_ref]
            package.scope = "excluded"
            package.scope_reason = "duplicate"
            package.winning_version = winner.version
            if package.version != winner.version and package.version not in winner.defeated_versions:
                winner.defeated_versions.append(package.version)
            resolution.losers.append(package)

        logger.info(
            f"Deduped {len(self._packages)} packages under '{self.criteria.value}': "
            f"{len(resolution.winners)} kept, {len(resolution.losers)} duplicates"
        )
        return resolution


def dedupe_packages(packages: Iterable[Package], criteria: Union[str, Criterion]) -> ResolutionResult:
    """Run every package through a fresh DedupeSession and return the result."""
    session = DedupeSession(criteria)
    for package in packages:
        session.add(package)
    return session.result()
