"""Tests for the dedupe session that rewires package references."""

import pytest
from depdedupe.errors import InvalidCriteriaError
from depdedupe.models import Package
from depdedupe.resolution import (
    ADDED, REDIRECTED, REPLACED, SKIPPED, DedupeSession, dedupe_packages,
)


def npm(name, version, ref):
    return Package(system="npm", name=name, version=version, ref=ref)


class TestDedupeSession:
    """Tests for DedupeSession."""

    def test_actions(self):
        """Test that each deduper outcome is recorded as the matching action."""
        session = DedupeSession("minor")

        assert session.add(npm("foo", "1.0.0", "r1")).action == ADDED
        redirected = session.add(npm("foo", "1.0.0", "r2"))
        replaced = session.add(npm("foo", "1.2.0", "r3"))
        appended = session.add(npm("foo", "2.0.0", "r4"))

        assert redirected.action == REDIRECTED
        assert redirected.target_ref == "r1"
        assert replaced.action == REPLACED
        assert replaced.replaced_ref == "r1"
        assert appended.action == ADDED

    def test_resolve_follows_chains(self):
        """Test that a redirect to an entry that was later replaced resolves to the replacement."""
        session = DedupeSession("minor")
        session.add(npm("foo", "1.0.0", "r1"))
        session.add(npm("foo", "1.0.0", "r2"))
        session.add(npm("foo", "1.5.0", "r3"))

        assert session.resolve("r2") == "r3"
        assert session.resolve("r1") == "r3"
        assert session.resolve("r3") == "r3"

    def test_result_marks_winners_and_losers(self):
        """Test that losers are excluded and winners record defeated versions."""
        result = dedupe_packages([
            npm("foo", "1.0.0", "r1"),
            npm("foo", "1.0.0", "r2"),
            npm("foo", "1.5.0", "r3"),
            npm("bar", "2.0.0", "r4"),
        ], "minor")

        assert [p.ref for p in result.winners] == ["r3", "r4"]
        assert [p.ref for p in result.losers] == ["r1", "r2"]
        for loser in result.losers:
            assert loser.scope == "excluded"
            assert loser.scope_reason == "duplicate"
            assert loser.winning_version == "1.5.0"
        assert result.winners[0].defeated_versions == ["1.0.0"]
        assert result.winners[0].scope == "required"

    def test_systems_do_not_collide(self):
        """Test that the same name in different ecosystems is deduped separately."""
        result = dedupe_packages([
            Package(system="npm", name="requests", version="1.0.0", ref="a"),
            Package(system="pypi", name="requests", version="1.0.0", ref="b"),
        ], "any")

        assert len(result.winners) == 2
        assert result.losers == []

    def test_non_semver_packages_are_skipped(self):
        """Test that packages without a semantic version are kept as-is."""
        result = dedupe_packages([
            Package(system="maven", name="org.example:lib", version="5.3.39.RELEASE", ref="a"),
            Package(system="maven", name="org.example:lib", version="5.3.39.RELEASE", ref="b"),
        ], "any")

        assert [d.action for d in result.decisions] == [SKIPPED, SKIPPED]
        assert len(result.winners) == 2

    def test_empty_version_is_skipped(self):
        """Test that a package without a version is skipped instead of aborting the run."""
        session = DedupeSession("minor")
        session.add(npm("foo", "1.0.0", "r1"))

        decision = session.add(npm("bar", "", "r2"))
        result = session.result()

        assert decision.action == SKIPPED
        assert [p.ref for p in result.winners] == ["r1", "r2"]
        assert [d.package.ref for d in result.decisions] == ["r1", "r2"]

    def test_stats(self):
        """Test per-action counts."""
        result = dedupe_packages([
            npm("foo", "1.0.0", "r1"),
            npm("foo", "1.0.0", "r2"),
            npm("foo", "1.0.1", "r3"),
            Package(system="npm", name="foo", version="latest", ref="r4"),
        ], "patch")

        assert result.stats() == {
            ADDED: 1, REDIRECTED: 1, REPLACED: 1, SKIPPED: 1,
            "winners": 2, "losers": 2,
        }

    def test_duplicate_ref_rejected(self):
        """Test that adding the same ref twice raises."""
        session = DedupeSession("exact")
        session.add(npm("foo", "1.0.0", "r1"))

        with pytest.raises(ValueError):
            session.add(npm("foo", "1.0.0", "r1"))

    def test_invalid_criteria(self):
        """Test that an unknown criterion fails at construction."""
        with pytest.raises(InvalidCriteriaError):
            DedupeSession("newest")
