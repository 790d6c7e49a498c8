"""Tests for semantic version parsing utilities."""

import pytest
from depdedupe.errors import VersionParseError
from depdedupe.version_parser import Version, VersionParser


class TestVersionParser:
    """Tests for the VersionParser class."""

    def test_parse_simple_release(self):
        """Test parsing a plain major.minor.patch version."""
        version = VersionParser.parse("1.2.3")

        assert version.major == 1
        assert version.minor == 2
        assert version.patch == 3
        assert version.prerelease == ()
        assert version.build == ()
        assert version.is_prerelease is False

    def test_parse_prerelease_and_build(self):
        """Test parsing pre-release identifiers and build metadata."""
        version = VersionParser.parse("2.0.0-rc.1+build.5")

        assert version.prerelease == ("rc", "1")
        assert version.build == ("build", "5")
        assert version.is_prerelease is True
        assert str(version) == "2.0.0-rc.1+build.5"

    def test_parse_returns_parsed_version_unchanged(self):
        """Test that an already parsed Version passes straight through."""
        version = Version(1, 0, 0)
        assert VersionParser.parse(version) is version

    @pytest.mark.parametrize("text", [
        "not-a-version",
        "1.2",
        "1.2.3.4",
        "01.2.3",
        "1.2.3-01",
        "1.2.3-",
        "v1.2.3",
        "5.3.39.RELEASE",
        "1.0.0\n",
        "1\u0661.0.0",
        "1.0.0-rc.\u0661",
        " 1.0.0",
        "",
    ])
    def test_parse_rejects_malformed(self, text):
        """Test that malformed versions raise VersionParseError."""
        with pytest.raises(VersionParseError) as exc_info:
            VersionParser.parse(text)
        assert exc_info.value.version == text

    def test_parse_rejects_non_string(self):
        """Test that non-string input raises VersionParseError."""
        with pytest.raises(VersionParseError):
            VersionParser.parse(None)

    def test_is_valid(self):
        """Test the boolean validity check."""
        assert VersionParser.is_valid("1.0.0-SNAPSHOT") is True
        assert VersionParser.is_valid("1.0") is False

    def test_release_ranks_above_prerelease(self):
        """Test that a pre-release sorts below its release counterpart."""
        assert VersionParser.parse("1.0.0-alpha") < VersionParser.parse("1.0.0")

    def test_semver_precedence_chain(self):
        """Test the precedence example from semver.org."""
        chain = [
            "1.0.0-alpha", "1.0.0-alpha.1", "1.0.0-alpha.beta", "1.0.0-beta",
            "1.0.0-beta.2", "1.0.0-beta.11", "1.0.0-rc.1", "1.0.0",
        ]
        parsed = [VersionParser.parse(v) for v in chain]
        assert parsed == sorted(parsed)
        for lower, higher in zip(parsed, parsed[1:]):
            assert lower < higher

    def test_numeric_components_compare_numerically(self):
        """Test that 1.10.0 is newer than 1.9.0."""
        assert VersionParser.compare("1.10.0", "1.9.0") > 0
        assert VersionParser.compare("1.9.0", "1.10.0") < 0

    def test_build_metadata_ignored_for_precedence(self):
        """Test that build metadata does not affect ordering."""
        assert VersionParser.compare("1.0.0+a", "1.0.0+b") == 0
        assert VersionParser.parse("1.0.0+a") == VersionParser.parse("1.0.0+b")
        assert not VersionParser.parse("1.0.0+a").is_identical(VersionParser.parse("1.0.0+b"))
