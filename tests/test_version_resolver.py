"""Tests for VersionResolver."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from boilerplate_update.errors import (
    InvalidDirectionError,
    NoMatchingVersionError,
    VersionIndeterminateBeforeBoundaryError,
    VersionUndeterminedError,
)
from boilerplate_update.models.version import Version, VersionRange
from boilerplate_update.resolution.version_resolver import VersionResolver

CATALOG = [
    "1.13.0",
    "1.13.8",
    "1.13.15",
    "2.11.1",
    "2.16.0-beta.1",
    "2.18.0",
    "2.18.2",
    "3.0.0-beta.1",
]


@pytest.fixture
def resolver():
    """Resolver over a small ember-cli-like catalog."""
    return VersionResolver(Version.parse(text) for text in CATALOG)


class TestResolveSpec:
    """Test suite for resolving a single spec."""

    def test_latest_skips_prereleases(self, resolver):
        assert resolver.latest() == Version(2, 18, 2)

    def test_latest_falls_back_to_prereleases(self):
        resolver = VersionResolver([Version.parse("1.0.0-beta.1"), Version.parse("1.0.0-beta.2")])
        assert resolver.latest() == Version.parse("1.0.0-beta.2")

    def test_latest_with_no_versions(self):
        with pytest.raises(NoMatchingVersionError):
            VersionResolver([]).latest()

    def test_none_means_latest(self, resolver):
        assert resolver.resolve_spec(None) == Version(2, 18, 2)

    def test_exact_version_must_be_available(self, resolver):
        assert resolver.resolve_spec("2.11.1") == Version(2, 11, 1)
        with pytest.raises(NoMatchingVersionError) as exc:
            resolver.resolve_spec("2.12.0")
        assert "No version matching '2.12.0'" in str(exc.value)

    def test_range_picks_greatest_match(self, resolver):
        assert resolver.resolve_spec("1.13") == Version(1, 13, 15)
        assert resolver.resolve_spec(VersionRange.parse("^2")) == Version(2, 18, 2)

    def test_explicit_prerelease(self, resolver):
        assert resolver.resolve_spec("3.0.0-beta.1") == Version.parse("3.0.0-beta.1")

    def test_range_without_match(self, resolver):
        with pytest.raises(NoMatchingVersionError):
            resolver.resolve_spec("^4.0.0")

    def test_duplicate_versions_are_collapsed(self):
        resolver = VersionResolver([Version(1, 0, 0), Version(1, 0, 0)])
        assert resolver.available_versions == (Version(1, 0, 0),)


class TestResolve:
    """Test suite for resolving both update endpoints."""

    def test_from_and_to_ranges(self, resolver):
        """Test from="1.13", to="^2" resolves to the greatest matches."""
        versions = resolver.resolve(current=None, from_spec="1.13", to_spec="^2")

        assert versions.from_version == Version(1, 13, 15)
        assert versions.to_version == Version(2, 18, 2)

    def test_current_version_from_manifest(self, resolver):
        versions = resolver.resolve(current="~2.11.1", from_spec=None, to_spec=None)

        assert versions.from_version == Version(2, 11, 1)
        assert versions.to_version == Version(2, 18, 2)

    def test_from_overrides_current(self, resolver):
        versions = resolver.resolve(current="~2.11.1", from_spec="1.13.8", to_spec="2.11.1")
        assert versions.from_version == Version(1, 13, 8)

    def test_undetermined_current_version(self, resolver):
        with pytest.raises(VersionUndeterminedError) as exc:
            resolver.resolve(current=None, from_spec=None, to_spec=None)
        assert "--from" in str(exc.value)

    def test_target_before_start(self, resolver):
        with pytest.raises(InvalidDirectionError):
            resolver.resolve(current=None, from_spec="2.18.2", to_spec="1.13.15")

    def test_equal_versions_rejected_by_default(self, resolver):
        with pytest.raises(InvalidDirectionError):
            resolver.resolve(current="2.18.2", from_spec=None, to_spec=None)

    def test_equal_versions_allowed(self, resolver):
        versions = resolver.resolve(
            current="2.18.2", from_spec=None, to_spec=None, allow_equal=True
        )
        assert versions.from_version == versions.to_version == Version(2, 18, 2)

    def test_no_match_propagates(self, resolver):
        with pytest.raises(NoMatchingVersionError):
            resolver.resolve(current=None, from_spec="0.1.0", to_spec=None)


class TestBoundary:
    """Test suite for project types whose version detection has a boundary."""

    @pytest.fixture
    def glimmer_resolver(self):
        return VersionResolver(
            Version.parse(text) for text in ["0.5.0", "0.6.3", "0.8.1", "0.9.0"]
        )

    def test_current_below_boundary(self, glimmer_resolver):
        with pytest.raises(VersionIndeterminateBeforeBoundaryError) as exc:
            glimmer_resolver.resolve(
                current="0.5.0",
                from_spec=None,
                to_spec=None,
                project_type="glimmer",
                boundary=Version(0, 6, 3),
            )
        assert "glimmer version cannot be determined before 0.6.3" in str(exc.value)

    def test_missing_current_with_boundary(self, glimmer_resolver):
        with pytest.raises(VersionIndeterminateBeforeBoundaryError):
            glimmer_resolver.resolve(
                current=None,
                from_spec=None,
                to_spec=None,
                project_type="glimmer",
                boundary=Version(0, 6, 3),
            )

    def test_boundary_error_is_an_undetermined_error(self):
        assert issubclass(VersionIndeterminateBeforeBoundaryError, VersionUndeterminedError)

    def test_explicit_from_bypasses_boundary(self, glimmer_resolver):
        versions = glimmer_resolver.resolve(
            current="0.5.0",
            from_spec="0.5.0",
            to_spec=None,
            project_type="glimmer",
            boundary=Version(0, 6, 3),
        )
        assert versions.from_version == Version(0, 5, 0)
        assert versions.to_version == Version(0, 9, 0)

    def test_current_range_at_or_above_boundary(self, glimmer_resolver):
        versions = glimmer_resolver.resolve(
            current="^0.8.0",
            from_spec=None,
            to_spec=None,
            project_type="glimmer",
            boundary=Version(0, 6, 3),
        )
        assert versions.from_version == Version(0, 8, 1)
