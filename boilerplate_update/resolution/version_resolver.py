"""Resolution of version inputs into concrete boilerplate versions.

Turns the project's detected version and the user's --from/--to inputs
(exact versions or semver ranges) into two concrete versions for which a
boilerplate snapshot exists.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from ..errors import (
    InvalidDirectionError,
    NoMatchingVersionError,
    VersionIndeterminateBeforeBoundaryError,
    VersionUndeterminedError,
)
from ..models.version import Version, VersionRange, VersionSpec, parse_spec

logger = logging.getLogger(__name__)

SpecInput = Union[VersionSpec, str, None]


@dataclass(frozen=True)
class ResolvedVersions:
    """Concrete endpoints of an update.

    Attributes:
        from_version: Version the project is updated from.
        to_version: Version the project is updated to.
    """

    from_version: Version
    to_version: Version


def _as_spec(spec: SpecInput) -> Optional[VersionSpec]:
    if spec is None or isinstance(spec, (Version, VersionRange)):
        return spec
    return parse_spec(spec)


class VersionResolver:
    """Resolves version specs against the versions that have snapshots.

    The available version list is fixed at construction time and passed in
    explicitly; the resolver never looks anything up on its own.
    """

    def __init__(self, available_versions: Iterable[Version]):
        self.available_versions = tuple(sorted(set(available_versions)))

    def latest(self) -> Version:
        """Greatest available release (pre-releases only if nothing else exists).

        Raises:
            NoMatchingVersionError: If no versions are available.
        """
        releases = [v for v in self.available_versions if not v.is_prerelease]
        candidates = releases or list(self.available_versions)
        if not candidates:
            raise NoMatchingVersionError("latest")
        return candidates[-1]

    def resolve_spec(self, spec: SpecInput) -> Version:
        """Resolve one spec to a concrete available version.

        Args:
            spec: Exact version, range, or text parsed as either.

        Returns:
            The exact version when available, otherwise the greatest
            available version satisfying the range.

        Raises:
            NoMatchingVersionError: If nothing available matches.
            InvalidVersionError: If text input cannot be parsed.
        """
        parsed = _as_spec(spec)
        if parsed is None:
            return self.latest()

        if isinstance(parsed, Version):
            if parsed in self.available_versions:
                return parsed
            raise NoMatchingVersionError(str(parsed))

        matching = [v for v in self.available_versions if parsed.satisfies(v)]
        if not matching:
            raise NoMatchingVersionError(str(parsed))
        return matching[-1]

    def resolve_target(self, to_spec: SpecInput) -> Version:
        """Resolve only the target version (reset mode)."""
        to_version = self.resolve_spec(to_spec)
        logger.debug("Resolved target %s -> %s", to_spec, to_version)
        return to_version

    def resolve(
        self,
        current: SpecInput,
        from_spec: SpecInput,
        to_spec: SpecInput,
        allow_equal: bool = False,
        project_type: Optional[str] = None,
        boundary: Optional[Version] = None,
    ) -> ResolvedVersions:
        """Resolve the update endpoints.

        Args:
            current: Version detected from the manifest (raw dependency
                spec such as '~2.11.1'), or None when unknown.
            from_spec: Explicit --from input, or None to use current.
            to_spec: --to input, or None for the latest release.
            allow_equal: Permit from == to (catalog listing on an up-to-date project).
            project_type: Project type, used in boundary error messages.
            boundary: Version below which detection of current is unreliable
                for this project type.

        Returns:
            ResolvedVersions with to_version > from_version (or equal when
            allow_equal).

        Raises:
            VersionIndeterminateBeforeBoundaryError: Detection is unreliable
                for this project and no --from was given.
            VersionUndeterminedError: No current version and no --from.
            NoMatchingVersionError: A spec matches no available version.
            InvalidDirectionError: The target precedes the start.
        """
        from_parsed = _as_spec(from_spec)

        if from_parsed is None:
            current_parsed = _as_spec(current)
            if boundary is not None and self._below_boundary(current_parsed, boundary):
                raise VersionIndeterminateBeforeBoundaryError(
                    project_type or "project", str(boundary)
                )
            if current_parsed is None:
                raise VersionUndeterminedError()
            from_parsed = current_parsed

        from_version = self.resolve_spec(from_parsed)
        to_version = self.resolve_spec(to_spec)
        logger.debug("Resolved versions %s -> %s", from_version, to_version)

        if to_version < from_version or (
            to_version == from_version and not allow_equal
        ):
            raise InvalidDirectionError(str(from_version), str(to_version))

        return ResolvedVersions(from_version=from_version, to_version=to_version)

    def _below_boundary(self, current: Optional[VersionSpec], boundary: Version) -> bool:
        if current is None:
            return True
        if isinstance(current, Version):
            return current < boundary
        # A range counts as below the boundary if nothing it admits reaches it
        matching = [v for v in self.available_versions if current.satisfies(v)]
        return not matching or matching[-1] < boundary
