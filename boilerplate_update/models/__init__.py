"""Data models for boilerplate updates.

This module defines the core data structures used throughout the updater:
- Version / VersionRange: semver versions and npm-style ranges
- ProjectIdentity: generator type and options of a project
- Snapshot / Delta: boilerplate trees and their differences
- MergeResult: per-path merge outcomes and conflicts
- CodemodDescriptor: codemod registry entries
"""

from .codemod import CodemodDescriptor
from .merge_result import (
    Conflict,
    ConflictHunk,
    ConflictKind,
    MergeResult,
    PathOutcome,
    PathResult,
    ResolvedRegion,
)
from .project_identity import ProjectIdentity
from .snapshot import ChangeKind, Delta, DeltaEntry, Snapshot
from .version import Version, VersionRange, VersionSpec, parse_spec

__all__ = [
    "ChangeKind",
    "CodemodDescriptor",
    "Conflict",
    "ConflictHunk",
    "ConflictKind",
    "Delta",
    "DeltaEntry",
    "MergeResult",
    "PathOutcome",
    "PathResult",
    "ProjectIdentity",
    "ResolvedRegion",
    "Snapshot",
    "Version",
    "VersionRange",
    "VersionSpec",
    "parse_spec",
]
