"""MergeResult data model for boilerplate merge outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .snapshot import ChangeKind, Delta


class PathOutcome(str, Enum):
    """What the merge did to a single path."""

    CLEAN = "clean"  # Boilerplate change applied (or already present)
    DELETED = "deleted"  # Unmodified boilerplate file removed
    CONFLICT = "conflict"  # Needs manual resolution
    UNTOUCHED = "untouched"  # Not part of the delta


class ConflictKind(str, Enum):
    """Why a path could not be merged automatically."""

    ADD_ADD = "add/add"  # Boilerplate adds a path the user already has
    MODIFY_DELETE = "modify/delete"  # Boilerplate removes a file the user edited
    DELETE_MODIFY = "delete/modify"  # Boilerplate edits a file the user removed
    CONTENT = "content"  # Overlapping line changes
    BINARY = "binary"  # Divergent binary content


@dataclass(frozen=True)
class ResolvedRegion:
    """A run of lines the three-way merge settled without conflict."""

    lines: tuple[bytes, ...]


@dataclass(frozen=True)
class ConflictHunk:
    """A run of lines changed differently on both sides.

    Attributes:
        base: Lines in the common ancestor ('from' boilerplate).
        ours: Lines in the working tree.
        theirs: Lines in the 'to' boilerplate.
    """

    base: tuple[bytes, ...]
    ours: tuple[bytes, ...]
    theirs: tuple[bytes, ...]


MergeRegion = Union[ResolvedRegion, ConflictHunk]


@dataclass(frozen=True)
class Conflict:
    """Both sides of a path that needs manual resolution.

    Rendering (inline markers, side files) is left to the caller.

    Attributes:
        path: Relative path.
        kind: Conflict category.
        ours: Working tree content (None when absent or not a regular file).
        theirs: 'to' boilerplate content (None when removed).
        base: 'from' boilerplate content (None when added).
        regions: Line regions for CONTENT conflicts, empty otherwise.
    """

    path: str
    kind: ConflictKind
    ours: Optional[bytes]
    theirs: Optional[bytes]
    base: Optional[bytes] = None
    regions: tuple[MergeRegion, ...] = field(default_factory=tuple)

    @property
    def hunk_count(self) -> int:
        return sum(1 for region in self.regions if isinstance(region, ConflictHunk))


@dataclass(frozen=True)
class PathResult:
    """Outcome for one path.

    Attributes:
        path: Relative path.
        outcome: What happened.
        change: Boilerplate change kind that drove the outcome.
        written: True if the working tree file was written or deleted.
        conflict: Conflict details when outcome is CONFLICT.
    """

    path: str
    outcome: PathOutcome
    change: Optional[ChangeKind] = None
    written: bool = False
    conflict: Optional[Conflict] = None


@dataclass
class MergeResult:
    """Aggregated outcome of applying a delta onto a working tree.

    Attributes:
        results: Per-path outcomes, sorted by path.
        delta: The delta that was applied.
    """

    results: list[PathResult] = field(default_factory=list)
    delta: Delta = field(default_factory=Delta)

    def _paths(self, *outcomes: PathOutcome) -> list[str]:
        return [r.path for r in self.results if r.outcome in outcomes]

    @property
    def clean_paths(self) -> list[str]:
        """Paths safe to auto-stage (applied changes and deletions)."""
        return self._paths(PathOutcome.CLEAN, PathOutcome.DELETED)

    @property
    def written_paths(self) -> list[str]:
        """Clean paths whose working tree file actually changed."""
        return [
            r.path
            for r in self.results
            if r.written and r.outcome in (PathOutcome.CLEAN, PathOutcome.DELETED)
        ]

    @property
    def conflicted_paths(self) -> list[str]:
        return self._paths(PathOutcome.CONFLICT)

    @property
    def untouched_paths(self) -> list[str]:
        return self._paths(PathOutcome.UNTOUCHED)

    @property
    def conflicts(self) -> list[Conflict]:
        return [r.conflict for r in self.results if r.conflict is not None]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicted_paths)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary (contents omitted)."""
        return {
            "clean": self.clean_paths,
            "conflicted": [
                {"path": c.path, "kind": c.kind.value, "hunks": c.hunk_count}
                for c in self.conflicts
            ],
            "untouched": self.untouched_paths,
            "delta": self.delta.counts(),
        }
