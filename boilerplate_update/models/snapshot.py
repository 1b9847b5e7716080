"""Snapshot and Delta data models for boilerplate trees."""

import io
import tarfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from .version import Version

# Directories never captured from a generated tree
IGNORED_DIRS = frozenset({".git", "node_modules", "bower_components", "tmp", "dist"})


@dataclass(frozen=True)
class Snapshot:
    """Immutable capture of a boilerplate tree at one version.

    Attributes:
        files: Mapping of POSIX-style relative path to file content.
        version: Generator version the tree was produced by, if known.
        source: Identifier of where the tree came from (repo URL or 'custom').
    """

    files: Mapping[str, bytes]
    version: Optional[Version] = None
    source: str = ""

    def __post_init__(self):
        # Freeze a private copy so callers cannot mutate the snapshot
        object.__setattr__(self, "files", MappingProxyType(dict(self.files)))

    @property
    def paths(self) -> frozenset[str]:
        return frozenset(self.files)

    def get(self, path: str) -> Optional[bytes]:
        return self.files.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self.files

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.files))

    def __len__(self) -> int:
        return len(self.files)

    @classmethod
    def from_directory(
        cls, root: Path, version: Optional[Version] = None, source: str = ""
    ) -> "Snapshot":
        """Read every regular file under root, skipping generated directories."""
        files: dict[str, bytes] = {}
        for path in sorted(root.rglob("*")):
            relative = path.relative_to(root)
            if any(part in IGNORED_DIRS for part in relative.parts):
                continue
            if path.is_file() and not path.is_symlink():
                files[relative.as_posix()] = path.read_bytes()
        return cls(files=files, version=version, source=source)

    @classmethod
    def from_tar(
        cls, data: bytes, version: Optional[Version] = None, source: str = ""
    ) -> "Snapshot":
        """Read every regular file of an uncompressed tar archive (git archive output)."""
        files: dict[str, bytes] = {}
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:") as archive:
            for member in archive.getmembers():
                if not member.isfile():
                    continue
                extracted = archive.extractfile(member)
                if extracted is None:
                    continue
                files[member.name] = extracted.read()
        return cls(files=files, version=version, source=source)


class ChangeKind(str, Enum):
    """How a path differs between two snapshots."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DeltaEntry:
    """Change to a single path between the 'from' and 'to' snapshots.

    Attributes:
        path: Relative path.
        kind: Kind of change.
        old: Content in the 'from' snapshot (None when added).
        new: Content in the 'to' snapshot (None when removed).
    """

    path: str
    kind: ChangeKind
    old: Optional[bytes] = None
    new: Optional[bytes] = None


@dataclass(frozen=True)
class Delta:
    """Computed difference between two snapshots, sorted by path."""

    entries: tuple[DeltaEntry, ...] = field(default_factory=tuple)

    @property
    def changes(self) -> tuple[DeltaEntry, ...]:
        """Entries whose kind is not UNCHANGED."""
        return tuple(e for e in self.entries if e.kind is not ChangeKind.UNCHANGED)

    @property
    def is_empty(self) -> bool:
        return not self.changes

    def by_kind(self, kind: ChangeKind) -> list[str]:
        return [e.path for e in self.entries if e.kind is kind]

    def counts(self) -> dict[str, int]:
        """Number of entries per change kind."""
        counts = {kind.value: 0 for kind in ChangeKind}
        for entry in self.entries:
            counts[entry.kind.value] += 1
        return counts
