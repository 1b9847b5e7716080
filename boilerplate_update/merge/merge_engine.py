"""Merge engine applying boilerplate deltas onto a working tree.

The engine computes the delta between the 'from' and 'to' boilerplate
snapshots and replays it onto the developer's checkout, treating the 'from'
boilerplate as the common ancestor of a three-way merge:

- added: written when the path is free (or already identical), conflict otherwise,
  including when a directory or other non-file occupies the path
- removed: deleted when the user never touched it, conflict otherwise
- modified: line-level three-way merge (byte equality for binary files)

Conflicts are returned as values; the engine only raises WorkingTreeIOError.
"""

import logging
from typing import Iterable, Optional, cast

from ..models.merge_result import (
    Conflict,
    ConflictKind,
    MergeResult,
    PathOutcome,
    PathResult,
)
from ..models.snapshot import ChangeKind, DeltaEntry, Snapshot
from ..utils.working_tree import WorkingTree
from .delta import compute_delta
from .three_way import has_conflicts, is_binary, join_resolved, merge_lines, split_lines

logger = logging.getLogger(__name__)


class MergeEngine:
    """Applies boilerplate deltas to a working tree.

    Stateless; a single instance can serve any number of merges.
    """

    def merge(
        self,
        working_tree: WorkingTree,
        from_snapshot: Snapshot,
        to_snapshot: Snapshot,
    ) -> MergeResult:
        """Apply the delta between two snapshots onto the working tree.

        Paths present in the working tree but absent from both snapshots are
        never read or written.

        Args:
            working_tree: Developer checkout to update in place.
            from_snapshot: Boilerplate at the starting version (merge base).
            to_snapshot: Boilerplate at the target version.

        Returns:
            MergeResult partitioning paths into clean, conflicted and untouched.

        Raises:
            WorkingTreeIOError: If the working tree cannot be read or written.
        """
        delta = compute_delta(from_snapshot, to_snapshot)
        result = MergeResult(delta=delta)

        for entry in delta.entries:
            if entry.kind is ChangeKind.UNCHANGED:
                path_result = PathResult(entry.path, PathOutcome.UNTOUCHED, entry.kind)
            else:
                path_result = self._apply_entry(working_tree, entry)
            logger.debug(
                "%s: %s -> %s", entry.path, entry.kind.value, path_result.outcome.value
            )
            result.results.append(path_result)

        return result

    def _apply_entry(self, working_tree: WorkingTree, entry: DeltaEntry) -> PathResult:
        current = working_tree.read(entry.path)
        if entry.kind is ChangeKind.ADDED:
            return self._apply_added(working_tree, entry, current)
        if entry.kind is ChangeKind.REMOVED:
            return self._apply_removed(working_tree, entry, current)
        return self._apply_modified(working_tree, entry, current)

    def _apply_added(
        self, working_tree: WorkingTree, entry: DeltaEntry, current: Optional[bytes]
    ) -> PathResult:
        new = cast(bytes, entry.new)
        if current is None and not working_tree.is_blocked(entry.path):
            working_tree.write(entry.path, new)
            return PathResult(entry.path, PathOutcome.CLEAN, entry.kind, written=True)
        if current == new:
            return PathResult(entry.path, PathOutcome.CLEAN, entry.kind)
        # Path already taken by unrelated local content (or a directory)
        conflict = Conflict(
            path=entry.path,
            kind=ConflictKind.ADD_ADD,
            ours=current,
            theirs=new,
        )
        return PathResult(entry.path, PathOutcome.CONFLICT, entry.kind, conflict=conflict)

    def _apply_removed(
        self, working_tree: WorkingTree, entry: DeltaEntry, current: Optional[bytes]
    ) -> PathResult:
        if current is None:
            return PathResult(entry.path, PathOutcome.UNTOUCHED, entry.kind)
        if current == entry.old:
            working_tree.delete(entry.path)
            return PathResult(entry.path, PathOutcome.DELETED, entry.kind, written=True)
        conflict = Conflict(
            path=entry.path,
            kind=ConflictKind.MODIFY_DELETE,
            ours=current,
            theirs=None,
            base=entry.old,
        )
        return PathResult(entry.path, PathOutcome.CONFLICT, entry.kind, conflict=conflict)

    def _apply_modified(
        self, working_tree: WorkingTree, entry: DeltaEntry, current: Optional[bytes]
    ) -> PathResult:
        old, new = cast(bytes, entry.old), cast(bytes, entry.new)
        if current is None:
            conflict = Conflict(
                path=entry.path,
                kind=ConflictKind.DELETE_MODIFY,
                ours=None,
                theirs=new,
                base=old,
            )
            return PathResult(
                entry.path, PathOutcome.CONFLICT, entry.kind, conflict=conflict
            )
        if current == new:
            return PathResult(entry.path, PathOutcome.CLEAN, entry.kind)
        if current == old:
            working_tree.write(entry.path, new)
            return PathResult(entry.path, PathOutcome.CLEAN, entry.kind, written=True)

        if is_binary(old) or is_binary(new) or is_binary(current):
            conflict = Conflict(
                path=entry.path,
                kind=ConflictKind.BINARY,
                ours=current,
                theirs=new,
                base=old,
            )
            return PathResult(
                entry.path, PathOutcome.CONFLICT, entry.kind, conflict=conflict
            )

        regions = merge_lines(
            split_lines(old), split_lines(current), split_lines(new)
        )
        if has_conflicts(regions):
            conflict = Conflict(
                path=entry.path,
                kind=ConflictKind.CONTENT,
                ours=current,
                theirs=new,
                base=old,
                regions=regions,
            )
            return PathResult(
                entry.path, PathOutcome.CONFLICT, entry.kind, conflict=conflict
            )

        merged = join_resolved(regions)
        written = merged != current
        if written:
            working_tree.write(entry.path, merged)
        return PathResult(entry.path, PathOutcome.CLEAN, entry.kind, written=written)

    def reset(
        self,
        working_tree: WorkingTree,
        to_snapshot: Snapshot,
        baseline_paths: Iterable[str] = (),
    ) -> MergeResult:
        """Force boilerplate paths back to their pristine content.

        The "currently detected" boilerplate is the working tree's content at
        every path of to_snapshot plus baseline_paths (the paths of the
        project's current-version boilerplate, when known). The delta from it
        to to_snapshot is applied without conflict detection: local edits to
        boilerplate files are discarded, boilerplate files the target no
        longer has are deleted, and every other file is left alone.

        Args:
            working_tree: Developer checkout to reset in place.
            to_snapshot: Pristine boilerplate to restore.
            baseline_paths: Extra boilerplate paths eligible for deletion.

        Returns:
            MergeResult whose delta is empty when the tree already matches.
        """
        detected: dict[str, bytes] = {}
        for path in sorted(to_snapshot.paths | set(baseline_paths)):
            content = working_tree.read(path)
            if content is not None:
                detected[path] = content

        delta = compute_delta(Snapshot(files=detected), to_snapshot)
        result = MergeResult(delta=delta)

        for entry in delta.entries:
            if entry.kind is ChangeKind.UNCHANGED:
                outcome, written = PathOutcome.UNTOUCHED, False
            elif entry.kind is ChangeKind.REMOVED:
                working_tree.delete(entry.path)
                outcome, written = PathOutcome.DELETED, True
            elif working_tree.is_blocked(entry.path):
                logger.warning("Not resetting %s: a directory occupies the path", entry.path)
                outcome, written = PathOutcome.UNTOUCHED, False
            else:
                working_tree.write(entry.path, cast(bytes, entry.new))
                outcome, written = PathOutcome.CLEAN, True
            result.results.append(
                PathResult(entry.path, outcome, entry.kind, written=written)
            )

        return result
