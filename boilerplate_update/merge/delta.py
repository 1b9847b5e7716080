"""Delta computation between two boilerplate snapshots."""

from ..models.snapshot import ChangeKind, Delta, DeltaEntry, Snapshot


def compute_delta(from_snapshot: Snapshot, to_snapshot: Snapshot) -> Delta:
    """Compute the per-path difference between two snapshots.

    Pure function of its inputs; the working tree is never consulted.

    Args:
        from_snapshot: Boilerplate at the starting version.
        to_snapshot: Boilerplate at the target version.

    Returns:
        Delta with one entry per path present in either snapshot, sorted by path.
    """
    entries = []
    for path in sorted(from_snapshot.paths | to_snapshot.paths):
        old = from_snapshot.get(path)
        new = to_snapshot.get(path)
        if old is None:
            kind = ChangeKind.ADDED
        elif new is None:
            kind = ChangeKind.REMOVED
        elif old != new:
            kind = ChangeKind.MODIFIED
        else:
            kind = ChangeKind.UNCHANGED
        entries.append(DeltaEntry(path=path, kind=kind, old=old, new=new))
    return Delta(entries=tuple(entries))
