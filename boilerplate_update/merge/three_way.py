"""Line-level three-way merge.

Implements the classic diff3 scheme: find "sync regions" where the ancestor
and both sides agree, then classify the unstable chunks between them. A chunk
changed identically on both sides, or on one side only, resolves
automatically; a chunk changed differently on both sides becomes a
ConflictHunk.
"""

from difflib import SequenceMatcher
from typing import Sequence

from ..models.merge_result import ConflictHunk, MergeRegion, ResolvedRegion

# Same window git uses to sniff binary content
BINARY_SNIFF_BYTES = 8000


def is_binary(content: bytes | None) -> bool:
    """Check whether content looks binary (contains a NUL byte)."""
    if not content:
        return False
    return b"\0" in content[:BINARY_SNIFF_BYTES]


def split_lines(content: bytes) -> list[bytes]:
    """Split content into lines, keeping line endings."""
    return content.splitlines(keepends=True)


def _matching_blocks(base: Sequence[bytes], other: Sequence[bytes]):
    return SequenceMatcher(None, base, other, autojunk=False).get_matching_blocks()


def find_sync_regions(
    base: Sequence[bytes], ours: Sequence[bytes], theirs: Sequence[bytes]
) -> list[tuple[int, int, int, int, int, int]]:
    """Find regions where base, ours and theirs all match.

    Returns:
        List of (base_start, base_end, ours_start, ours_end, theirs_start,
        theirs_end) tuples, terminated by a zero-length sentinel at the end of
        all three sequences.
    """
    ours_blocks = _matching_blocks(base, ours)
    theirs_blocks = _matching_blocks(base, theirs)
    regions = []
    i_ours = i_theirs = 0

    while i_ours < len(ours_blocks) and i_theirs < len(theirs_blocks):
        ours_base, ours_start, ours_len = ours_blocks[i_ours]
        theirs_base, theirs_start, theirs_len = theirs_blocks[i_theirs]

        start = max(ours_base, theirs_base)
        end = min(ours_base + ours_len, theirs_base + theirs_len)
        if start < end:
            ours_sub = ours_start + (start - ours_base)
            theirs_sub = theirs_start + (start - theirs_base)
            length = end - start
            regions.append(
                (start, end, ours_sub, ours_sub + length, theirs_sub, theirs_sub + length)
            )

        # Advance whichever block ends first in the base
        if ours_base + ours_len < theirs_base + theirs_len:
            i_ours += 1
        else:
            i_theirs += 1

    regions.append((len(base), len(base), len(ours), len(ours), len(theirs), len(theirs)))
    return regions


def merge_lines(
    base: Sequence[bytes], ours: Sequence[bytes], theirs: Sequence[bytes]
) -> tuple[MergeRegion, ...]:
    """Three-way merge of line sequences.

    Args:
        base: Common ancestor lines.
        ours: Working tree lines.
        theirs: Target boilerplate lines.

    Returns:
        Ordered regions; adjacent resolved runs are coalesced.
    """
    regions: list[MergeRegion] = []
    pending: list[bytes] = []

    def flush() -> None:
        if pending:
            regions.append(ResolvedRegion(tuple(pending)))
            pending.clear()

    i_base = i_ours = i_theirs = 0
    for base_match, base_end, ours_match, ours_end, theirs_match, theirs_end in (
        find_sync_regions(base, ours, theirs)
    ):
        base_chunk = list(base[i_base:base_match])
        ours_chunk = list(ours[i_ours:ours_match])
        theirs_chunk = list(theirs[i_theirs:theirs_match])

        if ours_chunk == theirs_chunk:
            pending.extend(ours_chunk)
        elif ours_chunk == base_chunk:
            pending.extend(theirs_chunk)
        elif theirs_chunk == base_chunk:
            pending.extend(ours_chunk)
        else:
            flush()
            regions.append(
                ConflictHunk(
                    base=tuple(base_chunk),
                    ours=tuple(ours_chunk),
                    theirs=tuple(theirs_chunk),
                )
            )

        pending.extend(base[base_match:base_end])
        i_base, i_ours, i_theirs = base_end, ours_end, theirs_end

    flush()
    return tuple(regions)


def has_conflicts(regions: Sequence[MergeRegion]) -> bool:
    return any(isinstance(region, ConflictHunk) for region in regions)


def join_resolved(regions: Sequence[MergeRegion]) -> bytes:
    """Join conflict-free regions back into file content.

    Raises:
        ValueError: If any region is a ConflictHunk.
    """
    if has_conflicts(regions):
        raise ValueError("Cannot join regions that contain conflicts")
    return b"".join(line for region in regions for line in region.lines)
