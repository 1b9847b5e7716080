"""Inline conflict marker rendering."""

from typing import Optional

from ..models.merge_result import Conflict, ConflictHunk, ConflictKind

MARKER_SIZE = 7


def _ensure_newline(lines: tuple[bytes, ...]) -> list[bytes]:
    # A side ending without a newline would glue onto the next marker
    out = list(lines)
    if out and not out[-1].endswith((b"\n", b"\r")):
        out[-1] = out[-1] + b"\n"
    return out


class ConflictRenderer:
    """Renders content conflicts with git-style inline markers.

    Only CONTENT conflicts have a line structure to mark up; add/add,
    modify/delete, delete/modify and binary conflicts render to None, meaning
    the working tree file is left as it is.
    """

    def __init__(self, ours_label: str = "ours", theirs_label: str = "theirs"):
        self.ours_label = ours_label
        self.theirs_label = theirs_label

    def render(self, conflict: Conflict) -> Optional[bytes]:
        if conflict.kind is not ConflictKind.CONTENT:
            return None

        out: list[bytes] = []
        for region in conflict.regions:
            if isinstance(region, ConflictHunk):
                out.append(b"<" * MARKER_SIZE + f" {self.ours_label}\n".encode())
                out.extend(_ensure_newline(region.ours))
                out.append(b"=" * MARKER_SIZE + b"\n")
                out.extend(_ensure_newline(region.theirs))
                out.append(b">" * MARKER_SIZE + f" {self.theirs_label}\n".encode())
            else:
                out.extend(region.lines)
        return b"".join(out)
