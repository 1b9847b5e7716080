"""Tests for inline conflict marker rendering."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from boilerplate_update.merge.conflict_renderer import ConflictRenderer
from boilerplate_update.merge.three_way import merge_lines, split_lines
from boilerplate_update.models.merge_result import Conflict, ConflictKind


def content_conflict(base, ours, theirs):
    return Conflict(
        path="f.txt",
        kind=ConflictKind.CONTENT,
        ours=ours,
        theirs=theirs,
        base=base,
        regions=merge_lines(split_lines(base), split_lines(ours), split_lines(theirs)),
    )


class TestConflictRenderer:
    """Test suite for ConflictRenderer."""

    def test_renders_git_style_markers(self):
        conflict = content_conflict(b"a\nb\nc\n", b"a\nX\nc\n", b"a\nY\nc\n")
        renderer = ConflictRenderer(ours_label="local", theirs_label="3.2.0")

        rendered = renderer.render(conflict)

        assert rendered == (
            b"a\n"
            b"<<<<<<< local\n"
            b"X\n"
            b"=======\n"
            b"Y\n"
            b">>>>>>> 3.2.0\n"
            b"c\n"
        )

    def test_side_without_trailing_newline(self):
        conflict = content_conflict(b"a\nb", b"a\nX", b"a\nY")

        rendered = ConflictRenderer().render(conflict)

        assert b"X\n=======\n" in rendered
        assert rendered.endswith(b"Y\n>>>>>>> theirs\n")

    def test_non_content_conflicts_are_not_rendered(self):
        for kind in (
            ConflictKind.ADD_ADD,
            ConflictKind.MODIFY_DELETE,
            ConflictKind.DELETE_MODIFY,
            ConflictKind.BINARY,
        ):
            conflict = Conflict(path="f", kind=kind, ours=b"x", theirs=b"y")
            assert ConflictRenderer().render(conflict) is None
