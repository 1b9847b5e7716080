"""Delta computation and three-way merge of boilerplate trees."""

from .conflict_renderer import ConflictRenderer
from .delta import compute_delta
from .merge_engine import MergeEngine

__all__ = ["ConflictRenderer", "MergeEngine", "compute_delta"]
