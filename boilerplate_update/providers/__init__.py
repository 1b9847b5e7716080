"""Boilerplate snapshot providers."""

from .base_provider import SnapshotProvider
from .generator_provider import GeneratorSnapshotProvider
from .output_repo_provider import OutputRepoSnapshotProvider

__all__ = ["GeneratorSnapshotProvider", "OutputRepoSnapshotProvider", "SnapshotProvider"]
