"""Utility modules for the boilerplate updater."""

from .browser import BrowserOpener
from .git_helper import GitHelper, GitTimeoutConfig
from .working_tree import FileSystemWorkingTree, WorkingTree

__all__ = [
    "BrowserOpener",
    "FileSystemWorkingTree",
    "GitHelper",
    "GitTimeoutConfig",
    "WorkingTree",
]
