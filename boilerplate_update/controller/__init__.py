"""Orchestration of update modes."""

from .mode_controller import Mode, ModeController, UpdateOptions, UpdateReport

__all__ = ["Mode", "ModeController", "UpdateOptions", "UpdateReport"]
