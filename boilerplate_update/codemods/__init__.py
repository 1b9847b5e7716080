"""Codemod selection and invocation."""

from .runner import CodemodRunner
from .selector import describe_registry, select

__all__ = ["CodemodRunner", "describe_registry", "select"]
