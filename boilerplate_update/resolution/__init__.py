"""Version resolution for boilerplate updates."""

from .version_resolver import ResolvedVersions, VersionResolver

__all__ = ["ResolvedVersions", "VersionResolver"]
