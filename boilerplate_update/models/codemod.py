"""CodemodDescriptor data model for the codemod registry."""

from dataclasses import dataclass, field
from typing import Any

from .version import VersionRange


@dataclass(frozen=True)
class CodemodDescriptor:
    """A registry entry describing one source-transform tool.

    Attributes:
        name: Codemod name, unique within the registry.
        versions: Version range in which the codemod's change was introduced.
        commands: Commands handed to the codemod runner, in order.
        project_types: Project types the codemod targets (empty means all).
        description: One-line summary for listings.
    """

    name: str
    versions: VersionRange
    commands: tuple[str, ...]
    project_types: tuple[str, ...] = field(default_factory=tuple)
    description: str = ""

    def targets(self, project_type: str) -> bool:
        """Check whether the codemod applies to a project type."""
        return not self.project_types or project_type in self.project_types

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "CodemodDescriptor":
        """Create from a registry JSON entry."""
        return cls(
            name=name,
            versions=VersionRange.parse(data["versions"]),
            commands=tuple(data.get("commands", [name])),
            project_types=tuple(data.get("projectTypes", [])),
            description=data.get("description", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the registry JSON shape."""
        return {
            "versions": self.versions.raw,
            "commands": list(self.commands),
            "projectTypes": list(self.project_types),
            "description": self.description,
        }
