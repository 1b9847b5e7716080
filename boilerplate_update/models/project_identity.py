"""ProjectIdentity data model for selecting boilerplate variants."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProjectIdentity:
    """The generator flavor a project was created with.

    Derived once per run from the project manifest and never modified.

    Attributes:
        project_type: Generator type ('app', 'addon', 'glimmer').
        options: Generator options that change the boilerplate
            (e.g. 'welcome', 'yarn'), in detection order.
        project_name: Package name, passed to the generator for custom diffs.
    """

    project_type: str
    options: tuple[str, ...] = field(default_factory=tuple)
    project_name: str = "my-app"

    def describe(self) -> str:
        """Render the identity the way stats output shows it ('app, welcome')."""
        return ", ".join([self.project_type, *self.options])
