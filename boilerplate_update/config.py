"""Configuration for boilerplate updates.

Project type settings and the codemod registry ship as JSON under data/ and
are loaded once at startup, then passed explicitly to the components that
need them.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .models.codemod import CodemodDescriptor
from .models.version import Version
from .utils.git_helper import GitTimeoutConfig

DATA_DIR = Path(__file__).parent / "data"
PROJECT_TYPES_FILE = DATA_DIR / "project_types.json"
CODEMODS_FILE = DATA_DIR / "codemods.json"


@dataclass(frozen=True)
class GeneratorConfig:
    """How to run the project generator for a custom diff.

    Attributes:
        command: Argument template; '{version}' and '{name}' are substituted.
        option_flags: Extra arguments added when a project option is present.
        absent_option_flags: Extra arguments added when an option is absent.
    """

    command: tuple[str, ...]
    option_flags: dict[str, tuple[str, ...]] = field(default_factory=dict)
    absent_option_flags: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def build_command(
        self, version: Version, name: str, options: tuple[str, ...]
    ) -> list[str]:
        """Render the generator command for one version and option set."""
        args = [
            part.replace("{version}", str(version)).replace("{name}", name)
            for part in self.command
        ]
        for option, flags in self.option_flags.items():
            if option in options:
                args.extend(flags)
        for option, flags in self.absent_option_flags.items():
            if option not in options:
                args.extend(flags)
        return args


@dataclass(frozen=True)
class ProjectTypeConfig:
    """Settings for one generator project type.

    Attributes:
        name: Project type ('app', 'addon', 'glimmer').
        repo_url: Output repository holding one tag per generator version.
        tag_prefix: Prefix of those tags ('v' for 'v3.2.0').
        version_package: npm package whose version is the generator version.
        generator: Generator invocation for custom diffs.
        boundary_version: Version below which the current version cannot be
            detected from the manifest, or None.
        default_options: Options the output repository tags were generated
            with. Projects with any other option set need a custom diff.
    """

    name: str
    repo_url: str
    tag_prefix: str
    version_package: str
    generator: GeneratorConfig
    boundary_version: Optional[Version] = None
    default_options: frozenset[str] = frozenset()

    def tag_for(self, version: Version) -> str:
        return f"{self.tag_prefix}{version}"

    def hosts_variant(self, options: tuple[str, ...]) -> bool:
        """Whether the output repository holds boilerplate for these options."""
        return frozenset(options) == self.default_options

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> "ProjectTypeConfig":
        generator = data["generator"]
        boundary = data.get("boundaryVersion")
        return cls(
            name=name,
            repo_url=data["repoUrl"],
            tag_prefix=data.get("tagPrefix", "v"),
            version_package=data["versionPackage"],
            generator=GeneratorConfig(
                command=tuple(generator["command"]),
                option_flags={
                    k: tuple(v) for k, v in generator.get("optionFlags", {}).items()
                },
                absent_option_flags={
                    k: tuple(v)
                    for k, v in generator.get("absentOptionFlags", {}).items()
                },
            ),
            boundary_version=Version.parse(boundary) if boundary else None,
            default_options=frozenset(data.get("defaultOptions", ())),
        )


@dataclass(frozen=True)
class UpdateConfig:
    """Immutable configuration for one run.

    Attributes:
        project_types: Settings per project type.
        codemods: Codemod registry in declaration order.
        git_timeout: Timeouts for git subprocesses.
    """

    project_types: dict[str, ProjectTypeConfig]
    codemods: tuple[CodemodDescriptor, ...]
    git_timeout: GitTimeoutConfig = field(default_factory=GitTimeoutConfig)

    def project_type(self, name: str) -> ProjectTypeConfig:
        """Look up a project type's settings.

        Raises:
            KeyError: If the project type is not configured.
        """
        return self.project_types[name]


def load_project_types(path: Path = PROJECT_TYPES_FILE) -> dict[str, ProjectTypeConfig]:
    """Load project type settings from JSON."""
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    return {name: ProjectTypeConfig.from_dict(name, entry) for name, entry in data.items()}


def load_codemods(path: Path = CODEMODS_FILE) -> tuple[CodemodDescriptor, ...]:
    """Load the codemod registry from JSON, keeping declaration order."""
    with path.open(encoding="utf-8") as f:
        data = json.load(f)
    return tuple(CodemodDescriptor.from_dict(name, entry) for name, entry in data.items())


def load_config(
    git_timeout: Optional[GitTimeoutConfig] = None,
    project_types_file: Path = PROJECT_TYPES_FILE,
    codemods_file: Path = CODEMODS_FILE,
) -> UpdateConfig:
    """Load the full configuration.

    Args:
        git_timeout: Git timeout settings; defaults when None.
        project_types_file: Project type JSON file.
        codemods_file: Codemod registry JSON file.

    Returns:
        UpdateConfig ready to hand to the mode controller.
    """
    return UpdateConfig(
        project_types=load_project_types(project_types_file),
        codemods=load_codemods(codemods_file),
        git_timeout=git_timeout if git_timeout is not None else GitTimeoutConfig(),
    )
