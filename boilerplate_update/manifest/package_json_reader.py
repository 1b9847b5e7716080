"""package.json reader for detecting a project's generator identity."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from ..errors import ManifestMalformedError, ManifestMissingError, ProjectTypeUnknownError
from ..models.project_identity import ProjectIdentity

MANIFEST_FILENAME = "package.json"

GLIMMER_MARKERS = ("@glimmer/blueprint", "@glimmer/application")


@dataclass(frozen=True)
class Manifest:
    """What the updater needs from package.json.

    Attributes:
        project_name: The package name.
        project_type: Generator project type ('app', 'addon', 'glimmer').
        current_version: Raw dependency spec of the generator package
            (e.g. '~2.11.1'), or None when it is not declared.
        options: Detected generator options.
    """

    project_name: str
    project_type: str
    current_version: Optional[str]
    options: tuple[str, ...] = field(default_factory=tuple)

    def identity(self) -> ProjectIdentity:
        return ProjectIdentity(
            project_type=self.project_type,
            options=self.options,
            project_name=self.project_name,
        )


class PackageJsonReader:
    """Reads package.json and derives the generator identity.

    Detection rules, first match wins:
        - '@glimmer/blueprint' or '@glimmer/application' dependency: glimmer
        - 'ember-addon' keyword: addon
        - 'ember-cli' devDependency: app
    """

    def __init__(self, version_packages: Optional[dict[str, str]] = None):
        """Initialize the reader.

        Args:
            version_packages: npm package whose declared version is the
                generator version, per project type. Defaults to ember-cli
                for apps and addons and @glimmer/blueprint for glimmer.
        """
        self.version_packages = version_packages or {
            "app": "ember-cli",
            "addon": "ember-cli",
            "glimmer": "@glimmer/blueprint",
        }

    def _load(self, project_root: Path) -> dict[str, Any]:
        manifest_path = project_root / MANIFEST_FILENAME
        if not manifest_path.is_file():
            raise ManifestMissingError(str(manifest_path))
        try:
            with manifest_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ManifestMalformedError(str(e)) from e
        if not isinstance(data, dict):
            raise ManifestMalformedError("top level is not an object")
        return data

    @staticmethod
    def _detect_type(data: dict[str, Any], all_deps: dict[str, str]) -> str:
        if any(marker in all_deps for marker in GLIMMER_MARKERS):
            return "glimmer"
        keywords = data.get("keywords") or []
        if isinstance(keywords, list) and "ember-addon" in keywords:
            return "addon"
        if "ember-cli" in (data.get("devDependencies") or {}):
            return "app"
        raise ProjectTypeUnknownError()

    def read(self, project_root: Path) -> Manifest:
        """Read the manifest of a project.

        Args:
            project_root: Directory containing package.json.

        Returns:
            Manifest with project type, raw current version and options.

        Raises:
            ManifestMissingError: If package.json does not exist.
            ManifestMalformedError: If package.json is not a JSON object.
            ProjectTypeUnknownError: If no generator marker is present.
        """
        data = self._load(project_root)

        dependencies = data.get("dependencies") or {}
        dev_dependencies = data.get("devDependencies") or {}
        if not isinstance(dependencies, dict) or not isinstance(dev_dependencies, dict):
            raise ManifestMalformedError("dependencies must be objects")
        all_deps = {**dependencies, **dev_dependencies}

        project_type = self._detect_type(data, all_deps)
        version_package = self.version_packages.get(project_type)
        current_version = all_deps.get(version_package) if version_package else None

        options = []
        if project_type == "app" and "ember-welcome-page" in dev_dependencies:
            options.append("welcome")
        if (project_root / "yarn.lock").exists():
            options.append("yarn")

        return Manifest(
            project_name=str(data.get("name") or project_root.name),
            project_type=project_type,
            current_version=current_version,
            options=tuple(options),
        )
