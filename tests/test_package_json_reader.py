"""Tests for PackageJsonReader."""

import json
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from boilerplate_update.errors import (
    ManifestMalformedError,
    ManifestMissingError,
    PreconditionError,
    ProjectTypeUnknownError,
)
from boilerplate_update.manifest.package_json_reader import PackageJsonReader
from boilerplate_update.models.project_identity import ProjectIdentity


def write_manifest(root, data):
    (root / "package.json").write_text(json.dumps(data, indent=2))


class TestPackageJsonReader:
    """Test suite for manifest detection."""

    def test_app_with_welcome_page(self, tmp_path):
        write_manifest(
            tmp_path,
            {
                "name": "my-app",
                "devDependencies": {"ember-cli": "~2.11.1", "ember-welcome-page": "^1.0.1"},
            },
        )

        manifest = PackageJsonReader().read(tmp_path)

        assert manifest.project_type == "app"
        assert manifest.current_version == "~2.11.1"
        assert manifest.options == ("welcome",)
        assert manifest.identity() == ProjectIdentity("app", ("welcome",), "my-app")
        assert manifest.identity().describe() == "app, welcome"

    def test_addon_by_keyword(self, tmp_path):
        write_manifest(
            tmp_path,
            {
                "name": "my-addon",
                "keywords": ["ember-addon"],
                "devDependencies": {"ember-cli": "~3.1.0", "ember-welcome-page": "^3.0.0"},
            },
        )

        manifest = PackageJsonReader().read(tmp_path)

        assert manifest.project_type == "addon"
        # welcome is an app-only option
        assert manifest.options == ()

    def test_glimmer(self, tmp_path):
        write_manifest(
            tmp_path,
            {
                "name": "glimmer-app",
                "devDependencies": {"@glimmer/blueprint": "~0.8.1", "ember-cli": "^3.0.0"},
            },
        )

        manifest = PackageJsonReader().read(tmp_path)

        assert manifest.project_type == "glimmer"
        assert manifest.current_version == "~0.8.1"

    def test_yarn_option(self, tmp_path):
        write_manifest(tmp_path, {"name": "a", "devDependencies": {"ember-cli": "3.0.0"}})
        (tmp_path / "yarn.lock").write_text("")

        assert PackageJsonReader().read(tmp_path).options == ("yarn",)

    def test_missing_version_package(self, tmp_path):
        write_manifest(tmp_path, {"name": "a", "keywords": ["ember-addon"]})

        manifest = PackageJsonReader().read(tmp_path)

        assert manifest.project_type == "addon"
        assert manifest.current_version is None

    def test_name_defaults_to_directory(self, tmp_path):
        write_manifest(tmp_path, {"devDependencies": {"ember-cli": "3.0.0"}})
        assert PackageJsonReader().read(tmp_path).project_name == tmp_path.name

    def test_missing_manifest(self, tmp_path):
        with pytest.raises(ManifestMissingError) as exc:
            PackageJsonReader().read(tmp_path)
        assert "No package.json was found" in str(exc.value)
        assert isinstance(exc.value, PreconditionError)

    def test_malformed_json(self, tmp_path):
        (tmp_path / "package.json").write_text("{ not json")
        with pytest.raises(ManifestMalformedError) as exc:
            PackageJsonReader().read(tmp_path)
        assert "The package.json is malformed" in str(exc.value)

    def test_non_object_manifest(self, tmp_path):
        (tmp_path / "package.json").write_text("[]")
        with pytest.raises(ManifestMalformedError):
            PackageJsonReader().read(tmp_path)

    def test_unknown_project_type(self, tmp_path):
        write_manifest(tmp_path, {"name": "plain-node", "dependencies": {"express": "^4"}})
        with pytest.raises(ProjectTypeUnknownError) as exc:
            PackageJsonReader().read(tmp_path)
        assert "project type could not be determined" in str(exc.value)

    def test_custom_version_packages(self, tmp_path):
        write_manifest(
            tmp_path, {"name": "a", "devDependencies": {"ember-cli": "3.0.0", "my-cli": "1.2.3"}}
        )
        reader = PackageJsonReader({"app": "my-cli"})
        assert reader.read(tmp_path).current_version == "1.2.3"
