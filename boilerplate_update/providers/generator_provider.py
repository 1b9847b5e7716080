"""Snapshot provider that runs the project generator on demand.

Used for custom diffs: instead of relying on published output, the generator
is run for each version with the project's own name and options, so the
boilerplate matches what the developer originally generated.
"""

import json
import logging
import subprocess
import tempfile
from pathlib import Path

from ..config import UpdateConfig
from ..errors import SnapshotUnavailableError
from ..models.project_identity import ProjectIdentity
from ..models.snapshot import Snapshot
from ..models.version import Version
from .base_provider import SnapshotProvider

logger = logging.getLogger(__name__)

CUSTOM_SOURCE_ID = "custom"

# Generators install their own dependencies through npx
DEFAULT_GENERATOR_TIMEOUT_SECONDS = 900.0


class GeneratorSnapshotProvider(SnapshotProvider):
    """Generates boilerplate snapshots by invoking the generator."""

    def __init__(
        self,
        config: UpdateConfig,
        timeout: float = DEFAULT_GENERATOR_TIMEOUT_SECONDS,
    ):
        self.config = config
        self.timeout = timeout

    def source_id(self, identity: ProjectIdentity) -> str:
        return CUSTOM_SOURCE_ID

    def available_versions(self, identity: ProjectIdentity) -> list[Version]:
        package = self.config.project_type(identity.project_type).version_package
        try:
            result = subprocess.run(
                ["npm", "view", package, "versions", "--json"],
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
            raw_versions = json.loads(result.stdout)
        except (
            subprocess.CalledProcessError,
            subprocess.TimeoutExpired,
            OSError,
            json.JSONDecodeError,
        ) as e:
            raise SnapshotUnavailableError(
                f"Could not list versions of {package}: {e}"
            ) from e

        # npm prints a bare string when only one version exists
        if isinstance(raw_versions, str):
            raw_versions = [raw_versions]
        versions = [Version.try_parse(v) for v in raw_versions]
        return [v for v in versions if v is not None]

    def fetch(self, version: Version, identity: ProjectIdentity) -> Snapshot:
        generator = self.config.project_type(identity.project_type).generator
        command = generator.build_command(
            version, identity.project_name, identity.options
        )

        with tempfile.TemporaryDirectory(prefix="boilerplate-generate-") as tmpdir:
            logger.info("Generating %s boilerplate: %s", version, " ".join(command))
            try:
                subprocess.run(
                    command,
                    check=True,
                    capture_output=True,
                    text=True,
                    cwd=tmpdir,
                    timeout=self.timeout,
                )
            except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
                stderr = getattr(e, "stderr", None) or ""
                raise SnapshotUnavailableError(
                    f"Generating {identity.project_type} {version} failed: {e} {stderr}".strip()
                ) from e

            output_dir = Path(tmpdir) / identity.project_name
            if not output_dir.is_dir():
                raise SnapshotUnavailableError(
                    f"Generator did not create {identity.project_name}/ for {version}"
                )
            return Snapshot.from_directory(
                output_dir, version=version, source=CUSTOM_SOURCE_ID
            )
