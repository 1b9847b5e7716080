"""Snapshot provider backed by a generator output repository.

Output repositories (such as ember-cli/ember-new-output) publish the pristine
result of running the generator at each release as a tag named after the
version. Snapshots are read with `git archive` from a bare clone made once
per run in a temporary directory.
"""

import logging
import shutil
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Optional

from ..config import ProjectTypeConfig, UpdateConfig
from ..errors import SnapshotUnavailableError
from ..models.project_identity import ProjectIdentity
from ..models.snapshot import Snapshot
from ..models.version import Version
from ..utils.git_helper import GitHelper
from .base_provider import SnapshotProvider

logger = logging.getLogger(__name__)


class OutputRepoSnapshotProvider(SnapshotProvider):
    """Fetches prebuilt boilerplate snapshots from output repository tags."""

    def __init__(self, config: UpdateConfig, work_dir: Optional[Path] = None):
        """Initialize the provider.

        Args:
            config: Loaded configuration (project types and git timeouts).
            work_dir: Directory to run remote git queries in. Defaults to the
                current working directory.
        """
        self.config = config
        self.work_dir = work_dir if work_dir else Path.cwd()
        self._clone_root: Optional[Path] = None
        self._clones: dict[str, Path] = {}
        self._lock = threading.Lock()

    def _project_type(self, identity: ProjectIdentity) -> ProjectTypeConfig:
        return self.config.project_type(identity.project_type)

    def source_id(self, identity: ProjectIdentity) -> str:
        return self._project_type(identity).repo_url

    def serves(self, identity: ProjectIdentity) -> bool:
        """Whether the output repository holds this project's boilerplate variant.

        Tags are generated with the project type's default options only, so a
        project created with other options (no welcome page, yarn) needs a
        custom diff instead.
        """
        return self._project_type(identity).hosts_variant(identity.options)

    def compare_url(
        self, from_version: Version, to_version: Version, identity: ProjectIdentity
    ) -> str:
        """Build the hosted comparison URL between two snapshot tags.

        Raises:
            SnapshotUnavailableError: If the repository does not hold the
                project's boilerplate variant.
        """
        project_type = self._project_type(identity)
        if not self.serves(identity):
            raise SnapshotUnavailableError(
                f"{project_type.repo_url} has no boilerplate for project options "
                f"'{identity.describe()}'; no hosted comparison exists"
            )
        return (
            f"{project_type.repo_url}/compare/"
            f"{project_type.tag_for(from_version)}...{project_type.tag_for(to_version)}"
        )

    def available_versions(self, identity: ProjectIdentity) -> list[Version]:
        project_type = self._project_type(identity)
        try:
            tags = GitHelper.list_remote_tags(
                project_type.repo_url,
                self.work_dir,
                timeout_config=self.config.git_timeout,
            )
        except (subprocess.CalledProcessError, TimeoutError, OSError) as e:
            raise SnapshotUnavailableError(
                f"Could not list versions of {project_type.repo_url}: {e}"
            ) from e

        versions = []
        for tag in tags:
            if not tag.startswith(project_type.tag_prefix):
                continue
            version = Version.try_parse(tag[len(project_type.tag_prefix) :])
            if version is not None:
                versions.append(version)
        logger.debug("%d versions found in %s", len(versions), project_type.repo_url)
        return versions

    def _ensure_clone(self, repo_url: str) -> Path:
        # Both snapshots may be fetched concurrently; clone only once
        with self._lock:
            if repo_url in self._clones:
                return self._clones[repo_url]
            if self._clone_root is None:
                self._clone_root = Path(tempfile.mkdtemp(prefix="boilerplate-update-"))
            destination = self._clone_root / f"repo-{len(self._clones)}.git"
            logger.info("Cloning %s", repo_url)
            try:
                GitHelper.clone_bare(
                    repo_url, destination, timeout_config=self.config.git_timeout
                )
            except (subprocess.CalledProcessError, TimeoutError, OSError) as e:
                raise SnapshotUnavailableError(
                    f"Could not clone {repo_url}: {e}"
                ) from e
            self._clones[repo_url] = destination
            return destination

    def fetch(self, version: Version, identity: ProjectIdentity) -> Snapshot:
        project_type = self._project_type(identity)
        git_dir = self._ensure_clone(project_type.repo_url)
        tag = project_type.tag_for(version)
        try:
            data = GitHelper.archive(
                git_dir, tag, timeout_config=self.config.git_timeout
            )
        except (subprocess.CalledProcessError, TimeoutError, OSError) as e:
            raise SnapshotUnavailableError(
                f"Could not read {tag} from {project_type.repo_url}: {e}"
            ) from e
        snapshot = Snapshot.from_tar(data, version=version, source=project_type.repo_url)
        logger.debug("Fetched %s (%d files)", tag, len(snapshot))
        return snapshot

    def close(self) -> None:
        if self._clone_root is not None:
            shutil.rmtree(self._clone_root, ignore_errors=True)
            self._clone_root = None
            self._clones.clear()
