"""Mode controller orchestrating one boilerplate update run.

Each invocation is a single linear run in one of these modes:

- merge (default): apply the from -> to boilerplate delta, stage clean paths
- reset: force boilerplate files back to the pristine target version
- compare-only: open the output repository comparison in a browser
- stats-only: print what an update would do
- list-codemods: print the codemod catalog
- create-custom-diff: merge using freshly generated boilerplate

Mutating modes require a clean git working tree before anything is touched.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from ..codemods.runner import CodemodRunner
from ..codemods.selector import describe_registry, select
from ..config import UpdateConfig
from ..errors import (
    DirtyWorkingTreeError,
    GitUnavailableError,
    IncompatibleOptionsError,
    InvalidVersionError,
    ResolutionError,
    SnapshotUnavailableError,
)
from ..manifest.package_json_reader import Manifest, PackageJsonReader
from ..merge.conflict_renderer import ConflictRenderer
from ..merge.merge_engine import MergeEngine
from ..models.merge_result import MergeResult
from ..models.project_identity import ProjectIdentity
from ..models.snapshot import Snapshot
from ..models.version import Version, VersionSpec, parse_spec
from ..providers.base_provider import SnapshotProvider
from ..providers.output_repo_provider import OutputRepoSnapshotProvider
from ..resolution.version_resolver import ResolvedVersions, VersionResolver
from ..utils.browser import BrowserOpener
from ..utils.git_helper import GitHelper
from ..utils.working_tree import FileSystemWorkingTree, WorkingTree

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """Operating mode of a run."""

    MERGE = "merge"
    RESET = "reset"
    COMPARE_ONLY = "compare-only"
    STATS_ONLY = "stats-only"
    LIST_CODEMODS = "list-codemods"
    CREATE_CUSTOM_DIFF = "create-custom-diff"


MUTATING_MODES = frozenset({Mode.MERGE, Mode.RESET, Mode.CREATE_CUSTOM_DIFF})


@dataclass(frozen=True)
class UpdateOptions:
    """User inputs for one run.

    Attributes:
        from_spec: --from version or range; None to use the detected version.
        to_spec: --to version or range; None for the latest release.
        reset: Reset boilerplate files to the target version.
        compare_only: Only open the comparison URL.
        stats_only: Only report what would happen.
        run_codemods: Run applicable codemods after merging.
        list_codemods: Only print the codemod catalog.
        create_custom_diff: Generate boilerplate instead of fetching it.
    """

    from_spec: Optional[str] = None
    to_spec: Optional[str] = None
    reset: bool = False
    compare_only: bool = False
    stats_only: bool = False
    run_codemods: bool = False
    list_codemods: bool = False
    create_custom_diff: bool = False

    @property
    def mode(self) -> Mode:
        if self.list_codemods:
            return Mode.LIST_CODEMODS
        if self.stats_only:
            return Mode.STATS_ONLY
        if self.compare_only:
            return Mode.COMPARE_ONLY
        if self.reset:
            return Mode.RESET
        if self.create_custom_diff:
            return Mode.CREATE_CUSTOM_DIFF
        return Mode.MERGE


@dataclass
class UpdateReport:
    """Outcome of a merge, custom-diff or reset run.

    Attributes:
        mode: Mode that produced the report.
        identity: Project identity.
        from_version: Starting version (None for a reset without baseline).
        to_version: Target version.
        merge_result: Per-path outcomes.
        staged: Paths added to the git index.
        codemods_run: Codemods that completed, in order.
        codemod_failure: Name of the codemod that failed, if any.
    """

    mode: Mode
    identity: ProjectIdentity
    from_version: Optional[Version]
    to_version: Version
    merge_result: MergeResult
    staged: list[str] = field(default_factory=list)
    codemods_run: list[str] = field(default_factory=list)
    codemod_failure: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "mode": self.mode.value,
            "project_options": self.identity.describe(),
            "from_version": str(self.from_version) if self.from_version else None,
            "to_version": str(self.to_version),
            "result": self.merge_result.to_dict(),
            "staged": self.staged,
            "codemods_run": self.codemods_run,
            "codemod_failure": self.codemod_failure,
        }


RunResult = Union[UpdateReport, str, None]


class ModeController:
    """Composes resolver, providers, merge engine and codemods per mode.

    All collaborators are injected; main() is the only place that builds
    the real ones.
    """

    def __init__(
        self,
        config: UpdateConfig,
        project_root: Path,
        manifest_reader: PackageJsonReader,
        output_provider: OutputRepoSnapshotProvider,
        custom_provider: SnapshotProvider,
        codemod_runner: CodemodRunner,
        browser: BrowserOpener,
        git: Any = GitHelper,
        engine: Optional[MergeEngine] = None,
        working_tree: Optional[WorkingTree] = None,
    ):
        self.config = config
        self.project_root = project_root
        self.manifest_reader = manifest_reader
        self.output_provider = output_provider
        self.custom_provider = custom_provider
        self.codemod_runner = codemod_runner
        self.browser = browser
        self.git = git
        self.engine = engine if engine is not None else MergeEngine()
        self.working_tree = (
            working_tree
            if working_tree is not None
            else FileSystemWorkingTree(project_root)
        )

    def run(self, options: UpdateOptions) -> RunResult:
        """Run one update.

        Args:
            options: User inputs.

        Returns:
            UpdateReport for merge, custom-diff and reset; text for stats-only
            and list-codemods; None for compare-only.

        Raises:
            UpdateError: Any fatal precondition, resolution, snapshot or I/O
                error. The working tree is untouched unless the error is a
                WorkingTreeIOError raised mid-merge.
        """
        if options.compare_only and options.create_custom_diff:
            # Generated boilerplate has no hosted comparison to open
            raise IncompatibleOptionsError("--compare-only", "--create-custom-diff")

        mode = options.mode
        logger.debug("Running in %s mode", mode.value)

        if mode in MUTATING_MODES:
            self._require_clean()

        manifest = self.manifest_reader.read(self.project_root)
        identity = manifest.identity()

        if mode is Mode.LIST_CODEMODS:
            return self._list_codemods(manifest, identity, options)

        provider = self._provider_for(options, identity)
        resolver = VersionResolver(provider.available_versions(identity))

        if mode is Mode.RESET:
            return self._reset(provider, resolver, manifest, identity, options)

        versions = self._resolve(resolver, manifest, identity, options)

        if mode is Mode.COMPARE_ONLY:
            url = self.output_provider.compare_url(
                versions.from_version, versions.to_version, identity
            )
            self.browser.open(url)
            return None

        if mode is Mode.STATS_ONLY:
            return self._stats(provider, versions, identity)

        return self._merge(provider, versions, identity, options, mode)

    def _require_clean(self) -> None:
        if not self.git.check_git_available():
            raise GitUnavailableError()
        if not self.git.is_clean(self.project_root, self.config.git_timeout):
            raise DirtyWorkingTreeError()

    def _provider_for(
        self, options: UpdateOptions, identity: ProjectIdentity
    ) -> SnapshotProvider:
        if options.mode is Mode.COMPARE_ONLY:
            # Only the output repository has a hosted comparison
            return self.output_provider
        if options.create_custom_diff:
            return self.custom_provider
        if not self.output_provider.serves(identity):
            logger.info(
                "No prebuilt boilerplate for '%s'; generating it locally",
                identity.describe(),
            )
            return self.custom_provider
        return self.output_provider

    @staticmethod
    def _current_spec(manifest: Manifest) -> Optional[VersionSpec]:
        if not manifest.current_version:
            return None
        try:
            return parse_spec(manifest.current_version)
        except InvalidVersionError:
            # e.g. a git URL or tag instead of a semver spec
            logger.debug("Unusable version spec %r", manifest.current_version)
            return None

    def _resolve(
        self,
        resolver: VersionResolver,
        manifest: Manifest,
        identity: ProjectIdentity,
        options: UpdateOptions,
        allow_equal: bool = False,
    ) -> ResolvedVersions:
        project_type = self.config.project_type(identity.project_type)
        return resolver.resolve(
            current=self._current_spec(manifest),
            from_spec=options.from_spec,
            to_spec=options.to_spec,
            allow_equal=allow_equal,
            project_type=identity.project_type,
            boundary=project_type.boundary_version,
        )

    def _fetch_pair(
        self,
        provider: SnapshotProvider,
        first: Version,
        second: Version,
        identity: ProjectIdentity,
    ) -> tuple[Snapshot, Snapshot]:
        # Independent fetches; both must finish before merging
        with ThreadPoolExecutor(max_workers=2) as executor:
            first_future = executor.submit(provider.fetch, first, identity)
            second_future = executor.submit(provider.fetch, second, identity)
            return first_future.result(), second_future.result()

    def _merge(
        self,
        provider: SnapshotProvider,
        versions: ResolvedVersions,
        identity: ProjectIdentity,
        options: UpdateOptions,
        mode: Mode,
    ) -> UpdateReport:
        from_snapshot, to_snapshot = self._fetch_pair(
            provider, versions.from_version, versions.to_version, identity
        )

        result = self.engine.merge(self.working_tree, from_snapshot, to_snapshot)
        self._render_conflicts(result, versions.to_version)

        staged = result.clean_paths
        if staged:
            self.git.stage(staged, self.project_root, self.config.git_timeout)

        report = UpdateReport(
            mode=mode,
            identity=identity,
            from_version=versions.from_version,
            to_version=versions.to_version,
            merge_result=result,
            staged=staged,
        )

        if options.run_codemods:
            self._run_codemods(report, versions, identity)

        logger.info(
            "Merged %s -> %s: %d clean, %d conflicted",
            versions.from_version,
            versions.to_version,
            len(result.clean_paths),
            len(result.conflicted_paths),
        )
        return report

    def _render_conflicts(self, result: MergeResult, to_version: Version) -> None:
        renderer = ConflictRenderer(ours_label="local", theirs_label=str(to_version))
        for conflict in result.conflicts:
            rendered = renderer.render(conflict)
            if rendered is not None:
                self.working_tree.write(conflict.path, rendered)

    def _run_codemods(
        self,
        report: UpdateReport,
        versions: ResolvedVersions,
        identity: ProjectIdentity,
    ) -> None:
        codemods = select(
            versions.from_version,
            versions.to_version,
            self.config.codemods,
            project_type=identity.project_type,
        )
        # Sequential: later codemods may assume earlier ones already ran
        for codemod in codemods:
            if not self.codemod_runner.run(codemod, self.project_root):
                report.codemod_failure = codemod.name
                logger.warning(
                    "Stopping codemods after %s failed; %d not run",
                    codemod.name,
                    len(codemods) - len(report.codemods_run) - 1,
                )
                return
            report.codemods_run.append(codemod.name)

    def _reset(
        self,
        provider: SnapshotProvider,
        resolver: VersionResolver,
        manifest: Manifest,
        identity: ProjectIdentity,
        options: UpdateOptions,
    ) -> UpdateReport:
        to_version = resolver.resolve_target(options.to_spec)

        # The current version's boilerplate tells which stale files to delete
        baseline_spec = (
            parse_spec(options.from_spec) if options.from_spec else self._current_spec(manifest)
        )
        baseline_version = None
        if baseline_spec is not None:
            try:
                baseline_version = resolver.resolve_spec(baseline_spec)
            except ResolutionError as e:
                if options.from_spec:
                    raise
                logger.debug("No baseline boilerplate for reset: %s", e)

        if baseline_version is not None and baseline_version != to_version:
            baseline, to_snapshot = self._fetch_pair(
                provider, baseline_version, to_version, identity
            )
            baseline_paths = baseline.paths
        else:
            to_snapshot = provider.fetch(to_version, identity)
            baseline_paths = frozenset()

        result = self.engine.reset(self.working_tree, to_snapshot, baseline_paths)
        logger.info("Reset %d boilerplate files to %s", len(result.written_paths), to_version)

        return UpdateReport(
            mode=Mode.RESET,
            identity=identity,
            from_version=baseline_version,
            to_version=to_version,
            merge_result=result,
        )

    def _stats(
        self,
        provider: SnapshotProvider,
        versions: ResolvedVersions,
        identity: ProjectIdentity,
    ) -> str:
        codemods = select(
            versions.from_version,
            versions.to_version,
            self.config.codemods,
            project_type=identity.project_type,
        )
        return "\n".join(
            [
                f"project options: {identity.describe()}",
                f"from version: {versions.from_version}",
                f"to version: {versions.to_version}",
                f"output repo: {provider.source_id(identity)}",
                f"applicable codemods: {', '.join(c.name for c in codemods)}",
            ]
        )

    def _list_codemods(
        self, manifest: Manifest, identity: ProjectIdentity, options: UpdateOptions
    ) -> str:
        applicable = None
        try:
            provider = self._provider_for(options, identity)
            resolver = VersionResolver(provider.available_versions(identity))
            versions = self._resolve(
                resolver,
                manifest,
                identity,
                UpdateOptions(from_spec=options.from_spec, to_spec=None),
                allow_equal=True,
            )
            applicable = select(
                versions.from_version,
                versions.to_version,
                self.config.codemods,
                project_type=identity.project_type,
            )
        except (ResolutionError, SnapshotUnavailableError) as e:
            # The catalog is still listed, without applicability
            logger.debug("Codemod applicability unavailable: %s", e)

        return json.dumps(describe_registry(self.config.codemods, applicable), indent=2)
