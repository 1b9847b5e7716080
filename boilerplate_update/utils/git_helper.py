"""Git helper utilities for boilerplate updates.

This module wraps the git operations the updater needs: checking that the
project checkout is clean, staging merged paths, and reading boilerplate
snapshots out of an output repository.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

# Keep `git add` argument lists well below OS command-line limits
STAGE_BATCH_SIZE = 200


@dataclass
class GitTimeoutConfig:
    """Configuration for git operation timeouts.

    Uses progressive scaling: operations are automatically categorized as
    fast/default/slow, and timeouts are calculated by scaling base_timeout_ms.

    Attributes:
        base_timeout_ms: Base timeout for default operations (30 seconds).
        fast_scale: Scale factor for fast operations (0.167 produces 5s).
        slow_scale: Scale factor for slow operations (4.0 produces 120s).
        max_timeout_ms: Absolute maximum timeout cap (5 minutes).
    """

    base_timeout_ms: int = 30000  # 30 seconds
    fast_scale: float = 0.167  # 30s * 0.167 = 5s for fast ops
    slow_scale: float = 4.0  # 30s * 4.0 = 120s for slow ops
    max_timeout_ms: int = 300000  # 5 minutes absolute maximum


class GitHelper:
    """Utilities for running git against the project and output repositories.

    Project commands run with the project root as working directory. Output
    repository commands run against a bare clone through --git-dir.
    """

    @staticmethod
    def _categorize_operation(args: List[str]) -> str:
        """Categorize git operation as fast/default/slow based on command.

        Args:
            args: Git command arguments (e.g., ['status'], ['clone', '--bare']).

        Returns:
            'fast', 'default', or 'slow' category.
        """
        if not args:
            return "default"

        # Skip leading global options such as --git-dir=...
        commands = [arg for arg in args if not arg.startswith("-")]
        if not commands:
            return "default"
        cmd = commands[0].lower()

        # Local queries that don't modify state
        if cmd in ("status", "rev-parse", "diff", "show"):
            return "fast"

        # Network transfers and whole-tree exports
        if cmd in ("clone", "fetch", "archive"):
            return "slow"

        # add, ls-remote, etc.
        return "default"

    @staticmethod
    def _calculate_timeout(args: List[str], config: GitTimeoutConfig) -> float:
        """Calculate timeout in seconds based on operation type and config.

        Args:
            args: Git command arguments.
            config: Timeout configuration.

        Returns:
            Timeout value in seconds (for subprocess.run).
        """
        category = GitHelper._categorize_operation(args)

        if category == "fast":
            timeout_ms = config.base_timeout_ms * config.fast_scale
        elif category == "slow":
            timeout_ms = config.base_timeout_ms * config.slow_scale
        else:  # default
            timeout_ms = config.base_timeout_ms

        timeout_ms = min(timeout_ms, config.max_timeout_ms)
        return timeout_ms / 1000.0

    @staticmethod
    def check_git_available() -> bool:
        """Check if git is available in PATH.

        Returns:
            True if git is available, False otherwise.
        """
        return shutil.which("git") is not None

    @staticmethod
    def run_git_command(
        args: List[str],
        base_path: Path,
        check: bool = True,
        capture_output: bool = True,
        timeout_config: Optional[GitTimeoutConfig] = None,
        text: bool = True,
    ) -> subprocess.CompletedProcess:
        """Run a git command with a category-based timeout.

        Timeouts are automatically calculated based on operation type
        (fast/default/slow) using progressive scaling. Fast operations
        (status, rev-parse) get ~5s, default operations (add, ls-remote) get
        ~30s, slow operations (clone, archive) get ~120s.

        Args:
            args: Git command arguments (without 'git' prefix).
                  Example: ['status'], ['add', '-A', '--', 'app/app.js']
            base_path: Directory to run the command in.
            check: If True, raise CalledProcessError on non-zero exit.
            capture_output: If True, capture stdout/stderr.
            timeout_config: Optional timeout configuration. If None, uses defaults
                          (base=30s, fast_scale=0.167, slow_scale=4.0, max=300s).
            text: Decode output as text; pass False for binary output.

        Returns:
            subprocess.CompletedProcess with result.

        Raises:
            subprocess.CalledProcessError: If command fails and check=True.
            FileNotFoundError: If git not available.
            TimeoutError: If git operation exceeds calculated timeout.
        """
        if timeout_config is None:
            timeout_config = GitTimeoutConfig()

        timeout_seconds = GitHelper._calculate_timeout(args, timeout_config)
        cmd = ["git", *args]
        logger.debug("Running %s in %s", " ".join(cmd), base_path)

        try:
            return subprocess.run(
                cmd,
                check=check,
                capture_output=capture_output,
                text=text,
                cwd=base_path,
                timeout=timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            operation = (
                " ".join(args[:2]) if len(args) >= 2 else args[0] if args else "unknown"
            )
            category = GitHelper._categorize_operation(args)

            if category == "fast":
                flag_hint = (
                    f"--git-timeout-fast-scale (currently {timeout_config.fast_scale})"
                )
            elif category == "slow":
                flag_hint = (
                    f"--git-timeout-slow-scale (currently {timeout_config.slow_scale})"
                )
            else:
                flag_hint = (
                    f"--git-timeout-base "
                    f"(currently {timeout_config.base_timeout_ms}ms)"
                )

            error_msg = (
                f"Git operation 'git {operation}' timed out after "
                f"{timeout_seconds:.1f} seconds. "
                f"This is a '{category}' operation. "
                f"Consider increasing {flag_hint}, "
                f"or check for network or filesystem issues."
            )

            raise TimeoutError(error_msg) from e

    @staticmethod
    def status(
        base_path: Path, timeout_config: Optional[GitTimeoutConfig] = None
    ) -> str:
        """Return `git status --porcelain` output for the project."""
        result = GitHelper.run_git_command(
            ["status", "--porcelain", "--untracked-files=all"],
            base_path,
            timeout_config=timeout_config,
        )
        return result.stdout

    @staticmethod
    def is_clean(
        base_path: Path, timeout_config: Optional[GitTimeoutConfig] = None
    ) -> bool:
        """Check that the project has no uncommitted or untracked changes.

        Returns:
            True if the working tree is clean. False when it is dirty or is not
            a git checkout at all.
        """
        try:
            return GitHelper.status(base_path, timeout_config).strip() == ""
        except subprocess.CalledProcessError as e:
            logger.debug("git status failed in %s: %s", base_path, e.stderr)
            return False

    @staticmethod
    def stage(
        paths: Sequence[str],
        base_path: Path,
        timeout_config: Optional[GitTimeoutConfig] = None,
    ) -> None:
        """Stage paths in the project index, including deletions.

        Args:
            paths: Paths relative to base_path.
            base_path: Project root.
            timeout_config: Optional timeout configuration.
        """
        for start in range(0, len(paths), STAGE_BATCH_SIZE):
            batch = list(paths[start : start + STAGE_BATCH_SIZE])
            GitHelper.run_git_command(
                ["add", "-A", "--", *batch], base_path, timeout_config=timeout_config
            )

    @staticmethod
    def list_remote_tags(
        url: str, base_path: Path, timeout_config: Optional[GitTimeoutConfig] = None
    ) -> list[str]:
        """List tag names published by a remote repository.

        Args:
            url: Remote repository URL.
            base_path: Directory to run git in.
            timeout_config: Optional timeout configuration.

        Returns:
            Tag names without the refs/tags/ prefix.
        """
        result = GitHelper.run_git_command(
            ["ls-remote", "--tags", "--refs", url],
            base_path,
            timeout_config=timeout_config,
        )
        tags = []
        for line in result.stdout.splitlines():
            parts = line.split("\t")
            if len(parts) == 2 and parts[1].startswith("refs/tags/"):
                tags.append(parts[1][len("refs/tags/") :])
        return tags

    @staticmethod
    def clone_bare(
        url: str, destination: Path, timeout_config: Optional[GitTimeoutConfig] = None
    ) -> None:
        """Create a bare clone of a remote repository."""
        GitHelper.run_git_command(
            ["clone", "--bare", "--quiet", url, str(destination)],
            destination.parent,
            timeout_config=timeout_config,
        )

    @staticmethod
    def archive(
        git_dir: Path, ref: str, timeout_config: Optional[GitTimeoutConfig] = None
    ) -> bytes:
        """Export the tree at a ref of a bare repository as a tar archive."""
        result = GitHelper.run_git_command(
            [f"--git-dir={git_dir}", "archive", "--format=tar", ref],
            git_dir.parent,
            timeout_config=timeout_config,
            text=False,
        )
        return result.stdout
