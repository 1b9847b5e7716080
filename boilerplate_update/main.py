"""Command-line interface for the boilerplate updater.

This module provides the main entry point for updating a generated project
from the command line. It uses argparse to handle mode flags and
configuration.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .codemods.runner import CodemodRunner
from .config import load_config
from .controller.mode_controller import ModeController, UpdateOptions, UpdateReport
from .errors import UpdateError
from .manifest.package_json_reader import PackageJsonReader
from .models.merge_result import PathOutcome
from .models.snapshot import ChangeKind
from .providers.generator_provider import GeneratorSnapshotProvider
from .providers.output_repo_provider import OutputRepoSnapshotProvider
from .utils.browser import BrowserOpener
from .utils.git_helper import GitHelper, GitTimeoutConfig

_CHANGE_LETTERS = {
    ChangeKind.ADDED: "A",
    ChangeKind.REMOVED: "D",
    ChangeKind.MODIFIED: "M",
}


def format_json(report: UpdateReport) -> str:
    """Format an update report as JSON.

    Args:
        report: UpdateReport to format.

    Returns:
        JSON string representation.
    """
    return json.dumps(report.to_dict(), indent=2)


def format_summary(report: UpdateReport) -> str:
    """Format an update report as a human-readable summary.

    Args:
        report: UpdateReport to format.

    Returns:
        Formatted summary string.
    """
    result = report.merge_result
    lines = []
    lines.append("=" * 60)
    lines.append(f"Boilerplate Update ({report.mode.value})")
    lines.append("=" * 60)
    lines.append("")
    lines.append(f"Project options: {report.identity.describe()}")
    if report.from_version is not None:
        lines.append(f"From version: {report.from_version}")
    lines.append(f"To version: {report.to_version}")
    lines.append("")

    if result.delta.is_empty:
        lines.append("No boilerplate changes.")
    else:
        applied = [
            r for r in result.results if r.outcome in (PathOutcome.CLEAN, PathOutcome.DELETED)
        ]
        heading = "Staged" if report.staged else "Applied"
        lines.append(f"{heading} ({len(applied)}):")
        lines.extend(
            f"  {_CHANGE_LETTERS.get(r.change, '?')}  {r.path}" for r in applied
        )

        conflicts = result.conflicts
        if conflicts:
            lines.append("")
            lines.append(f"Conflicts - resolve manually ({len(conflicts)}):")
            for conflict in conflicts:
                detail = f" ({conflict.hunk_count} hunks)" if conflict.hunk_count else ""
                lines.append(f"  [{conflict.kind.value}] {conflict.path}{detail}")

    if report.codemods_run or report.codemod_failure:
        lines.append("")
        lines.append(f"Codemods run: {', '.join(report.codemods_run) or 'none'}")
        if report.codemod_failure:
            lines.append(f"Codemod failed: {report.codemod_failure}")

    lines.append("")
    lines.append("=" * 60)
    return "\n".join(lines)


def _build_git_timeout_config(args: argparse.Namespace) -> GitTimeoutConfig:
    """Build GitTimeoutConfig from CLI arguments.

    Args:
        args: Parsed command-line arguments.

    Returns:
        GitTimeoutConfig with the requested timeouts.
    """
    return GitTimeoutConfig(
        base_timeout_ms=args.git_timeout_base,
        fast_scale=args.git_timeout_fast_scale,
        slow_scale=args.git_timeout_slow_scale,
        max_timeout_ms=args.git_timeout_max,
    )


def _build_options(args: argparse.Namespace) -> UpdateOptions:
    return UpdateOptions(
        from_spec=args.from_version,
        to_spec=args.to_version,
        reset=args.reset,
        compare_only=args.compare_only,
        stats_only=args.stats_only,
        run_codemods=args.run_codemods,
        list_codemods=args.list_codemods,
        create_custom_diff=args.create_custom_diff,
    )


def cmd_update(args: argparse.Namespace, controller: ModeController) -> int:
    """Run the update in the mode selected by the flags.

    Args:
        args: Parsed command-line arguments.
        controller: Mode controller (dependency injection).

    Returns:
        Exit code (0 for success including conflicts, 1 for error).
    """
    try:
        result = controller.run(_build_options(args))
    except UpdateError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        return 1
    except Exception as e:
        # git or npm missing, git timeouts
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        return 1

    # compare-only prints nothing
    if result is None:
        return 0

    if isinstance(result, str):
        print(result)
        return 0

    if args.format == "json":
        print(format_json(result))
    else:
        print(format_summary(result))

    if result.merge_result.has_conflicts:
        print(
            "Fix the conflicts, then stage the resolved files.",
            file=sys.stderr,
        )
    if result.codemod_failure:
        print(f"Error: codemod {result.codemod_failure} failed", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="boilerplate-update",
        description=(
            "Update a generated project to a newer generator version while "
            "keeping local customizations"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "--from",
        dest="from_version",
        help="Version or semver range to update from (default: detected from package.json)",
    )
    parser.add_argument(
        "--to",
        dest="to_version",
        help="Version or semver range to update to (default: latest release)",
    )

    modes = parser.add_mutually_exclusive_group()
    modes.add_argument(
        "--reset",
        action="store_true",
        help="Reset boilerplate files to the target version, discarding local edits",
    )
    modes.add_argument(
        "--compare-only",
        action="store_true",
        help="Open the boilerplate comparison in a browser without changing anything",
    )
    modes.add_argument(
        "--stats-only",
        action="store_true",
        help="Show the resolved versions and applicable codemods",
    )
    modes.add_argument(
        "--list-codemods",
        action="store_true",
        help="Print the codemod catalog as JSON",
    )
    parser.add_argument(
        "--create-custom-diff",
        action="store_true",
        help=(
            "Generate both boilerplate versions locally instead of using the "
            "output repo (not with --compare-only)"
        ),
    )
    parser.add_argument(
        "--run-codemods",
        action="store_true",
        help="Run applicable codemods after merging",
    )

    parser.add_argument(
        "--project",
        default=".",
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "--format",
        choices=["summary", "json"],
        default="summary",
        help="Output format for merge and reset reports (default: summary)",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--git-timeout-base",
        type=int,
        default=30000,
        help="Base timeout for default git operations (milliseconds, default: 30000)",
    )
    parser.add_argument(
        "--git-timeout-fast-scale",
        type=float,
        default=0.167,
        help="Scale factor for fast git operations (default: 0.167, produces 5s)",
    )
    parser.add_argument(
        "--git-timeout-slow-scale",
        type=float,
        default=4.0,
        help="Scale factor for slow git operations (default: 4.0, produces 120s)",
    )
    parser.add_argument(
        "--git-timeout-max",
        type=int,
        default=300000,
        help=(
            "Maximum timeout cap for any git operation (milliseconds, default: 300000)"
        ),
    )
    return parser


def main(argv: list | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Instantiate dependencies (ONLY place with instantiation)
    project_root = Path(args.project).resolve()
    config = load_config(git_timeout=_build_git_timeout_config(args))

    with OutputRepoSnapshotProvider(config, work_dir=project_root) as output_provider:
        controller = ModeController(
            config=config,
            project_root=project_root,
            manifest_reader=PackageJsonReader(
                {name: pt.version_package for name, pt in config.project_types.items()}
            ),
            output_provider=output_provider,
            custom_provider=GeneratorSnapshotProvider(config),
            codemod_runner=CodemodRunner(),
            browser=BrowserOpener(),
            git=GitHelper,
        )
        return cmd_update(args, controller)


if __name__ == "__main__":
    sys.exit(main())
