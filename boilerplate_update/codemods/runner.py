"""Invocation of codemods as external processes."""

import logging
import shlex
import subprocess
from pathlib import Path

from ..models.codemod import CodemodDescriptor

logger = logging.getLogger(__name__)

# Codemods rewrite whole source trees; allow them plenty of time
DEFAULT_CODEMOD_TIMEOUT_SECONDS = 600.0


class CodemodRunner:
    """Runs a codemod's commands in the project directory, one after another."""

    def __init__(self, timeout: float = DEFAULT_CODEMOD_TIMEOUT_SECONDS):
        self.timeout = timeout

    def run(self, descriptor: CodemodDescriptor, project_root: Path) -> bool:
        """Run every command of a codemod.

        Args:
            descriptor: Codemod to run.
            project_root: Directory the commands run in.

        Returns:
            True if all commands exited with status 0, False at the first
            failure (remaining commands are skipped).
        """
        for command in descriptor.commands:
            args = shlex.split(command)
            logger.info("Running codemod %s: %s", descriptor.name, command)
            try:
                result = subprocess.run(
                    args,
                    cwd=project_root,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                logger.warning("Codemod %s could not run: %s", descriptor.name, e)
                return False

            if result.returncode != 0:
                logger.warning(
                    "Codemod %s failed (exit %d): %s",
                    descriptor.name,
                    result.returncode,
                    result.stderr.strip(),
                )
                return False
        return True
