"""Working tree access for the merge engine.

The merge engine reads and writes project files through the WorkingTree
interface so its logic can run against the real checkout or an in-memory
fake. FileSystemWorkingTree is the on-disk implementation.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional

from ..errors import WorkingTreeIOError

logger = logging.getLogger(__name__)


class WorkingTree(ABC):
    """Abstract read/write access to project files by relative POSIX path."""

    @abstractmethod
    def read(self, path: str) -> Optional[bytes]:
        """
        Read a file's content.

        Parameters
        ----------
        path : str
            Path relative to the project root

        Returns
        -------
        bytes or None
            File content, or None when the file does not exist

        Raises
        ------
        WorkingTreeIOError
            If the file exists but cannot be read
        """
        pass

    @abstractmethod
    def write(self, path: str, content: bytes) -> None:
        """Create or replace a file, creating parent directories as needed."""
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove a file if it exists."""
        pass

    def is_blocked(self, path: str) -> bool:
        """Whether something other than a regular file occupies path.

        A directory or special file at path, or a non-directory at one of its
        parents, means a file cannot be written there. Trees that only hold
        regular files are never blocked.
        """
        return False


class FileSystemWorkingTree(WorkingTree):
    """WorkingTree backed by a project directory on disk.

    Writes are atomic per file: content goes to a temporary file in the same
    directory which then replaces the target with os.replace(). Every path is
    checked to stay inside the project root.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def _resolve(self, path: str) -> Path:
        """Map a relative path to an absolute one inside the root.

        Raises:
            WorkingTreeIOError: If the path escapes the project root.
        """
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise WorkingTreeIOError(path, "path is outside the project directory")
        return self.root.joinpath(*relative.parts)

    def read(self, path: str) -> Optional[bytes]:
        target = self._resolve(path)
        try:
            if not target.is_file():
                return None
            return target.read_bytes()
        except OSError as e:
            raise WorkingTreeIOError(path, str(e)) from e

    def is_blocked(self, path: str) -> bool:
        target = self._resolve(path)
        candidate = target
        try:
            # The nearest existing entry decides
            while candidate != self.root:
                if candidate.exists() or candidate.is_symlink():
                    if candidate == target:
                        return not candidate.is_file()
                    return not candidate.is_dir()
                candidate = candidate.parent
        except OSError as e:
            raise WorkingTreeIOError(path, str(e)) from e
        return False

    def write(self, path: str, content: bytes) -> None:
        target = self._resolve(path)
        temp_path = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            if target.exists():
                os.chmod(temp_path, target.stat().st_mode)
            os.replace(temp_path, target)
            temp_path = None
            logger.debug("Wrote %s (%d bytes)", path, len(content))
        except OSError as e:
            raise WorkingTreeIOError(path, str(e)) from e
        finally:
            if temp_path is not None and os.path.exists(temp_path):
                os.unlink(temp_path)

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            if not target.exists():
                return
            target.unlink()
            logger.debug("Deleted %s", path)
            # Prune directories the deletion left empty
            parent = target.parent
            while parent != self.root and not any(parent.iterdir()):
                parent.rmdir()
                parent = parent.parent
        except OSError as e:
            raise WorkingTreeIOError(path, str(e)) from e
