"""Abstract base class for boilerplate snapshot providers."""

from abc import ABC, abstractmethod

from ..models.project_identity import ProjectIdentity
from ..models.snapshot import Snapshot
from ..models.version import Version


class SnapshotProvider(ABC):
    """
    Interface for obtaining pristine boilerplate trees.

    Implementations either fetch prebuilt snapshots or generate them on
    demand; the mode controller picks one and never inspects which.
    Providers may hold temporary resources, so use them as context managers.
    """

    @abstractmethod
    def available_versions(self, identity: ProjectIdentity) -> list[Version]:
        """
        List the versions a snapshot can be produced for.

        Parameters
        ----------
        identity : ProjectIdentity
            Project type and options to look up

        Returns
        -------
        list[Version]
            Available versions, in any order

        Raises
        ------
        SnapshotUnavailableError
            If the version list cannot be retrieved
        """
        pass

    @abstractmethod
    def fetch(self, version: Version, identity: ProjectIdentity) -> Snapshot:
        """
        Produce the boilerplate tree for one version.

        Parameters
        ----------
        version : Version
            Concrete generator version
        identity : ProjectIdentity
            Project type and options selecting the variant

        Returns
        -------
        Snapshot
            Immutable boilerplate tree

        Raises
        ------
        SnapshotUnavailableError
            If the snapshot cannot be produced
        """
        pass

    @abstractmethod
    def source_id(self, identity: ProjectIdentity) -> str:
        """Identify where snapshots come from (shown in stats output)."""
        pass

    def close(self) -> None:
        """Release temporary resources."""

    def __enter__(self) -> "SnapshotProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
