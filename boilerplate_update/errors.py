"""Error taxonomy for boilerplate updates.

Every fatal condition raises a subclass of UpdateError whose message carries a
stable substring, so callers can tell categories apart without parsing
tracebacks. Merge conflicts are not errors; they are reported in MergeResult.
"""


class UpdateError(Exception):
    """Base class for fatal update errors."""


class PreconditionError(UpdateError):
    """Raised when the project is not in a state that allows an update."""


class DirtyWorkingTreeError(PreconditionError):
    """Raised when the working tree has uncommitted or untracked changes."""

    def __init__(self, status: str = ""):
        self.status = status
        super().__init__("You must start with a clean working directory")


class ManifestMissingError(PreconditionError):
    """Raised when the project has no package.json."""

    def __init__(self, path: str = ""):
        self.path = path
        super().__init__("No package.json was found in this directory")


class ManifestMalformedError(PreconditionError):
    """Raised when package.json cannot be parsed."""

    def __init__(self, reason: str = ""):
        self.reason = reason
        message = "The package.json is malformed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class GitUnavailableError(PreconditionError):
    """Raised when a mutating mode runs without git on PATH."""

    def __init__(self):
        super().__init__("git was not found on PATH; it is required to update a project")


class IncompatibleOptionsError(PreconditionError):
    """Raised when two requested options cannot be honored together."""

    def __init__(self, first: str, second: str):
        self.first = first
        self.second = second
        super().__init__(f"{first} cannot be combined with {second}")


class ProjectTypeUnknownError(PreconditionError):
    """Raised when no generator marker is found in package.json."""

    def __init__(self):
        super().__init__("Ember CLI project type could not be determined")


class ResolutionError(UpdateError):
    """Raised when version inputs cannot be resolved."""


class InvalidVersionError(ResolutionError):
    """Raised when a version or range string cannot be parsed."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid version or range: '{text}'")


class VersionUndeterminedError(ResolutionError):
    """Raised when the current version is unknown and no --from was given."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "The current version cannot be determined. "
            "Pass it explicitly with --from"
        )


class VersionIndeterminateBeforeBoundaryError(VersionUndeterminedError):
    """Raised for project types whose version detection is unreliable below a boundary."""

    def __init__(self, project_type: str, boundary: str):
        self.project_type = project_type
        self.boundary = boundary
        super().__init__(
            f"The {project_type} version cannot be determined before {boundary}. "
            f"Pass it explicitly with --from"
        )


class NoMatchingVersionError(ResolutionError):
    """Raised when no available version satisfies a spec."""

    def __init__(self, spec: str):
        self.spec = spec
        super().__init__(f"No version matching '{spec}' was found")


class InvalidDirectionError(ResolutionError):
    """Raised when the target version does not come after the starting version."""

    def __init__(self, from_version: str, to_version: str):
        self.from_version = from_version
        self.to_version = to_version
        super().__init__(
            f"The 'to' version ({to_version}) must be greater than "
            f"the 'from' version ({from_version})"
        )


class SnapshotUnavailableError(UpdateError):
    """Raised when a snapshot provider cannot produce a boilerplate tree."""


class WorkingTreeIOError(UpdateError):
    """Raised when reading or writing the working tree fails mid-run."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Failed to update '{path}': {reason}. "
            f"The working tree may be partially updated; "
            f"restore it with version control (git checkout -- . && git clean -fd)"
        )
