"""
Dirconverge errors - failure taxonomy for directory convergence.
"""


class DirConvergeError(Exception):
    """Base exception for all dirconverge errors."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path
        # Filled in by the engine with the partial ConvergenceResult
        self.result = None


class ConvergenceError(DirConvergeError):
    """A precondition for converging the target was not met."""
    pass


class EnclosingDirectoryDoesNotExist(ConvergenceError):
    """Parent directory is missing and recursive creation is disabled."""
    pass


class EnclosingDirectoryNotWritable(ConvergenceError):
    """Nearest existing ancestor does not allow creating entries."""
    pass


class EnclosingPathIsFile(ConvergenceError):
    """A path component that must be a directory is something else."""
    pass


class TargetIsNotADirectory(ConvergenceError):
    """Delete requested on a path occupied by a non-directory."""
    pass


class InsufficientPermissions(ConvergenceError):
    """Delete blocked by lack of write access."""
    pass


class IdentityNotFound(ConvergenceError):
    """A symbolic owner or group name could not be resolved."""

    def __init__(self, message: str, name: str, kind: str, path: str | None = None):
        super().__init__(message, path)
        self.name = name
        self.kind = kind


class FilesystemFailure(DirConvergeError):
    """An underlying filesystem call failed.

    The original ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, message: str, path: str, operation: str, cause: OSError | None = None):
        super().__init__(message, path)
        self.operation = operation
        self.errno = cause.errno if cause is not None else None


class ProbeFailure(FilesystemFailure):
    """Reading metadata failed for a reason other than non-existence."""
    pass


class MutationFailure(FilesystemFailure):
    """A create, delete or attribute change call failed."""
    pass
