"""
Dirconverge - Declarative directory state convergence.

Declare how a directory should look (path, owner, group, mode) and whether it
should exist. Dirconverge probes the filesystem and performs only the changes
needed to make reality match, reporting whether anything changed.
"""

from .engine import ConvergenceEngine, converge
from .errors import (
    ConvergenceError,
    DirConvergeError,
    EnclosingDirectoryDoesNotExist,
    EnclosingDirectoryNotWritable,
    EnclosingPathIsFile,
    IdentityNotFound,
    InsufficientPermissions,
    MutationFailure,
    ProbeFailure,
    TargetIsNotADirectory,
)
from .filesystem import Filesystem, LocalFilesystem
from .memory import InMemoryFilesystem
from .models import Action, ConvergenceResult, DesiredState, ObservedState
from .prober import StateProber
from .settings import DirConvergeSettings, get_settings, reload_settings

__version__ = "0.1.0"
__all__ = [
    "Action",
    "ConvergenceEngine",
    "ConvergenceError",
    "ConvergenceResult",
    "DesiredState",
    "DirConvergeError",
    "DirConvergeSettings",
    "EnclosingDirectoryDoesNotExist",
    "EnclosingDirectoryNotWritable",
    "EnclosingPathIsFile",
    "Filesystem",
    "IdentityNotFound",
    "InMemoryFilesystem",
    "InsufficientPermissions",
    "LocalFilesystem",
    "MutationFailure",
    "ObservedState",
    "ProbeFailure",
    "StateProber",
    "TargetIsNotADirectory",
    "converge",
    "get_settings",
    "reload_settings",
]
