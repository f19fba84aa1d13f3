"""
Convergence engine - makes a directory on disk match its declaration.

The engine compares a ``DesiredState`` with what the ``StateProber`` finds
and performs the smallest set of mutations needed:

    create: probe -> ancestor checks -> [create] -> reconcile attributes
    delete: probe -> type check -> writability check -> [remove]

Every safety check runs before the first mutation of the step it guards.
Probing and acting are not atomic: another process changing the same path
between the two is not detected.
"""

import logging
import os
from collections.abc import Callable

from .errors import (
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
from .models import Action, ConvergenceResult, DesiredState, ObservedState
from .prober import StateProber
from .settings import get_settings

logger = logging.getLogger(__name__)


class ConvergenceEngine:
    """Converges one directory declaration at a time.

    Engines keep no per-call state, so one instance can serve any number of
    sequential or concurrent calls on distinct paths.

    Args:
        filesystem: Call surface to use (default: the local OS)
        prober: State prober (default: one built on ``filesystem``)
        dry_run: Check and report, but never mutate. ``None`` takes the
            value from settings.
    """

    def __init__(
        self,
        filesystem: Filesystem | None = None,
        prober: StateProber | None = None,
        dry_run: bool | None = None,
    ):
        self.filesystem = filesystem or LocalFilesystem()
        self.prober = prober or StateProber(self.filesystem)
        self.dry_run = get_settings().dry_run if dry_run is None else dry_run

    def converge(self, desired: DesiredState, action: Action | str) -> ConvergenceResult:
        """Dispatch to ``ensure_present`` or ``ensure_absent``."""
        action = Action(action)
        if action is Action.CREATE:
            return self.ensure_present(desired)
        return self.ensure_absent(desired)

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    def ensure_present(self, desired: DesiredState) -> ConvergenceResult:
        """Make sure the directory exists with the declared attributes.

        Raises:
            EnclosingPathIsFile: The target or its nearest existing ancestor
                is not a directory
            EnclosingDirectoryDoesNotExist: Parent missing and not recursive
            EnclosingDirectoryNotWritable: Parent (or nearest existing
                ancestor) is not writable
            IdentityNotFound: Declared owner or group name is unknown
            ProbeFailure: Metadata could not be read
            MutationFailure: A filesystem change failed
        """
        result = ConvergenceResult(path=desired.path, action=Action.CREATE)
        try:
            self._ensure_present(desired, result)
        except DirConvergeError as e:
            e.result = result
            raise
        return result

    def _ensure_present(self, desired: DesiredState, result: ConvergenceResult) -> None:
        path = desired.path
        current = self.prober.probe(path)

        if current.exists and not current.is_directory:
            raise EnclosingPathIsFile(
                f"Cannot create directory {path}: path is occupied by a non-directory",
                path,
            )

        if current.exists:
            logger.debug(f"Directory {path} already exists")
        else:
            missing = self._check_enclosing(desired)
            if missing:
                self._apply(
                    result,
                    f"create directory {path} with missing parents {', '.join(reversed(missing))}",
                    path,
                    "makedirs",
                    self.filesystem.create_directory_chain,
                    path,
                )
            else:
                self._apply(
                    result,
                    f"create directory {path}",
                    path,
                    "mkdir",
                    self.filesystem.create_directory,
                    path,
                )
            if self.dry_run:
                # Nothing to probe; every declared attribute would be applied
                self._plan_attributes(desired, result)
                return

        self._reconcile(path, desired, result)

    def _check_enclosing(self, desired: DesiredState) -> list[str]:
        """Validate the enclosing directory before creating the target.

        Returns:
            Missing ancestors, nearest to the target first. Always empty
            when ``desired.recursive`` is False.
        """
        path = desired.path
        if desired.recursive:
            missing, nearest = self.find_missing_ancestors(path)
        else:
            missing = []
            nearest = self.prober.probe(os.path.dirname(path))
            if not nearest.exists:
                raise EnclosingDirectoryDoesNotExist(
                    f"Cannot create directory {path}: enclosing directory "
                    f"{nearest.path} does not exist (declare it recursive to create it)",
                    path,
                )

        if not nearest.is_directory:
            raise EnclosingPathIsFile(
                f"Cannot create directory {path}: {nearest.path} is not a directory",
                path,
            )
        if not self.filesystem.is_writable(nearest.path):
            raise EnclosingDirectoryNotWritable(
                f"Cannot create directory {path}: {nearest.path} is not writable",
                path,
            )
        return missing

    def find_missing_ancestors(self, path: str) -> tuple[list[str], ObservedState]:
        """Walk upward from ``path`` until an existing ancestor is found.

        ``path`` itself is not probed. Nothing is mutated.

        Returns:
            Tuple of (missing ancestor paths nearest to ``path`` first,
            observed state of the nearest existing ancestor)
        """
        missing = []
        current = os.path.dirname(path)
        while True:
            observed = self.prober.probe(current)
            if observed.exists:
                return missing, observed
            missing.append(current)
            parent = os.path.dirname(current)
            if parent == current:
                raise EnclosingDirectoryDoesNotExist(
                    f"Cannot create directory {path}: no existing ancestor found",
                    path,
                )
            current = parent

    # ------------------------------------------------------------------
    # attributes
    # ------------------------------------------------------------------

    def reconcile_attributes(self, path: str, desired: DesiredState) -> bool:
        """Correct owner, group and mode of an existing ``path``.

        Only attributes declared in ``desired`` and differing from what is on
        disk are changed.

        Returns:
            True if any attribute was corrected
        """
        result = ConvergenceResult(path=path, action=Action.CREATE)
        try:
            self._reconcile(path, desired, result)
        except DirConvergeError as e:
            e.result = result
            raise
        return result.changed

    def _reconcile(self, path: str, desired: DesiredState, result: ConvergenceResult) -> None:
        if not desired.manages_attributes:
            return
        uid = self._resolve_identity(desired.owner, "user", path)
        gid = self._resolve_identity(desired.group, "group", path)

        current = self.prober.probe(path)
        if not current.exists:
            raise ProbeFailure(
                f"Directory {path} disappeared before its attributes could be set",
                path,
                "stat",
            )

        new_uid = uid if uid is not None and uid != current.owner else None
        new_gid = gid if gid is not None and gid != current.group else None
        if new_uid is not None or new_gid is not None:
            changes = []
            if new_uid is not None:
                changes.append(f"owner from {current.owner} to {new_uid}")
            if new_gid is not None:
                changes.append(f"group from {current.group} to {new_gid}")
            self._apply(
                result,
                f"change {' and '.join(changes)} on {path}",
                path,
                "chown",
                self.filesystem.set_owner,
                path,
                new_uid,
                new_gid,
            )

        # Mode last: chown may clear setuid/setgid bits
        if desired.mode is not None and desired.mode != current.mode:
            self._apply(
                result,
                f"change mode from {current.mode:04o} to {desired.mode:04o} on {path}",
                path,
                "chmod",
                self.filesystem.set_mode,
                path,
                desired.mode,
            )

    def _plan_attributes(self, desired: DesiredState, result: ConvergenceResult) -> None:
        path = desired.path
        uid = self._resolve_identity(desired.owner, "user", path)
        gid = self._resolve_identity(desired.group, "group", path)
        if uid is not None or gid is not None:
            changes = []
            if uid is not None:
                changes.append(f"owner to {uid}")
            if gid is not None:
                changes.append(f"group to {gid}")
            result.record(f"would set {' and '.join(changes)} on {path}")
        if desired.mode is not None:
            result.record(f"would set mode to {desired.mode:04o} on {path}")

    def _resolve_identity(self, value: int | str | None, kind: str, path: str) -> int | None:
        if value is None or isinstance(value, int):
            return value
        resolve = self.filesystem.resolve_user if kind == "user" else self.filesystem.resolve_group
        try:
            return resolve(value)
        except KeyError:
            raise IdentityNotFound(
                f"Cannot manage {path}: unknown {kind} '{value}'",
                value,
                kind,
                path,
            ) from None

    # ------------------------------------------------------------------
    # delete
    # ------------------------------------------------------------------

    def ensure_absent(self, desired: DesiredState) -> ConvergenceResult:
        """Make sure the directory does not exist.

        Removal is not recursive; a non-empty directory surfaces as a
        ``MutationFailure``.

        Probing follows symlinks, so a symlink to a directory passes the type
        check; removing it then fails in ``rmdir`` with ENOTDIR and surfaces
        as a ``MutationFailure``. The link and its target are left in place.

        Raises:
            TargetIsNotADirectory: Path is occupied by a non-directory
            InsufficientPermissions: Directory is not writable
            ProbeFailure: Metadata could not be read
            MutationFailure: Removal failed
        """
        result = ConvergenceResult(path=desired.path, action=Action.DELETE)
        try:
            self._ensure_absent(desired, result)
        except DirConvergeError as e:
            e.result = result
            raise
        return result

    def _ensure_absent(self, desired: DesiredState, result: ConvergenceResult) -> None:
        path = desired.path
        current = self.prober.probe(path)
        if not current.exists:
            logger.debug(f"Directory {path} already absent")
            return
        if not current.is_directory:
            raise TargetIsNotADirectory(
                f"Cannot delete {path}: it is not a directory", path
            )
        if not self.filesystem.is_writable(path):
            raise InsufficientPermissions(
                f"Cannot delete directory {path}: insufficient permissions", path
            )
        self._apply(
            result,
            f"remove directory {path}",
            path,
            "rmdir",
            self.filesystem.remove_directory,
            path,
        )

    # ------------------------------------------------------------------

    def _apply(
        self,
        result: ConvergenceResult,
        description: str,
        path: str,
        operation: str,
        func: Callable[..., None],
        *args,
    ) -> None:
        """Run one mutation (or only report it in dry-run mode)."""
        if self.dry_run:
            logger.info(f"Would {description}")
            result.record(f"would {description}")
            return
        try:
            func(*args)
        except OSError as e:
            raise MutationFailure(
                f"Failed to {description}: {e}", path, operation, e
            ) from e
        logger.info(description[0].upper() + description[1:])
        result.record(description)


def converge(
    desired: DesiredState,
    action: Action | str = Action.CREATE,
    filesystem: Filesystem | None = None,
    dry_run: bool | None = None,
) -> ConvergenceResult:
    """Converge a single declaration with a throwaway engine."""
    return ConvergenceEngine(filesystem=filesystem, dry_run=dry_run).converge(desired, action)
