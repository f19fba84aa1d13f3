"""Filesystem call surface used by the prober and the convergence engine.

The engine never talks to ``os`` directly. Everything goes through a
``Filesystem`` so that an in-memory implementation can stand in for the real
OS in tests (see ``dirconverge.memory``).
"""

import logging
import os
import stat
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileStat:
    """Raw metadata for an existing path.

    ``mode`` is the full ``st_mode`` value, file-type bits included.
    """

    is_directory: bool
    uid: int
    gid: int
    mode: int


class Filesystem(ABC):
    """Abstract filesystem operations needed for directory convergence.

    Implementations raise ``OSError`` subclasses the way the OS does:
    ``FileNotFoundError`` for missing paths, ``NotADirectoryError`` when a
    path component is not a directory, ``PermissionError`` and friends for
    everything else.
    """

    @abstractmethod
    def stat(self, path: str) -> FileStat:
        """Read metadata for ``path``, following symlinks."""
        pass

    @abstractmethod
    def is_writable(self, path: str) -> bool:
        """Check if the current process may write to ``path``."""
        pass

    @abstractmethod
    def create_directory(self, path: str) -> None:
        """Create a single directory whose parent already exists."""
        pass

    @abstractmethod
    def create_directory_chain(self, path: str) -> None:
        """Create ``path`` along with every missing ancestor."""
        pass

    @abstractmethod
    def remove_directory(self, path: str) -> None:
        """Remove an empty directory."""
        pass

    @abstractmethod
    def set_owner(self, path: str, uid: int | None, gid: int | None) -> None:
        """Change ownership. ``None`` leaves that id unchanged."""
        pass

    @abstractmethod
    def set_mode(self, path: str, mode: int) -> None:
        """Change permission bits."""
        pass

    @abstractmethod
    def resolve_user(self, name: str) -> int:
        """Map a user name to a uid.

        Raises:
            KeyError: If no such user exists
        """
        pass

    @abstractmethod
    def resolve_group(self, name: str) -> int:
        """Map a group name to a gid.

        Raises:
            KeyError: If no such group exists
        """
        pass


class LocalFilesystem(Filesystem):
    """Filesystem backed by the local OS (POSIX)."""

    def stat(self, path: str) -> FileStat:
        st = os.stat(path)
        return FileStat(
            is_directory=stat.S_ISDIR(st.st_mode),
            uid=st.st_uid,
            gid=st.st_gid,
            mode=st.st_mode,
        )

    def is_writable(self, path: str) -> bool:
        return os.access(path, os.W_OK)

    def create_directory(self, path: str) -> None:
        logger.debug(f"mkdir {path}")
        os.mkdir(path)

    def create_directory_chain(self, path: str) -> None:
        logger.debug(f"mkdir -p {path}")
        os.makedirs(path)

    def remove_directory(self, path: str) -> None:
        logger.debug(f"rmdir {path}")
        os.rmdir(path)

    def set_owner(self, path: str, uid: int | None, gid: int | None) -> None:
        logger.debug(f"chown {uid}:{gid} {path}")
        os.chown(
            path,
            -1 if uid is None else uid,
            -1 if gid is None else gid,
        )

    def set_mode(self, path: str, mode: int) -> None:
        logger.debug(f"chmod {mode:04o} {path}")
        os.chmod(path, mode)

    def resolve_user(self, name: str) -> int:
        import pwd

        return pwd.getpwnam(name).pw_uid

    def resolve_group(self, name: str) -> int:
        import grp

        return grp.getgrnam(name).gr_gid
