"""In-memory filesystem for exercising the engine without touching disk.

Only the pieces directory convergence needs are modelled: a tree of
directories and plain files, each with uid, gid and permission bits.
Writability is decided by the owner write bit, as if the process were
always the owner. Every mutating call is appended to ``calls`` so tests can
assert on exactly what was (or was not) done.
"""

import errno
import os
import posixpath
import stat
from dataclasses import dataclass

from .filesystem import FileStat, Filesystem


@dataclass
class _Node:
    is_directory: bool
    uid: int
    gid: int
    mode: int


def _error(cls: type[OSError], code: int, path: str) -> OSError:
    return cls(code, os.strerror(code), path)


class InMemoryFilesystem(Filesystem):
    """Dictionary-backed ``Filesystem``.

    Args:
        uid: Owner given to directories created through the interface
        gid: Group given to directories created through the interface
        umask: Applied to the default 0777 mode of new directories
        users: Known user names and their uids
        groups: Known group names and their gids
    """

    def __init__(
        self,
        uid: int = 0,
        gid: int = 0,
        umask: int = 0o022,
        users: dict[str, int] | None = None,
        groups: dict[str, int] | None = None,
    ):
        self.uid = uid
        self.gid = gid
        self.umask = umask
        self.users = dict(users or {})
        self.groups = dict(groups or {})
        self.nodes: dict[str, _Node] = {"/": _Node(True, 0, 0, 0o755)}
        self.calls: list[tuple[str, str]] = []
        # Paths whose stat() raises the given error instead of answering
        self.stat_errors: dict[str, OSError] = {}

    # ------------------------------------------------------------------
    # Fixture helpers
    # ------------------------------------------------------------------

    def add_directory(self, path: str, uid: int | None = None, gid: int | None = None, mode: int = 0o755) -> str:
        """Create a directory (and missing parents) without recording a call."""
        path = posixpath.normpath(path)
        parent = posixpath.dirname(path)
        if parent not in self.nodes:
            self.add_directory(parent)
        self.nodes[path] = _Node(
            True,
            self.uid if uid is None else uid,
            self.gid if gid is None else gid,
            mode,
        )
        return path

    def add_file(self, path: str, uid: int | None = None, gid: int | None = None, mode: int = 0o644) -> str:
        """Create a plain file (and missing parents) without recording a call."""
        path = posixpath.normpath(path)
        parent = posixpath.dirname(path)
        if parent not in self.nodes:
            self.add_directory(parent)
        self.nodes[path] = _Node(
            False,
            self.uid if uid is None else uid,
            self.gid if gid is None else gid,
            mode,
        )
        return path

    def exists(self, path: str) -> bool:
        return posixpath.normpath(path) in self.nodes

    def mutations(self, operation: str | None = None) -> list[tuple[str, str]]:
        """Recorded mutating calls, optionally filtered by operation name."""
        if operation is None:
            return list(self.calls)
        return [call for call in self.calls if call[0] == operation]

    # ------------------------------------------------------------------
    # Filesystem interface
    # ------------------------------------------------------------------

    def _lookup(self, path: str) -> _Node:
        path = posixpath.normpath(path)
        if path in self.stat_errors:
            raise self.stat_errors[path]
        # A plain file anywhere above the path makes it unreachable
        ancestor = posixpath.dirname(path)
        while ancestor != "/":
            node = self.nodes.get(ancestor)
            if node is not None and not node.is_directory:
                raise _error(NotADirectoryError, errno.ENOTDIR, path)
            ancestor = posixpath.dirname(ancestor)
        node = self.nodes.get(path)
        if node is None:
            raise _error(FileNotFoundError, errno.ENOENT, path)
        return node

    def _has_children(self, path: str) -> bool:
        prefix = path.rstrip("/") + "/"
        return any(key.startswith(prefix) for key in self.nodes if key != path)

    def stat(self, path: str) -> FileStat:
        node = self._lookup(path)
        file_type = stat.S_IFDIR if node.is_directory else stat.S_IFREG
        return FileStat(node.is_directory, node.uid, node.gid, file_type | node.mode)

    def is_writable(self, path: str) -> bool:
        node = self.nodes.get(posixpath.normpath(path))
        return node is not None and bool(node.mode & stat.S_IWUSR)

    def create_directory(self, path: str) -> None:
        path = posixpath.normpath(path)
        self.calls.append(("create_directory", path))
        self._mkdir(path)

    def create_directory_chain(self, path: str) -> None:
        path = posixpath.normpath(path)
        self.calls.append(("create_directory_chain", path))
        missing = []
        current = path
        while current not in self.nodes:
            missing.append(current)
            current = posixpath.dirname(current)
        if not self.nodes[current].is_directory:
            raise _error(NotADirectoryError, errno.ENOTDIR, path)
        for directory in reversed(missing):
            self._mkdir(directory)

    def _mkdir(self, path: str) -> None:
        if path in self.nodes:
            raise _error(FileExistsError, errno.EEXIST, path)
        parent = self.nodes.get(posixpath.dirname(path))
        if parent is None:
            raise _error(FileNotFoundError, errno.ENOENT, path)
        if not parent.is_directory:
            raise _error(NotADirectoryError, errno.ENOTDIR, path)
        if not parent.mode & stat.S_IWUSR:
            raise _error(PermissionError, errno.EACCES, path)
        self.nodes[path] = _Node(True, self.uid, self.gid, 0o777 & ~self.umask)

    def remove_directory(self, path: str) -> None:
        path = posixpath.normpath(path)
        self.calls.append(("remove_directory", path))
        node = self._lookup(path)
        if not node.is_directory:
            raise _error(NotADirectoryError, errno.ENOTDIR, path)
        if self._has_children(path):
            raise _error(OSError, errno.ENOTEMPTY, path)
        del self.nodes[path]

    def set_owner(self, path: str, uid: int | None, gid: int | None) -> None:
        path = posixpath.normpath(path)
        self.calls.append(("set_owner", path))
        node = self._lookup(path)
        if uid is not None:
            node.uid = uid
        if gid is not None:
            node.gid = gid

    def set_mode(self, path: str, mode: int) -> None:
        path = posixpath.normpath(path)
        self.calls.append(("set_mode", path))
        self._lookup(path).mode = stat.S_IMODE(mode)

    def resolve_user(self, name: str) -> int:
        return self.users[name]

    def resolve_group(self, name: str) -> int:
        return self.groups[name]
