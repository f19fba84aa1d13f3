"""State prober - reads the actual state of a path."""

import logging
import stat

from .errors import ProbeFailure
from .filesystem import Filesystem, LocalFilesystem
from .models import ObservedState

logger = logging.getLogger(__name__)


class StateProber:
    """Builds ``ObservedState`` snapshots from filesystem metadata.

    Plain absence is a normal answer (``exists=False``), including the case
    where some component of the path is a file. Any other failure to read
    metadata raises ``ProbeFailure``.
    """

    def __init__(self, filesystem: Filesystem | None = None):
        self.filesystem = filesystem or LocalFilesystem()

    def probe(self, path: str) -> ObservedState:
        try:
            st = self.filesystem.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            logger.debug(f"Probe {path}: absent")
            return ObservedState(path=path, exists=False)
        except OSError as e:
            raise ProbeFailure(
                f"Unable to read metadata for {path}: {e}", path, "stat", e
            ) from e

        observed = ObservedState(
            path=path,
            exists=True,
            is_directory=st.is_directory,
            owner=st.uid,
            group=st.gid,
            mode=stat.S_IMODE(st.mode),
        )
        logger.debug(
            f"Probe {path}: directory={observed.is_directory} "
            f"owner={observed.owner} group={observed.group} mode={observed.mode:04o}"
        )
        return observed
