"""Directory resource for declaring managed directories."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from ..engine import ConvergenceEngine
from ..models import Action, ConvergenceResult, DesiredState


class DirectoryResource(BaseModel):
    """Directory resource - declares a directory and how it should look.

    Basic usage:
        DirectoryResource(path="/var/app/data")

    Advanced usage:
        DirectoryResource(
            description="Application data storage with restricted access",
            path="/var/app/data",
            mode="700",
            user="appuser",
            group="appgroup",
            recursive=True,
        )

    Removal:
        DirectoryResource(path="/var/app/cache", present=False)

    Attributes:
        path: Full path to the directory (required)
        description: Directory purpose (optional)
        mode: Directory permissions as octal string (optional - unmanaged if not provided)
        user: Owner user name or uid (optional)
        group: Group name or gid (optional)
        present: Whether directory should exist (default: True)
        recursive: Create parent directories if needed (default: False)
    """

    path: str
    description: Optional[str] = None
    mode: Optional[str] = None
    user: Optional[str] = None
    group: Optional[str] = None
    present: bool = True
    recursive: bool = False

    @property
    def action(self) -> Action:
        """Action implied by ``present``."""
        return Action.CREATE if self.present else Action.DELETE

    def _resolve_directory_path(self) -> str:
        """Resolve directory path to absolute path.

        Converts relative paths to absolute based on current working directory.

        Returns:
            str: Absolute path to the directory
        """
        dir_path = Path(self.path)
        if not dir_path.is_absolute():
            dir_path = Path.cwd() / dir_path
        return str(dir_path)

    def to_desired_state(self) -> DesiredState:
        """Build the immutable ``DesiredState`` for this declaration.

        Attributes are only carried over for present directories; owner, group
        and mode are meaningless for a directory that should not exist.

        Raises:
            pydantic.ValidationError: If mode is not a valid octal string
        """
        if not self.present:
            return DesiredState(path=self._resolve_directory_path())
        return DesiredState(
            path=self._resolve_directory_path(),
            owner=self.user,
            group=self.group,
            mode=self.mode,
            recursive=self.recursive,
        )

    def converge(self, engine: ConvergenceEngine | None = None) -> ConvergenceResult:
        """Converge this declaration, using a default engine if none is given."""
        engine = engine or ConvergenceEngine()
        return engine.converge(self.to_desired_state(), self.action)

