"""
Pydantic models for directory convergence.

This module contains the records exchanged with the convergence engine:
- DesiredState: the declared, immutable target for one directory
- ObservedState: a transient snapshot of what is actually on disk
- ConvergenceResult: the outcome reported back to the caller
"""

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

PERMISSION_BITS = 0o7777


class Action(str, Enum):
    """Actions a directory declaration can request."""
    CREATE = "create"
    DELETE = "delete"


def parse_mode(value: int | str) -> int:
    """Parse a permission mode given as an int or an octal string.

    Accepts ``0o755``, ``"755"``, ``"0755"`` and ``"0o755"``.

    Raises:
        ValueError: If the string is not valid octal or the int is negative
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid mode: {value!r}")
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("0o"):
            text = text[2:]
        try:
            value = int(text, 8)
        except ValueError:
            raise ValueError(f"Invalid octal mode: {value!r}") from None
    if value < 0:
        raise ValueError(f"Invalid mode: {value!r}")
    return value & PERMISSION_BITS


class DesiredState(BaseModel):
    """Declared configuration for a single directory.

    Only ``path`` is mandatory. An owner, group or mode left as ``None`` is
    not managed and will never be touched.

    Attributes:
        path: Directory path, normalized to an absolute path
        owner: Numeric uid or user name
        group: Numeric gid or group name
        mode: Permission bits (file-type bits are never part of it)
        recursive: Create missing ancestors as well (default: False)
    """

    model_config = ConfigDict(frozen=True)

    path: str
    owner: int | str | None = None
    group: int | str | None = None
    mode: int | None = None
    recursive: bool = False

    @field_validator("path")
    @classmethod
    def _normalize_path(cls, value: str) -> str:
        if not value:
            raise ValueError("path must be a non-empty string")
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = Path.cwd() / path
        return os.path.normpath(str(path))

    @field_validator("owner", "group")
    @classmethod
    def _numeric_identity(cls, value: int | str | None) -> int | str | None:
        if isinstance(value, str):
            if not value:
                raise ValueError("identity must not be empty")
            if value.isdigit():
                return int(value)
        if isinstance(value, int) and value < 0:
            raise ValueError(f"identity must not be negative: {value}")
        return value

    @field_validator("mode", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        if value is None:
            return None
        return parse_mode(value)

    @property
    def manages_attributes(self) -> bool:
        """True if any of owner, group or mode is declared."""
        return any(v is not None for v in (self.owner, self.group, self.mode))


class ObservedState(BaseModel):
    """Snapshot of a path as found on the filesystem.

    Built fresh by every probe. When ``exists`` is False all other fields
    except ``path`` are None.
    """

    path: str
    exists: bool = False
    is_directory: bool | None = None
    owner: int | None = None
    group: int | None = None
    mode: int | None = None


class ConvergenceResult(BaseModel):
    """Outcome of a convergence call.

    Attributes:
        path: Target directory
        action: Action that was converged
        changed: True if any mutation happened (or would, in dry-run mode)
        operations: Descriptions of the mutations, in execution order
    """

    path: str
    action: Action
    changed: bool = False
    operations: list[str] = Field(default_factory=list)

    def record(self, description: str) -> None:
        """Register a completed mutation."""
        self.operations.append(description)
        self.changed = True
