"""
Pytest configuration and fixtures for dirconverge tests.
"""

import tempfile
from pathlib import Path

import pytest

from dirconverge import ConvergenceEngine, InMemoryFilesystem


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def memory_fs():
    """In-memory filesystem acting as uid/gid 500 with /tmp present."""
    fs = InMemoryFilesystem(
        uid=500,
        gid=500,
        users={"appuser": 501, "nobody": 65534},
        groups={"appgroup": 601},
    )
    fs.add_directory("/tmp", uid=0, gid=0, mode=0o777)
    return fs


@pytest.fixture
def engine(memory_fs):
    """Engine wired to the in-memory filesystem."""
    return ConvergenceEngine(filesystem=memory_fs, dry_run=False)
