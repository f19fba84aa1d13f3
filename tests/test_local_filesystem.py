"""Tests against the real filesystem in a temporary directory."""

import errno
import os
import stat

import pytest

from dirconverge import (
    ConvergenceEngine,
    DesiredState,
    EnclosingDirectoryDoesNotExist,
    EnclosingPathIsFile,
    MutationFailure,
    TargetIsNotADirectory,
)
from dirconverge.filesystem import LocalFilesystem


@pytest.fixture
def local_engine():
    return ConvergenceEngine(filesystem=LocalFilesystem(), dry_run=False)


def test_create_and_idempotence(local_engine, temp_dir):
    """Test create then no-op on disk."""
    desired = DesiredState(path=str(temp_dir / "app"), mode="750")

    first = local_engine.ensure_present(desired)
    second = local_engine.ensure_present(desired)

    assert first.changed is True
    assert second.changed is False
    assert (temp_dir / "app").is_dir()
    assert stat.S_IMODE(os.stat(temp_dir / "app").st_mode) == 0o750


def test_recursive_create(local_engine, temp_dir):
    """Test recursive creation on disk."""
    target = temp_dir / "a" / "b" / "c"

    result = local_engine.ensure_present(DesiredState(path=str(target), recursive=True))

    assert result.changed is True
    assert target.is_dir()


def test_missing_parent_not_created(local_engine, temp_dir):
    """Test nothing is created when the parent is missing."""
    target = temp_dir / "some" / "dir"

    with pytest.raises(EnclosingDirectoryDoesNotExist):
        local_engine.ensure_present(DesiredState(path=str(target)))

    assert not (temp_dir / "some").exists()


def test_file_in_the_way(local_engine, temp_dir):
    """Test plain files block both create and delete."""
    (temp_dir / "file").write_text("x")

    with pytest.raises(EnclosingPathIsFile):
        local_engine.ensure_present(DesiredState(path=str(temp_dir / "file" / "dir")))
    with pytest.raises(TargetIsNotADirectory):
        local_engine.ensure_absent(DesiredState(path=str(temp_dir / "file")))

    assert (temp_dir / "file").is_file()


def test_current_owner_is_a_noop(local_engine, temp_dir):
    """Test declaring the current owner and group changes nothing."""
    target = temp_dir / "owned"
    target.mkdir()
    st = os.stat(target)

    result = local_engine.ensure_present(
        DesiredState(path=str(target), owner=st.st_uid, group=st.st_gid)
    )

    assert result.changed is False


def test_delete(local_engine, temp_dir):
    """Test delete on disk, then a no-op."""
    target = temp_dir / "gone"
    target.mkdir()
    desired = DesiredState(path=str(target))

    assert local_engine.ensure_absent(desired).changed is True
    assert not target.exists()
    assert local_engine.ensure_absent(desired).changed is False


def test_delete_non_empty(local_engine, temp_dir):
    """Test a non-empty directory is kept and reported."""
    target = temp_dir / "full"
    target.mkdir()
    (target / "keep.txt").write_text("data")

    with pytest.raises(MutationFailure) as exc_info:
        local_engine.ensure_absent(DesiredState(path=str(target)))

    assert exc_info.value.errno in (errno.ENOTEMPTY, errno.EEXIST)
    assert target.is_dir()


def test_delete_symlink_to_directory(local_engine, temp_dir):
    """Test a symlink to a directory is not removed."""
    real = temp_dir / "real"
    real.mkdir()
    link = temp_dir / "link"
    link.symlink_to(real, target_is_directory=True)

    with pytest.raises(MutationFailure) as exc_info:
        local_engine.ensure_absent(DesiredState(path=str(link)))

    assert exc_info.value.errno == errno.ENOTDIR
    assert exc_info.value.result.changed is False
    assert link.is_symlink()
    assert real.is_dir()
