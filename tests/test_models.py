"""
Unit tests for dirconverge models.

Tests the core Pydantic models and their validation logic.
"""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from dirconverge.models import (
    Action,
    ConvergenceResult,
    DesiredState,
    ObservedState,
    parse_mode,
)


class TestDesiredState:
    """Test DesiredState validation and normalization."""

    def test_defaults(self):
        """Test DesiredState defaults."""
        desired = DesiredState(path="/srv/app")
        assert desired.path == "/srv/app"
        assert desired.owner is None
        assert desired.group is None
        assert desired.mode is None
        assert desired.recursive is False
        assert desired.manages_attributes is False

    def test_empty_path_rejected(self):
        """Test an empty path is rejected."""
        with pytest.raises(ValidationError):
            DesiredState(path="")

    def test_relative_path_resolved(self):
        """Test relative paths resolve against the cwd."""
        desired = DesiredState(path="data/cache")
        assert desired.path == os.path.normpath(str(Path.cwd() / "data" / "cache"))

    def test_path_normalized(self):
        """Test redundant separators and dots are removed."""
        assert DesiredState(path="/srv//app/./data/").path == "/srv/app/data"

    def test_mode_octal_strings(self):
        """Test octal string modes."""
        assert DesiredState(path="/x", mode="755").mode == 0o755
        assert DesiredState(path="/x", mode="0750").mode == 0o750
        assert DesiredState(path="/x", mode="0o700").mode == 0o700

    def test_mode_int(self):
        """Test integer modes."""
        assert DesiredState(path="/x", mode=0o2775).mode == 0o2775

    def test_mode_file_type_bits_masked(self):
        """Test file-type bits are masked out of the mode."""
        assert DesiredState(path="/x", mode=0o40755).mode == 0o755

    def test_invalid_mode_rejected(self):
        """Test invalid mode strings are rejected."""
        with pytest.raises(ValidationError):
            DesiredState(path="/x", mode="rwxr-xr-x")
        with pytest.raises(ValidationError):
            DesiredState(path="/x", mode="999")

    def test_numeric_identity_strings(self):
        """Test digit strings become numeric ids."""
        desired = DesiredState(path="/x", owner="500", group="20")
        assert desired.owner == 500
        assert desired.group == 20

    def test_symbolic_identity_kept(self):
        """Test names are kept for later resolution."""
        desired = DesiredState(path="/x", owner="appuser", group="appgroup")
        assert desired.owner == "appuser"
        assert desired.group == "appgroup"
        assert desired.manages_attributes is True

    def test_negative_identity_rejected(self):
        """Test negative uids and gids are rejected."""
        with pytest.raises(ValidationError):
            DesiredState(path="/x", owner=-1)
        with pytest.raises(ValidationError):
            DesiredState(path="/x", group=-1)

    def test_frozen(self):
        """Test DesiredState is immutable."""
        desired = DesiredState(path="/x")
        with pytest.raises(ValidationError):
            desired.path = "/y"


def test_parse_mode_rejects_negative():
    """Test parse_mode rejects negative values."""
    with pytest.raises(ValueError):
        parse_mode(-1)


def test_observed_state_absent_defaults():
    """Test ObservedState defaults for an absent path."""
    observed = ObservedState(path="/missing")
    assert observed.exists is False
    assert observed.is_directory is None
    assert observed.mode is None


def test_convergence_result_record():
    """Test ConvergenceResult.record marks a change."""
    result = ConvergenceResult(path="/x", action=Action.CREATE)
    assert result.changed is False
    result.record("create directory /x")
    assert result.changed is True
    assert result.operations == ["create directory /x"]


def test_action_values():
    """Test Action lookup by value."""
    assert Action("create") is Action.CREATE
    assert Action("delete") is Action.DELETE
