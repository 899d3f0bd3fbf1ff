"""Unit tests for the bridge exception hierarchy.

Covers:
- ErrorRecord and its cause chain
- BridgeError attributes, str and repr
- Per-kind subclasses and error_for_record
- ConfigError
"""

from __future__ import annotations

import dataclasses

import pytest

from breezybridge.exceptions import (
    AlreadyExistsError,
    BridgeError,
    ConfigError,
    ConflictError,
    ErrorKind,
    ErrorRecord,
    FormatIncompatibleError,
    GenericError,
    InitializationError,
    NotFoundError,
    PermissionDeniedError,
    TransportError,
    error_class_for,
    error_for_record,
)

# =============================================================================
# ErrorRecord Tests
# =============================================================================


class TestErrorRecord:
    """Tests for the ErrorRecord dataclass."""

    def test_defaults(self) -> None:
        """Test foreign_type_name and cause default to None."""
        record = ErrorRecord(ErrorKind.NOT_FOUND, "Not a branch")

        assert record.foreign_type_name is None
        assert record.cause is None

    def test_is_frozen(self) -> None:
        """Test records cannot be mutated."""
        record = ErrorRecord(ErrorKind.GENERIC, "boom")

        with pytest.raises(dataclasses.FrozenInstanceError):
            record.message = "changed"  # type: ignore[misc]

    def test_chain_lists_outermost_first(self) -> None:
        """Test chain() walks causes from the outermost record."""
        inner = ErrorRecord(ErrorKind.TRANSPORT, "connection reset")
        middle = ErrorRecord(ErrorKind.GENERIC, "fetch failed", cause=inner)
        outer = ErrorRecord(ErrorKind.INITIALIZATION, "startup failed", cause=middle)

        assert outer.chain() == (outer, middle, inner)

    def test_equality_is_structural(self) -> None:
        """Test two records with the same fields compare equal."""
        assert ErrorRecord(ErrorKind.CONFLICT, "diverged") == ErrorRecord(
            ErrorKind.CONFLICT, "diverged"
        )


# =============================================================================
# BridgeError Tests
# =============================================================================


class TestBridgeError:
    """Tests for BridgeError and its subclasses."""

    def test_message_is_str(self) -> None:
        """Test str() returns the message verbatim."""
        error = NotFoundError('Not a branch: "/tmp/x/".')

        assert str(error) == 'Not a branch: "/tmp/x/".'
        assert error.message == 'Not a branch: "/tmp/x/".'

    def test_record_carries_default_kind(self) -> None:
        """Test direct construction uses the class's default kind."""
        error = PermissionDeniedError("denied", foreign_type_name="x.PermissionDenied")

        assert error.kind is ErrorKind.PERMISSION_DENIED
        assert error.record == ErrorRecord(
            ErrorKind.PERMISSION_DENIED, "denied", "x.PermissionDenied"
        )

    def test_cause_is_exposed(self) -> None:
        """Test the cause record is reachable from the exception."""
        cause = ErrorRecord(ErrorKind.TRANSPORT, "timeout")
        error = GenericError("push failed", cause=cause)

        assert error.cause is cause

    def test_from_record_keeps_record(self) -> None:
        """Test from_record() does not rebuild the record."""
        record = ErrorRecord(ErrorKind.CONFLICT, "diverged", "breezy.errors.DivergedBranches")
        error = ConflictError.from_record(record)

        assert error.record is record
        assert str(error) == "diverged"

    def test_repr_names_kind(self) -> None:
        """Test repr() includes the kind and message."""
        error = TransportError("reset")

        assert repr(error) == (
            "TransportError(kind='transport', message='reset', foreign_type_name=None)"
        )

    @pytest.mark.parametrize(
        ("kind", "cls"),
        [
            (ErrorKind.INITIALIZATION, InitializationError),
            (ErrorKind.NOT_FOUND, NotFoundError),
            (ErrorKind.PERMISSION_DENIED, PermissionDeniedError),
            (ErrorKind.ALREADY_EXISTS, AlreadyExistsError),
            (ErrorKind.FORMAT_INCOMPATIBLE, FormatIncompatibleError),
            (ErrorKind.CONFLICT, ConflictError),
            (ErrorKind.TRANSPORT, TransportError),
            (ErrorKind.GENERIC, GenericError),
        ],
    )
    def test_one_class_per_kind(self, kind: ErrorKind, cls: type[BridgeError]) -> None:
        """Test every kind maps to its own BridgeError subclass."""
        assert error_class_for(kind) is cls
        assert cls.default_kind is kind

        error = error_for_record(ErrorRecord(kind, "msg"))
        assert type(error) is cls
        assert isinstance(error, BridgeError)


# =============================================================================
# ConfigError Tests
# =============================================================================


class TestConfigError:
    """Tests for ConfigError."""

    def test_is_initialization_error(self) -> None:
        """Test configuration failures are initialization failures."""
        error = ConfigError("Invalid configuration", field="extensions", value=["svn"])

        assert isinstance(error, InitializationError)
        assert error.kind is ErrorKind.INITIALIZATION

    def test_field_and_value(self) -> None:
        """Test field and value are kept for debugging."""
        error = ConfigError("bad", field="minimum_version", value="three")

        assert error.field == "minimum_version"
        assert error.value == "three"
        assert error.message == "bad"

    def test_field_defaults_to_none(self) -> None:
        """Test field and value default to None."""
        error = ConfigError("bad")

        assert error.field is None
        assert error.value is None
