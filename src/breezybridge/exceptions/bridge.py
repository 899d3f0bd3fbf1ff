"""Per-kind bridge exceptions.

One subclass of :class:`BridgeError` per :class:`ErrorKind`, plus
:func:`error_for_record` which picks the right class for a record produced
by the exception translator.
"""

from __future__ import annotations

from breezybridge.exceptions.base import BridgeError, ErrorKind, ErrorRecord


class InitializationError(BridgeError):
    """The runtime could not be started, or was used before it was ready.

    A failed initialization is cached for the lifetime of the process; it
    is the only unrecoverable bridge condition.
    """

    default_kind = ErrorKind.INITIALIZATION


class NotFoundError(BridgeError):
    """A branch, repository, file, revision or tag does not exist."""

    default_kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(BridgeError):
    """The runtime was refused access (filesystem, forge login, hooks)."""

    default_kind = ErrorKind.PERMISSION_DENIED


class AlreadyExistsError(BridgeError):
    """The object to be created is already present."""

    default_kind = ErrorKind.ALREADY_EXISTS


class FormatIncompatibleError(BridgeError):
    """Unknown, unsupported or mutually incompatible storage formats."""

    default_kind = ErrorKind.FORMAT_INCOMPATIBLE


class ConflictError(BridgeError):
    """Diverged history, tree conflicts or lock contention."""

    default_kind = ErrorKind.CONFLICT


class TransportError(BridgeError):
    """Network or remote-side failure."""

    default_kind = ErrorKind.TRANSPORT


class GenericError(BridgeError):
    """Unrecognized runtime exception; the message is kept verbatim."""

    default_kind = ErrorKind.GENERIC


_ERROR_CLASSES: dict[ErrorKind, type[BridgeError]] = {
    ErrorKind.INITIALIZATION: InitializationError,
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.PERMISSION_DENIED: PermissionDeniedError,
    ErrorKind.ALREADY_EXISTS: AlreadyExistsError,
    ErrorKind.FORMAT_INCOMPATIBLE: FormatIncompatibleError,
    ErrorKind.CONFLICT: ConflictError,
    ErrorKind.TRANSPORT: TransportError,
    ErrorKind.GENERIC: GenericError,
}


def error_class_for(kind: ErrorKind) -> type[BridgeError]:
    """Return the exception class raised for *kind*."""
    return _ERROR_CLASSES[kind]


def error_for_record(record: ErrorRecord) -> BridgeError:
    """Instantiate the exception class matching ``record.kind``."""
    return error_class_for(record.kind).from_record(record)


__all__ = [
    "AlreadyExistsError",
    "ConflictError",
    "FormatIncompatibleError",
    "GenericError",
    "InitializationError",
    "NotFoundError",
    "PermissionDeniedError",
    "TransportError",
    "error_class_for",
    "error_for_record",
]
