from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Category of a bridge failure.

    Downstream code matches on this value instead of on runtime-specific
    exception types.
    """

    INITIALIZATION = "initialization"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    ALREADY_EXISTS = "already_exists"
    FORMAT_INCOMPATIBLE = "format_incompatible"
    CONFLICT = "conflict"
    TRANSPORT = "transport"
    GENERIC = "generic"


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """Immutable description of a failure.

    Attributes:
        kind: Category of the failure.
        message: Human-readable message. For translated runtime exceptions
            this is the runtime's own diagnostic text, verbatim.
        foreign_type_name: Fully qualified name of the runtime exception
            type, or None for failures raised by the bridge itself.
        cause: Record of the exception that caused this one, if any.
    """

    kind: ErrorKind
    message: str
    foreign_type_name: str | None = None
    cause: ErrorRecord | None = None

    def chain(self) -> tuple[ErrorRecord, ...]:
        """Return this record followed by its causes, outermost first."""
        records: list[ErrorRecord] = []
        record: ErrorRecord | None = self
        while record is not None:
            records.append(record)
            record = record.cause
        return tuple(records)


class BridgeError(Exception):
    """Base exception class for all breezybridge errors.

    Every failure crossing the bridge boundary is a BridgeError carrying an
    :class:`ErrorRecord`. Subclasses exist per :class:`ErrorKind` so callers
    can use ``except NotFoundError:`` as well as ``if err.kind is ...``.

    Attributes:
        record: The immutable error record.

    Example:
        ```python
        try:
            branch = breezybridge.branch.open(url)
        except BridgeError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                ...
            logger.error("open_failed", error=e.message)
        ```
    """

    #: Kind used when the exception is raised directly from a message
    default_kind: ErrorKind = ErrorKind.GENERIC

    def __init__(
        self,
        message: str,
        *,
        foreign_type_name: str | None = None,
        cause: ErrorRecord | None = None,
    ) -> None:
        """Initialize the BridgeError.

        Args:
            message: Human-readable error message.
            foreign_type_name: Fully qualified runtime exception type name.
            cause: Record of the causing failure.
        """
        self._record = ErrorRecord(
            kind=self.default_kind,
            message=message,
            foreign_type_name=foreign_type_name,
            cause=cause,
        )
        super().__init__(message)

    @classmethod
    def from_record(cls, record: ErrorRecord) -> BridgeError:
        """Build an exception that carries *record* unchanged."""
        error = cls.__new__(cls)
        error._record = record
        Exception.__init__(error, record.message)
        return error

    @property
    def record(self) -> ErrorRecord:
        return self._record

    @property
    def kind(self) -> ErrorKind:
        return self._record.kind

    @property
    def message(self) -> str:
        return self._record.message

    @property
    def foreign_type_name(self) -> str | None:
        return self._record.foreign_type_name

    @property
    def cause(self) -> ErrorRecord | None:
        return self._record.cause

    def __str__(self) -> str:
        return self._record.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"message={self.message!r}, "
            f"foreign_type_name={self.foreign_type_name!r})"
        )
