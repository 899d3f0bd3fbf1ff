"""Translation of runtime exceptions into bridge errors.

Every exception raised inside the embedded runtime passes through
:func:`translate` exactly once, at the call site, and comes out as a
:class:`~breezybridge.exceptions.BridgeError` subclass whose record keeps
the runtime's message verbatim.

Lookup happens in tiers:

1. exact type identity,
2. the nearest registered superclass (walking the MRO),
3. a small table of class-name prefixes,
4. :attr:`ErrorKind.GENERIC`.

Registrations are declared by dotted name and bound to the live type
objects on first use, so the registry never forces the runtime to be
imported before it is actually needed.
"""

from __future__ import annotations

import importlib
import threading
from collections.abc import Iterable

from breezybridge.exceptions import (
    BridgeError,
    ErrorKind,
    ErrorRecord,
    error_for_record,
)
from breezybridge.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "DEFAULT_MAPPINGS",
    "FALLBACK_PREFIXES",
    "LEGACY_MAPPINGS",
    "ExceptionTranslator",
    "get_translator",
    "translate",
]

# =============================================================================
# Default registry
# =============================================================================

#: Runtime exception types, by dotted name, and the kind they map to
DEFAULT_MAPPINGS: tuple[tuple[str, ErrorKind], ...] = (
    # Missing objects
    ("breezy.errors.NotBranchError", ErrorKind.NOT_FOUND),
    ("breezy.errors.NoRepositoryPresent", ErrorKind.NOT_FOUND),
    ("breezy.transport.NoSuchFile", ErrorKind.NOT_FOUND),
    ("breezy.errors.NoSuchRevision", ErrorKind.NOT_FOUND),
    ("breezy.errors.NoSuchRevisionInTree", ErrorKind.NOT_FOUND),
    ("breezy.errors.NoSuchTag", ErrorKind.NOT_FOUND),
    ("breezy.forge.NoSuchProject", ErrorKind.NOT_FOUND),
    ("breezy.tree.MissingNestedTree", ErrorKind.NOT_FOUND),
    ("builtins.FileNotFoundError", ErrorKind.NOT_FOUND),
    # Access
    ("breezy.errors.PermissionDenied", ErrorKind.PERMISSION_DENIED),
    ("breezy.forge.ForgeLoginRequired", ErrorKind.PERMISSION_DENIED),
    ("breezy.git.remote.ProtectedBranchHookDeclined", ErrorKind.PERMISSION_DENIED),
    ("breezy.plugins.gitlab.forge.ForkingDisabled", ErrorKind.PERMISSION_DENIED),
    ("builtins.PermissionError", ErrorKind.PERMISSION_DENIED),
    # Creation collisions
    ("breezy.transport.FileExists", ErrorKind.ALREADY_EXISTS),
    ("breezy.errors.AlreadyBranchError", ErrorKind.ALREADY_EXISTS),
    ("breezy.errors.AlreadyControlDirError", ErrorKind.ALREADY_EXISTS),
    ("breezy.errors.TagAlreadyExists", ErrorKind.ALREADY_EXISTS),
    ("breezy.forge.MergeProposalExists", ErrorKind.ALREADY_EXISTS),
    ("builtins.FileExistsError", ErrorKind.ALREADY_EXISTS),
    # Formats
    ("breezy.errors.IncompatibleFormat", ErrorKind.FORMAT_INCOMPATIBLE),
    ("breezy.errors.UnknownFormatError", ErrorKind.FORMAT_INCOMPATIBLE),
    ("breezy.errors.UnsupportedFormatError", ErrorKind.FORMAT_INCOMPATIBLE),
    ("breezy.errors.UnsupportedVcs", ErrorKind.FORMAT_INCOMPATIBLE),
    ("breezy.controldir.NoColocatedBranchSupport", ErrorKind.FORMAT_INCOMPATIBLE),
    ("breezy.errors.NoRoundtrippingSupport", ErrorKind.FORMAT_INCOMPATIBLE),
    ("breezy.inter.NoCompatibleInter", ErrorKind.FORMAT_INCOMPATIBLE),
    ("breezy.forge.UnsupportedForge", ErrorKind.FORMAT_INCOMPATIBLE),
    ("breezy.bzr.LineEndingError", ErrorKind.FORMAT_INCOMPATIBLE),
    # Conflicting state
    ("breezy.errors.DivergedBranches", ErrorKind.CONFLICT),
    ("breezy.errors.ConflictsInTree", ErrorKind.CONFLICT),
    ("breezy.errors.LockContention", ErrorKind.CONFLICT),
    ("breezy.workspace.WorkspaceDirty", ErrorKind.CONFLICT),
    ("breezy.forge.SourceNotDerivedFromTarget", ErrorKind.CONFLICT),
    ("breezy.plugins.gitlab.forge.GitLabConflict", ErrorKind.CONFLICT),
    ("breezy.commit.PointlessCommit", ErrorKind.CONFLICT),
    ("breezy.controldir.BranchReferenceLoop", ErrorKind.CONFLICT),
    # Network and remote side
    ("breezy.errors.TransportError", ErrorKind.TRANSPORT),
    ("breezy.errors.ConnectionError", ErrorKind.TRANSPORT),
    ("breezy.transport.UnsupportedProtocol", ErrorKind.TRANSPORT),
    ("breezy.errors.TransportNotPossible", ErrorKind.TRANSPORT),
    ("breezy.errors.UnexpectedHttpStatus", ErrorKind.TRANSPORT),
    ("breezy.errors.InvalidHttpResponse", ErrorKind.TRANSPORT),
    ("breezy.errors.BadHttpRequest", ErrorKind.TRANSPORT),
    ("breezy.errors.RedirectRequested", ErrorKind.TRANSPORT),
    ("breezy.transport.UnusableRedirect", ErrorKind.TRANSPORT),
    ("breezy.errors.NotLocalUrl", ErrorKind.TRANSPORT),
    ("breezy.git.remote.RemoteGitError", ErrorKind.TRANSPORT),
    ("http.client.IncompleteRead", ErrorKind.TRANSPORT),
    ("builtins.ConnectionError", ErrorKind.TRANSPORT),
    ("builtins.TimeoutError", ErrorKind.TRANSPORT),
)

#: Locations older runtimes exported some of the types above from
LEGACY_MAPPINGS: tuple[tuple[str, ErrorKind], ...] = (
    ("breezy.errors.NoCompatibleInter", ErrorKind.FORMAT_INCOMPATIBLE),
    ("breezy.errors.NoSuchFile", ErrorKind.NOT_FOUND),
    ("breezy.errors.FileExists", ErrorKind.ALREADY_EXISTS),
)

#: Class-name prefixes consulted when no registered type matches
FALLBACK_PREFIXES: tuple[tuple[str, ErrorKind], ...] = (
    ("NotBranch", ErrorKind.NOT_FOUND),
    ("NoSuch", ErrorKind.NOT_FOUND),
    ("Permission", ErrorKind.PERMISSION_DENIED),
    ("Already", ErrorKind.ALREADY_EXISTS),
    ("FileExists", ErrorKind.ALREADY_EXISTS),
    ("Incompatible", ErrorKind.FORMAT_INCOMPATIBLE),
    ("UnknownFormat", ErrorKind.FORMAT_INCOMPATIBLE),
    ("UnsupportedFormat", ErrorKind.FORMAT_INCOMPATIBLE),
    ("Diverged", ErrorKind.CONFLICT),
    ("Conflict", ErrorKind.CONFLICT),
)

#: Depth limit for nested ``__cause__`` translation
_MAX_CAUSE_DEPTH = 8


def _type_name(exc_type: type) -> str:
    return f"{exc_type.__module__}.{exc_type.__qualname__}"


def _describe(exc: BaseException) -> str:
    """Return the exception's own text, falling back to its type name."""
    try:
        text = str(exc)
    except Exception:
        # A broken __str__ must not stop the translation.
        text = ""
    return text or type(exc).__name__


class ExceptionTranslator:
    """Registry-backed translation of runtime exceptions.

    Args:
        mappings: ``(dotted_name, kind)`` pairs bound lazily on first use.
        prefixes: ``(class_name_prefix, kind)`` fallback table.

    Example:
        ```python
        translator = ExceptionTranslator()
        translator.register(MyRemoteError, ErrorKind.TRANSPORT)
        error = translator.translate(exc)
        ```
    """

    def __init__(
        self,
        mappings: Iterable[tuple[str, ErrorKind]] = (
            DEFAULT_MAPPINGS + LEGACY_MAPPINGS
        ),
        prefixes: Iterable[tuple[str, ErrorKind]] = FALLBACK_PREFIXES,
    ) -> None:
        self._pending: list[tuple[str, ErrorKind]] = list(mappings)
        self._prefixes = tuple(prefixes)
        self._registry: dict[type, ErrorKind] = {}
        self._unavailable: list[str] = []
        self._bound = False
        self._bind_lock = threading.Lock()

    def register(self, exc_type: type[BaseException] | str, kind: ErrorKind) -> None:
        """Map a runtime exception type to *kind*.

        Args:
            exc_type: The type itself, or its dotted name for lazy binding.
            kind: Kind produced for instances of the type and its subclasses.
        """
        with self._bind_lock:
            if isinstance(exc_type, str):
                if self._bound:
                    self._bind_one(exc_type, kind)
                else:
                    self._pending.append((exc_type, kind))
            else:
                self._registry[exc_type] = kind

    def kind_for(self, exc: BaseException) -> ErrorKind:
        """Classify *exc* without building an error."""
        self._ensure_bound()
        mro = type(exc).__mro__

        kind = self._registry.get(mro[0])
        if kind is not None:
            return kind

        for base in mro[1:]:
            kind = self._registry.get(base)
            if kind is not None:
                return kind

        name = mro[0].__name__
        for prefix, kind in self._prefixes:
            if name.startswith(prefix):
                return kind

        return ErrorKind.GENERIC

    def record_for(self, exc: BaseException, _depth: int = 0) -> ErrorRecord:
        """Build the :class:`ErrorRecord` describing *exc*."""
        if isinstance(exc, BridgeError):
            return exc.record

        cause: ErrorRecord | None = None
        if exc.__cause__ is not None and _depth < _MAX_CAUSE_DEPTH:
            cause = self.record_for(exc.__cause__, _depth + 1)

        return ErrorRecord(
            kind=self.kind_for(exc),
            message=_describe(exc),
            foreign_type_name=_type_name(type(exc)),
            cause=cause,
        )

    def translate(self, exc: BaseException) -> BridgeError:
        """Translate *exc* into a bridge error. Never raises.

        Bridge errors are returned unchanged so that nothing is wrapped twice.
        """
        if isinstance(exc, BridgeError):
            return exc
        return error_for_record(self.record_for(exc))

    def unavailable(self) -> list[str]:
        """Dotted names that did not resolve to a type in this runtime.

        Binds the registry first if that has not happened yet. A name listed
        here is never matched by identity; its instances fall through to
        the prefix table.
        """
        self._ensure_bound()
        with self._bind_lock:
            return list(self._unavailable)

    # =====================================================================
    # Lazy binding
    # =====================================================================

    def _ensure_bound(self) -> None:
        if self._bound:
            return
        with self._bind_lock:
            if self._bound:
                return
            for dotted_name, kind in self._pending:
                self._bind_one(dotted_name, kind)
            self._pending.clear()
            self._bound = True
            logger.debug(
                "exception_registry_bound",
                types=len(self._registry),
                unavailable=len(self._unavailable),
            )

    def _bind_one(self, dotted_name: str, kind: ErrorKind) -> None:
        module_name, _, attr = dotted_name.rpartition(".")
        try:
            exc_type = getattr(importlib.import_module(module_name), attr)
        except Exception as e:
            # Optional plugins and older runtimes lack some of these types.
            self._unavailable.append(dotted_name)
            logger.debug(
                "exception_type_unavailable",
                name=dotted_name,
                reason=_describe(e),
            )
            return
        # The first registration of an aliased type wins.
        self._registry.setdefault(exc_type, kind)


_translator: ExceptionTranslator | None = None
_translator_guard = threading.Lock()


def get_translator() -> ExceptionTranslator:
    """Return the process-wide translator, creating it on first use."""
    global _translator
    translator = _translator
    if translator is None:
        with _translator_guard:
            if _translator is None:
                _translator = ExceptionTranslator()
            translator = _translator
    return translator


def translate(exc: BaseException) -> BridgeError:
    """Translate *exc* with the process-wide translator."""
    return get_translator().translate(exc)
