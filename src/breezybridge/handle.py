"""Shared-ownership handles to objects living inside the runtime.

An :class:`ObjectHandle` holds one reference to one runtime object. Handles
are cheap to clone; every clone adds a reference to the same object, and
the object lives as long as the longest-lived handle. Equality is identity
of the underlying object, never structural.

All access goes through :data:`~breezybridge.runtime.INTERPRETER_LOCK`:
construction, cloning, method calls, attribute access and release each run
as one acquire -> act -> release phase.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any, TypeVar

from breezybridge.exceptions import BridgeError, InitializationError
from breezybridge.runtime import INTERPRETER_LOCK, InitializationState, get_runtime
from breezybridge.translate import translate

__all__ = [
    "ObjectHandle",
    "unwrap",
]

T = TypeVar("T")


class _Released:
    def __repr__(self) -> str:
        return "<released>"


_RELEASED: Any = _Released()


def unwrap(value: Any) -> Any:
    """Return the runtime object behind a handle or handle-backed wrapper.

    Plain values, and lists/tuples/dicts of them, pass through with any
    nested handles unwrapped.
    """
    if isinstance(value, ObjectHandle):
        return value._live()
    hook = getattr(type(value), "__bridge_handle__", None)
    if hook is not None:
        return hook(value)._live()
    if isinstance(value, list):
        return [unwrap(item) for item in value]
    if isinstance(value, tuple):
        return tuple(unwrap(item) for item in value)
    if isinstance(value, dict):
        return {key: unwrap(item) for key, item in value.items()}
    return value


class ObjectHandle:
    """A reference-counted handle to one runtime object.

    Args:
        obj: The runtime object to hold.

    Raises:
        InitializationError: If the runtime is not READY.

    Example:
        ```python
        module = get_runtime().import_module("breezy.controldir")
        cd = module.get_attr("ControlDir").call("open", (path,))
        fmt = cd.get_attr("_format")
        name = fmt.call("network_name", extract=bytes)
        ```
    """

    __slots__ = ("_obj", "_key", "_lock", "__weakref__")

    def __init__(self, obj: Any) -> None:
        if get_runtime().state is not InitializationState.READY:
            raise InitializationError(
                "Cannot create an object handle before the runtime is ready"
            )
        self._lock = INTERPRETER_LOCK
        with self._lock:
            self._obj = obj
            self._key = id(obj)

    # =====================================================================
    # Ownership
    # =====================================================================

    def clone_ref(self) -> ObjectHandle:
        """Return a new handle sharing ownership of the same object."""
        with self._lock:
            return ObjectHandle(self._live())

    def release(self) -> None:
        """Drop this handle's reference. Idempotent."""
        with self._lock:
            self._obj = _RELEASED

    @property
    def released(self) -> bool:
        return self._obj is _RELEASED

    def __enter__(self) -> ObjectHandle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __del__(self) -> None:
        # Objects that never finished __init__ have no slots set.
        if getattr(self, "_obj", _RELEASED) is not _RELEASED:
            self.release()

    # =====================================================================
    # Access
    # =====================================================================

    def call(
        self,
        method_name: str,
        args: tuple[Any, ...] = (),
        kwargs: Mapping[str, Any] | None = None,
        *,
        extract: Callable[[Any], T] | None = None,
    ) -> Any:
        """Invoke a method on the runtime object.

        Args:
            method_name: Name of the method to call.
            args: Positional arguments. Handles are unwrapped.
            kwargs: Keyword arguments. Handles are unwrapped.
            extract: Converter applied to the return value. When given, the
                native value it produces is returned instead of a handle.

        Returns:
            A new :class:`ObjectHandle` for the result, or the extracted
            native value.

        Raises:
            BridgeError: If the runtime raises; translated exactly once.
        """
        with self._lock:
            target = self._live()
            call_args = unwrap(args)
            call_kwargs = unwrap(dict(kwargs)) if kwargs else {}
            try:
                result = getattr(target, method_name)(*call_args, **call_kwargs)
                if extract is not None:
                    return extract(result)
            except BridgeError:
                raise
            except Exception as e:
                raise translate(e) from e
            return ObjectHandle(result)

    def get_attr(
        self,
        name: str,
        *,
        extract: Callable[[Any], T] | None = None,
    ) -> Any:
        """Read an attribute of the runtime object.

        Returns:
            A new handle for the value, or ``extract(value)`` when given.
        """
        with self._lock:
            target = self._live()
            try:
                value = getattr(target, name)
                if extract is not None:
                    return extract(value)
            except BridgeError:
                raise
            except Exception as e:
                raise translate(e) from e
            return ObjectHandle(value)

    def set_attr(self, name: str, value: Any) -> None:
        """Assign an attribute on the runtime object."""
        with self._lock:
            target = self._live()
            try:
                setattr(target, name, unwrap(value))
            except Exception as e:
                raise translate(e) from e

    def has_attr(self, name: str) -> bool:
        """Return True if the runtime object exposes *name*."""
        with self._lock:
            return hasattr(self._live(), name)

    def extract(self, converter: Callable[[Any], T]) -> T:
        """Convert the runtime object itself into a native value."""
        with self._lock:
            target = self._live()
            try:
                return converter(target)
            except BridgeError:
                raise
            except Exception as e:
                raise translate(e) from e

    def iter_handles(self) -> list[ObjectHandle]:
        """Materialize an iterable runtime object as a list of handles."""
        with self._lock:
            target = self._live()
            try:
                items = list(target)
            except Exception as e:
                raise translate(e) from e
            return [ObjectHandle(item) for item in items]

    def __iter__(self) -> Iterator[ObjectHandle]:
        return iter(self.iter_handles())

    def is_none(self) -> bool:
        with self._lock:
            return self._live() is None

    @property
    def type_name(self) -> str:
        """Fully qualified type name of the runtime object."""
        with self._lock:
            cls = type(self._live())
            return f"{cls.__module__}.{cls.__qualname__}"

    # =====================================================================
    # Identity
    # =====================================================================

    def same_object(self, other: ObjectHandle) -> bool:
        with self._lock:
            return self._live() is other._live()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObjectHandle):
            return NotImplemented
        with self._lock:
            return self._obj is other._obj and self._obj is not _RELEASED

    def __hash__(self) -> int:
        return self._key

    def __repr__(self) -> str:
        obj = self._obj
        if obj is _RELEASED:
            return "ObjectHandle(<released>)"
        return f"ObjectHandle({type(obj).__qualname__} at {id(obj):#x})"

    def _live(self) -> Any:
        obj = self._obj
        if obj is _RELEASED:
            raise ValueError("Operation on a released object handle")
        return obj
