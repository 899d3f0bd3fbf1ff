"""Runtime initializer for the embedded VCS runtime.

The bridge talks to Breezy in-process. Before any object handle can be
created the runtime has to be started exactly once per process: the core
module is imported, its version checked, the backend modules and enabled
extensions imported, and a few lazily built caches primed.

All of that happens behind :func:`init`, which is idempotent and safe to
call from many threads at once. The first caller performs the work; every
other caller blocks until it finishes and then observes the same outcome.
A failed start is cached for the rest of the process and never retried.

Example:
    ```python
    import breezybridge

    breezybridge.init()
    assert breezybridge.state() is InitializationState.READY
    ```
"""

from __future__ import annotations

import importlib
import threading
from enum import Enum
from types import ModuleType
from typing import TYPE_CHECKING

from breezybridge.config import BridgeSettings, load_config
from breezybridge.exceptions import InitializationError
from breezybridge.logging import get_logger, log_context
from breezybridge.translate import translate

if TYPE_CHECKING:
    from breezybridge.handle import ObjectHandle

logger = get_logger(__name__)

__all__ = [
    "INTERPRETER_LOCK",
    "InitializationState",
    "Runtime",
    "get_runtime",
    "import_core",
    "import_core_optional",
    "init",
    "state",
]

#: Process-wide lock serializing every access to the embedded runtime.
#: Re-entrant so that runtime callbacks (tag selectors, hooks) may call back
#: into the bridge on the thread that already holds it.
INTERPRETER_LOCK = threading.RLock()


class InitializationState(str, Enum):
    """Lifecycle of the process-wide runtime."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class Runtime:
    """One embedded runtime and its initialization state machine.

    Transitions are UNINITIALIZED -> INITIALIZING -> READY | FAILED. No
    transition leaves READY or FAILED.

    Args:
        settings: Settings to start with. Loaded from the environment and
            YAML files on first :meth:`init` when omitted.
    """

    def __init__(self, settings: BridgeSettings | None = None) -> None:
        self._settings = settings
        self._state = InitializationState.UNINITIALIZED
        self._error: InitializationError | None = None
        self._version: tuple[int, ...] | None = None
        self._once = threading.Lock()

    @property
    def state(self) -> InitializationState:
        return self._state

    @property
    def error(self) -> InitializationError | None:
        """The cached failure, if initialization failed."""
        return self._error

    @property
    def settings(self) -> BridgeSettings | None:
        return self._settings

    @property
    def version(self) -> tuple[int, ...] | None:
        """``version_info`` of the runtime once it is ready."""
        return self._version

    def init(self, settings: BridgeSettings | None = None) -> None:
        """Start the runtime if that has not happened yet.

        Args:
            settings: Settings to use if this call performs the startup.
                Ignored when the runtime has already been started.

        Raises:
            InitializationError: If startup fails now or failed earlier.
        """
        if self._state is InitializationState.READY:
            return
        if self._state is InitializationState.FAILED:
            self._raise_cached()

        with self._once:
            if self._state is InitializationState.READY:
                return
            if self._state is InitializationState.FAILED:
                self._raise_cached()

            if settings is not None:
                self._settings = settings
            self._state = InitializationState.INITIALIZING
            try:
                self._start()
            except InitializationError as e:
                self._fail(e)
                raise
            except Exception as e:
                cause = translate(e)
                error = InitializationError(
                    f"Runtime initialization failed: {cause.message}",
                    foreign_type_name=cause.foreign_type_name,
                    cause=cause.record,
                )
                self._fail(error)
                raise error from e
            self._state = InitializationState.READY

    def require_ready(self) -> None:
        """Fail fast unless the runtime is READY.

        Starts the runtime first when ``auto_initialize`` is enabled and no
        attempt has been made yet. Never touches the runtime otherwise.

        Raises:
            InitializationError: If the runtime is not ready.
        """
        if self._state is InitializationState.READY:
            return
        if self._state is InitializationState.FAILED:
            self._raise_cached()
        settings = self._settings
        if settings is None:
            settings = load_config()
        if settings.auto_initialize:
            self.init(settings)
            return
        raise InitializationError(
            "Runtime is not initialized; call breezybridge.init() first"
        )

    def import_module(self, name: str) -> ObjectHandle:
        """Import a runtime module and return a handle to it.

        Raises:
            InitializationError: If the runtime is not ready.
            BridgeError: If the import fails.
        """
        from breezybridge.handle import ObjectHandle

        self.require_ready()
        with INTERPRETER_LOCK:
            try:
                module = importlib.import_module(name)
            except Exception as e:
                raise translate(e) from e
            return ObjectHandle(module)

    def import_core(self, submodule: str | None = None) -> ObjectHandle:
        """Import the core module, or one of its submodules, as a handle.

        Example:
            ```python
            controldir = get_runtime().import_core("controldir")
            ```
        """
        return self.import_module(self._core_name(submodule))

    def import_optional(self, name: str) -> ObjectHandle | None:
        """Import a runtime module that may legitimately be absent.

        Returns None when *name* itself (or a package above it) is not
        installed. Failures raised while importing a module that does exist
        are translated as usual.

        Raises:
            InitializationError: If the runtime is not ready.
            BridgeError: If the module exists but fails to import.
        """
        from breezybridge.handle import ObjectHandle

        self.require_ready()
        with INTERPRETER_LOCK:
            try:
                module = importlib.import_module(name)
            except ModuleNotFoundError as e:
                if e.name and (name == e.name or name.startswith(f"{e.name}.")):
                    logger.debug("optional_module_missing", module=name)
                    return None
                raise translate(e) from e
            except Exception as e:
                raise translate(e) from e
            return ObjectHandle(module)

    def import_core_optional(self, submodule: str) -> ObjectHandle | None:
        """Like :meth:`import_optional`, relative to the core module."""
        return self.import_optional(self._core_name(submodule))

    def _core_name(self, submodule: str | None) -> str:
        self.require_ready()
        if self._settings is None:
            raise InitializationError(
                "Runtime is marked ready but has no settings"
            )
        name = self._settings.core_module
        if submodule:
            name = f"{name}.{submodule}"
        return name

    # =====================================================================
    # Startup steps
    # =====================================================================

    def _start(self) -> None:
        settings = self._settings
        if settings is None:
            settings = load_config()
            self._settings = settings

        with log_context(core_module=settings.core_module):
            self._start_core(settings)

    def _start_core(self, settings: BridgeSettings) -> None:
        logger.debug("runtime_initializing")

        with INTERPRETER_LOCK:
            core = self._import(
                settings.core_module,
                missing=f"{settings.core_module} is not installed",
            )
            version = self._check_version(core, settings)
            self._version = version

            for name in settings.backends:
                self._import(name, missing=f"Backend module {name} is unavailable")

            if settings.load_plugins:
                self._load_plugins(settings.core_module)

            for extension, name in zip(
                settings.extensions, settings.extension_modules, strict=True
            ):
                self._import(
                    name,
                    missing=(
                        f"Extension {extension!r} is enabled but {name} is unavailable"
                    ),
                )

            if settings.warm_caches:
                self._warm_caches(settings.core_module)

        logger.info(
            "runtime_ready",
            version=".".join(str(part) for part in version),
            backends=settings.backends,
            extensions=settings.extensions,
        )

    @staticmethod
    def _import(name: str, *, missing: str) -> ModuleType:
        try:
            return importlib.import_module(name)
        except ImportError as e:
            raise InitializationError(
                f"{missing}: {e}",
                foreign_type_name=f"{type(e).__module__}.{type(e).__qualname__}",
            ) from e

    @staticmethod
    def _check_version(
        core: ModuleType, settings: BridgeSettings
    ) -> tuple[int, ...]:
        version_info = getattr(core, "version_info", None)
        if version_info is None:
            raise InitializationError(
                f"Cannot determine the version of {settings.core_module}"
            )
        version = tuple(int(part) for part in version_info[:3])
        if version < settings.minimum_version:
            found = ".".join(str(part) for part in version)
            required = ".".join(str(part) for part in settings.minimum_version)
            raise InitializationError(
                f"{settings.core_module} {found} is too old; "
                f"at least {required} is required"
            )
        return version

    @staticmethod
    def _load_plugins(core_module: str) -> None:
        plugin = importlib.import_module(f"{core_module}.plugin")
        try:
            plugin.load_plugins()
        except RuntimeError as e:
            if "already initialized" not in str(e):
                raise
            logger.debug("plugins_already_loaded")

    @staticmethod
    def _warm_caches(core_module: str) -> None:
        # Building these lazily from several threads races inside the runtime.
        controldir = importlib.import_module(f"{core_module}.controldir")
        controldir.ControlDirFormat.known_formats()
        config = importlib.import_module(f"{core_module}.config")
        config.GlobalStack()
        config.LocationStack("file:///")

    def _fail(self, error: InitializationError) -> None:
        self._error = error
        self._state = InitializationState.FAILED
        logger.error("runtime_failed", error=error.message)

    def _raise_cached(self) -> None:
        if self._error is None:
            raise InitializationError(
                "Runtime initialization failed earlier; the error was not kept"
            )
        raise self._error.with_traceback(None)


_runtime: Runtime | None = None
_runtime_guard = threading.Lock()


def get_runtime() -> Runtime:
    """Return the process-wide runtime, creating it on first use."""
    global _runtime
    runtime = _runtime
    if runtime is None:
        with _runtime_guard:
            if _runtime is None:
                _runtime = Runtime()
            runtime = _runtime
    return runtime


def init(settings: BridgeSettings | None = None) -> None:
    """Initialize the process-wide runtime.

    Safe to call repeatedly and from several threads; all callers see the
    same outcome.

    Raises:
        InitializationError: If startup fails now or failed earlier.
    """
    get_runtime().init(settings)


def state() -> InitializationState:
    """Return the state of the process-wide runtime."""
    return get_runtime().state


def import_core(submodule: str | None = None) -> ObjectHandle:
    """Import a submodule of the core runtime module on the process runtime."""
    return get_runtime().import_core(submodule)


def import_core_optional(submodule: str) -> ObjectHandle | None:
    """Import a core submodule that may be absent, on the process runtime."""
    return get_runtime().import_core_optional(submodule)
