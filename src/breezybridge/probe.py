"""Determine which VCS governs a location.

Probing opens the control directory at a location and classifies its
format. Formats the loaded backends cannot open (Mercurial, Subversion)
are recognized by their ``UnsupportedVcs`` error or, when the runtime has
not registered them, by the detection-only probers listed in
:data:`~breezybridge.constants.FOREIGN_PROBERS`. A location none of them
recognize is :attr:`VcsType.UNKNOWN`; every other failure propagates.

Example:
    ```python
    from breezybridge.probe import VcsType, probe

    if probe("/srv/checkout") is VcsType.GIT:
        ...
    ```
"""

from __future__ import annotations

import os
import threading
from pathlib import Path

from breezybridge import controldir
from breezybridge.backends import branch_class_for
from breezybridge.capabilities import protocol
from breezybridge.capabilities.generic import GenericBranch
from breezybridge.constants import FOREIGN_PROBERS
from breezybridge.exceptions import FormatIncompatibleError, NotFoundError
from breezybridge.handle import ObjectHandle
from breezybridge.logging import get_logger, log_context
from breezybridge.models import VcsType
from breezybridge.runtime import INTERPRETER_LOCK, import_core_optional

logger = get_logger(__name__)

__all__ = [
    "ProbeCache",
    "VcsType",
    "open_branch",
    "probe",
    "probe_controldir",
    "unsupported_vcs",
]

_UNSUPPORTED_VCS = "UnsupportedVcs"


def probe_controldir(cd: protocol.ControlDir) -> VcsType:
    """Classify an already opened control directory by its format."""
    with cd.get_format() as fmt:
        format_id = fmt.format_id()
    vcs = VcsType.from_format_id(format_id)
    logger.debug("probe_classified", format_id=format_id, vcs=vcs.value)
    return vcs


def unsupported_vcs(error: FormatIncompatibleError) -> VcsType | None:
    """Return the VCS named by an ``UnsupportedVcs`` error.

    Returns None for any other format error. A named system the bridge has
    no member for is :attr:`VcsType.UNKNOWN`.
    """
    cause = error.__cause__
    with INTERPRETER_LOCK:
        # Plugins raise their own subclasses, e.g. MercurialUnsupportedError.
        lineage = {cls.__name__ for cls in type(cause).__mro__}
        name = getattr(cause, "vcs", None)
    named = (error.foreign_type_name or "").endswith(f".{_UNSUPPORTED_VCS}")
    if _UNSUPPORTED_VCS not in lineage and not named:
        return None
    if not isinstance(name, str):
        # "Unsupported version control system: hg"
        name = error.message.rpartition(":")[2]
    return VcsType.from_format_id(name)


def _foreign_probers(submodule: str, names: tuple[str, ...]) -> list[ObjectHandle]:
    module = import_core_optional(submodule)
    if module is None:
        return []
    with module:
        return [module.get_attr(name) for name in names if module.has_attr(name)]


def _probe_foreign(location: str | Path) -> VcsType:
    for submodule, names, value in FOREIGN_PROBERS:
        probers = _foreign_probers(submodule, names)
        if not probers:
            continue
        try:
            cd = controldir.open(location, probers=probers)
        except NotFoundError:
            continue
        except FormatIncompatibleError as e:
            vcs = unsupported_vcs(e)
            if vcs is None:
                raise
            return vcs if vcs is not VcsType.UNKNOWN else VcsType(value)
        finally:
            for prober in probers:
                prober.release()
        cd.release()
        return VcsType(value)
    return VcsType.UNKNOWN


def probe(location: str | Path) -> VcsType:
    """Return the VCS governing *location*.

    Raises:
        InitializationError: If the runtime is not ready.
        BridgeError: For any failure other than a missing control directory.
    """
    with log_context(location=str(location)):
        try:
            cd = controldir.open(location)
        except NotFoundError as e:
            logger.debug("probe_no_controldir", reason=e.message)
            vcs = _probe_foreign(location)
        except FormatIncompatibleError as e:
            found = unsupported_vcs(e)
            if found is None:
                raise
            vcs = found
        else:
            with cd:
                return probe_controldir(cd)
        logger.debug("probe_foreign", vcs=vcs.value)
        return vcs


def open_branch(location: str | Path, name: str | None = None) -> GenericBranch:
    """Open the branch at *location* in the wrapper matching its VCS.

    Raises:
        NotFoundError: If there is no control directory or no such branch.
    """
    with controldir.open(location) as cd:
        vcs = probe_controldir(cd)
        handle = cd.handle.call("open_branch", kwargs={"name": name})
    return branch_class_for(vcs)(handle)


def _cache_key(location: str | Path) -> str:
    text = str(location)
    if "://" in text:
        return text.rstrip("/")
    return os.path.abspath(text)


class ProbeCache:
    """Memoize :func:`probe` results per location.

    Only successful probes are cached; failures propagate and are retried
    on the next call. Call :meth:`invalidate` after creating or deleting a
    repository at a cached location.
    """

    def __init__(self) -> None:
        self._results: dict[str, VcsType] = {}
        self._lock = threading.Lock()

    def probe(self, location: str | Path) -> VcsType:
        key = _cache_key(location)
        with self._lock:
            cached = self._results.get(key)
        if cached is not None:
            return cached
        vcs = probe(location)
        with self._lock:
            self._results.setdefault(key, vcs)
        return vcs

    def invalidate(self, location: str | Path | None = None) -> None:
        """Forget one location, or everything when *location* is None."""
        with self._lock:
            if location is None:
                self._results.clear()
            else:
                self._results.pop(_cache_key(location), None)

    def __contains__(self, location: object) -> bool:
        if not isinstance(location, (str, Path)):
            return False
        with self._lock:
            return _cache_key(location) in self._results

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)
