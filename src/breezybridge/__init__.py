"""breezybridge: typed, thread-safe access to the Breezy VCS runtime.

Call :func:`init` once (from any thread, as often as you like), then work
through the factories and wrappers:

    ```python
    import breezybridge
    from breezybridge import VcsType, probe

    breezybridge.init()
    if probe("/srv/checkout") is VcsType.GIT:
        branch = breezybridge.branch.open("/srv/checkout")
        print(branch.revno(), branch.tag_names())
    ```

Failures surface as :class:`BridgeError` subclasses carrying an
:class:`ErrorRecord`; match on the class or on ``error.kind``.
"""

from __future__ import annotations

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
)
from breezybridge.config import BridgeSettings, load_config
from breezybridge.runtime import InitializationState, get_runtime, init, state
from breezybridge.translate import translate as translate_exception
from breezybridge.handle import ObjectHandle
from breezybridge.models import MergeProposalStatus, RevisionId, RevisionInfo, VcsType
from breezybridge.probe import ProbeCache, open_branch, probe, probe_controldir
from breezybridge import branch, controldir, forge, repository, transport, tree

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Lifecycle
    "BridgeSettings",
    "InitializationState",
    "get_runtime",
    "init",
    "load_config",
    "state",
    # Handles
    "ObjectHandle",
    "translate_exception",
    # Errors
    "AlreadyExistsError",
    "BridgeError",
    "ConfigError",
    "ConflictError",
    "ErrorKind",
    "ErrorRecord",
    "FormatIncompatibleError",
    "GenericError",
    "InitializationError",
    "NotFoundError",
    "PermissionDeniedError",
    "TransportError",
    # Values
    "MergeProposalStatus",
    "RevisionId",
    "RevisionInfo",
    "VcsType",
    # Probe
    "ProbeCache",
    "open_branch",
    "probe",
    "probe_controldir",
    # Factory modules
    "branch",
    "controldir",
    "forge",
    "repository",
    "transport",
    "tree",
]
