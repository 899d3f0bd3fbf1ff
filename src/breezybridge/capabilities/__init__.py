"""Capability layer: narrow protocols, composite mixins and generic wrappers.

Protocols live in :mod:`breezybridge.capabilities.protocol` and are
imported under that module name to keep them apart from the concrete
wrappers of the same concept (``protocol.Transport`` versus
:class:`Transport`).
"""

from __future__ import annotations

from breezybridge.capabilities import protocol
from breezybridge.capabilities.composite import (
    BranchOps,
    ControlDirOps,
    ForgeOps,
    RepositoryOps,
    TransportOps,
    TreeOps,
    WorkingTreeOps,
)
from breezybridge.capabilities.generic import (
    ControlDirFormat,
    ForeignObject,
    GenericBranch,
    GenericControlDir,
    GenericForge,
    GenericRepository,
    GenericTree,
    GenericWorkingTree,
    Lock,
    MergeProposal,
    Tags,
    Transport,
)

__all__ = [
    "protocol",
    # Mixins
    "BranchOps",
    "ControlDirOps",
    "ForgeOps",
    "RepositoryOps",
    "TransportOps",
    "TreeOps",
    "WorkingTreeOps",
    # Wrappers
    "ControlDirFormat",
    "ForeignObject",
    "GenericBranch",
    "GenericControlDir",
    "GenericForge",
    "GenericRepository",
    "GenericTree",
    "GenericWorkingTree",
    "Lock",
    "MergeProposal",
    "Tags",
    "Transport",
]
