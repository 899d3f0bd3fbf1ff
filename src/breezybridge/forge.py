"""Finding forges and merge proposals.

Which forges are available depends on the extensions enabled in
:class:`~breezybridge.config.BridgeSettings`; ``github``, ``gitlab`` and
``launchpad`` each register one forge type.
"""

from __future__ import annotations

from breezybridge.capabilities import protocol
from breezybridge.capabilities.generic import GenericForge, MergeProposal
from breezybridge.runtime import import_core

__all__ = [
    "determine_title",
    "get_forge",
    "get_forge_by_hostname",
    "get_proposal_by_url",
    "iter_forge_instances",
]


def get_forge(branch: protocol.Branch) -> GenericForge:
    """Return the forge hosting *branch*.

    Raises:
        FormatIncompatibleError: If no enabled forge supports the branch.
    """
    return GenericForge(import_core("forge").call("get_forge", (branch,)))


def get_forge_by_hostname(hostname: str) -> GenericForge:
    return GenericForge(import_core("forge").call("get_forge_by_hostname", (hostname,)))


def get_proposal_by_url(url: str) -> MergeProposal:
    """Look up a merge proposal on whichever forge hosts *url*."""
    return MergeProposal(import_core("forge").call("get_proposal_by_url", (url,)))


def determine_title(description: str) -> str:
    """Derive a merge proposal title from its description.

    Raises:
        GenericError: If the description yields no usable title.
    """
    return import_core("forge").call("determine_title", (description,), extract=str)


def iter_forge_instances() -> list[GenericForge]:
    """Every forge instance known from configuration and enabled extensions."""
    instances = import_core("forge").call("iter_forge_instances")
    with instances:
        return [GenericForge(item) for item in instances.iter_handles()]
