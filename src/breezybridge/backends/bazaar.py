"""Bazaar backend wrappers."""

from __future__ import annotations

from pathlib import Path

from breezybridge.capabilities.generic import (
    ControlDirFormat,
    GenericBranch,
    GenericControlDir,
)
from breezybridge.exceptions import GenericError
from breezybridge.logging import get_logger
from breezybridge.models import VcsType
from breezybridge.runtime import import_core

logger = get_logger(__name__)

__all__ = [
    "BAZAAR_FORMAT",
    "BazaarBranch",
    "init_repository",
]

#: Format registry name of the default Bazaar format
BAZAAR_FORMAT = "2a"


def _ignore(value: object) -> None:
    return None


class BazaarBranch(GenericBranch):
    """A native Bazaar branch.

    Adds the Bazaar-only settings: nickname, stacking and
    append-revisions-only.
    """

    def vcs_type(self) -> VcsType:
        return VcsType.BAZAAR

    @property
    def nick(self) -> str:
        return self._handle.get_attr("nick", extract=str)

    @nick.setter
    def nick(self, value: str) -> None:
        self._handle.set_attr("nick", value)

    def get_stacked_on_url(self) -> str | None:
        """URL this branch is stacked on, or None if it is not stacked."""
        try:
            return self._handle.call("get_stacked_on_url", extract=str)
        except GenericError as e:
            if (e.foreign_type_name or "").endswith(".NotStacked"):
                return None
            raise

    def set_stacked_on_url(self, url: str | None) -> None:
        self._handle.call("set_stacked_on_url", (url,), extract=_ignore)

    def get_append_revisions_only(self) -> bool:
        return self._handle.call("get_append_revisions_only", extract=bool)

    def set_append_revisions_only(self, enabled: bool) -> None:
        self._handle.call("set_append_revisions_only", (enabled,), extract=_ignore)


def init_repository(
    location: str | Path, *, shared: bool = False, with_tree: bool = True
) -> GenericControlDir:
    """Create a Bazaar repository at *location*.

    A standalone repository also gets a branch and, when *with_tree* is
    set, a working tree. A shared repository gets neither.

    Returns:
        The new control directory.
    """
    registry = import_core("controldir").get_attr("format_registry")
    fmt = ControlDirFormat(registry.call("make_controldir", (BAZAAR_FORMAT,)))
    controldir = fmt.initialize(str(location))
    controldir.create_repository(shared=shared)
    if not shared:
        controldir.create_branch()
        if with_tree:
            controldir.create_workingtree()
    logger.debug(
        "bazaar_repository_created", location=str(location), shared=shared
    )
    return controldir
