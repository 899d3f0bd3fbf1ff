"""Git backend wrappers.

Git repositories in the runtime identify revisions with ``git-v1:<sha>``
ids. :class:`GitRepository` converts between those ids and raw SHAs;
:class:`GitBranch` hands out :class:`GitRepository` instances and exposes
the ref it tracks.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from breezybridge.capabilities.generic import (
    ControlDirFormat,
    GenericBranch,
    GenericControlDir,
    GenericRepository,
)
from breezybridge.constants import NULL_REVISION, ZERO_SHA
from breezybridge.logging import get_logger
from breezybridge.models import RevisionId, VcsType
from breezybridge.runtime import import_core

logger = get_logger(__name__)

__all__ = [
    "GIT_BARE_FORMAT",
    "GIT_FORMAT",
    "GitBranch",
    "GitRepository",
    "init_repository",
]

#: Format registry names for git control directories
GIT_FORMAT = "git"
GIT_BARE_FORMAT = "git-bare"

_SHA_PATTERN = re.compile(rb"^[0-9a-f]{40}$")


def _normalize_sha(sha: bytes | str) -> bytes:
    if isinstance(sha, str):
        sha = sha.encode("ascii")
    sha = sha.lower()
    if not _SHA_PATTERN.match(sha):
        raise ValueError(f"Not a hex git SHA-1: {sha!r}")
    return sha


def _committer_from_config(repository: Any) -> str | None:
    config = repository._git.get_config_stack()
    try:
        name = config.get((b"user",), b"name")
        email = config.get((b"user",), b"email")
    except KeyError:
        return None
    return f"{name.decode()} <{email.decode()}>"


class GitRepository(GenericRepository):
    """A repository backed by a git object store."""

    def vcs_type(self) -> VcsType:
        return VcsType.GIT

    def lookup_foreign_revision_id(self, sha: bytes | str) -> RevisionId:
        """Map a git commit SHA to the runtime's revision id.

        Raises:
            ValueError: If *sha* is not a 40-character hex SHA-1.
        """
        return self._handle.call(
            "lookup_foreign_revision_id", (_normalize_sha(sha),), extract=bytes
        )

    def lookup_bzr_revision_id(self, revision_id: RevisionId) -> bytes:
        """Map a revision id to the git commit SHA it names."""
        if revision_id == NULL_REVISION:
            return ZERO_SHA
        return self._handle.call(
            "lookup_bzr_revision_id",
            (revision_id,),
            extract=lambda value: bytes(value[0]),
        )

    def get_committer(self) -> str | None:
        """``user.name <user.email>`` from the git configuration, if both are set."""
        return self._handle.extract(_committer_from_config)


class GitBranch(GenericBranch):
    """A branch stored as a git ref."""

    def vcs_type(self) -> VcsType:
        return VcsType.GIT

    def repository(self) -> GitRepository:
        return GitRepository(self._handle.get_attr("repository"))

    @property
    def ref(self) -> bytes | None:
        """Full ref name, e.g. ``refs/heads/main``."""
        return self._handle.get_attr(
            "ref", extract=lambda value: None if value is None else bytes(value)
        )

    def head_sha(self) -> bytes:
        """SHA of the tip commit; the zero SHA for an empty branch."""
        return self.repository().lookup_bzr_revision_id(self.last_revision())


def init_repository(location: str | Path, *, bare: bool = False) -> GenericControlDir:
    """Create a git repository at *location*.

    Returns:
        The new control directory.
    """
    name = GIT_BARE_FORMAT if bare else GIT_FORMAT
    registry = import_core("controldir").get_attr("format_registry")
    fmt = ControlDirFormat(registry.call("make_controldir", (name,)))
    controldir = fmt.initialize(str(location))
    logger.debug("git_repository_created", location=str(location), bare=bare)
    return controldir
