"""Backend-specific wrappers.

Generic wrappers work for every VCS the runtime supports. The classes here
add what only one backend offers and reshape calls where its API differs.
:func:`wrap_branch` picks the right branch class for a runtime branch.
"""

from __future__ import annotations

from breezybridge.backends.bazaar import BazaarBranch
from breezybridge.backends.git import GitBranch, GitRepository
from breezybridge.capabilities.generic import (
    GenericBranch,
    GenericControlDir,
    GenericRepository,
)
from breezybridge.handle import ObjectHandle
from breezybridge.models import VcsType

__all__ = [
    "BRANCH_CLASSES",
    "BazaarBranch",
    "GitBranch",
    "GitRepository",
    "branch_class_for",
    "wrap_branch",
    "wrap_repository",
]

#: Branch wrapper per VCS; anything else uses :class:`GenericBranch`
BRANCH_CLASSES: dict[VcsType, type[GenericBranch]] = {
    VcsType.GIT: GitBranch,
    VcsType.BAZAAR: BazaarBranch,
}


def branch_class_for(vcs: VcsType) -> type[GenericBranch]:
    return BRANCH_CLASSES.get(vcs, GenericBranch)


def wrap_branch(handle: ObjectHandle) -> GenericBranch:
    """Wrap a runtime branch in the class matching its control directory."""
    with GenericControlDir(handle.get_attr("controldir")) as controldir:
        vcs = controldir.vcs_type()
    return branch_class_for(vcs)(handle)


def wrap_repository(handle: ObjectHandle) -> GenericRepository:
    """Wrap a runtime repository, picking GitRepository for git storage."""
    if handle.has_attr("_git"):
        return GitRepository(handle)
    return GenericRepository(handle)
