"""Opening branches.

Branches come back wrapped in the class matching their VCS:
:class:`~breezybridge.backends.GitBranch`,
:class:`~breezybridge.backends.BazaarBranch`, or
:class:`~breezybridge.capabilities.GenericBranch` for anything else.
"""

from __future__ import annotations

from pathlib import Path

from breezybridge.backends import wrap_branch
from breezybridge.capabilities.generic import GenericBranch
from breezybridge.runtime import import_core

__all__ = [
    "open",
    "open_containing",
]


def open(location: str | Path) -> GenericBranch:
    """Open the branch at *location*.

    Raises:
        NotFoundError: If there is no branch there.
    """
    branch_class = import_core("branch").get_attr("Branch")
    return wrap_branch(branch_class.call("open", (str(location),)))


def open_containing(location: str | Path) -> tuple[GenericBranch, str]:
    """Open the branch containing *location*.

    Returns:
        The branch and the path of *location* relative to its root.
    """
    branch_class = import_core("branch").get_attr("Branch")
    result = branch_class.call("open_containing", (str(location),))
    with result:
        branch, relpath = result.iter_handles()
        with relpath:
            return wrap_branch(branch), relpath.extract(str)
