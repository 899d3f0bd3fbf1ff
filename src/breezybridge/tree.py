"""Opening working trees."""

from __future__ import annotations

from pathlib import Path

from breezybridge.capabilities.generic import GenericWorkingTree
from breezybridge.runtime import import_core

__all__ = [
    "open_containing_workingtree",
    "open_workingtree",
]


def open_workingtree(path: str | Path) -> GenericWorkingTree:
    """Open the working tree rooted at *path*.

    Raises:
        NotFoundError: If *path* is not the root of a working tree.
    """
    workingtree_class = import_core("workingtree").get_attr("WorkingTree")
    return GenericWorkingTree(workingtree_class.call("open", (str(path),)))


def open_containing_workingtree(path: str | Path) -> tuple[GenericWorkingTree, str]:
    """Open the working tree containing *path*.

    Returns:
        The tree and the path of *path* relative to the tree root.
    """
    workingtree_class = import_core("workingtree").get_attr("WorkingTree")
    result = workingtree_class.call("open_containing", (str(path),))
    with result:
        tree, relpath = result.iter_handles()
        with relpath:
            return GenericWorkingTree(tree), relpath.extract(str)
