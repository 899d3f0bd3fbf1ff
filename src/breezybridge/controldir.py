"""Opening and creating control directories.

Example:
    ```python
    from breezybridge import controldir

    cd = controldir.create_standalone_workingtree("/tmp/work", format="git")
    cd, relpath = controldir.open_containing("/tmp/work/src")
    ```
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from breezybridge.capabilities.generic import (
    ControlDirFormat,
    GenericBranch,
    GenericControlDir,
    GenericWorkingTree,
)
from breezybridge.handle import ObjectHandle
from breezybridge.runtime import import_core

__all__ = [
    "create",
    "create_branch_convenience",
    "create_standalone_workingtree",
    "default_format",
    "format_names",
    "get_format",
    "open",
    "open_containing",
    "open_tree_or_branch",
]

Location = str | Path
FormatSpec = str | ControlDirFormat | None


def _controldir_class() -> ObjectHandle:
    return import_core("controldir").get_attr("ControlDir")


def _format_kwargs(format: FormatSpec) -> dict[str, object]:
    if format is None:
        return {}
    if isinstance(format, str):
        format = get_format(format)
    return {"format": format}


def open(
    location: Location, *, probers: Sequence[ObjectHandle] | None = None
) -> GenericControlDir:
    """Open the control directory at *location*.

    Args:
        location: Path or URL.
        probers: Prober classes to try instead of the registered ones.

    Raises:
        NotFoundError: If there is no control directory there.
    """
    kwargs = {}
    if probers is not None:
        kwargs["probers"] = list(probers)
    return GenericControlDir(
        _controldir_class().call("open", (str(location),), kwargs)
    )


def open_containing(location: Location) -> tuple[GenericControlDir, str]:
    """Open the control directory containing *location*.

    Returns:
        The control directory and the path of *location* relative to it.
    """
    result = _controldir_class().call("open_containing", (str(location),))
    with result:
        controldir, relpath = result.iter_handles()
        with relpath:
            return GenericControlDir(controldir), relpath.extract(str)


def open_tree_or_branch(
    location: Location,
) -> tuple[GenericWorkingTree | None, GenericBranch]:
    """Open the working tree at *location* if it has one, and its branch."""
    result = _controldir_class().call("open_tree_or_branch", (str(location),))
    with result:
        tree, branch = result.iter_handles()
    if tree.is_none():
        tree.release()
        return None, GenericBranch(branch)
    return GenericWorkingTree(tree), GenericBranch(branch)


def create(location: Location, *, format: FormatSpec = None) -> GenericControlDir:
    """Create an empty control directory at *location*.

    Args:
        location: Path or URL of the new control directory.
        format: Registry name (``"git"``, ``"2a"``...) or format object.
            The runtime's default format when omitted.

    Raises:
        AlreadyExistsError: If a control directory already exists there.
    """
    return GenericControlDir(
        _controldir_class().call("create", (str(location),), _format_kwargs(format))
    )


def create_branch_convenience(
    location: Location,
    *,
    format: FormatSpec = None,
    force_new_tree: bool | None = None,
) -> GenericBranch:
    """Create a branch at *location*, with repository and tree as needed."""
    kwargs = _format_kwargs(format)
    if force_new_tree is not None:
        kwargs["force_new_tree"] = force_new_tree
    return GenericBranch(
        _controldir_class().call("create_branch_convenience", (str(location),), kwargs)
    )


def create_standalone_workingtree(
    location: Location, *, format: FormatSpec = None
) -> GenericWorkingTree:
    """Create a repository, branch and working tree at *location*."""
    return GenericWorkingTree(
        _controldir_class().call(
            "create_standalone_workingtree", (str(location),), _format_kwargs(format)
        )
    )


def get_format(name: str) -> ControlDirFormat:
    """Look up a control directory format by registry name.

    Raises:
        GenericError: If no format is registered under *name*.
    """
    registry = import_core("controldir").get_attr("format_registry")
    return ControlDirFormat(registry.call("make_controldir", (name,)))


def default_format() -> ControlDirFormat:
    format_class = import_core("controldir").get_attr("ControlDirFormat")
    return ControlDirFormat(format_class.call("get_default_format"))


def format_names() -> list[str]:
    """Names accepted by :func:`get_format`, sorted."""
    registry = import_core("controldir").get_attr("format_registry")
    return registry.call("keys", extract=lambda keys: sorted(str(key) for key in keys))
