"""Opening repositories.

Git-backed repositories come back as
:class:`~breezybridge.backends.GitRepository`; everything else as
:class:`~breezybridge.capabilities.GenericRepository`.
"""

from __future__ import annotations

from pathlib import Path

from breezybridge.backends import wrap_repository
from breezybridge.capabilities.generic import GenericRepository
from breezybridge.runtime import import_core

__all__ = [
    "open",
]


def open(location: str | Path) -> GenericRepository:
    """Open the repository at *location*.

    Raises:
        NotFoundError: If there is no repository there.
    """
    repository_class = import_core("repository").get_attr("Repository")
    return wrap_repository(repository_class.call("open", (str(location),)))
