"""Composite capability mixins.

Each mixin supplies convenience operations written only in terms of the
narrow protocol methods (and, where noted, the handle primitives). Any
wrapper that implements the narrow methods gets these for free, whether it
is a generic wrapper or a backend-specific one.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from breezybridge.constants import NULL_REVISION
from breezybridge.exceptions import NotFoundError, TransportError
from breezybridge.models import MergeProposalStatus, RevisionId, RevisionInfo, VcsType

if TYPE_CHECKING:
    from breezybridge.capabilities import protocol

__all__ = [
    "BranchOps",
    "ControlDirOps",
    "ForgeOps",
    "RepositoryOps",
    "TransportOps",
    "TreeOps",
    "WorkingTreeOps",
]


class _Locking:
    """Context-manager forms of ``lock_read`` / ``lock_write``."""

    @contextmanager
    def read_locked(self: Any) -> Iterator[Any]:
        with self.lock_read():
            yield self

    @contextmanager
    def write_locked(self: Any) -> Iterator[Any]:
        with self.lock_write():
            yield self


class BranchOps(_Locking):
    """Conveniences for anything implementing :class:`protocol.Branch`."""

    def revno(self: protocol.Branch) -> int:
        """Number of revisions on the branch's mainline."""
        return self.last_revision_info()[0]

    def is_empty(self: protocol.Branch) -> bool:
        return self.last_revision() == NULL_REVISION

    def vcs_type(self: protocol.Branch) -> VcsType:
        """VCS of the repository backing this branch."""
        return self.repository().vcs_type()

    def is_git(self: protocol.Branch) -> bool:
        return self.vcs_type() is VcsType.GIT

    def tag_names(self: protocol.Branch) -> list[str]:
        return sorted(self.tags().get_tag_dict())

    def tag_revision(self: protocol.Branch, name: str) -> RevisionId | None:
        """Revision a tag points at, or None if the tag does not exist."""
        try:
            return self.tags().lookup_tag(name)
        except NotFoundError:
            return None

    def last_revision_details(self: protocol.Branch) -> RevisionInfo | None:
        """Snapshot of the tip revision; None for an empty branch."""
        revision_id = self.last_revision()
        if revision_id == NULL_REVISION:
            return None
        return self.repository().get_revision(revision_id)


class TreeOps(_Locking):
    """Conveniences for anything implementing :class:`protocol.Tree`."""

    def get_file_lines(self: protocol.Tree, path: str) -> list[bytes]:
        return self.get_file_text(path).splitlines(keepends=True)

    def read_text(self: protocol.Tree, path: str, encoding: str = "utf-8") -> str:
        return self.get_file_text(path).decode(encoding)

    def versioned_paths(self: protocol.Tree) -> list[str]:
        return [entry.path for entry in self.list_files() if entry.versioned == "V"]

    def has_versioned_file(self: protocol.Tree, path: str) -> bool:
        return self.has_filename(path) and self.is_versioned(path)


class WorkingTreeOps(TreeOps):
    """Conveniences for anything implementing :class:`protocol.WorkingTree`."""

    def is_clean(self: protocol.WorkingTree) -> bool:
        """True when there is nothing to commit."""
        return not self.has_changes()

    def unknowns(self: protocol.WorkingTree) -> list[str]:
        """Unversioned, unignored paths."""
        return [entry.path for entry in self.list_files() if entry.versioned == "?"]

    def put_and_add(self: protocol.WorkingTree, path: str, data: bytes) -> None:
        """Write *data* to *path* and schedule it for addition."""
        self.put_file_bytes_non_atomic(path, data)
        self.add([path])


class TransportOps:
    """Conveniences for anything implementing :class:`protocol.Transport`."""

    def is_local(self: protocol.Transport) -> bool:
        """True if the transport maps onto the local filesystem."""
        try:
            self.local_abspath(".")
        except TransportError as e:
            if (e.foreign_type_name or "").endswith("NotLocalUrl"):
                return False
            raise
        return True

    def read_text(self: protocol.Transport, path: str, encoding: str = "utf-8") -> str:
        return self.get_bytes(path).decode(encoding)

    def write_text(
        self: protocol.Transport, path: str, text: str, encoding: str = "utf-8"
    ) -> None:
        self.put_bytes(path, text.encode(encoding))


class RepositoryOps(_Locking):
    """Conveniences for anything implementing :class:`protocol.Repository`.

    :meth:`vcs_type` inspects the runtime object through its handle, so the
    implementer must also satisfy :class:`protocol.HasHandle`.
    """

    def vcs_type(self: Any) -> VcsType:
        # Git-backed repositories expose their dulwich repo as ``_git``.
        if self.handle.has_attr("_git"):
            return VcsType.GIT
        return VcsType.BAZAAR

    def is_git(self: Any) -> bool:
        return self.vcs_type() is VcsType.GIT

    def get_revisions(
        self: protocol.Repository, revision_ids: list[RevisionId]
    ) -> list[RevisionInfo]:
        return [self.get_revision(revision_id) for revision_id in revision_ids]


class ControlDirOps:
    """Conveniences for anything implementing :class:`protocol.ControlDir`."""

    def vcs_type(self: protocol.ControlDir) -> VcsType:
        return VcsType.from_format_id(self.get_format().format_id())

    def has_branch(self: protocol.ControlDir, name: str | None = None) -> bool:
        try:
            self.open_branch(name)
        except NotFoundError:
            return False
        return True

    def open_or_create_branch(
        self: protocol.ControlDir, name: str | None = None
    ) -> protocol.Branch:
        try:
            return self.open_branch(name)
        except NotFoundError:
            return self.create_branch(name)

    def find_or_create_repository(
        self: protocol.ControlDir, *, shared: bool = False
    ) -> protocol.Repository:
        try:
            return self.find_repository()
        except NotFoundError:
            return self.create_repository(shared=shared)


class ForgeOps:
    """Conveniences for anything implementing :class:`protocol.Forge`."""

    def has_open_proposal(
        self: protocol.Forge,
        source_branch: protocol.Branch,
        target_branch: protocol.Branch,
    ) -> bool:
        proposals = self.iter_proposals(
            source_branch, target_branch, MergeProposalStatus.OPEN
        )
        return bool(proposals)

    def publish_and_propose(
        self: protocol.Forge,
        local_branch: protocol.Branch,
        main_branch: protocol.Branch,
        name: str,
        description: str,
        *,
        title: str | None = None,
        labels: list[str] | None = None,
        overwrite: bool = False,
        owner: str | None = None,
    ) -> protocol.MergeProposal:
        """Push *local_branch* as a derived branch and propose it upstream."""
        remote_branch, _ = self.publish_derived(
            local_branch, main_branch, name, overwrite=overwrite, owner=owner
        )
        return self.propose(
            remote_branch,
            main_branch,
            description,
            title=title,
            labels=labels,
        )
