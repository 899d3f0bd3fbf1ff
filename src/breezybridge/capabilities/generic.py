"""Generic wrappers around runtime objects.

One wrapper per capability, each holding exactly one
:class:`~breezybridge.handle.ObjectHandle` and delegating every narrow
operation to it. They work for any backend the runtime supports; backend
modules subclass them only where the runtime API differs.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Self

from breezybridge.capabilities.composite import (
    BranchOps,
    ControlDirOps,
    ForgeOps,
    RepositoryOps,
    TransportOps,
    TreeOps,
    WorkingTreeOps,
)
from breezybridge.exceptions import GenericError
from breezybridge.handle import ObjectHandle
from breezybridge.models import MergeProposalStatus, RevisionId, RevisionInfo, TreeEntry

if TYPE_CHECKING:
    from breezybridge.capabilities import protocol

__all__ = [
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


# =============================================================================
# Extractors
# =============================================================================


def _ignore(value: Any) -> None:
    return None


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _str_list(value: Any) -> list[str]:
    return [str(item) for item in value]


def _revision_ids(value: Any) -> list[RevisionId]:
    return [bytes(item) for item in value]


def _revno_and_revid(value: Any) -> tuple[int, RevisionId]:
    revno, revision_id = value
    return int(revno), bytes(revision_id)


def _tree_entries(value: Any) -> list[TreeEntry]:
    return [TreeEntry(path, versioned, kind) for path, versioned, kind, *_ in value]


def _kwargs(**kwargs: Any) -> dict[str, Any]:
    """Drop unset keyword arguments so the runtime applies its own defaults."""
    return {key: value for key, value in kwargs.items() if value is not None}


# =============================================================================
# Base
# =============================================================================


class ForeignObject:
    """Base for wrappers backed by one runtime object.

    Wrappers compare equal when their handles refer to the same runtime
    object, whatever wrapper class they are.

    Args:
        handle: Handle to the runtime object. Ownership passes to the wrapper.
    """

    __slots__ = ("_handle",)

    def __init__(self, handle: ObjectHandle) -> None:
        if not isinstance(handle, ObjectHandle):
            raise TypeError(
                f"{type(self).__name__} expects an ObjectHandle, "
                f"got {type(handle).__name__}"
            )
        self._handle = handle

    @property
    def handle(self) -> ObjectHandle:
        return self._handle

    def __bridge_handle__(self) -> ObjectHandle:
        return self._handle

    def clone_ref(self) -> Self:
        """Return a wrapper of the same class sharing the runtime object."""
        return type(self)(self._handle.clone_ref())

    def release(self) -> None:
        self._handle.release()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ForeignObject):
            return NotImplemented
        return self._handle == other._handle

    def __hash__(self) -> int:
        return hash(self._handle)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._handle!r})"


class Lock(ForeignObject):
    """A held runtime lock. Usable as a context manager."""

    __slots__ = ()

    def unlock(self) -> None:
        self._handle.call("unlock", extract=_ignore)

    def __exit__(self, *exc_info: object) -> None:
        try:
            self.unlock()
        finally:
            self.release()


class Tags(ForeignObject):
    """Tag dictionary of a branch."""

    __slots__ = ()

    def get_tag_dict(self) -> dict[str, RevisionId]:
        return self._handle.call("get_tag_dict", extract=dict)

    def get_reverse_tag_dict(self) -> dict[RevisionId, list[str]]:
        return self._handle.call(
            "get_reverse_tag_dict",
            extract=lambda value: {key: list(names) for key, names in value.items()},
        )

    def lookup_tag(self, name: str) -> RevisionId:
        """Raises NotFoundError if *name* is not a tag."""
        return self._handle.call("lookup_tag", (name,), extract=bytes)

    def has_tag(self, name: str) -> bool:
        return self._handle.call("has_tag", (name,), extract=bool)

    def set_tag(self, name: str, revision_id: RevisionId) -> None:
        self._handle.call("set_tag", (name, revision_id), extract=_ignore)

    def delete_tag(self, name: str) -> None:
        self._handle.call("delete_tag", (name,), extract=_ignore)

    def rename_revisions(self, rename_map: Mapping[RevisionId, RevisionId]) -> None:
        self._handle.call("rename_revisions", (dict(rename_map),), extract=_ignore)


# =============================================================================
# Transport
# =============================================================================


class Transport(ForeignObject, TransportOps):
    """File access relative to a base URL."""

    __slots__ = ()

    @property
    def base(self) -> str:
        return self._handle.get_attr("base", extract=str)

    def external_url(self) -> str:
        return self._handle.call("external_url", extract=str)

    def local_abspath(self, path: str) -> Path:
        return self._handle.call("local_abspath", (path,), extract=Path)

    def has(self, path: str) -> bool:
        return self._handle.call("has", (path,), extract=bool)

    def ensure_base(self) -> bool:
        """Create the base directory; True if it did not exist before."""
        return self._handle.call("ensure_base", extract=bool)

    def create_prefix(self) -> None:
        self._handle.call("create_prefix", extract=_ignore)

    def clone(self, offset: str) -> Transport:
        return Transport(self._handle.call("clone", (offset,)))

    def get_bytes(self, path: str) -> bytes:
        return self._handle.call("get_bytes", (path,), extract=bytes)

    def put_bytes(self, path: str, data: bytes) -> None:
        self._handle.call("put_bytes", (path, data), extract=_ignore)

    def mkdir(self, path: str) -> None:
        self._handle.call("mkdir", (path,), extract=_ignore)

    def delete(self, path: str) -> None:
        self._handle.call("delete", (path,), extract=_ignore)

    def list_dir(self, path: str) -> list[str]:
        return self._handle.call("list_dir", (path,), extract=_str_list)


# =============================================================================
# Trees
# =============================================================================


class GenericTree(ForeignObject, TreeOps):
    """Any tree: revision trees, basis trees, working trees."""

    __slots__ = ()

    def get_file_text(self, path: str) -> bytes:
        return self._handle.call("get_file_text", (path,), extract=bytes)

    def has_filename(self, path: str) -> bool:
        return self._handle.call("has_filename", (path,), extract=bool)

    def is_versioned(self, path: str) -> bool:
        return self._handle.call("is_versioned", (path,), extract=bool)

    def kind(self, path: str) -> str:
        return self._handle.call("kind", (path,), extract=str)

    def get_parent_ids(self) -> list[RevisionId]:
        return self._handle.call("get_parent_ids", extract=_revision_ids)

    def get_symlink_target(self, path: str) -> str:
        return self._handle.call("get_symlink_target", (path,), extract=str)

    def list_files(
        self,
        *,
        include_root: bool = False,
        from_dir: str | None = None,
        recursive: bool = True,
    ) -> list[TreeEntry]:
        return self._handle.call(
            "list_files",
            kwargs={
                "include_root": include_root,
                "from_dir": from_dir,
                "recursive": recursive,
            },
            extract=_tree_entries,
        )

    def lock_read(self) -> Lock:
        return Lock(self._handle.call("lock_read"))


class GenericWorkingTree(GenericTree, WorkingTreeOps):
    """A working tree checked out on disk."""

    __slots__ = ()

    @property
    def basedir(self) -> Path:
        return self._handle.get_attr("basedir", extract=Path)

    def abspath(self, path: str) -> Path:
        return self._handle.call("abspath", (path,), extract=Path)

    def add(self, paths: list[str]) -> None:
        self._handle.call("add", (list(paths),), extract=_ignore)

    def remove(self, paths: list[str], *, keep_files: bool = True) -> None:
        self._handle.call(
            "remove", (list(paths),), {"keep_files": keep_files}, extract=_ignore
        )

    def mkdir(self, path: str) -> None:
        self._handle.call("mkdir", (path,), extract=_ignore)

    def put_file_bytes_non_atomic(self, path: str, data: bytes) -> None:
        self._handle.call("put_file_bytes_non_atomic", (path, data), extract=_ignore)

    def has_changes(self) -> bool:
        return self._handle.call("has_changes", extract=bool)

    def is_ignored(self, path: str) -> str | None:
        """The ignore pattern matching *path*, or None."""
        return self._handle.call("is_ignored", (path,), extract=_optional_str)

    def commit(
        self,
        message: str,
        *,
        committer: str | None = None,
        allow_pointless: bool = True,
        specific_files: list[str] | None = None,
    ) -> RevisionId:
        kwargs = _kwargs(committer=committer, specific_files=specific_files)
        kwargs["allow_pointless"] = allow_pointless
        return self._handle.call("commit", (message,), kwargs, extract=bytes)

    def last_revision(self) -> RevisionId:
        return self._handle.call("last_revision", extract=bytes)

    def basis_tree(self) -> GenericTree:
        return GenericTree(self._handle.call("basis_tree"))

    def branch(self) -> GenericBranch:
        return GenericBranch(self._handle.get_attr("branch"))

    def controldir(self) -> GenericControlDir:
        return GenericControlDir(self._handle.get_attr("controldir"))

    def pull(
        self,
        source: protocol.Branch,
        *,
        overwrite: bool = False,
        stop_revision: RevisionId | None = None,
    ) -> None:
        kwargs = _kwargs(stop_revision=stop_revision)
        kwargs["overwrite"] = overwrite
        self._handle.call("pull", (source,), kwargs, extract=_ignore)

    def lock_write(self) -> Lock:
        return Lock(self._handle.call("lock_write"))


# =============================================================================
# Repository
# =============================================================================


class GenericRepository(ForeignObject, RepositoryOps):
    __slots__ = ()

    def get_user_url(self) -> str:
        return self._handle.get_attr("user_url", extract=str)

    def has_revision(self, revision_id: RevisionId) -> bool:
        return self._handle.call("has_revision", (revision_id,), extract=bool)

    def get_revision(self, revision_id: RevisionId) -> RevisionInfo:
        return self._handle.call(
            "get_revision", (revision_id,), extract=RevisionInfo.from_runtime
        )

    def revision_tree(self, revision_id: RevisionId) -> GenericTree:
        return GenericTree(self._handle.call("revision_tree", (revision_id,)))

    def fetch(
        self, source: protocol.Repository, revision_id: RevisionId | None = None
    ) -> None:
        self._handle.call(
            "fetch", (source,), _kwargs(revision_id=revision_id), extract=_ignore
        )

    def is_shared(self) -> bool:
        return self._handle.call("is_shared", extract=bool)

    def controldir(self) -> GenericControlDir:
        return GenericControlDir(self._handle.get_attr("controldir"))

    def lock_read(self) -> Lock:
        return Lock(self._handle.call("lock_read"))


# =============================================================================
# Branch
# =============================================================================


class GenericBranch(ForeignObject, BranchOps):
    """A branch of any supported VCS."""

    __slots__ = ()

    @property
    def name(self) -> str | None:
        return self._handle.get_attr("name", extract=_optional_str)

    def get_user_url(self) -> str:
        return self._handle.get_attr("user_url", extract=str)

    def last_revision(self) -> RevisionId:
        return self._handle.call("last_revision", extract=bytes)

    def last_revision_info(self) -> tuple[int, RevisionId]:
        return self._handle.call("last_revision_info", extract=_revno_and_revid)

    def repository(self) -> GenericRepository:
        return GenericRepository(self._handle.get_attr("repository"))

    def controldir(self) -> GenericControlDir:
        return GenericControlDir(self._handle.get_attr("controldir"))

    def basis_tree(self) -> GenericTree:
        return GenericTree(self._handle.call("basis_tree"))

    def tags(self) -> Tags:
        return Tags(self._handle.get_attr("tags"))

    def push(
        self,
        target: protocol.Branch,
        *,
        overwrite: bool = False,
        stop_revision: RevisionId | None = None,
        tag_selector: protocol.TagSelector | None = None,
    ) -> None:
        kwargs = _kwargs(stop_revision=stop_revision, tag_selector=tag_selector)
        kwargs["overwrite"] = overwrite
        self._handle.call("push", (target,), kwargs, extract=_ignore)

    def pull(
        self,
        source: protocol.Branch,
        *,
        overwrite: bool = False,
        stop_revision: RevisionId | None = None,
        tag_selector: protocol.TagSelector | None = None,
    ) -> None:
        kwargs = _kwargs(stop_revision=stop_revision, tag_selector=tag_selector)
        kwargs["overwrite"] = overwrite
        self._handle.call("pull", (source,), kwargs, extract=_ignore)

    def fetch(
        self, source: protocol.Branch, stop_revision: RevisionId | None = None
    ) -> None:
        self._handle.call(
            "fetch", (source,), _kwargs(stop_revision=stop_revision), extract=_ignore
        )

    def sprout(
        self, to_controldir: protocol.ControlDir, name: str | None = None
    ) -> GenericBranch:
        return GenericBranch(
            self._handle.call("sprout", (to_controldir,), _kwargs(name=name))
        )

    def get_parent(self) -> str | None:
        return self._handle.call("get_parent", extract=_optional_str)

    def set_parent(self, location: str | None) -> None:
        self._handle.call("set_parent", (location,), extract=_ignore)

    def get_push_location(self) -> str | None:
        return self._handle.call("get_push_location", extract=_optional_str)

    def set_push_location(self, location: str) -> None:
        self._handle.call("set_push_location", (location,), extract=_ignore)

    def get_public_branch(self) -> str | None:
        return self._handle.call("get_public_branch", extract=_optional_str)

    def get_submit_branch(self) -> str | None:
        return self._handle.call("get_submit_branch", extract=_optional_str)

    def get_rev_id(self, revno: int) -> RevisionId:
        return self._handle.call("get_rev_id", (revno,), extract=bytes)

    def revision_id_to_revno(self, revision_id: RevisionId) -> int:
        return self._handle.call("revision_id_to_revno", (revision_id,), extract=int)

    def generate_revision_history(self, revision_id: RevisionId) -> None:
        self._handle.call("generate_revision_history", (revision_id,), extract=_ignore)

    def bind(self, other: protocol.Branch) -> None:
        self._handle.call("bind", (other,), extract=_ignore)

    def unbind(self) -> None:
        self._handle.call("unbind", extract=_ignore)

    def get_bound_location(self) -> str | None:
        return self._handle.call("get_bound_location", extract=_optional_str)

    def user_transport(self) -> Transport:
        return Transport(self._handle.get_attr("user_transport"))

    def is_locked(self) -> bool:
        return self._handle.call("is_locked", extract=bool)

    def lock_read(self) -> Lock:
        return Lock(self._handle.call("lock_read"))

    def lock_write(self) -> Lock:
        return Lock(self._handle.call("lock_write"))


# =============================================================================
# Control directories
# =============================================================================


class ControlDirFormat(ForeignObject):
    """On-disk format of a control directory."""

    __slots__ = ()

    def network_name(self) -> bytes:
        return self._handle.call("network_name", extract=bytes)

    def get_format_description(self) -> str:
        return self._handle.call("get_format_description", extract=str)

    def format_id(self) -> str:
        """Lowercased network name, or the description when there is none."""
        try:
            name = self.network_name()
        except GenericError:
            name = b""
        if name:
            return name.decode("utf-8", errors="replace").strip().lower()
        return self.get_format_description().strip().lower()

    def is_control_filename(self, filename: str) -> bool:
        return self._handle.call("is_control_filename", (filename,), extract=bool)

    def initialize(self, location: str) -> GenericControlDir:
        return GenericControlDir(self._handle.call("initialize", (location,)))


class GenericControlDir(ForeignObject, ControlDirOps):
    """A ``.git`` or ``.bzr`` directory and what it contains."""

    __slots__ = ()

    def get_user_url(self) -> str:
        return self._handle.get_attr("user_url", extract=str)

    def get_format(self) -> ControlDirFormat:
        return ControlDirFormat(self._handle.get_attr("_format"))

    def cloning_metadir(self) -> ControlDirFormat:
        return ControlDirFormat(self._handle.call("cloning_metadir"))

    def user_transport(self) -> Transport:
        return Transport(self._handle.get_attr("user_transport"))

    def control_transport(self) -> Transport:
        return Transport(self._handle.get_attr("control_transport"))

    def open_branch(self, name: str | None = None) -> GenericBranch:
        return GenericBranch(self._handle.call("open_branch", kwargs={"name": name}))

    def create_branch(self, name: str | None = None) -> GenericBranch:
        return GenericBranch(self._handle.call("create_branch", kwargs={"name": name}))

    def branch_names(self) -> list[str]:
        return self._handle.call("branch_names", extract=_str_list)

    def set_branch_reference(
        self, target: protocol.Branch, name: str | None = None
    ) -> None:
        self._handle.call(
            "set_branch_reference", (target,), {"name": name}, extract=_ignore
        )

    def open_repository(self) -> GenericRepository:
        return GenericRepository(self._handle.call("open_repository"))

    def find_repository(self) -> GenericRepository:
        return GenericRepository(self._handle.call("find_repository"))

    def create_repository(self, *, shared: bool = False) -> GenericRepository:
        return GenericRepository(
            self._handle.call("create_repository", kwargs={"shared": shared})
        )

    def has_workingtree(self) -> bool:
        return self._handle.call("has_workingtree", extract=bool)

    def open_workingtree(self) -> GenericWorkingTree:
        return GenericWorkingTree(self._handle.call("open_workingtree"))

    def create_workingtree(self) -> GenericWorkingTree:
        return GenericWorkingTree(self._handle.call("create_workingtree"))

    def push_branch(
        self,
        source: protocol.Branch,
        *,
        name: str | None = None,
        overwrite: bool = False,
        stop_revision: RevisionId | None = None,
        tag_selector: protocol.TagSelector | None = None,
    ) -> GenericBranch:
        """Push *source* into this control directory.

        Returns:
            The branch that received the push.
        """
        kwargs = _kwargs(
            name=name, stop_revision=stop_revision, tag_selector=tag_selector
        )
        kwargs["overwrite"] = overwrite
        result = self._handle.call("push_branch", (source,), kwargs)
        with result:
            return GenericBranch(result.get_attr("target_branch"))

    def sprout(
        self,
        target_url: str,
        *,
        source_branch: protocol.Branch | None = None,
        revision_id: RevisionId | None = None,
        create_tree_if_local: bool = True,
        stacked: bool = False,
    ) -> GenericControlDir:
        kwargs = _kwargs(source_branch=source_branch, revision_id=revision_id)
        kwargs.update(create_tree_if_local=create_tree_if_local, stacked=stacked)
        return GenericControlDir(self._handle.call("sprout", (target_url,), kwargs))


# =============================================================================
# Forges
# =============================================================================


class MergeProposal(ForeignObject):
    """A merge proposal (pull request, merge request) on a forge."""

    __slots__ = ()

    @property
    def url(self) -> str:
        return self._handle.get_attr("url", extract=str)

    def get_web_url(self) -> str:
        return self._handle.call("get_web_url", extract=str)

    def get_title(self) -> str | None:
        return self._handle.call("get_title", extract=_optional_str)

    def set_title(self, title: str | None) -> None:
        self._handle.call("set_title", (title,), extract=_ignore)

    def get_description(self) -> str | None:
        return self._handle.call("get_description", extract=_optional_str)

    def set_description(self, description: str | None) -> None:
        self._handle.call("set_description", (description,), extract=_ignore)

    def get_commit_message(self) -> str | None:
        return self._handle.call("get_commit_message", extract=_optional_str)

    def set_commit_message(self, message: str | None) -> None:
        self._handle.call("set_commit_message", (message,), extract=_ignore)

    def get_source_branch_url(self) -> str | None:
        return self._handle.call("get_source_branch_url", extract=_optional_str)

    def get_target_branch_url(self) -> str | None:
        return self._handle.call("get_target_branch_url", extract=_optional_str)

    def is_merged(self) -> bool:
        return self._handle.call("is_merged", extract=bool)

    def is_closed(self) -> bool:
        return self._handle.call("is_closed", extract=bool)

    def can_be_merged(self) -> bool:
        return self._handle.call("can_be_merged", extract=bool)

    def supports_auto_merge(self) -> bool:
        return self._handle.get_attr("supports_auto_merge", extract=bool)

    def close(self) -> None:
        self._handle.call("close", extract=_ignore)

    def reopen(self) -> None:
        self._handle.call("reopen", extract=_ignore)

    def merge(self, *, commit_message: str | None = None, auto: bool = False) -> None:
        self._handle.call(
            "merge",
            kwargs={"commit_message": commit_message, "auto": auto},
            extract=_ignore,
        )

    def get_merged_by(self) -> str | None:
        return self._handle.call("get_merged_by", extract=_optional_str)

    def get_merged_at(self) -> datetime | None:
        return self._handle.call("get_merged_at", extract=lambda value: value)

    def status(self) -> MergeProposalStatus:
        if self.is_merged():
            return MergeProposalStatus.MERGED
        if self.is_closed():
            return MergeProposalStatus.CLOSED
        return MergeProposalStatus.OPEN


class GenericForge(ForeignObject, ForgeOps):
    """A code hosting site reachable through the runtime's forge API."""

    __slots__ = ()

    @property
    def base_url(self) -> str:
        return self._handle.get_attr("base_url", extract=str)

    @property
    def forge_kind(self) -> str:
        """Runtime class name of the forge, e.g. ``GitHub``."""
        return self._handle.extract(lambda forge: type(forge).__name__)

    @property
    def forge_name(self) -> str:
        return self._handle.extract(
            lambda forge: str(getattr(forge, "name", type(forge).__name__))
        )

    @property
    def merge_proposal_description_format(self) -> str:
        return self._handle.get_attr("merge_proposal_description_format", extract=str)

    def supports_merge_proposal_labels(self) -> bool:
        return self._handle.get_attr("supports_merge_proposal_labels", extract=bool)

    def supports_merge_proposal_title(self) -> bool:
        return self._handle.get_attr("supports_merge_proposal_title", extract=bool)

    def supports_merge_proposal_commit_message(self) -> bool:
        return self._handle.get_attr(
            "supports_merge_proposal_commit_message", extract=bool
        )

    def get_web_url(self, branch: protocol.Branch) -> str:
        return self._handle.call("get_web_url", (branch,), extract=str)

    def get_push_url(self, branch: protocol.Branch) -> str:
        return self._handle.call("get_push_url", (branch,), extract=str)

    def get_proposal_by_url(self, url: str) -> MergeProposal:
        return MergeProposal(self._handle.call("get_proposal_by_url", (url,)))

    def iter_my_proposals(
        self,
        status: MergeProposalStatus = MergeProposalStatus.OPEN,
        author: str | None = None,
    ) -> list[MergeProposal]:
        proposals = self._handle.call(
            "iter_my_proposals", kwargs={"status": status.value, "author": author}
        )
        with proposals:
            return [MergeProposal(item) for item in proposals.iter_handles()]

    def iter_proposals(
        self,
        source_branch: protocol.Branch,
        target_branch: protocol.Branch,
        status: MergeProposalStatus = MergeProposalStatus.OPEN,
    ) -> list[MergeProposal]:
        proposals = self._handle.call(
            "iter_proposals",
            (source_branch, target_branch),
            {"status": status.value},
        )
        with proposals:
            return [MergeProposal(item) for item in proposals.iter_handles()]

    def get_derived_branch(
        self, main_branch: protocol.Branch, name: str, *, owner: str | None = None
    ) -> GenericBranch:
        return GenericBranch(
            self._handle.call(
                "get_derived_branch", (main_branch, name), _kwargs(owner=owner)
            )
        )

    def publish_derived(
        self,
        local_branch: protocol.Branch,
        main_branch: protocol.Branch,
        name: str,
        *,
        overwrite: bool = False,
        owner: str | None = None,
        tag_selector: protocol.TagSelector | None = None,
    ) -> tuple[GenericBranch, str]:
        """Push *local_branch* to a derived branch on this forge.

        Returns:
            The remote branch and its public URL.
        """
        kwargs = _kwargs(owner=owner, tag_selector=tag_selector)
        kwargs.update(
            local_branch=local_branch,
            base_branch=main_branch,
            name=name,
            overwrite=overwrite,
        )
        result = self._handle.call("publish_derived", kwargs=kwargs)
        with result:
            branch_handle, url_handle = result.iter_handles()
            with url_handle:
                url = url_handle.extract(str)
        return GenericBranch(branch_handle), url

    def propose(
        self,
        source_branch: protocol.Branch,
        target_branch: protocol.Branch,
        description: str,
        *,
        title: str | None = None,
        labels: list[str] | None = None,
        reviewers: list[str] | None = None,
        commit_message: str | None = None,
        allow_collaboration: bool = False,
    ) -> MergeProposal:
        """Open a merge proposal from *source_branch* into *target_branch*."""
        proposer = self._handle.call("get_proposer", (source_branch, target_branch))
        kwargs = _kwargs(
            title=title,
            labels=labels,
            reviewers=reviewers,
            commit_message=commit_message,
        )
        kwargs.update(description=description, allow_collaboration=allow_collaboration)
        with proposer:
            return MergeProposal(proposer.call("create_proposal", kwargs=kwargs))

    def get_current_user(self) -> str | None:
        return self._handle.call("get_current_user", extract=_optional_str)

    def get_user_url(self, user: str) -> str:
        return self._handle.call("get_user_url", (user,), extract=str)
