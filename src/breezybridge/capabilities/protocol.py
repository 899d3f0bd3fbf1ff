"""Narrow capability protocols.

Each protocol names only the operations meaningful to one abstraction.
Generic wrappers and backend-specific wrappers both satisfy them via
structural typing; no explicit inheritance is required.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from breezybridge.models import MergeProposalStatus, RevisionId, RevisionInfo, TreeEntry

if TYPE_CHECKING:
    from breezybridge.capabilities.generic import ControlDirFormat, Lock, Tags
    from breezybridge.handle import ObjectHandle

#: Predicate deciding which tags travel with a push or pull
TagSelector = Callable[[str], bool]


@runtime_checkable
class HasHandle(Protocol):
    """Anything backed by exactly one runtime object."""

    @property
    def handle(self) -> ObjectHandle: ...


@runtime_checkable
class Transport(Protocol):
    """File access relative to a base URL."""

    @property
    def base(self) -> str: ...

    def local_abspath(self, path: str) -> Path: ...

    def has(self, path: str) -> bool: ...

    def ensure_base(self) -> bool: ...

    def create_prefix(self) -> None: ...

    def clone(self, offset: str) -> Transport: ...

    def get_bytes(self, path: str) -> bytes: ...

    def put_bytes(self, path: str, data: bytes) -> None: ...

    def mkdir(self, path: str) -> None: ...

    def delete(self, path: str) -> None: ...

    def list_dir(self, path: str) -> list[str]: ...


@runtime_checkable
class Tree(Protocol):
    """Read access to a snapshot of versioned files."""

    def get_file_text(self, path: str) -> bytes: ...

    def has_filename(self, path: str) -> bool: ...

    def is_versioned(self, path: str) -> bool: ...

    def kind(self, path: str) -> str: ...

    def get_parent_ids(self) -> list[RevisionId]: ...

    def get_symlink_target(self, path: str) -> str: ...

    def list_files(
        self,
        *,
        include_root: bool = False,
        from_dir: str | None = None,
        recursive: bool = True,
    ) -> list[TreeEntry]: ...

    def lock_read(self) -> Lock: ...


@runtime_checkable
class WorkingTree(Tree, Protocol):
    """A tree backed by files on disk that can be modified and committed."""

    @property
    def basedir(self) -> Path: ...

    def abspath(self, path: str) -> Path: ...

    def add(self, paths: list[str]) -> None: ...

    def remove(self, paths: list[str], *, keep_files: bool = True) -> None: ...

    def mkdir(self, path: str) -> None: ...

    def put_file_bytes_non_atomic(self, path: str, data: bytes) -> None: ...

    def has_changes(self) -> bool: ...

    def is_ignored(self, path: str) -> str | None: ...

    def commit(
        self,
        message: str,
        *,
        committer: str | None = None,
        allow_pointless: bool = True,
        specific_files: list[str] | None = None,
    ) -> RevisionId: ...

    def last_revision(self) -> RevisionId: ...

    def basis_tree(self) -> Tree: ...

    def branch(self) -> Branch: ...

    def pull(
        self,
        source: Branch,
        *,
        overwrite: bool = False,
        stop_revision: RevisionId | None = None,
    ) -> None: ...

    def lock_write(self) -> Lock: ...


@runtime_checkable
class Repository(Protocol):
    """Storage for revisions and their trees."""

    def get_user_url(self) -> str: ...

    def has_revision(self, revision_id: RevisionId) -> bool: ...

    def get_revision(self, revision_id: RevisionId) -> RevisionInfo: ...

    def revision_tree(self, revision_id: RevisionId) -> Tree: ...

    def fetch(
        self, source: Repository, revision_id: RevisionId | None = None
    ) -> None: ...

    def is_shared(self) -> bool: ...

    def controldir(self) -> ControlDir: ...

    def lock_read(self) -> Lock: ...


@runtime_checkable
class Branch(Protocol):
    """A line of development."""

    @property
    def name(self) -> str | None: ...

    def get_user_url(self) -> str: ...

    def last_revision(self) -> RevisionId: ...

    def last_revision_info(self) -> tuple[int, RevisionId]: ...

    def repository(self) -> Repository: ...

    def controldir(self) -> ControlDir: ...

    def basis_tree(self) -> Tree: ...

    def tags(self) -> Tags: ...

    def push(
        self,
        target: Branch,
        *,
        overwrite: bool = False,
        stop_revision: RevisionId | None = None,
        tag_selector: TagSelector | None = None,
    ) -> None: ...

    def pull(
        self,
        source: Branch,
        *,
        overwrite: bool = False,
        stop_revision: RevisionId | None = None,
        tag_selector: TagSelector | None = None,
    ) -> None: ...

    def fetch(
        self, source: Branch, stop_revision: RevisionId | None = None
    ) -> None: ...

    def sprout(self, to_controldir: ControlDir, name: str | None = None) -> Branch: ...

    def get_parent(self) -> str | None: ...

    def set_parent(self, location: str | None) -> None: ...

    def get_push_location(self) -> str | None: ...

    def set_push_location(self, location: str) -> None: ...

    def get_public_branch(self) -> str | None: ...

    def get_submit_branch(self) -> str | None: ...

    def get_rev_id(self, revno: int) -> RevisionId: ...

    def revision_id_to_revno(self, revision_id: RevisionId) -> int: ...

    def generate_revision_history(self, revision_id: RevisionId) -> None: ...

    def bind(self, other: Branch) -> None: ...

    def unbind(self) -> None: ...

    def get_bound_location(self) -> str | None: ...

    def user_transport(self) -> Transport: ...

    def lock_read(self) -> Lock: ...

    def lock_write(self) -> Lock: ...


@runtime_checkable
class ControlDir(Protocol):
    """The metadata directory (``.git``, ``.bzr``) holding branches."""

    def get_user_url(self) -> str: ...

    def get_format(self) -> ControlDirFormat: ...

    def user_transport(self) -> Transport: ...

    def control_transport(self) -> Transport: ...

    def open_branch(self, name: str | None = None) -> Branch: ...

    def create_branch(self, name: str | None = None) -> Branch: ...

    def branch_names(self) -> list[str]: ...

    def set_branch_reference(self, target: Branch, name: str | None = None) -> None: ...

    def open_repository(self) -> Repository: ...

    def find_repository(self) -> Repository: ...

    def create_repository(self, *, shared: bool = False) -> Repository: ...

    def has_workingtree(self) -> bool: ...

    def open_workingtree(self) -> WorkingTree: ...

    def create_workingtree(self) -> WorkingTree: ...

    def push_branch(
        self,
        source: Branch,
        *,
        name: str | None = None,
        overwrite: bool = False,
        stop_revision: RevisionId | None = None,
        tag_selector: TagSelector | None = None,
    ) -> Branch: ...

    def sprout(
        self,
        target_url: str,
        *,
        source_branch: Branch | None = None,
        revision_id: RevisionId | None = None,
        create_tree_if_local: bool = True,
        stacked: bool = False,
    ) -> ControlDir: ...


@runtime_checkable
class MergeProposal(Protocol):
    """A request to merge one branch into another on a forge."""

    @property
    def url(self) -> str: ...

    def get_web_url(self) -> str: ...

    def get_title(self) -> str | None: ...

    def set_title(self, title: str | None) -> None: ...

    def get_description(self) -> str | None: ...

    def set_description(self, description: str | None) -> None: ...

    def get_commit_message(self) -> str | None: ...

    def set_commit_message(self, message: str | None) -> None: ...

    def get_source_branch_url(self) -> str | None: ...

    def get_target_branch_url(self) -> str | None: ...

    def is_merged(self) -> bool: ...

    def is_closed(self) -> bool: ...

    def can_be_merged(self) -> bool: ...

    def close(self) -> None: ...

    def reopen(self) -> None: ...

    def merge(self, *, commit_message: str | None = None, auto: bool = False) -> None: ...

    def get_merged_by(self) -> str | None: ...


@runtime_checkable
class Forge(Protocol):
    """A code hosting service (GitHub, GitLab, Launchpad, ...)."""

    @property
    def base_url(self) -> str: ...

    @property
    def forge_kind(self) -> str: ...

    @property
    def forge_name(self) -> str: ...

    def get_web_url(self, branch: Branch) -> str: ...

    def get_push_url(self, branch: Branch) -> str: ...

    def get_proposal_by_url(self, url: str) -> MergeProposal: ...

    def iter_my_proposals(
        self, status: MergeProposalStatus = MergeProposalStatus.OPEN
    ) -> list[MergeProposal]: ...

    def iter_proposals(
        self,
        source_branch: Branch,
        target_branch: Branch,
        status: MergeProposalStatus = MergeProposalStatus.OPEN,
    ) -> list[MergeProposal]: ...

    def get_derived_branch(
        self, main_branch: Branch, name: str, *, owner: str | None = None
    ) -> Branch: ...

    def publish_derived(
        self,
        local_branch: Branch,
        main_branch: Branch,
        name: str,
        *,
        overwrite: bool = False,
        owner: str | None = None,
        tag_selector: TagSelector | None = None,
    ) -> tuple[Branch, str]: ...

    def propose(
        self,
        source_branch: Branch,
        target_branch: Branch,
        description: str,
        *,
        title: str | None = None,
        labels: list[str] | None = None,
        reviewers: list[str] | None = None,
        commit_message: str | None = None,
        allow_collaboration: bool = False,
    ) -> MergeProposal: ...

    def get_current_user(self) -> str | None: ...

    def get_user_url(self, user: str) -> str: ...

    def supports_merge_proposal_labels(self) -> bool: ...

    def supports_merge_proposal_title(self) -> bool: ...

    def supports_merge_proposal_commit_message(self) -> bool: ...
