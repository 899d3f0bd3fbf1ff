"""Value objects shared across the bridge.

Everything here is plain Python data: snapshots extracted from runtime
objects while the interpreter lock is held, safe to pass around freely.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias

__all__ = [
    "FORMAT_PREFIXES",
    "MergeProposalStatus",
    "RevisionId",
    "RevisionInfo",
    "TreeEntry",
    "VcsType",
]

#: Revision identifiers are opaque byte strings owned by the runtime
RevisionId: TypeAlias = bytes


class VcsType(str, Enum):
    """Version control system governing a location."""

    GIT = "git"
    BAZAAR = "bazaar"
    MERCURIAL = "mercurial"
    SUBVERSION = "subversion"
    UNKNOWN = "unknown"

    @classmethod
    def from_format_id(cls, format_id: str) -> VcsType:
        """Classify a control directory format identifier.

        Matching is a case-insensitive prefix match against
        :data:`FORMAT_PREFIXES`; anything else is UNKNOWN.
        """
        lowered = format_id.strip().lower()
        for prefix, vcs in FORMAT_PREFIXES:
            if lowered.startswith(prefix):
                return vcs
        return cls.UNKNOWN


#: Known format-id prefixes, checked in order
FORMAT_PREFIXES: tuple[tuple[str, VcsType], ...] = (
    ("git", VcsType.GIT),
    ("bazaar", VcsType.BAZAAR),
    ("bzr", VcsType.BAZAAR),
    ("hg", VcsType.MERCURIAL),
    ("mercurial", VcsType.MERCURIAL),
    ("svn", VcsType.SUBVERSION),
    ("subversion", VcsType.SUBVERSION),
)


class MergeProposalStatus(str, Enum):
    """Filter for merge proposal listings."""

    ALL = "all"
    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"


@dataclass(frozen=True, slots=True)
class RevisionInfo:
    """Snapshot of one revision.

    Attributes:
        revision_id: Identifier of the revision.
        parent_ids: Identifiers of the parent revisions.
        committer: Committer identity string.
        message: Full commit message.
        timestamp: Seconds since the epoch.
        timezone: Offset from UTC in seconds, if recorded.
        properties: Revision properties (author, branch-nick, ...).
    """

    revision_id: RevisionId
    parent_ids: tuple[RevisionId, ...]
    committer: str
    message: str
    timestamp: float
    timezone: int | None = None
    properties: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_runtime(cls, revision: Any) -> RevisionInfo:
        """Build from a runtime ``Revision`` object (lock must be held)."""
        return cls(
            revision_id=revision.revision_id,
            parent_ids=tuple(revision.parent_ids),
            committer=revision.committer,
            message=revision.message,
            timestamp=revision.timestamp,
            timezone=revision.timezone,
            properties=dict(revision.properties),
        )

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


@dataclass(frozen=True, slots=True)
class TreeEntry:
    """One entry of a tree listing.

    Attributes:
        path: Path relative to the tree root.
        versioned: ``"V"`` versioned, ``"I"`` ignored, ``"?"`` unknown.
        kind: ``"file"``, ``"directory"``, ``"symlink"`` or ``"tree-reference"``.
    """

    path: str
    versioned: str
    kind: str
