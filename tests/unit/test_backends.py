"""Unit tests for the git and Bazaar backend wrappers."""

from __future__ import annotations

from typing import Any

import pytest

from breezybridge.backends import (
    BazaarBranch,
    GitBranch,
    GitRepository,
    branch_class_for,
    wrap_branch,
    wrap_repository,
)
from breezybridge.backends import bazaar, git
from breezybridge.capabilities import (
    GenericBranch,
    GenericControlDir,
    GenericRepository,
)
from breezybridge.constants import NULL_REVISION, ZERO_SHA
from breezybridge.exceptions import GenericError
from breezybridge.handle import ObjectHandle
from breezybridge.models import VcsType
from breezybridge.runtime import Runtime
from tests.fixtures.fakes import (
    FakeBranch,
    FakeControlDir,
    FakeFormat,
    FakeRepository,
    FakeWorkingTree,
)
from tests.fixtures.runtime import FAKE_CORE, register_module

SHA = b"a" * 40


class RecordingControlDir(FakeControlDir):
    """A control directory that remembers what was created in it."""

    def __init__(self, location: str, fmt: FakeFormat) -> None:
        super().__init__(fmt, user_url=f"file://{location}/")
        self.location = location
        self.shared: bool | None = None
        self.tree: FakeWorkingTree | None = None

    def create_repository(self, shared: bool = False) -> FakeRepository:
        self.shared = shared
        return super().create_repository(shared)

    def create_workingtree(self) -> FakeWorkingTree:
        self.tree = FakeWorkingTree(self.location)
        return self.tree


class RegistryFormat(FakeFormat):
    def __init__(self, name: str) -> None:
        super().__init__(name.encode(), name)
        self.name = name
        self.created: list[RecordingControlDir] = []

    def initialize(self, location: str) -> RecordingControlDir:
        controldir = RecordingControlDir(location, self)
        self.created.append(controldir)
        return controldir


class FormatRegistry:
    def __init__(self) -> None:
        self.formats: dict[str, RegistryFormat] = {}

    def make_controldir(self, name: str) -> RegistryFormat:
        return self.formats.setdefault(name, RegistryFormat(name))


@pytest.fixture
def format_registry(
    ready_runtime: Runtime, monkeypatch: pytest.MonkeyPatch
) -> FormatRegistry:
    """Install a fake ``fakebrz.controldir.format_registry``."""
    registry = FormatRegistry()
    register_module(monkeypatch, f"{FAKE_CORE}.controldir", format_registry=registry)
    return registry


# =============================================================================
# Git
# =============================================================================


@pytest.mark.usefixtures("ready_runtime")
class TestGitRepository:
    """Tests for GitRepository."""

    def test_lookup_foreign_revision_id(self) -> None:
        """Test SHAs map to runtime revision ids."""
        repo = GitRepository(ObjectHandle(FakeRepository(git=True)))

        assert repo.lookup_foreign_revision_id(SHA) == b"git-v1:" + SHA

    def test_sha_is_normalized(self) -> None:
        """Test str and upper-case SHAs are accepted."""
        repo = GitRepository(ObjectHandle(FakeRepository(git=True)))

        assert repo.lookup_foreign_revision_id("A" * 40) == b"git-v1:" + SHA

    @pytest.mark.parametrize("sha", [b"abc", b"g" * 40, "z" * 40, b"a" * 41])
    def test_invalid_sha(self, sha: bytes | str) -> None:
        """Test malformed SHAs are rejected before reaching the runtime."""
        repo = GitRepository(ObjectHandle(FakeRepository(git=True)))

        with pytest.raises(ValueError, match="Not a hex git SHA-1"):
            repo.lookup_foreign_revision_id(sha)

    def test_lookup_bzr_revision_id(self) -> None:
        """Test revision ids map back to SHAs."""
        repo = GitRepository(ObjectHandle(FakeRepository(git=True)))

        assert repo.lookup_bzr_revision_id(b"git-v1:" + SHA) == SHA

    def test_null_revision_is_zero_sha(self) -> None:
        """Test the empty history maps to the all-zero SHA."""
        repo = GitRepository(ObjectHandle(FakeRepository(git=True)))

        assert repo.lookup_bzr_revision_id(NULL_REVISION) == ZERO_SHA

    def test_committer_from_config(self) -> None:
        """Test the committer is assembled from user.name and user.email."""
        repo = GitRepository(
            ObjectHandle(
                FakeRepository(
                    git=True,
                    git_config={
                        (b"user", b"name"): b"Jane Doe",
                        (b"user", b"email"): b"jane@example.com",
                    },
                )
            )
        )

        assert repo.get_committer() == "Jane Doe <jane@example.com>"

    def test_committer_missing(self) -> None:
        """Test an incomplete identity yields None."""
        repo = GitRepository(
            ObjectHandle(
                FakeRepository(git=True, git_config={(b"user", b"name"): b"Jane"})
            )
        )

        assert repo.get_committer() is None

    def test_vcs_type(self) -> None:
        """Test git repositories always report GIT."""
        assert GitRepository(ObjectHandle(FakeRepository())).vcs_type() is VcsType.GIT


@pytest.mark.usefixtures("ready_runtime")
class TestGitBranch:
    """Tests for GitBranch."""

    def test_repository_is_git(self) -> None:
        """Test the repository comes back as a GitRepository."""
        branch = GitBranch(ObjectHandle(FakeBranch(repository=FakeRepository(git=True))))

        assert isinstance(branch.repository(), GitRepository)
        assert branch.is_git()

    def test_ref(self) -> None:
        """Test the tracked ref is exposed as bytes."""
        fake = FakeBranch()
        fake.ref = b"refs/heads/main"  # type: ignore[attr-defined]

        assert GitBranch(ObjectHandle(fake)).ref == b"refs/heads/main"

    def test_head_sha(self) -> None:
        """Test head_sha maps the tip revision to a SHA."""
        branch = GitBranch(ObjectHandle(FakeBranch([b"git-v1:" + SHA])))

        assert branch.head_sha() == SHA

    def test_head_sha_empty(self) -> None:
        """Test an empty branch has the zero SHA."""
        assert GitBranch(ObjectHandle(FakeBranch())).head_sha() == ZERO_SHA


class TestGitInit:
    """Tests for git.init_repository()."""

    def test_standard(self, format_registry: FormatRegistry) -> None:
        """Test a non-bare repository uses the git format."""
        controldir = git.init_repository("/srv/new")

        assert isinstance(controldir, GenericControlDir)
        assert controldir.get_user_url() == "file:///srv/new/"
        assert list(format_registry.formats) == ["git"]

    def test_bare(self, format_registry: FormatRegistry) -> None:
        """Test bare repositories use the git-bare format."""
        git.init_repository("/srv/bare", bare=True)

        assert list(format_registry.formats) == ["git-bare"]


# =============================================================================
# Bazaar
# =============================================================================


@pytest.mark.usefixtures("ready_runtime")
class TestBazaarBranch:
    """Tests for BazaarBranch."""

    def test_nick(self) -> None:
        """Test the nickname can be read and written."""
        fake = FakeBranch()
        fake.nick = "trunk"  # type: ignore[attr-defined]
        branch = BazaarBranch(ObjectHandle(fake))

        branch.nick = "feature"

        assert branch.nick == "feature"
        assert fake.nick == "feature"  # type: ignore[attr-defined]

    def test_not_stacked(self) -> None:
        """Test an unstacked branch reports None."""
        assert BazaarBranch(ObjectHandle(FakeBranch())).get_stacked_on_url() is None

    def test_stacked(self) -> None:
        """Test a stacked branch reports its stacking URL."""

        class StackedBranch(FakeBranch):
            def get_stacked_on_url(self) -> str:
                return "bzr+ssh://example.com/trunk"

        branch = BazaarBranch(ObjectHandle(StackedBranch()))

        assert branch.get_stacked_on_url() == "bzr+ssh://example.com/trunk"

    def test_other_errors_propagate(self) -> None:
        """Test failures other than NotStacked are raised."""

        class BrokenBranch(FakeBranch):
            def get_stacked_on_url(self) -> str:
                raise RuntimeError("repository is corrupt")

        with pytest.raises(GenericError, match="corrupt"):
            BazaarBranch(ObjectHandle(BrokenBranch())).get_stacked_on_url()

    def test_append_revisions_only(self) -> None:
        """Test the append-revisions-only flag is read."""
        assert not BazaarBranch(ObjectHandle(FakeBranch())).get_append_revisions_only()


class TestBazaarInit:
    """Tests for bazaar.init_repository()."""

    def test_standalone(self, format_registry: FormatRegistry) -> None:
        """Test a standalone repository gets a branch and a tree."""
        bazaar.init_repository("/srv/bzr")

        created = format_registry.formats["2a"].created[0]
        assert created.shared is False
        assert None in created.branches
        assert created.tree is not None

    def test_without_tree(self, format_registry: FormatRegistry) -> None:
        """Test with_tree=False skips the working tree."""
        bazaar.init_repository("/srv/bzr", with_tree=False)

        created = format_registry.formats["2a"].created[0]
        assert None in created.branches
        assert created.tree is None

    def test_shared(self, format_registry: FormatRegistry) -> None:
        """Test a shared repository gets neither branch nor tree."""
        bazaar.init_repository("/srv/shared", shared=True)

        created = format_registry.formats["2a"].created[0]
        assert created.shared is True
        assert created.branches == {}
        assert created.tree is None


# =============================================================================
# Dispatch
# =============================================================================


class TestDispatch:
    """Tests for branch_class_for(), wrap_branch() and wrap_repository()."""

    @pytest.mark.parametrize(
        ("vcs", "cls"),
        [
            (VcsType.GIT, GitBranch),
            (VcsType.BAZAAR, BazaarBranch),
            (VcsType.SUBVERSION, GenericBranch),
            (VcsType.UNKNOWN, GenericBranch),
        ],
    )
    def test_branch_class_for(self, vcs: VcsType, cls: type[Any]) -> None:
        """Test each VCS gets its branch class."""
        assert branch_class_for(vcs) is cls

    @pytest.mark.parametrize(
        ("fmt", "cls"),
        [
            (FakeFormat(b"git"), GitBranch),
            (FakeFormat(None, "Bazaar-NG meta directory, format 1"), BazaarBranch),
            (FakeFormat(b"hg"), GenericBranch),
        ],
    )
    def test_wrap_branch(
        self, ready_runtime: Runtime, fmt: FakeFormat, cls: type[Any]
    ) -> None:
        """Test wrap_branch classifies by the branch's control directory."""
        fake = FakeBranch()
        FakeControlDir(fmt, branches={None: fake})

        branch = wrap_branch(ObjectHandle(fake))

        assert type(branch) is cls
        assert branch.handle.extract(lambda b: b) is fake

    @pytest.mark.parametrize(
        ("git", "cls"), [(True, GitRepository), (False, GenericRepository)]
    )
    def test_wrap_repository(
        self, ready_runtime: Runtime, git: bool, cls: type[Any]
    ) -> None:
        """Test wrap_repository picks GitRepository for git storage."""
        assert type(wrap_repository(ObjectHandle(FakeRepository(git=git)))) is cls
