"""On-disk repository fixtures.

Repositories here are created by GitPython, independently of the bridge,
so that the bridge's view of them can be checked against a second
implementation.
"""

from __future__ import annotations

import shutil
from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture
def git_binary() -> str:
    """Path of the git executable; skips the test when there is none."""
    path = shutil.which("git")
    if path is None:
        pytest.skip("git executable not available")
    return path


@pytest.fixture
def gitpython_repo(tmp_path: Path, git_binary: str) -> Generator[Path, None, None]:
    """Create a git repository with one commit using GitPython.

    Yields:
        Path to the repository's working tree.
    """
    from git import Repo

    repo_path = tmp_path / "gitpython"
    repo_path.mkdir()
    repo = Repo.init(repo_path)

    repo.config_writer().set_value("user", "email", "test@example.com").release()
    repo.config_writer().set_value("user", "name", "Test User").release()

    readme = repo_path / "README.md"
    readme.write_text("# Test Repo\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    repo.create_tag("v1.0")

    yield repo_path
    repo.close()


@pytest.fixture
def hg_checkout(tmp_path: Path) -> Path:
    """A directory laid out like a Mercurial repository's metadata.

    Only the files the runtime looks for when detecting the format are
    written; there is no history.
    """
    path = tmp_path / "hg"
    store = path / ".hg"
    store.mkdir(parents=True)
    (store / "requires").write_text("revlogv1\nstore\nfncache\n")
    (store / "00changelog.i").write_bytes(b"")
    return path


@pytest.fixture
def svn_checkout(tmp_path: Path) -> Path:
    """A directory laid out like a Subversion 1.7+ working copy."""
    path = tmp_path / "svn"
    admin = path / ".svn"
    admin.mkdir(parents=True)
    (admin / "entries").write_text("12\n")
    (admin / "format").write_text("12\n")
    (admin / "wc.db").write_bytes(b"")
    return path
