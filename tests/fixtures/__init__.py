"""Shared test fixtures for the breezybridge test suite.

Available Fixtures
==================

Runtime (from tests/fixtures/runtime.py)
----------------------------------------

Fixtures:
    fake_core: Registers a ``fakebrz`` module with a supported
        ``version_info`` in ``sys.modules``.

    fake_settings: BridgeSettings pointing at ``fakebrz`` with no backends
        and cache warming disabled.

    fresh_runtime: An UNINITIALIZED Runtime installed as the process-wide
        runtime for the duration of the test.

    ready_runtime: ``fresh_runtime`` initialized with ``fake_settings``.

    breezy_runtime: ``fresh_runtime`` initialized against the real Breezy;
        skips the test when Breezy is not installed.

Helpers:
    register_module: Register a throwaway module (e.g. ``fakebrz.controldir``).

Fake runtime objects (from tests/fixtures/fakes.py)
---------------------------------------------------

Classes:
    FakeBranch, FakeControlDir, FakeRepository, FakeTree, FakeWorkingTree,
    FakeTransport, FakeForge, FakeProposal, FakeFormat, FakeTags, FakeLock:
        In-memory objects exposing the subset of the runtime API the
        wrappers call.

    NotBranchError, PermissionDenied, NoSuchFile, NoSuchTag, NotLocalUrl,
    NotStacked: Exception types named like the runtime's own.

Fixtures:
    isolated_translator (autouse): A fresh ExceptionTranslator per test,
        with the fake exception types registered.

Repositories (from tests/fixtures/repositories.py)
--------------------------------------------------

Fixtures:
    git_binary: Skips the test when no ``git`` executable is available.

    gitpython_repo: A git repository with one commit, created by GitPython
        without going through the bridge.

Example:
    >>> def test_revno(ready_runtime):
    ...     branch = GenericBranch(ObjectHandle(FakeBranch(revisions=[b"r1"])))
    ...     assert branch.revno() == 1
"""

from __future__ import annotations
