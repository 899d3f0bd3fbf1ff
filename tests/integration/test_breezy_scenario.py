"""End-to-end scenario against the real Breezy runtime.

Walks the path a caller takes: initialize, probe a path that does not
exist, open a real repository, then hit a permission failure and check it
surfaces as PERMISSION_DENIED with the runtime's message intact.
"""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

import breezybridge
from breezybridge import BridgeSettings, ErrorKind, VcsType
from breezybridge.exceptions import PermissionDeniedError
from breezybridge.handle import ObjectHandle
from breezybridge.runtime import InitializationState, Runtime

pytestmark = pytest.mark.integration


class ReadOnlyBranch:
    """Stands in for a branch whose storage refuses writes."""

    def set_parent(self, location: str) -> None:
        from breezy.errors import PermissionDenied

        raise PermissionDenied("/srv/locked/.bzr/branch/branch.conf")


class TestScenario:
    """init -> probe -> open -> permission failure."""

    def test_full_flow(
        self, fresh_runtime: Runtime, clean_env: None, gitpython_repo: Path
    ) -> None:
        """Test the whole flow on one runtime."""
        pytest.importorskip("breezy")

        breezybridge.init(BridgeSettings())
        assert breezybridge.state() is InitializationState.READY

        assert breezybridge.probe(gitpython_repo / "missing") is VcsType.UNKNOWN

        assert breezybridge.probe(gitpython_repo) is VcsType.GIT
        opened = breezybridge.open_branch(gitpython_repo)
        assert opened.revno() == 1

        handle = ObjectHandle(ReadOnlyBranch())
        with pytest.raises(PermissionDeniedError) as exc_info:
            handle.call("set_parent", ("https://example.com/trunk",))

        error = exc_info.value
        assert error.kind is ErrorKind.PERMISSION_DENIED
        assert "/srv/locked/.bzr/branch/branch.conf" in error.message
        assert (error.foreign_type_name or "").endswith(".PermissionDenied")

    def test_concurrent_init_and_probe(
        self, fresh_runtime: Runtime, clean_env: None, temp_dir: Path
    ) -> None:
        """Test threads racing to initialize all see one READY runtime."""
        pytest.importorskip("breezy")
        (temp_dir / "plain").mkdir()
        barrier = threading.Barrier(8)
        results: list[VcsType] = []
        errors: list[BaseException] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            try:
                breezybridge.init(BridgeSettings())
                vcs = breezybridge.probe(temp_dir / "plain")
            except breezybridge.BridgeError as e:
                with lock:
                    errors.append(e)
                return
            with lock:
                results.append(vcs)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert results == [VcsType.UNKNOWN] * 8
        assert fresh_runtime.state is InitializationState.READY
