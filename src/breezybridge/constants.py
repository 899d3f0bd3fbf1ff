"""breezybridge constants.

Single source of truth for the runtime module names, version floor and
well-known revision identifiers used throughout the bridge.
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Runtime
# =============================================================================

#: Top-level module of the embedded VCS runtime
CORE_MODULE: str = "breezy"

#: Backend modules imported during initialization
DEFAULT_BACKEND_MODULES: tuple[str, ...] = ("breezy.git", "breezy.bzr")

#: Oldest runtime release the bridge is known to work with
MINIMUM_RUNTIME_VERSION: tuple[int, int, int] = (3, 3, 0)

# =============================================================================
# Optional extensions
# =============================================================================

ExtensionName = Literal["debian", "github", "gitlab", "launchpad"]

#: Map extension toggles to the foreign modules they require
EXTENSION_MODULES: dict[ExtensionName, str] = {
    "debian": "breezy.plugins.debian",
    "github": "breezy.plugins.github",
    "gitlab": "breezy.plugins.gitlab",
    "launchpad": "breezy.plugins.launchpad",
}

# =============================================================================
# Foreign formats
# =============================================================================

#: Detection-only probers for formats the default backends cannot open:
#: ``(core submodule, prober class names, vcs value)``. The submodules are
#: optional; a runtime built without them simply cannot tell these apart.
FOREIGN_PROBERS: tuple[tuple[str, tuple[str, ...], str], ...] = (
    ("plugins.hg", ("LocalHgProber", "SmartHgProber"), "mercurial"),
    ("plugins.svn", ("SvnWorkingTreeProber", "SvnRepositoryProber"), "subversion"),
)

# =============================================================================
# Revisions
# =============================================================================

#: Revision id of the empty history
NULL_REVISION: bytes = b"null:"

#: Revision id placeholder used by the runtime for the working tree
CURRENT_REVISION: bytes = b"current:"

#: The all-zero git SHA, representing the absence of a commit
ZERO_SHA: bytes = b"0" * 40
