"""Obtaining transports for URLs and local paths."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from breezybridge.capabilities.generic import Transport
from breezybridge.runtime import import_core

__all__ = [
    "get_transport",
    "get_transport_from_path",
]


def get_transport(
    url: str, possible_transports: Sequence[Transport] | None = None
) -> Transport:
    """Return a transport for *url*.

    Args:
        url: URL or local path.
        possible_transports: Already connected transports the runtime may
            reuse instead of opening a new connection.

    Raises:
        TransportError: If no transport supports the URL scheme.
    """
    kwargs = {}
    if possible_transports is not None:
        kwargs["possible_transports"] = list(possible_transports)
    return Transport(import_core("transport").call("get_transport", (url,), kwargs))


def get_transport_from_path(path: str | Path) -> Transport:
    return Transport(
        import_core("transport").call("get_transport_from_path", (str(path),))
    )
