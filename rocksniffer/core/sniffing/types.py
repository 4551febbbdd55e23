"""
Boundary of the sniffing subsystem.

The memory reader that extracts telemetry from the game, the artifact cache
it uses and the addon notification service live outside this package. They
are plugged in through these protocols, usually by a dotted
"module:attribute" path in the configuration.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Callable, Optional, Protocol

from ..process.process_detector import ProcessHandle
from ..snapshot.types import LivePerformance, SongIdentity

SongChangedCallback = Callable[[SongIdentity], None]
MemoryReadoutCallback = Callable[[LivePerformance], None]


class ArtifactCache(Protocol):
    """Opaque song-keyed cache handed through to the sniffer."""


class Sniffer(Protocol):
    def on_song_changed(self, cb: SongChangedCallback) -> None:
        ...

    def on_memory_readout(self, cb: MemoryReadoutCallback) -> None:
        ...

    def stop(self) -> None:
        ...


SnifferFactory = Callable[[ProcessHandle, Optional[ArtifactCache]], Sniffer]


class AddonService(Protocol):
    """Notification side-channel for overlay widgets."""

    def set_sniffer(self, sniffer: Sniffer) -> None:
        ...


def load_object(path: str) -> Any:
    """Resolve a "package.module:attribute" path."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:attribute', got {path!r}")
    obj: Any = import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj
