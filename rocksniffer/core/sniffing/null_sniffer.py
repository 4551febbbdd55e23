from __future__ import annotations

import logging
from typing import Optional

from ..process.process_detector import ProcessHandle
from .types import ArtifactCache, MemoryReadoutCallback, SongChangedCallback

log = logging.getLogger(__name__)


class NullSniffer:
    """
    Sniffer that never reports anything.

    Used until a memory reader is configured; outputs stay in their
    "no song loaded" rendering.
    """

    def __init__(self, process: ProcessHandle, cache: Optional[ArtifactCache] = None) -> None:
        self._process = process
        self._song_cb: Optional[SongChangedCallback] = None
        self._readout_cb: Optional[MemoryReadoutCallback] = None
        log.warning("No memory reader configured for %s, outputs will stay empty", process)

    def on_song_changed(self, cb: SongChangedCallback) -> None:
        self._song_cb = cb

    def on_memory_readout(self, cb: MemoryReadoutCallback) -> None:
        self._readout_cb = cb

    def stop(self) -> None:
        self._song_cb = None
        self._readout_cb = None
