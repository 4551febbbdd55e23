"""
Steady-state render driver for one supervised process lifetime.

Each tick renders every configured output from the current snapshot and
writes it through the LockedWriter. Sniffer callbacks only swap snapshot
values (and write album art right away); they never render text outputs.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional, Sequence

from rocksniffer.shared.paths import album_cover_path

from ..output.template import TemplateRenderer
from ..output.writer import LockedWriter
from ..process.process_detector import ProcessHandle
from ..snapshot.holder import SnapshotHolder
from ..snapshot.types import LivePerformance, OutputSpec, SongIdentity
from ..sniffing.types import AddonService, ArtifactCache, SnifferFactory

log = logging.getLogger(__name__)


class RenderLoop:
    def __init__(
        self,
        outputs: Sequence[OutputSpec],
        renderer: TemplateRenderer,
        writer: LockedWriter,
        state: SnapshotHolder,
        sniffer_factory: SnifferFactory,
        *,
        output_dir: Path,
        tick_interval: float = 1.0,
        stop_event: Optional[threading.Event] = None,
        cache: Optional[ArtifactCache] = None,
        addon_service: Optional[AddonService] = None,
    ) -> None:
        self._outputs = tuple(outputs)
        self._renderer = renderer
        self._writer = writer
        self._state = state
        self._sniffer_factory = sniffer_factory
        self._output_dir = output_dir
        self._tick_interval = tick_interval
        self._stop_evt = stop_event or threading.Event()
        self._cache = cache
        self._addon_service = addon_service

    @property
    def album_cover_path(self) -> Path:
        return album_cover_path(self._output_dir)

    def render_outputs(self) -> None:
        snapshot = self._state.snapshot()
        for spec in self._outputs:
            self._writer.write_bytes(
                spec.destination(self._output_dir),
                self._renderer.render(spec, snapshot),
            )

    def clear(self) -> None:
        """Render every output against the default snapshot and blank the cover."""
        self._state.reset()
        self.render_outputs()
        self._writer.write_image(self.album_cover_path, None)

    def run(self, handle: ProcessHandle) -> None:
        """Tick until the process exits or shutdown is requested."""
        self.clear()

        sniffer = self._sniffer_factory(handle, self._cache)
        sniffer.on_song_changed(self._on_song_changed)
        sniffer.on_memory_readout(self._on_memory_readout)

        if self._addon_service is not None:
            self._addon_service.set_sniffer(sniffer)

        try:
            while not self._stop_evt.is_set():
                self.render_outputs()
                self._stop_evt.wait(self._tick_interval)
                if handle.has_exited():
                    log.debug("Process %s has exited", handle)
                    break
        finally:
            sniffer.stop()

        self.clear()

    def _on_song_changed(self, identity: SongIdentity) -> None:
        self._state.set_identity(identity)
        log.debug("Song changed: %r", identity)
        self._writer.write_image(self.album_cover_path, identity.album_art)

    def _on_memory_readout(self, performance: LivePerformance) -> None:
        self._state.set_performance(performance)
