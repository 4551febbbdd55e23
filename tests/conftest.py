"""Test configuration."""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rocksniffer.core.snapshot.types import (  # noqa: E402
    LivePerformance,
    SongIdentity,
    ToolkitInfo,
)


class FakeHandle:
    """Stands in for a ProcessHandle; exits after `alive_checks` liveness polls."""

    def __init__(self, pid: int = 4242, alive_checks: Optional[int] = None, responding: bool = True) -> None:
        self.pid = pid
        self.name = "Rocksmith2014.exe"
        self._alive_checks = alive_checks
        self._responding = responding
        self.exit_checks = 0
        self.disposed = False

    def has_exited(self) -> bool:
        self.exit_checks += 1
        if self._alive_checks is None:
            return False
        return self.exit_checks > self._alive_checks

    def is_responding(self) -> bool:
        return self._responding

    def dispose(self) -> None:
        self.disposed = True


class FakeSniffer:
    instances: List["FakeSniffer"] = []

    def __init__(self, process, cache=None) -> None:
        self.process = process
        self.cache = cache
        self.song_cb = None
        self.readout_cb = None
        self.stopped = threading.Event()
        FakeSniffer.instances.append(self)

    def on_song_changed(self, cb) -> None:
        self.song_cb = cb

    def on_memory_readout(self, cb) -> None:
        self.readout_cb = cb

    def stop(self) -> None:
        self.stopped.set()


@pytest.fixture(autouse=True)
def reset_fake_sniffers():
    FakeSniffer.instances = []
    yield
    FakeSniffer.instances = []


@pytest.fixture
def song() -> SongIdentity:
    return SongIdentity(
        song_id="FooBarSong",
        artist_name="Bar",
        song_name="Foo",
        album_name="Baz",
        album_year=2020,
        song_length=185.2,
        toolkit=ToolkitInfo(version="2.9.2", author="charter", package_version="3", comment="dd"),
    )


@pytest.fixture
def performance() -> LivePerformance:
    return LivePerformance(
        song_timer=61.4,
        total_notes_hit=42,
        total_notes_missed=8,
        current_hit_streak=3,
        current_miss_streak=0,
        highest_hit_streak=20,
    )
