from __future__ import annotations

import threading

from .types import LivePerformance, SongIdentity, StateSnapshot


class SnapshotHolder:
    """
    Current song identity and live performance, shared between the sniffer
    callbacks and the render tick.

    Each channel is swapped as a whole immutable value under a lock, so a
    reader sees either the previous or the new value of a channel.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._identity = SongIdentity()
        self._performance = LivePerformance()

    @property
    def identity(self) -> SongIdentity:
        with self._lock:
            return self._identity

    @property
    def performance(self) -> LivePerformance:
        with self._lock:
            return self._performance

    def set_identity(self, identity: SongIdentity) -> None:
        with self._lock:
            self._identity = identity

    def set_performance(self, performance: LivePerformance) -> None:
        with self._lock:
            self._performance = performance

    def snapshot(self) -> StateSnapshot:
        with self._lock:
            return StateSnapshot(identity=self._identity, performance=self._performance)

    def reset(self) -> None:
        with self._lock:
            self._identity = SongIdentity()
            self._performance = LivePerformance()
