"""
Target process supervision.

State machine: SEARCHING -> SUPERVISING -> SEARCHING -> ...

The supervisor never gives up looking for the target process; it only
returns once shutdown() is called.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Callable, List, Optional

from .process_detector import ProcessHandle, find_processes

log = logging.getLogger(__name__)

ProcessLookup = Callable[[str], List[ProcessHandle]]


class SupervisorState(enum.Enum):
    SEARCHING = "SEARCHING"
    SUPERVISING = "SUPERVISING"


class ProcessSupervisor:
    def __init__(
        self,
        process_name: str,
        lookup: ProcessLookup = find_processes,
        retry_interval: float = 1.0,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        self._process_name = process_name
        self._lookup = lookup
        self._retry_interval = retry_interval
        self._stop_evt = stop_event or threading.Event()
        self._lock = threading.Lock()
        self._state = SupervisorState.SEARCHING

    @property
    def state(self) -> SupervisorState:
        with self._lock:
            return self._state

    @property
    def stop_event(self) -> threading.Event:
        return self._stop_evt

    def shutdown(self) -> None:
        self._stop_evt.set()

    def _set_state(self, state: SupervisorState) -> None:
        with self._lock:
            prev, self._state = self._state, state
        if prev != state:
            log.debug("Supervisor state %s -> %s", prev.value, state.value)

    def acquire_process(self, name: str) -> Optional[ProcessHandle]:
        """
        Block until a live, responding process called `name` is found.

        Retries every retry_interval seconds with no limit. Returns None
        only when shutdown was requested.
        """
        while not self._stop_evt.is_set():
            processes = self._lookup(name)

            if processes:
                # First match only, like the process table lists it
                handle = processes[0]
                if not handle.has_exited() and handle.is_responding():
                    log.info("%s found (pid %s)! Sniffing...", name, handle.pid)
                    return handle

            self._stop_evt.wait(self._retry_interval)
        return None

    def run(
        self,
        session: Callable[[ProcessHandle], None],
        on_searching: Optional[Callable[[], None]] = None,
    ) -> None:
        """Supervise the target process until shutdown, across restarts."""
        while not self._stop_evt.is_set():
            self._set_state(SupervisorState.SEARCHING)
            if on_searching is not None:
                on_searching()
            log.info("Waiting for %s", self._process_name)

            handle = self.acquire_process(self._process_name)
            if handle is None:
                break

            self._set_state(SupervisorState.SUPERVISING)
            try:
                session(handle)
            finally:
                handle.dispose()

            if not self._stop_evt.is_set():
                log.info("This is rather unfortunate, the %s process has vanished :/", self._process_name)

        self._set_state(SupervisorState.SEARCHING)
        log.info("Process supervisor stopped")
