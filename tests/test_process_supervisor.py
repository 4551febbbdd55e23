"""Tests for target process supervision."""

from __future__ import annotations

import threading
import time

from conftest import FakeHandle

from rocksniffer.core.process.supervisor import ProcessSupervisor, SupervisorState


class ScriptedLookup:
    """Returns the scripted results in order, then repeats the last one."""

    def __init__(self, *results) -> None:
        self._results = list(results)
        self.calls = []

    def __call__(self, name: str):
        self.calls.append((name, time.monotonic()))
        if len(self._results) > 1:
            return self._results.pop(0)
        return self._results[0]


def test_acquire_returns_only_after_process_appears() -> None:
    handle = FakeHandle()
    lookup = ScriptedLookup([], [], [handle])
    supervisor = ProcessSupervisor("Rocksmith2014", lookup=lookup, retry_interval=0.05)

    started = time.monotonic()
    assert supervisor.acquire_process("Rocksmith2014") is handle
    elapsed = time.monotonic() - started

    assert len(lookup.calls) == 3
    assert all(name == "Rocksmith2014" for name, _ in lookup.calls)
    # Two misses, each followed by one full retry interval
    assert elapsed >= 0.08
    gaps = [b[1] - a[1] for a, b in zip(lookup.calls, lookup.calls[1:])]
    assert all(gap >= 0.04 for gap in gaps)


def test_acquire_skips_exited_and_unresponsive_processes() -> None:
    exited = FakeHandle(pid=1, alive_checks=0)
    hung = FakeHandle(pid=2, responding=False)
    good = FakeHandle(pid=3)
    lookup = ScriptedLookup([exited], [hung], [good])
    supervisor = ProcessSupervisor("Rocksmith2014", lookup=lookup, retry_interval=0.01)

    assert supervisor.acquire_process("Rocksmith2014") is good
    assert len(lookup.calls) == 3


def test_acquire_logs_found_transition_once(caplog) -> None:
    lookup = ScriptedLookup([], [FakeHandle(pid=77)])
    supervisor = ProcessSupervisor("Rocksmith2014", lookup=lookup, retry_interval=0.01)

    with caplog.at_level("INFO"):
        supervisor.acquire_process("Rocksmith2014")

    found = [r for r in caplog.records if "found" in r.message]
    assert len(found) == 1
    assert "77" in found[0].message


def test_acquire_returns_none_after_shutdown() -> None:
    lookup = ScriptedLookup([])
    supervisor = ProcessSupervisor("Rocksmith2014", lookup=lookup, retry_interval=0.01)
    result = {}

    thread = threading.Thread(
        target=lambda: result.setdefault("handle", supervisor.acquire_process("Rocksmith2014")),
        daemon=True,
    )
    thread.start()
    time.sleep(0.05)
    supervisor.shutdown()
    thread.join(timeout=2)

    assert not thread.is_alive()
    assert result["handle"] is None


def test_shutdown_interrupts_long_retry_wait() -> None:
    supervisor = ProcessSupervisor("Rocksmith2014", lookup=ScriptedLookup([]), retry_interval=60.0)
    thread = threading.Thread(target=supervisor.acquire_process, args=("Rocksmith2014",), daemon=True)
    thread.start()
    time.sleep(0.05)

    started = time.monotonic()
    supervisor.shutdown()
    thread.join(timeout=2)
    assert not thread.is_alive()
    assert time.monotonic() - started < 1.0


def test_run_restarts_search_after_process_vanishes(caplog) -> None:
    first = FakeHandle(pid=1)
    second = FakeHandle(pid=2)
    lookup = ScriptedLookup([first], [], [second])
    supervisor = ProcessSupervisor("Rocksmith2014", lookup=lookup, retry_interval=0.01)

    sessions = []
    searches = []
    states = []

    def session(handle) -> None:
        states.append(supervisor.state)
        sessions.append(handle)
        if len(sessions) == 2:
            supervisor.shutdown()

    def on_searching() -> None:
        searches.append(supervisor.state)

    with caplog.at_level("INFO"):
        supervisor.run(session, on_searching=on_searching)

    assert sessions == [first, second]
    assert first.disposed and second.disposed
    assert states == [SupervisorState.SUPERVISING, SupervisorState.SUPERVISING]
    assert searches == [SupervisorState.SEARCHING, SupervisorState.SEARCHING]
    assert supervisor.state is SupervisorState.SEARCHING
    assert sum("has vanished" in r.message for r in caplog.records) == 1


def test_run_disposes_handle_when_session_raises() -> None:
    handle = FakeHandle()
    supervisor = ProcessSupervisor("Rocksmith2014", lookup=ScriptedLookup([handle]), retry_interval=0.01)

    def session(h) -> None:
        raise RuntimeError("unexpected")

    try:
        supervisor.run(session)
    except RuntimeError:
        pass
    else:
        raise AssertionError("session error was swallowed")
    assert handle.disposed


def test_run_returns_immediately_when_already_shut_down() -> None:
    lookup = ScriptedLookup([FakeHandle()])
    supervisor = ProcessSupervisor("Rocksmith2014", lookup=lookup, retry_interval=0.01)
    supervisor.shutdown()
    supervisor.run(lambda handle: None)
    assert lookup.calls == []
