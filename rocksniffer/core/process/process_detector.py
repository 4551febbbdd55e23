from __future__ import annotations

import logging
from typing import List, Optional

import psutil

log = logging.getLogger(__name__)

_UNRESPONSIVE = (psutil.STATUS_ZOMBIE, psutil.STATUS_STOPPED)


def normalize_process_name(name: str) -> str:
    n = name.strip().lower()
    if n.endswith(".exe"):
        n = n[:-4]
    return n


class ProcessHandle:
    """A located target process. Wraps psutil.Process."""

    def __init__(self, process: psutil.Process, name: Optional[str] = None) -> None:
        self._process: Optional[psutil.Process] = process
        self.pid = process.pid
        self.name = name

    def has_exited(self) -> bool:
        proc = self._process
        if proc is None:
            return True
        try:
            return not proc.is_running() or proc.status() == psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return True
        except psutil.AccessDenied:
            # Still listed but not inspectable: treat as alive
            return False

    def is_responding(self) -> bool:
        proc = self._process
        if proc is None:
            return False
        try:
            return proc.status() not in _UNRESPONSIVE
        except psutil.NoSuchProcess:
            return False
        except psutil.AccessDenied:
            return True

    def dispose(self) -> None:
        self._process = None

    def __repr__(self) -> str:
        return f"ProcessHandle(pid={self.pid}, name={self.name!r})"


def find_processes(name: str) -> List[ProcessHandle]:
    target = normalize_process_name(name)
    found: List[ProcessHandle] = []
    for p in psutil.process_iter(attrs=["name"]):
        try:
            n = p.info.get("name")
            if n and normalize_process_name(str(n)) == target:
                found.append(ProcessHandle(p, name=str(n)))
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
    log.debug("Process lookup for %s matched %d process(es)", name, len(found))
    return found
