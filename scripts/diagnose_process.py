"""
Diagnostic script for target process detection.
Run this to verify the game process is visible to RockSniffer.

Expected behavior:
- Lists every process matching the name (default: Rocksmith2014)
- Shows whether each one would be picked up by the supervisor
"""

import sys
import os
import logging

# Add parent directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import psutil

from rocksniffer.core.process.process_detector import find_processes

logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
)


def main() -> int:
    name = sys.argv[1] if len(sys.argv) > 1 else "Rocksmith2014"

    print("=" * 60)
    print(f"Process detection: {name}")
    print("=" * 60)
    print()

    handles = find_processes(name)
    if not handles:
        print("No matching process found")
        print("   Is the game running? Process names are matched without '.exe'")
        return 1

    for idx, handle in enumerate(handles):
        try:
            status = psutil.Process(handle.pid).status()
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            status = f"unavailable ({e.__class__.__name__})"
        usable = not handle.has_exited() and handle.is_responding()
        marker = "<- would be supervised" if idx == 0 and usable else ""
        print(f"[{idx}] pid={handle.pid:<8} name={handle.name:<24} status={status:<12} "
              f"responding={handle.is_responding()} {marker}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
