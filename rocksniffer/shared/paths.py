from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "RockSniffer"
APP_VERSION = "0.1.3"

ALBUM_COVER_FILENAME = "album_cover.jpeg"

def app_data_dir() -> Path:
    base = os.environ.get("APPDATA") or str(Path.home())
    return Path(base) / APP_NAME

def config_path() -> Path:
    return app_data_dir() / "config.json"

def cache_dir() -> Path:
    return app_data_dir() / "cache"

def logs_dir() -> Path:
    return app_data_dir() / "logs"

def log_path() -> Path:
    return logs_dir() / "app.log"

def album_cover_path(output_dir: Path) -> Path:
    return output_dir / ALBUM_COVER_FILENAME

def ensure_app_dirs() -> None:
    app_data_dir().mkdir(parents=True, exist_ok=True)
    cache_dir().mkdir(parents=True, exist_ok=True)
    logs_dir().mkdir(parents=True, exist_ok=True)
