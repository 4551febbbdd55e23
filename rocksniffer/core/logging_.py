from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from rocksniffer.shared.config import DebugSettings
from rocksniffer.shared.paths import log_path, ensure_app_dirs


def setup_logging(debug_settings: Optional[DebugSettings] = None) -> None:
    ensure_app_dirs()
    root = logging.getLogger()
    root.setLevel(logging.INFO)

    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

        ch = logging.StreamHandler()
        ch.setLevel(logging.DEBUG)
        ch.setFormatter(fmt)
        root.addHandler(ch)

        fh = RotatingFileHandler(str(log_path()), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    apply_debug_settings(debug_settings or DebugSettings())


def apply_debug_settings(debug_settings: DebugSettings) -> None:
    for name in debug_settings.debug_loggers():
        logging.getLogger(name).setLevel(logging.DEBUG)
