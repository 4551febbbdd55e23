import logging
import platform
import signal
import struct

from rocksniffer.shared.paths import APP_NAME, APP_VERSION, ensure_app_dirs
from rocksniffer.shared.store import ConfigStore
from rocksniffer.core.logging_ import apply_debug_settings, setup_logging
from .app import SnifferApp

log = logging.getLogger(__name__)


def main() -> None:
    ensure_app_dirs()
    # Handlers first so a rejected configuration file is reported
    setup_logging()
    log.info("%s %s (%dbits) on %s", APP_NAME, APP_VERSION, struct.calcsize("P") * 8, platform.system())

    store = ConfigStore()
    cfg = store.load()
    apply_debug_settings(cfg.debug_settings)
    log.info("Configuration loaded from %s", store.path())

    app = SnifferApp(cfg)

    # Ctrl+C stops the supervisor after the current wait
    def signal_handler(sig, frame):
        log.info("Received interrupt signal (Ctrl+C), shutting down...")
        app.shutdown()

    if hasattr(signal, 'SIGINT'):
        signal.signal(signal.SIGINT, signal_handler)

    try:
        app.run()
    except Exception:
        log.exception("Encountered unhandled exception")
        raise


if __name__ == "__main__":
    main()
