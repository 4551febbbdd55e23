"""
Console application wiring: configuration, output pipeline and the
process supervisor.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from rocksniffer.shared.config import AppConfig
from rocksniffer.shared.paths import cache_dir
from rocksniffer.core.output.template import TemplateRenderer
from rocksniffer.core.output.writer import LockedWriter
from rocksniffer.core.process.supervisor import ProcessSupervisor
from rocksniffer.core.render.loop import RenderLoop
from rocksniffer.core.snapshot.holder import SnapshotHolder
from rocksniffer.core.sniffing.types import AddonService, ArtifactCache, load_object

log = logging.getLogger(__name__)


def build_addon_service(cfg: AppConfig) -> Optional[AddonService]:
    settings = cfg.addon_settings
    if not settings.enable_addons:
        return None
    if not settings.service:
        log.warning("Addons are enabled but no addon service is configured")
        return None

    try:
        factory = load_object(settings.service)
        return factory(settings.ip_address, settings.port)
    except OSError as e:
        log.error("Please verify that the IP address is valid and the port is not already in use")
        log.error("Could not start addon service: %s", e)
    except Exception:
        log.exception("Could not start addon service")
    return None


def build_cache(cfg: AppConfig) -> Optional[ArtifactCache]:
    if not cfg.sniffer_settings.cache:
        return None
    factory = load_object(cfg.sniffer_settings.cache)
    return factory(cache_dir())


class SnifferApp:
    def __init__(self, cfg: AppConfig, base_dir: Optional[Path] = None) -> None:
        self.cfg = cfg
        interval = cfg.sniffer_settings.poll_interval_ms / 1000.0

        self.output_dir = (base_dir or Path.cwd()) / cfg.output_settings.output_dir
        self.stop_event = threading.Event()

        self.writer = LockedWriter()
        self.state = SnapshotHolder()
        self.renderer = TemplateRenderer(
            time_format=cfg.format_settings.time_format,
            percentage_format=cfg.format_settings.percentage_format,
        )
        self.render_loop = RenderLoop(
            outputs=cfg.to_output_specs(),
            renderer=self.renderer,
            writer=self.writer,
            state=self.state,
            sniffer_factory=load_object(cfg.sniffer_settings.factory),
            output_dir=self.output_dir,
            tick_interval=interval,
            stop_event=self.stop_event,
            cache=build_cache(cfg),
            addon_service=build_addon_service(cfg),
        )
        self.supervisor = ProcessSupervisor(
            cfg.sniffer_settings.process_name,
            retry_interval=interval,
            stop_event=self.stop_event,
        )

    def run(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.supervisor.run(self.render_loop.run, on_searching=self.render_loop.clear)

    def shutdown(self) -> None:
        self.supervisor.shutdown()
