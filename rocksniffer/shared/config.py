from __future__ import annotations

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from rocksniffer.core.output.template import DEFAULT_PERCENTAGE_FORMAT, DEFAULT_TIME_FORMAT, time_fields
from rocksniffer.core.snapshot.types import OutputSpec


class OutputFile(BaseModel):
    filename: str
    format: str

    def to_spec(self) -> OutputSpec:
        return OutputSpec(filename=self.filename, template=self.format)


class OutputSettings(BaseModel):
    output_dir: str = "output"
    output: List[OutputFile] = Field(default_factory=lambda: [
        OutputFile(filename="song_details.txt", format="%SONG_ARTIST% - %SONG_NAME% (%ALBUM_YEAR%)"),
        OutputFile(filename="song_timer.txt", format="%SONG_TIMER%/%SONG_LENGTH%"),
        OutputFile(filename="notes.txt", format="%NOTES_HIT%/%TOTAL_NOTES%"),
        OutputFile(filename="accuracy.txt", format="%CURRENT_ACCURACY%"),
    ])


class FormatSettings(BaseModel):
    # str.format patterns, see TemplateRenderer.format_time
    time_format: str = DEFAULT_TIME_FORMAT
    percentage_format: str = DEFAULT_PERCENTAGE_FORMAT

    @field_validator("time_format")
    @classmethod
    def _check_time_format(cls, v: str) -> str:
        return _check_pattern(v, **time_fields(0))

    @field_validator("percentage_format")
    @classmethod
    def _check_percentage_format(cls, v: str) -> str:
        return _check_pattern(v, 0.0)


class AddonSettings(BaseModel):
    enable_addons: bool = False
    ip_address: str = "127.0.0.1"
    port: int = 9938
    service: Optional[str] = None  # "module:attribute", called with (ip_address, port)


class SnifferSettings(BaseModel):
    process_name: str = "Rocksmith2014"
    factory: str = "rocksniffer.core.sniffing.null_sniffer:NullSniffer"
    cache: Optional[str] = None  # "module:attribute", called with the cache directory
    poll_interval_ms: int = Field(1000, gt=0)


class DebugSettings(BaseModel):
    debug_state_machine: bool = False
    debug_song_details: bool = False
    debug_cache: bool = False
    debug_memory_readout: bool = False
    debug_system_handle_query: bool = False
    debug_file_detail_query: bool = False

    def debug_loggers(self) -> List[str]:
        """Loggers turned up to DEBUG by the enabled switches."""
        switches = [
            (self.debug_state_machine, "rocksniffer.core.process.supervisor"),
            (self.debug_system_handle_query, "rocksniffer.core.process.process_detector"),
            (self.debug_song_details, "rocksniffer.core.render.loop"),
            (self.debug_file_detail_query, "rocksniffer.core.output"),
            # The cache is owned by the sniffer, so it logs under it
            (self.debug_memory_readout or self.debug_cache, "rocksniffer.core.sniffing"),
        ]
        return [name for enabled, name in switches if enabled]


def _check_pattern(pattern: str, *args, **kwargs) -> str:
    # Formats the same arguments TemplateRenderer passes
    try:
        pattern.format(*args, **kwargs)
    except (KeyError, IndexError, ValueError, AttributeError, TypeError) as e:
        raise ValueError(f"invalid format pattern {pattern!r}: {e!r}") from e
    return pattern


class AppConfig(BaseModel):
    output_settings: OutputSettings = Field(default_factory=OutputSettings)
    format_settings: FormatSettings = Field(default_factory=FormatSettings)
    addon_settings: AddonSettings = Field(default_factory=AddonSettings)
    sniffer_settings: SnifferSettings = Field(default_factory=SnifferSettings)
    debug_settings: DebugSettings = Field(default_factory=DebugSettings)

    def to_output_specs(self) -> List[OutputSpec]:
        return [of.to_spec() for of in self.output_settings.output]
