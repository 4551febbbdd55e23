from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass(frozen=True)
class ToolkitInfo:
    """Packaging details of a custom song."""
    version: str = ""
    author: str = ""
    package_version: str = ""
    comment: str = ""


@dataclass(frozen=True)
class SongIdentity:
    """
    Metadata of the currently loaded song.

    The default instance describes "no song loaded". Values are replaced
    as a whole whenever the sniffer reports a song change.
    """
    song_id: str = ""
    artist_name: str = ""
    song_name: str = ""
    album_name: str = ""
    album_year: int = 0
    song_length: float = 0.0  # seconds
    toolkit: Optional[ToolkitInfo] = None
    # Raw encoded image bytes or a PIL image
    album_art: Any = field(default=None, compare=False, repr=False)

    def is_valid(self) -> bool:
        return bool(self.song_name.strip()) and bool(self.artist_name.strip())


@dataclass(frozen=True)
class LivePerformance:
    """In-game telemetry from a single memory readout."""
    song_timer: float = 0.0  # seconds
    total_notes_hit: int = 0
    total_notes_missed: int = 0
    current_hit_streak: int = 0
    current_miss_streak: int = 0
    highest_hit_streak: int = 0
    tracked_total_notes: Optional[int] = None

    @property
    def total_notes(self) -> int:
        if self.tracked_total_notes is not None:
            return self.tracked_total_notes
        return self.total_notes_hit + self.total_notes_missed

    @property
    def current_streak(self) -> int:
        return self.current_hit_streak - self.current_miss_streak

    @property
    def accuracy(self) -> float:
        """Fraction of notes hit, 0.0 until something was hit."""
        total = self.total_notes
        if self.total_notes_hit <= 0 or total <= 0:
            return 0.0
        return self.total_notes_hit / total


@dataclass(frozen=True)
class StateSnapshot:
    identity: SongIdentity = field(default_factory=SongIdentity)
    performance: LivePerformance = field(default_factory=LivePerformance)


@dataclass(frozen=True)
class OutputSpec:
    """One configured output file and the template rendered into it."""
    filename: str
    template: str

    def destination(self, output_dir: Path) -> Path:
        return output_dir / self.filename
