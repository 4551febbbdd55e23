"""
Placeholder substitution for output templates.

Templates are plain text with a fixed set of %TOKEN% placeholders. Rendering
runs two passes:

  identity pass     song identity and toolkit tokens
  performance pass  live performance tokens

If the identity pass changed the template and the current song identity is
not valid, the output is blanked and the performance pass never runs.
Unknown tokens are left as they are.
"""

from __future__ import annotations

import math
from typing import Callable, Dict

from ..snapshot.types import (
    LivePerformance,
    OutputSpec,
    SongIdentity,
    StateSnapshot,
    ToolkitInfo,
)

DEFAULT_TIME_FORMAT = "{minutes:02d}:{seconds:02d}"
DEFAULT_PERCENTAGE_FORMAT = "{0:.2f}%"

IDENTITY_TOKENS: Dict[str, Callable[["TemplateRenderer", SongIdentity], str]] = {
    "%SONG_ID%": lambda r, s: s.song_id,
    "%SONG_ARTIST%": lambda r, s: s.artist_name,
    "%SONG_NAME%": lambda r, s: s.song_name,
    "%SONG_ALBUM%": lambda r, s: s.album_name,
    "%ALBUM_YEAR%": lambda r, s: str(s.album_year),
    "%SONG_LENGTH%": lambda r, s: r.format_time(s.song_length),
}

TOOLKIT_TOKENS: Dict[str, Callable[[ToolkitInfo], str]] = {
    "%TOOLKIT_VERSION%": lambda t: t.version,
    "%TOOLKIT_AUTHOR%": lambda t: t.author,
    "%TOOLKIT_PACKAGE_VERSION%": lambda t: t.package_version,
    "%TOOLKIT_COMMENT%": lambda t: t.comment,
}

PERFORMANCE_TOKENS: Dict[str, Callable[["TemplateRenderer", LivePerformance], str]] = {
    "%SONG_TIMER%": lambda r, p: r.format_time(p.song_timer),
    "%NOTES_HIT%": lambda r, p: str(p.total_notes_hit),
    "%CURRENT_STREAK%": lambda r, p: str(p.current_streak),
    "%HIGHEST_STREAK%": lambda r, p: str(p.highest_hit_streak),
    "%NOTES_MISSED%": lambda r, p: str(p.total_notes_missed),
    "%TOTAL_NOTES%": lambda r, p: str(p.total_notes),
    "%CURRENT_ACCURACY%": lambda r, p: r.format_percentage(p.accuracy),
}


class TemplateRenderer:
    def __init__(
        self,
        time_format: str = DEFAULT_TIME_FORMAT,
        percentage_format: str = DEFAULT_PERCENTAGE_FORMAT,
    ) -> None:
        self._time_format = time_format
        self._percentage_format = percentage_format

    def format_time(self, seconds: float) -> str:
        """Format seconds, rounded up to whole seconds, with the time pattern."""
        return self._time_format.format(**time_fields(_whole_seconds(seconds)))

    def format_percentage(self, fraction: float) -> str:
        return self._percentage_format.format(fraction * 100.0)

    def render(self, spec: OutputSpec, snapshot: StateSnapshot) -> bytes:
        return self.render_text(spec, snapshot).encode("utf-8")

    def render_text(self, spec: OutputSpec, snapshot: StateSnapshot) -> str:
        text = self._identity_pass(spec.template, snapshot.identity)

        # Song tokens requested while no song is loaded: output nothing
        if text != spec.template and not snapshot.identity.is_valid():
            return ""

        return self._performance_pass(text, snapshot.performance)

    def _identity_pass(self, text: str, identity: SongIdentity) -> str:
        for token, value in IDENTITY_TOKENS.items():
            if token in text:
                text = text.replace(token, value(self, identity))

        if identity.toolkit is not None:
            for token, toolkit_value in TOOLKIT_TOKENS.items():
                if token in text:
                    text = text.replace(token, toolkit_value(identity.toolkit))
        return text

    def _performance_pass(self, text: str, performance: LivePerformance) -> str:
        for token, value in PERFORMANCE_TOKENS.items():
            if token in text:
                text = text.replace(token, value(self, performance))
        return text


def time_fields(total: int) -> Dict[str, int]:
    """Named fields available to time format patterns."""
    return {
        "hours": total // 3600,
        "minutes": (total // 60) % 60,
        "seconds": total % 60,
        "total_minutes": total // 60,
        "total_seconds": total,
    }


def _whole_seconds(seconds: float) -> int:
    try:
        numeric = float(seconds)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(numeric) or numeric <= 0:
        return 0
    return int(math.ceil(numeric))
