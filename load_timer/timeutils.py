# load_timer/timeutils.py
from __future__ import annotations

import math
from dataclasses import dataclass

from .errors import InvalidFrameRateError


DEFAULT_FPS = 30

_MS_PER_HOUR = 3_600_000
_MS_PER_MINUTE = 60_000
_MS_PER_SECOND = 1_000


# -----------------------------
# Frame rate / rounding
# -----------------------------

def check_fps(fps) -> float:
    """Return fps as float, raising InvalidFrameRateError unless it is a finite number > 0."""
    if isinstance(fps, bool):
        raise InvalidFrameRateError(fps)
    try:
        value = float(fps)
    except (TypeError, ValueError):
        raise InvalidFrameRateError(fps) from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidFrameRateError(fps)
    return value


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


# -----------------------------
# Seconds <-> frames
# -----------------------------

def seconds_to_frames(seconds: float, fps: float) -> int:
    """Nearest frame index for a player timestamp (halves round up)."""
    return _round_half_up(float(seconds) * check_fps(fps))


def frames_to_seconds(frames: int, fps: float) -> float:
    return float(frames) / check_fps(fps)


def shift_by_frames(seconds: float, frames: int, fps: float) -> float:
    """Move a timestamp by a whole number of frames, never before 0."""
    return max(0.0, float(seconds) + frames_to_seconds(int(frames), fps))


# -----------------------------
# Timecode rendering
# -----------------------------

@dataclass(frozen=True)
class Timecode:
    frames: int
    formatted: str  # HH:MM:SS.mmm
    smart: str      # formatted without leading "00:" segments

    def to_dict(self) -> dict:
        return {"frames": self.frames, "formatted": self.formatted, "smart": self.smart}


def smart_time(time_str: str) -> str:
    """
    Drop up to two leading "00:" segments.

      00:00:05.200 -> 05.200
      00:01:05.200 -> 01:05.200
      01:00:05.200 -> 01:00:05.200
    """
    parts = time_str.split(":")
    if len(parts) > 1 and parts[0] == "00":
        parts.pop(0)
        if len(parts) > 1 and parts[0] == "00":
            parts.pop(0)
    return ":".join(parts)


def ms_to_time_str(total_ms: int) -> str:
    total_ms = int(total_ms)
    hours = total_ms // _MS_PER_HOUR
    minutes = (total_ms % _MS_PER_HOUR) // _MS_PER_MINUTE
    seconds = (total_ms % _MS_PER_MINUTE) // _MS_PER_SECOND
    ms = total_ms % _MS_PER_SECOND
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{ms:03d}"


def frames_to_timecode(frames: int, fps: float) -> Timecode:
    frames = int(frames)
    if frames < 0:
        raise ValueError(f"frames must be >= 0, got {frames}")
    total_ms = _round_half_up(frames / check_fps(fps) * 1000.0)
    formatted = ms_to_time_str(total_ms)
    return Timecode(frames=frames, formatted=formatted, smart=smart_time(formatted))


def seconds_to_timecode(seconds: float, fps: float) -> Timecode:
    return frames_to_timecode(seconds_to_frames(seconds, fps), fps)
