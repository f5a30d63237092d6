# load_timer/domain.py
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple


# -----------------------------
# Constants
# -----------------------------

EDGE_START = "start"
EDGE_END = "end"
EDGES = (EDGE_START, EDGE_END)

KIND_RUN = "run"
KIND_LOAD = "load"

RUN_ITEM_ID = "run"
RUN_LABEL = "Run"
_LOAD_ITEM_PREFIX = "load-"

WARNING_ERROR = "error"
WARNING_OVERLAP = "overlap"
WARNING_INVALID_DURATION = "invalid-duration"
WARNING_OUTSIDE_RUN = "outside-run"


def check_edge(edge: str) -> str:
    e = str(edge or "").strip().lower()
    if e not in EDGES:
        raise ValueError(f"edge must be one of {EDGES}, got {edge!r}")
    return e


def load_item_id(load_id: int) -> str:
    return f"{_LOAD_ITEM_PREFIX}{int(load_id)}"


def parse_load_item_id(item_id: str) -> Optional[int]:
    """Load id from an item id ("load-7" -> 7); None for the run or junk."""
    s = str(item_id or "")
    if not s.startswith(_LOAD_ITEM_PREFIX):
        return None
    try:
        return int(s[len(_LOAD_ITEM_PREFIX):])
    except ValueError:
        return None


def load_label(position: int) -> str:
    """Positional label for the load at 0-based position."""
    return f"Load #{position + 1}"


def _opt_time(value) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"not a time value: {value!r}")
    t = float(value)
    if not math.isfinite(t) or t < 0:
        raise ValueError(f"time must be a finite number >= 0, got {value!r}")
    return t


def _finite(value) -> float:
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    v = float(value)
    if not math.isfinite(v):
        raise ValueError(f"not a finite number: {value!r}")
    return v


# -----------------------------
# Core Dataclasses
# -----------------------------

@dataclass(frozen=True)
class Load:
    """
    A marked loading-screen interval, in player seconds.

    None means "not marked yet". Identity is `id`; list position is only
    used for labels ("Load #3").
    """
    id: int
    start_time: Optional[float] = None
    end_time: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    def time_at(self, edge: str) -> Optional[float]:
        return self.start_time if check_edge(edge) == EDGE_START else self.end_time

    def with_edge(self, edge: str, time: Optional[float]) -> "Load":
        t = _opt_time(time)
        if check_edge(edge) == EDGE_START:
            return replace(self, start_time=t)
        return replace(self, end_time=t)

    def to_dict(self) -> Dict:
        return {"id": int(self.id), "startTime": self.start_time, "endTime": self.end_time}

    @staticmethod
    def from_dict(d: Dict) -> "Load":
        return Load(
            id=int(d["id"]),
            start_time=_opt_time(d.get("startTime")),
            end_time=_opt_time(d.get("endTime")),
        )


@dataclass(frozen=True)
class RunMarker:
    """Run start or end: raw marked time plus a manual correction offset (seconds)."""
    time: Optional[float] = None
    offset: float = 0.0

    @property
    def adjusted_time(self) -> Optional[float]:
        if self.time is None:
            return None
        return self.time + self.offset

    def to_dict(self) -> Dict:
        return {"time": self.time, "offset": float(self.offset)}

    @staticmethod
    def from_dict(d: Dict) -> "RunMarker":
        return RunMarker(time=_opt_time(d.get("time")), offset=_finite(d.get("offset", 0.0) or 0.0))


@dataclass(frozen=True)
class TimingItem:
    """Read-only row of the unified run + loads sequence."""
    id: str
    kind: str  # "run" | "load"
    label: str
    start_time: Optional[float]
    end_time: Optional[float]
    load_index: Optional[int] = None
    is_deletable: bool = False

    @property
    def is_complete(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    @property
    def duration(self) -> Optional[float]:
        if not self.is_complete:
            return None
        return self.end_time - self.start_time


@dataclass(frozen=True)
class ValidationStatus:
    is_overlapping: bool = False
    is_invalid_duration: bool = False
    is_outside_run: bool = False

    @property
    def has_error(self) -> bool:
        return self.is_overlapping or self.is_invalid_duration or self.is_outside_run

    def to_dict(self) -> Dict:
        return {
            "isOverlapping": self.is_overlapping,
            "isInvalidDuration": self.is_invalid_duration,
            "isOutsideRun": self.is_outside_run,
            "hasError": self.has_error,
        }


CLEAR_STATUS = ValidationStatus()


@dataclass(frozen=True)
class ValidationWarning:
    type: str  # see WARNING_* constants
    message: str
    affected_loads: Tuple[int, ...] = ()  # load ids

    def to_dict(self) -> Dict:
        return {"type": self.type, "message": self.message, "affectedLoads": list(self.affected_loads)}


@dataclass(frozen=True)
class TimingSummary:
    total_load_frames: int
    rta_frames: Optional[int]
    lrt_frames: Optional[int]

    def to_dict(self) -> Dict:
        return {
            "totalLoadFrames": int(self.total_load_frames),
            "rtaFrames": self.rta_frames,
            "lrtFrames": self.lrt_frames,
        }
