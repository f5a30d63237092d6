# load_timer/session.py
"""
SessionModel: the marked run + loads of one video and everything derived
from them (frame totals, RTA, LRT, validation).

Loads are addressed by their stable id (or item id "load-<id>"); list
positions only exist for labels. Mutations replace the loads tuple as a
whole, so derived values never see a half-applied change.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from .domain import (
    EDGE_START,
    KIND_LOAD,
    KIND_RUN,
    RUN_ITEM_ID,
    RUN_LABEL,
    Load,
    RunMarker,
    TimingItem,
    TimingSummary,
    ValidationStatus,
    check_edge,
    load_item_id,
    load_label,
    parse_load_item_id,
)
from .errors import UnknownItemError
from .log import setup_logger
from .media_source import extract_video_id
from .timeutils import DEFAULT_FPS, Timecode, check_fps, frames_to_timecode, seconds_to_frames, shift_by_frames
from .validation import ValidationReport, run_duration_warning, validate_load, validate_loads

log = setup_logger(__name__)

_UNSET = object()


class SessionModel:
    def __init__(self, fps: float = DEFAULT_FPS, video_id: Optional[str] = None, auto_select: bool = False):
        self._fps = check_fps(fps)
        self.video_id: Optional[str] = video_id or None
        self.auto_select = bool(auto_select)

        self.run_start = RunMarker()
        self.run_end = RunMarker()

        self._loads: Tuple[Load, ...] = ()
        self._next_load_id = 1
        self._selected_id = RUN_ITEM_ID

    @classmethod
    def from_config(cls, cfg) -> "SessionModel":
        return cls(fps=cfg.default_fps, auto_select=cfg.auto_select)

    # -----------------------------
    # Basic state
    # -----------------------------

    @property
    def fps(self) -> float:
        return self._fps

    @fps.setter
    def fps(self, value: float) -> None:
        self._fps = check_fps(value)
        log.debug("fps set to %s", self._fps)

    @property
    def loads(self) -> Tuple[Load, ...]:
        return self._loads

    def get_load(self, load_id: int) -> Optional[Load]:
        for ld in self._loads:
            if ld.id == load_id:
                return ld
        return None

    def index_of_load(self, load_id: int) -> Optional[int]:
        for i, ld in enumerate(self._loads):
            if ld.id == load_id:
                return i
        return None

    # -----------------------------
    # Unified item sequence
    # -----------------------------

    def items(self) -> List[TimingItem]:
        out = [TimingItem(
            id=RUN_ITEM_ID,
            kind=KIND_RUN,
            label=RUN_LABEL,
            start_time=self.run_start.time,
            end_time=self.run_end.time,
        )]
        for i, ld in enumerate(self._loads):
            out.append(TimingItem(
                id=load_item_id(ld.id),
                kind=KIND_LOAD,
                label=load_label(i),
                start_time=ld.start_time,
                end_time=ld.end_time,
                load_index=i,
                is_deletable=True,
            ))
        return out

    def get_item(self, item_id: str) -> Optional[TimingItem]:
        for item in self.items():
            if item.id == item_id:
                return item
        return None

    def _require_item(self, item_id: str) -> TimingItem:
        item = self.get_item(item_id)
        if item is None:
            raise UnknownItemError(item_id)
        return item

    @property
    def selected_id(self) -> str:
        return self._selected_id

    @property
    def selected_item(self) -> TimingItem:
        return self.get_item(self._selected_id) or self.items()[0]

    @property
    def current_selected_index(self) -> int:
        for i, item in enumerate(self.items()):
            if item.id == self._selected_id:
                return i
        return 0

    def select_item(self, item_id: str) -> TimingItem:
        item = self._require_item(item_id)
        self._selected_id = item.id
        return item

    def select_index(self, index: int) -> TimingItem:
        items = self.items()
        if not 0 <= int(index) < len(items):
            raise IndexError(f"item index {index} out of range 0..{len(items) - 1}")
        self._selected_id = items[int(index)].id
        return items[int(index)]

    # -----------------------------
    # Mutations
    # -----------------------------

    def _append_load(self) -> Load:
        ld = Load(id=self._next_load_id)
        self._next_load_id += 1
        self._loads = self._loads + (ld,)
        log.debug("added load id=%s (%d total)", ld.id, len(self._loads))
        return ld

    def add_load(self) -> Load:
        ld = self._append_load()
        self._selected_id = load_item_id(ld.id)
        return ld

    def ensure_load(self) -> Load:
        """Return the selected load, creating load #1 if none exist yet."""
        if not self._loads:
            return self.add_load()
        load_id = parse_load_item_id(self._selected_id)
        if load_id is not None:
            ld = self.get_load(load_id)
            if ld is not None:
                return ld
        return self._loads[-1]

    def set_video(self, video_id: Optional[str]) -> None:
        self.video_id = video_id or None
        if self.video_id and not self._loads:
            self._append_load()

    def set_video_url(self, url: str) -> Optional[str]:
        """Set the video from a YouTube URL. An unparsable URL changes nothing and returns None."""
        video_id = extract_video_id(url)
        if video_id is None:
            log.warning("no video id in url %r", url)
            return None
        self.set_video(video_id)
        return video_id

    def delete_load(self, load_id: int) -> None:
        idx = self.index_of_load(load_id)
        if idx is None:
            raise UnknownItemError(load_item_id(load_id))
        self._loads = self._loads[:idx] + self._loads[idx + 1:]
        if self._selected_id == load_item_id(load_id):
            self._selected_id = load_item_id(self._loads[-1].id) if self._loads else RUN_ITEM_ID
        log.debug("deleted load id=%s (%d left)", load_id, len(self._loads))

    def delete_item(self, item_id: str) -> None:
        item = self._require_item(item_id)
        if not item.is_deletable:
            raise ValueError(f"{item.label} cannot be deleted")
        self.delete_load(parse_load_item_id(item.id))

    def mark_time(self, item_id: str, edge: str, time: float) -> bool:
        """
        Overwrite one edge of the run or of a load with a player timestamp.

        Returns False (and changes nothing) when item_id does not resolve.
        """
        edge = check_edge(edge)
        if item_id == RUN_ITEM_ID:
            self.set_run_marker(edge, time=time)
            return True

        load_id = parse_load_item_id(item_id)
        idx = self.index_of_load(load_id) if load_id is not None else None
        if idx is None:
            log.warning("mark_time ignored: unknown item %r", item_id)
            return False

        updated = self._loads[idx].with_edge(edge, time)
        self._loads = self._loads[:idx] + (updated,) + self._loads[idx + 1:]
        log.debug("marked %s %s=%s", item_id, edge, time)
        return True

    def mark_selected(self, edge: str, time: float) -> TimingItem:
        item = self.selected_item
        self.mark_time(item.id, edge, time)
        return self.get_item(item.id)

    def mark_load(self, edge: str, time: float) -> Load:
        """Mark the selected load (or load #1 when there are none yet)."""
        ld = self.ensure_load()
        self.mark_time(load_item_id(ld.id), edge, time)
        return self.get_load(ld.id)

    def set_run_marker(self, edge: str, time=_UNSET, offset=_UNSET) -> RunMarker:
        """Direct numeric edit of a run marker's time and/or offset."""
        edge = check_edge(edge)
        marker = self.run_start if edge == EDGE_START else self.run_end
        d = marker.to_dict()
        if time is not _UNSET:
            d["time"] = time
        if offset is not _UNSET:
            d["offset"] = offset
        marker = RunMarker.from_dict(d)
        if edge == EDGE_START:
            self.run_start = marker
        else:
            self.run_end = marker
        log.debug("run %s set to time=%s offset=%s", edge, marker.time, marker.offset)
        return marker

    def nudge(self, item_id: str, edge: str, frames: int) -> bool:
        """Shift an already-marked edge by a whole number of frames."""
        item = self._require_item(item_id)
        current = item.start_time if check_edge(edge) == EDGE_START else item.end_time
        if current is None:
            return False
        return self.mark_time(item.id, edge, shift_by_frames(current, frames, self._fps))

    # -----------------------------
    # Auto-advance
    # -----------------------------

    def should_auto_advance(self, item_id: str) -> bool:
        """
        True when auto-select is on, item_id is the last item of the
        sequence, both its edges are marked and it validates cleanly.
        """
        if not self.auto_select:
            return False
        items = self.items()
        last = items[-1]
        if last.id != item_id or not last.is_complete:
            return False
        if last.kind == KIND_RUN:
            return run_duration_warning(self.adjusted_run_start, self.adjusted_run_end) is None
        status = validate_load(
            last.start_time,
            last.end_time,
            self._loads,
            last.load_index,
            self.adjusted_run_start,
            self.adjusted_run_end,
        )
        return not status.has_error

    def auto_advance(self, item_id: str) -> Optional[Load]:
        if not self.should_auto_advance(item_id):
            return None
        return self.add_load()

    # -----------------------------
    # Derived values
    # -----------------------------

    @property
    def adjusted_run_start(self) -> Optional[float]:
        return self.run_start.adjusted_time

    @property
    def adjusted_run_end(self) -> Optional[float]:
        return self.run_end.adjusted_time

    def _marker_frames(self, marker: RunMarker) -> Optional[int]:
        # time and offset are rounded to frames separately, then added
        if marker.time is None:
            return None
        return seconds_to_frames(marker.time, self._fps) + seconds_to_frames(marker.offset, self._fps)

    @property
    def adjusted_run_start_frames(self) -> Optional[int]:
        return self._marker_frames(self.run_start)

    @property
    def adjusted_run_end_frames(self) -> Optional[int]:
        return self._marker_frames(self.run_end)

    @property
    def total_load_frames(self) -> int:
        total = 0
        for ld in self._loads:
            if ld.is_complete:
                total += seconds_to_frames(ld.end_time, self._fps) - seconds_to_frames(ld.start_time, self._fps)
        return total

    @property
    def rta_frames(self) -> Optional[int]:
        start = self.adjusted_run_start_frames
        end = self.adjusted_run_end_frames
        if start is None or end is None:
            return None
        return end - start

    @property
    def lrt_frames(self) -> Optional[int]:
        rta = self.rta_frames
        if rta is None:
            return None
        return rta - self.total_load_frames

    def summary(self) -> TimingSummary:
        return TimingSummary(
            total_load_frames=self.total_load_frames,
            rta_frames=self.rta_frames,
            lrt_frames=self.lrt_frames,
        )

    def timecode(self, frames: Optional[int]) -> Optional[Timecode]:
        """Render a frame count; None (unknown) and negative totals render as None."""
        if frames is None or frames < 0:
            return None
        return frames_to_timecode(frames, self._fps)

    def item_duration(self, item: TimingItem) -> Optional[Timecode]:
        if item.duration is None:
            return None
        return self.timecode(seconds_to_frames(item.duration, self._fps))

    def validate(self) -> ValidationReport:
        return validate_loads(self._loads, self.adjusted_run_start, self.adjusted_run_end)

    def item_status(self, item_id: str) -> ValidationStatus:
        return self.validate().item_status(self._require_item(item_id))

    # -----------------------------
    # Flat record (persistence / export / import)
    # -----------------------------

    def to_record(self, exported_at: Optional[datetime] = None) -> Dict:
        stamp = exported_at or datetime.now(timezone.utc)
        return {
            "videoId": self.video_id,
            "fps": int(self._fps) if self._fps.is_integer() else self._fps,
            "runStart": self.run_start.to_dict(),
            "runEnd": self.run_end.to_dict(),
            "loads": [ld.to_dict() for ld in self._loads],
            "currentSelectedIndex": self.current_selected_index,
            "exportedAt": stamp.isoformat(),
            "summary": self.summary().to_dict(),
        }

    @classmethod
    def from_record(cls, record: Dict) -> "SessionModel":
        session = cls()
        session.apply_record(record)
        return session

    def apply_record(self, record: Dict) -> List[str]:
        """
        Apply the fields present in a (possibly partial) record.

        Malformed fields are skipped with a warning; the rest still apply.
        Returns the names of the fields that were applied.
        """
        applied: List[str] = []
        if not isinstance(record, dict):
            log.warning("ignoring session record of type %s", type(record).__name__)
            return applied

        if "videoId" in record:
            vid = record["videoId"]
            self.video_id = str(vid) if vid else None
            applied.append("videoId")

        if "fps" in record:
            try:
                self._fps = check_fps(record["fps"])
                applied.append("fps")
            except ValueError as exc:
                log.warning("ignoring fps in record: %s", exc)

        for key, attr in (("runStart", "run_start"), ("runEnd", "run_end")):
            if key not in record:
                continue
            try:
                setattr(self, attr, RunMarker.from_dict(record[key] or {}))
                applied.append(key)
            except (TypeError, ValueError, AttributeError) as exc:
                log.warning("ignoring %s in record: %s", key, exc)

        if "loads" in record:
            if isinstance(record["loads"], list):
                self._apply_loads(record["loads"])
                applied.append("loads")
            else:
                log.warning("ignoring loads in record: expected a list")

        if "currentSelectedIndex" in record:
            try:
                index = int(record["currentSelectedIndex"])
                items = self.items()
                self._selected_id = items[max(0, min(index, len(items) - 1))].id
                applied.append("currentSelectedIndex")
            except (TypeError, ValueError, OverflowError) as exc:
                log.warning("ignoring currentSelectedIndex in record: %s", exc)
        elif "loads" in applied and self.get_item(self._selected_id) is None:
            self._selected_id = RUN_ITEM_ID

        return applied

    def _apply_loads(self, raw_loads: List) -> None:
        loads: List[Load] = []
        seen = set()
        for raw in raw_loads:
            try:
                ld = Load.from_dict(raw)
            except (KeyError, TypeError, ValueError, OverflowError, AttributeError) as exc:
                log.warning("skipping malformed load %r: %s", raw, exc)
                continue
            if ld.id in seen:
                log.warning("skipping duplicate load id %s", ld.id)
                continue
            seen.add(ld.id)
            loads.append(ld)
        self._loads = tuple(loads)
        if loads:
            self._next_load_id = max(self._next_load_id, max(ld.id for ld in loads) + 1)
