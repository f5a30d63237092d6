# load_timer/controller.py
"""
Wires a Player to a SessionModel: every action reads the player clock or
seeks it, then applies one session mutation.
"""
from __future__ import annotations

from typing import Optional

from .domain import EDGE_END, EDGE_START, TimingItem, check_edge, load_item_id
from .errors import ReadOnlyModeError, UnknownItemError
from .log import setup_logger
from .player import Player
from .session import SessionModel
from .timeutils import shift_by_frames

log = setup_logger(__name__)


MODE_RUNNER = "runner"
MODE_VERIFIER = "verifier"
MODES = (MODE_RUNNER, MODE_VERIFIER)


class SessionController:
    def __init__(self, session: SessionModel, player: Optional[Player] = None, mode: str = MODE_RUNNER):
        self.session = session
        self.player = player
        self.mode = mode

    @property
    def mode(self) -> str:
        return self._mode

    @mode.setter
    def mode(self, value: str) -> None:
        if value not in MODES:
            raise ValueError(f"mode must be one of {MODES}, got {value!r}")
        self._mode = value

    def _require_runner(self, action: str) -> None:
        if self._mode != MODE_RUNNER:
            raise ReadOnlyModeError(f"cannot {action} in {self._mode} mode")

    def attach_player(self, player: Optional[Player]) -> None:
        self.player = player

    def _now(self) -> Optional[float]:
        if self.player is None:
            log.debug("no player attached; ignoring mark")
            return None
        return max(0.0, float(self.player.get_current_time()))

    # -----------------------------
    # Marking
    # -----------------------------

    def mark(self, edge: str) -> Optional[TimingItem]:
        """
        Mark the selected item's edge at the player's current time.

        Completing the last item (whichever edge is marked second) with
        auto-select on appends and selects a new load when the finished
        item validates cleanly.
        """
        edge = check_edge(edge)
        t = self._now()
        if t is None:
            return None
        item = self.session.mark_selected(edge, t)
        self.session.auto_advance(item.id)
        return item

    def mark_start(self) -> Optional[TimingItem]:
        return self.mark(EDGE_START)

    def mark_end(self) -> Optional[TimingItem]:
        return self.mark(EDGE_END)

    def mark_run(self, edge: str) -> Optional[TimingItem]:
        t = self._now()
        if t is None:
            return None
        self.session.set_run_marker(edge, time=t)
        return self.session.items()[0]

    def mark_load(self, edge: str) -> Optional[TimingItem]:
        t = self._now()
        if t is None:
            return None
        ld = self.session.mark_load(edge, t)
        item = self.session.get_item(load_item_id(ld.id))
        self.session.auto_advance(item.id)
        return item

    # -----------------------------
    # Load list (runner mode only)
    # -----------------------------

    def add_load(self) -> TimingItem:
        self._require_runner("add loads")
        ld = self.session.add_load()
        return self.session.get_item(load_item_id(ld.id))

    def delete_item(self, item_id: str) -> None:
        self._require_runner("delete loads")
        self.session.delete_item(item_id)

    # -----------------------------
    # Navigation
    # -----------------------------

    def jump_to(self, item_id: str, edge: str, frame_offset: int = 0) -> Optional[float]:
        """
        Select item_id and seek the player to one of its edges, shifted by
        frame_offset frames (verifier stepping). Returns the seek target.
        """
        item = self.session.get_item(item_id)
        if item is None:
            raise UnknownItemError(item_id)
        self.session.select_item(item.id)

        t = item.start_time if check_edge(edge) == EDGE_START else item.end_time
        if t is None or self.player is None:
            return None
        target = shift_by_frames(t, frame_offset, self.session.fps)
        self.player.seek_to(target, True)
        return target

    def step_frames(self, frames: int) -> Optional[float]:
        if self.player is None:
            return None
        target = shift_by_frames(self.player.get_current_time(), frames, self.session.fps)
        self.player.seek_to(target, True)
        return target

    def toggle_playback(self) -> None:
        if self.player is None:
            return
        if self.player.is_playing():
            self.player.pause()
        else:
            self.player.play()
