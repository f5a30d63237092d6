# load_timer/player.py
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Player(Protocol):
    """
    What the timing engine needs from a video player. Times are seconds.

    The player owns decoding, seeking precision and its own lifecycle.
    """

    def get_current_time(self) -> float:
        ...

    def seek_to(self, seconds: float, allow_seek_ahead: bool = True) -> None:
        ...

    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def is_playing(self) -> bool:
        ...
