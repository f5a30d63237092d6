# load_timer/qt_player.py
from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import QUrl
from PyQt5.QtMultimedia import QMediaContent, QMediaPlayer

from .log import setup_logger

log = setup_logger(__name__)


class QtPlayer:
    """
    Player adapter over QMediaPlayer.

    QMediaPlayer works in integer milliseconds; this converts to/from the
    seconds the session model uses.
    """

    def __init__(self, player: Optional[QMediaPlayer] = None):
        self._player = player if player is not None else QMediaPlayer(None, QMediaPlayer.VideoSurface)

    @property
    def media_player(self) -> QMediaPlayer:
        return self._player

    def open(self, path_or_url: str) -> None:
        if "://" in path_or_url:
            url = QUrl(path_or_url)
        else:
            url = QUrl.fromLocalFile(path_or_url)
        self._player.setMedia(QMediaContent(url))
        log.debug("opened media %s", path_or_url)

    def get_current_time(self) -> float:
        return int(self._player.position() or 0) / 1000.0

    def seek_to(self, seconds: float, allow_seek_ahead: bool = True) -> None:
        pos = max(0, int(round(float(seconds) * 1000.0)))
        dur = int(self._player.duration() or 0)
        if not allow_seek_ahead and dur > 0:
            pos = min(pos, dur)
        self._player.setPosition(pos)

    def play(self) -> None:
        self._player.play()

    def pause(self) -> None:
        self._player.pause()

    def is_playing(self) -> bool:
        return self._player.state() == QMediaPlayer.PlayingState
