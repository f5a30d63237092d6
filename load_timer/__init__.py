# load_timer/__init__.py
'''
load_timer/
    __init__.py
    __main__.py

    app.py          # command line summary + Qt player factory
    controller.py   # player clock -> session mutations, seek/jump, runner/verifier mode

    domain.py       # dataclasses: Load, RunMarker, TimingItem, ValidationStatus, ...
    timeutils.py    # fps checks, seconds<->frames, HH:MM:SS.mmm + smart timecodes
    validation.py   # per-load flags, collection report, warnings
    session.py      # SessionModel: state, derived RTA/LRT, mutation API, records

    persistence.py  # atomic JSON save/load, export/import
    config.py       # config.json + environment overrides
    media_source.py # URL checks, YouTube video id extraction
    player.py       # Player protocol
    qt_player.py    # QMediaPlayer adapter (PyQt5)
    log.py          # logger helpers
    errors.py       # exception types
'''

from __future__ import annotations

__all__ = [
    "__version__",
    "SessionModel",
    "SessionController",
    "Player",
    "MODE_RUNNER",
    "MODE_VERIFIER",
    "extract_video_id",
    "validate_load",
    "validate_loads",
    "seconds_to_frames",
    "frames_to_timecode",
]

__version__ = "0.1.0"

from .controller import MODE_RUNNER, MODE_VERIFIER, SessionController
from .media_source import extract_video_id
from .player import Player
from .session import SessionModel
from .timeutils import frames_to_timecode, seconds_to_frames
from .validation import validate_load, validate_loads
