# load_timer/app.py
from __future__ import annotations

import argparse
import sys
from typing import List, Optional, TextIO

from .config import load_config
from .log import configure_logging
from .persistence import read_record
from .session import SessionModel

_qt_app = None


def _fmt(session: SessionModel, frames: Optional[int]) -> str:
    if frames is None:
        return "--"
    tc = session.timecode(frames)
    if tc is None:
        return f"{frames} frames"
    return f"{tc.formatted} ({frames} frames)"


def create_qt_player(media: Optional[str] = None):
    """
    Build the QMediaPlayer-backed player for a desktop front end.

    PyQt5 is imported here so the command line stays usable without a
    display server. A QApplication is created once if none exists yet.
    """
    global _qt_app
    from PyQt5.QtWidgets import QApplication

    from .qt_player import QtPlayer

    if QApplication.instance() is None:
        _qt_app = QApplication(sys.argv)

    player = QtPlayer()
    if media:
        player.open(media)
    return player


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="load_timer",
        description="Summarize a saved or exported load-timing session (RTA, LRT, warnings).",
    )
    p.add_argument("session", help="session or export JSON file")
    p.add_argument("--fps", type=float, default=None, help="override the session frame rate")
    p.add_argument("--config-dir", default="", help="directory holding config.json")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    p.add_argument("--video-url", default=None, help="YouTube URL of the run video (sets the video id)")
    return p


def report(session: SessionModel, out: TextIO) -> int:
    summary = session.summary()
    report_ = session.validate()

    out.write(f"Video: {session.video_id or '-'}\n")
    out.write(f"FPS:   {session.fps:g}\n")
    out.write(f"Loads: {len(session.loads)}\n")
    out.write(f"Load time: {_fmt(session, summary.total_load_frames)}\n")
    out.write(f"RTA:       {_fmt(session, summary.rta_frames)}\n")
    out.write(f"LRT:       {_fmt(session, summary.lrt_frames)}\n")

    for w in report_.warnings:
        out.write(f"[{w.type}] {w.message}\n")
    return 1 if report_.has_warnings else 0


def run_cli(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    out = out or sys.stdout

    cfg = load_config(args.config_dir)
    configure_logging(args.log_level or cfg.log_level)

    record, message = read_record(args.session)
    if record is None:
        out.write(f"error: {message}\n")
        return 2

    session = SessionModel.from_config(cfg)
    session.apply_record(record)
    if args.fps is not None:
        try:
            session.fps = args.fps
        except ValueError as exc:
            out.write(f"error: {exc}\n")
            return 2

    if args.video_url and session.set_video_url(args.video_url) is None:
        out.write(f"error: no video id in {args.video_url!r}\n")
        return 2

    return report(session, out)
