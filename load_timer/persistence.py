# load_timer/persistence.py
from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from .errors import ExportError
from .log import setup_logger
from .session import SessionModel

log = setup_logger(__name__)


SESSION_FILENAME = "session.json"


# -----------------------------
# Atomic file helpers
# -----------------------------

def atomic_write_text(path: str, text: str, encoding: str = "utf-8") -> None:
    d = os.path.dirname(os.path.abspath(path))
    os.makedirs(d, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=d)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def atomic_write_json(path: str, payload: Dict) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    atomic_write_text(path, text + "\n")


def read_record(path: str) -> Tuple[Optional[Dict], str]:
    """
    Returns (record, message). record is None when the file is missing,
    unreadable or not a JSON object.
    """
    if not path or not os.path.isfile(path):
        return (None, f"File does not exist: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        log.warning("could not read %s: %s", path, exc)
        return (None, f"Could not read {os.path.basename(path)}: {exc}")
    if not isinstance(data, dict):
        return (None, "Expected a JSON object at the top level.")
    return (data, "OK")


# -----------------------------
# Local save/load
# -----------------------------

def session_path(data_dir: str) -> str:
    return os.path.join(data_dir, SESSION_FILENAME)


def save_session(path: str, session: SessionModel) -> str:
    """Writes the full session record atomically. Invalid sessions are saved too."""
    atomic_write_json(path, session.to_record())
    log.debug("saved session to %s", path)
    return path


def load_session(path: str, fps: Optional[float] = None) -> Optional[SessionModel]:
    """
    Loads a saved session. Missing or invalid files return None.

    fps only applies when the record does not carry its own.
    """
    record, message = read_record(path)
    if record is None:
        log.info("no session loaded: %s", message)
        return None
    session = SessionModel() if fps is None else SessionModel(fps=fps)
    session.apply_record(record)
    return session


# -----------------------------
# Export / import
# -----------------------------

def export_filename(session: SessionModel, now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d-%H%M%S")
    base = session.video_id or "session"
    safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in base)
    return f"{safe}-{stamp}.json"


def export_session(out_dir: str, session: SessionModel, now: Optional[datetime] = None) -> str:
    """
    Writes an export file into out_dir and returns its path.

    Both run markers must be set.
    """
    if session.run_start.time is None or session.run_end.time is None:
        raise ExportError("Run start and run end must both be marked before exporting.")
    now = now or datetime.now(timezone.utc)
    path = os.path.join(out_dir, export_filename(session, now))
    atomic_write_json(path, session.to_record(exported_at=now))
    log.info("exported session to %s", path)
    return path


def import_session_file(path: str, session: SessionModel) -> Tuple[bool, str]:
    """
    Applies whichever top-level fields the file provides onto session.
    Returns (ok, message); never raises for bad input.
    """
    record, message = read_record(path)
    if record is None:
        return (False, message)
    applied = session.apply_record(record)
    if not applied:
        return (False, "No usable fields found in the file.")
    return (True, "Imported: " + ", ".join(applied))
