# load_timer/config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .log import setup_logger
from .persistence import atomic_write_json
from .timeutils import DEFAULT_FPS, check_fps

log = setup_logger(__name__)


CONFIG_FILENAME = "config.json"

ENV_FPS = "LOAD_TIMER_FPS"
ENV_LOG_LEVEL = "LOAD_TIMER_LOG_LEVEL"
ENV_AUTO_SELECT = "LOAD_TIMER_AUTO_SELECT"

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    return str(value).strip().lower() in _TRUE_STRINGS


@dataclass
class AppConfig:
    """
    Stored in <data_dir>/config.json
    """
    data_dir: str = ""
    default_fps: float = DEFAULT_FPS
    auto_select: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.default_fps = check_fps(self.default_fps)

    def to_dict(self) -> Dict:
        return {
            "data_dir": self.data_dir,
            "default_fps": self.default_fps,
            "auto_select": bool(self.auto_select),
            "log_level": self.log_level,
        }

    @staticmethod
    def from_dict(d: Dict) -> "AppConfig":
        def get(key: str, default: Any) -> Any:
            v = d.get(key)
            return default if v is None else v

        try:
            fps = check_fps(get("default_fps", DEFAULT_FPS))
        except ValueError as exc:
            log.warning("config default_fps ignored: %s", exc)
            fps = DEFAULT_FPS

        return AppConfig(
            data_dir=str(get("data_dir", "")),
            default_fps=fps,
            auto_select=_as_bool(d.get("auto_select"), False),
            log_level=str(get("log_level", "INFO")).upper(),
        )


def config_path(data_dir: str) -> str:
    return os.path.join(data_dir, CONFIG_FILENAME)


def apply_env_overrides(cfg: AppConfig, environ: Optional[Dict[str, str]] = None) -> AppConfig:
    env = os.environ if environ is None else environ

    if env.get(ENV_FPS):
        try:
            cfg.default_fps = check_fps(env[ENV_FPS])
        except ValueError as exc:
            log.warning("%s ignored: %s", ENV_FPS, exc)

    if env.get(ENV_LOG_LEVEL):
        cfg.log_level = env[ENV_LOG_LEVEL].strip().upper()

    if env.get(ENV_AUTO_SELECT) is not None:
        cfg.auto_select = _as_bool(env[ENV_AUTO_SELECT], cfg.auto_select)

    return cfg


def load_config(data_dir: str, environ: Optional[Dict[str, str]] = None) -> AppConfig:
    """
    Loads <data_dir>/config.json, then applies environment overrides.

    A missing or unreadable file yields defaults.
    """
    cfg = AppConfig(data_dir=data_dir or "")
    path = config_path(data_dir) if data_dir else ""
    if path and os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict):
                cfg = AppConfig.from_dict(data)
                cfg.data_dir = data_dir
            else:
                log.warning("config %s is not a JSON object; using defaults", path)
        except (OSError, ValueError) as exc:
            log.warning("could not read config %s: %s", path, exc)
    return apply_env_overrides(cfg, environ)


def save_config(cfg: AppConfig) -> str:
    if not cfg.data_dir:
        raise ValueError("AppConfig.data_dir is required")
    path = config_path(cfg.data_dir)
    atomic_write_json(path, cfg.to_dict())
    return path
