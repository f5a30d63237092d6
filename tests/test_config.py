"""config.json and environment overrides."""

import json

import pytest

from load_timer.config import AppConfig, apply_env_overrides, load_config, save_config
from load_timer.errors import InvalidFrameRateError


class TestAppConfig:
    def test_defaults(self):
        cfg = AppConfig()
        assert cfg.default_fps == 30
        assert cfg.auto_select is False
        assert cfg.log_level == "INFO"

    def test_bad_fps(self):
        with pytest.raises(InvalidFrameRateError):
            AppConfig(default_fps=0)

    def test_from_dict_tolerates_garbage(self):
        cfg = AppConfig.from_dict({"default_fps": "fast", "auto_select": "yes", "log_level": "debug", "extra": 1})
        assert cfg.default_fps == 30
        assert cfg.auto_select is True
        assert cfg.log_level == "DEBUG"


class TestLoadSave:
    def test_round_trip(self, tmp_path):
        cfg = AppConfig(data_dir=str(tmp_path), default_fps=60, auto_select=True)
        save_config(cfg)
        loaded = load_config(str(tmp_path), environ={})
        assert loaded == cfg

    def test_missing_file_defaults(self, tmp_path):
        cfg = load_config(str(tmp_path), environ={})
        assert cfg.data_dir == str(tmp_path)
        assert cfg.default_fps == 30

    def test_unreadable_file_defaults(self, tmp_path):
        (tmp_path / "config.json").write_text("{broken", encoding="utf-8")
        assert load_config(str(tmp_path), environ={}).default_fps == 30

    def test_save_requires_dir(self):
        with pytest.raises(ValueError):
            save_config(AppConfig())

    def test_env_overrides_file(self, tmp_path):
        (tmp_path / "config.json").write_text(json.dumps({"default_fps": 30}), encoding="utf-8")
        env = {"LOAD_TIMER_FPS": "59.94", "LOAD_TIMER_LOG_LEVEL": "warning", "LOAD_TIMER_AUTO_SELECT": "1"}
        cfg = load_config(str(tmp_path), environ=env)
        assert cfg.default_fps == pytest.approx(59.94)
        assert cfg.log_level == "WARNING"
        assert cfg.auto_select is True

    def test_bad_env_fps_ignored(self):
        cfg = apply_env_overrides(AppConfig(), {"LOAD_TIMER_FPS": "-1"})
        assert cfg.default_fps == 30
