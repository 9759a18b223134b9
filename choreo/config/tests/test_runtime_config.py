import pytest

from choreo.config import runtime_config


def test_defaults(monkeypatch):
    for name in ("CHOREO_DEFAULT_EASE", "CHOREO_FIGURE_COLOR", "CHOREO_TICK_FPS", "CHOREO_EXPORT_DIR", "CHOREO_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    assert runtime_config.get_default_ease() == "power2.inOut"
    assert runtime_config.get_figure_color() == "#00d9ff"
    assert runtime_config.get_tick_fps() == 60
    assert runtime_config.get_export_dir() is None
    assert runtime_config.get_log_level() == "INFO"


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CHOREO_DEFAULT_EASE", "sine.inOut")
    monkeypatch.setenv("CHOREO_TICK_FPS", "30")
    monkeypatch.setenv("CHOREO_EXPORT_DIR", str(tmp_path))
    monkeypatch.setenv("CHOREO_LOG_LEVEL", "debug")
    assert runtime_config.get_default_ease() == "sine.inOut"
    assert runtime_config.get_tick_fps() == 30
    assert runtime_config.get_export_dir() == str(tmp_path)
    assert runtime_config.get_log_level() == "DEBUG"


@pytest.mark.parametrize("raw", ["fast", "0", "-5"])
def test_invalid_fps(monkeypatch, raw):
    monkeypatch.setenv("CHOREO_TICK_FPS", raw)
    with pytest.raises(ValueError):
        runtime_config.get_tick_fps()
