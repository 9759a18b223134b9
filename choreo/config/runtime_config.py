"""Runtime configuration helpers. Values are read from the environment per call."""
from __future__ import annotations

import os
from typing import Optional

DEFAULT_EASE = "power2.inOut"
DEFAULT_FIGURE_COLOR = "#00d9ff"
DEFAULT_TICK_FPS = 60


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def get_default_ease() -> str:
    return _get_env("CHOREO_DEFAULT_EASE") or DEFAULT_EASE


def get_figure_color() -> str:
    return _get_env("CHOREO_FIGURE_COLOR") or DEFAULT_FIGURE_COLOR


def get_tick_fps() -> int:
    raw = _get_env("CHOREO_TICK_FPS")
    if not raw:
        return DEFAULT_TICK_FPS
    try:
        fps = int(raw)
    except ValueError:
        raise ValueError(f"CHOREO_TICK_FPS must be an integer, got {raw!r}")
    if fps <= 0:
        raise ValueError("CHOREO_TICK_FPS must be positive")
    return fps


def get_export_dir() -> Optional[str]:
    return _get_env("CHOREO_EXPORT_DIR")


def get_log_level() -> str:
    return (_get_env("CHOREO_LOG_LEVEL") or "INFO").upper()
