"""Frame clock driving root timelines on a single thread."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from choreo.animator.timeline import Timeline
from choreo.config import runtime_config

logger = logging.getLogger(__name__)


class Animator:
    def __init__(self):
        self._timelines: List[Timeline] = []
        self.elapsed = 0.0

    def timeline(
        self,
        paused: bool = True,
        on_complete: Optional[Callable[[], None]] = None,
        name: Optional[str] = None,
        on_seek: Optional[Callable[[], None]] = None,
    ) -> Timeline:
        timeline = Timeline(paused=paused, on_complete=on_complete, name=name, on_seek=on_seek)
        self.register(timeline)
        return timeline

    def register(self, timeline: Timeline) -> None:
        if timeline._animator is self:
            return
        if timeline._animator is not None:
            timeline._animator.unregister(timeline)
        timeline._animator = self
        self._timelines.append(timeline)

    def unregister(self, timeline: Timeline) -> None:
        if timeline in self._timelines:
            self._timelines.remove(timeline)
        if timeline._animator is self:
            timeline._animator = None

    @property
    def timelines(self) -> List[Timeline]:
        return list(self._timelines)

    def active(self) -> List[Timeline]:
        return [tl for tl in self._timelines if tl.is_active()]

    def tick(self, dt: float) -> None:
        """Advance every playing root timeline by dt seconds."""
        self.elapsed += dt
        for timeline in list(self._timelines):
            timeline.advance(dt)

    def run(self, seconds: float, fps: Optional[int] = None) -> int:
        """Fixed-step loop; returns the number of frames ticked."""
        fps = fps or runtime_config.get_tick_fps()
        step = 1.0 / fps
        frames = 0
        remaining = seconds
        while remaining > 1e-12:
            dt = min(step, remaining)
            self.tick(dt)
            remaining -= dt
            frames += 1
        logger.debug("Animator ran %d frames over %.3fs", frames, seconds)
        return frames

    def run_until_idle(self, fps: Optional[int] = None, max_seconds: float = 600.0) -> int:
        fps = fps or runtime_config.get_tick_fps()
        step = 1.0 / fps
        frames = 0
        while self.active() and frames * step < max_seconds:
            self.tick(step)
            frames += 1
        return frames

    def kill_all(self) -> None:
        for timeline in list(self._timelines):
            timeline.kill()


_default_animator: Optional[Animator] = None


def get_animator() -> Animator:
    global _default_animator
    if _default_animator is None:
        _default_animator = Animator()
    return _default_animator


def set_animator(animator: Optional[Animator]) -> None:
    global _default_animator
    _default_animator = animator
