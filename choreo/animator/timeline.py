"""Time-indexed interpolation scheduler.

A Timeline holds children (tweens, call markers, nested timelines) at
absolute offsets. Rendering a timeline at time t renders every started
child at its local time ``t - offset`` in offset order, so when two children
write the same target the one that started last wins. Children that have
not started yet write nothing; their call markers are re-armed.

Tweens only ever write forward from their own start values, so a root
timeline's ``on_seek`` hook restores the targets (for a skeleton: its bind
pose) before every seek. With that hook a seek depends only on t, whichever
direction the playhead came from. Call markers fire only while a root
timeline is advanced by the Animator; seeking never fires them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Union

from choreo.animator.easing import resolve_ease

if TYPE_CHECKING:
    from choreo.animator.ticker import Animator

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[Dict[str, float]], None]


class Tween:
    """Interpolates a set of named values from start to end over a duration."""

    def __init__(
        self,
        start: Dict[str, float],
        end: Dict[str, float],
        duration: float,
        ease: Optional[str] = None,
        on_update: Optional[UpdateCallback] = None,
    ):
        self.start_values = dict(start)
        self.end_values = {key: end.get(key, value) for key, value in start.items()}
        self.duration = max(0.0, duration)
        self.ease_name = ease
        self._ease = resolve_ease(ease)
        self.on_update = on_update
        self.values = dict(self.start_values)
        self.progress = 0.0
        self._rendered = False

    def render(self, local_time: float, suppress_events: bool = True) -> None:
        if local_time < 0 and not self._rendered:
            return
        self._rendered = True
        if self.duration <= 0:
            progress = 1.0 if local_time >= 0 else 0.0
        else:
            progress = min(max(local_time / self.duration, 0.0), 1.0)
        self.progress = progress

        if progress >= 1.0:
            self.values = dict(self.end_values)
        elif progress <= 0.0:
            self.values = dict(self.start_values)
        else:
            eased = self._ease(progress)
            self.values = {
                key: start + (self.end_values[key] - start) * eased
                for key, start in self.start_values.items()
            }
        if self.on_update:
            self.on_update(self.values)

    def rearm(self, local_time: float) -> None:
        pass


class CallMarker:
    """Zero-duration callback fired when playback crosses its offset."""

    duration = 0.0

    def __init__(self, callback: Callable[..., Any], args: Sequence[Any] = ()):
        self.callback = callback
        self.args = tuple(args)
        self._armed = True

    def render(self, local_time: float, suppress_events: bool = True) -> None:
        if local_time < 0:
            self._armed = True
            return
        if self._armed and not suppress_events:
            self.callback(*self.args)
        self._armed = False

    def rearm(self, local_time: float) -> None:
        self._armed = local_time <= 0


Child = Union[Tween, CallMarker, "Timeline"]


@dataclass
class _Slot:
    child: Child
    start: float
    order: int
    label: Optional[str] = None


class Timeline:
    def __init__(
        self,
        paused: bool = True,
        on_complete: Optional[Callable[[], None]] = None,
        name: Optional[str] = None,
        on_seek: Optional[Callable[[], None]] = None,
    ):
        self.name = name
        self.on_complete = on_complete
        self.on_seek = on_seek
        self.parent: Optional[Timeline] = None
        self._animator: Optional["Animator"] = None
        self._slots: List[_Slot] = []
        self._labels: Dict[str, float] = {}
        self._counter = 0
        self._time = 0.0
        self._paused = paused
        self._killed = False
        self._completed = False
        self._rendered = False

    def __repr__(self) -> str:
        return f"Timeline(name={self.name!r}, time={self._time:.3f}, duration={self.duration:.3f})"

    # --- Building ---

    def add(self, child: Child, position: Union[float, str, None] = None, label: Optional[str] = None) -> Child:
        """Place a child at an absolute offset (default: the current end)."""
        start = self._resolve_position(position)
        if isinstance(child, Timeline):
            if child._animator is not None:
                child._animator.unregister(child)
            if child.parent is not None:
                child.parent.remove(child)
            child.parent = self
            child._paused = False
        self._slots.append(_Slot(child=child, start=start, order=self._counter, label=label))
        self._counter += 1
        self._slots.sort(key=lambda slot: (slot.start, slot.order))
        if label:
            self._labels[label] = start
        return child

    def to(
        self,
        start: Dict[str, float],
        end: Dict[str, float],
        duration: float,
        position: Union[float, str, None] = None,
        ease: Optional[str] = None,
        on_update: Optional[UpdateCallback] = None,
    ) -> Tween:
        tween = Tween(start, end, duration, ease=ease, on_update=on_update)
        self.add(tween, position)
        return tween

    def call(self, callback: Callable[..., Any], position: Union[float, str, None] = None,
             args: Sequence[Any] = ()) -> CallMarker:
        marker = CallMarker(callback, args)
        self.add(marker, position)
        return marker

    def add_label(self, label: str, position: Union[float, str, None] = None) -> None:
        self._labels[label] = self._resolve_position(position)

    def remove(self, child: Child) -> None:
        self._slots = [slot for slot in self._slots if slot.child is not child]
        if isinstance(child, Timeline) and child.parent is self:
            child.parent = None

    def _resolve_position(self, position: Union[float, str, None]) -> float:
        if position is None:
            return self.duration
        if isinstance(position, str):
            if position not in self._labels:
                logger.warning("Unknown label %r on timeline %s; appending", position, self.name)
                return self.duration
            return self._labels[position]
        return max(0.0, float(position))

    # --- Queries ---

    @property
    def duration(self) -> float:
        return max((slot.start + slot.child.duration for slot in self._slots), default=0.0)

    @property
    def time(self) -> float:
        return self._time

    @property
    def progress(self) -> float:
        duration = self.duration
        if duration <= 0:
            return 1.0 if self._completed else 0.0
        return min(self._time / duration, 1.0)

    @property
    def labels(self) -> Dict[str, float]:
        return dict(self._labels)

    @property
    def children(self) -> List[Child]:
        return [slot.child for slot in self._slots]

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def killed(self) -> bool:
        return self._killed

    def is_active(self) -> bool:
        if self._killed or self._paused or self._completed:
            return False
        if self.parent is not None:
            return self.parent.is_active()
        return True

    # --- Rendering ---

    def render(self, local_time: float, suppress_events: bool = True) -> None:
        if self._killed:
            return
        if local_time < 0 and not self._rendered:
            return
        self._rendered = True
        clamped = min(local_time, self.duration)
        self._time = max(0.0, clamped)

        for slot in self._slots:
            if slot.start > clamped:
                slot.child.rearm(clamped - slot.start)
            else:
                slot.child.render(clamped - slot.start, suppress_events)

    def rearm(self, local_time: float) -> None:
        for slot in self._slots:
            slot.child.rearm(local_time - slot.start)

    # --- Playback control ---

    def seek(self, position: Union[float, str], suppress_events: bool = True) -> None:
        if self._killed:
            return
        if isinstance(position, str):
            if position not in self._labels:
                logger.warning("Unknown label %r on timeline %s", position, self.name)
                return
            position = self._labels[position]
        target = min(max(0.0, float(position)), self.duration)
        if self.on_seek:
            self.on_seek()
        self.render(target, suppress_events)
        self._time = target
        self._completed = self.duration > 0 and target >= self.duration

    def seek_progress(self, progress: float) -> None:
        self.seek(min(max(progress, 0.0), 1.0) * self.duration)

    def play(self, from_time: Union[float, str, None] = None) -> None:
        if self._killed:
            return
        if from_time is not None:
            self.seek(from_time)
            self.rearm(self._time)
        self._paused = False

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        if not self._killed:
            self._paused = False

    def kill(self) -> None:
        """Detach immediately; nothing scheduled on this timeline fires afterwards."""
        self._killed = True
        self._paused = True
        if self.parent is not None:
            self.parent.remove(self)
        if self._animator is not None:
            self._animator.unregister(self)

    def advance(self, dt: float) -> None:
        """Move the playhead forward by dt seconds, firing call markers on the way."""
        if self._killed or self._paused or self._completed or self.parent is not None:
            return
        target = self._time + max(0.0, dt)
        done = target >= self.duration
        if done:
            target = self.duration
        self.render(target, suppress_events=False)
        self._time = target
        if done:
            self._completed = True
            if self.on_complete:
                self.on_complete()
