"""Multi-figure sequences: beats merged into one seekable master timeline."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from choreo.animator.ticker import Animator, get_animator
from choreo.animator.timeline import Timeline
from choreo.choreography.action_library import ActionLibrary, get_action_library
from choreo.choreography.beat import Beat
from choreo.choreography.figure import Figure
from choreo.choreography.schemas import BeatData, SequenceData
from choreo.logging.event_log import log_event

logger = logging.getLogger(__name__)


class SequenceState(str, Enum):
    EMPTY = "empty"
    BUILT = "built"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"


class Sequence:
    def __init__(
        self,
        name: str = "sequence",
        action_library: Optional[ActionLibrary] = None,
        animator: Optional[Animator] = None,
    ):
        self.name = name
        self.action_library = action_library or get_action_library()
        self.animator = animator or get_animator()
        # Figures are shared with the caller; the sequence never disposes them.
        self._figures: Dict[str, Figure] = {}
        self._beats: List[Beat] = []
        self._master: Optional[Timeline] = None
        self._state = SequenceState.EMPTY
        self._on_beat_start: Optional[Callable[[Beat], None]] = None
        self._on_complete: Optional[Callable[[], None]] = None

    def __repr__(self) -> str:
        return f"Sequence({self.name!r}, figures={list(self._figures)}, beats={len(self._beats)})"

    # --- Figures ---

    def add_figure(self, figure: Figure) -> None:
        self._figures[figure.name] = figure

    def get_figure(self, name: str) -> Optional[Figure]:
        return self._figures.get(name)

    def remove_figure(self, name: str) -> bool:
        return self._figures.pop(name, None) is not None

    @property
    def figures(self) -> List[Figure]:
        return list(self._figures.values())

    # --- Beats ---

    def add_beat(self, beat: Beat) -> None:
        self._beats.append(beat)
        # list.sort is stable: equal times keep insertion order.
        self._beats.sort(key=lambda b: b.time)

    def create_beat(self, time: float, actor: str, action: str, target: Optional[str] = None) -> Beat:
        beat = Beat(time=time, actor=actor, action=action, target=target)
        self.add_beat(beat)
        return beat

    @property
    def beats(self) -> List[Beat]:
        return list(self._beats)

    def remove_beat(self, index: int) -> Optional[Beat]:
        if 0 <= index < len(self._beats):
            return self._beats.pop(index)
        return None

    def clear_beats(self) -> None:
        self._beats = []

    def get_duration(self) -> float:
        end = 0.0
        for beat in self._beats:
            action = self.action_library.get(beat.action)
            if action is not None:
                end = max(end, beat.time + action.duration)
        return end

    # --- Building ---

    def build(self) -> Timeline:
        """Compile every resolvable beat into a fresh paused master timeline."""
        if self._master is not None:
            self._master.kill()

        master = self.animator.timeline(
            paused=True, on_complete=self._handle_complete, name=self.name, on_seek=self._reset_figures
        )
        for index, beat in enumerate(self._beats):
            figure = self._figures.get(beat.actor)
            if figure is None:
                logger.warning("Sequence %s: beat %d actor %s not found; skipped", self.name, index, beat.actor)
                continue
            if not self.action_library.has(beat.action):
                logger.warning("Sequence %s: beat %d action %s not found; skipped", self.name, index, beat.action)
                continue
            sub = figure.compile(self.action_library.get(beat.action))
            master.call(self._handle_beat_start, beat.time, args=(beat,))
            master.add(sub, beat.time, label=f"{index}:{beat.actor}:{beat.action}")

        self._master = master
        self._state = SequenceState.BUILT
        return master

    def _reset_figures(self) -> None:
        for figure in self._figures.values():
            figure.skeleton.reset_to_bind()

    def _handle_beat_start(self, beat: Beat) -> None:
        log_event("beat.started", "sequence", self.name, actor=beat.actor, action=beat.action,
                  target=beat.target, time=beat.time)
        if self._on_beat_start:
            self._on_beat_start(beat)

    def _handle_complete(self) -> None:
        self._state = SequenceState.BUILT
        log_event("sequence.completed", "sequence", self.name, duration=self.get_duration())
        if self._on_complete:
            self._on_complete()

    # --- Playback ---

    @property
    def timeline(self) -> Optional[Timeline]:
        return self._master

    @property
    def state(self) -> SequenceState:
        return self._state

    def play(self) -> None:
        self.build().play(0)
        self._state = SequenceState.PLAYING

    def pause(self) -> None:
        if self._master and self._state == SequenceState.PLAYING:
            self._master.pause()
            self._state = SequenceState.PAUSED

    def resume(self) -> None:
        if self._master and self._state == SequenceState.PAUSED:
            self._master.resume()
            self._state = SequenceState.PLAYING

    def stop(self) -> None:
        if self._master:
            self._master.pause()
            self._master.seek(0)
        for figure in self._figures.values():
            figure.stop()
        self._state = SequenceState.STOPPED

    def seek(self, time: float) -> None:
        if self._master is None:
            self.build()
        self._master.seek(time)

    def seek_progress(self, progress: float) -> None:
        if self._master is None:
            self.build()
        self._master.seek_progress(progress)

    def get_time(self) -> float:
        return self._master.time if self._master else 0.0

    def get_progress(self) -> float:
        return self._master.progress if self._master else 0.0

    def is_playing(self) -> bool:
        return self._master.is_active() if self._master else False

    def set_on_beat_start(self, callback: Optional[Callable[[Beat], None]]) -> None:
        self._on_beat_start = callback

    def set_on_complete(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_complete = callback

    def set_action_library(self, library: ActionLibrary) -> None:
        self.action_library = library

    # --- Factories & serialization ---

    @classmethod
    def create_sample_fight(cls, figure_a: Figure, figure_b: Figure, **kwargs) -> Sequence:
        """Two-fighter exchange: jab, block, counter hook, stagger, cross, dodge."""
        sequence = cls("sample_fight", **kwargs)
        sequence.add_figure(figure_a)
        sequence.add_figure(figure_b)
        a, b = figure_a.name, figure_b.name
        sequence.create_beat(0.0, a, "jab", target=b)
        sequence.create_beat(0.1, b, "block_high")
        sequence.create_beat(0.4, b, "hook", target=a)
        sequence.create_beat(0.55, a, "stagger_back")
        sequence.create_beat(1.0, a, "cross", target=b)
        sequence.create_beat(1.1, b, "dodge_left")
        return sequence

    def to_data(self) -> SequenceData:
        return SequenceData(
            name=self.name,
            figures=list(self._figures),
            beats=[beat.to_data() for beat in self._beats],
        )

    @classmethod
    def from_data(cls, data: SequenceData, figures: Iterable[Figure], **kwargs) -> Sequence:
        """Rebuild from data; figure names that are not supplied are dropped."""
        available = {figure.name: figure for figure in figures}
        sequence = cls(data.name, **kwargs)
        for figure_name in data.figures:
            figure = available.get(figure_name)
            if figure is None:
                logger.warning("Sequence %s: figure %s not supplied", data.name, figure_name)
                continue
            sequence.add_figure(figure)
        for beat_data in data.beats:
            sequence.add_beat(Beat.from_data(BeatData.model_validate(beat_data)))
        return sequence
