"""In-memory store of figure and sequence definitions served by the gateway.

Definitions are plain data; live Figure/Sequence objects are rebuilt per call
on a private Animator so tool calls never share playback state.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from choreo.animator.ticker import Animator
from choreo.choreography.figure import Figure
from choreo.choreography.schemas import BeatData, Facing, FigureData, SequenceData
from choreo.choreography.sequence import Sequence
from choreo.config import runtime_config


class ChoreographyState:
    def __init__(self) -> None:
        self._figures: Dict[str, FigureData] = {}
        self._sequences: Dict[str, SequenceData] = {}

    # --- Figures ---

    def create_figure(
        self,
        name: str,
        x: float = 0.0,
        y: float = 0.0,
        facing: Facing = "right",
        color: Optional[str] = None,
    ) -> FigureData:
        if name in self._figures:
            raise ValueError(f"Figure {name!r} already exists")
        figure = FigureData(
            name=name,
            x=x,
            y=y,
            facing=facing,
            color=color or runtime_config.get_figure_color(),
        )
        self._figures[name] = figure
        return figure

    def get_figure(self, name: str) -> Optional[FigureData]:
        return self._figures.get(name)

    def has_figure(self, name: str) -> bool:
        return name in self._figures

    def list_figures(self) -> List[FigureData]:
        return list(self._figures.values())

    def delete_figure(self, name: str) -> bool:
        """Remove a figure. Sequences that cast it keep their data but skip its beats."""
        return self._figures.pop(name, None) is not None

    # --- Sequences ---

    def create_sequence(self, name: str, figures: Iterable[str], beats: Iterable[BeatData]) -> SequenceData:
        if name in self._sequences:
            raise ValueError(f"Sequence {name!r} already exists")
        figures = list(figures)
        for figure_name in figures:
            if figure_name not in self._figures:
                raise ValueError(f"Figure {figure_name!r} does not exist")
        data = SequenceData(
            name=name,
            figures=figures,
            beats=sorted((BeatData.model_validate(b) for b in beats), key=lambda b: b.time),
        )
        self._sequences[name] = data
        return data

    def get_sequence(self, name: str) -> Optional[SequenceData]:
        return self._sequences.get(name)

    def has_sequence(self, name: str) -> bool:
        return name in self._sequences

    def list_sequences(self) -> List[SequenceData]:
        return list(self._sequences.values())

    def delete_sequence(self, name: str) -> bool:
        return self._sequences.pop(name, None) is not None

    # --- Bulk ---

    def clear(self) -> None:
        self._figures.clear()
        self._sequences.clear()

    def stats(self) -> Dict[str, int]:
        return {"figures": len(self._figures), "sequences": len(self._sequences)}

    # --- Live objects ---

    def build_figure(self, name: str, animator: Optional[Animator] = None) -> Optional[Figure]:
        data = self._figures.get(name)
        if data is None:
            return None
        return Figure.from_data(data, animator=animator or Animator())

    def build_sequence(self, name: str, animator: Optional[Animator] = None) -> Optional[Sequence]:
        data = self._sequences.get(name)
        if data is None:
            return None
        animator = animator or Animator()
        figures = [
            figure
            for figure in (self.build_figure(n, animator=animator) for n in data.figures)
            if figure is not None
        ]
        return Sequence.from_data(data, figures, animator=animator)


_state = ChoreographyState()


def get_state() -> ChoreographyState:
    return _state


def set_state(state: Optional[ChoreographyState]) -> None:
    global _state
    _state = state or ChoreographyState()
