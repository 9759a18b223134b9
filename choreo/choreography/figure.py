"""Figure: a named humanoid skeleton plus its current action state."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from choreo.animator.ticker import Animator, get_animator
from choreo.animator.timeline import Timeline
from choreo.choreography.action import Action
from choreo.choreography.action_library import ActionLibrary, get_action_library
from choreo.choreography.schemas import Facing, FigureData
from choreo.config import runtime_config
from choreo.pose_kernel.library import PoseLibrary, get_pose_library
from choreo.rig_kernel.schemas import BoneState
from choreo.rig_kernel.skeleton import Skeleton

logger = logging.getLogger(__name__)


class Figure:
    def __init__(
        self,
        name: str = "figure",
        x: float = 0.0,
        y: float = 0.0,
        facing: Facing = "right",
        color: Optional[str] = None,
        pose_library: Optional[PoseLibrary] = None,
        action_library: Optional[ActionLibrary] = None,
        animator: Optional[Animator] = None,
        on_redraw: Optional[Callable[["Figure"], None]] = None,
    ):
        self.name = name
        self.x = x
        self.y = y
        self.facing = facing
        self.color = color or runtime_config.get_figure_color()
        self.skeleton = Skeleton.create_humanoid()
        self.pose_library = pose_library or get_pose_library()
        self.action_library = action_library or get_action_library()
        self.animator = animator or get_animator()
        self.on_redraw = on_redraw
        self._timeline: Optional[Timeline] = None
        self._action: Optional[Action] = None

    def __repr__(self) -> str:
        return f"Figure({self.name!r}, action={self.current_action_name!r})"

    def redraw(self) -> None:
        if self.on_redraw:
            self.on_redraw(self)

    # --- Actions ---

    def compile_action(self, action_name: str) -> Optional[Timeline]:
        """Compile an action into a paused timeline without touching the current one."""
        action = self.action_library.get(action_name)
        if action is None:
            logger.warning("Figure %s: action %s not found", self.name, action_name)
            return None
        return self.compile(action)

    def compile(self, action: Action) -> Timeline:
        return action.create_timeline(
            self.skeleton,
            self.pose_library,
            on_update=self.redraw,
            animator=self.animator,
        )

    def perform(self, action_name: str) -> Optional[Timeline]:
        """Stop whatever is playing and make the named action current (paused)."""
        action = self.action_library.get(action_name)
        if action is None:
            logger.warning("Figure %s: action %s not found", self.name, action_name)
            return None
        self.stop()
        self._action = action
        self._timeline = self.compile(action)
        self._timeline.on_seek = self.skeleton.reset_to_bind
        return self._timeline

    def perform_and_play(self, action_name: str, on_complete: Optional[Callable[[], None]] = None) -> Optional[Timeline]:
        timeline = self.perform(action_name)
        if timeline is None:
            return None
        timeline.on_complete = on_complete
        timeline.play()
        return timeline

    def play(self) -> None:
        if self._timeline:
            self._timeline.play()

    def pause(self) -> None:
        if self._timeline:
            self._timeline.pause()

    def stop(self) -> None:
        """Kill the current action and return to bind pose."""
        if self._timeline:
            self._timeline.kill()
            self._timeline = None
        self._action = None
        self.skeleton.reset_to_bind()
        self.redraw()

    def seek(self, time: float) -> None:
        if self._timeline:
            self._timeline.seek(time)

    def seek_progress(self, progress: float) -> None:
        if self._timeline:
            self._timeline.seek_progress(progress)

    def set_pose(self, pose_name: str) -> bool:
        pose = self.pose_library.get(pose_name)
        if pose is None:
            return False
        pose.apply_to(self.skeleton)
        self.redraw()
        return True

    # --- Queries ---

    @property
    def current_action_name(self) -> Optional[str]:
        return self._action.name if self._action else None

    @property
    def timeline(self) -> Optional[Timeline]:
        return self._timeline

    @property
    def progress(self) -> float:
        return self._timeline.progress if self._timeline else 0.0

    def is_playing(self) -> bool:
        return self._timeline.is_active() if self._timeline else False

    def available_actions(self) -> List[str]:
        return self.action_library.names

    def set_pose_library(self, library: PoseLibrary) -> None:
        self.pose_library = library

    def set_action_library(self, library: ActionLibrary) -> None:
        self.action_library = library

    def snapshot(self) -> Dict[str, BoneState]:
        """Bone states in scene space: offset by x/y and mirrored when facing left."""
        mirror = -1.0 if self.facing == "left" else 1.0
        placed: Dict[str, BoneState] = {}
        for name, state in self.skeleton.snapshot().items():
            rotation = state.world_rotation if mirror > 0 else 180.0 - state.world_rotation
            placed[name] = BoneState(
                name=name,
                world_x=self.x + mirror * state.world_x,
                world_y=self.y + state.world_y,
                world_rotation=rotation,
                end_x=self.x + mirror * state.end_x,
                end_y=self.y + state.end_y,
                length=state.length,
            )
        return placed

    def dispose(self) -> None:
        self.stop()
        self.on_redraw = None

    def to_data(self) -> FigureData:
        return FigureData(
            name=self.name,
            x=self.x,
            y=self.y,
            facing=self.facing,
            color=self.color,
            current_action=self.current_action_name,
        )

    @classmethod
    def from_data(cls, data: FigureData, **kwargs) -> Figure:
        return cls(name=data.name, x=data.x, y=data.y, facing=data.facing, color=data.color, **kwargs)
