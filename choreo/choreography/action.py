"""Actions: timed keyframe lists compiled into per-bone tweens."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from choreo.animator.easing import resolve_ease
from choreo.animator.ticker import Animator, get_animator
from choreo.animator.timeline import Timeline
from choreo.choreography.schemas import ActionData, KeyframeData
from choreo.pose_kernel.library import PoseLibrary, get_pose_library
from choreo.pose_kernel.pose import Pose
from choreo.rig_kernel.geometry import shortest_angle_delta
from choreo.rig_kernel.skeleton import Bone, Skeleton

logger = logging.getLogger(__name__)

# Channels driven by a compiled action. Scale is pose-only.
ANIMATED_CHANNELS = ("rotation", "x", "y")


def _segment_values(pose: Pose, bone_name: str) -> Dict[str, float]:
    transform = pose.get_bone_transform(bone_name)
    values = {channel: 0.0 for channel in ANIMATED_CHANNELS}
    if transform is not None:
        for channel in ANIMATED_CHANNELS:
            value = getattr(transform, channel)
            if value is not None:
                values[channel] = value
    return values


def _bone_writer(skeleton: Skeleton, bone: Bone, on_update: Optional[Callable[[], None]]):
    def write(values: Dict[str, float]) -> None:
        bone.set_rotation(values["rotation"])
        bone.set_offset(x=values["x"], y=values["y"])
        skeleton.update_transforms()
        if on_update:
            on_update()
    return write


class Action:
    def __init__(self, name: str, duration: float, keyframes: List[KeyframeData], category: str = "misc"):
        self.name = name
        self.duration = duration
        self.keyframes = [KeyframeData.model_validate(kf) for kf in keyframes]
        self.category = category

    def __repr__(self) -> str:
        return f"Action({self.name!r}, duration={self.duration}, keyframes={len(self.keyframes)})"

    def touched_bones(self, pose_library: Optional[PoseLibrary] = None) -> List[str]:
        """Bones referenced by any keyframe pose, in first-seen order."""
        library = pose_library or get_pose_library()
        bones: List[str] = []
        for kf in self.keyframes:
            pose = library.get(kf.pose)
            if pose is None:
                logger.debug("Action %s references missing pose %s", self.name, kf.pose)
                continue
            for bone_name in pose.bone_names:
                if bone_name not in bones:
                    bones.append(bone_name)
        return bones

    def create_timeline(
        self,
        skeleton: Skeleton,
        pose_library: Optional[PoseLibrary] = None,
        on_update: Optional[Callable[[], None]] = None,
        animator: Optional[Animator] = None,
    ) -> Timeline:
        """Compile into a paused timeline driving the skeleton.

        One tween per touched bone per consecutive keyframe pair, spanning
        [kf_i.time, kf_i+1.time] scaled by duration and eased by kf_i+1's curve.
        """
        library = pose_library or get_pose_library()
        timeline = (animator or get_animator()).timeline(paused=True, name=self.name)

        for bone_name in self.touched_bones(library):
            bone = skeleton.get_bone(bone_name)
            if bone is None:
                continue
            write = _bone_writer(skeleton, bone, on_update)
            for kf_from, kf_to in zip(self.keyframes, self.keyframes[1:]):
                pose_from = library.get(kf_from.pose)
                pose_to = library.get(kf_to.pose)
                if pose_from is None or pose_to is None:
                    continue
                start = _segment_values(pose_from, bone_name)
                end = _segment_values(pose_to, bone_name)
                end["rotation"] = start["rotation"] + shortest_angle_delta(start["rotation"], end["rotation"])
                timeline.to(
                    start,
                    end,
                    duration=(kf_to.time - kf_from.time) * self.duration,
                    position=kf_from.time * self.duration,
                    ease=kf_to.easing,
                    on_update=write,
                )
        return timeline

    def get_pose_at_time(
        self,
        t: float,
        pose_library: Optional[PoseLibrary] = None,
        eased: bool = True,
    ) -> Optional[Pose]:
        """Preview the pose at normalized time t without touching any skeleton.

        With eased=True the bracketing segment's curve is applied, matching what
        a live timeline shows at t * duration. Returns None for unknown poses.
        """
        if not self.keyframes:
            return None
        library = pose_library or get_pose_library()
        first, last = self.keyframes[0], self.keyframes[-1]

        if t <= first.time or len(self.keyframes) == 1:
            pose = library.get(first.pose)
            return pose.clone() if pose else None
        if t >= last.time:
            pose = library.get(last.pose)
            return pose.clone() if pose else None

        for kf_from, kf_to in zip(self.keyframes, self.keyframes[1:]):
            if kf_from.time <= t <= kf_to.time:
                break
        else:
            pose = library.get(last.pose)
            return pose.clone() if pose else None

        pose_from = library.get(kf_from.pose)
        pose_to = library.get(kf_to.pose)
        if pose_from is None or pose_to is None:
            return None

        span = kf_to.time - kf_from.time
        local = (t - kf_from.time) / span if span > 0 else 1.0
        if eased:
            local = resolve_ease(kf_to.easing)(local)
        return pose_from.lerp(pose_to, local)

    def to_data(self) -> ActionData:
        return ActionData(
            name=self.name,
            duration=self.duration,
            keyframes=[kf.model_copy() for kf in self.keyframes],
            category=self.category,
        )

    @classmethod
    def from_data(cls, data: ActionData) -> Action:
        return cls(data.name, data.duration, data.keyframes, data.category)
