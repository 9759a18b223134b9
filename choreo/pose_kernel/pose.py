"""Sparse named poses: per-bone partial transforms relative to bind."""
from __future__ import annotations

from typing import Dict, List, Optional

from choreo.pose_kernel.schemas import CHANNELS, NEUTRAL, BoneTransformData, PoseData
from choreo.rig_kernel.geometry import lerp, lerp_angle
from choreo.rig_kernel.skeleton import Skeleton


def _channels(data: Optional[BoneTransformData]) -> Dict[str, float]:
    if data is None:
        return {}
    return data.model_dump(exclude_none=True)


class Pose:
    def __init__(self, name: str, bone_transforms: Optional[Dict[str, BoneTransformData]] = None):
        self.name = name
        self.bone_transforms: Dict[str, BoneTransformData] = {}
        for bone_name, transform in (bone_transforms or {}).items():
            if isinstance(transform, BoneTransformData):
                transform = transform.model_copy()
            self.bone_transforms[bone_name] = BoneTransformData.model_validate(transform)

    def __repr__(self) -> str:
        return f"Pose({self.name!r}, bones={list(self.bone_transforms)})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pose):
            return NotImplemented
        return self.name == other.name and self.bone_transforms == other.bone_transforms

    @property
    def bone_names(self) -> List[str]:
        return list(self.bone_transforms.keys())

    def get_bone_transform(self, bone_name: str) -> Optional[BoneTransformData]:
        return self.bone_transforms.get(bone_name)

    def set_bone_transform(self, bone_name: str, transform: BoneTransformData) -> None:
        """Merge channels into a bone's entry; channels not given are kept."""
        merged = _channels(self.bone_transforms.get(bone_name))
        merged.update(_channels(transform))
        self.bone_transforms[bone_name] = BoneTransformData(**merged)

    def apply_to(self, skeleton: Skeleton) -> None:
        """Write present channels onto the skeleton, then run one transform pass."""
        for bone_name, transform in self.bone_transforms.items():
            bone = skeleton.get_bone(bone_name)
            if bone is None:
                continue
            if transform.rotation is not None:
                bone.set_rotation(transform.rotation)
            bone.set_offset(x=transform.x, y=transform.y)
            if transform.scale_x is not None:
                bone.local_transform.scale_x = transform.scale_x
            if transform.scale_y is not None:
                bone.local_transform.scale_y = transform.scale_y
        skeleton.update_transforms()

    def lerp(self, target: Pose, t: float) -> Pose:
        """Blend towards target. Channels absent from both poses stay absent."""
        result = Pose(f"{self.name}_to_{target.name}_{t:.2f}")
        bone_names = list(self.bone_transforms)
        bone_names += [name for name in target.bone_transforms if name not in self.bone_transforms]

        for bone_name in bone_names:
            src = _channels(self.bone_transforms.get(bone_name))
            dst = _channels(target.bone_transforms.get(bone_name))
            blended = {}
            for channel in CHANNELS:
                if channel not in src and channel not in dst:
                    continue
                a = src.get(channel, NEUTRAL[channel])
                b = dst.get(channel, NEUTRAL[channel])
                if channel == "rotation":
                    blended[channel] = lerp_angle(a, b, t)
                else:
                    blended[channel] = lerp(a, b, t)
            if blended:
                result.bone_transforms[bone_name] = BoneTransformData(**blended)
        return result

    @classmethod
    def difference(cls, source: Pose, target: Pose) -> Pose:
        """Delta pose: target minus source for every channel present in target."""
        result = cls(f"diff_{source.name}_{target.name}")
        for bone_name, transform in target.bone_transforms.items():
            src = _channels(source.bone_transforms.get(bone_name))
            delta = {
                channel: value - src.get(channel, 0.0)
                for channel, value in _channels(transform).items()
            }
            if delta:
                result.bone_transforms[bone_name] = BoneTransformData(**delta)
        return result

    def clone(self) -> Pose:
        return Pose(
            self.name,
            {name: transform.model_copy() for name, transform in self.bone_transforms.items()},
        )

    def to_data(self) -> PoseData:
        return PoseData(name=self.name, bone_transforms=self.clone().bone_transforms)

    @classmethod
    def from_data(cls, data: PoseData) -> Pose:
        return cls(data.name, data.bone_transforms)
