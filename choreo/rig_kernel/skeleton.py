"""Bone hierarchy and world-transform propagation.

Bones live in a name-keyed arena owned by the Skeleton. Each bone stores its
parent name and the names of its children; the Skeleton walks the tree
top-down so a parent is always resolved before any of its descendants.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from choreo.rig_kernel.geometry import Transform, rotate_point
from choreo.rig_kernel.schemas import BoneData, BoneState, JointData, SkeletonData, TransformData

logger = logging.getLogger(__name__)


@dataclass
class Joint:
    name: str
    bind_x: float
    bind_y: float
    world_x: float = 0.0
    world_y: float = 0.0

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.world_x = self.bind_x
        self.world_y = self.bind_y

    def to_data(self) -> JointData:
        return JointData(name=self.name, x=self.bind_x, y=self.bind_y)


@dataclass
class Bone:
    name: str
    length: float
    joint_start_name: str
    joint_end_name: str
    parent_name: Optional[str] = None
    bind_transform: Transform = field(default_factory=Transform)
    local_transform: Transform = field(default_factory=Transform)
    children: List[str] = field(default_factory=list)
    # Set by Skeleton; None when the parent or joint reference did not resolve.
    parent: Optional[str] = None
    joint_start: Optional[Joint] = None
    joint_end: Optional[Joint] = None
    world_x: float = 0.0
    world_y: float = 0.0
    world_rotation: float = 0.0

    @classmethod
    def from_data(cls, data: BoneData) -> Bone:
        bind = Transform.from_data(data.bind_transform)
        return cls(
            name=data.name,
            length=data.length,
            joint_start_name=data.joint_start,
            joint_end_name=data.joint_end,
            parent_name=data.parent_name,
            bind_transform=bind,
            local_transform=bind.clone(),
        )

    def update_world_transform(self, parent: Optional[Bone] = None) -> None:
        """Recompute this bone's world transform from its parent's (root: local verbatim)."""
        local = self.local_transform
        if parent is None:
            self.world_x = local.x
            self.world_y = local.y
            self.world_rotation = local.rotation
            return
        dx, dy = rotate_point(local.x, local.y, parent.world_rotation)
        self.world_x = parent.world_x + dx
        self.world_y = parent.world_y + dy
        self.world_rotation = parent.world_rotation + local.rotation

    def start_point(self) -> Tuple[float, float]:
        return self.world_x, self.world_y

    def end_point(self) -> Tuple[float, float]:
        rad = math.radians(self.world_rotation)
        return (
            self.world_x + math.cos(rad) * self.length,
            self.world_y + math.sin(rad) * self.length,
        )

    def reset_to_bind(self) -> None:
        self.local_transform.copy_from(self.bind_transform)

    def set_rotation(self, angle: float) -> None:
        """Set rotation relative to bind; 0 reproduces the bind rotation."""
        self.local_transform.rotation = self.bind_transform.rotation + angle

    def get_rotation(self) -> float:
        return self.local_transform.rotation - self.bind_transform.rotation

    def set_offset(self, x: Optional[float] = None, y: Optional[float] = None) -> None:
        """Set translation relative to bind for the given channels only."""
        if x is not None:
            self.local_transform.x = self.bind_transform.x + x
        if y is not None:
            self.local_transform.y = self.bind_transform.y + y

    def state(self) -> BoneState:
        end_x, end_y = self.end_point()
        return BoneState(
            name=self.name,
            world_x=self.world_x,
            world_y=self.world_y,
            world_rotation=self.world_rotation,
            end_x=end_x,
            end_y=end_y,
            length=self.length,
        )

    def to_data(self) -> BoneData:
        bind = self.bind_transform.to_data()
        has_bind = bool(bind.model_dump(exclude_none=True))
        return BoneData(
            name=self.name,
            length=self.length,
            parent_name=self.parent_name,
            joint_start=self.joint_start_name,
            joint_end=self.joint_end_name,
            bind_transform=bind if has_bind else None,
        )


class Skeleton:
    def __init__(self, data: Optional[SkeletonData] = None):
        self.joints: Dict[str, Joint] = {}
        self.bones: Dict[str, Bone] = {}
        self.root_names: List[str] = []
        if data is not None:
            self._load(data)

    def _load(self, data: SkeletonData) -> None:
        for joint_data in data.joints:
            self.joints[joint_data.name] = Joint(
                name=joint_data.name, bind_x=joint_data.x, bind_y=joint_data.y
            )

        for bone_data in data.bones:
            bone = Bone.from_data(bone_data)
            bone.joint_start = self.joints.get(bone.joint_start_name)
            bone.joint_end = self.joints.get(bone.joint_end_name)
            if bone.joint_start is None or bone.joint_end is None:
                logger.warning(
                    "Bone %s references unknown joint(s) %s/%s; left unlinked",
                    bone.name, bone.joint_start_name, bone.joint_end_name,
                )
            self.bones[bone.name] = bone

        for bone in self.bones.values():
            parent = self.bones.get(bone.parent_name) if bone.parent_name else None
            if bone.parent_name and parent is None:
                logger.warning(
                    "Bone %s references unknown parent %s; treated as root",
                    bone.name, bone.parent_name,
                )
            if parent is None:
                self.root_names.append(bone.name)
            else:
                bone.parent = parent.name
                parent.children.append(bone.name)

    # --- Lookups ---

    def get_bone(self, name: str) -> Optional[Bone]:
        return self.bones.get(name)

    def get_joint(self, name: str) -> Optional[Joint]:
        return self.joints.get(name)

    @property
    def bone_names(self) -> List[str]:
        return list(self.bones.keys())

    @property
    def joint_names(self) -> List[str]:
        return list(self.joints.keys())

    @property
    def roots(self) -> List[Bone]:
        return [self.bones[name] for name in self.root_names]

    def children_of(self, name: str) -> List[Bone]:
        bone = self.bones.get(name)
        if not bone:
            return []
        return [self.bones[child] for child in bone.children]

    # --- Transform passes ---

    def _propagate(self, start: str) -> None:
        # Pre-order: a bone is popped only after its parent has been updated.
        stack = [start]
        while stack:
            bone = self.bones[stack.pop()]
            parent = self.bones[bone.parent] if bone.parent else None
            bone.update_world_transform(parent)
            stack.extend(reversed(bone.children))

    def update_transforms(self) -> None:
        """Recompute every bone's world transform, then derived joint positions."""
        for root in self.root_names:
            self._propagate(root)
        self._update_joints()

    def update_bone(self, name: str) -> None:
        """Recompute the subtree under one bone. Ancestors must already be current."""
        if name not in self.bones:
            return
        self._propagate(name)
        self._update_joints()

    def _update_joints(self) -> None:
        starts: Dict[str, Tuple[float, float]] = {}
        ends: Dict[str, Tuple[float, float]] = {}
        for bone in self.bones.values():
            if bone.joint_start is not None:
                starts.setdefault(bone.joint_start.name, bone.start_point())
            if bone.joint_end is not None:
                ends.setdefault(bone.joint_end.name, bone.end_point())
        for joint in self.joints.values():
            position = starts.get(joint.name) or ends.get(joint.name)
            if position is None:
                joint.reset()
            else:
                joint.world_x, joint.world_y = position

    def reset_to_bind(self) -> None:
        for bone in self.bones.values():
            bone.reset_to_bind()
        self.update_transforms()

    def snapshot(self) -> Dict[str, BoneState]:
        return {name: bone.state() for name, bone in self.bones.items()}

    # --- Serialization ---

    def to_data(self) -> SkeletonData:
        return SkeletonData(
            joints=[j.to_data() for j in self.joints.values()],
            bones=[b.to_data() for b in self.bones.values()],
        )

    @classmethod
    def from_data(cls, data: SkeletonData) -> Skeleton:
        skeleton = cls(data)
        skeleton.update_transforms()
        return skeleton

    @classmethod
    def create_humanoid(cls) -> Skeleton:
        """Default stick-figure rig: 16 joints, 14 bones, hips at the origin."""
        return cls.from_data(humanoid_definition())


def _bone(name, length, start, end, parent=None, **bind) -> BoneData:
    return BoneData(
        name=name,
        length=length,
        parent_name=parent,
        joint_start=start,
        joint_end=end,
        bind_transform=TransformData(**bind) if bind else None,
    )


def humanoid_definition() -> SkeletonData:
    """Y-down rig. Local offsets are expressed in the parent's rotated frame."""
    joints = [
        JointData(name="head", x=0, y=-140),
        JointData(name="neck", x=0, y=-110),
        JointData(name="spine", x=0, y=-50),
        JointData(name="hips", x=0, y=0),
        JointData(name="shoulder-left", x=-20, y=-110),
        JointData(name="elbow-left", x=-20, y=-80),
        JointData(name="wrist-left", x=-20, y=-50),
        JointData(name="shoulder-right", x=20, y=-110),
        JointData(name="elbow-right", x=20, y=-80),
        JointData(name="wrist-right", x=20, y=-50),
        JointData(name="hip-left", x=-15, y=0),
        JointData(name="knee-left", x=-15, y=50),
        JointData(name="ankle-left", x=-15, y=100),
        JointData(name="hip-right", x=15, y=0),
        JointData(name="knee-right", x=15, y=50),
        JointData(name="ankle-right", x=15, y=100),
    ]
    bones = [
        _bone("spine", 50, "hips", "spine", rotation=-90),
        _bone("torso", 60, "spine", "neck", parent="spine", x=50),
        _bone("neck", 30, "neck", "head", parent="torso", x=60),
        # Arms hang from the neck via clavicles.
        _bone("clavicle-left", 20, "neck", "shoulder-left", parent="torso", x=60, rotation=-90),
        _bone("upperArm-left", 30, "shoulder-left", "elbow-left", parent="clavicle-left", x=20, rotation=-90),
        _bone("forearm-left", 30, "elbow-left", "wrist-left", parent="upperArm-left", x=30),
        _bone("clavicle-right", 20, "neck", "shoulder-right", parent="torso", x=60, rotation=90),
        _bone("upperArm-right", 30, "shoulder-right", "elbow-right", parent="clavicle-right", x=20, rotation=90),
        _bone("forearm-right", 30, "elbow-right", "wrist-right", parent="upperArm-right", x=30),
        # Pelvis spans hip-left -> hip-right, offset in the spine's frame.
        _bone("pelvis", 30, "hip-left", "hip-right", parent="spine", y=-15, rotation=90),
        _bone("thigh-left", 50, "hip-left", "knee-left", parent="pelvis", rotation=90),
        _bone("shin-left", 50, "knee-left", "ankle-left", parent="thigh-left", x=50),
        _bone("thigh-right", 50, "hip-right", "knee-right", parent="pelvis", x=30, rotation=90),
        _bone("shin-right", 50, "knee-right", "ankle-right", parent="thigh-right", x=50),
    ]
    return SkeletonData(joints=joints, bones=bones)
