"""Skeleton definition schemas (flat joint/bone lists, name references)."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TransformData(BaseModel):
    """Sparse transform payload. Absent fields fall back to identity on load."""
    model_config = ConfigDict(populate_by_name=True)

    x: Optional[float] = None
    y: Optional[float] = None
    rotation: Optional[float] = None
    scale_x: Optional[float] = Field(default=None, alias="scaleX")
    scale_y: Optional[float] = Field(default=None, alias="scaleY")


class JointData(BaseModel):
    name: str
    x: float = 0.0
    y: float = 0.0


class BoneData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    length: float = Field(0.0, ge=0.0)
    parent_name: Optional[str] = Field(default=None, alias="parentName")
    joint_start: str = Field(..., alias="jointStart")
    joint_end: str = Field(..., alias="jointEnd")
    bind_transform: Optional[TransformData] = Field(default=None, alias="bindTransform")


class SkeletonData(BaseModel):
    joints: List[JointData] = Field(default_factory=list)
    bones: List[BoneData] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_names(self) -> "SkeletonData":
        joint_names = [j.name for j in self.joints]
        if len(joint_names) != len(set(joint_names)):
            raise ValueError("Joint names must be unique")
        bone_names = [b.name for b in self.bones]
        if len(bone_names) != len(set(bone_names)):
            raise ValueError("Bone names must be unique")
        return self


class BoneState(BaseModel):
    """World-space state of one bone after a transform pass (renderer contract)."""
    name: str
    world_x: float
    world_y: float
    world_rotation: float
    end_x: float
    end_y: float
    length: float
