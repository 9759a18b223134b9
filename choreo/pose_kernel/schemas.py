from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from choreo.rig_kernel.schemas import TransformData

# Pose channels share the sparse transform payload; None means "leave untouched".
BoneTransformData = TransformData

CHANNELS = ("rotation", "x", "y", "scale_x", "scale_y")

NEUTRAL = {"rotation": 0.0, "x": 0.0, "y": 0.0, "scale_x": 1.0, "scale_y": 1.0}


class PoseData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    bone_transforms: Dict[str, BoneTransformData] = Field(default_factory=dict, alias="boneTransforms")
