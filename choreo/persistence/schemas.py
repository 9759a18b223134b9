"""On-disk project format."""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from choreo.choreography.schemas import ActionData, SequenceData
from choreo.pose_kernel.schemas import PoseData

PROJECT_VERSION = "1.0.0"


class ProjectData(BaseModel):
    version: str = PROJECT_VERSION
    poses: List[PoseData] = Field(default_factory=list)
    actions: List[ActionData] = Field(default_factory=list)
    sequences: List[SequenceData] = Field(default_factory=list)
