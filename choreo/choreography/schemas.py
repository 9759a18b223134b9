"""Action, beat and sequence definition formats."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Facing = Literal["left", "right"]


class KeyframeData(BaseModel):
    time: float = Field(..., ge=0.0, description="Normalized time (0-1) within the action")
    pose: str
    easing: Optional[str] = None


class ActionData(BaseModel):
    name: str
    duration: float = Field(..., ge=0.0, description="Seconds")
    keyframes: List[KeyframeData] = Field(default_factory=list)
    category: str = "misc"


class BeatData(BaseModel):
    time: float = Field(..., ge=0.0, description="Absolute start time in seconds")
    actor: str
    action: str
    target: Optional[str] = None


class SequenceData(BaseModel):
    name: str = "sequence"
    figures: List[str] = Field(default_factory=list)
    beats: List[BeatData] = Field(default_factory=list)


class FigureData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    x: float = 0.0
    y: float = 0.0
    facing: Facing = "right"
    color: Optional[str] = None
    current_action: Optional[str] = Field(default=None, alias="currentAction")
