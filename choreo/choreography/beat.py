from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from choreo.choreography.schemas import BeatData


class Beat(BaseModel):
    """One actor performing one action at an absolute sequence time."""
    model_config = ConfigDict(frozen=True)

    time: float = Field(..., ge=0.0)
    actor: str
    action: str
    target: Optional[str] = None

    def with_changes(self, **changes: Any) -> Beat:
        return self.model_copy(update=changes)

    def shift(self, delta: float) -> Beat:
        return self.with_changes(time=max(0.0, self.time + delta))

    def to_data(self) -> BeatData:
        return BeatData(**self.model_dump())

    @classmethod
    def from_data(cls, data: BeatData) -> Beat:
        return cls(**BeatData.model_validate(data).model_dump())
