"""Pose registry. Libraries are plain objects passed to whoever needs lookups."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from choreo.pose_kernel.defaults import DEFAULT_POSES
from choreo.pose_kernel.pose import Pose
from choreo.pose_kernel.schemas import PoseData


class PoseLibrary:
    def __init__(self, poses: Optional[Iterable[Pose]] = None):
        self._poses: Dict[str, Pose] = {}
        for pose in poses or []:
            self.add(pose)

    @classmethod
    def with_defaults(cls) -> PoseLibrary:
        return cls(Pose(name, transforms) for name, transforms in DEFAULT_POSES.items())

    def add(self, pose: Pose) -> None:
        """Register a pose, replacing any existing pose with the same name."""
        self._poses[pose.name] = pose

    def get(self, name: str) -> Optional[Pose]:
        return self._poses.get(name)

    def has(self, name: str) -> bool:
        return name in self._poses

    def remove(self, name: str) -> bool:
        return self._poses.pop(name, None) is not None

    @property
    def names(self) -> List[str]:
        return list(self._poses.keys())

    def __len__(self) -> int:
        return len(self._poses)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def load_from_data(self, data: Iterable[PoseData]) -> None:
        for pose_data in data:
            self.add(Pose.from_data(PoseData.model_validate(pose_data)))

    def to_data(self) -> List[PoseData]:
        return [pose.to_data() for pose in self._poses.values()]


_default_library: Optional[PoseLibrary] = None


def get_pose_library() -> PoseLibrary:
    """Process-wide default library, built on first use."""
    global _default_library
    if _default_library is None:
        _default_library = PoseLibrary.with_defaults()
    return _default_library


def set_pose_library(library: Optional[PoseLibrary]) -> None:
    global _default_library
    _default_library = library
