"""JSON import/export for pose and action libraries, sequences and whole projects.

Exports use camelCase field names and omit unset channels. Imports merge into
the libraries they are given; names already present are replaced.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, TypeAdapter

from choreo.choreography.action_library import ActionLibrary
from choreo.choreography.figure import Figure
from choreo.choreography.schemas import ActionData, SequenceData
from choreo.choreography.sequence import Sequence
from choreo.config import runtime_config
from choreo.persistence.schemas import PROJECT_VERSION, ProjectData
from choreo.pose_kernel.library import PoseLibrary
from choreo.pose_kernel.schemas import PoseData

logger = logging.getLogger(__name__)

_POSES = TypeAdapter(List[PoseData])
_ACTIONS = TypeAdapter(List[ActionData])


def _dump(model: BaseModel) -> str:
    return model.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def _dump_list(adapter: TypeAdapter, items: List[Any]) -> str:
    return adapter.dump_json(items, by_alias=True, exclude_none=True, indent=2).decode("utf-8")


def _check_version(version: str) -> None:
    major = version.split(".", 1)[0]
    if major != PROJECT_VERSION.split(".", 1)[0]:
        raise ValueError(f"Unsupported project version {version!r}; expected {PROJECT_VERSION}")


def export_poses(library: PoseLibrary) -> str:
    return _dump_list(_POSES, library.to_data())


def import_poses(text: str, library: PoseLibrary) -> int:
    poses = _POSES.validate_json(text)
    library.load_from_data(poses)
    return len(poses)


def export_actions(library: ActionLibrary) -> str:
    return _dump_list(_ACTIONS, library.to_data())


def import_actions(text: str, library: ActionLibrary) -> int:
    actions = _ACTIONS.validate_json(text)
    library.load_from_data(actions)
    return len(actions)


def export_sequence(sequence: Sequence) -> str:
    return _dump(sequence.to_data())


def import_sequence(text: str, figures: Iterable[Figure], **kwargs) -> Sequence:
    return Sequence.from_data(SequenceData.model_validate_json(text), figures, **kwargs)


def export_project(
    pose_library: PoseLibrary,
    action_library: ActionLibrary,
    sequences: Iterable[Sequence] = (),
) -> str:
    project = ProjectData(
        poses=pose_library.to_data(),
        actions=action_library.to_data(),
        sequences=[sequence.to_data() for sequence in sequences],
    )
    return _dump(project)


def import_project(
    text: str,
    pose_library: PoseLibrary,
    action_library: ActionLibrary,
    figures: Iterable[Figure] = (),
    **kwargs,
) -> List[Sequence]:
    """Load poses and actions into the given libraries and rebuild the sequences.

    Raises ValueError when the project's major version differs from ours;
    nothing is loaded in that case.
    """
    project = ProjectData.model_validate_json(text)
    _check_version(project.version)
    pose_library.load_from_data(project.poses)
    action_library.load_from_data(project.actions)
    figures = list(figures)
    sequences = [Sequence.from_data(data, figures, **kwargs) for data in project.sequences]
    logger.info(
        "Imported project %s: %d poses, %d actions, %d sequences",
        project.version, len(project.poses), len(project.actions), len(sequences),
    )
    return sequences


def write_export(text: str, filename: str, root: Optional[str] = None) -> Path:
    """Write exported JSON under the export directory and return the path."""
    dir_path = root or runtime_config.get_export_dir()
    if not dir_path:
        raise ValueError("CHOREO_EXPORT_DIR is not configured")
    if not filename or Path(filename).name != filename:
        raise ValueError(f"Invalid export filename {filename!r}")
    target_dir = Path(dir_path)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    path.write_text(text, encoding="utf-8")
    return path
