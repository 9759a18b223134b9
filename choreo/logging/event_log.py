"""Lightweight event log entries for choreography playback and tool calls."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from choreo.config import runtime_config

logger = logging.getLogger(__name__)


class ChoreoEvent(BaseModel):
    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    subject_kind: str
    subject_name: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


EventLogger = Callable[[ChoreoEvent], None]


def default_event_logger(entry: ChoreoEvent) -> None:
    """Forward the event to stdlib logging at the configured level."""
    level = logging.getLevelName(runtime_config.get_log_level())
    if not isinstance(level, int):
        level = logging.INFO
    logger.log(
        level,
        "%s %s=%s %s",
        entry.event_type,
        entry.subject_kind,
        entry.subject_name,
        entry.metadata,
        extra={"event_id": entry.event_id, "request_id": entry.request_id},
    )


_event_logger: EventLogger = default_event_logger


def get_event_logger() -> EventLogger:
    return _event_logger


def set_event_logger(event_logger: Optional[EventLogger]) -> None:
    global _event_logger
    _event_logger = event_logger or default_event_logger


def log_event(event_type: str, subject_kind: str, subject_name: str, **metadata: Any) -> ChoreoEvent:
    entry = ChoreoEvent(
        event_type=event_type,
        subject_kind=subject_kind,
        subject_name=subject_name,
        request_id=metadata.pop("request_id", None),
        metadata=metadata,
    )
    _event_logger(entry)
    return entry
