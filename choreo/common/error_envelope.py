"""Canonical error envelope for gateway responses.

Standardized structure:
{
  "error": {
    "code": "string",
    "message": "string",
    "http_status": 404,
    "resource_kind": "figure | sequence | action | pose | null",
    "details": {}
  }
}
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Literal, Optional

from fastapi import HTTPException
from pydantic import BaseModel, Field

ResourceKind = Literal["figure", "sequence", "action", "pose", "beat", "export", "tool", None]


class ErrorDetail(BaseModel):
    code: str
    message: str
    http_status: int
    resource_kind: Optional[ResourceKind] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorEnvelope(BaseModel):
    error: ErrorDetail


def build_error_envelope(
    code: str,
    message: str,
    status_code: int = 400,
    resource_kind: Optional[ResourceKind] = None,
    details: Optional[Dict[str, Any]] = None,
) -> ErrorEnvelope:
    """Construct an ErrorEnvelope (without raising)."""
    return ErrorEnvelope(
        error=ErrorDetail(
            code=code,
            message=message,
            http_status=status_code,
            resource_kind=resource_kind,
            details=details or {},
        )
    )


def error_response(
    code: str,
    message: str,
    status_code: int = 400,
    resource_kind: Optional[ResourceKind] = None,
    details: Optional[Dict[str, Any]] = None,
) -> HTTPException:
    """Raise an HTTPException whose detail is the canonical envelope.

    Args:
        code: Machine-readable error code (e.g., "figure.not_found")
        message: Human-readable error message
        status_code: HTTP status code (default 400)
        resource_kind: The resource type (figure, sequence, ...)
        details: Additional context dict
    """
    envelope = build_error_envelope(
        code=code,
        message=message,
        status_code=status_code,
        resource_kind=resource_kind,
        details=details,
    )
    raise HTTPException(status_code=status_code, detail=envelope.model_dump())


def not_found_error(resource_kind: ResourceKind, name: str, available: Iterable[str] = ()) -> HTTPException:
    """Unknown named resource (404), listing what does exist."""
    return error_response(
        code=f"{resource_kind}.not_found",
        message=f"{resource_kind.capitalize()} {name!r} not found",
        status_code=404,
        resource_kind=resource_kind,
        details={"name": name, "available": sorted(available)},
    )


def conflict_error(resource_kind: ResourceKind, message: str) -> HTTPException:
    """Name collision or other state conflict (409)."""
    return error_response(
        code=f"{resource_kind}.conflict",
        message=message,
        status_code=409,
        resource_kind=resource_kind,
    )
