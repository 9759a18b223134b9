import pytest
from fastapi import HTTPException

from choreo.common.error_envelope import (
    build_error_envelope,
    conflict_error,
    error_response,
    not_found_error,
)


def test_build_error_envelope_defaults():
    envelope = build_error_envelope(code="tool.invalid_request", message="bad")
    data = envelope.model_dump()
    assert data["error"]["http_status"] == 400
    assert data["error"]["details"] == {}
    assert data["error"]["resource_kind"] is None


def test_error_response_raises_with_envelope_detail():
    with pytest.raises(HTTPException) as excinfo:
        error_response(code="export.failed", message="disk full", status_code=500, resource_kind="export")
    assert excinfo.value.status_code == 500
    assert excinfo.value.detail["error"]["code"] == "export.failed"


def test_not_found_lists_available_names():
    with pytest.raises(HTTPException) as excinfo:
        not_found_error("figure", "ghost", available=["B", "A"])
    error = excinfo.value.detail["error"]
    assert excinfo.value.status_code == 404
    assert error["code"] == "figure.not_found"
    assert error["details"] == {"name": "ghost", "available": ["A", "B"]}


def test_conflict_error():
    with pytest.raises(HTTPException) as excinfo:
        conflict_error("sequence", "Sequence 'fight' already exists")
    assert excinfo.value.status_code == 409
    assert excinfo.value.detail["error"]["resource_kind"] == "sequence"
