import logging

from choreo.logging import event_log
from choreo.logging.event_log import ChoreoEvent, log_event, set_event_logger


def test_log_event_uses_swapped_logger():
    captured = []
    set_event_logger(captured.append)
    try:
        entry = log_event("beat.started", "sequence", "fight", actor="A", request_id="req-1")
    finally:
        set_event_logger(None)

    assert captured == [entry]
    assert entry.metadata == {"actor": "A"}
    assert entry.request_id == "req-1"
    assert event_log.get_event_logger() is event_log.default_event_logger


def test_default_logger_writes_to_stdlib(caplog, monkeypatch):
    monkeypatch.setenv("CHOREO_LOG_LEVEL", "INFO")
    caplog.set_level(logging.INFO, logger="choreo.logging.event_log")
    event_log.default_event_logger(
        ChoreoEvent(event_type="sequence.completed", subject_kind="sequence", subject_name="fight")
    )
    assert "sequence.completed sequence=fight" in caplog.text


def test_invalid_level_falls_back_to_info(caplog, monkeypatch):
    monkeypatch.setenv("CHOREO_LOG_LEVEL", "chatty")
    caplog.set_level(logging.INFO, logger="choreo.logging.event_log")
    event_log.default_event_logger(
        ChoreoEvent(event_type="figure.created", subject_kind="figure", subject_name="A")
    )
    assert "figure.created" in caplog.text
