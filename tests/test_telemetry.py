from __future__ import annotations

import logging

import pytest

from blank_engine.runtime import telemetry


def test_record_event_carries_fields(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="blank_engine"):
        telemetry.record_event(
            "engine.test", data={"buffer": "b1"}, logger_name="blank_engine.tests"
        )

    record = caplog.records[-1]
    assert record.getMessage().startswith("event::engine.test")
    assert record.fields == {"event": "engine.test", "buffer": "b1"}


def test_span_logs_failure_and_reraises(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="blank_engine"):
        with pytest.raises(KeyError):
            with telemetry.span("tests::boom", logger_name="blank_engine.tests"):
                raise KeyError("boom")

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("span::fail") for message in messages)


def test_span_metadata_is_logged_on_finish(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="blank_engine"):
        with telemetry.span(
            "tests::ok", logger_name="blank_engine.tests", metadata={"n": 1}
        ) as handle:
            handle.add_metadata("matches", 3)

    record = caplog.records[-1]
    assert record.getMessage().startswith("span::end")
    assert record.fields["matches"] == "3"
    assert record.fields["n"] == "1"


def test_unknown_preset_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="nope")
