from __future__ import annotations

from pyoutlets._redact import redact_for_log


def test_redact_for_log_redacts_location_and_session() -> None:
    payload = {
        "message": "nearest outlet?",
        "session_id": "abc",
        "user_location": {"lat": 3.1579, "lng": 101.7116},
        "nested": [{"latitude": 3.1, "Longitude": 101.7, "name": "KLCC"}],
    }

    redacted = redact_for_log(payload)
    assert redacted["message"] == "nearest outlet?"
    assert redacted["session_id"] == "<redacted>"
    assert redacted["user_location"] == "<redacted>"
    assert redacted["nested"][0]["latitude"] == "<redacted>"
    assert redacted["nested"][0]["Longitude"] == "<redacted>"
    assert redacted["nested"][0]["name"] == "KLCC"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_passes_scalars_through() -> None:
    assert redact_for_log(None) is None
    assert redact_for_log(42) == 42
    assert redact_for_log(b"abc") == "<bytes:3b>"
