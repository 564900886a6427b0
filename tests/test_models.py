from __future__ import annotations

from datetime import datetime

import pytest
from pydantic import ValidationError

from pyoutlets.exceptions import LocationTimeoutError, SessionBusyError
from pyoutlets.models import (
    ChatMessage,
    ChatSession,
    ErrorInfo,
    LocationPermission,
    LocationState,
    MessageRole,
    Outlet,
    SessionStatus,
    UserLocation,
)


def test_outlet_coerces_coordinates() -> None:
    outlet = Outlet.model_validate(
        {"id": "kl-1", "name": "KLCC", "address": "Suria KLCC", "latitude": "3.1579", "longitude": "101.7116"}
    )

    assert outlet.lat == 3.1579
    assert outlet.lng == 101.7116
    assert outlet.has_coordinates is True


@pytest.mark.parametrize(
    ("lat", "lng"),
    [
        (None, 101.7),
        ("--", 101.7),
        ("abc", 101.7),
        (95.0, 101.7),
        (3.1, 200.0),
        (float("nan"), 101.7),
        (0.0, 0.0),
    ],
)
def test_outlet_without_usable_coordinates(lat: object, lng: object) -> None:
    outlet = Outlet.model_validate({"id": 1, "name": "x", "lat": lat, "lng": lng})

    assert outlet.has_coordinates is False


def test_outlet_sentinels_and_hours() -> None:
    outlet = Outlet.model_validate(
        {
            "id": 7,
            "name": "Ampang",
            "address": "--",
            "operating_hours": {"Mon": "7am-11pm", "Sun": ""},
            "features": {"drive_through": True, "wifi": False, "parking": True},
            "unknown_field": "ignored",
        }
    )

    assert outlet.address == ""
    assert outlet.operating_hours == "Mon: 7am-11pm"
    assert outlet.features.drive_thru is True
    assert outlet.features.wifi is False
    assert outlet.features.breakfast is None
    assert not hasattr(outlet.features, "parking")


def test_outlet_is_frozen() -> None:
    outlet = Outlet(id=1, name="x")
    with pytest.raises(ValidationError):
        outlet.name = "y"  # type: ignore[misc]


def test_user_location_value_equality_and_range() -> None:
    assert UserLocation(lat=3.1, lng=101.7) == UserLocation.model_validate({"latitude": 3.1, "longitude": 101.7})
    assert UserLocation(lat=3.1, lng=101.7).as_tuple() == (3.1, 101.7)

    with pytest.raises(ValidationError):
        UserLocation(lat=91.0, lng=0.0)
    with pytest.raises(ValidationError):
        UserLocation(lat=0.0, lng=-181.0)


def test_location_permission_unknown_values() -> None:
    assert LocationPermission("granted") == LocationPermission.GRANTED
    assert LocationPermission("weird") == LocationPermission.UNKNOWN
    assert LocationState(permission="DENIED").permission == LocationPermission.DENIED


def test_error_info_from_exception() -> None:
    try:
        raise LocationTimeoutError("Location request timed out") from TimeoutError("3s")
    except LocationTimeoutError as exc:
        info = ErrorInfo.from_exception(exc)

    assert info.code == "timeout"
    assert info.message == "Location request timed out"
    assert info.details == "3s"

    busy = ErrorInfo.from_exception(SessionBusyError("busy"))
    assert busy.code == "busy"
    assert ErrorInfo.from_exception(ValueError()).code == "ValueError"
    assert ErrorInfo.from_exception(ValueError(), code="custom").code == "custom"


def test_chat_models() -> None:
    naive = datetime(2024, 5, 1, 12, 0)
    message = ChatMessage(id="msg_1", role="user", text="hi", timestamp=naive)

    assert message.role == MessageRole.USER
    assert message.timestamp.tzinfo is not None

    session = ChatSession(status=SessionStatus.SENDING, transcript=(message,))
    assert session.is_active is True
    assert session.is_sending is True
    assert ChatSession().is_active is False
