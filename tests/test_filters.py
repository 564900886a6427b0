from __future__ import annotations

import pytest

from pyoutlets.models.location import UserLocation
from pyoutlets.models.outlet import Outlet
from pyoutlets.proximity.filters import filter_outlets, is_open_24_hours, locatable, nearest_outlets
from pyoutlets.proximity.geo import format_distance, haversine_km, is_within_radius, km_to_meters, meters_to_km


def test_haversine_basics() -> None:
    assert haversine_km(3.1570, 101.7123, 3.1570, 101.7123) == 0.0
    forward = haversine_km(3.1570, 101.7123, 3.2000, 101.8000)
    backward = haversine_km(3.2000, 101.8000, 3.1570, 101.7123)
    assert forward == pytest.approx(backward)
    # One degree of latitude on a 6371 km sphere.
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=0.01)


def test_haversine_antipodal_points_do_not_fail() -> None:
    assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(20015.09, abs=0.1)


def test_radius_and_unit_helpers() -> None:
    assert is_within_radius(3.1570, 101.7123, 3.1600, 101.7150, 5.0) is True
    assert is_within_radius(3.1570, 101.7123, 3.2000, 101.8000, 5.0) is False
    assert km_to_meters(1.5) == 1500.0
    assert meters_to_km(250.0) == 0.25


def test_format_distance() -> None:
    assert format_distance(850.4) == "850m"
    assert format_distance(1234.0) == "1.2km"
    assert format_distance(1000.0) == "1.0km"


def _outlets() -> list[Outlet]:
    records = [
        {
            "id": 1,
            "name": "McDonald's Bukit Bintang",
            "address": "Jalan Bukit Bintang",
            "lat": 3.1466,
            "lng": 101.7101,
            "operating_hours": "Open 24 hours",
        },
        {
            "id": 2,
            "name": "McDonald's KLCC",
            "address": "Suria KLCC",
            "lat": 3.1579,
            "lng": 101.7116,
            "operating_hours": "7:00 AM - 11:00 PM",
        },
        {
            "id": 3,
            "name": "McDonald's Ampang",
            "address": "Jalan Ampang",
            "lat": 3.1600,
            "lng": 101.7500,
            "features": {"24_hours": True},
        },
        {"id": 4, "name": "McDonald's Nowhere", "address": "Unknown"},
        {"id": 5, "name": "McDonald's Null Island", "address": "Gulf of Guinea", "lat": 0.0, "lng": 0.0},
    ]
    return [Outlet.model_validate(record) for record in records]


def test_locatable_drops_outlets_without_coordinates() -> None:
    assert [outlet.id for outlet in locatable(_outlets())] == [1, 2, 3]


def test_is_open_24_hours() -> None:
    outlets = {outlet.id: outlet for outlet in _outlets()}
    assert is_open_24_hours(outlets[1]) is True
    assert is_open_24_hours(outlets[2]) is False
    assert is_open_24_hours(outlets[3]) is True

    explicit_no = Outlet(id=9, name="x", operating_hours="24/7", features={"twenty_four_hours": False})
    assert is_open_24_hours(explicit_no) is False


def test_filter_outlets_by_query_and_hours() -> None:
    outlets = _outlets()
    assert [o.id for o in filter_outlets(outlets, query="klcc")] == [2]
    assert [o.id for o in filter_outlets(outlets, query="  JALAN ")] == [1, 3]
    assert [o.id for o in filter_outlets(outlets, twenty_four_hours=True)] == [1, 3]
    assert [o.id for o in filter_outlets(outlets, query="jalan", twenty_four_hours=True)] == [1, 3]
    assert len(filter_outlets(outlets)) == len(outlets)


def test_nearest_outlets_orders_by_distance() -> None:
    here = UserLocation(lat=3.1579, lng=101.7116)
    ranked = nearest_outlets(_outlets(), here)

    assert [outlet.id for outlet, _ in ranked] == [2, 1, 3]
    assert ranked[0][1] == 0.0

    assert [outlet.id for outlet, _ in nearest_outlets(_outlets(), here, limit=1)] == [2]
    assert [outlet.id for outlet, _ in nearest_outlets(_outlets(), here, radius_km=1.5)] == [2, 1]
    assert nearest_outlets(_outlets(), here, limit=-3) == []
