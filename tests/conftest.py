"""
Pytest configuration and shared fixtures.

This module provides common fixtures and utilities used across all tests.
"""

from datetime import datetime, timezone

import pytest

from aether import registry
from aether.polyline import encode
from aether.sources import nominatim, strava, waqi
from aether.types import Coordinate, QualityReading, Route, Station

# ============================================================================
# Environment and global state
# ============================================================================


@pytest.fixture(autouse=True)
def no_retry_wait(monkeypatch):
    """Skip the backoff between retries so failing upstream tests stay fast."""
    monkeypatch.setattr(waqi._call_waqi_api.retry, "sleep", lambda seconds: None)
    monkeypatch.setattr(strava._call_strava_api.retry, "sleep", lambda seconds: None)
    monkeypatch.setattr(nominatim._call_nominatim_api.retry, "sleep", lambda seconds: None)


@pytest.fixture
def waqi_token(monkeypatch):
    """Set a WAQI token and the default base URL."""
    monkeypatch.setenv("WAQI_API_TOKEN", "test_token_123")
    monkeypatch.delenv("WAQI_API_BASE", raising=False)
    return "test_token_123"


@pytest.fixture
def saved_registry():
    """
    Snapshot the location registry and restore it after the test.

    Tests may clear or modify the registry freely.
    """
    original = registry._LOCATIONS.copy()
    yield registry._LOCATIONS
    registry._LOCATIONS.clear()
    registry._LOCATIONS.update(original)


# ============================================================================
# Coordinates
# ============================================================================


@pytest.fixture
def madrid():
    return Coordinate(40.4168, -3.7038)


@pytest.fixture
def sevilla():
    return Coordinate(37.3891, -5.9845)


# ============================================================================
# Sample WAQI payloads
# ============================================================================


@pytest.fixture
def madrid_feed_data():
    """The "data" object of a WAQI city feed."""
    return {
        "aqi": 68,
        "idx": 5725,
        "dominentpol": "pm25",
        "city": {
            "name": "Madrid",
            "geo": [40.4168, -3.7038],
            "url": "https://aqicn.org/city/madrid",
        },
        "iaqi": {
            "pm25": {"v": 68},
            "pm10": {"v": 24},
            "no2": {"v": 17.4},
            "o3": {"v": 31.2},
            "co": {"v": 0.3},
        },
        "time": {"iso": "2024-03-01T12:00:00+01:00", "s": "2024-03-01 12:00:00"},
    }


@pytest.fixture
def madrid_feed_response(madrid_feed_data):
    """Full WAQI feed response body."""
    return {"status": "ok", "data": madrid_feed_data}


@pytest.fixture
def bounds_stations(madrid):
    """
    WAQI map/bounds station records around central Madrid.

    Two stations are within 500m, one is ~2km away and one has no reading.
    """
    return [
        {
            "lat": 40.4180,
            "lon": -3.7040,
            "uid": 1,
            "aqi": "55",
            "station": {"name": "Plaza del Carmen", "time": "2024-03-01T12:00:00+01:00"},
        },
        {
            "lat": 40.4160,
            "lon": -3.7010,
            "uid": 2,
            "aqi": "120",
            "station": {"name": "Puerta del Sol", "time": "2024-03-01T12:00:00+01:00"},
        },
        {
            "lat": 40.4350,
            "lon": -3.7038,
            "uid": 3,
            "aqi": "180",
            "station": {"name": "Chamberí", "time": "2024-03-01T12:00:00+01:00"},
        },
        {
            "lat": 40.4170,
            "lon": -3.7035,
            "uid": 4,
            "aqi": "-",
            "station": {"name": "Offline", "time": "2024-03-01T12:00:00+01:00"},
        },
    ]


# ============================================================================
# Sample records
# ============================================================================


@pytest.fixture
def sample_reading(madrid):
    return QualityReading(
        coordinate=madrid,
        index=68,
        dominant_factor="pm25",
        components={"pm25": 68.0, "pm10": 24.0},
        color="#FFA81A",
        captured_at=datetime(2024, 3, 1, 11, 0, tzinfo=timezone.utc),
        synthetic=False,
        location_key="madrid",
        name="Madrid",
    )


@pytest.fixture
def sample_station(madrid):
    return Station(
        name="Puerta del Sol",
        coordinate=madrid,
        concentration=40.0,
        index=112,
        color="#FF6F00",
        distance_from_center=120.5,
    )


def make_route(route_id, start, end, path=None, city="Madrid", **kwargs):
    """Build a Route whose polyline runs from ``start`` to ``end``."""
    if path is None:
        path = [(start.longitude, start.latitude), (end.longitude, end.latitude)]
    return Route(
        route_id=route_id,
        summary_polyline=encode(path),
        start=start,
        end=end,
        name=kwargs.pop("name", f"Run {route_id}"),
        activity_type=kwargs.pop("activity_type", "Run"),
        location_city=city,
        **kwargs,
    )


@pytest.fixture
def route_factory():
    return make_route


@pytest.fixture
def strava_activities():
    """Activity records as returned by the athlete/activities endpoint."""
    retiro_loop = encode([(-3.6840, 40.4153), (-3.6800, 40.4180), (-3.6845, 40.4155)])
    river_run = encode([(-3.7200, 40.4000), (-3.7300, 40.3900)])
    return [
        {
            "id": 101,
            "name": "Morning Run",
            "type": "Run",
            "sport_type": "Run",
            "distance": 5200.0,
            "moving_time": 1650,
            "start_date_local": "2024-03-01T07:30:00Z",
            "start_latlng": [40.4153, -3.6840],
            "end_latlng": [40.4155, -3.6845],
            "location_city": "Madrid",
            "map": {"id": "a101", "summary_polyline": retiro_loop},
        },
        {
            "id": 102,
            "name": "Lunch Run",
            "type": "Run",
            "distance": 5100.0,
            "moving_time": 1600,
            "start_date_local": "2024-03-02T13:00:00Z",
            "start_latlng": [40.4154, -3.6841],
            "end_latlng": [40.4156, -3.6846],
            "location_city": "Madrid",
            "map": {"id": "a102", "summary_polyline": retiro_loop},
        },
        {
            "id": 103,
            "name": "River Run",
            "type": "Run",
            "distance": 8000.0,
            "moving_time": 2500,
            "start_date_local": "2024-03-03T08:00:00Z",
            "start_latlng": [40.4000, -3.7200],
            "end_latlng": [40.3900, -3.7300],
            "location_city": "Madrid",
            "map": {"id": "a103", "summary_polyline": river_run},
        },
        {
            "id": 104,
            "name": "Indoor Ride",
            "type": "VirtualRide",
            "distance": 20000.0,
            "moving_time": 3600,
            "start_date_local": "2024-03-04T19:00:00Z",
            "start_latlng": [],
            "end_latlng": [],
            "location_city": None,
            "map": {"id": "a104", "summary_polyline": ""},
        },
    ]


# ============================================================================
# Sample city search payloads
# ============================================================================


@pytest.fixture
def alcala_search_response():
    """Nominatim search response for a city outside the built-in catalogue."""
    return [
        {
            "place_id": 108345219,
            "licence": "Data © OpenStreetMap contributors, ODbL 1.0.",
            "osm_type": "relation",
            "osm_id": 342563,
            "lat": "40.4819791",
            "lon": "-3.3635421",
            "display_name": "Alcalá de Henares, Comunidad de Madrid, España",
            "name": "Alcalá de Henares",
            "address": {
                "city": "Alcalá de Henares",
                "province": "Comunidad de Madrid",
                "state": "Comunidad de Madrid",
                "country": "España",
                "country_code": "es",
            },
            "boundingbox": ["40.4391761", "40.5374089", "-3.4406906", "-3.2785218"],
        }
    ]
