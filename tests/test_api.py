"""
Tests for the public API.

Collaborators are replaced with plain callables or mocked HTTP so the
tests run without network access.
"""

from unittest.mock import Mock

import pytest
import responses

import aether
from aether.sources.nominatim import DEFAULT_NOMINATIM_API_BASE
from aether.sources.waqi import DEFAULT_WAQI_API_BASE
from aether.types import Coordinate, FailureKind, FetchFailure, FetchSuccess

# ============================================================================
# City and province readings
# ============================================================================


class TestCityAirQuality:
    """Tests for city_air_quality()."""

    def test_live_and_fallback_readings_in_order(self, madrid_feed_data):
        def fetch(feed_id):
            if feed_id == "madrid":
                return FetchSuccess(madrid_feed_data)
            return FetchFailure(FailureKind.NETWORK, "timed out")

        readings = aether.city_air_quality(["madrid", "sevilla", "bilbao"], fetch=fetch)

        assert [r.location_key for r in readings] == ["madrid", "sevilla", "bilbao"]
        assert readings[0].index == 68
        assert readings[0].synthetic is False
        assert readings[1].coordinate == Coordinate(37.3891, -5.9845)
        assert readings[1].name == "Sevilla"
        assert readings[1].synthetic is True
        assert readings[1].index == 125
        assert readings[2].synthetic is True

    def test_uses_registered_coordinate_and_name(self, madrid_feed_data):
        madrid_feed_data["city"]["name"] = "Madrid, Spain"

        reading = aether.city_air_quality(
            "madrid", fetch=lambda feed_id: FetchSuccess(madrid_feed_data)
        )[0]

        assert reading.name == "Madrid"
        assert reading.coordinate == Coordinate(40.4168, -3.7038)

    def test_none_means_every_city(self):
        fetch = Mock(return_value=FetchFailure(FailureKind.EMPTY))

        readings = aether.city_air_quality(fetch=fetch, max_workers=4)

        assert len(readings) == len(aether.list_cities()) == 18
        assert fetch.call_count == 18
        assert all(r.synthetic for r in readings)

    def test_unknown_city_raises(self):
        with pytest.raises(ValueError, match="Unknown city 'atlantis'"):
            aether.city_air_quality(["madrid", "atlantis"], fetch=Mock())

    def test_empty_list_raises(self):
        with pytest.raises(ValueError):
            aether.city_air_quality([], fetch=Mock())

    def test_fetch_exception_falls_back(self):
        fetch = Mock(side_effect=RuntimeError("boom"))

        readings = aether.city_air_quality(["vigo"], fetch=fetch)

        assert readings[0].synthetic is True

    def test_missing_token_falls_back(self, monkeypatch):
        monkeypatch.delenv("WAQI_API_TOKEN", raising=False)

        readings = aether.city_air_quality(["madrid"])

        assert readings[0].synthetic is True
        assert readings[0].index == 75

    @responses.activate
    def test_end_to_end_with_waqi(self, waqi_token, madrid_feed_response):
        responses.add(
            responses.GET,
            f"{DEFAULT_WAQI_API_BASE}/feed/madrid/",
            json=madrid_feed_response,
            status=200,
        )
        responses.add(
            responses.GET,
            f"{DEFAULT_WAQI_API_BASE}/feed/barcelona/",
            json={"status": "error", "data": "Unknown station"},
            status=200,
        )

        madrid, barcelona = aether.city_air_quality(["madrid", "barcelona"])

        assert madrid.index == 68 and not madrid.synthetic
        assert barcelona.synthetic and barcelona.index == 45


class TestProvinceAirQuality:
    """Tests for province_air_quality()."""

    def test_uses_capital_feed(self, madrid_feed_data):
        fetch = Mock(return_value=FetchSuccess(madrid_feed_data))

        readings = aether.province_air_quality(["asturias"], fetch=fetch)

        fetch.assert_called_once_with("oviedo")
        assert readings[0].location_key == "asturias"
        assert readings[0].name == "Asturias"
        assert readings[0].coordinate == Coordinate(43.3614, -5.8494)

    def test_all_provinces(self):
        fetch = Mock(return_value=FetchFailure(FailureKind.HTTP_STATUS, "429"))

        readings = aether.province_air_quality(fetch=fetch)

        assert len(readings) == 50
        assert all(r.index is not None for r in readings)

    def test_fallback_index(self):
        fetch = Mock(return_value=FetchFailure(FailureKind.NETWORK))

        asturias, madrid = aether.province_air_quality(["asturias", "madrid"], fetch=fetch)

        assert asturias.synthetic and asturias.index == 50
        assert madrid.synthetic and madrid.index == 75

    def test_unknown_province_raises(self):
        with pytest.raises(ValueError, match="Unknown province"):
            aether.province_air_quality("atlantis", fetch=Mock())


# ============================================================================
# Hotspots
# ============================================================================


class TestPollutionHotspots:
    """Tests for pollution_hotspots()."""

    def test_live_stations_ranked_worst_first(self, bounds_stations, madrid):
        fetch = Mock(return_value=FetchSuccess(bounds_stations))

        result = aether.pollution_hotspots(madrid, radius_meters=500, limit=3, fetch=fetch)

        assert result.synthetic is False
        assert result.total_found == 2
        assert [s.index for s in result.stations] == [120, 55]
        assert result.message == "Found 2 pollution hotspots within 500m"
        assert result.center == madrid

    def test_uses_given_fetch(self, bounds_stations, madrid):
        fetch = Mock(return_value=FetchSuccess(bounds_stations))

        result = aether.pollution_hotspots(madrid, radius_meters=5000, limit=1, fetch=fetch)

        bbox = fetch.call_args.args[0]
        assert bbox.contains(madrid)
        assert result.total_found == 3
        assert [s.index for s in result.stations] == [180]

    def test_synthetic_when_no_stations(self, madrid):
        fetch = Mock(return_value=FetchFailure(FailureKind.EMPTY, "no stations"))

        result = aether.pollution_hotspots(madrid, radius_meters=800, limit=3, fetch=fetch)

        assert result.synthetic is True
        assert result.total_found == 4
        assert len(result.stations) == 3
        assert all(s.synthetic for s in result.stations)
        indices = [s.index for s in result.stations]
        assert indices == sorted(indices, reverse=True)
        assert result.message.endswith("(simulated data)")

    def test_synthetic_is_deterministic(self, madrid):
        fetch = Mock(return_value=FetchFailure(FailureKind.NETWORK))

        first = aether.pollution_hotspots(madrid, fetch=fetch)
        second = aether.pollution_hotspots(madrid, fetch=fetch)

        assert first.stations == second.stations

    def test_stations_outside_radius_fall_back(self, bounds_stations, madrid):
        far_only = [bounds_stations[2]]
        fetch = Mock(return_value=FetchSuccess(far_only))

        result = aether.pollution_hotspots(madrid, radius_meters=500, fetch=fetch)

        assert result.synthetic is True

    def test_city_key_as_center(self):
        fetch = Mock(return_value=FetchFailure(FailureKind.EMPTY))

        result = aether.pollution_hotspots("bilbao", fetch=fetch)

        assert result.center == Coordinate(43.2627, -2.9253)

    def test_city_key_does_not_geocode(self):
        geocode = Mock()

        aether.pollution_hotspots(
            "bilbao", fetch=Mock(return_value=FetchFailure(FailureKind.EMPTY)), geocode=geocode
        )

        geocode.assert_not_called()

    def test_unregistered_city_is_geocoded(self, alcala_search_response):
        geocode = Mock(return_value=FetchSuccess(alcala_search_response))
        fetch = Mock(return_value=FetchFailure(FailureKind.EMPTY))

        result = aether.pollution_hotspots("Alcalá de Henares", fetch=fetch, geocode=geocode)

        geocode.assert_called_once_with("Alcalá de Henares")
        assert result.center == Coordinate(40.4819791, -3.3635421)
        assert fetch.call_args.args[0].contains(result.center)

    def test_geocode_failure_raises(self, madrid):
        geocode = Mock(return_value=FetchFailure(FailureKind.NETWORK, "timed out"))

        with pytest.raises(ValueError, match="Unknown city 'Villarriba'"):
            aether.pollution_hotspots("Villarriba", fetch=Mock(), geocode=geocode)

    def test_invalid_arguments(self, madrid):
        with pytest.raises(ValueError):
            aether.pollution_hotspots(madrid, radius_meters=-1, fetch=Mock())
        with pytest.raises(ValueError):
            aether.pollution_hotspots(madrid, limit=-1, fetch=Mock())
        with pytest.raises(ValueError):
            aether.pollution_hotspots(
                "atlantis",
                fetch=Mock(),
                geocode=Mock(return_value=FetchFailure(FailureKind.EMPTY)),
            )


class TestSearchCity:
    """Tests for search_city()."""

    def test_found(self, alcala_search_response):
        fetch = Mock(return_value=FetchSuccess(alcala_search_response))

        city = aether.search_city("  Alcalá de Henares ", fetch=fetch)

        fetch.assert_called_once_with("Alcalá de Henares")
        assert city.name == "Alcalá de Henares"
        assert city.coordinate == Coordinate(40.4819791, -3.3635421)
        assert city.bounding_box.contains(city.coordinate)

    def test_not_found_gives_none(self):
        fetch = Mock(return_value=FetchFailure(FailureKind.EMPTY, "No city found"))

        assert aether.search_city("Villarriba", fetch=fetch) is None

    def test_fetch_exception_gives_none(self):
        fetch = Mock(side_effect=RuntimeError("boom"))

        assert aether.search_city("Villarriba", fetch=fetch) is None

    def test_blank_name_raises(self):
        with pytest.raises(ValueError):
            aether.search_city("   ", fetch=Mock())

    @responses.activate
    def test_end_to_end_with_nominatim(self, alcala_search_response):
        responses.add(
            responses.GET,
            f"{DEFAULT_NOMINATIM_API_BASE}/search",
            json=alcala_search_response,
            status=200,
        )

        city = aether.search_city("Alcalá de Henares")

        assert city.display_name == "Alcalá de Henares, Comunidad de Madrid, España"


# ============================================================================
# Routes and time slots
# ============================================================================


class TestRepeatedRoutes:
    """Tests for repeated_routes()."""

    def test_groups_as_geojson(self, strava_activities):
        fetch = Mock(return_value=FetchSuccess(strava_activities))

        geojson = aether.repeated_routes("abc123", city="madrid", athlete_id=7, fetch=fetch)

        fetch.assert_called_once_with("abc123", per_page=100)
        assert geojson["type"] == "FeatureCollection"
        assert [f["properties"]["repetitions"] for f in geojson["features"]] == [2, 1]
        assert geojson["features"][0]["properties"]["activityId"] == 101
        assert geojson["metadata"]["athleteId"] == 7
        assert geojson["metadata"]["totalRepetitions"] == 3

    def test_limit(self, strava_activities):
        fetch = Mock(return_value=FetchSuccess(strava_activities))

        geojson = aether.repeated_routes("abc123", limit=1, fetch=fetch)

        assert len(geojson["features"]) == 1

    def test_city_filter_excludes_other_cities(self, strava_activities):
        fetch = Mock(return_value=FetchSuccess(strava_activities))

        geojson = aether.repeated_routes("abc123", city="Barcelona", fetch=fetch)

        assert geojson["features"] == []
        assert geojson["metadata"]["message"] == "No routes found"

    def test_fetch_failure_gives_empty_collection(self):
        fetch = Mock(return_value=FetchFailure(FailureKind.HTTP_STATUS, "401"))

        geojson = aether.repeated_routes("expired", fetch=fetch)

        assert geojson["features"] == []

    def test_negative_limit_raises(self):
        with pytest.raises(ValueError):
            aether.repeated_routes("abc123", limit=-1, fetch=Mock())


class TestBestTimeToGoOut:
    """Tests for best_time_to_go_out()."""

    def test_slots(self):
        slots = aether.best_time_to_go_out("madrid", limit=3)

        assert [s.time_range for s in slots] == [
            "06:00 - 08:00",
            "08:00 - 10:00",
            "10:00 - 12:00",
        ]

    def test_unknown_city_raises(self):
        with pytest.raises(ValueError):
            aether.best_time_to_go_out("atlantis")


def test_list_provinces():
    assert "asturias" in aether.list_provinces()
