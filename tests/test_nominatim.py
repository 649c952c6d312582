"""
Tests for the city search source.
"""

import pytest
import responses

from aether.sources.nominatim import (
    DEFAULT_NOMINATIM_API_BASE,
    DEFAULT_USER_AGENT,
    parse_city_result,
    search_city,
)
from aether.types import BoundingBox, Coordinate, FailureKind, FetchSuccess

SEARCH_URL = f"{DEFAULT_NOMINATIM_API_BASE}/search"


class TestSearchCity:
    """Tests for search_city()."""

    @responses.activate
    def test_success(self, alcala_search_response, monkeypatch):
        monkeypatch.delenv("NOMINATIM_USER_AGENT", raising=False)
        responses.add(responses.GET, SEARCH_URL, json=alcala_search_response, status=200)

        result = search_city("Alcalá de Henares")

        assert isinstance(result, FetchSuccess)
        request = responses.calls[0].request
        assert request.headers["User-Agent"] == DEFAULT_USER_AGENT
        assert request.params["q"] == "Alcalá de Henares, España"
        assert request.params["countrycodes"] == "es"
        assert request.params["limit"] == "1"
        assert request.params["format"] == "json"

    @responses.activate
    def test_base_url_and_user_agent_from_environment(self, monkeypatch):
        monkeypatch.setenv("NOMINATIM_API_BASE", "https://geo.example.org/")
        monkeypatch.setenv("NOMINATIM_USER_AGENT", "aether-tests")
        responses.add(responses.GET, "https://geo.example.org/search", json=[], status=200)

        search_city("Toledo")

        assert responses.calls[0].request.headers["User-Agent"] == "aether-tests"

    @responses.activate
    def test_no_match(self):
        responses.add(responses.GET, SEARCH_URL, json=[], status=200)

        assert search_city("Villarriba").kind == FailureKind.EMPTY

    @responses.activate
    def test_unexpected_shape(self):
        responses.add(responses.GET, SEARCH_URL, json={"error": "bad"}, status=200)

        assert search_city("Toledo").kind == FailureKind.MALFORMED

    @responses.activate
    def test_not_json(self):
        responses.add(responses.GET, SEARCH_URL, body="<html>", status=200)

        assert search_city("Toledo").kind == FailureKind.MALFORMED

    @responses.activate
    def test_client_error_not_retried(self):
        responses.add(responses.GET, SEARCH_URL, status=403)

        result = search_city("Toledo")

        assert result.kind == FailureKind.HTTP_STATUS
        assert len(responses.calls) == 1

    @responses.activate
    def test_server_error_retried(self, alcala_search_response):
        responses.add(responses.GET, SEARCH_URL, status=503)
        responses.add(responses.GET, SEARCH_URL, json=alcala_search_response, status=200)

        result = search_city("Alcalá de Henares")

        assert isinstance(result, FetchSuccess)
        assert len(responses.calls) == 2

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_raises(self, name):
        with pytest.raises(ValueError):
            search_city(name)


class TestParseCityResult:
    """Tests for parse_city_result()."""

    def test_fields(self, alcala_search_response):
        city = parse_city_result(alcala_search_response)

        assert city.name == "Alcalá de Henares"
        assert city.coordinate == Coordinate(40.4819791, -3.3635421)
        assert city.display_name == "Alcalá de Henares, Comunidad de Madrid, España"
        assert city.bounding_box == BoundingBox(
            min_lat=40.4391761, min_lon=-3.4406906, max_lat=40.5374089, max_lon=-3.2785218
        )

    def test_accepts_single_record(self, alcala_search_response):
        assert parse_city_result(alcala_search_response[0]).name == "Alcalá de Henares"

    @pytest.mark.parametrize(
        "address,expected",
        [
            ({"town": "Aranjuez"}, "Aranjuez"),
            ({"village": "Chinchón"}, "Chinchón"),
            ({"municipality": "Valencia1"}, "Valencia"),
            ({"city": "", "town": "Aranjuez"}, "Aranjuez"),
            ({}, "Alcalá de Henares"),
        ],
    )
    def test_name_from_address(self, alcala_search_response, address, expected):
        place = {**alcala_search_response[0], "address": address}

        assert parse_city_result(place).name == expected

    def test_missing_bounding_box(self, alcala_search_response):
        place = {**alcala_search_response[0], "boundingbox": ["40.4", "north"]}

        assert parse_city_result(place).bounding_box is None

    @pytest.mark.parametrize("data", [[], None, "Toledo", [{"display_name": "No coordinates"}]])
    def test_unusable(self, data):
        assert parse_city_result(data) is None

    def test_invalid_coordinate(self, alcala_search_response):
        place = {**alcala_search_response[0], "lat": "123.0"}

        assert parse_city_result(place) is None
