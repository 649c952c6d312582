# Aether: air quality and route analytics for mapping front ends
# Copyright (C) 2025 Ruaraidh Dobson, South London Scientific

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Free-text city search using Nominatim (OpenStreetMap).

Turns a city name typed by a user into a coordinate, a display name and the
place's bounding box. Searches are restricted to Spain. No API key is needed,
but the usage policy asks every client to identify itself, so a User-Agent is
always sent (override with NOMINATIM_USER_AGENT).

API Documentation: https://nominatim.org/release-docs/latest/api/Search/
"""

import os
import re
from logging import getLogger
from typing import Any

import requests

from ..decorators import retry_on_network_error
from ..types import (
    BoundingBox,
    CitySearchResult,
    Coordinate,
    FailureKind,
    FetchFailure,
    FetchResult,
    FetchSuccess,
)

logger = getLogger(__name__)

# Configuration
DEFAULT_NOMINATIM_API_BASE = "https://nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "aether/0.1.0"
REQUEST_TIMEOUT = 10

COUNTRY_CODE = "es"
COUNTRY_NAME = "España"
LANGUAGE = "es"

# Address fields holding the settlement name, most specific first
CITY_FIELDS = ("city", "town", "village", "municipality")


# ============================================================================
# LOW-LEVEL API FUNCTIONS
# ============================================================================


@retry_on_network_error
def _call_nominatim_api(params: dict) -> Any:
    """
    Low-level Nominatim search caller.

    Raises:
        requests.HTTPError: If the API returns an error status
    """
    # Read at call time for testability
    base = os.getenv("NOMINATIM_API_BASE", DEFAULT_NOMINATIM_API_BASE).rstrip("/")
    user_agent = os.getenv("NOMINATIM_USER_AGENT", DEFAULT_USER_AGENT)

    response = requests.get(
        f"{base}/search",
        params=params,
        headers={"User-Agent": user_agent},
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


# ============================================================================
# FETCH PRIMITIVES
# ============================================================================


def search_city(name: str) -> FetchResult:
    """
    Search for a Spanish city by name.

    Args:
        name: City name as typed by a user (e.g., "Alcalá de Henares")

    Returns:
        FetchSuccess with the list of matching places (best first), or
        FetchFailure

    Raises:
        ValueError: If the name is blank
    """
    if not name or not name.strip():
        raise ValueError("A city name is required to search")

    params = {
        "format": "json",
        "q": f"{name.strip()}, {COUNTRY_NAME}",
        "countrycodes": COUNTRY_CODE,
        "limit": 1,
        "addressdetails": 1,
        "accept-language": LANGUAGE,
    }

    logger.debug(f"Searching Nominatim for {name!r}")
    try:
        body = _call_nominatim_api(params)
    except requests.exceptions.HTTPError as e:
        return FetchFailure(FailureKind.HTTP_STATUS, str(e))
    except requests.exceptions.JSONDecodeError as e:
        return FetchFailure(FailureKind.MALFORMED, f"Response is not JSON: {e}")
    except requests.exceptions.RequestException as e:
        return FetchFailure(FailureKind.NETWORK, str(e))

    if not isinstance(body, list):
        return FetchFailure(FailureKind.MALFORMED, "Expected a list of places")
    if not body:
        return FetchFailure(FailureKind.EMPTY, f"No city found for '{name}'")

    return FetchSuccess(body)


# ============================================================================
# PARSERS
# ============================================================================


def _clean_name(value: Any) -> str:
    """Strip trailing digits and whitespace (e.g., "Valencia1" → "Valencia")."""
    if not isinstance(value, str):
        return ""
    return re.sub(r"\d+$", "", value).strip()


def _city_name(place: dict) -> str:
    address = place.get("address")
    if isinstance(address, dict):
        for field in CITY_FIELDS:
            if address.get(field):
                return _clean_name(address[field])
    return _clean_name(place.get("name"))


def _bounding_box(value: Any) -> BoundingBox | None:
    # Nominatim order: [south, north, west, east], as strings
    if not isinstance(value, (list, tuple)) or len(value) != 4:
        return None
    try:
        south, north, west, east = (float(v) for v in value)
    except (TypeError, ValueError):
        return None
    return BoundingBox(min_lat=south, min_lon=west, max_lat=north, max_lon=east)


def parse_city_result(data: Any) -> CitySearchResult | None:
    """
    Parse the best match of a search response.

    Args:
        data: List of place records (or a single record)

    Returns:
        CitySearchResult, or None when there is no place with a valid
        coordinate
    """
    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict):
        return None

    try:
        coordinate = Coordinate(float(data["lat"]), float(data["lon"]))
    except (KeyError, TypeError, ValueError):
        logger.warning(f"Search result has no usable coordinate: {data.get('display_name')}")
        return None

    display_name = data.get("display_name") or ""
    return CitySearchResult(
        name=_city_name(data) or display_name.split(",")[0].strip(),
        coordinate=coordinate,
        display_name=display_name,
        bounding_box=_bounding_box(data.get("boundingbox")),
    )
