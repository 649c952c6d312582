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
This module provides fetch primitives and parsers for the World Air Quality
Index (WAQI) project, which republishes readings from official monitoring
stations worldwide.

Two endpoints are used:
    - ``feed/{city}/``: current reading for a city
    - ``map/bounds/``: every station inside a bounding box

Fetchers never raise for upstream problems; they return a FetchFailure so the
caller can decide on a fallback. A missing API token is a configuration
error and raises ValueError.

API Documentation: https://aqicn.org/json-api/doc/
"""

import os
from datetime import datetime, timezone
from logging import getLogger
from typing import Any

import numpy as np
import requests

from .. import metrics
from ..decorators import retry_on_network_error
from ..geo import distances_from
from ..gradient import color_for
from ..types import (
    BoundingBox,
    Coordinate,
    FailureKind,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    QualityReading,
    Station,
)

logger = getLogger(__name__)

# Configuration
DEFAULT_WAQI_API_BASE = "https://api.waqi.info"
REQUEST_TIMEOUT = 10

# Components reported in the feed's "iaqi" block
COMPONENT_KEYS = ("pm25", "pm10", "no2", "o3", "co", "so2")


# ============================================================================
# LOW-LEVEL API FUNCTIONS
# ============================================================================


@retry_on_network_error
def _call_waqi_api(endpoint: str, params: dict) -> Any:
    """
    Low-level WAQI API caller with authentication.

    Args:
        endpoint: API endpoint (e.g., "feed/madrid/", "map/bounds/")
        params: Query parameters (the token is added here)

    Returns:
        Decoded JSON body

    Raises:
        ValueError: If WAQI_API_TOKEN is not set
        requests.HTTPError: If the API returns an error status
    """
    # Read at call time for testability
    token = os.getenv("WAQI_API_TOKEN")
    if not token:
        raise ValueError(
            "WAQI API token required. Set WAQI_API_TOKEN in the environment. "
            "Request a token at: https://aqicn.org/data-platform/token/"
        )

    base = os.getenv("WAQI_API_BASE", DEFAULT_WAQI_API_BASE).rstrip("/")
    url = f"{base}/{endpoint}"

    response = requests.get(
        url, params={**params, "token": token}, timeout=REQUEST_TIMEOUT
    )
    response.raise_for_status()
    return response.json()


def _fetch(endpoint: str, params: dict) -> FetchResult:
    """Call the API and classify the outcome."""
    try:
        body = _call_waqi_api(endpoint, params)
    except requests.exceptions.HTTPError as e:
        return FetchFailure(FailureKind.HTTP_STATUS, str(e))
    except requests.exceptions.JSONDecodeError as e:
        return FetchFailure(FailureKind.MALFORMED, f"Response is not JSON: {e}")
    except requests.exceptions.RequestException as e:
        return FetchFailure(FailureKind.NETWORK, str(e))

    if not isinstance(body, dict) or body.get("status") != "ok":
        detail = body.get("data") if isinstance(body, dict) else body
        return FetchFailure(FailureKind.MALFORMED, f"Unexpected response: {detail}")

    data = body.get("data")
    if not data:
        return FetchFailure(FailureKind.EMPTY, f"No data returned from {endpoint}")

    return FetchSuccess(data)


# ============================================================================
# FETCH PRIMITIVES
# ============================================================================


def fetch_city_feed(city_id: str) -> FetchResult:
    """
    Fetch the current feed for a city.

    Args:
        city_id: WAQI city identifier (e.g., "madrid")

    Returns:
        FetchSuccess with the feed's "data" object, or FetchFailure
    """
    logger.debug(f"Fetching WAQI feed for {city_id}")
    return _fetch(f"feed/{city_id}/", {})


def fetch_map_bounds(bbox: BoundingBox) -> FetchResult:
    """
    Fetch every station inside a bounding box.

    Args:
        bbox: Area to search

    Returns:
        FetchSuccess with a list of station records, or FetchFailure
    """
    latlng = f"{bbox.min_lat:.6f},{bbox.min_lon:.6f},{bbox.max_lat:.6f},{bbox.max_lon:.6f}"
    logger.debug(f"Fetching WAQI stations in {latlng}")
    return _fetch("map/bounds/", {"latlng": latlng})


# ============================================================================
# PARSERS
# ============================================================================


def _as_float(value: Any) -> float | None:
    """Numeric value or None; WAQI uses "-" for stations with no reading."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if np.isfinite(number) else None


def _as_int(value: Any) -> int | None:
    number = _as_float(value)
    return None if number is None else round(number)


def _parse_time(time_block: Any) -> datetime:
    if isinstance(time_block, dict) and isinstance(time_block.get("iso"), str):
        try:
            return datetime.fromisoformat(time_block["iso"])
        except ValueError:
            logger.debug(f"Unparseable feed timestamp: {time_block['iso']}")
    return datetime.now(timezone.utc)


def _feed_coordinate(data: dict) -> Coordinate | None:
    geo = (data.get("city") or {}).get("geo")
    if not isinstance(geo, (list, tuple)) or len(geo) < 2:
        return None
    lat, lon = _as_float(geo[0]), _as_float(geo[1])
    if lat is None or lon is None:
        return None
    try:
        return Coordinate(lat, lon)
    except ValueError:
        return None


def parse_city_feed(
    data: Any,
    location_key: str | None = None,
    coordinate: Coordinate | None = None,
    name: str | None = None,
) -> QualityReading | None:
    """
    Parse a city feed into a QualityReading.

    A feed with components but no overall index gives a reading with an
    unknown index (rendered grey), not a synthetic one.

    Args:
        data: The feed's "data" object
        location_key: Identifier to attach to the reading
        coordinate: Known coordinate; taken from the feed when omitted
        name: Display name; taken from the feed when omitted

    Returns:
        QualityReading, or None when the payload has no usable data
    """
    if not isinstance(data, dict):
        return None

    coordinate = coordinate or _feed_coordinate(data)
    if coordinate is None:
        logger.warning(f"Feed for {location_key} has no coordinate")
        return None

    index = _as_int(data.get("aqi"))
    iaqi = data.get("iaqi") if isinstance(data.get("iaqi"), dict) else {}
    components = {}
    for key in COMPONENT_KEYS:
        entry = iaqi.get(key)
        components[key] = _as_float(entry.get("v")) if isinstance(entry, dict) else None

    reading = QualityReading(
        coordinate=coordinate,
        index=index,
        dominant_factor=data.get("dominentpol") or None,
        components=components,
        color=color_for(index),
        captured_at=_parse_time(data.get("time")),
        synthetic=False,
        location_key=location_key,
        name=name or (data.get("city") or {}).get("name"),
    )

    if reading.is_empty:
        return None
    return reading


def parse_stations(
    data: Any, center: Coordinate, radius_meters: float
) -> list[Station]:
    """
    Parse a map/bounds payload into stations within ``radius_meters``.

    Records without a numeric latitude, longitude and index are skipped, as
    are stations outside the radius (the bounding box is larger than the
    circle). Order follows the payload.

    Args:
        data: List of station records
        center: Search center
        radius_meters: Search radius

    Returns:
        list[Station]: Stations inside the circle (may be empty)
    """
    if not isinstance(data, list):
        return []

    valid = []
    for record in data:
        if not isinstance(record, dict):
            continue
        lat, lon = _as_float(record.get("lat")), _as_float(record.get("lon"))
        index = _as_int(record.get("aqi"))
        if lat is None or lon is None or index is None:
            continue
        if not (-90 <= lat <= 90 and -180 <= lon <= 180):
            continue
        valid.append((record, lat, lon, index))

    if not valid:
        return []

    distances = distances_from(
        center, [v[1] for v in valid], [v[2] for v in valid]
    )

    stations = []
    for (record, lat, lon, index), distance in zip(valid, distances):
        if distance > radius_meters:
            continue
        station_block = record.get("station")
        station_name = (
            station_block.get("name") if isinstance(station_block, dict) else None
        )
        stations.append(
            Station(
                name=station_name or "Unknown Station",
                coordinate=Coordinate(lat, lon),
                concentration=metrics.index_to_concentration(index),
                index=index,
                color=color_for(index),
                distance_from_center=float(distance),
                synthetic=False,
            )
        )

    logger.debug(f"{len(stations)} of {len(data)} stations within {radius_meters}m")
    return stations
