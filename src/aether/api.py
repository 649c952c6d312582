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
Clean, user-friendly public API for Aether.

These functions wire the location registry and the upstream sources to the
analytics core. Upstream problems never surface as errors: every reading
falls back to a synthetic estimate and hotspot searches fall back to
synthetic stations. Invalid input raises ValueError.

Basic usage:
    >>> import aether
    >>>
    >>> # Current readings for a few cities
    >>> readings = aether.city_air_quality(["madrid", "sevilla"])
    >>>
    >>> # Worst stations within 1 km of a point
    >>> hotspots = aether.pollution_hotspots(
    ...     aether.Coordinate(40.4168, -3.7038), radius_meters=1000
    ... )
    >>>
    >>> # Most repeated routes as GeoJSON
    >>> geojson = aether.repeated_routes(access_token, city="Madrid")
"""

from logging import getLogger
from typing import Callable, NamedTuple

from . import registry
from .aggregate import FanOutAggregator, aggregate_one
from .decorators import with_logging
from .geo import bounding_box
from .locations import PROVINCE_FEEDS
from .routes import cluster_routes, filter_by_city, route_groups_to_geojson
from .sources import nominatim, strava, waqi
from .synthetic import best_time_slots, generate_default_reading, generate_stations
from .types import (
    CitySearchResult,
    Coordinate,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    HotspotsResult,
    QualityReading,
    Station,
    TimeSlot,
)

logger = getLogger(__name__)

DEFAULT_HOTSPOT_RADIUS_M = 500
DEFAULT_MAX_HOTSPOTS = 3
DEFAULT_MAX_ROUTES = 3


class _Target(NamedTuple):
    """A resolved location ready to be fetched."""

    key: str
    feed_id: str
    coordinate: Coordinate
    name: str


def _resolve_targets(keys: list[str] | str | None, kind: str) -> list[_Target]:
    if keys is None:
        keys = registry.list_locations(kind)
    elif isinstance(keys, str):
        keys = [keys]

    targets = []
    for key in keys:
        spec = registry.get_location(key, kind)
        if spec is None:
            available = ", ".join(registry.list_locations(kind))
            raise ValueError(
                f"Unknown {kind} '{key}'. Available: {available}"
            )
        feed_id = spec["key"]
        if kind == "province":
            feed_id = PROVINCE_FEEDS.get(spec["key"], spec["key"])
        targets.append(
            _Target(
                key=spec["key"],
                feed_id=feed_id,
                coordinate=Coordinate(spec["latitude"], spec["longitude"]),
                name=spec["name"],
            )
        )
    return targets


def _read_locations(
    targets: list[_Target],
    fetch: Callable[[str], FetchResult],
    max_workers: int | None,
    timeout: float | None,
) -> list[QualityReading]:
    # Carry the target through to the parser alongside the payload
    def fetch_target(target: _Target) -> FetchResult:
        result = fetch(target.feed_id)
        if isinstance(result, FetchSuccess):
            return FetchSuccess((target, result.payload))
        return result

    def parse(pair: tuple[_Target, object]) -> QualityReading | None:
        target, payload = pair
        return waqi.parse_city_feed(
            payload,
            location_key=target.key,
            coordinate=target.coordinate,
            name=target.name,
        )

    def fallback(target: _Target) -> QualityReading:
        return generate_default_reading(target.key, target.coordinate, target.name)

    with FanOutAggregator(max_workers=max_workers, timeout=timeout) as aggregator:
        return aggregator.aggregate(targets, fetch_target, parse, fallback)


@with_logging()
def city_air_quality(
    cities: list[str] | str | None = None,
    fetch: Callable[[str], FetchResult] = waqi.fetch_city_feed,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> list[QualityReading]:
    """
    Current air quality for one or more registered cities.

    Cities are fetched concurrently. A city whose feed cannot be fetched or
    has no usable data gets a synthetic reading instead.

    Args:
        cities: City key(s) (e.g., "madrid"). None means every registered city.
        fetch: Fetch primitive taking a feed id (default: WAQI city feed)
        max_workers: Maximum concurrent fetches
        timeout: Seconds to wait before filling remaining cities with fallbacks

    Returns:
        list[QualityReading]: One reading per city, in request order

    Raises:
        ValueError: If a city is not registered or the list is empty

    Example:
        >>> readings = aether.city_air_quality(["madrid", "bilbao"])
        >>> [(r.name, r.index, r.synthetic) for r in readings]
    """
    targets = _resolve_targets(cities, "city")
    return _read_locations(targets, fetch, max_workers, timeout)


@with_logging()
def province_air_quality(
    provinces: list[str] | str | None = None,
    fetch: Callable[[str], FetchResult] = waqi.fetch_city_feed,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> list[QualityReading]:
    """
    Current air quality for one or more provinces.

    Each province is read from the feed of its capital and positioned at the
    capital's coordinate.

    Args:
        provinces: Province key(s) (e.g., "asturias"). None means all provinces.
        fetch: Fetch primitive taking a feed id (default: WAQI city feed)
        max_workers: Maximum concurrent fetches
        timeout: Seconds to wait before filling remaining provinces with fallbacks

    Returns:
        list[QualityReading]: One reading per province, in request order

    Raises:
        ValueError: If a province is not registered or the list is empty
    """
    targets = _resolve_targets(provinces, "province")
    return _read_locations(targets, fetch, max_workers, timeout)


@with_logging()
def search_city(
    name: str,
    fetch: Callable[[str], FetchResult] = nominatim.search_city,
) -> CitySearchResult | None:
    """
    Look up a city by free-text name.

    Args:
        name: City name as typed by a user (e.g., "Alcalá de Henares")
        fetch: Fetch primitive taking the name (default: Nominatim search)

    Returns:
        CitySearchResult with coordinate, display name and bounding box, or
        None when nothing was found or the search service is unavailable

    Raises:
        ValueError: If the name is blank

    Example:
        >>> city = aether.search_city("Alcalá de Henares")
        >>> city.coordinate, city.bounding_box
    """
    if not name or not name.strip():
        raise ValueError("A city name is required to search")
    return aggregate_one(name.strip(), fetch, nominatim.parse_city_result, lambda _: None)


def _rank(stations: list[Station], limit: int) -> list[Station]:
    # Worst first; sorted() is stable so equal indices keep their order
    return sorted(stations, key=lambda station: station.index or 0, reverse=True)[:limit]


@with_logging()
def pollution_hotspots(
    center: Coordinate | str,
    radius_meters: float = DEFAULT_HOTSPOT_RADIUS_M,
    limit: int = DEFAULT_MAX_HOTSPOTS,
    fetch: Callable = waqi.fetch_map_bounds,
    geocode: Callable[[str], FetchResult] = nominatim.search_city,
) -> HotspotsResult:
    """
    Find the most polluted monitoring stations around a point.

    Stations are searched in the bounding box of the circle, filtered to the
    circle, ranked by index (worst first) and truncated to ``limit``. When no
    live station is available the result is built from synthetic stations
    seeded by the center, and flagged ``synthetic``.

    Args:
        center: Search center, or a city name. Registered city keys are
            resolved locally; any other name is looked up with ``geocode``.
        radius_meters: Search radius (default: 500)
        limit: Maximum number of hotspots (default: 3)
        fetch: Fetch primitive taking a BoundingBox (default: WAQI map bounds)
        geocode: Fetch primitive taking a city name (default: Nominatim search)

    Returns:
        HotspotsResult: Ranked stations with the total found before truncation

    Raises:
        ValueError: If the radius or limit is negative, or the city cannot be
            found
    """
    if radius_meters < 0:
        raise ValueError(f"Radius must be non-negative, got {radius_meters}")
    if limit < 0:
        raise ValueError(f"Limit must be non-negative, got {limit}")
    if isinstance(center, str):
        coordinate = registry.lookup_location(center)
        if coordinate is None:
            found = search_city(center, fetch=geocode)
            if found is None:
                raise ValueError(f"Unknown city '{center}'")
            logger.info(f"Resolved '{center}' to {found.display_name}")
            coordinate = found.coordinate
        center = coordinate

    bbox = bounding_box(center, radius_meters)

    def parse(payload) -> list[Station] | None:
        return waqi.parse_stations(payload, center, radius_meters) or None

    stations = aggregate_one(bbox, fetch, parse, lambda _: None)

    if stations:
        top = _rank(stations, limit)
        logger.info(f"Found {len(stations)} stations near {center}")
        return HotspotsResult(
            center=center,
            radius_meters=radius_meters,
            total_found=len(stations),
            stations=top,
            message=f"Found {len(top)} pollution hotspots within {radius_meters:g}m",
            synthetic=False,
        )

    logger.info(f"No live stations near {center}, using synthetic hotspots")
    simulated = generate_stations(center, radius_meters, limit)
    top = _rank(simulated, limit)
    return HotspotsResult(
        center=center,
        radius_meters=radius_meters,
        total_found=len(simulated),
        stations=top,
        message=(
            f"Found {len(top)} pollution hotspots within {radius_meters:g}m "
            f"(simulated data)"
        ),
        synthetic=True,
    )


@with_logging()
def repeated_routes(
    access_token: str,
    city: str | None = None,
    limit: int = DEFAULT_MAX_ROUTES,
    athlete_id: int | str | None = None,
    per_page: int = 100,
    fetch: Callable[..., FetchResult] = strava.fetch_activities,
) -> dict:
    """
    The athlete's most repeated routes as a GeoJSON FeatureCollection.

    Activities are fetched, optionally filtered by city, then clustered by
    start/end proximity. A failed fetch gives an empty collection.

    Args:
        access_token: Activity API access token
        city: Keep only activities recorded in this city (substring match)
        limit: Maximum number of routes (default: 3)
        athlete_id: Included in the metadata block
        per_page: Number of recent activities to consider
        fetch: Fetch primitive taking the token and ``per_page``

    Returns:
        dict: GeoJSON FeatureCollection with a ``metadata`` member

    Raises:
        ValueError: If limit is negative
    """
    if limit < 0:
        raise ValueError(f"Limit must be non-negative, got {limit}")

    result = fetch(access_token, per_page=per_page)
    if isinstance(result, FetchFailure):
        logger.warning(f"Could not fetch activities ({result.kind.value}): {result.message}")
        routes = []
    else:
        routes = strava.parse_activities(result.payload)

    if city:
        routes = filter_by_city(routes, city)

    groups = cluster_routes(routes, limit)
    return route_groups_to_geojson(groups, athlete_id=athlete_id, city=city)


def best_time_to_go_out(city: str, limit: int = 5) -> list[TimeSlot]:
    """
    Best windows of the day to go out in a city, cleanest first.

    Raises:
        ValueError: If the city is not registered or limit is negative
    """
    if not registry.location_exists(city, "city"):
        raise ValueError(f"Unknown city '{city}'")
    return best_time_slots(city, limit)


def list_cities() -> list[str]:
    """List registered city keys."""
    return registry.list_locations("city")


def list_provinces() -> list[str]:
    """List registered province keys."""
    return registry.list_locations("province")
