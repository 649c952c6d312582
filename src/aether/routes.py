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
Route filtering, clustering and GeoJSON output.

Routes are grouped greedily: each route joins the first existing group whose
representative starts and ends within 100 m of it, otherwise it founds a new
group. The first matching group always wins, even if a later group would be
closer, so the same batch always clusters the same way.
"""

from logging import getLogger
from typing import Any, Iterable, Sequence

from .geo import distance_meters
from .polyline import PolylineDecodeError, decode
from .types import Coordinate, Route, RouteGroup

logger = getLogger(__name__)

SIMILARITY_THRESHOLD_M = 100.0

# Line colours cycled over the returned groups
ROUTE_COLORS = ("#E74C3C", "#3498DB", "#2ECC71")


# =============================================================================
# Filters
# =============================================================================


def filter_by_city(routes: Iterable[Route], city: str) -> list[Route]:
    """Keep routes whose recorded city contains ``city`` (case-insensitive)."""
    needle = city.strip().lower()
    return [
        route
        for route in routes
        if route.location_city is not None and needle in route.location_city.lower()
    ]


def filter_near(
    routes: Iterable[Route], center: Coordinate, radius_meters: float
) -> list[Route]:
    """
    Keep routes starting within ``radius_meters`` of ``center``.

    Raises:
        ValueError: If the radius is negative
    """
    if radius_meters < 0:
        raise ValueError(f"Radius must be non-negative, got {radius_meters}")
    return [
        route
        for route in routes
        if route.start is not None
        and distance_meters(center, route.start) <= radius_meters
    ]


# =============================================================================
# Clustering
# =============================================================================


def routes_similar(
    a: Route, b: Route, threshold_meters: float = SIMILARITY_THRESHOLD_M
) -> bool:
    """True if both start points and both end points are within the threshold."""
    return (
        distance_meters(a.start, b.start) <= threshold_meters
        and distance_meters(a.end, b.end) <= threshold_meters
    )


def cluster_routes(
    routes: Sequence[Route],
    max_groups: int,
    threshold_meters: float = SIMILARITY_THRESHOLD_M,
) -> list[RouteGroup]:
    """
    Group near-duplicate routes and return the most repeated ones.

    Routes without start/end coordinates or without a decodable polyline are
    excluded before clustering. Groups are sorted by member count, largest
    first; ties keep the order in which the groups were created.

    Args:
        routes: Routes in input order
        max_groups: Maximum number of groups to return (must be >= 0)
        threshold_meters: Start/end proximity for two routes to match

    Returns:
        list[RouteGroup]: At most ``max_groups`` groups

    Raises:
        ValueError: If max_groups is negative
    """
    if max_groups < 0:
        raise ValueError(f"max_groups must be non-negative, got {max_groups}")

    groups: list[RouteGroup] = []
    skipped = 0

    for route in routes:
        if route.start is None or route.end is None:
            skipped += 1
            continue

        try:
            path = decode(route.summary_polyline)
        except PolylineDecodeError as e:
            logger.warning(f"Excluding route {route.route_id}: {e}")
            skipped += 1
            continue

        if not path:
            skipped += 1
            continue

        for group in groups:
            if routes_similar(route, group.representative, threshold_meters):
                group.members.append(route)
                break
        else:
            groups.append(RouteGroup(representative=route, path=path, members=[route]))

    # list.sort is stable, so equal counts keep creation order
    groups.sort(key=lambda group: group.repetition_count, reverse=True)

    logger.info(
        f"Clustered {len(routes) - skipped} routes into {len(groups)} groups "
        f"({skipped} excluded), returning top {min(max_groups, len(groups))}"
    )

    return groups[:max_groups]


# =============================================================================
# GeoJSON
# =============================================================================


def route_groups_to_geojson(
    groups: Sequence[RouteGroup],
    athlete_id: int | str | None = None,
    city: str | None = None,
) -> dict[str, Any]:
    """
    Convert route groups to a GeoJSON FeatureCollection.

    Each group becomes a LineString feature built from its representative's
    path, with the repetition count and a display colour in its properties.

    Returns:
        dict: FeatureCollection with an extra ``metadata`` member
    """
    features = []
    total_repetitions = 0

    for i, group in enumerate(groups):
        rep = group.representative
        total_repetitions += group.repetition_count
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[lon, lat] for lon, lat in group.path],
                },
                "properties": {
                    "activityId": rep.route_id,
                    "name": rep.name,
                    "type": rep.activity_type,
                    "distance": rep.distance,
                    "movingTime": rep.moving_time,
                    "startDate": rep.start_date,
                    "repetitions": group.repetition_count,
                    "color": ROUTE_COLORS[i % len(ROUTE_COLORS)],
                    "location_city": rep.location_city,
                },
            }
        )

    if features:
        message = (
            f"Found {len(features)} unique routes with "
            f"{total_repetitions} total activities"
        )
    else:
        message = "No routes found"

    return {
        "type": "FeatureCollection",
        "features": features,
        "metadata": {
            "athleteId": athlete_id,
            "city": city,
            "totalRoutes": len(features),
            "totalRepetitions": total_repetitions,
            "message": message,
        },
    }
