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
Great-circle distances and bounding boxes.

Distances and offsets use a spherical Earth, so a point placed with
:func:`offset` measures back to the same distance with :func:`distance_meters`.
Bounding boxes use the small-angle approximation, which is accurate enough
for the few-kilometre radii used by station searches.
"""

import math
from typing import Sequence

import numpy as np

from .types import BoundingBox, Coordinate

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_DEGREE_LAT = 111_000.0

# Floor for cos(latitude) so pole-adjacent centers stay finite
MIN_COS_LAT = 1e-6


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """
    Haversine distance between two coordinates.

    Args:
        a: First coordinate
        b: Second coordinate

    Returns:
        Distance in meters (0 for identical points)
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlmb = math.radians(b.longitude - a.longitude)

    s = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    # Rounding can push s a hair above 1 for antipodal points
    s = min(1.0, s)
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(s))


def distances_from(
    center: Coordinate,
    latitudes: Sequence[float] | np.ndarray,
    longitudes: Sequence[float] | np.ndarray,
) -> np.ndarray:
    """
    Vectorised haversine distance from ``center`` to many points.

    Args:
        center: Reference coordinate
        latitudes: Point latitudes in decimal degrees
        longitudes: Point longitudes in decimal degrees

    Returns:
        np.ndarray: Distances in meters, same length as the inputs
    """
    lat = np.radians(np.asarray(latitudes, dtype=float))
    lon = np.radians(np.asarray(longitudes, dtype=float))
    phi1 = math.radians(center.latitude)
    lmb1 = math.radians(center.longitude)

    s = (
        np.sin((lat - phi1) / 2) ** 2
        + math.cos(phi1) * np.cos(lat) * np.sin((lon - lmb1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(s, 0.0, 1.0)))


def _meters_per_degree_lon(latitude: float) -> float:
    return METERS_PER_DEGREE_LAT * max(math.cos(math.radians(latitude)), MIN_COS_LAT)


def bounding_box(center: Coordinate, radius_meters: float) -> BoundingBox:
    """
    Derive the box enclosing a circle of ``radius_meters`` around ``center``.

    Args:
        center: Center of the search area
        radius_meters: Search radius (must be >= 0)

    Returns:
        BoundingBox clamped to valid latitude/longitude ranges

    Raises:
        ValueError: If the radius is negative or not finite
    """
    if not math.isfinite(radius_meters) or radius_meters < 0:
        raise ValueError(f"Radius must be a non-negative number, got {radius_meters}")

    lat_delta = radius_meters / METERS_PER_DEGREE_LAT
    lon_delta = radius_meters / _meters_per_degree_lon(center.latitude)

    return BoundingBox(
        min_lat=max(-90.0, center.latitude - lat_delta),
        min_lon=max(-180.0, center.longitude - lon_delta),
        max_lat=min(90.0, center.latitude + lat_delta),
        max_lon=min(180.0, center.longitude + lon_delta),
    )


def offset(center: Coordinate, distance: float, bearing: float) -> Coordinate:
    """
    Move ``distance`` meters from ``center`` along ``bearing`` (radians from north).

    Follows the great circle, so ``distance_meters(center, result)`` equals
    ``distance`` up to rounding, near the poles and across the antimeridian
    included. Longitude is wrapped into [-180, 180).
    """
    delta = distance / EARTH_RADIUS_M
    phi1 = math.radians(center.latitude)
    lmb1 = math.radians(center.longitude)

    sin_phi2 = math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(
        delta
    ) * math.cos(bearing)
    phi2 = math.asin(max(-1.0, min(1.0, sin_phi2)))
    lmb2 = lmb1 + math.atan2(
        math.sin(bearing) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * sin_phi2,
    )

    longitude = (math.degrees(lmb2) + 540.0) % 360.0 - 180.0
    return Coordinate(
        latitude=max(-90.0, min(90.0, math.degrees(phi2))),
        longitude=longitude,
    )
