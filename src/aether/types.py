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
Core type definitions for Aether.

This module defines the value types passed between the analytics engine and
its collaborators: coordinates and bounding boxes, quality readings and
stations, recorded routes and route groups, and the result type returned by
every fetch primitive.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, TypeAlias, TypedDict


# =============================================================================
# Geometry
# =============================================================================


@dataclass(frozen=True)
class Coordinate:
    """
    A point on the Earth's surface in decimal degrees.

    Raises:
        ValueError: If either component is not finite or out of range
    """

    latitude: float
    longitude: float

    def __post_init__(self):
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(
                f"Coordinate components must be finite, got "
                f"({self.latitude}, {self.longitude})"
            )
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude {self.latitude} is outside [-90, 90]")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude {self.longitude} is outside [-180, 180]")


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in decimal degrees."""

    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    def contains(self, coordinate: Coordinate) -> bool:
        return (
            self.min_lat <= coordinate.latitude <= self.max_lat
            and self.min_lon <= coordinate.longitude <= self.max_lon
        )


# Ordered (longitude, latitude) pairs, GeoJSON axis order
RoutePath: TypeAlias = list[tuple[float, float]]


# =============================================================================
# Readings and stations
# =============================================================================


@dataclass
class QualityReading:
    """
    Air quality summary for a single location.

    A reading with ``index=None`` means no data at all could be produced and
    is rendered with the unknown grey. A reading with ``synthetic=True`` is a
    deterministic stand-in and always carries a plausible index.
    """

    coordinate: Coordinate
    index: int | None
    dominant_factor: str | None
    components: dict[str, float | None]
    color: str
    captured_at: datetime
    synthetic: bool = False
    location_key: str | None = None
    name: str | None = None

    @property
    def category(self) -> str:
        # Imported here to avoid a cycle with aether.metrics
        from .metrics import aqi_category

        return aqi_category(self.index)

    @property
    def is_empty(self) -> bool:
        """True when neither an index nor any component value is populated."""
        return self.index is None and all(
            value is None for value in self.components.values()
        )


@dataclass
class Station:
    """A monitoring station (or hotspot) returned by a proximity query."""

    name: str
    coordinate: Coordinate
    concentration: float | None
    index: int | None
    color: str
    distance_from_center: float
    synthetic: bool = False
    unit: str = "µg/m³"


@dataclass
class HotspotsResult:
    """Ranked stations around a center point."""

    center: Coordinate
    radius_meters: float
    total_found: int
    stations: list[Station]
    message: str
    synthetic: bool = False


@dataclass
class CitySearchResult:
    """A place found by free-text city search."""

    name: str
    coordinate: Coordinate
    display_name: str
    bounding_box: BoundingBox | None = None


@dataclass
class TimeSlot:
    """Predicted air quality for a window of the day."""

    time_range: str
    predicted_index: int
    color: str
    recommendation: str


# =============================================================================
# Routes
# =============================================================================


@dataclass(frozen=True)
class Route:
    """
    A recorded movement track with the metadata needed for clustering.

    ``start`` and ``end`` are optional because upstream activities do not
    always carry them; such routes are excluded from clustering.
    """

    route_id: int | str
    summary_polyline: str | None
    start: Coordinate | None
    end: Coordinate | None
    name: str | None = None
    activity_type: str | None = None
    distance: float | None = None
    moving_time: int | None = None
    start_date: str | None = None
    location_city: str | None = None


@dataclass
class RouteGroup:
    """
    Routes considered the same path by start/end proximity.

    Invariant: ``repetition_count == len(members) >= 1`` and the
    representative is the first member.
    """

    representative: Route
    path: RoutePath
    members: list[Route] = field(default_factory=list)

    @property
    def repetition_count(self) -> int:
        return len(self.members)


# =============================================================================
# Fetch results
# =============================================================================


class FailureKind(str, Enum):
    """Why a fetch primitive could not deliver a payload."""

    NETWORK = "network"
    HTTP_STATUS = "http_status"
    MALFORMED = "malformed"
    EMPTY = "empty"


@dataclass(frozen=True)
class FetchSuccess:
    payload: Any


@dataclass(frozen=True)
class FetchFailure:
    kind: FailureKind
    message: str = ""


FetchResult: TypeAlias = FetchSuccess | FetchFailure


# =============================================================================
# Collaborator interfaces
# =============================================================================

LocationLookup: TypeAlias = Callable[[str], Coordinate | None]
"""
A function that resolves a location identifier to its coordinate.

Returns:
    Coordinate | None: The location's coordinate, or None if not found
"""

Fetcher: TypeAlias = Callable[[Any], FetchResult]
"""
A function that fetches the raw upstream payload for one entity.

Returns:
    FetchResult: FetchSuccess with the payload, or FetchFailure
"""


class LocationSpec(TypedDict):
    """
    Specification for a registered location.

    Fields:
        key: Unique identifier (e.g., "madrid")
        name: Human-readable name
        kind: "city" or "province"
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
    """

    key: str
    name: str
    kind: str
    latitude: float
    longitude: float
