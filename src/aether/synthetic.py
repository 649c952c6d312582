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
Deterministic synthetic data used when live data is unavailable.

Every generator here is pure: the pseudo-random source is a fresh
``random.Random`` seeded from the location, so the same location always gets
the same stations and the same default reading. Synthetic values are always
flagged ``synthetic=True`` and always carry a plausible index; they never
replace data that an upstream actually returned.
"""

import math
import random
from datetime import datetime, timezone

from . import metrics
from .geo import distance_meters, offset
from .gradient import color_for
from .types import Coordinate, QualityReading, Station, TimeSlot

# =============================================================================
# Configuration
# =============================================================================

MAX_SYNTHETIC_STATIONS = 5

# Fraction of the radius stations are placed at
MIN_DISTANCE_FRACTION = 0.3
MAX_DISTANCE_FRACTION = 0.95

MIN_SYNTHETIC_INDEX = 30
MAX_SYNTHETIC_INDEX = 200

# Typical index for any location outside DEFAULT_CITY_INDEX
DEFAULT_INDEX = 50

STATION_TYPES = (
    "Traffic Station",
    "Industrial Station",
    "Urban Station",
    "Commercial Zone",
    "Residential Area",
)

# Typical index per city, used for default readings and time slots
DEFAULT_CITY_INDEX = {
    "madrid": 75,
    "barcelona": 45,
    "valencia": 55,
    "alicante": 85,
    "sevilla": 125,
    "malaga": 165,
    "cordoba": 145,
    "bilbao": 35,
    "zaragoza": 95,
    "murcia": 110,
    "palma": 25,
    "las-palmas": 15,
    "valladolid": 65,
    "vigo": 20,
    "gijon": 30,
    "santander": 28,
    "toledo": 90,
    "badajoz": 105,
    "pamplona": 40,
    "logrono": 60,
}

# Fixed component values (µg/m³, CO in mg/m³) for default readings.
# PM2.5 is derived from the index instead.
DEFAULT_COMPONENTS = {
    "pm10": 35.0,
    "no2": 15.0,
    "o3": 45.0,
    "co": 0.5,
    "so2": 5.0,
}

# (window, offset from the day's typical index)
TIME_SLOT_OFFSETS = (
    ("06:00 - 08:00", -15),
    ("08:00 - 10:00", -10),
    ("10:00 - 12:00", -5),
    ("12:00 - 14:00", 0),
    ("14:00 - 16:00", 10),
    ("16:00 - 18:00", 15),
    ("18:00 - 20:00", 10),
    ("20:00 - 22:00", -5),
)


# =============================================================================
# Seeding
# =============================================================================


def seed_for(coordinate: Coordinate) -> int:
    """Seed derived from a coordinate, stable across processes."""
    return int(coordinate.latitude * 1_000_000 + coordinate.longitude * 1_000_000)


def rng_for(coordinate: Coordinate) -> random.Random:
    """A fresh pseudo-random generator seeded from ``coordinate``."""
    return random.Random(seed_for(coordinate))


def default_index(location_key: str) -> int:
    """
    Typical index for a location.

    Known cities use a fixed table; any other key gets DEFAULT_INDEX.
    """
    return DEFAULT_CITY_INDEX.get(location_key.strip().lower(), DEFAULT_INDEX)


# =============================================================================
# Generators
# =============================================================================


def generate_stations(
    center: Coordinate,
    radius_meters: float,
    limit: int,
    rng: random.Random | None = None,
) -> list[Station]:
    """
    Generate synthetic stations around a center point.

    ``min(limit + 1, 5)`` stations are placed at random bearings between 30%
    and 95% of the radius, with indices biased towards moderate pollution and
    clamped to [30, 200]. Stations are returned in generation order; ranking
    is left to the caller.

    Args:
        center: Center of the search area
        radius_meters: Search radius (must be >= 0)
        limit: Number of stations the caller intends to show (must be >= 0)
        rng: Pseudo-random source; defaults to one seeded from ``center``

    Returns:
        list[Station]: Synthetic stations, all flagged ``synthetic=True``

    Raises:
        ValueError: If the radius or limit is negative
    """
    if not math.isfinite(radius_meters) or radius_meters < 0:
        raise ValueError(f"Radius must be a non-negative number, got {radius_meters}")
    if limit < 0:
        raise ValueError(f"Limit must be non-negative, got {limit}")

    if rng is None:
        rng = rng_for(center)

    count = min(limit + 1, MAX_SYNTHETIC_STATIONS)
    min_distance = radius_meters * MIN_DISTANCE_FRACTION
    max_distance = radius_meters * MAX_DISTANCE_FRACTION

    stations = []
    for i in range(count):
        bearing = rng.random() * 2 * math.pi
        distance = min_distance + rng.random() * (max_distance - min_distance)
        coordinate = offset(center, distance, bearing)

        base_index = 60 + rng.randrange(90)
        index = base_index + (rng.randrange(3) - 1) * 20
        index = max(MIN_SYNTHETIC_INDEX, min(MAX_SYNTHETIC_INDEX, index))

        stations.append(
            Station(
                name=f"{STATION_TYPES[i % len(STATION_TYPES)]} #{i + 1}",
                coordinate=coordinate,
                concentration=metrics.index_to_concentration(index),
                index=index,
                color=color_for(index),
                distance_from_center=distance_meters(center, coordinate),
                synthetic=True,
            )
        )

    return stations


def generate_default_reading(
    location_key: str,
    coordinate: Coordinate | None = None,
    name: str | None = None,
) -> QualityReading:
    """
    Generate the fallback reading for a location.

    Args:
        location_key: Location identifier (e.g., "madrid")
        coordinate: Location coordinate; defaults to (0, 0) when unknown
        name: Display name; defaults to the key

    Returns:
        QualityReading with ``synthetic=True`` and a non-null index
    """
    index = default_index(location_key)
    components = {"pm25": metrics.index_to_concentration(index), **DEFAULT_COMPONENTS}

    return QualityReading(
        coordinate=coordinate or Coordinate(0.0, 0.0),
        index=index,
        dominant_factor="pm25",
        components=components,
        color=color_for(index),
        captured_at=datetime.now(timezone.utc),
        synthetic=True,
        location_key=location_key,
        name=name or location_key,
    )


def best_time_slots(location_key: str, limit: int = 5) -> list[TimeSlot]:
    """
    Predict the best windows of the day to go out.

    Each window applies a fixed offset to the location's typical index. Windows
    are sorted best first (stable for ties) and truncated to ``limit``.

    Raises:
        ValueError: If the limit is negative
    """
    if limit < 0:
        raise ValueError(f"Limit must be non-negative, got {limit}")

    base = default_index(location_key)
    slots = []
    for window, delta in TIME_SLOT_OFFSETS:
        index = max(0, min(500, base + delta))
        slots.append(
            TimeSlot(
                time_range=window,
                predicted_index=index,
                color=color_for(index),
                recommendation=metrics.recommendation_for(index),
            )
        )

    slots.sort(key=lambda slot: slot.predicted_index)
    return slots[:limit]
