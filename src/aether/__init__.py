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

"""Air quality and route analytics"""

# Import locations to register the built-in catalogue
from . import locations  # noqa: F401
from .aggregate import FanOutAggregator
from .api import (
    best_time_to_go_out,
    city_air_quality,
    list_cities,
    list_provinces,
    pollution_hotspots,
    province_air_quality,
    repeated_routes,
    search_city,
)
from .gradient import color_for
from .metrics import aqi_category, concentration_to_index, index_to_concentration
from .types import (
    BoundingBox,
    CitySearchResult,
    Coordinate,
    FailureKind,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    HotspotsResult,
    QualityReading,
    Route,
    RouteGroup,
    Station,
    TimeSlot,
)

__version__ = "0.1.0"

__all__ = [
    "FanOutAggregator",
    "best_time_to_go_out",
    "city_air_quality",
    "list_cities",
    "list_provinces",
    "pollution_hotspots",
    "province_air_quality",
    "repeated_routes",
    "search_city",
    "color_for",
    "aqi_category",
    "concentration_to_index",
    "index_to_concentration",
    "BoundingBox",
    "CitySearchResult",
    "Coordinate",
    "FailureKind",
    "FetchFailure",
    "FetchResult",
    "FetchSuccess",
    "HotspotsResult",
    "QualityReading",
    "Route",
    "RouteGroup",
    "Station",
    "TimeSlot",
]
