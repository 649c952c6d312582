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
Air Quality Index conversions.

Converts between pollutant concentrations and the 0-500 US EPA index using
fixed breakpoint tables, in both directions.

Quick Start:
    >>> from aether import metrics
    >>>
    >>> metrics.concentration_to_index("PM2.5", 23.5)
    75
    >>> metrics.index_to_concentration(75)
    23.51...
    >>> metrics.aqi_category(75)
    'Moderate'
"""

from .base import (
    Breakpoint,
    calculate_aqi_from_breakpoints,
    calculate_concentration_from_breakpoints,
    is_missing,
    standardise_pollutant,
)
from .us_epa import BREAKPOINTS, CATEGORIES, RECOMMENDATIONS

__all__ = [
    "concentration_to_index",
    "index_to_concentration",
    "aqi_category",
    "recommendation_for",
    "list_pollutants",
    "get_breakpoints",
    "Breakpoint",
]


def list_pollutants() -> list[str]:
    """
    List pollutants with a breakpoint table.

    Returns:
        List of standard pollutant names (e.g., ["PM2.5", "PM10"])
    """
    return list(BREAKPOINTS.keys())


def _table(pollutant: str) -> tuple[Breakpoint, ...]:
    standard = standardise_pollutant(pollutant)
    if standard is None or standard not in BREAKPOINTS:
        raise ValueError(
            f"No breakpoint table for pollutant '{pollutant}'. "
            f"Available: {list_pollutants()}"
        )
    return BREAKPOINTS[standard]


def get_breakpoints(pollutant: str) -> tuple[Breakpoint, ...]:
    """
    Get the breakpoint table for a pollutant.

    The bands are copies, so changing them has no effect on conversions.

    Args:
        pollutant: Pollutant name in any common format (e.g., "pm25")

    Returns:
        The pollutant's breakpoint table, lowest band first

    Raises:
        ValueError: If the pollutant has no breakpoint table
    """
    return tuple(Breakpoint(**bp) for bp in _table(pollutant))


def concentration_to_index(pollutant: str, concentration: float | None) -> int | None:
    """
    Convert a pollutant concentration to an index value in [0, 500].

    Negative concentrations give 0 and concentrations above the top band
    clamp to 500. An unknown (None or NaN) concentration gives an unknown
    index, not zero.

    Args:
        pollutant: Pollutant name (e.g., "PM2.5", "pm25", "PM10")
        concentration: Concentration in µg/m³, or None/NaN if unknown

    Returns:
        Rounded index value, or None if the concentration is unknown

    Raises:
        ValueError: If the pollutant has no breakpoint table
    """
    return calculate_aqi_from_breakpoints(concentration, _table(pollutant))


def index_to_concentration(
    index: float | None, pollutant: str = "PM2.5"
) -> float | None:
    """
    Estimate the concentration behind an index value.

    Used when an upstream only reports the index (for example a station
    search) and a concentration still has to be shown.

    Args:
        index: Index value, or None
        pollutant: Pollutant whose table to invert (default: "PM2.5")

    Returns:
        Concentration in µg/m³ (>= 0), or None if the index is unknown
    """
    return calculate_concentration_from_breakpoints(index, _table(pollutant))


def aqi_category(index: int | None) -> str:
    """Return the category name for an index value ("Unknown" for None or NaN)."""
    if is_missing(index):
        return "Unknown"
    for _, high, category in CATEGORIES:
        if index <= high:
            return category
    return CATEGORIES[-1][2]


def recommendation_for(index: int | None) -> str:
    """Return outdoor activity advice for an index value."""
    if is_missing(index):
        return "No air quality data available."
    return RECOMMENDATIONS[aqi_category(index)]
