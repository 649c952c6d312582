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
Base types and utilities for index conversions.

This module provides the breakpoint type shared by every pollutant table,
pollutant name standardisation, and the piecewise-linear interpolation used
to move between concentrations and index values in both directions.
"""

import math
from typing import Sequence, TypedDict

# =============================================================================
# Types
# =============================================================================


class Breakpoint(TypedDict):
    """A single index band for one pollutant."""

    low_conc: float  # Low concentration bound (inclusive)
    high_conc: float  # High concentration bound (inclusive)
    low_aqi: int  # Low index bound
    high_aqi: int  # High index bound
    category: str  # Category name (e.g., "Good", "Moderate")


# =============================================================================
# Pollutant Standardisation
# =============================================================================

# Map common pollutant names to standard forms
POLLUTANT_ALIASES = {
    # PM2.5 variants
    "pm2.5": "PM2.5",
    "pm25": "PM2.5",
    "PM25": "PM2.5",
    "pm 2.5": "PM2.5",
    "PM 2.5": "PM2.5",
    # PM10 variants
    "pm10": "PM10",
    "PM 10": "PM10",
    "pm 10": "PM10",
}


def standardise_pollutant(pollutant: str) -> str | None:
    """
    Standardise a pollutant name to its canonical form.

    Args:
        pollutant: Pollutant name in any common format

    Returns:
        Standardised pollutant name, or None if not recognised
    """
    if pollutant in ("PM2.5", "PM10"):
        return pollutant

    return POLLUTANT_ALIASES.get(pollutant) or POLLUTANT_ALIASES.get(
        pollutant.strip().lower()
    )


# =============================================================================
# Breakpoint Interpolation
# =============================================================================


def is_missing(value: float | None) -> bool:
    """True for None and NaN, the two ways callers express "no reading"."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def interpolate(
    value: float, low_in: float, high_in: float, low_out: float, high_out: float
) -> float:
    """
    Linear interpolation of ``value`` from one range onto another.

    out = low_out + (value - low_in) / (high_in - low_in) * (high_out - low_out)
    """
    span = high_in - low_in
    if span == 0:
        # Single-point band
        return float(low_out)
    return low_out + (value - low_in) / span * (high_out - low_out)


def calculate_aqi_from_breakpoints(
    concentration: float | None,
    breakpoints: Sequence[Breakpoint],
) -> int | None:
    """
    Calculate an index value from a concentration.

    The band used is the first (in ascending order) whose upper concentration
    bound is at least the input, so values falling in the small gaps between
    published bands are interpolated on the next band up.

    Args:
        concentration: Pollutant concentration, or None if unknown
        breakpoints: Breakpoint table sorted by concentration

    Returns:
        Rounded index value, or None when the concentration is unknown
    """
    if is_missing(concentration):
        return None

    if concentration < 0:
        return breakpoints[0]["low_aqi"]

    for bp in breakpoints:
        if concentration <= bp["high_conc"]:
            value = interpolate(
                concentration,
                bp["low_conc"],
                bp["high_conc"],
                bp["low_aqi"],
                bp["high_aqi"],
            )
            return round(value)

    # Above the top of the scale
    return breakpoints[-1]["high_aqi"]


def calculate_concentration_from_breakpoints(
    index: float | None,
    breakpoints: Sequence[Breakpoint],
) -> float | None:
    """
    Estimate the concentration that produces a given index value.

    This is the inverse of :func:`calculate_aqi_from_breakpoints` and uses the
    same band selection rule on the index axis.

    Args:
        index: Index value, or None if unknown
        breakpoints: Breakpoint table sorted by concentration

    Returns:
        Concentration as a float, or None when the index is unknown
    """
    if is_missing(index):
        return None

    if index < 0:
        return float(breakpoints[0]["low_conc"])

    for bp in breakpoints:
        if index <= bp["high_aqi"]:
            return interpolate(
                index,
                bp["low_aqi"],
                bp["high_aqi"],
                bp["low_conc"],
                bp["high_conc"],
            )

    return float(breakpoints[-1]["high_conc"])
