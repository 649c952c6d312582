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
US EPA Air Quality Index breakpoint tables.

The index uses a 0-500 scale divided into six categories:
Good (0-50), Moderate (51-100), Unhealthy for Sensitive Groups (101-150),
Unhealthy (151-200), Very Unhealthy (201-300), Hazardous (301-500).

The PM2.5 table is the pre-2024 24-hour table, which is what the WAQI feeds
report against. The two upper hazardous bands (301-400 and 401-500) are
collapsed into a single 301-500 band so every table has six bands.

Reference: https://www.airnow.gov/aqi/aqi-basics/
"""

from .base import Breakpoint

# =============================================================================
# Category Definitions
# =============================================================================

CATEGORIES = (
    (0, 50, "Good"),
    (51, 100, "Moderate"),
    (101, 150, "Unhealthy for Sensitive Groups"),
    (151, 200, "Unhealthy"),
    (201, 300, "Very Unhealthy"),
    (301, 500, "Hazardous"),
)

SCALE_MIN = 0
SCALE_MAX = 500

RECOMMENDATIONS = {
    "Good": "Great time to go out. The air is clean and healthy.",
    "Moderate": "Good time for outdoor activities. Air quality is acceptable.",
    "Unhealthy for Sensitive Groups": (
        "Acceptable for most people. Sensitive groups should consider "
        "limiting prolonged outdoor exertion."
    ),
    "Unhealthy": (
        "Sensitive groups should avoid intense activity. Everyone else should "
        "limit prolonged exertion."
    ),
    "Very Unhealthy": (
        "Outdoor activity is not recommended. Consider exercising indoors."
    ),
    "Hazardous": "Avoid outdoor activity. The air is hazardous to health.",
}


def _make_breakpoint(
    low_conc: float,
    high_conc: float,
    low_aqi: int,
    high_aqi: int,
) -> Breakpoint:
    """Create a breakpoint with the category derived from its index range."""
    for aqi_low, aqi_high, category in CATEGORIES:
        if aqi_low <= low_aqi <= aqi_high:
            break
    else:
        category = "Hazardous"
    return Breakpoint(
        low_conc=low_conc,
        high_conc=high_conc,
        low_aqi=low_aqi,
        high_aqi=high_aqi,
        category=category,
    )


# =============================================================================
# Breakpoints
# =============================================================================

# PM2.5 (µg/m³, 24-hour)
PM25_BREAKPOINTS = (
    _make_breakpoint(0.0, 12.0, 0, 50),
    _make_breakpoint(12.1, 35.4, 51, 100),
    _make_breakpoint(35.5, 55.4, 101, 150),
    _make_breakpoint(55.5, 150.4, 151, 200),
    _make_breakpoint(150.5, 250.4, 201, 300),
    _make_breakpoint(250.5, 500.4, 301, 500),
)

# PM10 (µg/m³, 24-hour)
PM10_BREAKPOINTS = (
    _make_breakpoint(0, 54, 0, 50),
    _make_breakpoint(55, 154, 51, 100),
    _make_breakpoint(155, 254, 101, 150),
    _make_breakpoint(255, 354, 151, 200),
    _make_breakpoint(355, 424, 201, 300),
    _make_breakpoint(425, 604, 301, 500),
)

BREAKPOINTS = {
    "PM2.5": PM25_BREAKPOINTS,
    "PM10": PM10_BREAKPOINTS,
}

UNITS = {
    "PM2.5": "µg/m³",
    "PM10": "µg/m³",
}
