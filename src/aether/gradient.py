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
Continuous colour scale for index values.

The six official US EPA colours are used as anchors. Within each band the
colour is interpolated channel by channel towards the next band's anchor, so
neighbouring index values never jump between flat colour blocks. Missing
values always get the same grey so they cannot be mistaken for real data.
"""

import math

# =============================================================================
# Anchor Colours
# =============================================================================

US_EPA_COLOURS = {
    "good": "#00E400",  # Green
    "moderate": "#FFFF00",  # Yellow
    "unhealthy_sensitive": "#FF7E00",  # Orange
    "unhealthy": "#FF0000",  # Red
    "very_unhealthy": "#8F3F97",  # Purple
    "hazardous": "#7E0023",  # Maroon
}

UNKNOWN_COLOR = "#808080"
BEYOND_SCALE_COLOR = "#4C0013"

# (band start, band end, start anchor, end anchor)
GRADIENT_BANDS = (
    (0, 50, "good", "moderate"),
    (51, 100, "moderate", "unhealthy_sensitive"),
    (101, 150, "unhealthy_sensitive", "unhealthy"),
    (151, 200, "unhealthy", "very_unhealthy"),
    (201, 300, "very_unhealthy", "hazardous"),
)

HAZARDOUS_MAX = 500


# =============================================================================
# Helpers
# =============================================================================


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """Convert "#RRGGBB" to an (r, g, b) tuple of ints."""
    value = color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected a #RRGGBB colour, got '{color}'")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


def rgb_to_hex(rgb: tuple[int, int, int]) -> str:
    """Convert an (r, g, b) tuple to upper-case "#RRGGBB"."""
    return "#{:02X}{:02X}{:02X}".format(*rgb)


def interpolate_color(
    start_color: str, end_color: str, value: float, range_start: float, range_end: float
) -> str:
    """
    Interpolate between two colours by the position of ``value`` in a range.

    The factor is clamped to [0, 1] and each channel is truncated toward zero.
    """
    start = hex_to_rgb(start_color)
    end = hex_to_rgb(end_color)

    factor = (value - range_start) / (range_end - range_start)
    factor = max(0.0, min(1.0, factor))

    rgb = tuple(int(s + (e - s) * factor) for s, e in zip(start, end))
    return rgb_to_hex(rgb)


# =============================================================================
# Public API
# =============================================================================


def color_for(index: int | None) -> str:
    """
    Get the display colour for an index value.

    Args:
        index: Index value, or None (or NaN) when unknown

    Returns:
        Upper-case hex colour. Unknown or negative values give grey, values
        above 500 give a darker maroon than the hazardous anchor.

    Example:
        >>> color_for(0)
        '#00E400'
        >>> color_for(50)
        '#FFFF00'
        >>> color_for(None)
        '#808080'
    """
    if index is None or math.isnan(index) or index < 0:
        return UNKNOWN_COLOR

    for band_start, band_end, start_name, end_name in GRADIENT_BANDS:
        if index <= band_end:
            return interpolate_color(
                US_EPA_COLOURS[start_name],
                US_EPA_COLOURS[end_name],
                index,
                band_start,
                band_end,
            )

    if index <= HAZARDOUS_MAX:
        return US_EPA_COLOURS["hazardous"]
    return BEYOND_SCALE_COLOR
