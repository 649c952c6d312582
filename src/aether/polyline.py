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
Encoded polyline codec.

Implements the Google encoded polyline algorithm used by activity trackers
for route summaries. Each point is stored as a latitude delta followed by a
longitude delta at 1e-5 degree precision, zig-zag encoded and split into
5-bit chunks offset by 63 into printable ASCII.

Decoded paths are returned in GeoJSON axis order, (longitude, latitude).

Reference: https://developers.google.com/maps/documentation/utilities/polylinealgorithm
"""

from typing import Iterable

from .types import RoutePath

PRECISION = 1e5
_OFFSET = 63
_CONTINUATION = 0x20
_CHUNK_MASK = 0x1F


class PolylineDecodeError(ValueError):
    """Raised when an encoded polyline is truncated or contains invalid characters."""


def _read_value(encoded: str, position: int) -> tuple[int, int]:
    """Read one zig-zag value starting at ``position``; return (value, next position)."""
    result = 0
    shift = 0
    while True:
        if position >= len(encoded):
            raise PolylineDecodeError(
                f"Polyline ends in the middle of a value at position {position}"
            )
        chunk = ord(encoded[position]) - _OFFSET
        if chunk < 0 or chunk > 0x3F:
            raise PolylineDecodeError(
                f"Invalid polyline character {encoded[position]!r} at position {position}"
            )
        position += 1
        result |= (chunk & _CHUNK_MASK) << shift
        shift += 5
        if chunk < _CONTINUATION:
            break

    value = ~(result >> 1) if result & 1 else result >> 1
    return value, position


def _decode_pairs(encoded: str | None) -> list[tuple[float, float]]:
    """Decode to (latitude, longitude) pairs."""
    coords: list[tuple[float, float]] = []
    if not encoded:
        return coords

    position = 0
    lat = 0
    lng = 0
    while position < len(encoded):
        dlat, position = _read_value(encoded, position)
        dlng, position = _read_value(encoded, position)
        lat += dlat
        lng += dlng
        coords.append((lat / PRECISION, lng / PRECISION))

    return coords


def decode(encoded: str | None) -> RoutePath:
    """
    Decode a polyline into (longitude, latitude) pairs.

    Args:
        encoded: Encoded polyline string; None or "" give an empty path

    Returns:
        A new list of (longitude, latitude) tuples

    Raises:
        PolylineDecodeError: If the string is truncated or malformed

    Example:
        >>> decode("_p~iF~ps|U_ulLnnqC_mqNvxq`@")
        [(-120.2, 38.5), (-120.95, 40.7), (-126.453, 43.252)]
    """
    return [(lng, lat) for lat, lng in _decode_pairs(encoded)]


def decode_latlon(encoded: str | None) -> list[tuple[float, float]]:
    """Decode a polyline into (latitude, longitude) pairs."""
    return _decode_pairs(encoded)


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    chunks = []
    while value >= _CONTINUATION:
        chunks.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _OFFSET))
        value >>= 5
    chunks.append(chr(value + _OFFSET))
    return "".join(chunks)


def encode(path: Iterable[tuple[float, float]]) -> str:
    """
    Encode (longitude, latitude) pairs as a polyline string.

    Args:
        path: Sequence of (longitude, latitude) pairs

    Returns:
        Encoded polyline ("" for an empty path)
    """
    parts = []
    prev_lat = 0
    prev_lng = 0
    for lng, lat in path:
        lat_e5 = int(round(lat * PRECISION))
        lng_e5 = int(round(lng * PRECISION))
        parts.append(_encode_value(lat_e5 - prev_lat))
        parts.append(_encode_value(lng_e5 - prev_lng))
        prev_lat = lat_e5
        prev_lng = lng_e5
    return "".join(parts)
