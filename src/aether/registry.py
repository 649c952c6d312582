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
Location registry for Aether.

This module provides a simple registry mapping location identifiers to their
names and coordinates. Cities and provinces live in separate namespaces, so
"madrid" the city and "madrid" the province can both be registered. It backs
the default location lookup used by the public API.

The registry is just a dictionary. The built-in catalogue registers itself
when :mod:`aether.locations` is imported.

Example:
    >>> from aether.registry import register_location, get_location
    >>>
    >>> register_location({
    ...     "key": "toledo",
    ...     "name": "Toledo",
    ...     "kind": "city",
    ...     "latitude": 39.8628,
    ...     "longitude": -4.0273,
    ... })
    >>> get_location("TOLEDO")["name"]
    'Toledo'
"""

import warnings
from typing import Dict

from .types import Coordinate, LocationSpec

LOCATION_KINDS = ("city", "province")

# The global registry - maps (kind, key) to LocationSpecs
_LOCATIONS: Dict[tuple[str, str], LocationSpec] = {}


def _normalise_key(key: str) -> str:
    return key.strip().lower()


def _check_kind(kind: str) -> None:
    if kind not in LOCATION_KINDS:
        raise ValueError(f"Unknown location kind '{kind}'. Expected one of {LOCATION_KINDS}")


def register_location(spec: LocationSpec) -> None:
    """
    Register a location in the global registry.

    Keys are case-insensitive. Registering an existing key of the same kind
    replaces it with a warning.

    Args:
        spec: LocationSpec with key, name, kind, latitude and longitude

    Raises:
        ValueError: If the kind is unknown or the coordinates are out of range
    """
    _check_kind(spec["kind"])
    # Validates the coordinate before anything is stored
    Coordinate(spec["latitude"], spec["longitude"])

    key = _normalise_key(spec["key"])
    if (spec["kind"], key) in _LOCATIONS:
        warnings.warn(
            f"Location '{key}' ({spec['kind']}) is already registered and will be replaced",
            UserWarning,
            stacklevel=2,
        )

    _LOCATIONS[(spec["kind"], key)] = {**spec, "key": key}


def unregister_location(key: str, kind: str = "city") -> bool:
    """
    Remove a location from the registry.

    Returns:
        bool: True if the location was removed, False if it wasn't registered
    """
    registry_key = (kind, _normalise_key(key))
    if registry_key in _LOCATIONS:
        del _LOCATIONS[registry_key]
        return True
    return False


def get_location(key: str, kind: str = "city") -> LocationSpec | None:
    """Retrieve a registered location by key (case-insensitive)."""
    _check_kind(kind)
    return _LOCATIONS.get((kind, _normalise_key(key)))


def list_locations(kind: str = "city") -> list[str]:
    """List registered location keys of one kind, in registration order."""
    _check_kind(kind)
    return [key for spec_kind, key in _LOCATIONS if spec_kind == kind]


def location_exists(key: str, kind: str = "city") -> bool:
    """Check if a location is registered."""
    return (kind, _normalise_key(key)) in _LOCATIONS


def lookup_location(key: str, kind: str = "city") -> Coordinate | None:
    """
    Resolve a location key to its coordinate.

    This is the default location lookup collaborator.

    Returns:
        Coordinate | None: The coordinate, or None if the key is unknown
    """
    spec = get_location(key, kind)
    if spec is None:
        return None
    return Coordinate(spec["latitude"], spec["longitude"])


def clear_registry() -> None:
    """
    Remove every registered location.

    Primarily useful for testing.

    Warning:
        This also removes the built-in catalogue.
    """
    _LOCATIONS.clear()
