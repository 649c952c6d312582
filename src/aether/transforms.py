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
Composable DataFrame transformation functions.

Readings and stations are plain dataclasses; this module turns them into
DataFrames for analysis and export. Small transformer factories can be
chained with `pipe()` or `compose()`.

All transformer functions follow the pattern:
    - Take configuration as arguments
    - Return a function that transforms a DataFrame
    - Are pure (no side effects)

Example:
    >>> tidy = compose(
    ...     add_column("category", lambda df: df["index"].map(aqi_category)),
    ...     sort_values("index", ascending=False),
    ...     select_columns("name", "index", "category"),
    ... )
    >>> df = tidy(readings_to_frame(readings))
"""

from functools import reduce
from typing import Any, Callable, Iterable, TypeAlias

import pandas as pd

from .metrics import aqi_category
from .types import QualityReading, Station

Transformer: TypeAlias = Callable[[pd.DataFrame], pd.DataFrame]

READING_COLUMNS = [
    "location_key",
    "name",
    "latitude",
    "longitude",
    "index",
    "category",
    "dominant_factor",
    "color",
    "captured_at",
    "synthetic",
]

STATION_COLUMNS = [
    "name",
    "latitude",
    "longitude",
    "index",
    "category",
    "concentration",
    "unit",
    "color",
    "distance_from_center",
    "synthetic",
]


def pipe(df: pd.DataFrame, *functions: Transformer) -> pd.DataFrame:
    """
    Apply a series of transformation functions to a DataFrame in sequence.

    Args:
        df: Input DataFrame
        *functions: Transformer functions to apply, in order

    Returns:
        pd.DataFrame: Transformed DataFrame after all functions applied
    """
    return reduce(lambda data, func: func(data), functions, df)


def compose(*functions: Transformer) -> Transformer:
    """
    Compose multiple transformer functions into a single function.

    Example:
        >>> worst_first = compose(
        ...     sort_values("index", ascending=False),
        ...     reset_index(),
        ... )
        >>> df = worst_first(stations_to_frame(stations))
    """

    def composed(df: pd.DataFrame) -> pd.DataFrame:
        return pipe(df, *functions)

    return composed


def rename_columns(mapping: dict[str, str]) -> Transformer:
    """Return a function that renames DataFrame columns."""

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        return df.rename(columns=mapping)

    return transform


def add_column(name: str, value: Any | Callable[[pd.DataFrame], Any]) -> Transformer:
    """
    Return a function that adds a new column to a DataFrame.

    The value can be either a static value applied to all rows, or a callable
    that takes the DataFrame and returns a value or Series.

    Example:
        >>> add_column("source", "WAQI")
        >>> add_column("category", lambda df: df["index"].map(aqi_category))
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        if callable(value):
            return df.assign(**{name: value(df)})
        else:
            return df.assign(**{name: value})

    return transform


def drop_columns(*columns: str) -> Transformer:
    """
    Return a function that drops specified columns from a DataFrame.

    Columns that don't exist are ignored.
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        cols_to_drop = [col for col in columns if col in df.columns]
        if not cols_to_drop:
            return df
        return df.drop(columns=cols_to_drop)

    return transform


def filter_rows(predicate: Callable[[pd.DataFrame], pd.Series]) -> Transformer:
    """
    Return a function that filters DataFrame rows based on a condition.

    Example:
        >>> # Live readings only
        >>> transform = filter_rows(lambda df: ~df["synthetic"])
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        return df[predicate(df)]

    return transform


def sort_values(by: str | list[str], ascending: bool = True) -> Transformer:
    """Return a function that sorts a DataFrame by specified column(s)."""

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        # Stable, so ties keep their input order
        return df.sort_values(by=by, ascending=ascending, kind="stable")

    return transform


def reset_index(drop: bool = True) -> Transformer:
    """Return a function that resets the DataFrame index."""

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        return df.reset_index(drop=drop)

    return transform


def select_columns(*columns: str) -> Transformer:
    """
    Return a function that selects only specified columns from a DataFrame.

    Columns that don't exist are ignored.
    """

    def transform(df: pd.DataFrame) -> pd.DataFrame:
        cols_to_select = [col for col in columns if col in df.columns]
        return df[cols_to_select]

    return transform


# ============================================================================
# Record conversion
# ============================================================================


def _categorise(df: pd.DataFrame) -> pd.Series:
    return df["index"].map(lambda value: aqi_category(None if pd.isna(value) else int(value)))


def readings_to_frame(readings: Iterable[QualityReading]) -> pd.DataFrame:
    """
    Convert readings to a DataFrame, one row per reading.

    Component values become ``component_<name>`` columns after the standard
    columns. An unknown index is stored as ``<NA>`` (nullable integer).

    Returns:
        pd.DataFrame: Columns in READING_COLUMNS order, then components
    """
    rows = []
    component_names: list[str] = []
    for reading in readings:
        row = {
            "location_key": reading.location_key,
            "name": reading.name,
            "latitude": reading.coordinate.latitude,
            "longitude": reading.coordinate.longitude,
            "index": reading.index,
            "dominant_factor": reading.dominant_factor,
            "color": reading.color,
            "captured_at": reading.captured_at,
            "synthetic": reading.synthetic,
        }
        for component, value in reading.components.items():
            if component not in component_names:
                component_names.append(component)
            row[f"component_{component}"] = value
        rows.append(row)

    component_columns = [f"component_{name}" for name in component_names]
    if not rows:
        return pd.DataFrame(columns=READING_COLUMNS + component_columns)

    normalise = compose(
        add_column("index", lambda df: df["index"].astype("Int64")),
        add_column("category", _categorise),
        select_columns(*READING_COLUMNS, *component_columns),
    )
    return normalise(pd.DataFrame(rows))


def stations_to_frame(stations: Iterable[Station]) -> pd.DataFrame:
    """
    Convert stations to a DataFrame, one row per station, in input order.

    Returns:
        pd.DataFrame: Columns in STATION_COLUMNS order
    """
    rows = [
        {
            "name": station.name,
            "latitude": station.coordinate.latitude,
            "longitude": station.coordinate.longitude,
            "index": station.index,
            "concentration": station.concentration,
            "unit": station.unit,
            "color": station.color,
            "distance_from_center": station.distance_from_center,
            "synthetic": station.synthetic,
        }
        for station in stations
    ]
    if not rows:
        return pd.DataFrame(columns=STATION_COLUMNS)

    normalise = compose(
        add_column("index", lambda df: df["index"].astype("Int64")),
        add_column("category", _categorise),
        select_columns(*STATION_COLUMNS),
    )
    return normalise(pd.DataFrame(rows))
