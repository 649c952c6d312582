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
Recorded activities from the Strava API.

Only the read side is covered: given an access token that the caller has
already obtained, fetch the athlete's recent activities and turn them into
Route records for clustering. Token exchange and refresh are left to the
caller.

API Documentation: https://developers.strava.com/docs/reference/
"""

from logging import getLogger
from typing import Any

import requests

from ..decorators import retry_on_network_error
from ..types import Coordinate, FailureKind, FetchFailure, FetchResult, FetchSuccess, Route

logger = getLogger(__name__)

STRAVA_API_BASE = "https://www.strava.com/api/v3"
REQUEST_TIMEOUT = 10


@retry_on_network_error
def _call_strava_api(endpoint: str, access_token: str, params: dict) -> Any:
    """
    Low-level Strava API caller.

    Raises:
        requests.HTTPError: If the API returns an error status
    """
    response = requests.get(
        f"{STRAVA_API_BASE}/{endpoint}",
        params=params,
        headers={"Authorization": f"Bearer {access_token}"},
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


def fetch_activities(access_token: str, per_page: int = 50, page: int = 1) -> FetchResult:
    """
    Fetch one page of the authenticated athlete's activities.

    Args:
        access_token: OAuth access token with activity:read scope
        per_page: Activities per page (1-200)
        page: Page number, starting at 1

    Returns:
        FetchSuccess with the list of activity records, or FetchFailure

    Raises:
        ValueError: If the token is blank or paging arguments are out of range
    """
    if not access_token or not access_token.strip():
        raise ValueError("An access token is required to fetch activities")
    if not 1 <= per_page <= 200:
        raise ValueError(f"per_page must be between 1 and 200, got {per_page}")
    if page < 1:
        raise ValueError(f"page must be at least 1, got {page}")

    try:
        body = _call_strava_api(
            "athlete/activities", access_token, {"per_page": per_page, "page": page}
        )
    except requests.exceptions.HTTPError as e:
        return FetchFailure(FailureKind.HTTP_STATUS, str(e))
    except requests.exceptions.JSONDecodeError as e:
        return FetchFailure(FailureKind.MALFORMED, f"Response is not JSON: {e}")
    except requests.exceptions.RequestException as e:
        return FetchFailure(FailureKind.NETWORK, str(e))

    if not isinstance(body, list):
        return FetchFailure(FailureKind.MALFORMED, "Expected a list of activities")
    if not body:
        return FetchFailure(FailureKind.EMPTY, "No activities returned")

    logger.info(f"Retrieved {len(body)} activities (page {page})")
    return FetchSuccess(body)


def _latlng(value: Any) -> Coordinate | None:
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        return None
    try:
        return Coordinate(float(value[0]), float(value[1]))
    except (TypeError, ValueError):
        return None


def parse_activity(record: dict) -> Route | None:
    """
    Convert one activity record into a Route.

    Returns:
        Route, or None if the record has no id
    """
    route_id = record.get("id")
    if route_id is None:
        return None

    activity_map = record.get("map") if isinstance(record.get("map"), dict) else {}

    return Route(
        route_id=route_id,
        summary_polyline=activity_map.get("summary_polyline") or None,
        start=_latlng(record.get("start_latlng")),
        end=_latlng(record.get("end_latlng")),
        name=record.get("name"),
        activity_type=record.get("sport_type") or record.get("type"),
        distance=record.get("distance"),
        moving_time=record.get("moving_time"),
        start_date=record.get("start_date_local"),
        location_city=record.get("location_city"),
    )


def parse_activities(data: Any) -> list[Route]:
    """Convert a list of activity records into Routes, skipping bad records."""
    if not isinstance(data, list):
        return []
    routes = []
    for record in data:
        if not isinstance(record, dict):
            continue
        route = parse_activity(record)
        if route is not None:
            routes.append(route)
    return routes
