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
Concurrent fan-out with per-entity fallback.

The aggregator fetches many independent entities (cities, provinces, station
searches) on a bounded thread pool. Each entity is fetched, parsed, and, if
anything goes wrong along the way, replaced by a fallback value. One entity
failing never affects another, and results always come back in input order.

Example:
    >>> with FanOutAggregator(max_workers=4) as aggregator:
    ...     readings = aggregator.aggregate(
    ...         ["madrid", "sevilla"],
    ...         fetch=fetch_city_feed,
    ...         parse=parse_feed,
    ...         fallback=generate_default_reading,
    ...     )
"""

import os
from concurrent.futures import ThreadPoolExecutor, wait
from logging import getLogger
from typing import Any, Callable, Iterable, TypeVar

from .types import FetchFailure, FetchResult, FetchSuccess

logger = getLogger(__name__)

E = TypeVar("E")
R = TypeVar("R")

DEFAULT_MAX_WORKERS = 8


def default_max_workers() -> int:
    """Pool size from AETHER_MAX_WORKERS, read at call time."""
    value = os.getenv("AETHER_MAX_WORKERS")
    if not value:
        return DEFAULT_MAX_WORKERS
    try:
        return int(value)
    except ValueError:
        raise ValueError(
            f"AETHER_MAX_WORKERS must be an integer, got '{value}'"
        ) from None


# =============================================================================
# Pipeline
# =============================================================================


def resolve(
    entity: Any,
    fetch: Callable[[Any], FetchResult],
    parse: Callable[[Any], Any],
) -> Any | None:
    """Fetch and parse one entity; None means the fallback is needed."""
    try:
        result = fetch(entity)
    except Exception as e:
        logger.warning(f"Fetch raised for {entity!r}: {type(e).__name__}: {e}")
        return None

    if isinstance(result, FetchFailure):
        logger.warning(
            f"Fetch failed for {entity!r} ({result.kind.value}): {result.message}"
        )
        return None
    if not isinstance(result, FetchSuccess):
        logger.warning(
            f"Fetch for {entity!r} returned {type(result).__name__}, "
            f"expected FetchSuccess or FetchFailure"
        )
        return None

    try:
        parsed = parse(result.payload)
    except Exception as e:
        logger.warning(f"Could not parse payload for {entity!r}: {e}")
        return None

    if parsed is None or getattr(parsed, "is_empty", False):
        logger.info(f"No usable data for {entity!r}")
        return None

    return parsed


def aggregate_one(
    entity: E,
    fetch: Callable[[E], FetchResult],
    parse: Callable[[Any], R | None],
    fallback: Callable[[E], R],
) -> R:
    """
    Run fetch → parse-or-fallback for a single entity in the calling thread.

    No worker pool is involved, so this suits one-off lookups such as a
    station search around a single point.
    """
    parsed = resolve(entity, fetch, parse)
    if parsed is None:
        logger.info(f"Using fallback for {entity!r}")
        return fallback(entity)
    return parsed


class FanOutAggregator:
    """
    Bounded worker pool that fetches entities and fills gaps with fallbacks.

    The pool belongs to the aggregator and is shut down by :meth:`close` (or
    on leaving a ``with`` block).

    Args:
        max_workers: Maximum concurrent fetches (default: AETHER_MAX_WORKERS or 8)
        timeout: Seconds to wait for a whole batch; entities still pending
            after this get their fallback value. None waits indefinitely.

    Raises:
        ValueError: If max_workers < 1 or timeout is negative
    """

    def __init__(self, max_workers: int | None = None, timeout: float | None = None):
        if max_workers is None:
            max_workers = default_max_workers()
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        if timeout is not None and timeout < 0:
            raise ValueError(f"timeout must be non-negative, got {timeout}")

        self.max_workers = max_workers
        self.timeout = timeout
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="aether-fetch"
        )

    def __enter__(self) -> "FanOutAggregator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Shut the pool down without waiting for in-flight fetches."""
        self._executor.shutdown(wait=False, cancel_futures=True)

    def aggregate_one(
        self,
        entity: E,
        fetch: Callable[[E], FetchResult],
        parse: Callable[[Any], R | None],
        fallback: Callable[[E], R],
    ) -> R:
        """Same as the module-level :func:`aggregate_one`; the pool is not used."""
        return aggregate_one(entity, fetch, parse, fallback)

    def aggregate(
        self,
        entities: Iterable[E],
        fetch: Callable[[E], FetchResult],
        parse: Callable[[Any], R | None],
        fallback: Callable[[E], R],
    ) -> list[R]:
        """
        Fetch every entity concurrently and collect one result per entity.

        An entity gets ``fallback(entity)`` when its fetch fails or raises,
        when parsing raises or returns None, when the parsed value reports
        ``is_empty``, or when it is still pending after the timeout.

        Args:
            entities: Entities to fetch, in the order results should come back
            fetch: Returns a FetchResult for one entity
            parse: Turns a successful payload into a result, or None
            fallback: Produces the stand-in result for one entity

        Returns:
            list: One result per entity, in input order

        Raises:
            ValueError: If ``entities`` is empty
        """
        entities = list(entities)
        if not entities:
            raise ValueError("At least one entity is required")

        futures = [
            self._executor.submit(resolve, entity, fetch, parse)
            for entity in entities
        ]
        done, pending = wait(futures, timeout=self.timeout)

        if pending:
            logger.warning(
                f"{len(pending)} of {len(futures)} fetches still pending after "
                f"{self.timeout}s, using fallbacks"
            )
            for future in pending:
                future.cancel()

        results = []
        fallbacks = 0
        for entity, future in zip(entities, futures):
            parsed = future.result() if future in done else None
            if parsed is None:
                fallbacks += 1
                parsed = fallback(entity)
            results.append(parsed)

        logger.info(
            f"Aggregated {len(entities)} entities ({fallbacks} from fallback)"
        )
        return results
