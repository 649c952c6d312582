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
Function decorators for retries and call logging.

Upstream calls are wrapped in :func:`with_retry` so transient network
problems are retried with exponential backoff before a source gives up and
reports a failure. Public API entry points use :func:`with_logging`.
"""

import logging
from functools import wraps
from typing import Callable, TypeVar

import requests
from tenacity import (
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

F = TypeVar("F", bound=Callable)

logger = logging.getLogger(__name__)


def is_server_error(exception: BaseException) -> bool:
    """True for HTTP 5xx errors; 4xx client errors are not worth retrying."""
    if isinstance(exception, requests.exceptions.HTTPError):
        response = exception.response
        return response is not None and 500 <= response.status_code < 600
    return False


def with_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
    multiplier: float = 2.0,
) -> Callable[[F], F]:
    """
    Decorator to add exponential backoff retry logic to a function.

    Retries on connection errors, timeouts and HTTP 5xx errors. The last
    exception is re-raised once all attempts are used.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait: Minimum wait between retries in seconds (default: 1.0)
        max_wait: Maximum wait between retries in seconds (default: 10.0)
        multiplier: Multiplier for exponential backoff (default: 2.0)

    Returns:
        Callable: Decorated function with retry logic

    Example:
        >>> @with_retry(max_attempts=5, min_wait=2.0)
        ... def fetch_feed(url):
        ...     response = requests.get(url, timeout=10)
        ...     response.raise_for_status()
        ...     return response.json()
    """

    def decorator(func: F) -> F:
        @retry(
            retry=(
                retry_if_exception_type(requests.exceptions.ConnectionError)
                | retry_if_exception_type(requests.exceptions.Timeout)
                | retry_if_exception(is_server_error)
            ),
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            after=after_log(logger, logging.DEBUG),
            reraise=True,
        )
        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        return wrapper

    return decorator


def with_logging(logger_name: str | None = None) -> Callable[[F], F]:
    """
    Decorator to log function entry, exit and errors.

    Errors are logged at ERROR level with the traceback and re-raised.

    Args:
        logger_name: Name of logger to use. If None, uses the module name.
    """

    def decorator(func: F) -> F:
        func_logger = logging.getLogger(logger_name or func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            func_logger.debug(
                f"Calling {func.__name__}",
                extra={"function": func.__name__, "kwargs_keys": list(kwargs.keys())},
            )
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                func_logger.error(
                    f"Error in {func.__name__}: {e}",
                    extra={"function": func.__name__, "error_type": type(e).__name__},
                    exc_info=True,
                )
                raise
            func_logger.debug(
                f"Completed {func.__name__}", extra={"function": func.__name__}
            )
            return result

        return wrapper

    return decorator


# Standard retry for upstream API calls
retry_on_network_error = with_retry(
    max_attempts=3, min_wait=1.0, max_wait=10.0, multiplier=2.0
)
