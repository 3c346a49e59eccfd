"""
Retry helpers for external API calls.

Wraps tenacity with the retry policy used by live provider clients:
transient network failures are retried with exponential backoff, while
HTTP error responses are surfaced immediately as provider errors.
"""

import logging

import httpx
from tenacity import (
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

# Exceptions that indicate a transient network problem
API_RETRIABLE_EXCEPTIONS = (
    ConnectionError,
    TimeoutError,
    httpx.TimeoutException,
    httpx.NetworkError,
)


def api_retry(
    max_attempts: int = 3,
    min_wait_seconds: float = 1,
    max_wait_seconds: float = 5,
):
    """
    Retry decorator for async external API calls.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        min_wait_seconds: Minimum wait time between retries (default: 1)
        max_wait_seconds: Maximum wait time between retries (default: 5)

    Returns:
        Decorator applying the retry policy; the last exception is re-raised

    Examples:
        >>> @api_retry(max_attempts=3)
        ... async def call_external_api(client):
        ...     response = await client.get("https://api.example.com/data")
        ...     return response.json()
    """
    return retry(
        retry=retry_if_exception_type(API_RETRIABLE_EXCEPTIONS),
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=1, min=min_wait_seconds, max=max_wait_seconds),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        after=after_log(logger, logging.DEBUG),
        reraise=True,
    )
