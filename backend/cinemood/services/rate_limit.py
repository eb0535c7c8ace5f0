"""
rate_limit.py

Exponential backoff for upstream API calls.
Only transient failures (transport errors, timeouts, HTTP 429 and 5xx) are retried;
everything else is raised on the first attempt.
"""
import asyncio
import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def is_transient(exc: Exception) -> bool:
    """True for failures worth retrying."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.TransportError)


def _retry_after_seconds(exc: Exception) -> Optional[float]:
    if not isinstance(exc, httpx.HTTPStatusError) or exc.response.status_code != 429:
        return None
    header = exc.response.headers.get("Retry-After")
    if not header:
        return None
    try:
        return max(0.0, float(header))
    except ValueError:
        return None


def _describe(exc: Exception) -> str:
    # Status errors embed the request URL, which carries the API key
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    return f"{type(exc).__name__}: {exc}"


async def with_backoff(
    func,
    *args,
    max_retries: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 8.0,
    service: str = None,
    **kwargs,
):
    """Execute `func` with up to `max_retries` attempts, backing off on transient errors."""
    attempts = max(1, max_retries)
    delay = base_delay

    for attempt in range(attempts):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            if not is_transient(e) or attempt + 1 >= attempts:
                raise
            wait = _retry_after_seconds(e)
            wait = min(wait if wait is not None else delay, max_delay)
            logger.warning(
                f"{service or 'upstream'} transient failure on attempt {attempt + 1}/{attempts}: "
                f"{_describe(e)}; sleeping {wait}s"
            )
            await asyncio.sleep(wait)
            delay = min(delay * 2, max_delay)
