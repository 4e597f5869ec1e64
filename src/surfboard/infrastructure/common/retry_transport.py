"""Retrying httpx transport for addon traffic.

Community addon hosts throttle (429) and, behind shared proxies, answer
502/503/504 or drop the connection under load.  Addon calls are plain
GETs, so both kinds of failure are retried before the client sees them.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass

import httpx
import structlog

log = structlog.get_logger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})
_RETRYABLE_ERRORS = (httpx.NetworkError, httpx.TimeoutException, httpx.RemoteProtocolError)
_IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


@dataclass(frozen=True)
class Backoff:
    """Exponential delay with up to ``base`` seconds of jitter, capped at ``cap``."""

    base: float = 0.5
    cap: float = 10.0

    def delay(self, attempt: int, retry_after: float | None = None) -> float:
        if retry_after is not None:
            return min(retry_after, self.cap)
        jitter = random.uniform(0, self.base)  # noqa: S311
        return min(self.base * 2**attempt + jitter, self.cap)


def retry_after_seconds(response: httpx.Response) -> float | None:
    """Numeric ``Retry-After`` value; ``None`` if absent or given as an HTTP date."""
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


class RetryTransport(httpx.AsyncBaseTransport):
    """Resends idempotent requests on throttling, gateway errors and dropped connections.

    A request goes out at most ``1 + max_retries`` times.  When retries
    run out the last response is returned as is, or the last connection
    error is re-raised.  Other methods pass straight through.
    """

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport,
        *,
        max_retries: int = 2,
        backoff_base: float = 0.5,
        max_backoff: float = 10.0,
        retryable_status_codes: frozenset[int] = RETRYABLE_STATUS_CODES,
    ) -> None:
        self._wrapped = wrapped
        self._max_retries = max(0, max_retries)
        self._backoff = Backoff(base=backoff_base, cap=max_backoff)
        self._retryable = retryable_status_codes

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method not in _IDEMPOTENT_METHODS:
            return await self._wrapped.handle_async_request(request)

        attempt = 0
        while True:
            try:
                response = await self._wrapped.handle_async_request(request)
            except _RETRYABLE_ERRORS as exc:
                if attempt >= self._max_retries:
                    raise
                await self._pause(request, attempt, reason=type(exc).__name__)
            else:
                if response.status_code not in self._retryable or attempt >= self._max_retries:
                    return response
                # Drain so the pooled connection can be reused.
                await response.aread()
                await response.aclose()
                await self._pause(
                    request,
                    attempt,
                    reason=str(response.status_code),
                    retry_after=retry_after_seconds(response),
                )
            attempt += 1

    async def _pause(
        self,
        request: httpx.Request,
        attempt: int,
        *,
        reason: str,
        retry_after: float | None = None,
    ) -> None:
        delay = self._backoff.delay(attempt, retry_after)
        log.info(
            "http_retry",
            url=str(request.url),
            reason=reason,
            attempt=attempt + 1,
            delay=round(delay, 2),
        )
        await asyncio.sleep(delay)

    async def aclose(self) -> None:
        await self._wrapped.aclose()
