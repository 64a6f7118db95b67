"""httpx async transport wrapper that retries transient server failures."""

from __future__ import annotations

import asyncio
import logging
import random
import time

import httpx

_LOG = logging.getLogger(__name__)

# Status codes considered transient and eligible for automatic retry.
_RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})
_DEFAULT_RETRY_AFTER = 1.0


class RetryingTransport(httpx.AsyncBaseTransport):
    """Wraps an httpx async transport with retry on transient failures.

    Both sync endpoints are safe to repeat: the status read has no side
    effects and the server de-duplicates uploaded samples by id.

    - Transport errors (connection reset, timeouts) and 502/503/504 are
      retried with capped exponential backoff plus jitter.
    - HTTP 429 pauses **every** request going through this transport until
      the ``Retry-After`` deadline, since the server limit is per client.
    - After *max_retries* the last response is returned (or the last
      transport error raised) for the caller to map.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
        backoff_cap: float = 8.0,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._backoff_cap = backoff_cap

        self._pause_lock = asyncio.Lock()
        self._pause_clear = asyncio.Event()
        self._pause_clear.set()
        self._pause_until = 0.0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            await self._pause_clear.wait()
            retries_left = attempt < self._max_retries

            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as exc:
                if not retries_left:
                    raise
                _LOG.warning("%s %s failed: %s", request.method, request.url, exc)
                await self._sleep_backoff(attempt)
                attempt += 1
                continue

            if response.status_code not in _RETRYABLE_STATUS_CODES or not retries_left:
                return response

            await response.aclose()
            retry_after = self._parse_retry_after(response)
            if response.status_code == 429:
                await self._pause_all(retry_after)
            elif retry_after > 0:
                await asyncio.sleep(retry_after)
            _LOG.warning("%s %s returned HTTP %d", request.method, request.url, response.status_code)
            await self._sleep_backoff(attempt)
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()

    # ------------------------------------------------------------------
    # Pause / backoff helpers
    # ------------------------------------------------------------------

    async def _pause_all(self, retry_after: float) -> None:
        async with self._pause_lock:
            until = time.monotonic() + retry_after
            if until <= self._pause_until:
                return
            self._pause_until = until
            self._pause_clear.clear()

        await asyncio.sleep(max(0.0, self._pause_until - time.monotonic()))

        async with self._pause_lock:
            if time.monotonic() >= self._pause_until:
                self._pause_clear.set()

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> float:
        raw = response.headers.get("Retry-After")
        if raw is None:
            return _DEFAULT_RETRY_AFTER if response.status_code == 429 else 0.0
        try:
            return max(0.0, float(raw))
        except ValueError:
            return _DEFAULT_RETRY_AFTER

    async def _sleep_backoff(self, attempt: int) -> None:
        seconds = min(self._backoff_cap, float(2**attempt)) + random.uniform(0.0, 0.25)
        await asyncio.sleep(seconds)
