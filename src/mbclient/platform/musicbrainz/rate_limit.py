"""Where: src/mbclient/platform/musicbrainz/rate_limit.py
What: Throttles enforcing MusicBrainz WS2 request spacing for threads and asyncio tasks.
Why: MusicBrainz asks clients to limit traffic to roughly 1 request per second.
"""

from __future__ import annotations

import asyncio
import threading
import time
from types import TracebackType
from typing import Callable, Final

from mbclient.config.settings import RATE_LIMIT_ENABLED, RATE_LIMIT_INTERVAL_SECONDS
from mbclient.errors import ConfigurationError
from mbclient.platform.logging import logger

Clock = Callable[[], float]


def _check_interval(min_interval_seconds: float) -> float:
    if min_interval_seconds < 0:
        raise ConfigurationError("Rate limit interval must not be negative")
    return float(min_interval_seconds)


def _log_wait(wait: float) -> None:
    logger.debug(
        "Rate limit wait %.3fs",
        wait,
        extra={"client_event": "ratelimit.wait", "wait_seconds": wait},
    )


class RateLimiter:
    """Provide a minimal monotonic sleep guard for threads issuing requests."""

    def __init__(self, min_interval_seconds: float, *, clock: Clock = time.monotonic) -> None:
        self._min_interval: float = _check_interval(min_interval_seconds)
        self._clock: Clock = clock
        self._lock: Final[threading.Lock] = threading.Lock()
        self._last_grant: float | None = None

    @property
    def interval(self) -> float:
        return self._min_interval

    def acquire(self) -> None:
        """Block the caller until the minimum spacing constraint is met."""

        with self._lock:
            while (wait := self._remaining()) > 0:
                _log_wait(wait)
                time.sleep(wait)
            self._last_grant = self._clock()

    def _remaining(self) -> float:
        if self._last_grant is None:
            return 0.0
        return self._min_interval - (self._clock() - self._last_grant)

    def __enter__(self) -> RateLimiter:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        return None


class AsyncRateLimiter:
    """Serialise permit grants across asyncio tasks.

    Waiters queue on an ``asyncio.Lock``, which wakes them in arrival order.
    The grant time is recorded only after the wait completes, so a task
    cancelled while queued or sleeping leaves the schedule untouched for the
    callers behind it.
    """

    def __init__(self, min_interval_seconds: float, *, clock: Clock = time.monotonic) -> None:
        self._min_interval: float = _check_interval(min_interval_seconds)
        self._clock: Clock = clock
        self._last_grant: float | None = None
        self._lock: asyncio.Lock | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._guard: Final[threading.Lock] = threading.Lock()

    @property
    def interval(self) -> float:
        return self._min_interval

    def _lock_for_running_loop(self) -> asyncio.Lock:
        # asyncio locks are bound to one event loop; each new loop gets its own.
        loop = asyncio.get_running_loop()
        with self._guard:
            if self._lock is None or self._loop is not loop:
                self._lock = asyncio.Lock()
                self._loop = loop
            return self._lock

    def _remaining(self) -> float:
        if self._last_grant is None:
            return 0.0
        return self._min_interval - (self._clock() - self._last_grant)

    async def acquire(self) -> None:
        """Suspend the caller until it may issue the next request."""

        async with self._lock_for_running_loop():
            while (wait := self._remaining()) > 0:
                _log_wait(wait)
                await asyncio.sleep(wait)
            self._last_grant = self._clock()
            logger.debug("Rate limit permit granted", extra={"client_event": "ratelimit.grant"})

    async def __aenter__(self) -> AsyncRateLimiter:
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        return None


_DEFAULT_MIN_INTERVAL: Final[float] = RATE_LIMIT_INTERVAL_SECONDS

_shared_enabled: bool = RATE_LIMIT_ENABLED
_shared_interval: float = _DEFAULT_MIN_INTERVAL
_shared_limiter: AsyncRateLimiter | None = None
_shared_handed_out: bool = False
_shared_guard: Final[threading.Lock] = threading.Lock()


def configure_rate_limit(
    *,
    interval_seconds: float | None = None,
    enabled: bool | None = None,
) -> None:
    """Set the shared limiter's interval and on/off switch before first use.

    Raises:
        ConfigurationError: If the shared limiter was already handed to a client.
    """

    global _shared_enabled, _shared_interval
    with _shared_guard:
        if _shared_handed_out:
            raise ConfigurationError(
                "The shared rate limiter is already in use and cannot be reconfigured"
            )
        if interval_seconds is not None:
            _shared_interval = _check_interval(interval_seconds)
        if enabled is not None:
            _shared_enabled = enabled


def shared_rate_limiter() -> AsyncRateLimiter | None:
    """Return the process-wide limiter, or None when rate limiting is disabled."""

    global _shared_limiter, _shared_handed_out
    with _shared_guard:
        _shared_handed_out = True
        if not _shared_enabled:
            return None
        if _shared_limiter is None:
            _shared_limiter = AsyncRateLimiter(_shared_interval)
        return _shared_limiter


def _reset_shared_rate_limiter() -> None:
    """Forget the shared limiter and its configuration (test support)."""

    global _shared_enabled, _shared_interval, _shared_limiter, _shared_handed_out
    with _shared_guard:
        _shared_enabled = RATE_LIMIT_ENABLED
        _shared_interval = _DEFAULT_MIN_INTERVAL
        _shared_limiter = None
        _shared_handed_out = False


__all__ = [
    "AsyncRateLimiter",
    "RateLimiter",
    "configure_rate_limit",
    "shared_rate_limiter",
]
