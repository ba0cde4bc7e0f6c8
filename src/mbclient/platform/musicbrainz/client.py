"""Where: src/mbclient/platform/musicbrainz/client.py
What: Blocking and asyncio client facades owning endpoints and an executor.
Why: Let query builders stay transport-agnostic while callers choose an
     operating mode, with lazily created process-wide defaults.

This module delegates specialised responsibilities to smaller helpers:
- ``transport`` performs the HTTP exchange (requests or httpx)
- ``executor`` applies permits, headers and status mapping
- ``rate_limit`` owns the shared asyncio limiter
- ``user_agent`` centralises etiquette for outbound requests
"""

from __future__ import annotations

import threading
from typing import Final

from mbclient.config.settings import COVERART_BASE_URL, MB_BASE_URL
from mbclient.query.request import Request

from .executor import AsyncRequestExecutor, RequestExecutor
from .rate_limit import AsyncRateLimiter, RateLimiter, shared_rate_limiter
from .transport import (
    AsyncTransport,
    HttpxTransport,
    RequestsTransport,
    Transport,
    TransportResponse,
)

_USE_SHARED: Final = object()


class MusicBrainzClient:
    """Blocking MusicBrainz WS2 / Cover Art Archive client.

    Requests run one after another on the calling thread, so no limiter is
    applied unless ``rate_limiter`` is given (e.g. when several threads share
    one client).
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        musicbrainz_url: str = MB_BASE_URL,
        coverart_url: str = COVERART_BASE_URL,
        rate_limiter: RateLimiter | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.musicbrainz_url: str = musicbrainz_url.rstrip("/")
        self.coverart_url: str = coverart_url.rstrip("/")
        self._owns_transport = transport is None
        self.transport: Transport = transport or RequestsTransport()
        self.executor = RequestExecutor(
            self.transport,
            rate_limiter=rate_limiter,
            user_agent=user_agent,
        )

    def send(self, request: Request) -> TransportResponse:
        """Execute a built request."""

        return self.executor.execute(request)

    def close(self) -> None:
        """Close the default transport; injected transports are left alone."""

        if self._owns_transport and isinstance(self.transport, RequestsTransport):
            self.transport.close()

    def __enter__(self) -> MusicBrainzClient:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


class AsyncMusicBrainzClient:
    """Asyncio MusicBrainz WS2 / Cover Art Archive client.

    By default every instance shares the process-wide limiter, so concurrent
    tasks across clients keep to one request per interval. Pass
    ``rate_limiter=None`` to disable throttling or an isolated
    ``AsyncRateLimiter`` for tests.
    """

    def __init__(
        self,
        transport: AsyncTransport | None = None,
        *,
        musicbrainz_url: str = MB_BASE_URL,
        coverart_url: str = COVERART_BASE_URL,
        rate_limiter: AsyncRateLimiter | None | object = _USE_SHARED,
        user_agent: str | None = None,
    ) -> None:
        self.musicbrainz_url: str = musicbrainz_url.rstrip("/")
        self.coverart_url: str = coverart_url.rstrip("/")
        self._owns_transport = transport is None
        self.transport: AsyncTransport = transport or HttpxTransport()

        limiter: AsyncRateLimiter | None
        if rate_limiter is _USE_SHARED:
            limiter = shared_rate_limiter()
        elif rate_limiter is None or isinstance(rate_limiter, AsyncRateLimiter):
            limiter = rate_limiter
        else:
            raise TypeError("rate_limiter must be an AsyncRateLimiter or None")

        self.executor = AsyncRequestExecutor(
            self.transport,
            rate_limiter=limiter,
            user_agent=user_agent,
        )

    @property
    def rate_limiter(self) -> AsyncRateLimiter | None:
        return self.executor.rate_limiter

    async def send(self, request: Request) -> TransportResponse:
        """Execute a built request."""

        return await self.executor.execute(request)

    async def aclose(self) -> None:
        """Close the default transport; injected transports are left alone."""

        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            await self.transport.aclose()

    async def __aenter__(self) -> AsyncMusicBrainzClient:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.aclose()


_default_client: MusicBrainzClient | None = None
_default_async_client: AsyncMusicBrainzClient | None = None
_defaults_guard: Final[threading.Lock] = threading.Lock()


def default_client() -> MusicBrainzClient:
    """Return the lazily created process-wide blocking client."""

    global _default_client
    with _defaults_guard:
        if _default_client is None:
            _default_client = MusicBrainzClient()
        return _default_client


def default_async_client() -> AsyncMusicBrainzClient:
    """Return the lazily created process-wide asyncio client."""

    global _default_async_client
    with _defaults_guard:
        if _default_async_client is None:
            _default_async_client = AsyncMusicBrainzClient()
        return _default_async_client


def _reset_default_clients() -> None:
    """Forget the default clients (test support)."""

    global _default_client, _default_async_client
    with _defaults_guard:
        _default_client = None
        _default_async_client = None


__all__ = [
    "AsyncMusicBrainzClient",
    "MusicBrainzClient",
    "default_async_client",
    "default_client",
]
