"""Where: src/mbclient/platform/musicbrainz/executor.py
What: Turn immutable requests into transport calls behind the rate limiter.
Why: Keep permits, headers and status mapping in one entity-agnostic place.
"""

from __future__ import annotations

import json
import time
from typing import Any

from mbclient.errors import NotFound, RemoteError, TransportFailure
from mbclient.platform.logging import logger
from mbclient.query.request import Request

from .rate_limit import AsyncRateLimiter, RateLimiter
from .transport import AsyncTransport, Transport, TransportResponse
from .user_agent import mark_request_issued, resolve_user_agent

_REDIRECT_STATUSES: frozenset[int] = frozenset({301, 302, 303, 307, 308})


def _remote_message(content: bytes) -> str | None:
    """Extract the ``error`` field MusicBrainz puts in JSON error bodies."""

    try:
        payload: Any = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, str) and error.strip():
            return error.strip()
    return None


def check_response(request: Request, response: TransportResponse) -> TransportResponse:
    """Map non-success statuses to the error taxonomy.

    Raises:
        NotFound: For 404 answers.
        RemoteError: For every other status outside 2xx, except redirects the
            request expects.
    """

    status = response.status
    if 200 <= status < 300:
        return response
    if (
        request.expects_redirect
        and status in _REDIRECT_STATUSES
        and response.header("Location")
    ):
        return response

    message = _remote_message(response.content)
    if status == 404:
        raise NotFound(message, request.url)
    raise RemoteError(status, message, request.url)


def build_headers(user_agent: str | None = None) -> dict[str, str]:
    """Headers sent with every request."""

    return {
        "Accept": "application/json",
        "User-Agent": user_agent or resolve_user_agent(),
    }


def _log_start(request: Request) -> None:
    logger.debug(
        "GET %s",
        request.full_url,
        extra={"client_event": "request.start", "method": "GET", "url": request.full_url},
    )


def _log_failure(request: Request, exc: TransportFailure) -> None:
    logger.warning(
        "GET %s failed: %s",
        request.full_url,
        exc,
        extra={
            "client_event": "request.error",
            "method": "GET",
            "url": request.full_url,
            "error_message": str(exc.__cause__ or exc),
        },
    )


def _log_outcome(request: Request, response: TransportResponse, started: float) -> None:
    duration_ms = (time.perf_counter() - started) * 1000.0
    event = "request.complete"
    if request.expects_redirect and response.status in _REDIRECT_STATUSES:
        event = "request.redirect"
    elif not 200 <= response.status < 300:
        event = "request.error"

    level = logger.warning if event == "request.error" else logger.debug
    level(
        "GET %s -> %s",
        request.full_url,
        response.status,
        extra={
            "client_event": event,
            "method": "GET",
            "url": request.full_url,
            "status": response.status,
            "duration_ms": duration_ms,
        },
    )


class RequestExecutor:
    """Execute requests through a blocking transport.

    No limiter is used unless one is passed in: a single thread issuing
    requests one after another is expected to keep its own cadence.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        rate_limiter: RateLimiter | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.transport = transport
        self.rate_limiter = rate_limiter
        self._user_agent = user_agent

    def execute(self, request: Request) -> TransportResponse:
        """Send ``request`` and return the checked raw response."""

        if self.rate_limiter is not None:
            self.rate_limiter.acquire()

        headers = build_headers(self._user_agent)
        mark_request_issued()
        _log_start(request)
        started = time.perf_counter()
        try:
            response = self.transport.send(
                "GET",
                request.url,
                request.query_params,
                headers,
                follow_redirects=not request.expects_redirect,
            )
        except TransportFailure as exc:
            _log_failure(request, exc)
            raise
        except Exception as exc:
            failure = TransportFailure(f"GET {request.url} failed: {exc}")
            _log_failure(request, failure)
            raise failure from exc
        _log_outcome(request, response, started)
        return check_response(request, response)


class AsyncRequestExecutor:
    """Execute requests through an asyncio transport behind a shared limiter."""

    def __init__(
        self,
        transport: AsyncTransport,
        *,
        rate_limiter: AsyncRateLimiter | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.transport = transport
        self.rate_limiter = rate_limiter
        self._user_agent = user_agent

    async def execute(self, request: Request) -> TransportResponse:
        """Await a permit, send ``request`` and return the checked raw response."""

        if self.rate_limiter is not None:
            await self.rate_limiter.acquire()

        headers = build_headers(self._user_agent)
        mark_request_issued()
        _log_start(request)
        started = time.perf_counter()
        try:
            response = await self.transport.send(
                "GET",
                request.url,
                request.query_params,
                headers,
                follow_redirects=not request.expects_redirect,
            )
        except TransportFailure as exc:
            _log_failure(request, exc)
            raise
        except Exception as exc:
            failure = TransportFailure(f"GET {request.url} failed: {exc}")
            _log_failure(request, failure)
            raise failure from exc
        _log_outcome(request, response, started)
        return check_response(request, response)


__all__ = [
    "AsyncRequestExecutor",
    "RequestExecutor",
    "build_headers",
    "check_response",
]
