"""Where: src/mbclient/platform/musicbrainz/transport.py
What: HTTP transports (requests for blocking use, httpx for asyncio) behind a small protocol.
Why: Decouple network concerns from request construction so tests can inject stubs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import TracebackType
from typing import Protocol, cast, runtime_checkable

import httpx
import requests

from mbclient.config.settings import HTTP_TIMEOUT_SECONDS
from mbclient.errors import TransportFailure

QueryParams = Sequence[tuple[str, str]]


@dataclass(slots=True, frozen=True)
class TransportResponse:
    """Represent an HTTP response as seen by the request executor."""

    status: int
    content: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)
    url: str = ""

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""

        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


@runtime_checkable
class Transport(Protocol):
    """Blocking transport able to send a GET request."""

    def send(
        self,
        method: str,
        url: str,
        params: QueryParams,
        headers: Mapping[str, str],
        *,
        follow_redirects: bool = True,
    ) -> TransportResponse:
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Asyncio transport able to send a GET request."""

    async def send(
        self,
        method: str,
        url: str,
        params: QueryParams,
        headers: Mapping[str, str],
        *,
        follow_redirects: bool = True,
    ) -> TransportResponse:
        ...


def _header_dict(items: Iterable[tuple[str, str]]) -> dict[str, str]:
    return {str(key): str(value) for key, value in items}


class RequestsTransport:
    """Perform blocking requests through a reusable ``requests.Session``."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    def close(self) -> None:
        """Close the underlying HTTP session and release pooled connections."""
        self._session.close()

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def send(
        self,
        method: str,
        url: str,
        params: QueryParams,
        headers: Mapping[str, str],
        *,
        follow_redirects: bool = True,
    ) -> TransportResponse:
        try:
            response = self._session.request(
                method,
                url,
                params=list(params),
                headers=dict(headers),
                timeout=self._timeout,
                allow_redirects=follow_redirects,
            )
        except requests.RequestException as exc:
            raise TransportFailure(f"{method} {url} failed: {exc}") from exc

        header_items = cast(Iterable[tuple[str, str]], response.headers.items())
        return TransportResponse(
            status=int(response.status_code),
            content=response.content,
            headers=_header_dict(header_items),
            url=str(response.url),
        )


class HttpxTransport:
    """Perform asyncio requests through ``httpx.AsyncClient``.

    Without an injected client, each request opens a short-lived client so the
    transport can be shared by code running under different event loops.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self._client = client
        self._timeout = timeout

    async def aclose(self) -> None:
        """Close the injected client and its connection pool."""
        if self._client is not None:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def send(
        self,
        method: str,
        url: str,
        params: QueryParams,
        headers: Mapping[str, str],
        *,
        follow_redirects: bool = True,
    ) -> TransportResponse:
        try:
            if self._client is not None:
                response = await self._client.request(
                    method,
                    url,
                    params=list(params),
                    headers=dict(headers),
                    follow_redirects=follow_redirects,
                )
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
                    response = await client.request(
                        method,
                        url,
                        params=list(params),
                        headers=dict(headers),
                        follow_redirects=follow_redirects,
                    )
        except httpx.HTTPError as exc:
            raise TransportFailure(f"{method} {url} failed: {exc}") from exc

        return TransportResponse(
            status=int(response.status_code),
            content=response.content,
            headers=_header_dict(response.headers.items()),
            url=str(response.url),
        )


__all__ = [
    "AsyncTransport",
    "HttpxTransport",
    "QueryParams",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
]
