"""Shared pytest fixtures resetting process-wide client state."""

from __future__ import annotations

from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def reset_client_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Give every test a fresh shared limiter, User-Agent and default clients."""

    from mbclient.platform.musicbrainz import client, rate_limit, user_agent

    monkeypatch.delenv("MBCLIENT_USER_AGENT", raising=False)
    rate_limit._reset_shared_rate_limiter()  # pyright: ignore[reportPrivateUsage]
    user_agent._reset_user_agent()  # pyright: ignore[reportPrivateUsage]
    client._reset_default_clients()  # pyright: ignore[reportPrivateUsage]
    try:
        yield None
    finally:
        rate_limit._reset_shared_rate_limiter()  # pyright: ignore[reportPrivateUsage]
        user_agent._reset_user_agent()  # pyright: ignore[reportPrivateUsage]
        client._reset_default_clients()  # pyright: ignore[reportPrivateUsage]
