"""Where: src/mbclient/platform/musicbrainz/user_agent.py
What: Manage MusicBrainz-compliant User-Agent strings.
Why: Centralise etiquette logic shared by executors and clients, and freeze
     the identity once the first request has gone out.
"""

from __future__ import annotations

import os
import threading
from typing import Final

from mbclient.config.settings import (
    MB_APP_NAME,
    MB_APP_VERSION,
    MB_CONTACT,
    MB_USER_AGENT,
)
from mbclient.errors import ConfigurationError

_ENV_USER_AGENT: Final[str] = "MBCLIENT_USER_AGENT"

_configured_user_agent: str | None = None
_request_issued: bool = False
_guard: Final[threading.Lock] = threading.Lock()


def format_user_agent(app_name: str, app_version: str, contact: str) -> str:
    """Return ``App/Version (contact)`` when contact information is available."""

    stripped = contact.strip()
    if stripped:
        return f"{app_name}/{app_version} ({stripped})"
    return f"{app_name}/{app_version}"


def configure_user_agent(user_agent: str) -> None:
    """Override the process-wide User-Agent once, before any request is sent.

    Raises:
        ConfigurationError: If the value is blank, was already overridden, or
            a request has already been issued with the previous identity.
    """

    global _configured_user_agent
    value = user_agent.strip()
    if not value:
        raise ConfigurationError("User-Agent must not be empty")
    with _guard:
        if _request_issued:
            raise ConfigurationError("User-Agent cannot change after the first request")
        if _configured_user_agent is not None:
            raise ConfigurationError("User-Agent was already configured")
        _configured_user_agent = value


def resolve_user_agent() -> str:
    """Provide the user agent that outbound HTTP calls should send."""

    if _configured_user_agent:
        return _configured_user_agent
    env = os.getenv(_ENV_USER_AGENT)
    if env and env.strip():
        return env.strip()
    if MB_USER_AGENT:
        return MB_USER_AGENT
    return format_user_agent(MB_APP_NAME, MB_APP_VERSION, MB_CONTACT)


def mark_request_issued() -> None:
    """Record that a request went out, freezing the User-Agent."""

    global _request_issued
    with _guard:
        _request_issued = True


def _reset_user_agent() -> None:
    """Drop the configured identity and issued flag (test support)."""

    global _configured_user_agent, _request_issued
    with _guard:
        _configured_user_agent = None
        _request_issued = False


__all__ = [
    "configure_user_agent",
    "format_user_agent",
    "mark_request_issued",
    "resolve_user_agent",
]
