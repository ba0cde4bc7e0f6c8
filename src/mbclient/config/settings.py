"""Where: src/mbclient/config/settings.py
What: Derived runtime settings sourced from persisted configuration.
Why: Expose validated constants to client layers without file I/O.
"""

from __future__ import annotations

from mbclient.config.config import config as app_config

CLIENT_NAME: str = "mbclient"
CLIENT_VERSION: str = "0.1.0"


# Service endpoints -----------------------------------------------------------

MB_BASE_URL: str = app_config.musicbrainz_url
COVERART_BASE_URL: str = app_config.coverart_url


# MusicBrainz application identity ------------------------------------------

# MusicBrainz recommends a User-Agent of the form:
#   "AppName/AppVersion (contact-url-or-email)"
# See: https://musicbrainz.org/doc/MusicBrainz_API/Rate_Limiting

MB_APP_NAME: str = app_config.app_name or CLIENT_NAME
MB_APP_VERSION: str = app_config.app_version or CLIENT_VERSION
MB_CONTACT: str = app_config.contact or ""
MB_USER_AGENT: str | None = app_config.user_agent or None


# Request cadence -------------------------------------------------------------

RATE_LIMIT_ENABLED: bool = bool(app_config.rate_limit_enabled)
RATE_LIMIT_INTERVAL_SECONDS: float = app_config.rate_limit_interval

HTTP_TIMEOUT_SECONDS: float = float(app_config.timeout_seconds)

# Documented upper bound of ``limit`` for browse and search requests.
MAX_PAGE_LIMIT: int = 100


__all__ = [
    "CLIENT_NAME",
    "CLIENT_VERSION",
    "COVERART_BASE_URL",
    "HTTP_TIMEOUT_SECONDS",
    "MAX_PAGE_LIMIT",
    "MB_APP_NAME",
    "MB_APP_VERSION",
    "MB_BASE_URL",
    "MB_CONTACT",
    "MB_USER_AGENT",
    "RATE_LIMIT_ENABLED",
    "RATE_LIMIT_INTERVAL_SECONDS",
]
