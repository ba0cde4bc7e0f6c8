"""MusicBrainz identifier helpers.

MBIDs are UUIDs. Besides validating bare identifiers, these helpers pull
the identifier out of entity URLs copied from musicbrainz.org (any
subdomain) or listenbrainz.org, so callers can accept either form.
"""

from __future__ import annotations

import re
from typing import Final

_UUID: Final[str] = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

_RE_MBID: Final[re.Pattern[str]] = re.compile(rf"^{_UUID}$")
_RE_ENTITY_URL: Final[re.Pattern[str]] = re.compile(
    rf"(area|artist|event|instrument|label|place|recording|release|release-group|album|series|work|url)/({_UUID})"
)


def is_mbid(value: str) -> bool:
    """Return True if ``value`` is a hyphenated UUID."""

    return _RE_MBID.match(value) is not None


def mbid_from_url(url: str) -> str | None:
    """Extract the MBID from a known MusicBrainz or ListenBrainz entity URL.

    The entity type is not returned; unknown path segments yield None.
    """

    match = _RE_ENTITY_URL.search(url)
    if match is None:
        return None
    return match.group(2)


def parse_mbid(value: str) -> str | None:
    """Accept either a bare MBID or an entity URL containing one."""

    cleaned = value.strip()
    if is_mbid(cleaned):
        return cleaned
    return mbid_from_url(cleaned)


__all__ = ["is_mbid", "mbid_from_url", "parse_mbid"]
