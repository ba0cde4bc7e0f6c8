"""Where: src/mbclient/platform/musicbrainz/decoding.py
What: Helpers turning raw response bytes into JSON mappings and listing values.
Why: Separate payload interpretation from HTTP and query construction, and
     surface malformed bodies as DecodeFailure rather than transport errors.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, cast

from mbclient.errors import DecodeFailure
from mbclient.query.results import (
    BrowseResult,
    CoverartLocation,
    CoverartManifest,
    Entity,
    SearchResult,
)

from .transport import TransportResponse


def decode_json(response: TransportResponse) -> Any:
    """Parse the response body as UTF-8 JSON."""

    try:
        return json.loads(response.content.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise DecodeFailure(f"Response from {response.url or 'service'} is not JSON: {exc}") from exc


def decode_object(response: TransportResponse) -> Entity:
    """Parse a JSON body that must be an object."""

    payload = decode_json(response)
    if not isinstance(payload, dict):
        raise DecodeFailure(f"Expected a JSON object, got {type(payload).__name__}")
    return cast(Entity, payload)


def extract_entities(payload: Entity, key: str) -> list[Entity]:
    """Filter ``payload[key]`` to a list of entity dictionaries."""

    raw = payload.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DecodeFailure(f"Expected '{key}' to be a list")
    raw_list = cast(list[object], raw)
    entities: list[Entity] = []
    for entry in raw_list:
        if isinstance(entry, dict):
            entities.append(cast(Entity, entry))
    return entities


def _int_field(payload: Entity, key: str, default: int = 0) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool):
        raise DecodeFailure(f"Expected '{key}' to be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise DecodeFailure(f"Expected '{key}' to be an integer") from exc


def _parse_created(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def decode_browse(
    response: TransportResponse,
    *,
    entities_key: str,
    count_key: str,
    offset_key: str,
) -> BrowseResult:
    """Decode a browse listing using the entity's listing keys."""

    payload = decode_object(response)
    return BrowseResult(
        count=_int_field(payload, count_key),
        offset=_int_field(payload, offset_key),
        entities=extract_entities(payload, entities_key),
    )


def decode_search(response: TransportResponse, *, entities_key: str) -> SearchResult:
    """Decode a ranked search listing."""

    payload = decode_object(response)
    return SearchResult(
        count=_int_field(payload, "count"),
        offset=_int_field(payload, "offset"),
        entities=extract_entities(payload, entities_key),
        created=_parse_created(payload.get("created")),
    )


def decode_coverart_manifest(response: TransportResponse) -> CoverartManifest:
    """Decode the Cover Art Archive JSON listing."""

    payload = decode_object(response)
    release = payload.get("release")
    return CoverartManifest(
        release=release if isinstance(release, str) else None,
        images=extract_entities(payload, "images"),
    )


def decode_coverart_location(response: TransportResponse) -> CoverartLocation:
    """Read the image location from a redirect, or the final URL when followed."""

    location = response.header("Location") or response.url
    if not location:
        raise DecodeFailure("Cover art response carries no image location")
    return CoverartLocation(url=location)


__all__ = [
    "decode_browse",
    "decode_coverart_location",
    "decode_coverart_manifest",
    "decode_json",
    "decode_object",
    "decode_search",
    "extract_entities",
]
