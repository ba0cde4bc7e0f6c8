"""
Summary: Public import surface for the MusicBrainz WS2 and Cover Art Archive client.
Why: Callers start queries from one module without learning the package layout.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config.settings import CLIENT_VERSION
from .errors import (
    ClientError,
    ConfigurationError,
    DecodeFailure,
    InvalidInclude,
    InvalidOffset,
    InvalidRelation,
    InvalidSearchField,
    MalformedQuery,
    MissingIdentifier,
    NotFound,
    QueryError,
    RemoteError,
    TransportFailure,
    UnsupportedOperation,
)
from .platform.musicbrainz.client import (
    AsyncMusicBrainzClient,
    MusicBrainzClient,
    default_async_client,
    default_client,
)
from .platform.musicbrainz.rate_limit import AsyncRateLimiter, RateLimiter, configure_rate_limit
from .platform.musicbrainz.user_agent import configure_user_agent, format_user_agent
from .query.builders import BrowseQuery, CoverartQuery, FetchQuery, SearchQuery
from .query.entities import (
    ANNOTATION,
    AREA,
    ARTIST,
    CDSTUB,
    DISCID,
    EVENT,
    INSTRUMENT,
    LABEL,
    PLACE,
    RECORDING,
    RELEASE,
    RELEASE_GROUP,
    SERIES,
    TAG,
    URL,
    WORK,
    EntityType,
    UnknownEntity,
    get_entity,
    register_entity,
    registered_entities,
)
from .query.ports import EntityDescriptor
from .query.results import BrowseResult, CoverartLocation, CoverartManifest, SearchResult
from .query.search import QueryBuilder
from .shared.mbid import is_mbid, mbid_from_url, parse_mbid

__version__ = CLIENT_VERSION


def _resolve(entity: EntityDescriptor | str) -> EntityDescriptor:
    if isinstance(entity, str):
        return get_entity(entity)
    return entity


def fetch(entity: EntityDescriptor | str, resource_id: str) -> FetchQuery:
    """Start a lookup, e.g. ``fetch("artist", mbid).with_include("tags").execute()``."""

    return FetchQuery(_resolve(entity)).with_id(resource_id)


def browse(entity: EntityDescriptor | str, relation: str, related_id: str) -> BrowseQuery:
    return BrowseQuery(_resolve(entity)).by_relation(relation, related_id)


def search(entity: EntityDescriptor | str, query: str | QueryBuilder) -> SearchQuery:
    return SearchQuery(_resolve(entity), query)


def fetch_coverart(entity: EntityDescriptor | str, resource_id: str) -> CoverartQuery:
    return CoverartQuery(_resolve(entity)).with_id(resource_id)


def coverart_for(entity: EntityDescriptor | str, payload: Mapping[str, Any]) -> CoverartQuery:
    """Start a cover-art query for an already fetched release or release group."""

    return CoverartQuery.for_entity(_resolve(entity), payload)


__all__ = [
    "ANNOTATION",
    "AREA",
    "ARTIST",
    "AsyncMusicBrainzClient",
    "AsyncRateLimiter",
    "BrowseQuery",
    "BrowseResult",
    "CDSTUB",
    "ClientError",
    "ConfigurationError",
    "CoverartLocation",
    "CoverartManifest",
    "CoverartQuery",
    "DISCID",
    "DecodeFailure",
    "EVENT",
    "EntityDescriptor",
    "EntityType",
    "FetchQuery",
    "INSTRUMENT",
    "InvalidInclude",
    "InvalidOffset",
    "InvalidRelation",
    "InvalidSearchField",
    "LABEL",
    "MalformedQuery",
    "MissingIdentifier",
    "MusicBrainzClient",
    "NotFound",
    "PLACE",
    "QueryBuilder",
    "QueryError",
    "RECORDING",
    "RELEASE",
    "RELEASE_GROUP",
    "RateLimiter",
    "RemoteError",
    "SERIES",
    "SearchQuery",
    "SearchResult",
    "TAG",
    "TransportFailure",
    "URL",
    "UnknownEntity",
    "UnsupportedOperation",
    "WORK",
    "__version__",
    "browse",
    "configure_rate_limit",
    "configure_user_agent",
    "coverart_for",
    "default_async_client",
    "default_client",
    "fetch",
    "fetch_coverart",
    "format_user_agent",
    "get_entity",
    "is_mbid",
    "mbid_from_url",
    "parse_mbid",
    "register_entity",
    "registered_entities",
    "search",
]
