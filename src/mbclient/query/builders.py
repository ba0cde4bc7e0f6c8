"""
Summary: Fetch, browse, search and cover-art query builders shared by every entity type.
Why: One immutable builder per query kind validates against an entity descriptor and yields a Request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any
from urllib.parse import quote

from mbclient.config.settings import COVERART_BASE_URL, MAX_PAGE_LIMIT, MB_BASE_URL
from mbclient.errors import (
    InvalidInclude,
    InvalidOffset,
    InvalidRelation,
    MalformedQuery,
    MissingIdentifier,
    UnsupportedOperation,
)
from mbclient.platform.logging import logger
from mbclient.platform.musicbrainz.client import (
    AsyncMusicBrainzClient,
    MusicBrainzClient,
    default_async_client,
    default_client,
)
from mbclient.platform.musicbrainz.decoding import (
    decode_browse,
    decode_coverart_location,
    decode_coverart_manifest,
    decode_object,
    decode_search,
)
from mbclient.platform.musicbrainz.transport import TransportResponse

from .ports import EntityDescriptor
from .request import Request
from .results import BrowseResult, CoverartResponse, Entity, SearchResult
from .search import QueryBuilder


def _add_include(includes: tuple[str, ...], tokens: tuple[str, ...]) -> tuple[str, ...]:
    merged = list(includes)
    for token in tokens:
        cleaned = token.strip()
        if cleaned not in merged:
            merged.append(cleaned)
    return tuple(merged)


def _include_params(entity: EntityDescriptor, includes: tuple[str, ...]) -> list[tuple[str, str]]:
    for token in includes:
        if not entity.allows_include(token):
            raise InvalidInclude(entity.name, token)
    if not includes:
        return []
    # The service splits ``inc`` on spaces, which travel as ``+`` on the wire.
    return [("inc", " ".join(includes))]


def _page_params(limit: int | None, offset: int | None) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    if limit is not None:
        params.append(("limit", str(limit)))
    if offset is not None:
        if offset < 0:
            raise InvalidOffset(f"Offset must not be negative, got {offset}")
        params.append(("offset", str(offset)))
    return params


def _clamp_limit(limit: int) -> int:
    return max(1, min(int(limit), MAX_PAGE_LIMIT))


def _path_id(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return quote(cleaned, safe="-._~") if cleaned else None


@dataclass(frozen=True, slots=True)
class FetchQuery:
    """Lookup of one entity by its id.

    Example:
        >>> FetchQuery(ARTIST).with_id("5b11f4ce-a62d-471e-81fc-a69a8278c7da").with_include("tags")
    """

    entity: EntityDescriptor
    resource_id: str | None = None
    includes: tuple[str, ...] = ()

    def with_id(self, resource_id: str) -> FetchQuery:
        return replace(self, resource_id=resource_id)

    def with_include(self, token: str) -> FetchQuery:
        return replace(self, includes=_add_include(self.includes, (token,)))

    def with_includes(self, *tokens: str) -> FetchQuery:
        return replace(self, includes=_add_include(self.includes, tokens))

    def build(self, base_url: str = MB_BASE_URL) -> Request:
        """Validate every parameter and produce the request.

        Raises:
            UnsupportedOperation: If the entity has no lookups.
            MissingIdentifier: If no id was set.
            InvalidInclude: If an include is unknown to the entity.
        """
        if not self.entity.fetchable:
            raise UnsupportedOperation(f"{self.entity.name} cannot be fetched by id")
        resource_id = _path_id(self.resource_id)
        if resource_id is None:
            raise MissingIdentifier(f"Fetching a {self.entity.name} requires an id")
        return Request(
            base_url=base_url,
            path=self.entity.path,
            resource_id=resource_id,
            params=tuple(_include_params(self.entity, self.includes)),
        )

    def execute(self, client: MusicBrainzClient | None = None) -> Entity:
        client = client or default_client()
        response = client.send(self.build(client.musicbrainz_url))
        return decode_object(response)

    async def execute_async(self, client: AsyncMusicBrainzClient | None = None) -> Entity:
        client = client or default_async_client()
        response = await client.send(self.build(client.musicbrainz_url))
        return decode_object(response)


@dataclass(frozen=True, slots=True)
class BrowseQuery:
    """Listing of the entities directly linked to another entity."""

    entity: EntityDescriptor
    relation: str | None = None
    related_id: str | None = None
    includes: tuple[str, ...] = ()
    page_limit: int | None = None
    page_offset: int | None = None

    def by_relation(self, relation: str, related_id: str) -> BrowseQuery:
        """Set the browse axis; a later call replaces the earlier one."""

        return replace(self, relation=relation.strip(), related_id=related_id)

    def with_include(self, token: str) -> BrowseQuery:
        return replace(self, includes=_add_include(self.includes, (token,)))

    def with_includes(self, *tokens: str) -> BrowseQuery:
        return replace(self, includes=_add_include(self.includes, tokens))

    def limit(self, limit: int) -> BrowseQuery:
        """Set the page size, clamped to 1..100."""

        return replace(self, page_limit=_clamp_limit(limit))

    def offset(self, offset: int) -> BrowseQuery:
        return replace(self, page_offset=int(offset))

    def build(self, base_url: str = MB_BASE_URL) -> Request:
        """Validate every parameter and produce the request.

        Raises:
            UnsupportedOperation: If the entity cannot be browsed.
            InvalidRelation: If the relation is unknown to the entity.
            MissingIdentifier: If no relation or related id was set.
            InvalidOffset: For a negative offset.
            InvalidInclude: If an include is unknown to the entity.
        """
        if not self.entity.browsable:
            raise UnsupportedOperation(f"{self.entity.name} cannot be browsed")
        if not self.relation:
            raise MissingIdentifier(f"Browsing {self.entity.name} requires a relation and id")
        if not self.entity.allows_relation(self.relation):
            raise InvalidRelation(self.entity.name, self.relation)
        related_id = (self.related_id or "").strip()
        if not related_id:
            raise MissingIdentifier(f"Browsing {self.entity.name} by {self.relation} requires an id")

        params: list[tuple[str, str]] = [(self.relation, related_id)]
        params.extend(_page_params(self.page_limit, self.page_offset))
        params.extend(_include_params(self.entity, self.includes))
        return Request(base_url=base_url, path=self.entity.path, params=tuple(params))

    def _decode(self, response: TransportResponse) -> BrowseResult:
        return decode_browse(
            response,
            entities_key=self.entity.entities_key,
            count_key=self.entity.browse_count_key,
            offset_key=self.entity.browse_offset_key,
        )

    def execute(self, client: MusicBrainzClient | None = None) -> BrowseResult:
        client = client or default_client()
        return self._decode(client.send(self.build(client.musicbrainz_url)))

    async def execute_async(self, client: AsyncMusicBrainzClient | None = None) -> BrowseResult:
        client = client or default_async_client()
        return self._decode(await client.send(self.build(client.musicbrainz_url)))


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """Ranked search over one entity type.

    ``query`` may be a raw Lucene string or a ``QueryBuilder``; builders are
    serialised (and validated) when the request is built.
    """

    entity: EntityDescriptor
    query: str | QueryBuilder = ""
    includes: tuple[str, ...] = ()
    page_limit: int | None = None
    page_offset: int | None = None

    def with_query(self, query: str | QueryBuilder) -> SearchQuery:
        return replace(self, query=query)

    def with_include(self, token: str) -> SearchQuery:
        return replace(self, includes=_add_include(self.includes, (token,)))

    def with_includes(self, *tokens: str) -> SearchQuery:
        return replace(self, includes=_add_include(self.includes, tokens))

    def limit(self, limit: int) -> SearchQuery:
        """Set the page size, clamped to 1..100."""

        return replace(self, page_limit=_clamp_limit(limit))

    def offset(self, offset: int) -> SearchQuery:
        return replace(self, page_offset=int(offset))

    def query_string(self) -> str:
        if isinstance(self.query, QueryBuilder):
            return self.query.build(entity=self.entity)
        text = self.query.strip()
        if not text:
            raise MalformedQuery("Search query is empty")
        return text

    def build(self, base_url: str = MB_BASE_URL) -> Request:
        """Validate every parameter and produce the request.

        Raises:
            UnsupportedOperation: If the entity is not indexed for search.
            MalformedQuery: If the query is empty or badly formed.
            InvalidSearchField: If a builder term uses an unknown field.
            InvalidOffset: For a negative offset.
        """
        if not self.entity.searchable:
            raise UnsupportedOperation(f"{self.entity.name} cannot be searched")
        params: list[tuple[str, str]] = [("query", self.query_string())]
        params.extend(_page_params(self.page_limit, self.page_offset))
        params.extend(_include_params(self.entity, self.includes))
        return Request(base_url=base_url, path=self.entity.path, params=tuple(params))

    def execute(self, client: MusicBrainzClient | None = None) -> SearchResult:
        client = client or default_client()
        response = client.send(self.build(client.musicbrainz_url))
        return decode_search(response, entities_key=self.entity.entities_key)

    async def execute_async(self, client: AsyncMusicBrainzClient | None = None) -> SearchResult:
        client = client or default_async_client()
        response = await client.send(self.build(client.musicbrainz_url))
        return decode_search(response, entities_key=self.entity.entities_key)


class CoverartSide(StrEnum):
    FRONT = "front"
    BACK = "back"


class CoverartSize(StrEnum):
    RES_250 = "250"
    RES_500 = "500"
    RES_1200 = "1200"
    ORIGINAL = "original"


@dataclass(frozen=True, slots=True)
class CoverartQuery:
    """Cover Art Archive lookup for a release or release group.

    Without selectors the archive answers with a JSON manifest of every
    image. Pinning a side and/or size targets one image; the archive then
    redirects to it and the result is its location. A size without a side
    implies the front cover.
    """

    entity: EntityDescriptor
    resource_id: str | None = None
    side: CoverartSide | None = None
    size: CoverartSize | None = None

    @classmethod
    def for_entity(cls, entity: EntityDescriptor, payload: Mapping[str, Any]) -> CoverartQuery:
        """Start a query for an already fetched release or release group."""

        resource_id = payload.get("id")
        if not isinstance(resource_id, str) or not resource_id.strip():
            raise MissingIdentifier(f"The {entity.name} payload carries no id")
        return cls(entity).with_id(resource_id)

    def id(self, resource_id: str) -> CoverartQuery:
        return replace(self, resource_id=resource_id)

    def with_id(self, resource_id: str) -> CoverartQuery:
        return self.id(resource_id)

    def _with_side(self, side: CoverartSide) -> CoverartQuery:
        if self.side is not None and self.side is not side:
            logger.debug("Cover art side %s replaces %s", side.value, self.side.value)
        return replace(self, side=side)

    def _with_size(self, size: CoverartSize) -> CoverartQuery:
        if self.size is not None and self.size is not size:
            logger.debug("Cover art size %s replaces %s", size.value, self.size.value)
        return replace(self, size=size)

    def front(self) -> CoverartQuery:
        return self._with_side(CoverartSide.FRONT)

    def back(self) -> CoverartQuery:
        return self._with_side(CoverartSide.BACK)

    def res_250(self) -> CoverartQuery:
        return self._with_size(CoverartSize.RES_250)

    def res_500(self) -> CoverartQuery:
        return self._with_size(CoverartSize.RES_500)

    def res_1200(self) -> CoverartQuery:
        return self._with_size(CoverartSize.RES_1200)

    def res_original(self) -> CoverartQuery:
        return self._with_size(CoverartSize.ORIGINAL)

    @property
    def targets_single_image(self) -> bool:
        return self.side is not None or self.size is not None

    def _suffix(self) -> str | None:
        if not self.targets_single_image:
            return None
        side = self.side or CoverartSide.FRONT
        if self.size is None or self.size is CoverartSize.ORIGINAL:
            return side.value
        return f"{side.value}-{self.size.value}"

    def build(self, base_url: str = COVERART_BASE_URL) -> Request:
        """Validate the selectors and produce the request.

        Raises:
            UnsupportedOperation: If the entity has no cover art.
            MissingIdentifier: If no id was set.
        """
        if not self.entity.has_coverart:
            raise UnsupportedOperation(f"{self.entity.name} has no cover art")
        resource_id = _path_id(self.resource_id)
        if resource_id is None:
            raise MissingIdentifier(f"Cover art of a {self.entity.name} requires an id")
        return Request(
            base_url=base_url,
            path=self.entity.path,
            resource_id=resource_id,
            fmt=None,
            suffix=self._suffix(),
            expects_redirect=self.targets_single_image,
        )

    def _decode(self, response: TransportResponse) -> CoverartResponse:
        if self.targets_single_image:
            return decode_coverart_location(response)
        return decode_coverart_manifest(response)

    def execute(self, client: MusicBrainzClient | None = None) -> CoverartResponse:
        client = client or default_client()
        return self._decode(client.send(self.build(client.coverart_url)))

    async def execute_async(self, client: AsyncMusicBrainzClient | None = None) -> CoverartResponse:
        client = client or default_async_client()
        return self._decode(await client.send(self.build(client.coverart_url)))


__all__ = [
    "BrowseQuery",
    "CoverartQuery",
    "CoverartSide",
    "CoverartSize",
    "FetchQuery",
    "SearchQuery",
]
