"""
Summary: Tests for fetch, browse and search query builders from construction to decoding.
Why: Builders own validation and wire shape, so every rule must hold before any request is sent.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping, Sequence
from typing import Any

import pytest

from mbclient.errors import (
    InvalidInclude,
    InvalidOffset,
    InvalidRelation,
    InvalidSearchField,
    MalformedQuery,
    MissingIdentifier,
    NotFound,
    UnsupportedOperation,
)
from mbclient.platform.musicbrainz.client import AsyncMusicBrainzClient, MusicBrainzClient
from mbclient.platform.musicbrainz.transport import TransportResponse
from mbclient.query.builders import BrowseQuery, FetchQuery, SearchQuery
from mbclient.query.entities import ANNOTATION, ARTIST, RELEASE, URL
from mbclient.query.search import QueryBuilder

BASE = "https://musicbrainz.org/ws/2"
ARTIST_ID = "5b11f4ce-a62d-471e-81fc-a69a8278c7da"


class _StubTransport:
    """Return a canned response and remember each call."""

    def __init__(self, status: int = 200, payload: Any = None) -> None:
        body = b"" if payload is None else json.dumps(payload).encode("utf-8")
        self.response = TransportResponse(status=status, content=body)
        self.calls: list[tuple[str, list[tuple[str, str]]]] = []

    def send(
        self,
        method: str,
        url: str,
        params: Sequence[tuple[str, str]],
        headers: Mapping[str, str],
        *,
        follow_redirects: bool = True,
    ) -> TransportResponse:
        self.calls.append((url, list(params)))
        return self.response


class _AsyncStubTransport(_StubTransport):
    async def send(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        method: str,
        url: str,
        params: Sequence[tuple[str, str]],
        headers: Mapping[str, str],
        *,
        follow_redirects: bool = True,
    ) -> TransportResponse:
        return _StubTransport.send(self, method, url, params, headers, follow_redirects=follow_redirects)


def _client(transport: _StubTransport) -> MusicBrainzClient:
    return MusicBrainzClient(transport, musicbrainz_url=BASE)


# Fetch -----------------------------------------------------------------------


def test_fetch_builds_lookup_url() -> None:
    request = FetchQuery(ARTIST).with_id(ARTIST_ID).build(BASE)

    assert request.full_url == f"{BASE}/artist/{ARTIST_ID}?fmt=json"


def test_fetch_joins_includes_in_insertion_order() -> None:
    request = (
        FetchQuery(ARTIST)
        .with_id(ARTIST_ID)
        .with_include("tags")
        .with_includes("aliases", "tags", "artist-rels")
        .build(BASE)
    )

    assert request.param("inc") == "tags aliases artist-rels"
    assert request.full_url == f"{BASE}/artist/{ARTIST_ID}?fmt=json&inc=tags+aliases+artist-rels"


def test_fetch_single_include() -> None:
    request = FetchQuery(ARTIST).with_id(ARTIST_ID).with_include("tags").build(BASE)

    assert request.query_string == "fmt=json&inc=tags"


def test_fetch_without_id_raises_missing_identifier() -> None:
    with pytest.raises(MissingIdentifier):
        _ = FetchQuery(ARTIST).with_include("tags").build(BASE)


def test_fetch_with_blank_id_raises_missing_identifier() -> None:
    with pytest.raises(MissingIdentifier):
        _ = FetchQuery(ARTIST).with_id("   ").build(BASE)


def test_invalid_include_is_reported_at_build_time() -> None:
    query = FetchQuery(ARTIST).with_id(ARTIST_ID).with_include("labels")

    with pytest.raises(InvalidInclude) as excinfo:
        _ = query.build(BASE)
    assert excinfo.value.token == "labels"


def test_blank_include_is_rejected_at_build_time() -> None:
    query = FetchQuery(ARTIST).with_id(ARTIST_ID).with_include("  ")

    with pytest.raises(InvalidInclude) as excinfo:
        _ = query.build(BASE)
    assert excinfo.value.token == ""


def test_builders_are_immutable() -> None:
    base = FetchQuery(ARTIST)
    extended = base.with_id(ARTIST_ID).with_include("tags")

    assert base.resource_id is None
    assert base.includes == ()
    assert extended.includes == ("tags",)


def test_fetch_on_search_only_entity_is_unsupported() -> None:
    with pytest.raises(UnsupportedOperation):
        _ = FetchQuery(ANNOTATION).with_id("x").build(BASE)


def test_fetch_execute_returns_entity_mapping() -> None:
    transport = _StubTransport(payload={"id": ARTIST_ID, "name": "Nirvana", "type": "Group"})

    artist = FetchQuery(ARTIST).with_id(ARTIST_ID).execute(_client(transport))

    assert artist["name"] == "Nirvana"
    assert transport.calls == [(f"{BASE}/artist/{ARTIST_ID}", [("fmt", "json")])]


def test_fetch_execute_maps_404_to_not_found() -> None:
    transport = _StubTransport(status=404, payload={"error": "Not Found"})

    with pytest.raises(NotFound):
        _ = FetchQuery(ARTIST).with_id(ARTIST_ID).execute(_client(transport))


def test_validation_failure_sends_nothing() -> None:
    transport = _StubTransport(payload={})

    with pytest.raises(InvalidInclude):
        _ = FetchQuery(ARTIST).with_id(ARTIST_ID).with_include("bogus").execute(_client(transport))
    assert transport.calls == []


def test_fetch_execute_async() -> None:
    transport = _AsyncStubTransport(payload={"id": ARTIST_ID, "name": "Nirvana"})
    client = AsyncMusicBrainzClient(transport, musicbrainz_url=BASE, rate_limiter=None)

    artist = asyncio.run(FetchQuery(ARTIST).with_id(ARTIST_ID).execute_async(client))

    assert artist["id"] == ARTIST_ID


# Browse ----------------------------------------------------------------------


def test_browse_builds_relation_and_paging_params() -> None:
    request = (
        BrowseQuery(RELEASE)
        .by_relation("artist", ARTIST_ID)
        .limit(50)
        .offset(25)
        .with_include("labels")
        .build(BASE)
    )

    assert request.url == f"{BASE}/release"
    assert request.query_params == (
        ("fmt", "json"),
        ("artist", ARTIST_ID),
        ("limit", "50"),
        ("offset", "25"),
        ("inc", "labels"),
    )


@pytest.mark.parametrize(("requested", "sent"), [(500, "100"), (0, "1"), (-3, "1"), (100, "100")])
def test_browse_limit_is_clamped(requested: int, sent: str) -> None:
    request = BrowseQuery(RELEASE).by_relation("artist", ARTIST_ID).limit(requested).build(BASE)

    assert request.param("limit") == sent


def test_browse_negative_offset_raises() -> None:
    with pytest.raises(InvalidOffset):
        _ = BrowseQuery(RELEASE).by_relation("artist", ARTIST_ID).offset(-1).build(BASE)


def test_browse_unknown_relation_raises() -> None:
    with pytest.raises(InvalidRelation):
        _ = BrowseQuery(RELEASE).by_relation("instrument", ARTIST_ID).build(BASE)


def test_browse_without_relation_raises_missing_identifier() -> None:
    with pytest.raises(MissingIdentifier):
        _ = BrowseQuery(RELEASE).limit(10).build(BASE)


def test_browse_last_relation_wins() -> None:
    request = (
        BrowseQuery(RELEASE)
        .by_relation("artist", ARTIST_ID)
        .by_relation("label", "label-id")
        .build(BASE)
    )

    assert request.param("label") == "label-id"
    assert request.param("artist") is None


def test_browse_unsupported_entity() -> None:
    with pytest.raises(UnsupportedOperation):
        _ = BrowseQuery(URL).by_relation("artist", ARTIST_ID).build(BASE)


def test_browse_execute_decodes_listing() -> None:
    transport = _StubTransport(
        payload={
            "release-count": 312,
            "release-offset": 100,
            "releases": [{"id": "r1"}, {"id": "r2"}],
        }
    )

    result = BrowseQuery(RELEASE).by_relation("artist", ARTIST_ID).offset(100).execute(_client(transport))

    assert result.count == 312
    assert result.offset == 100
    assert [release["id"] for release in result.entities] == ["r1", "r2"]


# Search ----------------------------------------------------------------------


def test_search_serialises_query_builder() -> None:
    expression = QueryBuilder(ARTIST).field("artist", "Miles Davis").and_().field("country", "US")

    request = SearchQuery(ARTIST, expression).limit(5).build(BASE)

    assert request.param("query") == 'artist:"Miles Davis" AND country:US'
    assert request.query_string == (
        "fmt=json&query=artist%3A%22Miles+Davis%22+AND+country%3AUS&limit=5"
    )


def test_search_accepts_raw_string() -> None:
    request = SearchQuery(ARTIST).with_query("  nirvana  ").build(BASE)

    assert request.param("query") == "nirvana"


def test_search_empty_query_is_malformed() -> None:
    with pytest.raises(MalformedQuery):
        _ = SearchQuery(ARTIST, "   ").build(BASE)


def test_search_unknown_field_is_rejected() -> None:
    expression = QueryBuilder(ARTIST).field("barcode", "123")

    with pytest.raises(InvalidSearchField):
        _ = SearchQuery(ARTIST, expression).build(BASE)


def test_search_checks_unbound_builder_fields_against_query_entity() -> None:
    expression = QueryBuilder().field("barcode", "123")

    with pytest.raises(InvalidSearchField) as excinfo:
        _ = SearchQuery(ARTIST, expression).build(BASE)
    assert excinfo.value.field == "barcode"


def test_search_entity_overrides_builder_entity() -> None:
    expression = QueryBuilder(RELEASE).field("barcode", "123")

    assert SearchQuery(RELEASE, expression).build(BASE).param("query") == "barcode:123"
    with pytest.raises(InvalidSearchField):
        _ = SearchQuery(ARTIST, expression).build(BASE)


def test_search_with_includes_merges_tokens() -> None:
    request = SearchQuery(ARTIST, "nirvana").with_includes("aliases", "tags", "aliases").build(BASE)

    assert request.param("inc") == "aliases tags"
    assert request.query_string == "fmt=json&query=nirvana&inc=aliases+tags"


def test_search_negative_offset_raises() -> None:
    with pytest.raises(InvalidOffset):
        _ = SearchQuery(ARTIST, "nirvana").offset(-5).build(BASE)


def test_search_unsupported_entity() -> None:
    with pytest.raises(UnsupportedOperation):
        _ = SearchQuery(URL, "anything").build(BASE)


def test_search_execute_keeps_scores() -> None:
    transport = _StubTransport(
        payload={
            "created": "2024-05-01T10:15:00.000Z",
            "count": 2,
            "offset": 0,
            "artists": [{"id": "a", "score": 100}, {"id": "b", "score": 61}],
        }
    )

    result = SearchQuery(ARTIST, "nirvana").execute(_client(transport))

    assert result.count == 2
    assert result.scores() == [100, 61]
    assert transport.calls[0][1] == [("fmt", "json"), ("query", "nirvana")]
