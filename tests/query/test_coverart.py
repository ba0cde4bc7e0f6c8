"""
Summary: Tests for Cover Art Archive query construction and result variants.
Why: Selector combinations decide both the request path and the shape of the result.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

import pytest

from mbclient.errors import MissingIdentifier, UnsupportedOperation
from mbclient.platform.musicbrainz.client import MusicBrainzClient
from mbclient.platform.musicbrainz.transport import TransportResponse
from mbclient.query.builders import CoverartQuery, CoverartSide, CoverartSize
from mbclient.query.entities import ARTIST, RELEASE, RELEASE_GROUP
from mbclient.query.results import CoverartLocation, CoverartManifest

CAA = "https://coverartarchive.org"
RELEASE_ID = "76df3287-6cda-33eb-8e9a-044b5e15ffdd"


class _StubTransport:
    def __init__(self, response: TransportResponse) -> None:
        self.response = response
        self.follow_redirects: list[bool] = []

    def send(
        self,
        method: str,
        url: str,
        params: Sequence[tuple[str, str]],
        headers: Mapping[str, str],
        *,
        follow_redirects: bool = True,
    ) -> TransportResponse:
        self.follow_redirects.append(follow_redirects)
        return self.response


def _client(response: TransportResponse) -> tuple[MusicBrainzClient, _StubTransport]:
    transport = _StubTransport(response)
    return MusicBrainzClient(transport, coverart_url=CAA), transport


def test_manifest_request_has_no_suffix_or_format() -> None:
    request = CoverartQuery(RELEASE).id(RELEASE_ID).build(CAA)

    assert request.full_url == f"{CAA}/release/{RELEASE_ID}"
    assert request.expects_redirect is False


@pytest.mark.parametrize(
    ("configure", "suffix"),
    [
        (lambda q: q.front(), "front"),
        (lambda q: q.back(), "back"),
        (lambda q: q.front().res_500(), "front-500"),
        (lambda q: q.back().res_250(), "back-250"),
        (lambda q: q.res_1200(), "front-1200"),
        (lambda q: q.back().res_original(), "back"),
        (lambda q: q.res_original(), "front"),
    ],
)
def test_selectors_build_direct_image_paths(configure, suffix: str) -> None:  # pyright: ignore[reportMissingParameterType, reportUnknownParameterType]
    query: CoverartQuery = configure(CoverartQuery(RELEASE).with_id(RELEASE_ID))

    request = query.build(CAA)

    assert request.full_url == f"{CAA}/release/{RELEASE_ID}/{suffix}"
    assert request.expects_redirect is True


def test_later_selector_replaces_earlier_one() -> None:
    query = CoverartQuery(RELEASE).with_id(RELEASE_ID).front().back().res_250().res_500()

    assert query.side is CoverartSide.BACK
    assert query.size is CoverartSize.RES_500
    assert query.build(CAA).url.endswith("/back-500")


def test_release_group_uses_its_own_path() -> None:
    request = CoverartQuery(RELEASE_GROUP).with_id(RELEASE_ID).front().build(CAA)

    assert request.url == f"{CAA}/release-group/{RELEASE_ID}/front"


def test_entities_without_cover_art_are_rejected() -> None:
    with pytest.raises(UnsupportedOperation):
        _ = CoverartQuery(ARTIST).with_id(RELEASE_ID).build(CAA)


def test_missing_id_raises() -> None:
    with pytest.raises(MissingIdentifier):
        _ = CoverartQuery(RELEASE).front().build(CAA)


def test_for_entity_reads_payload_id() -> None:
    query = CoverartQuery.for_entity(RELEASE, {"id": RELEASE_ID, "title": "Nevermind"})

    assert query.resource_id == RELEASE_ID
    with pytest.raises(MissingIdentifier):
        _ = CoverartQuery.for_entity(RELEASE, {"title": "no id"})


def test_execute_manifest_returns_manifest() -> None:
    payload = {
        "release": f"https://musicbrainz.org/release/{RELEASE_ID}",
        "images": [{"front": True, "image": "https://img.example/1.jpg"}],
    }
    client, transport = _client(TransportResponse(status=200, content=json.dumps(payload).encode()))

    result = CoverartQuery(RELEASE).with_id(RELEASE_ID).execute(client)

    assert isinstance(result, CoverartManifest)
    assert result.front is not None
    assert transport.follow_redirects == [True]


def test_execute_direct_returns_redirect_location() -> None:
    client, transport = _client(
        TransportResponse(status=307, headers={"Location": "https://img.example/front-500.jpg"})
    )

    result = CoverartQuery(RELEASE).with_id(RELEASE_ID).front().res_500().execute(client)

    assert result == CoverartLocation(url="https://img.example/front-500.jpg")
    assert transport.follow_redirects == [False]
