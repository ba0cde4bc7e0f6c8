from __future__ import annotations

import dataclasses

import pytest

from mbclient.query.request import Request


def test_url_joins_segments_without_double_slashes() -> None:
    request = Request(base_url="https://musicbrainz.org/ws/2/", path="artist", resource_id="abc")

    assert request.url == "https://musicbrainz.org/ws/2/artist/abc"


def test_format_parameter_comes_first() -> None:
    request = Request(
        base_url="https://musicbrainz.org/ws/2",
        path="release",
        params=(("artist", "abc"), ("limit", "10")),
    )

    assert request.query_string == "fmt=json&artist=abc&limit=10"
    assert request.param("limit") == "10"
    assert request.param("offset") is None


def test_no_format_and_no_params_yields_bare_url() -> None:
    request = Request(
        base_url="https://coverartarchive.org",
        path="release",
        resource_id="abc",
        fmt=None,
        suffix="front-250",
    )

    assert request.full_url == "https://coverartarchive.org/release/abc/front-250"


def test_requests_are_frozen() -> None:
    request = Request(base_url="https://musicbrainz.org/ws/2", path="artist")

    with pytest.raises(dataclasses.FrozenInstanceError):
        request.path = "label"  # pyright: ignore[reportAttributeAccessIssue]
