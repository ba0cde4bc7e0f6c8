from __future__ import annotations

import pytest

from mbclient.errors import ConfigurationError
from mbclient.query import entities
from mbclient.query.entities import (
    ANNOTATION,
    ARTIST,
    RELEASE,
    RELEASE_GROUP,
    EntityType,
    UnknownEntity,
    get_entity,
    register_entity,
    registered_entities,
)
from mbclient.query.ports import EntityDescriptor


@pytest.fixture
def isolated_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    """Let a test register entity types without leaking them."""

    registry = dict(entities._REGISTRY)  # pyright: ignore[reportPrivateUsage]
    monkeypatch.setattr(entities, "_REGISTRY", registry)


def test_builtin_entities_are_registered_by_path() -> None:
    registry = registered_entities()

    assert set(registry) >= {
        "annotation", "area", "artist", "cdstub", "discid", "event", "instrument",
        "label", "place", "recording", "release", "release-group", "series",
        "tag", "url", "work",
    }
    assert get_entity("release-group") is RELEASE_GROUP


def test_unknown_entity_is_a_key_error() -> None:
    with pytest.raises(KeyError):
        _ = get_entity("spaceship")
    with pytest.raises(UnknownEntity):
        _ = get_entity("spaceship")


def test_registry_view_is_read_only() -> None:
    registry = registered_entities()

    with pytest.raises(TypeError):
        registry["spaceship"] = ARTIST  # pyright: ignore[reportIndexIssue]


def test_duplicate_path_is_rejected(isolated_registry: None) -> None:
    _ = isolated_registry
    with pytest.raises(ConfigurationError):
        _ = register_entity(EntityType(name="artist again", path="artist"))


def test_custom_entity_can_be_registered(isolated_registry: None) -> None:
    _ = isolated_registry
    genre = EntityType(name="genre", path="genre", entities_key="genres")

    assert register_entity(genre) is genre
    assert get_entity("genre") is genre


def test_entity_types_satisfy_descriptor_port() -> None:
    assert isinstance(ARTIST, EntityDescriptor)


def test_listing_keys_follow_path() -> None:
    assert RELEASE.entities_key == "releases"
    assert RELEASE.browse_count_key == "release-count"
    assert RELEASE_GROUP.browse_offset_key == "release-group-offset"


def test_relationship_includes_only_for_fetchable_entities() -> None:
    assert ARTIST.allows_include("url-rels")
    assert not ANNOTATION.allows_include("url-rels")


def test_capability_flags() -> None:
    assert RELEASE.has_coverart and RELEASE_GROUP.has_coverart
    assert not ARTIST.has_coverart
    assert ANNOTATION.searchable and not ANNOTATION.fetchable and not ANNOTATION.browsable
    assert ARTIST.allows_relation("recording")
    assert not ARTIST.allows_relation("label")
    assert ARTIST.allows_search_field("gender")
