"""
Summary: Registry of MusicBrainz entity types and their include, browse and search vocabularies.
Why: Builders validate parameters locally against these sets before spending a rate-limit permit.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from mbclient.errors import ConfigurationError

# Relationship includes valid for every entity with lookups.
RELATIONSHIP_INCLUDES: Final[frozenset[str]] = frozenset(
    {
        "area-rels",
        "artist-rels",
        "event-rels",
        "genre-rels",
        "instrument-rels",
        "label-rels",
        "place-rels",
        "recording-rels",
        "release-rels",
        "release-group-rels",
        "series-rels",
        "url-rels",
        "work-rels",
    }
)

# Includes every entity with lookups understands.
COMMON_INCLUDES: Final[frozenset[str]] = frozenset(
    {"aliases", "annotation", "tags", "user-tags", "genres", "user-genres"}
)

RATING_INCLUDES: Final[frozenset[str]] = frozenset({"ratings", "user-ratings"})


class UnknownEntity(KeyError):
    """Raised when no entity type is registered under a name."""


@dataclass(frozen=True, slots=True)
class EntityType:
    """Immutable description of one entity type of the web service."""

    name: str
    path: str
    includes: frozenset[str] = field(default_factory=frozenset)
    browse_relations: frozenset[str] = field(default_factory=frozenset)
    search_fields: frozenset[str] = field(default_factory=frozenset)
    fetchable: bool = True
    has_coverart: bool = False
    entities_key: str = ""

    @property
    def browsable(self) -> bool:
        return bool(self.browse_relations)

    @property
    def searchable(self) -> bool:
        return bool(self.search_fields)

    @property
    def browse_count_key(self) -> str:
        return f"{self.path}-count"

    @property
    def browse_offset_key(self) -> str:
        return f"{self.path}-offset"

    def allows_include(self, token: str) -> bool:
        return token in self.includes or (
            self.fetchable and token in RELATIONSHIP_INCLUDES
        )

    def allows_relation(self, relation: str) -> bool:
        return relation in self.browse_relations

    def allows_search_field(self, field: str) -> bool:
        return field in self.search_fields


def _entity(
    name: str,
    path: str,
    *,
    entities_key: str,
    includes: Iterable[str] = (),
    browse: Iterable[str] = (),
    search: Iterable[str] = (),
    fetchable: bool = True,
    has_coverart: bool = False,
) -> EntityType:
    return EntityType(
        name=name,
        path=path,
        includes=frozenset(includes),
        browse_relations=frozenset(browse),
        search_fields=frozenset(search),
        fetchable=fetchable,
        has_coverart=has_coverart,
        entities_key=entities_key,
    )


AREA = _entity(
    "area",
    "area",
    entities_key="areas",
    includes=COMMON_INCLUDES,
    browse=("collection",),
    search=(
        "aid", "alias", "area", "begin", "comment", "end", "ended", "iso",
        "iso1", "iso2", "iso3", "sortname", "tag", "type",
    ),
)

ARTIST = _entity(
    "artist",
    "artist",
    entities_key="artists",
    includes=COMMON_INCLUDES
    | RATING_INCLUDES
    | {
        "recordings", "releases", "release-groups", "works", "media",
        "discids", "isrcs", "artist-credits", "various-artists",
    },
    browse=("area", "collection", "recording", "release", "release-group", "work"),
    search=(
        "alias", "primary_alias", "area", "arid", "artist", "artistaccent",
        "begin", "beginarea", "comment", "country", "end", "endarea", "ended",
        "gender", "ipi", "isni", "sortname", "tag", "type",
    ),
)

EVENT = _entity(
    "event",
    "event",
    entities_key="events",
    includes=COMMON_INCLUDES | RATING_INCLUDES,
    browse=("area", "artist", "collection", "place"),
    search=(
        "aid", "alias", "area", "arid", "artist", "begin", "comment", "eid",
        "end", "ended", "event", "eventaccent", "pid", "place", "tag", "type",
    ),
)

INSTRUMENT = _entity(
    "instrument",
    "instrument",
    entities_key="instruments",
    includes=COMMON_INCLUDES,
    browse=("collection",),
    search=(
        "alias", "comment", "description", "iid", "instrument",
        "instrumentaccent", "tag", "type",
    ),
)

LABEL = _entity(
    "label",
    "label",
    entities_key="labels",
    includes=COMMON_INCLUDES | RATING_INCLUDES | {"releases", "media", "discids"},
    browse=("area", "collection", "release"),
    search=(
        "alias", "area", "begin", "code", "comment", "country", "end", "ended",
        "ipi", "isni", "label", "labelaccent", "laid", "release_count",
        "sortname", "tag", "type",
    ),
)

PLACE = _entity(
    "place",
    "place",
    entities_key="places",
    includes=COMMON_INCLUDES,
    browse=("area", "collection"),
    search=(
        "address", "alias", "aid", "area", "begin", "comment", "end", "ended",
        "lat", "long", "place", "placeaccent", "pid", "type",
    ),
)

RECORDING = _entity(
    "recording",
    "recording",
    entities_key="recordings",
    includes=COMMON_INCLUDES
    | RATING_INCLUDES
    | {"artists", "releases", "release-groups", "isrcs", "artist-credits", "media", "discids"},
    browse=("artist", "collection", "release", "work"),
    search=(
        "alias", "arid", "artist", "artistname", "comment", "country",
        "creditname", "date", "dur", "firstreleasedate", "format", "isrc",
        "number", "position", "primarytype", "qdur", "recording",
        "recordingaccent", "reid", "release", "rgid", "rid", "secondarytype",
        "status", "tag", "tid", "tnum", "tracks", "tracksrelease", "type",
        "video",
    ),
)

RELEASE = _entity(
    "release",
    "release",
    entities_key="releases",
    includes=COMMON_INCLUDES
    | {
        "artists", "collections", "labels", "recordings", "release-groups",
        "media", "artist-credits", "discids", "isrcs",
        "recording-level-rels", "work-level-rels", "release-group-level-rels",
    },
    browse=(
        "area", "artist", "collection", "label", "track", "track_artist",
        "recording", "release-group",
    ),
    search=(
        "alias", "arid", "artist", "artistname", "asin", "barcode", "catno",
        "comment", "country", "creditname", "date", "discids",
        "discidsmedium", "format", "laid", "label", "lang", "mediums",
        "primarytype", "quality", "reid", "release", "releaseaccent", "rgid",
        "script", "secondarytype", "status", "tag", "tracks", "tracksmedium",
        "type",
    ),
    has_coverart=True,
)

RELEASE_GROUP = _entity(
    "release group",
    "release-group",
    entities_key="release-groups",
    includes=COMMON_INCLUDES
    | RATING_INCLUDES
    | {"artists", "releases", "media", "discids", "artist-credits"},
    browse=("artist", "collection", "release"),
    search=(
        "alias", "arid", "artist", "artistname", "comment", "creditname",
        "firstreleasedate", "primarytype", "reid", "release", "releasegroup",
        "releasegroupaccent", "releases", "rgid", "secondarytype", "status",
        "tag", "type",
    ),
    has_coverart=True,
)

SERIES = _entity(
    "series",
    "series",
    entities_key="series",
    includes=COMMON_INCLUDES,
    browse=("collection",),
    search=(
        "alias", "comment", "orderingattribute", "series", "seriesaccent",
        "sid", "tag", "type",
    ),
)

WORK = _entity(
    "work",
    "work",
    entities_key="works",
    includes=COMMON_INCLUDES | RATING_INCLUDES,
    browse=("artist", "collection"),
    search=(
        "alias", "arid", "artist", "comment", "iswc", "lang", "recording",
        "recording_count", "rid", "tag", "type", "wid", "work", "workaccent",
    ),
)

URL = _entity("url", "url", entities_key="urls")

DISCID = _entity(
    "disc id",
    "discid",
    entities_key="releases",
    includes={
        "artists", "labels", "recordings", "release-groups", "artist-credits",
        "isrcs", "media", "discids",
    },
)

ANNOTATION = _entity(
    "annotation",
    "annotation",
    entities_key="annotations",
    search=("entity", "id", "name", "text", "type"),
    fetchable=False,
)

CDSTUB = _entity(
    "CD stub",
    "cdstub",
    entities_key="cdstubs",
    search=("added", "artist", "barcode", "comment", "discid", "title", "tracks"),
    fetchable=False,
)

TAG = _entity(
    "tag",
    "tag",
    entities_key="tags",
    search=("tag",),
    fetchable=False,
)


_REGISTRY: dict[str, EntityType] = {}
_registry_guard: Final[threading.Lock] = threading.Lock()


def register_entity(entity: EntityType) -> EntityType:
    """Register ``entity`` under its path segment.

    Raises:
        ConfigurationError: If another entity type already owns the path.
    """

    with _registry_guard:
        if entity.path in _REGISTRY:
            raise ConfigurationError(f"An entity type is already registered for '{entity.path}'")
        _REGISTRY[entity.path] = entity
    return entity


def get_entity(path: str) -> EntityType:
    """Look up a registered entity type by path segment (``release-group``)."""

    try:
        return _REGISTRY[path]
    except KeyError:
        raise UnknownEntity(path) from None


def registered_entities() -> Mapping[str, EntityType]:
    """Return a read-only view of the registry."""

    return MappingProxyType(_REGISTRY)


for _builtin in (
    ANNOTATION, AREA, ARTIST, CDSTUB, DISCID, EVENT, INSTRUMENT, LABEL, PLACE,
    RECORDING, RELEASE, RELEASE_GROUP, SERIES, TAG, URL, WORK,
):
    register_entity(_builtin)


__all__ = [
    "ANNOTATION",
    "AREA",
    "ARTIST",
    "CDSTUB",
    "COMMON_INCLUDES",
    "DISCID",
    "EVENT",
    "EntityType",
    "INSTRUMENT",
    "LABEL",
    "PLACE",
    "RATING_INCLUDES",
    "RECORDING",
    "RELATIONSHIP_INCLUDES",
    "RELEASE",
    "RELEASE_GROUP",
    "SERIES",
    "TAG",
    "URL",
    "UnknownEntity",
    "WORK",
    "get_entity",
    "register_entity",
    "registered_entities",
]
