"""
Summary: Typed listing and cover-art result values returned by query execution.
Why: Give callers stable attributes while entity payloads stay plain JSON mappings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

Entity = dict[str, Any]


@dataclass(frozen=True, slots=True)
class BrowseResult:
    """One page of entities linked to another entity.

    Attributes:
        count: Total number of linked entities on the service.
        offset: Offset of this page, echoed back by the service.
        entities: Entity mappings on this page.
    """

    count: int
    offset: int
    entities: list[Entity] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SearchResult:
    """One page of ranked search hits.

    Every entity mapping keeps the ``score`` the search server assigned.
    """

    count: int
    offset: int
    entities: list[Entity] = field(default_factory=list)
    created: datetime | None = None

    def scores(self) -> list[int]:
        """Return the relevance score of each hit, 0 when absent."""

        result: list[int] = []
        for entity in self.entities:
            try:
                result.append(int(entity.get("score", 0)))
            except (TypeError, ValueError):
                result.append(0)
        return result


@dataclass(frozen=True, slots=True)
class CoverartManifest:
    """Listing of every image the Cover Art Archive holds for a release."""

    release: str | None
    images: list[Entity] = field(default_factory=list)

    @property
    def front(self) -> Entity | None:
        """Return the image flagged as front cover, if any."""

        for image in self.images:
            if image.get("front") is True:
                return image
        return None


@dataclass(frozen=True, slots=True)
class CoverartLocation:
    """Direct location of a single cover-art image."""

    url: str


CoverartResponse = CoverartManifest | CoverartLocation


__all__ = [
    "BrowseResult",
    "CoverartLocation",
    "CoverartManifest",
    "CoverartResponse",
    "Entity",
    "SearchResult",
]
