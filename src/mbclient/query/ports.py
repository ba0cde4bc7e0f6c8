"""
Summary: Ports describing what query builders need to know about an entity type.
Why: Keep builders generic so one implementation serves every entity type.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EntityDescriptor(Protocol):
    """Port for per-entity capabilities consumed by the query builders."""

    @property
    def name(self) -> str:
        """Human readable entity name used in error messages."""
        ...

    @property
    def path(self) -> str:
        """Resource path segment, e.g. ``release-group``."""
        ...

    @property
    def fetchable(self) -> bool:
        """Whether lookups by id are supported."""
        ...

    @property
    def browsable(self) -> bool:
        """Whether the entity can be listed by a related entity."""
        ...

    @property
    def searchable(self) -> bool:
        """Whether the search server indexes the entity."""
        ...

    @property
    def has_coverart(self) -> bool:
        """Whether the Cover Art Archive serves images for the entity."""
        ...

    @property
    def entities_key(self) -> str:
        """JSON key holding the entity list in browse and search payloads."""
        ...

    @property
    def browse_count_key(self) -> str:
        """JSON key holding the total count of a browse payload."""
        ...

    @property
    def browse_offset_key(self) -> str:
        """JSON key holding the offset of a browse payload."""
        ...

    def allows_include(self, token: str) -> bool:
        """Return True if ``token`` is a valid ``inc`` value."""
        ...

    def allows_relation(self, relation: str) -> bool:
        """Return True if the entity can be browsed by ``relation``."""
        ...

    def allows_search_field(self, field: str) -> bool:
        """Return True if ``field`` is an indexed search field."""
        ...
