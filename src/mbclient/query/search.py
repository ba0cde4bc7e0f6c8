"""Lucene query builder for the MusicBrainz search server.

Terms are appended in call order and joined by explicit connectives:

    QueryBuilder(ARTIST).field("artist", "Miles Davis").and_().field("country", "US").build()
    -> 'artist:"Miles Davis" AND country:US'

Rules
- Values containing whitespace are quoted as phrases; inside a phrase only
  ``"`` and ``\\`` are escaped.
- Other values get every Lucene reserved character backslash-escaped:
  ``+ - && || ! ( ) { } [ ] ^ " ~ * ? : \\ /``.
- Terms and connectives must alternate, starting and ending with a term.
- Unqualified terms (``text``) are passed through as free text; how the
  search server combines them with qualified terms is left to its defaults.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Literal

from mbclient.errors import InvalidSearchField, MalformedQuery

from .ports import EntityDescriptor

Connective = Literal["AND", "OR"]

_RE_RESERVED: Final[re.Pattern[str]] = re.compile(r'(&&|\|\||[+\-!(){}\[\]^"~*?:\\/])')
_RE_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s")


def escape_term(value: str) -> str:
    """Backslash-escape Lucene reserved characters in an unquoted value."""

    return _RE_RESERVED.sub(r"\\\1", value)


def quote_phrase(value: str) -> str:
    """Wrap ``value`` in double quotes, escaping quotes and backslashes."""

    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_value(value: str) -> str:
    """Quote values with whitespace, escape everything else."""

    if _RE_WHITESPACE.search(value):
        return quote_phrase(value)
    return escape_term(value)


@dataclass(frozen=True, slots=True)
class Term:
    """A single ``field:value`` or free-text term."""

    value: str
    field: str | None = None

    def render(self) -> str:
        rendered = format_value(self.value)
        if self.field is None:
            return rendered
        return f"{self.field}:{rendered}"


Token = Term | Connective


class QueryBuilder:
    """Accumulate search terms and serialise them into one query string."""

    def __init__(self, entity: EntityDescriptor | None = None) -> None:
        self._entity = entity
        self._tokens: list[Token] = []

    @property
    def tokens(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    def field(self, name: str, value: object) -> QueryBuilder:
        """Append a qualified term."""

        self._tokens.append(Term(value=str(value).strip(), field=name.strip()))
        return self

    def text(self, value: object) -> QueryBuilder:
        """Append an unqualified free-text term."""

        self._tokens.append(Term(value=str(value).strip()))
        return self

    def and_(self) -> QueryBuilder:
        self._tokens.append("AND")
        return self

    def or_(self) -> QueryBuilder:
        self._tokens.append("OR")
        return self

    def build(self, entity: EntityDescriptor | None = None) -> str:
        """Validate the token sequence and serialise it.

        Fields are checked against ``entity`` when given, otherwise against
        the entity the builder was created with.

        Raises:
            MalformedQuery: On an empty query, empty values, or terms and
                connectives that do not alternate.
            InvalidSearchField: When a field is not indexed for that entity.
        """

        target = entity if entity is not None else self._entity
        if not self._tokens:
            raise MalformedQuery("Search query is empty")

        parts: list[str] = []
        expect_term = True
        for position, token in enumerate(self._tokens):
            if isinstance(token, Term):
                if not expect_term:
                    raise MalformedQuery(
                        f"Missing connective before term {position + 1} ({token.render()})"
                    )
                self._check_term(token, target)
                parts.append(token.render())
            else:
                if expect_term:
                    raise MalformedQuery(f"Connective {token} at position {position + 1} has no left term")
                parts.append(token)
            expect_term = not expect_term

        if expect_term:
            raise MalformedQuery(f"Dangling connective {parts[-1]} at end of query")
        return " ".join(parts)

    def _check_term(self, term: Term, entity: EntityDescriptor | None) -> None:
        if not term.value:
            raise MalformedQuery("Search terms must not be empty")
        if term.field is None:
            return
        if not term.field:
            raise MalformedQuery("Search field names must not be empty")
        if entity is not None and not entity.allows_search_field(term.field):
            raise InvalidSearchField(entity.name, term.field)

    def __str__(self) -> str:
        return self.build()


__all__ = [
    "QueryBuilder",
    "Term",
    "escape_term",
    "format_value",
    "quote_phrase",
]
