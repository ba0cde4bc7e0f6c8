"""
Summary: Exception taxonomy raised by query builders, executors and configuration.
Why: Give callers one base class to catch while keeping each failure mode distinct.
"""

from __future__ import annotations


class ClientError(Exception):
    """Base exception for every error raised by mbclient."""


class ConfigurationError(ClientError):
    """Raised when configuration is invalid or changed after first use."""


class QueryError(ClientError, ValueError):
    """Base class for problems detected locally while building a request."""


class MissingIdentifier(QueryError):
    """Raised when a fetch, browse or cover-art query has no target id."""


class InvalidInclude(QueryError):
    """Raised when an include token is not allowed for the entity."""

    def __init__(self, entity: str, token: str) -> None:
        super().__init__(f"'{token}' is not a valid include for {entity}")
        self.entity = entity
        self.token = token


class InvalidRelation(QueryError):
    """Raised when a browse relation is not allowed for the entity."""

    def __init__(self, entity: str, relation: str) -> None:
        super().__init__(f"{entity} cannot be browsed by '{relation}'")
        self.entity = entity
        self.relation = relation


class InvalidSearchField(QueryError):
    """Raised when a search field is not indexed for the entity."""

    def __init__(self, entity: str, field: str) -> None:
        super().__init__(f"'{field}' is not a search field of {entity}")
        self.entity = entity
        self.field = field


class InvalidOffset(QueryError):
    """Raised for negative pagination offsets."""


class MalformedQuery(QueryError):
    """Raised when search terms and connectives do not alternate."""


class UnsupportedOperation(QueryError):
    """Raised when an entity does not support the requested query kind."""


class TransportFailure(ClientError):
    """Raised when the transport could not complete the HTTP exchange."""


class RemoteError(ClientError):
    """Raised for non-2xx responses from the remote service."""

    def __init__(self, status: int, message: str | None = None, url: str | None = None) -> None:
        detail = f"HTTP {status}"
        if message:
            detail = f"{detail}: {message}"
        if url:
            detail = f"{detail} ({url})"
        super().__init__(detail)
        self.status = status
        self.message = message
        self.url = url


class NotFound(RemoteError):
    """Raised for 404 responses, the expected miss of a lookup by id."""

    def __init__(self, message: str | None = None, url: str | None = None) -> None:
        super().__init__(404, message or "Not Found", url)


class DecodeFailure(ClientError):
    """Raised when response bytes cannot be decoded into the expected shape."""


__all__ = [
    "ClientError",
    "ConfigurationError",
    "DecodeFailure",
    "InvalidInclude",
    "InvalidOffset",
    "InvalidRelation",
    "InvalidSearchField",
    "MalformedQuery",
    "MissingIdentifier",
    "NotFound",
    "QueryError",
    "RemoteError",
    "TransportFailure",
    "UnsupportedOperation",
]
