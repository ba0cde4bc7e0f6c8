"""
Summary: Immutable description of one outbound GET request.
Why: Builders validate once and hand executors a value they cannot mutate.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlencode

FORMAT_JSON = "json"


@dataclass(frozen=True, slots=True)
class Request:
    """A fully validated request.

    Attributes:
        base_url: Service root, e.g. ``https://musicbrainz.org/ws/2``.
        path: Resource path segment (``artist``, ``release-group``, ...).
        resource_id: Target id for lookups, None for listings.
        params: Ordered query parameters, excluding ``fmt``.
        fmt: Response format appended as ``fmt=`` first, or None.
        suffix: Extra trailing path segment (cover-art ``front-500``).
        expects_redirect: Whether a 3xx answer is the expected outcome.
    """

    base_url: str
    path: str
    resource_id: str | None = None
    params: tuple[tuple[str, str], ...] = ()
    fmt: str | None = FORMAT_JSON
    suffix: str | None = None
    expects_redirect: bool = False

    @property
    def url(self) -> str:
        """Return the URL without its query string."""

        segments = [self.base_url.rstrip("/"), self.path]
        if self.resource_id:
            segments.append(self.resource_id)
        if self.suffix:
            segments.append(self.suffix)
        return "/".join(segments)

    @property
    def query_params(self) -> tuple[tuple[str, str], ...]:
        """Return every query parameter in wire order."""

        if self.fmt is None:
            return self.params
        return (("fmt", self.fmt), *self.params)

    @property
    def query_string(self) -> str:
        return urlencode(self.query_params)

    @property
    def full_url(self) -> str:
        query = self.query_string
        return f"{self.url}?{query}" if query else self.url

    def param(self, name: str) -> str | None:
        """Return the first value of ``name`` or None."""

        for key, value in self.query_params:
            if key == name:
                return value
        return None


__all__ = ["FORMAT_JSON", "Request"]
