"""Where: src/mbclient/platform/logging/handlers.py
What: Rich console handler rendering structured request and rate-limit events.
Why: Keep per-request log lines short and scannable while leaving plain
     messages to the stock RichHandler rendering.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, override
from urllib.parse import urlsplit

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class RequestRichHandler(RichHandler):
    """Custom Rich handler that styles ``request.*`` and ``ratelimit.*`` events."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "request.start": ("🌐", "blue"),
        "request.complete": ("✅", "green"),
        "request.redirect": ("↪️", "cyan"),
        "request.error": ("⛔", "red"),
        "ratelimit.wait": ("⏳", "yellow"),
        "ratelimit.grant": ("🎫", "magenta"),
    }
    _QUERY_PREVIEW_LIMIT: ClassVar[int] = 60

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize the handler with compact defaults.

        Args:
            *args: Positional arguments to pass to RichHandler.
            **kwargs: Keyword arguments to pass to RichHandler.
        """
        kwargs.setdefault("show_time", False)
        kwargs.setdefault("show_path", False)
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = False
        super().__init__(*args, **kwargs)

    @classmethod
    def _format_url(cls, url: str) -> Text:
        """Render ``url`` as host in white and path in cyan, query truncated."""

        parts = urlsplit(url)
        text = Text()
        if parts.netloc:
            _ = text.append(parts.netloc, style=Style(color="white", bold=True))
        _ = text.append(parts.path or "/", style=Style(color="cyan"))
        if parts.query:
            query = parts.query
            if len(query) > cls._QUERY_PREVIEW_LIMIT:
                query = query[: cls._QUERY_PREVIEW_LIMIT] + "…"
            _ = text.append("?" + query, style=Style(color="bright_black"))
        return text

    def _render_event_message(self, record: logging.LogRecord) -> Text | None:
        """Render structured events carried in ``record.client_event``."""

        event = getattr(record, "client_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("ℹ️", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))

        body = Text(style=Style(color=color))
        if event.startswith("ratelimit."):
            wait_seconds = getattr(record, "wait_seconds", None)
            if event == "ratelimit.wait" and isinstance(wait_seconds, (int, float)):
                _ = body.append(f"Rate limit: waiting {wait_seconds:.3f}s")
            else:
                _ = body.append("Rate limit: permit granted")
            _ = text.append_text(body)
            return text

        method = getattr(record, "method", None) or "GET"
        _ = body.append(f"{method} ")
        url = getattr(record, "url", None)
        if url:
            _ = body.append_text(self._format_url(str(url)))

        metrics: list[str] = []
        status = getattr(record, "status", None)
        if isinstance(status, int):
            metrics.append(f"status={status}")
        duration_ms = getattr(record, "duration_ms", None)
        if isinstance(duration_ms, (int, float)):
            metrics.append(f"{duration_ms:.1f} ms")
        error_message = getattr(record, "error_message", None)
        if error_message:
            metrics.append(str(error_message))
        if metrics:
            _ = body.append(" (" + ", ".join(metrics) + ")")

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        """Render message with custom styling for client events."""

        event_text = self._render_event_message(record)
        if event_text is not None:
            return event_text

        return super().render_message(record, message)


__all__ = ["RequestRichHandler"]
