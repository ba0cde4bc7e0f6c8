# Where: mbclient.shared.__init__
# What: Provide a concise import surface for shared helpers.
# Why: Encourage consistent reuse of identifier handling across callers.

"""Shared cross-cutting utilities exposed at the package level."""

from .mbid import is_mbid, mbid_from_url, parse_mbid

__all__ = ["is_mbid", "mbid_from_url", "parse_mbid"]
