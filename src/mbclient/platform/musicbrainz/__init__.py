"""MusicBrainz infrastructure package.

This package provides the transport, rate limiting, user-agent and
execution layers used to talk to the MusicBrainz Web Service (WS2) and the
Cover Art Archive.
"""
