"""Query construction: entity descriptors, builders, search DSL and results.

Submodules are imported directly (``mbclient.query.builders``); the
transport layer depends on ``mbclient.query.request`` so this package does
not re-export the builders.
"""
