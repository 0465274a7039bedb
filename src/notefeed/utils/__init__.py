"""Relay and HTTP I/O primitives.

The utils layer sits in the middle of the diamond DAG, depending only on
[notefeed.models][notefeed.models]. It provides the low-level network
helpers used by [notefeed.nips][notefeed.nips] and
[notefeed.services][notefeed.services].

Attributes:
    http: Bounded JSON reading for aiohttp responses.
    protocol: One-shot nostr-sdk fetch against a single relay, plus the
        filter builder it consumes.

Note:
    The utils layer has **zero** imports from ``notefeed.core`` or
    ``notefeed.services``. Outcomes are returned as values so the services
    layer can log and count them.
"""

from .http import read_bounded_json
from .protocol import (
    DEFAULT_QUERY_TIMEOUT,
    QueryOutcome,
    QueryResult,
    create_filter,
    query_relay,
)


__all__ = [
    "DEFAULT_QUERY_TIMEOUT",
    "QueryOutcome",
    "QueryResult",
    "create_filter",
    "query_relay",
    "read_bounded_json",
]
