"""Pure frozen dataclasses with zero I/O for Nostr relays and events.

The models layer is the foundation of the layered DAG. It has **no
dependencies** on any other notefeed package. Every model uses
``@dataclass(frozen=True, slots=True)`` and validates in ``__post_init__`` so
invalid instances never escape the constructor.

Attributes:
    Relay: Normalized public ``wss://`` relay URL validated with RFC 3986.
    Event: Nostr event decoded from untrusted relay JSON with explicit
        defaults for optional fields.
    EventKind: Event kinds consumed by the feed (profile metadata, text note).
"""

from ._validation import is_hex64
from .constants import PUBKEY_HEX_LENGTH, EventKind
from .event import Event
from .relay import Relay


__all__ = [
    "PUBKEY_HEX_LENGTH",
    "Event",
    "EventKind",
    "Relay",
    "is_hex64",
]
