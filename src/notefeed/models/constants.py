"""Shared constants for the models layer.

See Also:
    [notefeed.models._validation][]: Validates ids and keys against
        [PUBKEY_HEX_LENGTH][notefeed.models.constants.PUBKEY_HEX_LENGTH].
    [notefeed.services.feed.pipeline][]: Builds filters with
        [EventKind][notefeed.models.constants.EventKind].
"""

from __future__ import annotations

from enum import IntEnum


PUBKEY_HEX_LENGTH = 64


class EventKind(IntEnum):
    """Nostr event kinds consumed by the feed.

    Attributes:
        SET_METADATA: Kind 0, profile metadata (NIP-01). Content is a JSON
            object with ``name``, ``display_name``, ``picture``, etc.
        TEXT_NOTE: Kind 1, short text note (NIP-01).
    """

    SET_METADATA = 0
    TEXT_NOTE = 1
