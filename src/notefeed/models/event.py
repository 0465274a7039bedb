"""
Immutable Nostr event decoded from untrusted relay JSON.

Relays deliver events as loosely-typed JSON objects. [Event.from_dict()][notefeed.models.event.Event.from_dict]
is the single validated decode step at the relay boundary: shapes are checked,
optional fields receive explicit defaults, and anything that cannot be coerced
raises so the caller can skip the record.

Signatures are carried through as delivered; nostr-sdk checks them when it
receives events from a relay.

See Also:
    [notefeed.utils.protocol.query_relay][notefeed.utils.protocol.query_relay]:
        The relay client that decodes every fetched event through this model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ._validation import (
    normalize_tags,
    validate_hex64,
    validate_instance,
    validate_int,
    validate_str_no_null,
)


@dataclass(frozen=True, slots=True)
class Event:
    """Immutable Nostr event (NIP-01 shape).

    Attributes:
        id: 64-char lowercase hex event id.
        pubkey: 64-char lowercase hex author key.
        created_at: Author-supplied Unix timestamp in seconds.
        kind: Integer event kind.
        content: Raw content string (``""`` when absent).
        tags: Tuple of tag tuples (``()`` when absent).
        sig: Hex signature as delivered (``""`` when absent).

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If an id/key is not 64 lowercase hex characters, a
            timestamp or kind is negative, or content contains null bytes.

    Examples:
        ```python
        event = Event.from_dict(
            {"id": "ab" * 32, "pubkey": "cd" * 32, "created_at": 1700000000,
             "kind": 1, "tags": [["e", "ef" * 32]], "content": "hello"}
        )
        event.tag_values("e")   # ('efef...',)
        ```
    """

    id: str
    pubkey: str
    created_at: int
    kind: int
    content: str = ""
    tags: tuple[tuple[str, ...], ...] = field(default=())
    sig: str = field(default="", repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate field types on construction."""
        validate_hex64(self.id, "id")
        validate_hex64(self.pubkey, "pubkey")
        validate_int(self.created_at, "created_at")
        validate_int(self.kind, "kind")
        validate_str_no_null(self.content, "content")
        validate_instance(self.tags, tuple, "tags")
        validate_instance(self.sig, str, "sig")

    @classmethod
    def from_dict(cls, raw: Any) -> Event:
        """Decode a raw relay JSON object into an [Event][notefeed.models.event.Event].

        Args:
            raw: One event in NIP-01 JSON object shape.

        Returns:
            A validated, immutable event.

        Raises:
            TypeError: If *raw* is not a dict or a field has the wrong type.
            ValueError: If a required field is missing or invalid.
        """
        if not isinstance(raw, dict):
            raise TypeError(f"event must be a dict, got {type(raw).__name__}")
        for key in ("id", "pubkey", "created_at", "kind"):
            if key not in raw:
                raise ValueError(f"event missing required field '{key}'")

        content = raw.get("content")
        sig = raw.get("sig")
        return cls(
            id=raw["id"],
            pubkey=raw["pubkey"],
            created_at=raw["created_at"],
            kind=raw["kind"],
            content="" if content is None else content,
            tags=normalize_tags(raw.get("tags")),
            sig=sig if isinstance(sig, str) else "",
        )

    def tag_values(self, name: str) -> tuple[str, ...]:
        """Return the first value of every tag named *name*, in declaration order.

        Tags without a value (``["e"]``) are skipped.
        """
        return tuple(tag[1] for tag in self.tags if tag[0] == name and len(tag) > 1)
