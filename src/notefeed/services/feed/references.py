"""Reference extraction from posts.

Pure functions: the same event always yields the same references, and no
I/O is performed. Two kinds of references drive the follow-up fetches of
the aggregation pipeline:

* the **parent** post, taken from ``e`` tags;
* **mentioned authors**, taken from ``npub``/``nprofile`` identifiers in
  the content (bare or ``nostr:``-prefixed).

The parent is the **last** ``e`` tag whose value is non-empty and differs
from the event's own id. NIP-10 marked tags (``reply``/``root``) are not
interpreted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from notefeed.nips.nip19 import decode_pubkey, find_identifiers


if TYPE_CHECKING:
    from notefeed.models.event import Event


@dataclass(frozen=True, slots=True)
class References:
    """Entities referenced by one post.

    Attributes:
        parent_id: Id of the post this one replies to, if any.
        mentioned_pubkeys: Distinct hex keys mentioned in the content, in
            order of first appearance.
    """

    parent_id: str | None = None
    mentioned_pubkeys: tuple[str, ...] = field(default=())


def parent_id(event: Event) -> str | None:
    """Return the id of the post *event* replies to, or ``None``."""
    candidates = [value for value in event.tag_values("e") if value and value != event.id]
    return candidates[-1] if candidates else None


def mentioned_pubkeys(event: Event) -> tuple[str, ...]:
    """Return the distinct keys named by identifiers in the content.

    Malformed identifiers are skipped.
    """
    keys: dict[str, None] = {}
    for ref in find_identifiers(event.content):
        if not ref.names_pubkey:
            continue
        pubkey = decode_pubkey(ref.identifier)
        if pubkey is not None:
            keys[pubkey] = None
    return tuple(keys)


def extract_references(event: Event) -> References:
    return References(parent_id=parent_id(event), mentioned_pubkeys=mentioned_pubkeys(event))
