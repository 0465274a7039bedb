"""
NIP-19 bech32 identifier scanning and public-key decoding.

Free-form note content references other entities with
[NIP-19](https://github.com/nostr-protocol/nips/blob/master/19.md)
identifiers, either bare (``npub1...``) or as ``nostr:`` URIs
([NIP-21](https://github.com/nostr-protocol/nips/blob/master/21.md)).
This module finds those identifiers in text and decodes the ones that
name a public key (``npub`` and ``nprofile``).

Bech32 checksum verification and TLV decoding are delegated to
``nostr_sdk``. Decoding never raises: malformed identifiers decode to
``None`` so callers can ignore them.

See Also:
    [notefeed.services.feed.references][notefeed.services.feed.references]:
        Collects mentioned keys from post content.
    [notefeed.services.feed.render][notefeed.services.feed.render]:
        Turns identifiers into links.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import StrEnum

from nostr_sdk import Nip19Profile, NostrSdkError, PublicKey


logger = logging.getLogger(__name__)


class Nip19Prefix(StrEnum):
    """Human-readable parts recognised in content.

    Attributes:
        NPUB: Bare public key.
        NPROFILE: Public key with relay hints (TLV).
        NOTE: Bare event id.
        NEVENT: Event id with relay hints (TLV).
        NADDR: Addressable event coordinate (TLV).
        NRELAY: Relay URL (deprecated, still seen in the wild).
    """

    NPUB = "npub"
    NPROFILE = "nprofile"
    NOTE = "note"
    NEVENT = "nevent"
    NADDR = "naddr"
    NRELAY = "nrelay"


NOSTR_URI_SCHEME = "nostr:"

NIP19_PATTERN = re.compile(
    r"\b(?:nostr:)?(?P<identifier>(?:npub|nprofile|note|nevent|naddr|nrelay)1[0-9a-z]{20,})\b"
)

_PUBKEY_PREFIXES = (Nip19Prefix.NPUB, Nip19Prefix.NPROFILE)


@dataclass(frozen=True, slots=True)
class Nip19Reference:
    """One identifier occurrence inside a text.

    Attributes:
        identifier: The bech32 string without any ``nostr:`` scheme.
        prefix: The identifier's human-readable part.
    """

    identifier: str
    prefix: Nip19Prefix

    @property
    def names_pubkey(self) -> bool:
        return self.prefix in _PUBKEY_PREFIXES


def prefix_of(identifier: str) -> Nip19Prefix:
    """Return the human-readable part of a bech32 *identifier*."""
    return Nip19Prefix(identifier.split("1", 1)[0])


def find_identifiers(text: str) -> list[Nip19Reference]:
    """Return every NIP-19 identifier found in *text*, in order of appearance."""
    return [
        Nip19Reference(
            identifier=m.group("identifier"),
            prefix=prefix_of(m.group("identifier")),
        )
        for m in NIP19_PATTERN.finditer(text)
    ]


def decode_pubkey(identifier: str) -> str | None:
    """Decode an ``npub`` or ``nprofile`` identifier to a hex public key.

    A leading ``nostr:`` scheme is accepted. Identifiers of other types,
    bad checksums and truncated payloads all yield ``None``.

    Args:
        identifier: Bech32 identifier, optionally ``nostr:``-prefixed.

    Returns:
        The 64-char lowercase hex key, or ``None`` if *identifier* does not
        decode to a public key.
    """
    value = identifier.removeprefix(NOSTR_URI_SCHEME).strip()
    try:
        if value.startswith(f"{Nip19Prefix.NPUB}1"):
            return PublicKey.parse(value).to_hex()
        if value.startswith(f"{Nip19Prefix.NPROFILE}1"):
            return Nip19Profile.from_bech32(value).public_key().to_hex()
    except (NostrSdkError, ValueError, TypeError) as e:
        logger.debug("nip19_decode_failed identifier=%s error=%s", value, e)
    return None


def encode_npub(pubkey: str) -> str | None:
    """Encode a hex public key as ``npub``, or ``None`` if it is not a valid key."""
    try:
        return PublicKey.parse(pubkey).to_bech32()
    except (NostrSdkError, ValueError, TypeError) as e:
        logger.debug("nip19_encode_failed pubkey=%s error=%s", pubkey, e)
    return None


def shorten(value: str) -> str:
    """Abbreviate a key or identifier as ``first8...last4``.

    Values of 16 characters or fewer are returned unchanged.
    """
    if len(value) <= 16:
        return value
    return f"{value[:8]}...{value[-4:]}"
