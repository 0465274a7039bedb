"""Nostr Implementation Possibilities -- protocol-specific fetch and parse logic.

The NIPs layer sits in the middle of the diamond DAG, depending on
[notefeed.models][notefeed.models] and [notefeed.utils][notefeed.utils].

Warning:
    [lookup_nip05()][notefeed.nips.nip05.lookup_nip05] and
    [decode_pubkey()][notefeed.nips.nip19.decode_pubkey] **never raise
    exceptions**; failures are reported as ``None``.

Attributes:
    nip05: ``name@domain`` to public key lookup through
        ``/.well-known/nostr.json``.
    nip19: Scanning of bech32 identifiers in content and ``npub`` /
        ``nprofile`` decoding via ``nostr_sdk``.
    profile: Kind-0 profile metadata parsed with a declarative
        [FieldSpec][notefeed.nips.parsing.FieldSpec].
"""

from .base import BaseData
from .nip05 import Nip05Handle, extract_pubkey, lookup_nip05
from .nip19 import (
    NIP19_PATTERN,
    Nip19Prefix,
    Nip19Reference,
    decode_pubkey,
    encode_npub,
    find_identifiers,
    prefix_of,
    shorten,
)
from .parsing import FieldSpec, parse_fields
from .profile import ProfileData, fallback_avatar


__all__ = [
    "NIP19_PATTERN",
    "BaseData",
    "FieldSpec",
    "Nip05Handle",
    "Nip19Prefix",
    "Nip19Reference",
    "ProfileData",
    "decode_pubkey",
    "encode_npub",
    "extract_pubkey",
    "fallback_avatar",
    "find_identifiers",
    "prefix_of",
    "lookup_nip05",
    "parse_fields",
    "shorten",
]
