"""Author identity resolution.

Turns the configured identity into the hex key whose posts are rendered:

1. A literal key (64-char hex or ``npub``) is used as-is, with no network
   call.
2. Otherwise the NIP-05 handle is looked up once.
3. If that fails, the fallback key is used when configured.

Anything else is unresolved (``None``); the pipeline turns that into
[IdentityNotFoundError][notefeed.core.exceptions.IdentityNotFoundError].

See Also:
    [lookup_nip05()][notefeed.nips.nip05.lookup_nip05]: The single HTTP
        lookup performed in step 2.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from notefeed.core.logger import Logger
from notefeed.models import is_hex64
from notefeed.nips.nip05 import lookup_nip05
from notefeed.nips.nip19 import decode_pubkey


if TYPE_CHECKING:
    from .configs import IdentityConfig


def parse_literal_key(value: str) -> str | None:
    """Return the hex key for a literal hex/``npub`` value, else ``None``."""
    candidate = value.strip()
    if is_hex64(candidate.lower()):
        return candidate.lower()
    return decode_pubkey(candidate)


class IdentityResolver:
    """Resolve the feed author's key. Never raises except on cancellation."""

    def __init__(self, config: IdentityConfig) -> None:
        self._config = config
        self._logger = Logger("feed.identity")

    async def resolve(self) -> str | None:
        """Return the author's hex key, or ``None`` if it cannot be determined."""
        config = self._config

        if config.pubkey is not None:
            pubkey = parse_literal_key(config.pubkey)
            if pubkey is not None:
                return pubkey
            self._logger.warning("literal_pubkey_invalid", pubkey=config.pubkey)

        if config.handle is not None:
            pubkey = await lookup_nip05(config.handle, timeout=config.timeout)
            if pubkey is not None:
                self._logger.debug("nip05_resolved", handle=config.handle, pubkey=pubkey)
                return pubkey
            self._logger.warning(
                "nip05_failed",
                handle=config.handle,
                fallback=config.fallback_pubkey is not None,
            )

        if config.fallback_pubkey is not None:
            return parse_literal_key(config.fallback_pubkey)
        return None
