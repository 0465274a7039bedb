"""
NIP-05 internet identifier lookup.

Maps a ``name@domain`` handle to a public key by fetching
``https://{domain}/.well-known/nostr.json?name={name}`` and reading the
``names`` object of the returned document, as described in
[NIP-05](https://github.com/nostr-protocol/nips/blob/master/05.md).

Note:
    [lookup_nip05()][notefeed.nips.nip05.lookup_nip05] **never raises**
    (except on cancellation). Network errors, non-200 statuses, oversized
    or malformed documents and missing entries all return ``None`` and are
    logged at debug level. Responses larger than 64 KB are rejected.

See Also:
    [IdentityResolver][notefeed.services.feed.identity.IdentityResolver]:
        Chooses between a literal key, this lookup and the fallback key.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

import aiohttp

from notefeed.models import is_hex64
from notefeed.utils.http import read_bounded_json


logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_SIZE = 65_536
ROOT_NAME = "_"

_NAME_PATTERN = re.compile(r"^[a-z0-9._-]+$")
_DOMAIN_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9.-]*[a-z0-9])?(?::\d{1,5})?$")


@dataclass(frozen=True, slots=True)
class Nip05Handle:
    """A parsed ``name@domain`` identifier.

    Attributes:
        name: Lowercased local part (``_`` for the domain's root identity).
        domain: Lowercased domain, optionally with a port.
    """

    name: str
    domain: str

    @classmethod
    def parse(cls, handle: str) -> Nip05Handle:
        """Parse *handle*; a bare domain stands for ``_@domain``.

        Raises:
            ValueError: If the local part or the domain contains characters
                NIP-05 does not allow.
        """
        value = handle.strip().lower()
        if "@" in value:
            name, _, domain = value.rpartition("@")
            name = name or ROOT_NAME
        else:
            name, domain = ROOT_NAME, value

        if not _NAME_PATTERN.match(name):
            raise ValueError(f"invalid NIP-05 name: {name!r}")
        if not _DOMAIN_PATTERN.match(domain):
            raise ValueError(f"invalid NIP-05 domain: {domain!r}")
        return cls(name=name, domain=domain)

    @property
    def url(self) -> str:
        """Well-known document URL (without the ``name`` query parameter)."""
        return f"https://{self.domain}/.well-known/nostr.json"

    def __str__(self) -> str:
        return f"{self.name}@{self.domain}"


def extract_pubkey(document: Any, name: str) -> str | None:
    """Return the hex key registered for *name* in a ``nostr.json`` document.

    Names are compared case-insensitively. Entries that are not 64-char hex
    strings are treated as missing.
    """
    if not isinstance(document, dict):
        return None
    names = document.get("names")
    if not isinstance(names, dict):
        return None

    wanted = name.lower()
    value = names.get(wanted)
    if value is None:
        value = next((v for k, v in names.items() if isinstance(k, str) and k.lower() == wanted), None)
    if not isinstance(value, str):
        return None
    value = value.lower()
    return value if is_hex64(value) else None


async def _fetch_document(handle: Nip05Handle, timeout: float, max_size: int) -> Any:  # noqa: ASYNC109
    async with (
        aiohttp.ClientSession() as session,
        session.get(
            handle.url,
            params={"name": handle.name},
            headers={"Accept": "application/json"},
            timeout=aiohttp.ClientTimeout(total=timeout),
            allow_redirects=False,
        ) as resp,
    ):
        if resp.status != HTTPStatus.OK:
            raise ValueError(f"HTTP {resp.status}")
        return await read_bounded_json(resp, max_size)


async def lookup_nip05(
    handle: str,
    timeout: float = DEFAULT_TIMEOUT,  # noqa: ASYNC109
    max_size: int = DEFAULT_MAX_SIZE,
) -> str | None:
    """Resolve a NIP-05 *handle* to a hex public key.

    Issues exactly one HTTP GET. Redirects are not followed, as NIP-05
    requires.

    Args:
        handle: ``name@domain`` or a bare ``domain``.
        timeout: Total request timeout in seconds.
        max_size: Maximum accepted document size in bytes.

    Returns:
        The 64-char lowercase hex key, or ``None`` on any failure.
    """
    try:
        parsed = Nip05Handle.parse(handle)
    except ValueError as e:
        logger.debug("nip05_invalid_handle handle=%s error=%s", handle, e)
        return None

    try:
        document = await _fetch_document(parsed, timeout, max_size)
    except asyncio.CancelledError:
        raise
    except (OSError, TimeoutError, aiohttp.ClientError, ValueError) as e:
        logger.debug("nip05_failed handle=%s error=%s", parsed, str(e) or type(e).__name__)
        return None

    pubkey = extract_pubkey(document, parsed.name)
    if pubkey is None:
        logger.debug("nip05_name_not_found handle=%s", parsed)
    else:
        logger.debug("nip05_resolved handle=%s pubkey=%s", parsed, pubkey)
    return pubkey
