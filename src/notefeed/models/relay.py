"""
Validated Nostr relay URL.

The feed only talks to public relays over TLS, so a [Relay][notefeed.models.relay.Relay]
is always a clearnet ``wss://`` endpoint. URLs are parsed with ``rfc3986``,
normalized (lowercased host, default port and trailing slash dropped) and
rejected when they point at overlay networks or local/private addresses.

See Also:
    [FeedConfig][notefeed.services.feed.configs.FeedConfig]: Validates the
        configured relay list into ``Relay`` instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from ipaddress import ip_address
from typing import ClassVar

from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator


@dataclass(frozen=True, slots=True)
class Relay:
    """Immutable, normalized ``wss://`` relay endpoint.

    Attributes:
        url: Normalized URL, e.g. ``wss://relay.damus.io``.
        host: Lowercased hostname or IP address (brackets stripped for IPv6).
        port: Explicit non-default port, or ``None``.
        path: Path component without trailing slash, or ``None``.

    Raises:
        ValueError: If the URL is malformed, not ``wss``, carries a query or
            fragment, or targets an overlay network or a non-public address.

    Examples:
        ```python
        relay = Relay("WSS://Relay.Damus.io:443/")
        relay.url   # 'wss://relay.damus.io'
        ```
    """

    raw_url: str = field(repr=False, compare=False)

    url: str = field(init=False)
    host: str = field(init=False)
    port: int | None = field(init=False)
    path: str | None = field(init=False)

    _DEFAULT_PORT: ClassVar[int] = 443
    _OVERLAY_TLDS: ClassVar[tuple[str, ...]] = (".onion", ".i2p", ".loki")
    _LOCAL_HOSTNAMES: ClassVar[frozenset[str]] = frozenset({"localhost", "localhost.localdomain"})

    def __post_init__(self) -> None:
        if "\x00" in self.raw_url:
            raise ValueError("Relay URL contains null bytes")

        uri = uri_reference(self.raw_url.strip()).normalize()
        validator = (
            Validator()
            .require_presence_of("scheme", "host")
            .allow_schemes("wss")
            .check_validity_of("scheme", "host", "port", "path")
        )
        try:
            validator.validate(uri)
        except UnpermittedComponentError:
            raise ValueError(f"Relay URL must use wss://: {self.raw_url}") from None
        except ValidationError as e:
            raise ValueError(f"Invalid relay URL: {e}") from None

        if uri.query or uri.fragment:
            raise ValueError(f"Relay URL must not carry a query or fragment: {self.raw_url}")

        host = uri.host.strip("[]")
        self._check_public_host(host)

        port = int(uri.port) if uri.port else None
        if port == self._DEFAULT_PORT:
            port = None

        path = uri.path or ""
        while "//" in path:
            path = path.replace("//", "/")
        path = path.rstrip("/") or None

        netloc = f"[{host}]" if ":" in host else host
        if port is not None:
            netloc = f"{netloc}:{port}"

        object.__setattr__(self, "url", f"wss://{netloc}{path or ''}")
        object.__setattr__(self, "host", host)
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "path", path)

    def __str__(self) -> str:
        return self.url

    @classmethod
    def _check_public_host(cls, host: str) -> None:
        if host.endswith(cls._OVERLAY_TLDS):
            raise ValueError(f"Overlay network relays are not supported: {host}")
        if host in cls._LOCAL_HOSTNAMES:
            raise ValueError(f"Local addresses not allowed: {host}")
        try:
            ip = ip_address(host)
        except ValueError:
            labels = host.split(".")
            if len(labels) < 2 or not all(
                label and not label.startswith("-") and not label.endswith("-") for label in labels
            ):
                raise ValueError(f"Invalid host: '{host}'") from None
            return
        if not ip.is_global:
            raise ValueError(f"Local addresses not allowed: {host}")
