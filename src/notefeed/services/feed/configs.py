"""Feed service configuration models.

Loaded from YAML (``config/feed.yaml``) and validated with Pydantic. Relay
URLs are normalized into [Relay][notefeed.models.relay.Relay] instances and
the identity section falls back to environment variables, so a container
can be pointed at a different author without editing the file.

Examples:
    ```yaml
    identity:
      handle: alice@example.com
    relays:
      - wss://relay.damus.io
      - wss://nos.lol
    page:
      page_size: 50
    ```

See Also:
    [create_app()][notefeed.services.feed.service.create_app]: Consumes
        [FeedConfig][notefeed.services.feed.configs.FeedConfig].
    [load_yaml()][notefeed.core.yaml.load_yaml]: Reads the raw mapping.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from notefeed.core.exceptions import ConfigurationError
from notefeed.core.metrics import MetricsConfig
from notefeed.core.yaml import load_yaml
from notefeed.models import Relay, is_hex64
from notefeed.nips.nip05 import Nip05Handle
from notefeed.nips.nip19 import decode_pubkey


ENV_PUBKEY = "NOTEFEED_PUBKEY"
ENV_HANDLE = "NOTEFEED_HANDLE"

DEFAULT_RELAYS = (
    "wss://relay.nostr.band",
    "wss://relay.damus.io",
    "wss://nostr-pub.wellorder.net",
)


def _normalize_key(value: str | None) -> str | None:
    """Accept a hex key or an ``npub``/``nprofile``; return lowercase hex."""
    if value is None:
        return None
    value = value.strip()
    if is_hex64(value.lower()):
        return value.lower()
    decoded = decode_pubkey(value)
    if decoded is None:
        raise ValueError(f"not a 64-char hex key or npub: {value!r}")
    return decoded


# =============================================================================
# Sections
# =============================================================================


class IdentityConfig(BaseModel):
    """Whose feed is rendered.

    Resolution order: ``pubkey``, then a NIP-05 lookup of ``handle``, then
    ``fallback_pubkey``. ``pubkey`` and ``handle`` default to the
    ``NOTEFEED_PUBKEY`` and ``NOTEFEED_HANDLE`` environment variables.

    Attributes:
        pubkey: Literal key (hex or ``npub``), normalized to hex.
        handle: NIP-05 identifier (``name@domain`` or bare ``domain``).
        fallback_pubkey: Key used when the NIP-05 lookup fails.
        timeout: NIP-05 HTTP timeout in seconds.
    """

    pubkey: str | None = None
    handle: str | None = None
    fallback_pubkey: str | None = None
    timeout: float = Field(default=10.0, gt=0.0, le=60.0)

    @model_validator(mode="before")
    @classmethod
    def _load_from_env(cls, data: Any) -> Any:
        if data is None:
            data = {}
        if isinstance(data, dict):
            data = dict(data)
            if data.get("pubkey") is None and os.getenv(ENV_PUBKEY):
                data["pubkey"] = os.getenv(ENV_PUBKEY)
            if data.get("handle") is None and os.getenv(ENV_HANDLE):
                data["handle"] = os.getenv(ENV_HANDLE)
        return data

    @field_validator("pubkey", "fallback_pubkey")
    @classmethod
    def _validate_key(cls, v: str | None) -> str | None:
        return _normalize_key(v)

    @field_validator("handle")
    @classmethod
    def _validate_handle(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return str(Nip05Handle.parse(v))

    @model_validator(mode="after")
    def _require_source(self) -> IdentityConfig:
        if self.pubkey is None and self.handle is None and self.fallback_pubkey is None:
            msg = (
                f"identity requires pubkey, handle or fallback_pubkey "
                f"(or the {ENV_PUBKEY} / {ENV_HANDLE} environment variables)"
            )
            raise ValueError(msg)
        return self


class FetchConfig(BaseModel):
    """Relay query behaviour.

    Attributes:
        query_timeout: Per-relay deadline in seconds.
        lookback_days: Only posts newer than this many days are requested.
        race: Query all relays concurrently and keep the first non-empty
            answer instead of trying them one by one.
    """

    query_timeout: float = Field(default=5.0, gt=0.0, le=60.0)
    lookback_days: int = Field(default=30, ge=1, le=3650)
    race: bool = False


class PageConfig(BaseModel):
    """Pagination and presentation.

    Attributes:
        page_size: Posts per page.
        max_limit: Upper bound on the primary fetch ``limit``.
        title: Page heading and ``<title>``.
        link_base: Web gateway used for post, profile and identifier links.
        home_url: Optional link rendered in the header.
        cache_max_age: ``Cache-Control`` max-age in seconds.
        parent_preview_length: Characters of a replied-to post shown above
            the reply before it is cut with an ellipsis.
    """

    page_size: int = Field(default=250, ge=1, le=1000)
    max_limit: int = Field(default=5000, ge=1, le=50000)
    title: str = Field(default="My Notes on Nostr", min_length=1)
    link_base: str = Field(default="https://njump.me", pattern=r"^https?://")
    home_url: str | None = Field(default=None, pattern=r"^https?://")
    cache_max_age: int = Field(default=60, ge=0)
    parent_preview_length: int = Field(default=280, ge=1)

    @field_validator("link_base")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ServerConfig(BaseModel):
    """HTTP bind settings for uvicorn."""

    host: str = Field(default="0.0.0.0", min_length=1, description="HTTP bind address")  # noqa: S104
    port: int = Field(default=8080, ge=1, le=65535, description="HTTP port")


# =============================================================================
# Root
# =============================================================================


class FeedConfig(BaseModel):
    """Complete feed service configuration.

    Attributes:
        identity: Author resolution settings.
        relays: Ordered relay list; order is the fallback order.
        fetch: Relay query behaviour.
        page: Pagination and presentation.
        server: HTTP bind settings.
        metrics: Prometheus endpoint settings.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    identity: IdentityConfig
    relays: list[Relay] = Field(default_factory=lambda: [Relay(url) for url in DEFAULT_RELAYS])
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    page: PageConfig = Field(default_factory=PageConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _default_identity(cls, data: Any) -> Any:
        # An omitted section still picks up the environment fallbacks.
        if isinstance(data, dict) and data.get("identity") is None:
            data = {**data, "identity": {}}
        return data

    @field_validator("relays", mode="before")
    @classmethod
    def _parse_relays(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        relays: list[Relay] = []
        for item in v:
            if isinstance(item, Relay):
                relays.append(item)
            elif isinstance(item, str):
                relays.append(Relay(item))
            else:
                raise ValueError(f"relay must be a URL string, got {type(item).__name__}")
        unique = list({relay.url: relay for relay in relays}.values())
        if not unique:
            raise ValueError("at least one relay is required")
        return unique

    @classmethod
    def from_yaml(cls, config_path: str) -> FeedConfig:
        """Load and validate a YAML config file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the file is not valid YAML or fails
                validation.
        """
        return cls.from_dict(load_yaml(config_path))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeedConfig:
        """Validate a raw mapping.

        Raises:
            ConfigurationError: If validation fails.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid feed configuration: {e}") from e
