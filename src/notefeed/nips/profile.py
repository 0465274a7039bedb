"""
Kind-0 profile metadata (NIP-01 ``set_metadata`` / NIP-24 extra fields).

The content of a kind-0 event is a JSON object chosen freely by its author.
[ProfileData.from_event()][notefeed.nips.profile.ProfileData.from_event]
decodes it through a declarative [FieldSpec][notefeed.nips.parsing.FieldSpec]:
known string fields are kept, everything else is dropped.

See Also:
    [notefeed.services.feed.pipeline][notefeed.services.feed.pipeline]:
        Parses every kind-0 record returned by the profile fetch.
    [notefeed.services.feed.projection][notefeed.services.feed.projection]:
        Uses [display_label()][notefeed.nips.profile.ProfileData.display_label]
        and [avatar_url()][notefeed.nips.profile.ProfileData.avatar_url].
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import Field

from notefeed.models.constants import EventKind

from .base import BaseData
from .nip19 import shorten
from .parsing import FieldSpec


if TYPE_CHECKING:
    from notefeed.models.event import Event


ROBOHASH_URL = "https://robohash.org/{pubkey}?set=set5"


def fallback_avatar(pubkey: str) -> str:
    """Generated avatar URL for a key without a usable ``picture``."""
    return ROBOHASH_URL.format(pubkey=pubkey)


class ProfileData(BaseData):
    """Display metadata published by one author.

    Attributes:
        pubkey: Hex key of the author the profile belongs to (taken from the
            event, never from the content).
        name: Short handle-like name.
        display_name: Longer free-form name.
        picture: Avatar URL.
        about: Biography.
        nip05: Self-declared NIP-05 identifier (not verified).
        website: Personal URL.
        bot: Whether the author declares itself automated.
    """

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec(
        str_fields=frozenset({"name", "display_name", "picture", "about", "nip05", "website"}),
        bool_fields=frozenset({"bot"}),
    )

    pubkey: str = Field(pattern=r"^[0-9a-f]{64}$")
    name: str | None = None
    display_name: str | None = None
    picture: str | None = None
    about: str | None = None
    nip05: str | None = None
    website: str | None = None
    bot: bool | None = None

    @classmethod
    def from_content(cls, pubkey: str, content: str) -> ProfileData:
        """Parse the JSON *content* of a kind-0 record published by *pubkey*.

        Raises:
            ValueError: If *content* is not a JSON object.
        """
        try:
            raw: Any = json.loads(content)
        except ValueError as e:
            raise ValueError(f"profile content is not valid JSON: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError(f"profile content must be an object, got {type(raw).__name__}")
        return cls(pubkey=pubkey, **cls.parse(raw))

    @classmethod
    def from_event(cls, event: Event) -> ProfileData:
        """Parse a kind-0 [Event][notefeed.models.event.Event].

        Raises:
            ValueError: If the event is not kind 0 or its content is not a
                JSON object.
        """
        if event.kind != EventKind.SET_METADATA:
            raise ValueError(f"expected kind {EventKind.SET_METADATA}, got {event.kind}")
        return cls.from_content(event.pubkey, event.content)

    def display_label(self) -> str:
        """``name``, else ``display_name``, else the shortened key."""
        return self.name or self.display_name or shorten(self.pubkey)

    def avatar_url(self) -> str:
        """``picture`` when it is an http(s) URL, else the generated avatar."""
        if self.picture and self.picture.startswith(("https://", "http://")):
            return self.picture
        return fallback_avatar(self.pubkey)
