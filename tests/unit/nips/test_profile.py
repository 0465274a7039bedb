"""
Unit tests for nips.profile module.

Tests:
- ProfileData.from_content() / from_event() decoding
- display_label() and avatar_url() fallbacks
"""

import json

import pytest

from notefeed.models import Event
from notefeed.nips.profile import ProfileData, fallback_avatar
from tests.fixtures.keys import AUTHOR_HEX, event_id


def _metadata(content: str, kind: int = 0) -> Event:
    return Event(id=event_id(9), pubkey=AUTHOR_HEX, created_at=1, kind=kind, content=content)


class TestFromContent:
    def test_known_fields(self) -> None:
        content = json.dumps(
            {
                "name": "alice",
                "display_name": "Alice A.",
                "picture": "https://example.com/a.png",
                "about": "hi",
                "nip05": "alice@example.com",
                "website": "https://alice.example",
                "bot": False,
            }
        )

        profile = ProfileData.from_content(AUTHOR_HEX, content)

        assert profile.pubkey == AUTHOR_HEX
        assert profile.name == "alice"
        assert profile.display_name == "Alice A."
        assert profile.picture == "https://example.com/a.png"
        assert profile.bot is False

    def test_unknown_and_mistyped_fields_dropped(self) -> None:
        profile = ProfileData.from_content(
            AUTHOR_HEX, json.dumps({"name": 5, "lud16": "x@y", "bot": "yes", "about": "ok"})
        )
        assert profile.about == "ok"
        assert profile.name is None
        assert profile.bot is None
        assert not hasattr(profile, "lud16")

    def test_invalid_json(self) -> None:
        with pytest.raises(ValueError, match="not valid JSON"):
            ProfileData.from_content(AUTHOR_HEX, "{name")

    def test_non_object(self) -> None:
        with pytest.raises(ValueError, match="must be an object"):
            ProfileData.from_content(AUTHOR_HEX, '["alice"]')

    def test_invalid_pubkey(self) -> None:
        with pytest.raises(ValueError):
            ProfileData.from_content("xyz", "{}")


class TestFromEvent:
    def test_kind_zero(self) -> None:
        assert ProfileData.from_event(_metadata('{"name": "alice"}')).name == "alice"

    def test_wrong_kind(self) -> None:
        with pytest.raises(ValueError, match="expected kind 0"):
            ProfileData.from_event(_metadata('{"name": "alice"}', kind=1))


class TestDisplay:
    def test_label_prefers_name(self) -> None:
        profile = ProfileData(pubkey=AUTHOR_HEX, name="alice", display_name="Alice")
        assert profile.display_label() == "alice"

    def test_label_falls_back_to_display_name(self) -> None:
        profile = ProfileData(pubkey=AUTHOR_HEX, name="", display_name="Alice")
        assert profile.display_label() == "Alice"

    def test_label_falls_back_to_short_key(self) -> None:
        assert ProfileData(pubkey=AUTHOR_HEX).display_label() == "7e7e9c42...df4e"

    def test_avatar_picture(self) -> None:
        profile = ProfileData(pubkey=AUTHOR_HEX, picture="https://example.com/a.png")
        assert profile.avatar_url() == "https://example.com/a.png"

    @pytest.mark.parametrize("picture", [None, "", "javascript:alert(1)", "data:image/png;base64,AA"])
    def test_avatar_fallback(self, picture: str | None) -> None:
        profile = ProfileData(pubkey=AUTHOR_HEX, picture=picture)
        assert profile.avatar_url() == fallback_avatar(AUTHOR_HEX)

    def test_fallback_avatar_url(self) -> None:
        assert fallback_avatar(AUTHOR_HEX) == f"https://robohash.org/{AUTHOR_HEX}?set=set5"

    def test_frozen(self) -> None:
        profile = ProfileData(pubkey=AUTHOR_HEX)
        with pytest.raises(ValueError):
            profile.name = "mallory"  # type: ignore[misc]
