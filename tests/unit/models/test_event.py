"""
Unit tests for models.event module.

Tests:
- Event.from_dict() decoding of relay JSON, including defaults
- Rejection of malformed ids, keys, timestamps and kinds
- tag_values() lookups
- Equality ignores the signature
"""

from typing import Any

import pytest

from notefeed.models import Event
from tests.fixtures.keys import AUTHOR_HEX, event_id


def _raw(**overrides: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "id": event_id(1),
        "pubkey": AUTHOR_HEX,
        "created_at": 1_700_000_000,
        "kind": 1,
        "tags": [["e", event_id(2)], ["p", AUTHOR_HEX]],
        "content": "hello",
        "sig": "ff" * 64,
    }
    raw.update(overrides)
    return raw


# =============================================================================
# from_dict() Tests
# =============================================================================


class TestFromDict:
    """Decoding untrusted relay payloads."""

    def test_full_event(self) -> None:
        event = Event.from_dict(_raw())
        assert event.id == event_id(1)
        assert event.pubkey == AUTHOR_HEX
        assert event.created_at == 1_700_000_000
        assert event.kind == 1
        assert event.content == "hello"
        assert event.tags == (("e", event_id(2)), ("p", AUTHOR_HEX))
        assert event.sig == "ff" * 64

    def test_missing_content_defaults_to_empty(self) -> None:
        raw = _raw()
        del raw["content"]
        assert Event.from_dict(raw).content == ""

    def test_null_content_defaults_to_empty(self) -> None:
        assert Event.from_dict(_raw(content=None)).content == ""

    def test_missing_tags_defaults_to_empty(self) -> None:
        raw = _raw()
        del raw["tags"]
        assert Event.from_dict(raw).tags == ()

    def test_malformed_tags_dropped(self) -> None:
        event = Event.from_dict(_raw(tags=[["e", event_id(2)], [], "x", ["p", 5]]))
        assert event.tags == (("e", event_id(2)),)

    def test_non_string_sig_becomes_empty(self) -> None:
        assert Event.from_dict(_raw(sig=None)).sig == ""

    def test_not_a_dict(self) -> None:
        with pytest.raises(TypeError, match="event must be a dict"):
            Event.from_dict(["EVENT"])

    @pytest.mark.parametrize("key", ["id", "pubkey", "created_at", "kind"])
    def test_missing_required_field(self, key: str) -> None:
        raw = _raw()
        del raw[key]
        with pytest.raises(ValueError, match=f"missing required field '{key}'"):
            Event.from_dict(raw)

    def test_uppercase_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="64 lowercase hex"):
            Event.from_dict(_raw(id=event_id(1).upper().replace("0", "A")))

    def test_short_pubkey_rejected(self) -> None:
        with pytest.raises(ValueError, match="pubkey"):
            Event.from_dict(_raw(pubkey="abcd"))

    def test_string_created_at_rejected(self) -> None:
        with pytest.raises(TypeError, match="created_at must be an int"):
            Event.from_dict(_raw(created_at="1700000000"))

    def test_negative_kind_rejected(self) -> None:
        with pytest.raises(ValueError, match="kind must be non-negative"):
            Event.from_dict(_raw(kind=-1))

    def test_tags_not_a_list(self) -> None:
        with pytest.raises(TypeError, match="tags must be a list"):
            Event.from_dict(_raw(tags="e"))

    def test_null_byte_content_rejected(self) -> None:
        with pytest.raises(ValueError, match="null bytes"):
            Event.from_dict(_raw(content="a\x00b"))


# =============================================================================
# Accessor Tests
# =============================================================================


class TestTagValues:
    def test_values_in_declaration_order(self) -> None:
        event = Event.from_dict(_raw(tags=[["e", "a"], ["p", "x"], ["e", "b"]]))
        assert event.tag_values("e") == ("a", "b")

    def test_valueless_tags_skipped(self) -> None:
        event = Event.from_dict(_raw(tags=[["e"], ["e", "a"]]))
        assert event.tag_values("e") == ("a",)

    def test_unknown_name(self) -> None:
        assert Event.from_dict(_raw()).tag_values("t") == ()


class TestEquality:
    def test_sig_ignored_for_equality(self) -> None:
        assert Event.from_dict(_raw(sig="aa")) == Event.from_dict(_raw(sig="bb"))
