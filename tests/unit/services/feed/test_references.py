"""
Unit tests for services.feed.references module.

Tests:
- parent_id(): last non-empty, non-self e tag
- mentioned_pubkeys(): distinct decoded npub/nprofile mentions in order
- extract_references() determinism
"""

from typing import Any

from notefeed.services.feed.references import (
    References,
    extract_references,
    mentioned_pubkeys,
    parent_id,
)
from tests.fixtures.keys import (
    AUTHOR_HEX,
    AUTHOR_NPUB,
    OTHER_HEX,
    OTHER_NPROFILE,
    OTHER_NPUB,
    event_id,
)


class TestParentId:
    def test_no_tags(self, make_event: Any) -> None:
        assert parent_id(make_event(1)) is None

    def test_single_e_tag(self, make_event: Any) -> None:
        assert parent_id(make_event(1, tags=(("e", event_id(2)),))) == event_id(2)

    def test_last_e_tag_wins(self, make_event: Any) -> None:
        event = make_event(1, tags=(("e", event_id(2), "", "root"), ("e", event_id(3), "", "reply")))
        assert parent_id(event) == event_id(3)

    def test_marker_order_not_interpreted(self, make_event: Any) -> None:
        event = make_event(1, tags=(("e", event_id(3), "", "reply"), ("e", event_id(2), "", "root")))
        assert parent_id(event) == event_id(2)

    def test_self_reference_and_empty_skipped(self, make_event: Any) -> None:
        event = make_event(1, tags=(("e", event_id(2)), ("e", event_id(1)), ("e", "")))
        assert parent_id(event) == event_id(2)

    def test_only_self_reference(self, make_event: Any) -> None:
        assert parent_id(make_event(1, tags=(("e", event_id(1)),))) is None

    def test_other_tags_ignored(self, make_event: Any) -> None:
        assert parent_id(make_event(1, tags=(("p", AUTHOR_HEX), ("q", event_id(2))))) is None


class TestMentionedPubkeys:
    def test_bare_and_uri_mentions(self, make_event: Any) -> None:
        event = make_event(1, content=f"cc nostr:{OTHER_NPUB} and {AUTHOR_NPUB}")
        assert mentioned_pubkeys(event) == (OTHER_HEX, AUTHOR_HEX)

    def test_deduplicated_across_forms(self, make_event: Any) -> None:
        event = make_event(1, content=f"{OTHER_NPUB} {OTHER_NPROFILE} nostr:{OTHER_NPUB}")
        assert mentioned_pubkeys(event) == (OTHER_HEX,)

    def test_malformed_and_non_key_identifiers_skipped(self, make_event: Any) -> None:
        broken = OTHER_NPUB[:-1] + ("q" if OTHER_NPUB[-1] != "q" else "p")
        event = make_event(1, content=f"{broken} note1{'q' * 58}")
        assert mentioned_pubkeys(event) == ()

    def test_p_tags_not_mentions(self, make_event: Any) -> None:
        assert mentioned_pubkeys(make_event(1, tags=(("p", OTHER_HEX),))) == ()


class TestExtractReferences:
    def test_combined(self, make_event: Any) -> None:
        event = make_event(1, content=f"re {OTHER_NPUB}", tags=(("e", event_id(2)),))
        assert extract_references(event) == References(
            parent_id=event_id(2), mentioned_pubkeys=(OTHER_HEX,)
        )

    def test_idempotent(self, make_event: Any) -> None:
        event = make_event(1, content=f"{AUTHOR_NPUB} {OTHER_NPUB}", tags=(("e", event_id(5)),))
        assert extract_references(event) == extract_references(event)

    def test_empty(self, make_event: Any) -> None:
        assert extract_references(make_event(1)) == References()
