"""Shared fixtures and helpers for services.feed test package."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import Any

import pytest
from nostr_sdk import Filter

from notefeed.models import Event
from notefeed.services.feed.configs import FeedConfig
from tests.fixtures.keys import AUTHOR_HEX


NOW = 1_700_000_000


def filter_fields(f: Filter) -> dict[str, Any]:
    """Decode a nostr-sdk filter into its NIP-01 JSON fields."""
    return json.loads(f.as_json())


class FakeFetcher:
    """Stands in for RelayFetcher; answers every filter through *responder*."""

    def __init__(self, responder: Callable[[Filter], Iterable[Event]] | None = None) -> None:
        self.calls: list[Filter] = []
        self._responder = responder or (lambda _f: ())

    async def fetch(self, filter_: Filter) -> list[Event]:
        self.calls.append(filter_)
        return list(self._responder(filter_))


class StaticResolver:
    """Stands in for IdentityResolver."""

    def __init__(self, pubkey: str | None) -> None:
        self.pubkey = pubkey
        self.calls = 0

    async def resolve(self) -> str | None:
        self.calls += 1
        return self.pubkey


def route(
    *,
    primary: Iterable[Event] = (),
    parents: Iterable[Event] = (),
    profiles: Iterable[Event] = (),
) -> Callable[[Filter], list[Event]]:
    """Responder that answers primary, parent-by-id and profile filters."""
    primary, parents, profiles = list(primary), list(parents), list(profiles)

    def _respond(f: Filter) -> list[Event]:
        fields = filter_fields(f)
        if "ids" in fields:
            return [e for e in parents if e.id in fields["ids"]]
        if fields.get("kinds") == [0]:
            return [e for e in profiles if e.pubkey in fields.get("authors", ())]
        if fields.get("kinds") == [1]:
            return primary
        return []

    return _respond


@pytest.fixture
def feed_config_dict() -> dict[str, Any]:
    return {
        "identity": {"pubkey": AUTHOR_HEX},
        "relays": ["wss://relay.one.example", "wss://relay.two.example"],
        "page": {"page_size": 2, "max_limit": 10},
    }


@pytest.fixture
def feed_config(feed_config_dict: dict[str, Any]) -> FeedConfig:
    return FeedConfig.from_dict(feed_config_dict)
