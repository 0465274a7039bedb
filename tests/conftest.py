"""
Pytest configuration and shared fixtures for notefeed tests.

Provides:
- A ``make_event`` factory producing valid events
- Isolation from ``NOTEFEED_*`` environment variables
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from notefeed.models import Event, Relay
from tests.fixtures.keys import AUTHOR_HEX, event_id


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


@pytest.fixture(autouse=True)
def _clear_identity_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host ``NOTEFEED_*`` variables out of config validation."""
    monkeypatch.delenv("NOTEFEED_PUBKEY", raising=False)
    monkeypatch.delenv("NOTEFEED_HANDLE", raising=False)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def relay() -> Relay:
    return Relay("wss://relay.damus.io")


@pytest.fixture
def make_event() -> Any:
    """Factory for valid events; keyword arguments override the defaults."""

    def _make(
        n: int = 1,
        *,
        pubkey: str = AUTHOR_HEX,
        created_at: int = 1_700_000_000,
        kind: int = 1,
        content: str = "",
        tags: tuple[tuple[str, ...], ...] = (),
    ) -> Event:
        return Event(
            id=event_id(n),
            pubkey=pubkey,
            created_at=created_at,
            kind=kind,
            content=content,
            tags=tags,
        )

    return _make
