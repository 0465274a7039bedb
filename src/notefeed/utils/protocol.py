"""Single-relay query client built on nostr-sdk.

Each query uses a fresh one-relay ``nostr_sdk.Client``: the relay is added
and connected, one filter is sent through ``fetch_events`` (which returns
when the relay signals the end of its stored events or the timeout
passes), and the client is shut down. Results are decoded into
[Event][notefeed.models.event.Event] through the same validated step used
for any relay JSON.

Attributes:
    create_filter: Build a ``nostr_sdk.Filter`` from hex ids and keys.
    query_relay: One-shot fetch returning a
        [QueryResult][notefeed.utils.protocol.QueryResult].
    QueryOutcome: How a query completed.

Note:
    [query_relay()][notefeed.utils.protocol.query_relay] **never raises**
    except on cancellation. Connection and client failures yield an empty
    result with ``outcome == QueryOutcome.ERROR``. A query that ran to its
    deadline yields whatever nostr-sdk collected with
    ``outcome == QueryOutcome.TIMEOUT``. Events that fail decoding are
    skipped individually. There is no retry.

See Also:
    [RelayFetcher][notefeed.services.feed.fetcher.RelayFetcher]: Falls back
        across relays and records each outcome in Prometheus.
    [Event.from_dict()][notefeed.models.event.Event.from_dict]: Decode step
        applied to every returned event.

Examples:
    ```python
    from notefeed.models import Relay
    from notefeed.utils.protocol import create_filter, query_relay

    event_filter = create_filter(kinds=(1,), limit=10)
    result = await query_relay(Relay("wss://relay.damus.io"), event_filter)
    result.outcome   # QueryOutcome.COMPLETED
    len(result.events)
    ```
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from nostr_sdk import (
    ClientBuilder,
    EventId,
    Filter,
    Kind,
    NostrSdkError,
    PublicKey,
    RelayUrl,
    Timestamp,
)

from notefeed.models.event import Event


if TYPE_CHECKING:
    from collections.abc import Iterable

    from nostr_sdk import Client

    from notefeed.models.relay import Relay


logger = logging.getLogger(__name__)


DEFAULT_QUERY_TIMEOUT = 5.0
# Added to the fetch timeout to bound connect and a relay that never answers.
_DEADLINE_GRACE = 2.0


class QueryOutcome(StrEnum):
    """How a relay query completed.

    Attributes:
        COMPLETED: The relay answered before the timeout.
        TIMEOUT: The timeout passed first; events may be partial.
        ERROR: The relay URL was rejected or the client failed.
    """

    COMPLETED = "completed"
    TIMEOUT = "timeout"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Events returned by one relay for one filter.

    Attributes:
        relay: The queried relay.
        events: Decoded events in the order nostr-sdk returned them.
        outcome: How the query completed.
        reason: Error description, if any.
    """

    relay: Relay
    events: tuple[Event, ...] = field(default=())
    outcome: QueryOutcome = QueryOutcome.COMPLETED
    reason: str | None = None


def _parse_all(values: Iterable[str], parser: type[PublicKey | EventId]) -> list[Any]:
    parsed: list[Any] = []
    for value in values:
        try:
            parsed.append(parser.parse(value))
        except NostrSdkError as e:
            logger.debug("filter_value_rejected value=%s error=%s", value, e)
    return parsed


def create_filter(
    *,
    kinds: Iterable[int] = (),
    authors: Iterable[str] = (),
    ids: Iterable[str] = (),
    since: int | None = None,
    limit: int | None = None,
) -> Filter | None:
    """Build a ``nostr_sdk.Filter`` from hex keys and event ids.

    Keys and ids that nostr-sdk rejects are skipped and logged.

    Returns:
        The filter, or ``None`` when *authors* or *ids* were given but none
        of them parsed: dropping the constraint would match every event.
    """
    authors, ids = list(authors), list(ids)
    f = Filter()
    if kinds:
        f = f.kinds([Kind(int(k)) for k in kinds])
    if authors:
        parsed_authors = _parse_all(authors, PublicKey)
        if not parsed_authors:
            return None
        f = f.authors(parsed_authors)
    if ids:
        parsed_ids = _parse_all(ids, EventId)
        if not parsed_ids:
            return None
        f = f.ids(parsed_ids)
    if since is not None:
        f = f.since(Timestamp.from_secs(since))
    if limit is not None:
        f = f.limit(limit)
    return f


def create_client() -> Client:
    """Create a read-only client (call ``add_relay()`` before use)."""
    return ClientBuilder().build()


def _decode(raw_events: Iterable[Any], relay: Relay) -> tuple[Event, ...]:
    events: list[Event] = []
    for evt in raw_events:
        try:
            events.append(Event.from_dict(json.loads(evt.as_json())))
        except (ValueError, TypeError) as e:
            logger.debug("relay_event_invalid relay=%s error=%s", relay.url, e)
    return tuple(events)


async def query_relay(
    relay: Relay,
    event_filter: Filter,
    *,
    timeout: float = DEFAULT_QUERY_TIMEOUT,  # noqa: ASYNC109
) -> QueryResult:
    """Fetch the stored events matching *event_filter* from *relay*.

    Args:
        relay: Relay to query.
        event_filter: nostr-sdk filter, usually from
            [create_filter()][notefeed.utils.protocol.create_filter].
        timeout: Seconds nostr-sdk waits for the relay to finish answering.

    Returns:
        A [QueryResult][notefeed.utils.protocol.QueryResult]. Never raises
        except ``asyncio.CancelledError``.
    """
    started = time.monotonic()
    client = create_client()
    try:
        async with asyncio.timeout(timeout + _DEADLINE_GRACE):
            await client.add_relay(RelayUrl.parse(relay.url))
            await client.connect()
            fetched = await client.fetch_events(event_filter, timedelta(seconds=timeout))
        events = _decode(fetched.to_vec(), relay)
    except TimeoutError:
        logger.debug("relay_query_timeout relay=%s", relay.url)
        return QueryResult(relay=relay, outcome=QueryOutcome.TIMEOUT)
    except (NostrSdkError, OSError, ValueError) as e:
        reason = str(e) or type(e).__name__
        logger.debug("relay_query_failed relay=%s error=%s", relay.url, reason)
        return QueryResult(relay=relay, outcome=QueryOutcome.ERROR, reason=reason)
    finally:
        # nostr-sdk Rust FFI can raise arbitrary exception types during shutdown.
        with contextlib.suppress(Exception):
            await client.shutdown()

    # nostr-sdk returns what it has collected when its own timeout passes.
    timed_out = time.monotonic() - started >= timeout
    outcome = QueryOutcome.TIMEOUT if timed_out else QueryOutcome.COMPLETED
    logger.debug(
        "relay_query_completed relay=%s outcome=%s events=%d", relay.url, outcome, len(events)
    )
    return QueryResult(relay=relay, events=events, outcome=outcome)
