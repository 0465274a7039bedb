"""Multi-relay fetch with ordered fallback.

Relays are unreliable: any of them may be down, slow, or simply not hold
the requested events. [RelayFetcher][notefeed.services.feed.fetcher.RelayFetcher]
asks them in configured order and returns the **first non-empty** answer.
Results are never merged across relays.

With ``race=True`` all relays are queried at once; the first non-empty
answer wins and the queries still in flight are cancelled.

See Also:
    [query_relay()][notefeed.utils.protocol.query_relay]: The single-relay
        client used for every attempt.
    [FeedAggregator][notefeed.services.feed.pipeline.FeedAggregator]: Issues
        exactly one fetch per pipeline stage.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from notefeed.core.logger import Logger
from notefeed.core.metrics import RELAY_QUERIES
from notefeed.utils.protocol import DEFAULT_QUERY_TIMEOUT, QueryResult, query_relay


if TYPE_CHECKING:
    from collections.abc import Sequence

    from nostr_sdk import Filter

    from notefeed.models.event import Event
    from notefeed.models.relay import Relay


class RelayFetcher:
    """Fetch events for one filter from the first relay that has any.

    Attributes:
        relays: Relays in fallback order.
        timeout: Per-relay deadline in seconds.
        race: Query all relays concurrently instead of sequentially.
    """

    def __init__(
        self,
        relays: Sequence[Relay],
        *,
        timeout: float = DEFAULT_QUERY_TIMEOUT,  # noqa: ASYNC109
        race: bool = False,
    ) -> None:
        self.relays = tuple(relays)
        self.timeout = timeout
        self.race = race
        self._logger = Logger("feed.fetcher")

    async def fetch(self, filter_: Filter) -> list[Event]:
        """Return the events of the first relay with a non-empty answer.

        Returns an empty list when every relay is empty or unavailable.
        Never raises except on cancellation.
        """
        if self.race:
            events = await self._fetch_race(filter_)
        else:
            events = await self._fetch_sequential(filter_)
        if not events:
            self._logger.debug("fetch_empty", relays=len(self.relays), filter=filter_.as_json())
        return events

    async def _fetch_sequential(self, filter_: Filter) -> list[Event]:
        for relay in self.relays:
            result = await self._query(relay, filter_)
            if result.events:
                return list(result.events)
        return []

    async def _fetch_race(self, filter_: Filter) -> list[Event]:
        tasks = [asyncio.create_task(self._query(relay, filter_)) for relay in self.relays]
        try:
            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                if result.events:
                    return list(result.events)
            return []
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _query(self, relay: Relay, filter_: Filter) -> QueryResult:
        result = await query_relay(relay, filter_, timeout=self.timeout)
        RELAY_QUERIES.labels(relay=relay.url, outcome=result.outcome).inc()
        self._logger.debug(
            "relay_query_completed",
            relay=relay.url,
            outcome=result.outcome,
            events=len(result.events),
            reason=result.reason,
        )
        return result
