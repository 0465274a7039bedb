"""Event aggregation and enrichment pipeline.

Builds everything one feed page needs in a bounded number of relay
round-trips:

1. **Identity**: resolve the author key. Unresolved raises
   [IdentityNotFoundError][notefeed.core.exceptions.IdentityNotFoundError]
   before any relay is contacted.
2. **Primary fetch**: the author's recent text notes, newest first.
3. **Reference scan**: parents not yet known, authors and mentions.
4. **Parent fetch**: one query for all missing parents.
5. **Mention rescan**: now including the fetched parents.
6. **Profile fetch**: one query for the feed author, every post author
   and every mentioned key.

Each fetch stage issues exactly one [RelayFetcher][notefeed.services.feed.fetcher.RelayFetcher]
call, however many ids or authors it needs. Failures inside a stage degrade
to fewer results; only the identity stage can fail the request.

See Also:
    [project_page()][notefeed.services.feed.projection.project_page]: Turns
        the resulting [AggregationState][notefeed.services.feed.pipeline.AggregationState]
        into render-ready views.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from notefeed.core.exceptions import IdentityNotFoundError
from notefeed.core.logger import Logger
from notefeed.core.metrics import PIPELINE_DURATION_SECONDS
from notefeed.models import EventKind, is_hex64
from notefeed.nips.profile import ProfileData
from notefeed.utils.protocol import create_filter

from .fetcher import RelayFetcher
from .identity import IdentityResolver
from .references import extract_references, mentioned_pubkeys


if TYPE_CHECKING:
    from collections.abc import Callable

    from notefeed.models.event import Event

    from .configs import FeedConfig


SECONDS_PER_DAY = 86_400


@dataclass(slots=True)
class AggregationState:
    """Per-request working set, discarded after rendering.

    Attributes:
        author: Resolved hex key of the feed author.
        posts: Every known post by id; the first copy seen wins.
        profiles: Parsed profiles by key; the first parsed record wins.
        main_ids: Ids of the author's posts, newest first (stable on ties).
        requested_parents: Parent ids that were asked for in the parent stage.
        more_available: Whether the primary fetch hit its limit while a larger
            page could still raise it, so a next page may hold more posts.
    """

    author: str
    posts: dict[str, Event] = field(default_factory=dict)
    profiles: dict[str, ProfileData] = field(default_factory=dict)
    main_ids: list[str] = field(default_factory=list)
    requested_parents: set[str] = field(default_factory=set)
    more_available: bool = False

    def add_post(self, event: Event) -> bool:
        """Insert *event* unless its id is known; return whether it was added."""
        if event.id in self.posts:
            return False
        self.posts[event.id] = event
        return True

    def add_profile(self, profile: ProfileData) -> bool:
        """Insert *profile* unless its key is known; return whether it was added."""
        if profile.pubkey in self.profiles:
            return False
        self.profiles[profile.pubkey] = profile
        return True


class FeedAggregator:
    """Run the aggregation pipeline for one request.

    A new aggregator (and state) is built per request; nothing is shared
    between requests.
    """

    def __init__(
        self,
        config: FeedConfig,
        *,
        resolver: IdentityResolver | None = None,
        fetcher: RelayFetcher | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._resolver = resolver or IdentityResolver(config.identity)
        self._fetcher = fetcher or RelayFetcher(
            config.relays,
            timeout=config.fetch.query_timeout,
            race=config.fetch.race,
        )
        self._clock = clock
        self._logger = Logger("feed.pipeline")

    def primary_limit(self, page: int) -> int:
        """``page_size * page`` capped at ``max_limit``."""
        page_config = self._config.page
        return min(page_config.page_size * max(page, 1), page_config.max_limit)

    async def run(self, page: int = 1) -> AggregationState:
        """Aggregate everything needed to render *page*.

        Raises:
            IdentityNotFoundError: If the author key cannot be resolved.
        """
        started = time.monotonic()

        pubkey = await self._resolver.resolve()
        if pubkey is None:
            self._logger.warning("identity_unresolved", handle=self._config.identity.handle)
            raise IdentityNotFoundError(self._config.identity.handle)

        state = AggregationState(author=pubkey)
        await self._fetch_primary(state, page)
        pending_authors = await self._fetch_parents(state)
        await self._fetch_profiles(state, pending_authors)

        duration = time.monotonic() - started
        PIPELINE_DURATION_SECONDS.observe(duration)
        self._logger.info(
            "pipeline_completed",
            author=pubkey,
            page=page,
            posts=len(state.main_ids),
            known=len(state.posts),
            profiles=len(state.profiles),
            duration=f"{duration:.3f}",
        )
        return state

    async def _fetch(self, **criteria: Any) -> list[Event]:
        event_filter = create_filter(**criteria)
        if event_filter is None:
            self._logger.debug("fetch_skipped", reason="no valid keys or ids")
            return []
        return await self._fetcher.fetch(event_filter)

    async def _fetch_primary(self, state: AggregationState, page: int) -> None:
        limit = self.primary_limit(page)
        since = max(int(self._clock()) - self._config.fetch.lookback_days * SECONDS_PER_DAY, 0)
        events = await self._fetch(
            kinds=(EventKind.TEXT_NOTE,), authors=(state.author,), since=since, limit=limit
        )

        mains: list[Event] = []
        for event in events:
            if event.pubkey != state.author or event.kind != EventKind.TEXT_NOTE:
                continue
            if state.add_post(event):
                mains.append(event)
        mains.sort(key=lambda e: e.created_at, reverse=True)
        state.main_ids = [event.id for event in mains]
        state.more_available = len(mains) >= limit and limit < self._config.page.max_limit

    async def _fetch_parents(self, state: AggregationState) -> dict[str, None]:
        """Fetch missing parents; return the ordered set of authors to look up."""
        pending_parents: dict[str, None] = {}
        # The feed author is always looked up, even with no posts.
        pending_authors: dict[str, None] = {state.author: None}
        for event in list(state.posts.values()):
            refs = extract_references(event)
            if refs.parent_id is not None and refs.parent_id not in state.posts:
                pending_parents[refs.parent_id] = None
            pending_authors[event.pubkey] = None
            pending_authors.update(dict.fromkeys(refs.mentioned_pubkeys))

        state.requested_parents = set(pending_parents)
        ids = tuple(parent for parent in pending_parents if is_hex64(parent))
        if ids:
            for event in await self._fetch(ids=ids):
                if state.add_post(event):
                    pending_authors[event.pubkey] = None
            self._logger.debug(
                "parents_fetched",
                requested=len(ids),
                resolved=sum(1 for parent in ids if parent in state.posts),
            )

        for event in state.posts.values():
            pending_authors.update(dict.fromkeys(mentioned_pubkeys(event)))
        return pending_authors

    async def _fetch_profiles(self, state: AggregationState, pending_authors: dict[str, None]) -> None:
        events = await self._fetch(kinds=(EventKind.SET_METADATA,), authors=pending_authors)
        for event in events:
            if event.kind != EventKind.SET_METADATA:
                continue
            try:
                profile = ProfileData.from_event(event)
            except ValueError as e:
                self._logger.debug("profile_invalid", pubkey=event.pubkey, error=str(e))
                continue
            state.add_profile(profile)
