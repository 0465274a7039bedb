"""Render-ready projection of an aggregation state.

[project_page()][notefeed.services.feed.projection.project_page] is a pure
function: it slices ``main_ids`` for the requested page and denormalizes
every post into plain frozen views, so the template never has to look
anything up. Missing profiles or posts fall back to placeholders; lookups
never fail, and neither does an out-of-range timestamp.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from notefeed.core.logger import Logger
from notefeed.nips.nip19 import encode_npub, shorten
from notefeed.nips.profile import fallback_avatar

from .references import extract_references


if TYPE_CHECKING:
    from notefeed.models.event import Event

    from .pipeline import AggregationState


_logger = Logger("feed.projection")

ELLIPSIS = "\N{HORIZONTAL ELLIPSIS}"


@dataclass(frozen=True, slots=True)
class AuthorView:
    """Display data for one key.

    Attributes:
        pubkey: Hex key.
        name: Profile name, display name, or the shortened key.
        avatar_url: Profile picture or the generated avatar.
        url: Gateway link to the author.
        has_profile: Whether a kind-0 profile was found.
    """

    pubkey: str
    name: str
    avatar_url: str
    url: str
    has_profile: bool = False


@dataclass(frozen=True, slots=True)
class ParentView:
    """The post another post replies to.

    ``resolved`` is False when the parent was referenced but never arrived;
    only ``id``, ``short_id`` and ``url`` are meaningful then.
    """

    id: str
    short_id: str
    url: str
    resolved: bool
    author: AuthorView | None = None
    content: str = ""
    mentions: tuple[AuthorView, ...] = field(default=())


@dataclass(frozen=True, slots=True)
class PostView:
    """One post of the author, fully denormalized.

    Attributes:
        id: Event id.
        url: Gateway link to the post.
        content: Raw content (formatting happens at render time).
        created_at: Author-supplied timestamp as an aware UTC datetime, or
            ``None`` when it cannot be represented (e.g. past year 9999).
        author: The post's author.
        parent: The replied-to post, or ``None`` when not a reply.
        mentions: Authors mentioned in the content, in order.
    """

    id: str
    url: str
    content: str
    created_at: datetime | None
    author: AuthorView
    parent: ParentView | None = None
    mentions: tuple[AuthorView, ...] = field(default=())


@dataclass(frozen=True, slots=True)
class FeedPage:
    """One page of the feed.

    Attributes:
        posts: Posts on this page, newest first. Empty when there are none.
        page: 1-indexed page number.
        total_pages: At least 1.
        has_prev: Whether a previous page exists.
        has_next: Whether a next page may hold posts.
        author: The feed author.
    """

    posts: tuple[PostView, ...]
    page: int
    total_pages: int
    has_prev: bool
    has_next: bool
    author: AuthorView


def truncate(text: str, max_length: int | None) -> str:
    """Cut *text* to *max_length* characters plus an ellipsis (``None``: no limit)."""
    if max_length is None or len(text) <= max_length:
        return text
    return text[:max_length].rstrip() + ELLIPSIS


def to_datetime(event: Event) -> datetime | None:
    """*event*'s timestamp as an aware UTC datetime, or ``None`` if out of range."""
    try:
        return datetime.fromtimestamp(event.created_at, tz=UTC)
    except (ValueError, OverflowError, OSError) as e:
        _logger.debug(
            "timestamp_out_of_range", id=event.id, created_at=event.created_at, error=str(e)
        )
        return None


class _Projector:
    """Lookup helpers bound to one state; memoizes author views."""

    def __init__(
        self, state: AggregationState, link_base: str, parent_preview_length: int | None
    ) -> None:
        self._state = state
        self._link_base = link_base.rstrip("/")
        self._parent_preview_length = parent_preview_length
        self._authors: dict[str, AuthorView] = {}

    def link(self, target: str) -> str:
        return f"{self._link_base}/{target}"

    def author(self, pubkey: str) -> AuthorView:
        view = self._authors.get(pubkey)
        if view is not None:
            return view

        profile = self._state.profiles.get(pubkey)
        if profile is not None:
            name, avatar = profile.display_label(), profile.avatar_url()
        else:
            name, avatar = shorten(pubkey), fallback_avatar(pubkey)
        view = AuthorView(
            pubkey=pubkey,
            name=name,
            avatar_url=avatar,
            url=self.link(encode_npub(pubkey) or pubkey),
            has_profile=profile is not None,
        )
        self._authors[pubkey] = view
        return view

    def mentions(self, event: Event) -> tuple[AuthorView, ...]:
        return tuple(self.author(pubkey) for pubkey in extract_references(event).mentioned_pubkeys)

    def parent(self, event: Event) -> ParentView | None:
        parent_id = extract_references(event).parent_id
        if parent_id is None:
            return None
        parent = self._state.posts.get(parent_id)
        if parent is None:
            return ParentView(
                id=parent_id,
                short_id=shorten(parent_id),
                url=self.link(parent_id),
                resolved=False,
            )
        return ParentView(
            id=parent.id,
            short_id=shorten(parent.id),
            url=self.link(parent.id),
            resolved=True,
            author=self.author(parent.pubkey),
            content=truncate(parent.content, self._parent_preview_length),
            mentions=self.mentions(parent),
        )

    def post(self, event: Event) -> PostView:
        return PostView(
            id=event.id,
            url=self.link(event.id),
            content=event.content,
            created_at=to_datetime(event),
            author=self.author(event.pubkey),
            parent=self.parent(event),
            mentions=self.mentions(event),
        )


def project_page(
    state: AggregationState,
    page: int,
    page_size: int,
    link_base: str,
    *,
    parent_preview_length: int | None = None,
) -> FeedPage:
    """Project *state* into the views for 1-indexed *page*.

    Args:
        state: Output of [FeedAggregator.run()][notefeed.services.feed.pipeline.FeedAggregator.run].
        page: Requested page; values below 1 are treated as 1.
        page_size: Posts per page.
        link_base: Web gateway prefix for links (e.g. ``https://njump.me``).
        parent_preview_length: Characters of a resolved parent's content to
            keep; longer content is cut and ends with an ellipsis.

    Returns:
        The [FeedPage][notefeed.services.feed.projection.FeedPage] for *page*.
    """
    page = max(page, 1)
    projector = _Projector(state, link_base, parent_preview_length)

    start = (page - 1) * page_size
    posts = tuple(
        projector.post(state.posts[post_id])
        for post_id in state.main_ids[start : start + page_size]
        if post_id in state.posts
    )

    total_pages = max(math.ceil(len(state.main_ids) / page_size), 1)
    return FeedPage(
        posts=posts,
        page=page,
        total_pages=total_pages,
        has_prev=page > 1,
        has_next=page < total_pages or (page == total_pages and state.more_available),
        author=projector.author(state.author),
    )
