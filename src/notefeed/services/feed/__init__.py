"""Single-author Nostr feed rendered as HTML.

See Also:
    [create_app()][notefeed.services.feed.service.create_app]: The FastAPI app.
    [FeedConfig][notefeed.services.feed.configs.FeedConfig]: Service configuration.
    [FeedAggregator][notefeed.services.feed.pipeline.FeedAggregator]: The
        per-request aggregation pipeline.
"""

from .configs import FeedConfig, FetchConfig, IdentityConfig, PageConfig, ServerConfig
from .fetcher import RelayFetcher
from .identity import IdentityResolver
from .pipeline import AggregationState, FeedAggregator
from .projection import AuthorView, FeedPage, ParentView, PostView, project_page
from .references import References, extract_references
from .render import format_content, render_not_found, render_page
from .service import create_app


__all__ = [
    "AggregationState",
    "AuthorView",
    "FeedAggregator",
    "FeedConfig",
    "FeedPage",
    "FetchConfig",
    "IdentityConfig",
    "IdentityResolver",
    "PageConfig",
    "ParentView",
    "PostView",
    "References",
    "RelayFetcher",
    "ServerConfig",
    "create_app",
    "extract_references",
    "format_content",
    "project_page",
    "render_not_found",
    "render_page",
]
