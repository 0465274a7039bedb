"""
Prometheus metrics collection and exposition.

Defines module-level metric objects (singletons, thread-safe) shared by the
relay client, the aggregation pipeline and the HTTP surface. The feed app
exposes them in text format at ``MetricsConfig.path`` when enabled.

Architecture:
    RELAY_QUERIES:               One increment per relay query, by outcome.
    FEED_REQUESTS:               One increment per feed page request, by status.
    PIPELINE_DURATION_SECONDS:   Histogram of full aggregation latency.
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class MetricsConfig(BaseModel):
    """Configuration for the Prometheus metrics endpoint.

    The endpoint is mounted on the feed app itself, so only the path is
    configurable. It is only registered when ``enabled`` is True.
    """

    enabled: bool = Field(default=False, description="Expose the metrics endpoint")
    path: str = Field(default="/metrics", pattern=r"^/", description="Metrics endpoint path")


# ---------------------------------------------------------------------------
# Feed Metrics
#
# relay_queries_total outcomes:
#   completed, timeout, error
# feed_requests_total statuses:
#   ok, not_found, error
# ---------------------------------------------------------------------------

RELAY_QUERIES = Counter(
    "notefeed_relay_queries",
    "Relay queries by completion outcome",
    ["relay", "outcome"],
)

FEED_REQUESTS = Counter(
    "notefeed_feed_requests",
    "Feed page requests by response status",
    ["status"],
)

PIPELINE_DURATION_SECONDS = Histogram(
    "notefeed_pipeline_duration_seconds",
    "Duration of one feed aggregation in seconds",
    buckets=(0.1, 0.25, 0.5, 1, 2.5, 5, 10, 20, 30),
)


def render_latest() -> tuple[bytes, str]:
    """Return the current exposition body and its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST
