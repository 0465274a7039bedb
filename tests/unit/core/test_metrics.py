"""Unit tests for core.metrics module."""

import pytest
from pydantic import ValidationError

from notefeed.core.metrics import (
    FEED_REQUESTS,
    RELAY_QUERIES,
    MetricsConfig,
    render_latest,
)


class TestMetricsConfig:
    def test_defaults(self) -> None:
        config = MetricsConfig()
        assert config.enabled is False
        assert config.path == "/metrics"

    def test_path_must_be_absolute(self) -> None:
        with pytest.raises(ValidationError):
            MetricsConfig(path="metrics")


class TestRenderLatest:
    def test_exposes_feed_metrics(self) -> None:
        RELAY_QUERIES.labels(relay="wss://relay.damus.io", outcome="completed").inc()
        FEED_REQUESTS.labels(status="ok").inc()

        body, content_type = render_latest()

        text = body.decode()
        assert content_type.startswith("text/plain")
        series = 'notefeed_relay_queries_total{relay="wss://relay.damus.io",outcome="completed"}'
        assert series in text
        assert 'notefeed_feed_requests_total{status="ok"}' in text
        assert "notefeed_pipeline_duration_seconds_bucket" in text
