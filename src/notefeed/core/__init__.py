"""Core layer providing the ambient foundation for the feed service.

Sits in the middle of the diamond DAG -- depends only on
``notefeed.models`` and is depended upon by ``notefeed.services``.

Attributes:
    Logger: Event-name plus keyword-context logger; text or JSON output is
        chosen once by [setup_logging()][notefeed.core.logger.setup_logging].
    NotefeedError: Root of the exception hierarchy.
        See [notefeed.core.exceptions][notefeed.core.exceptions].
    MetricsConfig: Prometheus ``/metrics`` endpoint configuration.
        See [MetricsConfig][notefeed.core.metrics.MetricsConfig].
    YAML: Safe YAML loading with ``yaml.safe_load()`` to prevent code execution.
        See [load_yaml()][notefeed.core.yaml.load_yaml].

See Also:
    [notefeed.models][notefeed.models]: Pure dataclass models consumed by this layer.
    [notefeed.services][notefeed.services]: Service implementations that depend on
        this layer.
"""

from .exceptions import ConfigurationError, IdentityNotFoundError, NotefeedError
from .logger import (
    JsonFormatter,
    LogFormat,
    Logger,
    StructuredFormatter,
    format_kv_pairs,
    setup_logging,
)
from .metrics import (
    FEED_REQUESTS,
    PIPELINE_DURATION_SECONDS,
    RELAY_QUERIES,
    MetricsConfig,
)
from .yaml import load_yaml


__all__ = [
    "FEED_REQUESTS",
    "PIPELINE_DURATION_SECONDS",
    "RELAY_QUERIES",
    "ConfigurationError",
    "IdentityNotFoundError",
    "JsonFormatter",
    "LogFormat",
    "Logger",
    "MetricsConfig",
    "NotefeedError",
    "StructuredFormatter",
    "format_kv_pairs",
    "load_yaml",
    "setup_logging",
]
