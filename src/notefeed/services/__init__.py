"""Business logic: the top layer of the diamond DAG.

Depends on [notefeed.core][notefeed.core], [notefeed.nips][notefeed.nips],
[notefeed.utils][notefeed.utils] and [notefeed.models][notefeed.models].

Attributes:
    feed: The single-author feed (relay fetcher, aggregation pipeline,
        projection, HTML rendering and the FastAPI app).
"""

from .feed import FeedConfig, create_app


__all__ = ["FeedConfig", "create_app"]
