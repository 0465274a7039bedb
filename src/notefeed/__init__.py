r"""notefeed -- A single-author Nostr feed rendered as a web page.

Resolves one author (literal key or NIP-05 handle), pulls their recent
notes from a list of relays, enriches them with replied-to posts and
profiles, and serves the result as a paginated HTML page.

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
              services         Aggregation pipeline, rendering, HTTP app
             /   |   \
          core  nips  utils    Logging, config, metrics, NIP-05/19, relay client
             \   |   /
              models           Pure frozen dataclasses (zero I/O)
```

Note:
    Import directly from subpackages::

        from notefeed.models import Relay
        from notefeed.services.feed import FeedConfig, create_app
"""

from importlib.metadata import version as _get_version


__version__ = _get_version("notefeed")

__all__ = ["__version__"]
