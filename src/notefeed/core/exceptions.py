"""notefeed exception hierarchy.

Lower layers (relay client, NIP-05 lookup, profile parsing) absorb their
own failures and degrade to empty results, raising only ``ValueError`` or
``TypeError`` for malformed records. The conditions below are the only ones
allowed to cross a component boundary.

Exception hierarchy:

```text
NotefeedError (base -- never raised directly)
├── ConfigurationError      -- config validation, missing identity, bad YAML
└── IdentityNotFoundError   -- no author key could be resolved (HTTP 404)
```

See Also:
    [FeedAggregator][notefeed.services.feed.pipeline.FeedAggregator]: Raises
        [IdentityNotFoundError][notefeed.core.exceptions.IdentityNotFoundError]
        before any relay query when the author cannot be resolved.
    [create_app()][notefeed.services.feed.service.create_app]: Maps
        [IdentityNotFoundError][notefeed.core.exceptions.IdentityNotFoundError]
        to a 404 page.
"""

from __future__ import annotations


class NotefeedError(Exception):
    """Base exception for all notefeed errors.

    Never raised directly -- always use a specific subclass.

    See Also:
        [ConfigurationError][notefeed.core.exceptions.ConfigurationError]:
            Invalid or missing configuration.
        [IdentityNotFoundError][notefeed.core.exceptions.IdentityNotFoundError]:
            The feed author could not be resolved.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(NotefeedError):
    """Invalid or missing configuration (YAML, env vars, CLI flags).

    See Also:
        [load_yaml()][notefeed.core.yaml.load_yaml]: YAML loading function
            that may trigger configuration errors.
    """


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class IdentityNotFoundError(NotefeedError):
    """No author key could be resolved from the configured identity.

    Raised when neither a literal key, a NIP-05 lookup, nor a fallback key
    yields a usable pubkey. This is the only failure surfaced to the reader
    of the feed.

    Attributes:
        identity: The handle or key that failed to resolve, if any.
    """

    def __init__(self, identity: str | None = None) -> None:
        self.identity = identity
        super().__init__("Could not resolve pubkey for handle.")
