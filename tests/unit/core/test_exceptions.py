"""Unit tests for the notefeed exception hierarchy.

Tests verify:
- issubclass relationships match the documented tree
- IdentityNotFoundError carries the identity and a fixed message
"""

import pytest

from notefeed.core.exceptions import ConfigurationError, IdentityNotFoundError, NotefeedError


class TestExceptionHierarchy:
    @pytest.mark.parametrize("exc_cls", [ConfigurationError, IdentityNotFoundError])
    def test_inherits_from_notefeed_error(self, exc_cls: type) -> None:
        assert issubclass(exc_cls, NotefeedError)

    def test_siblings_unrelated(self) -> None:
        assert not issubclass(ConfigurationError, IdentityNotFoundError)
        assert not issubclass(IdentityNotFoundError, ConfigurationError)

    def test_caught_by_base(self) -> None:
        with pytest.raises(NotefeedError):
            raise ConfigurationError("bad config")


class TestIdentityNotFoundError:
    def test_message(self) -> None:
        assert str(IdentityNotFoundError("alice@example.com")) == (
            "Could not resolve pubkey for handle."
        )

    def test_identity_attribute(self) -> None:
        assert IdentityNotFoundError("alice@example.com").identity == "alice@example.com"

    def test_identity_optional(self) -> None:
        assert IdentityNotFoundError().identity is None
