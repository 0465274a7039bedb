"""
Type-filtered extraction of known fields from author-controlled JSON.

Kind-0 content has no enforced schema: any key may hold any JSON value.
A model lists the keys it understands in a
[FieldSpec][notefeed.nips.parsing.FieldSpec], grouped by expected type,
and [parse_fields()][notefeed.nips.parsing.parse_fields] keeps exactly
those keys whose values have that type. Nothing here raises on bad data.

See Also:
    [BaseData][notefeed.nips.base.BaseData]: Applies a model's
        ``_FIELD_SPEC`` before construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


def _is_clean_str(value: Any) -> bool:
    # Null bytes are rejected: they break HTML output and most log sinks.
    return isinstance(value, str) and "\x00" not in value


def _is_bool(value: Any) -> bool:
    return isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Accepted keys, grouped by the type their values must have.

    Attributes:
        str_fields: Keys whose values must be strings without null bytes.
        bool_fields: Keys whose values must be JSON booleans (``1`` is not).
    """

    str_fields: frozenset[str] = frozenset()
    bool_fields: frozenset[str] = frozenset()

    def checks(self) -> Iterator[tuple[str, Callable[[Any], bool]]]:
        """Yield ``(key, predicate)`` for every accepted key."""
        for name in self.str_fields:
            yield name, _is_clean_str
        for name in self.bool_fields:
            yield name, _is_bool


def parse_fields(data: dict[str, Any], spec: FieldSpec) -> dict[str, Any]:
    """Return the entries of *data* that *spec* accepts; drop everything else."""
    return {
        name: data[name] for name, accepts in spec.checks() if name in data and accepts(data[name])
    }


__all__ = ["FieldSpec", "parse_fields"]
