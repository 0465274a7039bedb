"""Shared validation helpers for frozen dataclass models.

Private module, not part of the public API. Used by
``__post_init__`` and ``from_dict`` methods in sibling model modules to
enforce runtime type constraints on untrusted relay data.
"""

from __future__ import annotations

import re
from typing import Any

from .constants import PUBKEY_HEX_LENGTH


_HEX64_RE = re.compile(rf"^[0-9a-f]{{{PUBKEY_HEX_LENGTH}}}$")


def validate_instance(value: Any, expected: type, name: str) -> None:
    """Raise ``TypeError`` if *value* is not an instance of *expected*."""
    if not isinstance(value, expected):
        article = "an" if expected.__name__[0] in "AEIOUaeiou" else "a"
        raise TypeError(f"{name} must be {article} {expected.__name__}, got {type(value).__name__}")


def validate_int(value: Any, name: str) -> None:
    """Raise if *value* is not a non-negative ``int`` (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


def validate_str_no_null(value: Any, name: str) -> None:
    """Raise if *value* is not a ``str`` or contains null bytes."""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {type(value).__name__}")
    if "\x00" in value:
        raise ValueError(f"{name} contains null bytes")


def validate_hex64(value: Any, name: str) -> None:
    """Raise if *value* is not a 64-character lowercase hex string."""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {type(value).__name__}")
    if not _HEX64_RE.match(value):
        raise ValueError(f"{name} must be 64 lowercase hex characters")


def is_hex64(value: Any) -> bool:
    """Return ``True`` if *value* is a 64-character lowercase hex string."""
    return isinstance(value, str) and _HEX64_RE.match(value) is not None


def normalize_tags(raw: Any) -> tuple[tuple[str, ...], ...]:
    """Coerce a raw ``tags`` value into a tuple of string tuples.

    Missing tags become ``()``. Entries that are not lists, are empty, or
    contain a non-string member are dropped.
    """
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise TypeError(f"tags must be a list, got {type(raw).__name__}")
    tags: list[tuple[str, ...]] = []
    for tag in raw:
        if not isinstance(tag, list) or not tag:
            continue
        if not all(isinstance(v, str) for v in tag):
            continue
        tags.append(tuple(tag))
    return tuple(tags)
