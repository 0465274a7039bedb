"""Pydantic base for models decoded from author-controlled JSON."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from .parsing import FieldSpec, parse_fields


class BaseData(BaseModel):
    """Frozen model whose raw input is filtered through ``_FIELD_SPEC``.

    Relay-supplied JSON carries no schema guarantees, so
    [parse()][notefeed.nips.base.BaseData.parse] keeps only the declared
    fields with the declared types; the result can be passed straight to
    the constructor.
    """

    model_config = ConfigDict(frozen=True)

    _FIELD_SPEC: ClassVar[FieldSpec] = FieldSpec()

    @classmethod
    def parse(cls, data: Any) -> dict[str, Any]:
        """Keyword arguments for the constructor; non-mappings yield ``{}``."""
        if not isinstance(data, dict):
            return {}
        return parse_fields(data, cls._FIELD_SPEC)
