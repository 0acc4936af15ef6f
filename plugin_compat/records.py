"""Base model for records that carry extension fields."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_validator
from pydantic_core import to_jsonable_python


def _jsonable(value: Any) -> JsonValue:
    return to_jsonable_python(value, fallback=str)


def _detach(value: Any) -> Any:
    if isinstance(value, list):
        return [_detach(v) for v in value]
    if isinstance(value, dict):
        return {k: _detach(v) for k, v in value.items()}
    if isinstance(value, BaseModel):
        return value.model_copy(deep=True)
    return value


class OpenRecord(BaseModel):
    """A record with declared fields plus an open map of extension fields.

    Unknown keys are kept in ``model_extra``. Their values are normalised to
    JSON form on the way in so they survive translation unchanged.
    """

    model_config = ConfigDict(extra="allow")

    __pydantic_extra__: dict[str, JsonValue] = Field(init=False)

    @model_validator(mode="before")
    @classmethod
    def _normalise_extensions(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        out = dict(data)
        for key, value in data.items():
            if key not in cls.model_fields:
                out[key] = _jsonable(value)
        return out

    @property
    def extensions(self) -> dict[str, JsonValue]:
        """Extension fields, i.e. everything not declared on the model."""
        return dict(self.model_extra or {})

    def with_updates(self, updates: Mapping[str, Any]) -> Self:
        """Copy with ``updates`` applied to declared or extension fields."""
        fields = type(self).model_fields
        clean = {k: v if k in fields else _jsonable(v) for k, v in updates.items()}
        return self.model_copy(update=clean)

    def detached(self) -> Self:
        """Copy whose lists, dicts and nested models are independent of this record.

        Other objects, such as components holding callables, are shared.
        """
        fields = {name: _detach(getattr(self, name)) for name in type(self).model_fields}
        extra = {k: _detach(v) for k, v in (self.model_extra or {}).items()}
        copied = self.model_copy(update={**fields, **extra})
        object.__setattr__(copied, "__pydantic_fields_set__", set(self.model_fields_set))
        return copied
