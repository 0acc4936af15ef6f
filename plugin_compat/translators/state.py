"""Conversation state translation between the flat and enveloped shapes."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from plugin_compat.current import types as cur
from plugin_compat.legacy import types as leg
from plugin_compat.legacy.types import ARRAY_FIELDS, STRING_FIELDS
from plugin_compat.translators.memory import memory_to_current, memory_to_legacy

if TYPE_CHECKING:
    from plugin_compat.runtime_cache import RuntimeCache

# Character fields may be stored in ``values`` or at the top level of the envelope
CHARACTER_FIELDS: tuple[str, ...] = (
    "bio",
    "lore",
    "adjective",
    "topic",
    "topics",
    "message_directions",
    "post_directions",
    "character_post_examples",
    "character_message_examples",
)

_MEMORY_ARRAYS = ("recent_messages_data", "recent_interactions_data")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list | tuple):
        return "\n".join(v if isinstance(v, str) else json.dumps(v, default=str) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, str | int | float | bool)


def _buckets(state: cur.State) -> tuple[tuple[str, dict[str, Any]], ...]:
    return (("values", state.values), ("data", state.data), ("top", state.model_extra or {}))


def _lookup(state: cur.State, name: str) -> tuple[bool, Any]:
    """Find ``name`` in values/data first, then in the top-level extensions."""
    for _, source in _buckets(state):
        if name in source:
            return True, source[name]
    return False, None


# -- current -> legacy -------------------------------------------------------


def _items_to_legacy(name: str, items: list[Any], cache: RuntimeCache | None) -> list[Any]:
    if name in _MEMORY_ARRAYS:
        return [memory_to_legacy(i) if isinstance(i, cur.Memory) else i for i in items]
    if name == "actions_data":
        # Lazy import to avoid circular dependency:
        # translators.state → translators.action → translators.state
        from plugin_compat.translators.action import action_to_legacy

        return [action_to_legacy(a, cache) if isinstance(a, cur.Action) else a for a in items]
    if name == "evaluators_data":
        from plugin_compat.translators.evaluator import evaluator_to_legacy

        return [
            evaluator_to_legacy(e, cache) if isinstance(e, cur.Evaluator) else e for e in items
        ]
    return list(items)


def state_to_legacy(state: cur.State | None, cache: RuntimeCache | None = None) -> leg.State:
    """Flatten an enveloped state.

    Documented fields are looked up in ``values``/``data`` first and then at
    the top level. Missing strings become ``""`` and missing arrays ``[]``.
    Everything else in ``values``, ``data`` or the top level is carried as an
    extension field. Arrays are copied.
    """
    if state is None:
        return leg.State()

    fields: dict[str, Any] = {}
    for name in STRING_FIELDS:
        if name == "text":
            continue
        if name in CHARACTER_FIELDS and name in state.values:
            fields[name] = _as_text(state.values[name])
            continue
        found, value = _lookup(state, name)
        if found:
            fields[name] = _as_text(value)
    for name in ARRAY_FIELDS:
        found, value = _lookup(state, name)
        if found:
            fields[name] = _items_to_legacy(name, value, cache) if isinstance(value, list) else []
    fields["text"] = state.text

    documented = set(STRING_FIELDS) | set(ARRAY_FIELDS)
    origins: dict[str, str] = {}
    for bucket, source in _buckets(state):
        for key, value in source.items():
            if key not in documented and key not in origins:
                fields[key] = value
                origins[key] = bucket

    flat = leg.State.model_validate(fields)
    flat._origins = origins
    return flat


# -- legacy -> current -------------------------------------------------------


def _items_to_current(name: str, items: list[Any], cache: RuntimeCache | None) -> list[Any]:
    if name in _MEMORY_ARRAYS:
        return [memory_to_current(i) if isinstance(i, leg.Memory) else i for i in items]
    if name == "actions_data":
        from plugin_compat.translators.action import action_to_current

        return [action_to_current(a, cache) if isinstance(a, leg.Action) else a for a in items]
    if name == "evaluators_data":
        from plugin_compat.translators.evaluator import evaluator_to_current

        return [
            evaluator_to_current(e, cache) if isinstance(e, leg.Evaluator) else e for e in items
        ]
    return list(items)


def state_to_current(state: leg.State | None, cache: RuntimeCache | None = None) -> cur.State:
    """Split a flat state into ``values`` (scalars) and ``data`` (structured).

    A documented field is carried when it was set explicitly or holds a
    non-empty value, so untouched defaults do not leak into the envelope.
    Extension fields flattened by :func:`state_to_legacy` go back to the
    bucket they came from. Others go to ``values`` when scalar and to
    ``data`` otherwise. Names starting with ``_`` are private and dropped.
    """
    if state is None:
        return cur.State()

    explicit = state.model_fields_set
    values: dict[str, Any] = {}
    data: dict[str, Any] = {}
    for name in STRING_FIELDS:
        if name == "text":
            continue
        value = getattr(state, name)
        if value or name in explicit:
            values[name] = value
    for name in ARRAY_FIELDS:
        value = getattr(state, name)
        if value or name in explicit:
            data[name] = _items_to_current(name, value, cache)

    top: dict[str, Any] = {}
    for key, value in state.extensions.items():
        if key.startswith("_"):
            continue
        origin = state._origins.get(key)
        if origin is None:
            origin = "values" if _is_scalar(value) else "data"
        {"values": values, "data": data, "top": top}[origin][key] = value

    return cur.State(values=values, data=data, text=state.text, **top)
