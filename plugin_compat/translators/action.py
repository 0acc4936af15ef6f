"""Action translation, including the handler callbacks actions receive.

A translated action calls the original with translated arguments. The
legacy side always sees the ``CompatRuntime`` façade bound to the engine
that invoked it; the current side always sees the engine itself.
"""

from __future__ import annotations

import logging
from typing import Any

from plugin_compat.current import types as cur
from plugin_compat.legacy import types as leg
from plugin_compat.runtime_cache import RuntimeCache
from plugin_compat.translators.content import (
    content_to_current,
    content_to_legacy,
    example_to_current,
    example_to_legacy,
)
from plugin_compat.translators.memory import memory_to_current, memory_to_legacy
from plugin_compat.translators.state import state_to_current, state_to_legacy

logger = logging.getLogger(__name__)


def engine_of(runtime: Any) -> Any:
    """Unwrap a façade to the engine it fronts. Anything else is returned as is."""
    # Lazy import to avoid circular dependency:
    # runtime → translators.action → runtime
    from plugin_compat.runtime import CompatRuntime

    if isinstance(runtime, CompatRuntime):
        return runtime.engine
    return runtime


# -- Callbacks ---------------------------------------------------------------


def callback_to_legacy(callback: cur.HandlerCallback | None) -> leg.HandlerCallback | None:
    """Let legacy code call a current callback with legacy content."""
    if callback is None:
        return None

    async def _callback(content: leg.Content, *args: Any) -> list[leg.Memory]:
        memories = await callback(content_to_current(content), *args)
        return [memory_to_legacy(m) for m in memories or []]

    return _callback


def callback_to_current(callback: leg.HandlerCallback | None) -> cur.HandlerCallback | None:
    """Let current code call a legacy callback with current content."""
    if callback is None:
        return None

    async def _callback(content: cur.Content, *args: Any) -> list[cur.Memory]:
        memories = await callback(content_to_legacy(content), *args)
        return [memory_to_current(m) for m in memories or []]

    return _callback


# -- Shared wrappers ---------------------------------------------------------


def legacy_validator(
    validate: leg.Validator, label: str, cache: RuntimeCache
) -> cur.Validator:
    """Expose a legacy ``validate`` to the engine. Errors count as ``False``."""

    async def _validate(runtime: Any, message: cur.Memory, state: cur.State | None = None) -> bool:
        try:
            compat = cache.get(runtime)
            legacy_state = state_to_legacy(state, cache) if state is not None else None
            return bool(await validate(compat, memory_to_legacy(message), legacy_state))
        except Exception:
            logger.exception("Legacy validate failed for %s", label)
            return False

    return _validate


def current_validator(
    validate: cur.Validator, label: str, cache: RuntimeCache
) -> leg.Validator:
    """Expose a current ``validate`` to legacy callers. Errors count as ``False``."""

    async def _validate(runtime: Any, message: leg.Memory, state: leg.State | None = None) -> bool:
        try:
            current_state = state_to_current(state, cache) if state is not None else None
            return bool(
                await validate(engine_of(runtime), memory_to_current(message), current_state)
            )
        except Exception:
            logger.exception("Current validate failed for %s", label)
            return False

    return _validate


# -- Actions -----------------------------------------------------------------


def action_to_current(action: leg.Action, cache: RuntimeCache | None = None) -> cur.Action:
    """Wrap a legacy action so the engine can run it.

    Translating back with ``action_to_legacy`` returns ``action`` itself.
    """
    if isinstance(action.wrapped, cur.Action):
        return action.wrapped
    cache = cache if cache is not None else RuntimeCache()

    async def _handler(
        runtime: Any,
        message: cur.Memory,
        state: cur.State | None = None,
        options: dict[str, Any] | None = None,
        callback: cur.HandlerCallback | None = None,
        responses: list[cur.Memory] | None = None,
    ) -> Any:
        try:
            compat = cache.get(runtime)
            legacy_state = state_to_legacy(state, cache) if state is not None else None
            return await action.handler(
                compat,
                memory_to_legacy(message),
                legacy_state,
                options,
                callback_to_legacy(callback),
            )
        except Exception:
            logger.exception("Legacy action handler failed: %s", action.name)
            raise

    return cur.Action(
        name=action.name,
        description=action.description,
        similes=list(action.similes),
        examples=[[example_to_current(e) for e in group] for group in action.examples],
        handler=_handler,
        validate=legacy_validator(action.validate, f"action {action.name}", cache),
        wrapped=action,
    )


def action_to_legacy(action: cur.Action, cache: RuntimeCache | None = None) -> leg.Action:
    """Wrap a current action so legacy code can run it."""
    if isinstance(action.wrapped, leg.Action):
        return action.wrapped
    cache = cache if cache is not None else RuntimeCache()

    async def _handler(
        runtime: Any,
        message: leg.Memory,
        state: leg.State | None = None,
        options: dict[str, Any] | None = None,
        callback: leg.HandlerCallback | None = None,
    ) -> Any:
        try:
            current_state = state_to_current(state, cache) if state is not None else None
            return await action.handler(
                engine_of(runtime),
                memory_to_current(message),
                current_state,
                options,
                callback_to_current(callback),
            )
        except Exception:
            logger.exception("Current action handler failed: %s", action.name)
            raise

    return leg.Action(
        name=action.name,
        description=action.description,
        similes=list(action.similes or []),
        examples=[[example_to_legacy(e) for e in group] for group in action.examples or []],
        handler=_handler,
        validate=current_validator(action.validate, f"action {action.name}", cache),
        wrapped=action,
    )
