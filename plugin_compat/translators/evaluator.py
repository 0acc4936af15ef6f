"""Evaluator translation. Evaluation examples map ``context`` <-> ``prompt``."""

from __future__ import annotations

import logging
from typing import Any

from plugin_compat.current import types as cur
from plugin_compat.legacy import types as leg
from plugin_compat.runtime_cache import RuntimeCache
from plugin_compat.translators.action import (
    callback_to_current,
    callback_to_legacy,
    current_validator,
    engine_of,
    legacy_validator,
)
from plugin_compat.translators.content import example_to_current, example_to_legacy
from plugin_compat.translators.memory import memory_to_current, memory_to_legacy
from plugin_compat.translators.state import state_to_current, state_to_legacy

logger = logging.getLogger(__name__)


def evaluation_example_to_current(
    example: leg.EvaluationExample | None,
) -> cur.EvaluationExample:
    if example is None:
        return cur.EvaluationExample(prompt="")
    return cur.EvaluationExample(
        prompt=example.context,
        messages=[example_to_current(m) for m in example.messages],
        outcome=example.outcome,
    )


def evaluation_example_to_legacy(
    example: cur.EvaluationExample | None,
) -> leg.EvaluationExample:
    if example is None:
        return leg.EvaluationExample(context="")
    return leg.EvaluationExample(
        context=example.prompt,
        messages=[example_to_legacy(m) for m in example.messages],
        outcome=example.outcome,
    )


def evaluator_to_current(
    evaluator: leg.Evaluator, cache: RuntimeCache | None = None
) -> cur.Evaluator:
    if isinstance(evaluator.wrapped, cur.Evaluator):
        return evaluator.wrapped
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
            return await evaluator.handler(
                compat,
                memory_to_legacy(message),
                legacy_state,
                options,
                callback_to_legacy(callback),
            )
        except Exception:
            logger.exception("Legacy evaluator handler failed: %s", evaluator.name)
            raise

    return cur.Evaluator(
        name=evaluator.name,
        description=evaluator.description,
        similes=list(evaluator.similes),
        examples=[evaluation_example_to_current(e) for e in evaluator.examples],
        always_run=evaluator.always_run,
        handler=_handler,
        validate=legacy_validator(evaluator.validate, f"evaluator {evaluator.name}", cache),
        wrapped=evaluator,
    )


def evaluator_to_legacy(
    evaluator: cur.Evaluator, cache: RuntimeCache | None = None
) -> leg.Evaluator:
    if isinstance(evaluator.wrapped, leg.Evaluator):
        return evaluator.wrapped
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
            return await evaluator.handler(
                engine_of(runtime),
                memory_to_current(message),
                current_state,
                options,
                callback_to_current(callback),
            )
        except Exception:
            logger.exception("Current evaluator handler failed: %s", evaluator.name)
            raise

    return leg.Evaluator(
        name=evaluator.name,
        description=evaluator.description,
        similes=list(evaluator.similes or []),
        examples=[evaluation_example_to_legacy(e) for e in evaluator.examples or []],
        always_run=evaluator.always_run,
        handler=_handler,
        validate=current_validator(evaluator.validate, f"evaluator {evaluator.name}", cache),
        wrapped=evaluator,
    )
