"""Provider translation and result normalisation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from plugin_compat.current import types as cur
from plugin_compat.legacy import types as leg
from plugin_compat.runtime_cache import RuntimeCache
from plugin_compat.translators.action import engine_of
from plugin_compat.translators.memory import memory_to_current, memory_to_legacy
from plugin_compat.translators.state import state_to_current, state_to_legacy

logger = logging.getLogger(__name__)


def provider_name(provider: leg.Provider) -> str:
    """Legacy providers may be anonymous; fall back to the getter's name."""
    if provider.name:
        return provider.name
    return getattr(provider.get, "__qualname__", None) or "unnamed-provider"


def normalize_provider_result(result: Any) -> cur.ProviderResult:
    """Coerce whatever a legacy provider returned into a ProviderResult.

    Strings become ``text``; mappings keep ``values``/``data``/``text`` and
    any other keys land in ``values``; None is empty.
    """
    if result is None:
        return cur.ProviderResult()
    if isinstance(result, cur.ProviderResult):
        return result
    if isinstance(result, Mapping):
        extra = {k: v for k, v in result.items() if k not in ("values", "data", "text")}
        return cur.ProviderResult(
            values={**extra, **(result.get("values") or {})},
            data=dict(result.get("data") or {}),
            text=str(result.get("text") or ""),
        )
    return cur.ProviderResult(text=str(result))


def provider_to_current(provider: leg.Provider, cache: RuntimeCache | None = None) -> cur.Provider:
    if isinstance(provider.wrapped, cur.Provider):
        return provider.wrapped
    cache = cache if cache is not None else RuntimeCache()
    name = provider_name(provider)

    async def _get(
        runtime: Any, message: cur.Memory, state: cur.State | None = None
    ) -> cur.ProviderResult:
        try:
            compat = cache.get(runtime)
            legacy_state = state_to_legacy(state, cache) if state is not None else None
            result = await provider.get(compat, memory_to_legacy(message), legacy_state)
        except Exception:
            logger.exception("Legacy provider failed: %s", name)
            raise
        return normalize_provider_result(result)

    return cur.Provider(name=name, get=_get, wrapped=provider)


def provider_to_legacy(provider: cur.Provider, cache: RuntimeCache | None = None) -> leg.Provider:
    """Legacy callers only see the provider's ``text``."""
    if isinstance(provider.wrapped, leg.Provider):
        return provider.wrapped
    cache = cache if cache is not None else RuntimeCache()

    async def _get(runtime: Any, message: leg.Memory, state: leg.State | None = None) -> str:
        try:
            current_state = state_to_current(state, cache) if state is not None else None
            result = await provider.get(
                engine_of(runtime), memory_to_current(message), current_state
            )
        except Exception:
            logger.exception("Current provider failed: %s", provider.name)
            raise
        return normalize_provider_result(result).text

    return leg.Provider(get=_get, name=provider.name, wrapped=provider)
