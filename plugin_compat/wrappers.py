"""Plugin bundles: telling the two API generations apart and wrapping legacy ones."""

from __future__ import annotations

import logging
from typing import Any

from plugin_compat.config import settings
from plugin_compat.current import types as cur
from plugin_compat.errors import PluginVersionError
from plugin_compat.legacy import types as leg
from plugin_compat.runtime_cache import RuntimeCache
from plugin_compat.translators.action import action_to_current, action_to_legacy
from plugin_compat.translators.evaluator import evaluator_to_current, evaluator_to_legacy
from plugin_compat.translators.provider import provider_to_current, provider_to_legacy

logger = logging.getLogger(__name__)

LEGACY = "legacy"
CURRENT = "current"


def _looks_legacy(plugin: Any) -> bool:
    actions = getattr(plugin, "actions", None) or []
    if any(getattr(a, "similes", None) for a in actions):
        return True
    if actions and getattr(plugin, "init", None) is None:
        return True
    return bool(getattr(plugin, "clients", None) or getattr(plugin, "adapters", None))


def plugin_api_version(plugin: Any) -> str:
    """Return ``"legacy"`` or ``"current"`` for a plugin bundle.

    The bundle's ``api_version`` tag decides. Untagged bundles are classified
    by shape with a warning, or rejected when
    ``settings.require_plugin_version_tag`` is on.
    """
    name = getattr(plugin, "name", type(plugin).__name__)
    tag = getattr(plugin, "api_version", None)
    if tag in (LEGACY, CURRENT):
        return tag
    if tag is not None:
        msg = f"Plugin {name} has unknown api_version {tag!r}"
        raise PluginVersionError(msg)
    if settings.require_plugin_version_tag:
        msg = f"Plugin {name} has no api_version tag"
        raise PluginVersionError(msg)
    guess = LEGACY if _looks_legacy(plugin) else CURRENT
    logger.warning("Plugin %s has no api_version tag, treating it as %s", name, guess)
    return guess


def is_legacy_plugin(plugin: Any) -> bool:
    return plugin_api_version(plugin) == LEGACY


def wrap_plugin(plugin: Any, runtimes: RuntimeCache | None = None) -> cur.Plugin:
    """Make a legacy plugin bundle loadable by the current engine.

    Actions, providers and evaluators are translated. The added ``init``
    hook registers and starts the plugin's legacy services on the façade
    for the engine that loads it. Current bundles are returned unchanged.
    """
    if not is_legacy_plugin(plugin):
        return plugin
    runtimes = runtimes if runtimes is not None else RuntimeCache()
    services = list(getattr(plugin, "services", None) or [])

    async def _init(config: dict[str, Any], runtime: Any) -> None:
        if not services:
            return
        compat = runtimes.get(runtime)
        for service in services:
            await compat.register_service(service)
        await compat.initialize()

    logger.info("Wrapping legacy plugin %s", plugin.name)
    return cur.Plugin(
        name=plugin.name,
        description=getattr(plugin, "description", "") or "Legacy plugin",
        init=_init,
        config=dict(getattr(plugin, "config", None) or {}),
        actions=[action_to_current(a, runtimes) for a in plugin.actions or []],
        providers=[provider_to_current(p, runtimes) for p in plugin.providers or []],
        evaluators=[evaluator_to_current(e, runtimes) for e in plugin.evaluators or []],
        api_version=CURRENT,
    )


def unwrap_plugin(plugin: cur.Plugin, runtimes: RuntimeCache | None = None) -> leg.Plugin:
    """Present a current plugin bundle in legacy shape.

    Services are left out: current services are managed by the engine.
    """
    runtimes = runtimes if runtimes is not None else RuntimeCache()
    return leg.Plugin(
        name=plugin.name,
        description=plugin.description,
        config=dict(plugin.config or {}),
        actions=[action_to_legacy(a, runtimes) for a in plugin.actions or []],
        providers=[provider_to_legacy(p, runtimes) for p in plugin.providers or []],
        evaluators=[evaluator_to_legacy(e, runtimes) for e in plugin.evaluators or []],
    )
