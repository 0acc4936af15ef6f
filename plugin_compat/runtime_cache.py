"""Maps current engine instances to the legacy façade that wraps them."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from plugin_compat.runtime import CompatRuntime

logger = logging.getLogger(__name__)


class RuntimeCache:
    """Engine -> façade lookup, keyed by engine identity.

    Owned by whoever wraps components: a ``CompatRuntime`` binds itself on
    construction, a wrapped plugin bundle gets its own cache. Entries hold a
    reference to the engine so an id is never reused while cached.
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[Any, CompatRuntime]] = {}

    def __contains__(self, engine: object) -> bool:
        return id(engine) in self._entries

    def bind(self, engine: Any, compat: CompatRuntime) -> None:
        """Record ``compat`` as the façade for ``engine``."""
        self._entries[id(engine)] = (engine, compat)

    def get(self, runtime: Any) -> CompatRuntime:
        """Return the façade for ``runtime``, creating one on first use.

        A façade passed in is returned unchanged.
        """
        # Lazy import to avoid circular dependency:
        # runtime → translators.action → runtime_cache → runtime
        from plugin_compat.runtime import CompatRuntime

        if isinstance(runtime, CompatRuntime):
            return runtime
        entry = self._entries.get(id(runtime))
        if entry is not None:
            return entry[1]
        logger.debug("Creating legacy façade for engine %r", runtime)
        compat = CompatRuntime(runtime, cache=self)
        return compat
