"""Base class for adapters that expose a current capability as a legacy service."""

from __future__ import annotations

import inspect
import logging
from typing import Any

from plugin_compat.legacy.services import Service

logger = logging.getLogger(__name__)


async def resolve(value: Any) -> Any:
    """Await ``value`` if the wrapped capability returned an awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def has_method(obj: Any, name: str) -> bool:
    return obj is not None and callable(getattr(obj, name, None))


class ServiceAdapter(Service):
    """A legacy service backed by a current service and/or the engine's models.

    ``service`` is None for adapters synthesized purely from model calls.
    """

    def __init__(self, engine: Any, service: Any = None) -> None:
        self.engine = engine
        self.service = service

    async def initialize(self, runtime: Any) -> None:
        """The wrapped service is owned and started by the engine."""

    async def stop(self) -> None:
        """Stop the wrapped service, if it has anything to stop."""
        if has_method(self.service, "stop"):
            await resolve(self.service.stop())
            logger.debug("Stopped %s", type(self.service).__name__)
