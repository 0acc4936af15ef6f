"""Legacy per-table memory manager backed by the façade."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from plugin_compat.config import settings
from plugin_compat.current.types import ModelType
from plugin_compat.legacy import types as leg
from plugin_compat.translators.memory import memory_to_current, memory_to_legacy

if TYPE_CHECKING:
    from plugin_compat.runtime import CompatRuntime

logger = logging.getLogger(__name__)


async def add_embedding_to_memory(runtime: CompatRuntime, memory: leg.Memory) -> leg.Memory:
    """Attach an embedding to ``memory``.

    Tries the engine's own embedding step first and falls back to a
    TEXT_EMBEDDING model call. On failure the memory is returned unchanged.
    """
    engine = runtime.engine
    current = memory_to_current(memory)
    try:
        return memory_to_legacy(await engine.add_embedding_to_memory(current))
    except Exception:
        logger.warning("Engine add_embedding_to_memory failed, using the embedding model")

    if current.embedding is not None:
        return memory
    text = (current.content.text or "").strip()
    if not text:
        return memory
    try:
        embedding = await engine.use_model(ModelType.TEXT_EMBEDDING, {"text": text})
    except Exception:
        logger.exception("Embedding model call failed for memory %s", memory.id)
        return memory
    return memory.model_copy(update={"embedding": [float(x) for x in embedding]})


class MemoryManagerProxy:
    """The legacy memory manager interface for one table.

    Every call is forwarded to the façade with this manager's table name.
    """

    def __init__(self, runtime: CompatRuntime, table_name: str) -> None:
        self.runtime = runtime
        self.table_name = table_name

    def __repr__(self) -> str:
        return f"MemoryManagerProxy(table_name={self.table_name!r})"

    async def add_embedding_to_memory(self, memory: leg.Memory) -> leg.Memory:
        return await add_embedding_to_memory(self.runtime, memory)

    async def get_memories(
        self,
        *,
        room_id: str,
        count: int | None = None,
        unique: bool = True,
        start: int | None = None,
        end: int | None = None,
        **_: Any,
    ) -> list[leg.Memory]:
        return await self.runtime.get_memories(
            room_id=room_id,
            count=count,
            unique=unique,
            table_name=self.table_name,
            start=start,
            end=end,
        )

    async def get_cached_embeddings(self, content: str) -> list[dict[str, Any]]:
        """Look up cached embeddings for near-identical content. Failures yield ``[]``."""
        try:
            return await self.runtime.get_cached_embeddings(
                {
                    "query_table_name": self.table_name,
                    "query_threshold": settings.cached_embedding_threshold,
                    "query_input": content,
                    "query_field_name": "content",
                    "query_field_sub_name": "text",
                    "query_match_count": settings.cached_embedding_match_count,
                }
            )
        except Exception:
            logger.exception("get_cached_embeddings failed for table %s", self.table_name)
            return []

    async def get_memory_by_id(self, memory_id: str) -> leg.Memory | None:
        return await self.runtime.get_memory_by_id(memory_id)

    async def get_memories_by_ids(self, ids: list[str]) -> list[leg.Memory]:
        return await self.runtime.get_memories_by_ids(ids, self.table_name)

    async def get_memories_by_room_ids(
        self, *, room_ids: list[str], limit: int | None = None, **_: Any
    ) -> list[leg.Memory]:
        return await self.runtime.get_memories_by_room_ids(
            room_ids=room_ids, table_name=self.table_name, limit=limit
        )

    async def search_memories_by_embedding(
        self,
        embedding: list[float],
        *,
        match_threshold: float | None = None,
        count: int | None = None,
        room_id: str | None = None,
        unique: bool | None = None,
        **_: Any,
    ) -> list[leg.Memory]:
        return await self.runtime.search_memories_by_embedding(
            embedding,
            match_threshold=match_threshold,
            count=count,
            room_id=room_id,
            unique=unique,
            table_name=self.table_name,
        )

    async def create_memory(self, memory: leg.Memory, unique: bool = False) -> None:
        await self.runtime.create_memory(memory, self.table_name, unique)

    async def remove_memory(self, memory_id: str) -> None:
        await self.runtime.remove_memory(memory_id, self.table_name)

    async def remove_all_memories(self, room_id: str) -> None:
        await self.runtime.remove_all_memories(room_id, self.table_name)

    async def count_memories(self, room_id: str, unique: bool = True) -> int:
        return await self.runtime.count_memories(room_id, unique, self.table_name)
