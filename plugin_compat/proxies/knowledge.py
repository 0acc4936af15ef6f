"""Legacy RAG knowledge manager backed by the engine's knowledge store."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any, Literal

from plugin_compat.config import settings
from plugin_compat.current import types as cur
from plugin_compat.current.types import MemoryType
from plugin_compat.errors import forwarding
from plugin_compat.ids import uuid_from_string
from plugin_compat.legacy import types as leg
from plugin_compat.translators.knowledge import knowledge_item_to_current, memory_to_knowledge_item

if TYPE_CHECKING:
    from plugin_compat.runtime import CompatRuntime

logger = logging.getLogger(__name__)

DOCUMENTS_TABLE = "documents"
FRAGMENTS_TABLE = "knowledge"


class KnowledgeManagerProxy:
    """The legacy RAG knowledge manager interface.

    Knowledge lives in the agent's own room. Agent ids that disagree with
    the engine's are logged and otherwise ignored.
    """

    table_name = FRAGMENTS_TABLE

    def __init__(self, runtime: CompatRuntime) -> None:
        self.runtime = runtime

    @property
    def _engine(self) -> Any:
        return self.runtime.engine

    def _check_agent(self, operation: str, agent_id: str | None) -> str:
        own = self.runtime.agent_id
        if agent_id and agent_id != own:
            logger.warning("%s called for agent %s, engine agent is %s", operation, agent_id, own)
        return agent_id or own

    async def get_knowledge(
        self,
        *,
        query: str | None = None,
        id: str | None = None,  # noqa: A002
        limit: int | None = None,
        conversation_context: str | None = None,
        agent_id: str | None = None,
    ) -> list[leg.RAGKnowledgeItem]:
        """Look up one item by ``id``, or query with the text and conversation context."""
        agent_id = self._check_agent("get_knowledge", agent_id)

        if id and not query and not conversation_context:
            with forwarding("get_knowledge"):
                memory = await self._engine.get_memory_by_id(id)
            return [memory_to_knowledge_item(memory, agent_id)] if memory else []

        text = "\n".join(t for t in (conversation_context, query) if t)
        if not text:
            logger.warning("get_knowledge called without a query or context")
            return []

        question = cur.Memory(
            entity_id=agent_id,
            agent_id=self.runtime.agent_id,
            room_id=self.runtime.agent_id,
            content=cur.Content(text=text),
            metadata={"type": MemoryType.MESSAGE.value, "timestamp": int(time.time() * 1000)},
        )
        with forwarding("get_knowledge"):
            found = await self._engine.get_knowledge(question)
        items = [memory_to_knowledge_item(k, agent_id) for k in found]
        return items[:limit] if limit else items

    async def create_knowledge(self, item: leg.RAGKnowledgeItem) -> None:
        """Add ``item`` through the engine's chunking pipeline. Duplicates are ignored."""
        self._check_agent("create_knowledge", item.agent_id)
        with forwarding("create_knowledge", tolerate_duplicates=True):
            await self._engine.add_knowledge(
                knowledge_item_to_current(item), settings.get_knowledge_options()
            )

    async def remove_knowledge(self, id: str) -> None:  # noqa: A002
        """Delete a document and every fragment derived from it."""
        with forwarding("remove_knowledge"):
            await self._engine.delete_memory(id)
            fragments = await self._engine.search_memories(
                table_name=FRAGMENTS_TABLE,
                room_id=self.runtime.agent_id,
                embedding=[],
                match_threshold=0.1,
            )
            related = [
                f
                for f in fragments
                if f.metadata.get("document_id") == id or f.metadata.get("original_id") == id
            ]
            if related:
                logger.info("Deleting %d fragments of document %s", len(related), id)
                await asyncio.gather(*(self._engine.delete_memory(f.id) for f in related))

    async def search_knowledge(
        self,
        *,
        embedding: list[float],
        agent_id: str | None = None,
        match_threshold: float | None = None,
        match_count: int | None = None,
        search_text: str | None = None,
    ) -> list[leg.RAGKnowledgeItem]:
        """Embedding search over fragments, optionally filtered by ``search_text``."""
        agent_id = self._check_agent("search_knowledge", agent_id)
        with forwarding("search_knowledge"):
            found = await self._engine.search_memories(
                table_name=FRAGMENTS_TABLE,
                room_id=self.runtime.agent_id,
                embedding=[float(x) for x in embedding],
                match_threshold=match_threshold,
                count=match_count,
            )
        items = [memory_to_knowledge_item(m, agent_id) for m in found]
        if search_text:
            needle = search_text.lower()
            items = [i for i in items if needle in i.content.text.lower()]
        return items

    async def clear_knowledge(self, shared: bool | None = None) -> None:
        if shared is not None:
            logger.warning("clear_knowledge ignores shared=%s", shared)
        room_id = self.runtime.agent_id
        with forwarding("clear_knowledge"):
            await self._engine.delete_all_memories(room_id, DOCUMENTS_TABLE)
            await self._engine.delete_all_memories(room_id, FRAGMENTS_TABLE)

    async def process_file(
        self,
        *,
        path: str,
        content: str,
        type: Literal["pdf", "md", "txt"],  # noqa: A002
        is_shared: bool = False,
    ) -> None:
        logger.info("Processing knowledge file %s (%s)", path, type)
        item = leg.RAGKnowledgeItem(
            id=self.generate_scoped_id(path, is_shared),
            agent_id=self.runtime.agent_id,
            content=leg.RAGContent(
                text=content,
                metadata={"source": path, "file_type": type, "is_shared": is_shared},
            ),
        )
        await self.create_knowledge(item)

    async def cleanup_deleted_knowledge_files(self) -> None:
        """Nothing to do: the engine tracks its own knowledge sources."""

    def generate_scoped_id(self, path: str, is_shared: bool) -> str:
        scope = "shared" if is_shared else "private"
        return uuid_from_string(f"{scope}-{path}")
