"""Knowledge translation between legacy RAG items and current knowledge records."""

from __future__ import annotations

import time

from plugin_compat.current import types as cur
from plugin_compat.current.types import MemoryType
from plugin_compat.legacy import types as leg


def memory_to_knowledge_item(
    memory: cur.Memory | cur.KnowledgeItem | None, agent_id: str
) -> leg.RAGKnowledgeItem:
    """Translate a stored knowledge memory (or knowledge item) to a RAG item.

    Similarity is reported as both ``similarity`` and ``score``.
    """
    if memory is None:
        return leg.RAGKnowledgeItem(id="", agent_id=agent_id)
    metadata = dict(memory.metadata or {})
    created_at = getattr(memory, "created_at", None) or metadata.get("timestamp")
    embedding = getattr(memory, "embedding", None)
    return leg.RAGKnowledgeItem(
        id=memory.id or "",
        agent_id=agent_id,
        content=leg.RAGContent(text=memory.content.text or "", metadata=metadata),
        embedding=[float(x) for x in embedding] if embedding is not None else None,
        created_at=created_at,
        similarity=memory.similarity,
        score=memory.similarity,
    )


def knowledge_item_to_current(item: leg.RAGKnowledgeItem | None) -> cur.KnowledgeItem:
    """Translate a RAG item to a document knowledge item."""
    if item is None:
        item = leg.RAGKnowledgeItem(id="")
    extra = dict(item.content.metadata)
    metadata = {
        **extra,
        "type": MemoryType.DOCUMENT.value,
        "source": extra.get("source"),
        "timestamp": item.created_at or int(time.time() * 1000),
    }
    return cur.KnowledgeItem(
        id=item.id,
        content=cur.Content(text=item.content.text),
        metadata=metadata,
    )
