"""Message memory translation: ``user_id`` <-> ``entity_id``, ``unique`` <-> metadata."""

from __future__ import annotations

from plugin_compat.current import types as cur
from plugin_compat.current.types import MemoryType
from plugin_compat.legacy import types as leg
from plugin_compat.translators.content import content_to_current, content_to_legacy

_METADATA_EXT = "metadata"


def memory_to_legacy(memory: cur.Memory | None) -> leg.Memory:
    """Translate a current memory. Metadata other than ``unique`` is kept as an extension."""
    if memory is None:
        return leg.Memory()
    metadata = dict(memory.metadata)
    unique = metadata.pop("unique", None)
    # "message" is the default type and is restored on the way back
    if metadata.get("type") == MemoryType.MESSAGE.value:
        del metadata["type"]
    data: dict = {
        "id": memory.id,
        "user_id": memory.entity_id,
        "agent_id": memory.agent_id,
        "room_id": memory.room_id,
        "created_at": memory.created_at,
        "content": content_to_legacy(memory.content),
        "embedding": list(memory.embedding) if memory.embedding is not None else None,
        "unique": unique,
        "similarity": memory.similarity,
    }
    if metadata:
        data[_METADATA_EXT] = metadata
    if memory.world_id:
        data["world_id"] = memory.world_id
    return leg.Memory.model_validate(data)


def memory_to_current(memory: leg.Memory | None) -> cur.Memory:
    """Translate a legacy memory. Metadata type defaults to ``message``."""
    if memory is None:
        return cur.Memory(metadata={"type": MemoryType.MESSAGE.value})
    extensions = memory.extensions
    metadata = dict(extensions.pop(_METADATA_EXT, None) or {})
    metadata.setdefault("type", MemoryType.MESSAGE.value)
    if memory.unique is not None:
        metadata["unique"] = memory.unique
    return cur.Memory(
        id=memory.id,
        entity_id=memory.user_id,
        agent_id=memory.agent_id,
        room_id=memory.room_id,
        world_id=extensions.get("world_id"),
        created_at=memory.created_at,
        content=content_to_current(memory.content),
        embedding=list(memory.embedding) if memory.embedding is not None else None,
        metadata=metadata,
        similarity=memory.similarity,
    )
