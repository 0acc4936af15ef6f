"""Shared test fixtures."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from plugin_compat.current import types as cur
from plugin_compat.errors import DuplicateResourceError
from plugin_compat.ids import new_id
from plugin_compat.legacy import types as leg
from plugin_compat.runtime import CompatRuntime
from plugin_compat.runtime_cache import RuntimeCache


class FakeEngine:
    """In-memory stand-in for a current runtime engine."""

    def __init__(self, agent_id: str = "agent-1") -> None:
        self.agent_id = agent_id
        self.character = SimpleNamespace(name="Eliza")
        self.settings: dict[str, Any] = {}
        self.conversation_length = 0
        self.actions: list[cur.Action] = []
        self.evaluators: list[cur.Evaluator] = []
        self.providers: list[cur.Provider] = []
        self.services: dict[str, Any] = {}
        self.models: dict[cur.ModelType, Any] = {}
        self.model_calls: list[tuple[cur.ModelType, dict[str, Any]]] = []
        self.composed_state = cur.State()
        self.compose_calls: list[cur.Memory] = []
        self.processed: list[tuple[Any, ...]] = []
        self.evaluated: list[tuple[Any, ...]] = []
        self.memories: dict[str, tuple[str, cur.Memory]] = {}
        self.tasks: dict[str, cur.Task] = {}
        self.rooms: dict[str, cur.Room] = {}
        self.participants: dict[str, list[str]] = {}
        self.participant_states: dict[tuple[str, str], str | None] = {}
        self.entities: dict[str, cur.Entity] = {}
        self.relationships: list[cur.Relationship] = []
        self.knowledge_results: list[cur.Memory] = []
        self.added_knowledge: list[tuple[cur.KnowledgeItem, dict[str, Any]]] = []
        self.cache: dict[str, Any] = {}
        self.logs: list[dict[str, Any]] = []
        self.connections: list[dict[str, Any]] = []

    # -- Settings and components ---------------------------------------------

    def get_setting(self, key: str) -> Any:
        return self.settings.get(key)

    def get_conversation_length(self) -> int:
        return self.conversation_length

    def register_action(self, action: cur.Action) -> None:
        self.actions.append(action)

    def register_evaluator(self, evaluator: cur.Evaluator) -> None:
        self.evaluators.append(evaluator)

    def register_provider(self, provider: cur.Provider) -> None:
        self.providers.append(provider)

    async def process_actions(self, message, responses, state=None, callback=None) -> None:
        self.processed.append((message, responses, state, callback))

    async def evaluate(self, message, state=None, did_respond=False, callback=None, responses=None):
        self.evaluated.append((message, state, did_respond, callback))
        return list(self.evaluators)

    async def compose_state(self, message, include_list=None, only_include=False, skip_cache=False):
        self.compose_calls.append(message)
        return self.composed_state.model_copy(deep=True)

    async def use_model(self, model_type: cur.ModelType, params: dict[str, Any]) -> Any:
        self.model_calls.append((model_type, params))
        if model_type not in self.models:
            msg = f"No handler for model type {model_type}"
            raise RuntimeError(msg)
        result = self.models[model_type]
        if isinstance(result, Exception):
            raise result
        return result(params) if callable(result) else result

    def get_service(self, name: str) -> Any | None:
        return self.services.get(name)

    def register_service(self, service: Any) -> None:
        self.services[type(service).__name__] = service

    async def initialize(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    # -- Memories ------------------------------------------------------------

    def add_memory(self, memory: cur.Memory, table_name: str = "messages") -> cur.Memory:
        memory = memory.model_copy(update={"id": memory.id or new_id()})
        self.memories[memory.id] = (table_name, memory)
        return memory

    def _in_table(self, table_name: str | None, room_id: str | None) -> list[cur.Memory]:
        return [
            m
            for table, m in self.memories.values()
            if (table_name is None or table == table_name) and (not room_id or m.room_id == room_id)
        ]

    async def get_memories(
        self,
        *,
        table_name: str,
        room_id=None,
        entity_id=None,
        count=None,
        unique=None,
        start=None,
        end=None,
    ) -> list[cur.Memory]:
        found = sorted(
            self._in_table(table_name, room_id), key=lambda m: m.created_at or 0, reverse=True
        )
        return found[:count] if count else found

    async def get_memory_by_id(self, memory_id: str) -> cur.Memory | None:
        entry = self.memories.get(memory_id)
        return entry[1] if entry else None

    async def get_memories_by_ids(self, ids, table_name=None) -> list[cur.Memory]:
        return [m for m in self._in_table(table_name, None) if m.id in ids]

    async def get_memories_by_room_ids(self, *, table_name, room_ids, limit=None):
        found = [m for m in self._in_table(table_name, None) if m.room_id in room_ids]
        return found[:limit] if limit else found

    async def search_memories(
        self,
        *,
        table_name,
        embedding,
        match_threshold=None,
        count=None,
        unique=None,
        room_id=None,
        entity_id=None,
    ) -> list[cur.Memory]:
        found = self._in_table(table_name, room_id)
        return found[:count] if count else found

    async def get_cached_embeddings(self, params):
        return [{"embedding": [0.5], "levenshtein_score": 0}]

    async def create_memory(self, memory, table_name, unique=False) -> str:
        if memory.id and memory.id in self.memories:
            msg = f'duplicate key value violates unique constraint "memories_pkey" ({memory.id})'
            raise RuntimeError(msg)
        return self.add_memory(memory, table_name).id

    async def delete_memory(self, memory_id: str) -> None:
        self.memories.pop(memory_id, None)

    async def delete_all_memories(self, room_id: str, table_name: str) -> None:
        for memory in self._in_table(table_name, room_id):
            del self.memories[memory.id]

    async def count_memories(self, room_id, unique=True, table_name="") -> int:
        return len(self._in_table(table_name or None, room_id))

    async def add_embedding_to_memory(self, memory: cur.Memory) -> cur.Memory:
        if cur.ModelType.TEXT_EMBEDDING not in self.models:
            msg = "No embedding model"
            raise RuntimeError(msg)
        embedding = await self.use_model(
            cur.ModelType.TEXT_EMBEDDING, {"text": memory.content.text}
        )
        return memory.model_copy(update={"embedding": embedding})

    async def log(self, params: dict[str, Any]) -> None:
        self.logs.append(params)

    # -- Tasks ---------------------------------------------------------------

    async def get_tasks(self, *, room_id=None, tags=None) -> list[cur.Task]:
        return [
            t
            for t in self.tasks.values()
            if (room_id is None or t.room_id == room_id)
            and all(tag in t.tags for tag in tags or [])
        ]

    async def get_task(self, task_id: str) -> cur.Task | None:
        return self.tasks.get(task_id)

    async def create_task(self, task: cur.Task) -> str:
        task = task.model_copy(update={"id": task.id or new_id()})
        if task.id in self.tasks:
            msg = f"Task {task.id} already exists"
            raise DuplicateResourceError(msg)
        self.tasks[task.id] = task
        return task.id

    async def update_task(self, task_id: str, task: cur.Task) -> None:
        self.tasks[task_id] = task.model_copy(update={"id": task_id})

    async def delete_task(self, task_id: str) -> None:
        self.tasks.pop(task_id, None)

    # -- Rooms and participants ----------------------------------------------

    async def get_room(self, room_id: str) -> cur.Room | None:
        return self.rooms.get(room_id)

    async def create_room(self, room: cur.Room) -> str:
        if room.id in self.rooms:
            msg = f"Room {room.id} already exists"
            raise DuplicateResourceError(msg)
        self.rooms[room.id] = room
        return room.id

    async def delete_room(self, room_id: str) -> None:
        self.rooms.pop(room_id, None)

    async def ensure_room_exists(self, room: cur.Room) -> None:
        self.rooms.setdefault(room.id, room)

    async def get_rooms_for_participant(self, entity_id: str) -> list[str]:
        return [room for room, members in self.participants.items() if entity_id in members]

    async def get_rooms_for_participants(self, entity_ids: list[str]) -> list[str]:
        return [
            room
            for room, members in self.participants.items()
            if any(e in members for e in entity_ids)
        ]

    async def add_participant(self, entity_id: str, room_id: str) -> bool:
        members = self.participants.setdefault(room_id, [])
        if entity_id in members:
            msg = "UNIQUE constraint failed: participants.entity_id"
            raise RuntimeError(msg)
        members.append(entity_id)
        return True

    async def remove_participant(self, entity_id: str, room_id: str) -> bool:
        members = self.participants.get(room_id, [])
        if entity_id not in members:
            return False
        members.remove(entity_id)
        return True

    async def ensure_participant_in_room(self, entity_id: str, room_id: str) -> None:
        members = self.participants.setdefault(room_id, [])
        if entity_id not in members:
            members.append(entity_id)

    async def get_participants_for_entity(self, entity_id: str) -> list[cur.Participant]:
        entity = self.entities.get(entity_id) or cur.Entity(id=entity_id)
        return [
            cur.Participant(id=room, entity=entity)
            for room, members in self.participants.items()
            if entity_id in members
        ]

    async def get_participants_for_room(self, room_id: str) -> list[str]:
        return list(self.participants.get(room_id, []))

    async def get_participant_user_state(self, room_id: str, entity_id: str) -> str | None:
        return self.participant_states.get((room_id, entity_id))

    async def set_participant_user_state(self, room_id, entity_id, state) -> None:
        self.participant_states[(room_id, entity_id)] = state

    # -- Entities and relationships ------------------------------------------

    async def get_entity_by_id(self, entity_id: str) -> cur.Entity | None:
        return self.entities.get(entity_id)

    async def get_entities_for_room(self, room_id: str) -> list[cur.Entity]:
        members = self.participants.get(room_id, [])
        return [self.entities[e] for e in members if e in self.entities]

    async def create_entity(self, entity: cur.Entity) -> bool:
        if entity.id in self.entities:
            msg = f"Entity {entity.id} already exists"
            raise RuntimeError(msg)
        self.entities[entity.id] = entity
        return True

    async def ensure_connection(self, **kwargs: Any) -> None:
        self.connections.append(kwargs)

    async def create_relationship(
        self, *, source_entity_id, target_entity_id, tags=None, metadata=None
    ) -> bool:
        self.relationships.append(
            cur.Relationship(
                id=new_id(),
                source_entity_id=source_entity_id,
                target_entity_id=target_entity_id,
                agent_id=self.agent_id,
                tags=tags or [],
                metadata=metadata or {},
            )
        )
        return True

    async def get_relationship(self, *, source_entity_id, target_entity_id):
        for rel in self.relationships:
            if {rel.source_entity_id, rel.target_entity_id} == {
                source_entity_id,
                target_entity_id,
            }:
                return rel
        return None

    async def get_relationships(self, *, entity_id, tags=None) -> list[cur.Relationship]:
        return [
            r for r in self.relationships if entity_id in (r.source_entity_id, r.target_entity_id)
        ]

    # -- Knowledge and cache -------------------------------------------------

    async def get_knowledge(self, message: cur.Memory) -> list[cur.Memory]:
        return list(self.knowledge_results)

    async def add_knowledge(self, item: cur.KnowledgeItem, options: dict[str, Any]) -> None:
        if any(existing.id == item.id for existing, _ in self.added_knowledge):
            msg = f"Knowledge {item.id} already exists"
            raise DuplicateResourceError(msg)
        self.added_knowledge.append((item, options))

    async def get_cache(self, key: str) -> Any | None:
        return self.cache.get(key)

    async def set_cache(self, key: str, value: Any) -> bool:
        self.cache[key] = value
        return True

    async def delete_cache(self, key: str) -> bool:
        return self.cache.pop(key, None) is not None


def legacy_message(text: str = "hello", **fields: Any) -> leg.Memory:
    """A legacy message in room-1 from user-1."""
    data = {
        "id": new_id(),
        "user_id": "user-1",
        "agent_id": "agent-1",
        "room_id": "room-1",
        "content": leg.Content(text=text),
    }
    data.update(fields)
    return leg.Memory(**data)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def runtimes() -> RuntimeCache:
    return RuntimeCache()


@pytest.fixture
def compat(engine: FakeEngine, runtimes: RuntimeCache) -> CompatRuntime:
    """A façade over a fresh fake engine."""
    return CompatRuntime(engine, cache=runtimes)
