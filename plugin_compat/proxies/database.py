"""Legacy database and cache adapters that forward to the façade."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from plugin_compat.errors import forwarding
from plugin_compat.legacy import types as leg

if TYPE_CHECKING:
    from plugin_compat.runtime import CompatRuntime


class DatabaseAdapterProxy:
    """The legacy database adapter interface.

    There is no database behind this: every method forwards to the façade,
    which re-implements it on the engine. Extra legacy parameters (such as
    ``agent_id``) are accepted and ignored.
    """

    def __init__(self, runtime: CompatRuntime) -> None:
        self.runtime = runtime

    async def init(self) -> None:
        await self.runtime.initialize()

    async def close(self) -> None:
        """The engine owns the connection."""

    # -- Accounts ------------------------------------------------------------

    async def get_account_by_id(self, user_id: str) -> leg.Account | None:
        return await self.runtime.get_account_by_id(user_id)

    async def create_account(self, account: leg.Account) -> bool:
        return await self.runtime.create_account(account)

    # -- Memories ------------------------------------------------------------

    async def get_memories(self, **params: Any) -> list[leg.Memory]:
        params.pop("agent_id", None)
        return await self.runtime.get_memories(**params)

    async def get_memory_by_id(self, memory_id: str) -> leg.Memory | None:
        return await self.runtime.get_memory_by_id(memory_id)

    async def get_memories_by_ids(
        self, ids: list[str], table_name: str | None = None
    ) -> list[leg.Memory]:
        return await self.runtime.get_memories_by_ids(ids, table_name)

    async def get_memories_by_room_ids(self, **params: Any) -> list[leg.Memory]:
        params.pop("agent_id", None)
        return await self.runtime.get_memories_by_room_ids(**params)

    async def get_cached_embeddings(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        return await self.runtime.get_cached_embeddings(params)

    async def log(self, **params: Any) -> None:
        await self.runtime.log(**params)

    async def get_actor_details(self, *, room_id: str) -> list[leg.Actor]:
        return await self.runtime.get_actor_details(room_id=room_id)

    async def search_memories(self, **params: Any) -> list[leg.Memory]:
        params.pop("agent_id", None)
        return await self.runtime.search_memories(**params)

    async def search_memories_by_embedding(
        self, embedding: list[float], **params: Any
    ) -> list[leg.Memory]:
        params.pop("agent_id", None)
        return await self.runtime.search_memories_by_embedding(embedding, **params)

    async def create_memory(
        self, memory: leg.Memory, table_name: str, unique: bool = False
    ) -> None:
        await self.runtime.create_memory(memory, table_name, unique)

    async def remove_memory(self, memory_id: str, table_name: str | None = None) -> None:
        await self.runtime.remove_memory(memory_id, table_name)

    async def remove_all_memories(self, room_id: str, table_name: str) -> None:
        await self.runtime.remove_all_memories(room_id, table_name)

    async def count_memories(
        self, room_id: str, unique: bool = True, table_name: str = ""
    ) -> int:
        return await self.runtime.count_memories(room_id, unique, table_name)

    # -- Goals ---------------------------------------------------------------

    async def get_goals(self, **params: Any) -> list[leg.Goal]:
        params.pop("agent_id", None)
        return await self.runtime.get_goals(**params)

    async def update_goal(self, goal: leg.Goal) -> None:
        await self.runtime.update_goal(goal)

    async def create_goal(self, goal: leg.Goal) -> None:
        await self.runtime.create_goal(goal)

    async def remove_goal(self, goal_id: str) -> None:
        await self.runtime.remove_goal(goal_id)

    async def remove_all_goals(self, room_id: str) -> None:
        await self.runtime.remove_all_goals(room_id)

    async def update_goal_status(self, *, goal_id: str, status: leg.GoalStatus) -> None:
        await self.runtime.update_goal_status(goal_id=goal_id, status=status)

    # -- Rooms and participants ----------------------------------------------

    async def get_room(self, room_id: str) -> str | None:
        return await self.runtime.get_room(room_id)

    async def create_room(self, room_id: str | None = None) -> str:
        return await self.runtime.create_room(room_id)

    async def remove_room(self, room_id: str) -> None:
        await self.runtime.remove_room(room_id)

    async def get_rooms_for_participant(self, user_id: str) -> list[str]:
        return await self.runtime.get_rooms_for_participant(user_id)

    async def get_rooms_for_participants(self, user_ids: list[str]) -> list[str]:
        return await self.runtime.get_rooms_for_participants(user_ids)

    async def add_participant(self, user_id: str, room_id: str) -> bool:
        return await self.runtime.add_participant(user_id, room_id)

    async def remove_participant(self, user_id: str, room_id: str) -> bool:
        return await self.runtime.remove_participant(user_id, room_id)

    async def get_participants_for_account(self, user_id: str) -> list[leg.Participant]:
        return await self.runtime.get_participants_for_account(user_id)

    async def get_participants_for_room(self, room_id: str) -> list[str]:
        return await self.runtime.get_participants_for_room(room_id)

    async def get_participant_user_state(self, room_id: str, user_id: str) -> str | None:
        return await self.runtime.get_participant_user_state(room_id, user_id)

    async def set_participant_user_state(
        self, room_id: str, user_id: str, state: str | None
    ) -> None:
        await self.runtime.set_participant_user_state(room_id, user_id, state)

    # -- Relationships -------------------------------------------------------

    async def create_relationship(self, *, user_a: str, user_b: str) -> bool:
        return await self.runtime.create_relationship(user_a=user_a, user_b=user_b)

    async def get_relationship(self, *, user_a: str, user_b: str) -> leg.Relationship | None:
        return await self.runtime.get_relationship(user_a=user_a, user_b=user_b)

    async def get_relationships(self, *, user_id: str) -> list[leg.Relationship]:
        return await self.runtime.get_relationships(user_id=user_id)

    # -- Knowledge -----------------------------------------------------------

    async def get_knowledge(self, **params: Any) -> list[leg.RAGKnowledgeItem]:
        return await self.runtime.get_knowledge(**params)

    async def search_knowledge(self, **params: Any) -> list[leg.RAGKnowledgeItem]:
        return await self.runtime.search_knowledge(**params)

    async def create_knowledge(self, knowledge: leg.RAGKnowledgeItem) -> None:
        await self.runtime.create_knowledge(knowledge)

    async def remove_knowledge(self, knowledge_id: str) -> None:
        await self.runtime.remove_knowledge(knowledge_id)

    async def clear_knowledge(
        self, agent_id: str | None = None, shared: bool | None = None
    ) -> None:
        await self.runtime.clear_knowledge(shared=shared)

    # -- Cache ---------------------------------------------------------------

    async def get_cache(self, *, key: str, **_: Any) -> Any | None:
        with forwarding("get_cache"):
            return await self.runtime.engine.get_cache(key)

    async def set_cache(self, *, key: str, value: Any, **_: Any) -> bool:
        with forwarding("set_cache"):
            return await self.runtime.engine.set_cache(key, value)

    async def delete_cache(self, *, key: str, **_: Any) -> bool:
        with forwarding("delete_cache"):
            return await self.runtime.engine.delete_cache(key)


class CacheManagerProxy:
    """The legacy cache manager: ``get``/``set``/``delete`` by key."""

    def __init__(self, runtime: CompatRuntime) -> None:
        self.runtime = runtime

    async def get(self, key: str) -> Any | None:
        with forwarding("cache get"):
            return await self.runtime.engine.get_cache(key)

    async def set(self, key: str, value: Any, options: dict[str, Any] | None = None) -> None:
        with forwarding("cache set"):
            await self.runtime.engine.set_cache(key, value)

    async def delete(self, key: str) -> None:
        with forwarding("cache delete"):
            await self.runtime.engine.delete_cache(key)
