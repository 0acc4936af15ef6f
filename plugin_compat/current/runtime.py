"""The subset of the current engine that the compatibility layer consumes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from plugin_compat.current.types import (
        Action,
        Entity,
        Evaluator,
        KnowledgeItem,
        Memory,
        ModelType,
        Participant,
        Provider,
        Relationship,
        Room,
        State,
        Task,
    )


@runtime_checkable
class CurrentRuntime(Protocol):
    """Current engine interface.

    Implemented by the host engine. Every method is async except the
    settings accessors and component registration.
    """

    agent_id: str
    character: Any

    def get_setting(self, key: str) -> Any: ...

    def get_conversation_length(self) -> int: ...

    # -- Components -----------------------------------------------------------

    def register_action(self, action: Action) -> None: ...

    def register_evaluator(self, evaluator: Evaluator) -> None: ...

    def register_provider(self, provider: Provider) -> None: ...

    @property
    def actions(self) -> list[Action]: ...

    @property
    def evaluators(self) -> list[Evaluator]: ...

    @property
    def providers(self) -> list[Provider]: ...

    async def process_actions(
        self,
        message: Memory,
        responses: list[Memory],
        state: State | None = None,
        callback: Any = None,
    ) -> None: ...

    async def evaluate(
        self,
        message: Memory,
        state: State | None = None,
        did_respond: bool = False,
        callback: Any = None,
        responses: list[Memory] | None = None,
    ) -> list[Evaluator] | None: ...

    # -- State and models -----------------------------------------------------

    async def compose_state(
        self,
        message: Memory,
        include_list: list[str] | None = None,
        only_include: bool = False,
        skip_cache: bool = False,
    ) -> State: ...

    async def use_model(self, model_type: ModelType | str, params: dict[str, Any]) -> Any: ...

    def get_service(self, name: str) -> Any | None: ...

    async def register_service(self, service: Any) -> None: ...

    async def initialize(self) -> None: ...

    async def stop(self) -> None: ...

    # -- Memories -------------------------------------------------------------

    async def get_memories(
        self,
        *,
        table_name: str,
        room_id: str | None = None,
        entity_id: str | None = None,
        count: int | None = None,
        unique: bool | None = None,
        start: int | None = None,
        end: int | None = None,
    ) -> list[Memory]: ...

    async def get_memory_by_id(self, memory_id: str) -> Memory | None: ...

    async def get_memories_by_ids(
        self, ids: list[str], table_name: str | None = None
    ) -> list[Memory]: ...

    async def get_memories_by_room_ids(
        self, *, table_name: str, room_ids: list[str], limit: int | None = None
    ) -> list[Memory]: ...

    async def search_memories(
        self,
        *,
        table_name: str,
        embedding: list[float],
        match_threshold: float | None = None,
        count: int | None = None,
        unique: bool | None = None,
        room_id: str | None = None,
        entity_id: str | None = None,
    ) -> list[Memory]: ...

    async def get_cached_embeddings(self, params: dict[str, Any]) -> list[dict[str, Any]]: ...

    async def create_memory(self, memory: Memory, table_name: str, unique: bool = False) -> str: ...

    async def delete_memory(self, memory_id: str) -> None: ...

    async def delete_all_memories(self, room_id: str, table_name: str) -> None: ...

    async def count_memories(
        self, room_id: str, unique: bool = True, table_name: str = ""
    ) -> int: ...

    async def add_embedding_to_memory(self, memory: Memory) -> Memory: ...

    async def log(self, params: dict[str, Any]) -> None: ...

    # -- Tasks ----------------------------------------------------------------

    async def get_tasks(
        self, *, room_id: str | None = None, tags: list[str] | None = None
    ) -> list[Task]: ...

    async def get_task(self, task_id: str) -> Task | None: ...

    async def create_task(self, task: Task) -> str: ...

    async def update_task(self, task_id: str, task: Task) -> None: ...

    async def delete_task(self, task_id: str) -> None: ...

    # -- Rooms, participants, entities ----------------------------------------

    async def get_room(self, room_id: str) -> Room | None: ...

    async def create_room(self, room: Room) -> str: ...

    async def delete_room(self, room_id: str) -> None: ...

    async def ensure_room_exists(self, room: Room) -> None: ...

    async def get_rooms_for_participant(self, entity_id: str) -> list[str]: ...

    async def get_rooms_for_participants(self, entity_ids: list[str]) -> list[str]: ...

    async def add_participant(self, entity_id: str, room_id: str) -> bool: ...

    async def remove_participant(self, entity_id: str, room_id: str) -> bool: ...

    async def ensure_participant_in_room(self, entity_id: str, room_id: str) -> None: ...

    async def get_participants_for_entity(self, entity_id: str) -> list[Participant]: ...

    async def get_participants_for_room(self, room_id: str) -> list[str]: ...

    async def get_participant_user_state(self, room_id: str, entity_id: str) -> str | None: ...

    async def set_participant_user_state(
        self, room_id: str, entity_id: str, state: str | None
    ) -> None: ...

    async def get_entity_by_id(self, entity_id: str) -> Entity | None: ...

    async def get_entities_for_room(self, room_id: str) -> list[Entity]: ...

    async def create_entity(self, entity: Entity) -> bool: ...

    async def ensure_connection(self, **kwargs: Any) -> None: ...

    # -- Relationships --------------------------------------------------------

    async def create_relationship(
        self,
        *,
        source_entity_id: str,
        target_entity_id: str,
        tags: list[str] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool: ...

    async def get_relationship(
        self, *, source_entity_id: str, target_entity_id: str
    ) -> Relationship | None: ...

    async def get_relationships(
        self, *, entity_id: str, tags: list[str] | None = None
    ) -> list[Relationship]: ...

    # -- Knowledge and cache --------------------------------------------------

    async def get_knowledge(self, message: Memory) -> list[KnowledgeItem]: ...

    async def add_knowledge(self, item: KnowledgeItem, options: dict[str, Any]) -> None: ...

    async def get_cache(self, key: str) -> Any | None: ...

    async def set_cache(self, key: str, value: Any) -> bool: ...

    async def delete_cache(self, key: str) -> bool: ...
