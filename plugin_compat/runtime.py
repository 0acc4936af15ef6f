"""The legacy runtime interface, re-implemented on a current engine."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Iterable, Mapping
from typing import Any

from plugin_compat.capabilities import CapabilityManager
from plugin_compat.config import settings
from plugin_compat.current import types as cur
from plugin_compat.errors import InitializationError, forwarding
from plugin_compat.ids import new_id
from plugin_compat.legacy import formatting
from plugin_compat.legacy import types as leg
from plugin_compat.proxies import (
    CacheManagerProxy,
    DatabaseAdapterProxy,
    KnowledgeManagerProxy,
    MemoryManagerProxy,
    add_embedding_to_memory,
)
from plugin_compat.runtime_cache import RuntimeCache
from plugin_compat.translators.action import action_to_current, callback_to_current
from plugin_compat.translators.entities import (
    account_to_entity,
    entity_to_account,
    entity_to_actor,
    participant_to_legacy,
    relationship_to_legacy,
)
from plugin_compat.translators.evaluator import evaluator_to_current
from plugin_compat.translators.goal_task import COMPAT_TAG, goal_to_task, task_to_goal
from plugin_compat.translators.memory import memory_to_current, memory_to_legacy
from plugin_compat.translators.provider import (
    normalize_provider_result,
    provider_name,
    provider_to_current,
)
from plugin_compat.translators.state import state_to_current, state_to_legacy
from plugin_compat.wrappers import is_legacy_plugin, unwrap_plugin

logger = logging.getLogger(__name__)

ADDITIONAL_INFO_HEADER = "# Additional Information"

MESSAGES_TABLE = "messages"
DESCRIPTIONS_TABLE = "descriptions"
DOCUMENTS_TABLE = "documents"
FRAGMENTS_TABLE = "fragments"
LORE_TABLE = "lore"


def _unpopulated(state: leg.State, key: str) -> bool:
    if key in leg.State.model_fields:
        return not getattr(state, key)
    return not state.extensions.get(key)


def _component_name(component: Any) -> Any:
    if isinstance(component, dict):
        return component.get("name")
    return getattr(component, "name", None)


class CompatRuntime:
    """Answers to the legacy runtime contract on top of a current ``engine``.

    Components passed to the constructor are registered immediately.
    ``providers`` given here stay local to the façade and are only consulted
    by ``compose_state``; ``register_context_provider`` also hands the
    provider to the engine.

    Usage::

        compat = CompatRuntime(engine, plugins=[my_legacy_plugin])
        await compat.initialize()
        state = await compat.compose_state(message)
    """

    def __init__(
        self,
        engine: Any,
        *,
        character: Any = None,
        actions: Iterable[leg.Action] = (),
        evaluators: Iterable[leg.Evaluator] = (),
        providers: Iterable[leg.Provider] = (),
        plugins: Iterable[Any] = (),
        services: Iterable[Any] = (),
        managers: Iterable[Any] = (),
        cache: RuntimeCache | None = None,
    ) -> None:
        if engine is None:
            msg = "CompatRuntime needs an engine to wrap"
            raise InitializationError(msg)
        self.engine = engine
        self.character = character if character is not None else getattr(engine, "character", None)
        self.cache = cache if cache is not None else RuntimeCache()
        self.cache.bind(engine, self)

        self._actions: dict[str, leg.Action] = {}
        self._evaluators: dict[str, leg.Evaluator] = {}
        self._providers: dict[str, leg.Provider] = {}
        self._local_providers: list[leg.Provider] = list(providers)
        self._memory_managers: dict[str, Any] = {}
        self._pending_services: list[tuple[leg.ServiceType, Any]] = []
        self._state_cache: OrderedDict[str, leg.State] = OrderedDict()
        self._initialized = False

        self.capabilities = CapabilityManager(engine)
        self.database_adapter = DatabaseAdapterProxy(self)
        self.cache_manager = CacheManagerProxy(self)
        self.rag_knowledge_manager = KnowledgeManagerProxy(self)

        for manager in managers:
            self.register_memory_manager(manager)
        for action in actions:
            self.register_action(action)
        for evaluator in evaluators:
            self.register_evaluator(evaluator)
        for plugin in plugins:
            self._add_plugin(plugin)
        for service in services:
            self._add_service(service)

    def __repr__(self) -> str:
        return f"CompatRuntime(agent_id={self.agent_id!r})"

    # -- Identity and settings -----------------------------------------------

    @property
    def agent_id(self) -> str:
        return self.engine.agent_id

    @property
    def actions(self) -> list[leg.Action]:
        return list(self._actions.values())

    @property
    def evaluators(self) -> list[leg.Evaluator]:
        return list(self._evaluators.values())

    @property
    def providers(self) -> list[leg.Provider]:
        return [*self._local_providers, *self._providers.values()]

    def get_setting(self, key: str) -> Any:
        return self.engine.get_setting(key)

    def get_conversation_length(self) -> int:
        length = self.engine.get_conversation_length()
        return length or settings.conversation_length

    # -- Lifecycle -----------------------------------------------------------

    async def initialize(self) -> None:
        """Initialize registered legacy services, in registration order.

        The engine itself is started by its host. Raises InitializationError
        on the first service that fails.
        """
        if self._initialized:
            return
        await self._initialize_pending()
        self._initialized = True
        logger.info(
            "Legacy runtime ready for agent %s: %d actions, %d evaluators, %d providers",
            self.agent_id,
            len(self._actions),
            len(self._evaluators),
            len(self.providers),
        )

    async def _initialize_pending(self) -> None:
        pending, self._pending_services = self._pending_services, []
        for service_type, service in pending:
            try:
                await service.initialize(self)
            except Exception as exc:
                logger.exception("Service %s failed to initialize", service_type)
                msg = f"Service {service_type} failed to initialize"
                raise InitializationError(msg) from exc

    async def stop(self) -> None:
        """Tear down every service and adapter. Failures are logged, never raised.

        Registered services stay registered and are initialized again by the
        next ``initialize``.
        """
        await self.capabilities.stop_all()
        self._pending_services = self.capabilities.registered_services()
        self._state_cache.clear()
        self._initialized = False
        logger.info("Legacy runtime stopped for agent %s", self.agent_id)

    # -- Registration --------------------------------------------------------

    def register_action(self, action: leg.Action) -> None:
        """Register ``action`` here and with the engine. Repeat names are ignored."""
        if action.name in self._actions:
            logger.debug("Action %s is already registered", action.name)
            return
        self._actions[action.name] = action
        if any(a.name == action.name for a in self.engine.actions):
            return
        self.engine.register_action(action_to_current(action, self.cache))

    def register_evaluator(self, evaluator: leg.Evaluator) -> None:
        if evaluator.name in self._evaluators:
            logger.debug("Evaluator %s is already registered", evaluator.name)
            return
        self._evaluators[evaluator.name] = evaluator
        if any(e.name == evaluator.name for e in self.engine.evaluators):
            return
        self.engine.register_evaluator(evaluator_to_current(evaluator, self.cache))

    def register_context_provider(self, provider: leg.Provider) -> None:
        name = provider_name(provider)
        if name in self._providers:
            logger.debug("Provider %s is already registered", name)
            return
        self._providers[name] = provider
        if any(p.name == name for p in self.engine.providers):
            return
        self.engine.register_provider(provider_to_current(provider, self.cache))

    def _add_service(self, service: Any) -> None:
        service_type = self.capabilities.register_service(service)
        self._pending_services.append((service_type, service))

    def _add_plugin(self, plugin: Any) -> None:
        if not is_legacy_plugin(plugin):
            plugin = unwrap_plugin(plugin, self.cache)
        logger.info("Registering plugin %s", plugin.name)
        for action in plugin.actions or []:
            self.register_action(action)
        for evaluator in plugin.evaluators or []:
            self.register_evaluator(evaluator)
        for provider in plugin.providers or []:
            self.register_context_provider(provider)
        for service in plugin.services or []:
            self._add_service(service)

    async def register_plugin(self, plugin: Any) -> None:
        self._add_plugin(plugin)
        if self._initialized:
            await self._initialize_pending()

    async def register_service(self, service: Any) -> None:
        """Register a legacy service under its declared type.

        Raises UnknownServiceTypeError for untagged services. After
        ``initialize`` the service is initialized right away.
        """
        self._add_service(service)
        if self._initialized:
            await self._initialize_pending()

    def get_service(self, service_type: leg.ServiceType | str) -> Any | None:
        return self.capabilities.get_service(service_type)

    def register_memory_manager(self, manager: Any) -> None:
        table_name = getattr(manager, "table_name", None)
        if not table_name:
            msg = "Memory manager must have a table_name"
            raise ValueError(msg)
        if table_name in self._memory_managers:
            logger.warning("Memory manager for table %s is already registered", table_name)
            return
        self._memory_managers[table_name] = manager

    def get_memory_manager(self, table_name: str) -> Any:
        """Return the manager for ``table_name``, creating a forwarding proxy if needed."""
        manager = self._memory_managers.get(table_name)
        if manager is None:
            manager = MemoryManagerProxy(self, table_name)
            self._memory_managers[table_name] = manager
        return manager

    @property
    def message_manager(self) -> Any:
        return self.get_memory_manager(MESSAGES_TABLE)

    @property
    def description_manager(self) -> Any:
        return self.get_memory_manager(DESCRIPTIONS_TABLE)

    @property
    def documents_manager(self) -> Any:
        return self.get_memory_manager(DOCUMENTS_TABLE)

    @property
    def knowledge_manager(self) -> Any:
        return self.get_memory_manager(FRAGMENTS_TABLE)

    @property
    def lore_manager(self) -> Any:
        return self.get_memory_manager(LORE_TABLE)

    # -- Actions and evaluation ----------------------------------------------

    async def process_actions(
        self,
        message: leg.Memory,
        responses: list[leg.Memory],
        state: leg.State | None = None,
        callback: leg.HandlerCallback | None = None,
    ) -> None:
        with forwarding("process_actions"):
            await self.engine.process_actions(
                memory_to_current(message),
                [memory_to_current(r) for r in responses],
                state_to_current(state, self.cache) if state is not None else None,
                callback_to_current(callback),
            )

    async def evaluate(
        self,
        message: leg.Memory,
        state: leg.State | None = None,
        did_respond: bool = False,
        callback: leg.HandlerCallback | None = None,
    ) -> list[str] | None:
        """Run the engine's evaluators. Returns the names of those that ran."""
        with forwarding("evaluate"):
            ran = await self.engine.evaluate(
                memory_to_current(message),
                state_to_current(state, self.cache) if state is not None else None,
                did_respond,
                callback_to_current(callback),
            )
        if ran is None:
            return None
        return [e.name for e in ran]

    # -- State composition ---------------------------------------------------

    async def compose_state(
        self,
        message: leg.Memory,
        additional_keys: Mapping[str, Any] | None = None,
        *,
        skip_cache: bool = False,
    ) -> leg.State:
        """Build the legacy state for ``message``.

        The engine composes its state, which is flattened and then topped up
        with whatever the legacy contract expects and the engine left out:
        actors, goals, recent messages, façade-local provider output and
        action/evaluator listings. Results are cached per message id and
        every caller gets its own copy; ``additional_keys`` are applied last
        and never cached.
        """
        state = None
        if message.id and not skip_cache:
            state = self._state_cache.get(message.id)
            if state is not None:
                self._state_cache.move_to_end(message.id)
        if state is None:
            state = await self._compose(message, skip_cache)
            if message.id:
                self._remember(message.id, state)
        state = state.detached()
        if additional_keys:
            return state.with_updates(additional_keys)
        return state

    def _remember(self, key: str, state: leg.State) -> None:
        self._state_cache[key] = state
        self._state_cache.move_to_end(key)
        while len(self._state_cache) > settings.state_cache_size:
            self._state_cache.popitem(last=False)

    async def _compose(self, message: leg.Memory, skip_cache: bool) -> leg.State:
        with forwarding("compose_state"):
            current = await self.engine.compose_state(
                memory_to_current(message), skip_cache=skip_cache
            )
        state = state_to_legacy(current, self.cache)
        state = state.with_updates(self._identity(state, message))
        state = await self._fill_context(state, message)
        return await self._fill_components(state, message)

    def _identity(self, state: leg.State, message: leg.Memory) -> dict[str, Any]:
        agent_name = getattr(self.character, "name", None) or ""
        candidates = {
            "agent_id": self.agent_id,
            "user_id": message.user_id,
            "room_id": message.room_id,
            "agent_name": agent_name,
        }
        return {k: v for k, v in candidates.items() if v and not getattr(state, k)}

    async def _fill_context(self, state: leg.State, message: leg.Memory) -> leg.State:
        room_id = state.room_id or message.room_id
        lookups: dict[str, Any] = {}
        if not state.actors_data:
            lookups["actors"] = self.get_actor_details(room_id=room_id)
        if not state.goals_data:
            lookups["goals"] = self.get_goals(room_id=room_id)
        if not state.recent_messages_data:
            lookups["messages"] = self.get_memories(
                room_id=room_id,
                count=self.get_conversation_length(),
                unique=False,
                table_name=MESSAGES_TABLE,
            )

        *found, provided = await asyncio.gather(
            *lookups.values(), self._run_legacy_providers(message, state)
        )
        fetched = dict(zip(lookups, found, strict=True))

        updates: dict[str, Any] = {}
        actors = fetched.get("actors", state.actors_data)
        if "actors" in fetched:
            updates["actors_data"] = actors
            if not state.actors:
                updates["actors"] = formatting.format_actors(actors)
        if "goals" in fetched:
            updates["goals_data"] = fetched["goals"]
            if not state.goals:
                updates["goals"] = formatting.format_goals_as_string(fetched["goals"])
        if "messages" in fetched:
            updates["recent_messages_data"] = fetched["messages"]
            if not state.recent_messages:
                known = [a for a in actors if isinstance(a, leg.Actor)]
                updates["recent_messages"] = formatting.format_messages(fetched["messages"], known)

        texts = [r.text for r in provided if r.text]
        if texts:
            block = formatting.add_header(ADDITIONAL_INFO_HEADER, "\n".join(texts))
            updates["providers"] = f"{state.providers}\n{block}" if state.providers else block
        for result in provided:
            for key, value in result.values.items():
                if key not in updates and _unpopulated(state, key):
                    updates[key] = value

        return state.with_updates(updates)

    async def _run_legacy_providers(
        self, message: leg.Memory, state: leg.State
    ) -> list[cur.ProviderResult]:
        async def _run(provider: leg.Provider) -> cur.ProviderResult | None:
            try:
                return normalize_provider_result(await provider.get(self, message, state))
            except Exception:
                logger.exception("Provider %s failed, skipping", provider_name(provider))
                return None

        engine_names = {p.name for p in self.engine.providers}
        legacy_only = [p for p in self.providers if provider_name(p) not in engine_names]
        results = await asyncio.gather(*(_run(p) for p in legacy_only))
        return [r for r in results if r is not None]

    async def _validate(self, component: Any, message: leg.Memory, state: leg.State) -> bool:
        try:
            return bool(await component.validate(self, message, state))
        except Exception:
            logger.exception("validate failed for %s", component.name)
            return False

    async def _fill_components(self, state: leg.State, message: leg.Memory) -> leg.State:
        actions = list(self._actions.values())
        evaluators = list(self._evaluators.values())
        checks = await asyncio.gather(
            *(self._validate(a, message, state) for a in actions),
            *(self._validate(e, message, state) for e in evaluators),
        )
        valid_actions = [a for a, ok in zip(actions, checks[: len(actions)], strict=True) if ok]
        valid_evaluators = [
            e for e, ok in zip(evaluators, checks[len(actions) :], strict=True) if ok
        ]

        rendered = {
            "action_names": lambda: formatting.format_action_names(valid_actions),
            "actions": lambda: formatting.format_actions(valid_actions),
            "action_examples": lambda: formatting.compose_action_examples(valid_actions),
            "evaluators": lambda: formatting.format_evaluators(valid_evaluators),
            "evaluator_names": lambda: formatting.format_evaluator_names(valid_evaluators),
            "evaluator_examples": lambda: formatting.format_evaluator_examples(valid_evaluators),
        }
        updates = {k: render() for k, render in rendered.items() if not getattr(state, k)}
        # Engine components stay first; valid legacy ones join unless already listed
        merges = (("actions_data", valid_actions), ("evaluators_data", valid_evaluators))
        for key, valid in merges:
            listed = getattr(state, key)
            known = {_component_name(c) for c in listed}
            missing = [c for c in valid if c.name not in known]
            if missing:
                updates[key] = [*listed, *missing]
        return state.with_updates(updates)

    async def update_recent_message_state(self, state: leg.State) -> leg.State:
        """Refresh the recent messages and attachments of ``state``."""
        messages = await self.get_memories(
            room_id=state.room_id,
            count=self.get_conversation_length(),
            unique=False,
            table_name=MESSAGES_TABLE,
        )
        actors = [a for a in state.actors_data if isinstance(a, leg.Actor)]
        attachments = [a for m in messages for a in m.content.attachments or []]
        lines = [
            f"[{a.get('id', '')} - {a.get('title', '')} ({a.get('source', '')})]\n"
            f"Text: {a.get('text', '')}"
            for a in attachments
        ]
        return state.with_updates(
            {
                "recent_messages": formatting.format_messages(messages, actors),
                "recent_messages_data": messages,
                "attachments": formatting.add_header("# Attachments", "\n".join(lines)),
            }
        )

    # -- Memories ------------------------------------------------------------

    async def add_embedding_to_memory(self, memory: leg.Memory) -> leg.Memory:
        return await add_embedding_to_memory(self, memory)

    async def get_memories(
        self,
        *,
        room_id: str,
        table_name: str,
        count: int | None = None,
        unique: bool = True,
        start: int | None = None,
        end: int | None = None,
    ) -> list[leg.Memory]:
        with forwarding("get_memories"):
            found = await self.engine.get_memories(
                table_name=table_name,
                room_id=room_id,
                count=count,
                unique=unique,
                start=start,
                end=end,
            )
        return [memory_to_legacy(m) for m in found]

    async def get_memory_by_id(self, memory_id: str) -> leg.Memory | None:
        with forwarding("get_memory_by_id"):
            memory = await self.engine.get_memory_by_id(memory_id)
        return memory_to_legacy(memory) if memory is not None else None

    async def get_memories_by_ids(
        self, ids: list[str], table_name: str | None = None
    ) -> list[leg.Memory]:
        with forwarding("get_memories_by_ids"):
            found = await self.engine.get_memories_by_ids(ids, table_name)
        return [memory_to_legacy(m) for m in found]

    async def get_memories_by_room_ids(
        self, *, room_ids: list[str], table_name: str, limit: int | None = None
    ) -> list[leg.Memory]:
        with forwarding("get_memories_by_room_ids"):
            found = await self.engine.get_memories_by_room_ids(
                table_name=table_name, room_ids=room_ids, limit=limit
            )
        return [memory_to_legacy(m) for m in found]

    async def get_cached_embeddings(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        with forwarding("get_cached_embeddings"):
            return await self.engine.get_cached_embeddings(params)

    async def log(
        self, *, body: dict[str, Any], user_id: str, room_id: str, type: str  # noqa: A002
    ) -> None:
        with forwarding("log"):
            await self.engine.log(
                {"body": body, "entity_id": user_id, "room_id": room_id, "type": type}
            )

    async def search_memories(
        self,
        *,
        table_name: str,
        room_id: str,
        embedding: list[float],
        match_threshold: float | None = None,
        match_count: int | None = None,
        unique: bool | None = None,
    ) -> list[leg.Memory]:
        with forwarding("search_memories"):
            found = await self.engine.search_memories(
                table_name=table_name,
                room_id=room_id,
                embedding=list(embedding),
                match_threshold=match_threshold,
                count=match_count,
                unique=unique,
            )
        return [memory_to_legacy(m) for m in found]

    async def search_memories_by_embedding(
        self,
        embedding: list[float],
        *,
        table_name: str,
        match_threshold: float | None = None,
        count: int | None = None,
        room_id: str | None = None,
        unique: bool | None = None,
    ) -> list[leg.Memory]:
        with forwarding("search_memories_by_embedding"):
            found = await self.engine.search_memories(
                table_name=table_name,
                room_id=room_id,
                embedding=list(embedding),
                match_threshold=match_threshold,
                count=count,
                unique=unique,
            )
        return [memory_to_legacy(m) for m in found]

    async def create_memory(
        self, memory: leg.Memory, table_name: str, unique: bool = False
    ) -> None:
        with forwarding("create_memory", tolerate_duplicates=True):
            await self.engine.create_memory(memory_to_current(memory), table_name, unique)

    async def remove_memory(self, memory_id: str, table_name: str | None = None) -> None:
        with forwarding("remove_memory"):
            await self.engine.delete_memory(memory_id)

    async def remove_all_memories(self, room_id: str, table_name: str) -> None:
        with forwarding("remove_all_memories"):
            await self.engine.delete_all_memories(room_id, table_name)

    async def count_memories(
        self, room_id: str, unique: bool = True, table_name: str = ""
    ) -> int:
        with forwarding("count_memories"):
            return await self.engine.count_memories(room_id, unique, table_name)

    # -- Actors and accounts -------------------------------------------------

    async def get_actor_details(self, *, room_id: str) -> list[leg.Actor]:
        with forwarding("get_actor_details"):
            entities = await self.engine.get_entities_for_room(room_id)
        return [entity_to_actor(e) for e in entities]

    async def get_account_by_id(self, user_id: str) -> leg.Account | None:
        with forwarding("get_account_by_id"):
            entity = await self.engine.get_entity_by_id(user_id)
        return entity_to_account(entity) if entity is not None else None

    async def create_account(self, account: leg.Account) -> bool:
        created = True
        with forwarding("create_account", tolerate_duplicates=True):
            created = await self.engine.create_entity(account_to_entity(account, self.agent_id))
        return bool(created)

    # -- Goals ---------------------------------------------------------------

    async def get_goals(
        self,
        *,
        room_id: str,
        user_id: str | None = None,
        only_in_progress: bool = True,
        count: int = 5,
    ) -> list[leg.Goal]:
        with forwarding("get_goals"):
            tasks = await self.engine.get_tasks(room_id=room_id, tags=[COMPAT_TAG])
        goals = [g for g in map(task_to_goal, tasks) if g is not None]
        if user_id:
            goals = [g for g in goals if g.user_id == user_id]
        if only_in_progress:
            goals = [g for g in goals if g.status == leg.GoalStatus.IN_PROGRESS]
        return goals[:count] if count else goals

    async def create_goal(self, goal: leg.Goal) -> None:
        with forwarding("create_goal", tolerate_duplicates=True):
            await self.engine.create_task(goal_to_task(goal))

    async def update_goal(self, goal: leg.Goal) -> None:
        if not goal.id:
            msg = "Cannot update a goal without an id"
            raise ValueError(msg)
        with forwarding("update_goal"):
            await self.engine.update_task(goal.id, goal_to_task(goal))

    async def update_goal_status(self, *, goal_id: str, status: leg.GoalStatus | str) -> None:
        with forwarding("update_goal_status"):
            task = await self.engine.get_task(goal_id)
        goal = task_to_goal(task) if task is not None else None
        if goal is None:
            logger.warning("update_goal_status: no goal with id %s", goal_id)
            return
        goal = goal.model_copy(update={"status": leg.GoalStatus(status)})
        with forwarding("update_goal_status"):
            await self.engine.update_task(goal_id, goal_to_task(goal))

    async def remove_goal(self, goal_id: str) -> None:
        with forwarding("remove_goal"):
            await self.engine.delete_task(goal_id)

    async def remove_all_goals(self, room_id: str) -> None:
        with forwarding("remove_all_goals"):
            tasks = await self.engine.get_tasks(room_id=room_id, tags=[COMPAT_TAG])
            await asyncio.gather(*(self.engine.delete_task(t.id) for t in tasks if t.id))

    # -- Rooms and participants ----------------------------------------------

    async def get_room(self, room_id: str) -> str | None:
        with forwarding("get_room"):
            room = await self.engine.get_room(room_id)
        return room.id if room is not None else None

    async def create_room(self, room_id: str | None = None) -> str:
        """Create a room and return its id. An existing room's id is returned as is."""
        room_id = room_id or new_id()
        with forwarding("create_room"):
            existing = await self.engine.get_room(room_id)
        if existing is not None:
            return existing.id
        room = cur.Room(id=room_id, name=room_id, agent_id=self.agent_id, source="legacy")
        with forwarding("create_room", tolerate_duplicates=True):
            await self.engine.create_room(room)
        return room_id

    async def remove_room(self, room_id: str) -> None:
        with forwarding("remove_room"):
            await self.engine.delete_room(room_id)

    async def get_rooms_for_participant(self, user_id: str) -> list[str]:
        with forwarding("get_rooms_for_participant"):
            return await self.engine.get_rooms_for_participant(user_id)

    async def get_rooms_for_participants(self, user_ids: list[str]) -> list[str]:
        with forwarding("get_rooms_for_participants"):
            return await self.engine.get_rooms_for_participants(user_ids)

    async def add_participant(self, user_id: str, room_id: str) -> bool:
        added = True
        with forwarding("add_participant", tolerate_duplicates=True):
            added = await self.engine.add_participant(user_id, room_id)
        return bool(added)

    async def remove_participant(self, user_id: str, room_id: str) -> bool:
        with forwarding("remove_participant"):
            return bool(await self.engine.remove_participant(user_id, room_id))

    async def get_participants_for_account(self, user_id: str) -> list[leg.Participant]:
        with forwarding("get_participants_for_account"):
            found = await self.engine.get_participants_for_entity(user_id)
        return [participant_to_legacy(p) for p in found]

    async def get_participants_for_room(self, room_id: str) -> list[str]:
        with forwarding("get_participants_for_room"):
            return await self.engine.get_participants_for_room(room_id)

    async def get_participant_user_state(self, room_id: str, user_id: str) -> str | None:
        with forwarding("get_participant_user_state"):
            return await self.engine.get_participant_user_state(room_id, user_id)

    async def set_participant_user_state(
        self, room_id: str, user_id: str, state: str | None
    ) -> None:
        with forwarding("set_participant_user_state"):
            await self.engine.set_participant_user_state(room_id, user_id, state)

    # -- Relationships -------------------------------------------------------

    async def create_relationship(self, *, user_a: str, user_b: str) -> bool:
        created = True
        with forwarding("create_relationship", tolerate_duplicates=True):
            created = await self.engine.create_relationship(
                source_entity_id=user_a, target_entity_id=user_b
            )
        return bool(created)

    async def get_relationship(self, *, user_a: str, user_b: str) -> leg.Relationship | None:
        with forwarding("get_relationship"):
            found = await self.engine.get_relationship(
                source_entity_id=user_a, target_entity_id=user_b
            )
        return relationship_to_legacy(found) if found is not None else None

    async def get_relationships(self, *, user_id: str) -> list[leg.Relationship]:
        with forwarding("get_relationships"):
            found = await self.engine.get_relationships(entity_id=user_id)
        return [relationship_to_legacy(r) for r in found]

    # -- Connections ---------------------------------------------------------

    async def ensure_user_exists(
        self,
        user_id: str,
        user_name: str | None = None,
        name: str | None = None,
        email: str | None = None,
        source: str | None = None,
    ) -> None:
        if await self.get_account_by_id(user_id) is not None:
            return
        await self.create_account(
            leg.Account(
                id=user_id,
                name=name or user_name or "",
                username=user_name or "",
                email=email,
                details={"source": source} if source else {},
            )
        )

    async def ensure_participant_exists(self, user_id: str, room_id: str) -> None:
        rooms = await self.get_rooms_for_participant(user_id)
        if room_id not in rooms:
            await self.add_participant(user_id, room_id)

    async def ensure_participant_in_room(self, user_id: str, room_id: str) -> None:
        with forwarding("ensure_participant_in_room"):
            await self.engine.ensure_participant_in_room(user_id, room_id)

    async def ensure_room_exists(self, room_id: str) -> None:
        room = cur.Room(id=room_id, name=room_id, agent_id=self.agent_id, source="legacy")
        with forwarding("ensure_room_exists", tolerate_duplicates=True):
            await self.engine.ensure_room_exists(room)

    async def ensure_connection(
        self,
        user_id: str,
        room_id: str,
        user_name: str | None = None,
        user_screen_name: str | None = None,
        source: str | None = None,
    ) -> None:
        with forwarding("ensure_connection", tolerate_duplicates=True):
            await self.engine.ensure_connection(
                entity_id=user_id,
                room_id=room_id,
                user_name=user_name,
                name=user_screen_name,
                source=source,
            )

    # -- Knowledge -----------------------------------------------------------

    async def get_knowledge(self, **params: Any) -> list[leg.RAGKnowledgeItem]:
        return await self.rag_knowledge_manager.get_knowledge(**params)

    async def search_knowledge(self, **params: Any) -> list[leg.RAGKnowledgeItem]:
        return await self.rag_knowledge_manager.search_knowledge(**params)

    async def create_knowledge(self, item: leg.RAGKnowledgeItem) -> None:
        await self.rag_knowledge_manager.create_knowledge(item)

    async def remove_knowledge(self, knowledge_id: str) -> None:
        await self.rag_knowledge_manager.remove_knowledge(knowledge_id)

    async def clear_knowledge(self, shared: bool | None = None) -> None:
        await self.rag_knowledge_manager.clear_knowledge(shared)
