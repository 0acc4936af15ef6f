"""Tests for the legacy database, cache and memory manager proxies."""

from unittest.mock import AsyncMock

from conftest import legacy_message

from plugin_compat.config import settings
from plugin_compat.current import types as cur
from plugin_compat.current.types import ModelType
from plugin_compat.legacy import types as leg
from plugin_compat.proxies import MemoryManagerProxy, add_embedding_to_memory

# -- Database adapter --------------------------------------------------------


async def test_database_adapter_ignores_agent_id(engine, compat) -> None:
    engine.add_memory(cur.Memory(id="m1", room_id="room-1", content=cur.Content(text="hi")))

    found = await compat.database_adapter.get_memories(
        room_id="room-1", table_name="messages", agent_id="agent-1", count=5
    )

    assert [m.id for m in found] == ["m1"]
    assert isinstance(found[0], leg.Memory)


async def test_database_adapter_goal_round_trip(compat) -> None:
    adapter = compat.database_adapter
    goal = leg.Goal(id="goal-1", room_id="room-1", user_id="user-1", name="Ship v1")

    await adapter.create_goal(goal)
    await adapter.update_goal_status(goal_id="goal-1", status=leg.GoalStatus.DONE)

    assert await adapter.get_goals(room_id="room-1", agent_id="agent-1") == []
    done = await adapter.get_goals(room_id="room-1", only_in_progress=False)
    assert done[0].status == leg.GoalStatus.DONE


async def test_database_adapter_cache_calls(engine, compat) -> None:
    adapter = compat.database_adapter

    assert await adapter.set_cache(key="k", value="v", agent_id="agent-1") is True
    assert await adapter.get_cache(key="k", agent_id="agent-1") == "v"
    assert await adapter.delete_cache(key="k", agent_id="agent-1") is True
    assert engine.cache == {}


async def test_database_adapter_relationships(compat) -> None:
    adapter = compat.database_adapter

    assert await adapter.create_relationship(user_a="user-1", user_b="user-2") is True
    relationship = await adapter.get_relationship(user_a="user-2", user_b="user-1")

    assert relationship.user_a == "user-1"
    assert [r.user_b for r in await adapter.get_relationships(user_id="user-1")] == ["user-2"]


async def test_cache_manager(engine, compat) -> None:
    await compat.cache_manager.set("greeting", {"text": "hi"}, {"expires": 60})

    assert await compat.cache_manager.get("greeting") == {"text": "hi"}
    await compat.cache_manager.delete("greeting")
    assert await compat.cache_manager.get("greeting") is None


# -- Memory manager ----------------------------------------------------------


async def test_memory_manager_uses_its_table(engine, compat) -> None:
    manager = compat.get_memory_manager("lore")
    message = legacy_message("The sea is deep")

    await manager.create_memory(message)

    table, stored = engine.memories[message.id]
    assert table == "lore"
    assert stored.entity_id == "user-1"
    assert await manager.count_memories("room-1") == 1
    assert [m.id for m in await manager.get_memories(room_id="room-1")] == [message.id]

    await manager.remove_memory(message.id)
    assert await manager.count_memories("room-1") == 0


async def test_memory_manager_search_and_bulk_reads(engine, compat) -> None:
    manager = compat.message_manager
    first = legacy_message("one")
    second = legacy_message("two", room_id="room-2")
    await manager.create_memory(first)
    await manager.create_memory(second)

    by_ids = await manager.get_memories_by_ids([first.id, second.id])
    by_rooms = await manager.get_memories_by_room_ids(room_ids=["room-2"])
    searched = await manager.search_memories_by_embedding([0.1], room_id="room-1")

    assert {m.id for m in by_ids} == {first.id, second.id}
    assert [m.id for m in by_rooms] == [second.id]
    assert [m.id for m in searched] == [first.id]


async def test_memory_manager_remove_all(engine, compat) -> None:
    manager = compat.message_manager
    await manager.create_memory(legacy_message("one"))
    await manager.create_memory(legacy_message("two"))

    await manager.remove_all_memories("room-1")

    assert engine.memories == {}


async def test_cached_embeddings_use_configured_thresholds(compat, monkeypatch) -> None:
    lookup = AsyncMock(return_value=[{"embedding": [0.1]}])
    monkeypatch.setattr(compat, "get_cached_embeddings", lookup)

    result = await compat.message_manager.get_cached_embeddings("hello")

    assert result == [{"embedding": [0.1]}]
    params = lookup.call_args.args[0]
    assert params["query_table_name"] == "messages"
    assert params["query_input"] == "hello"
    assert params["query_threshold"] == settings.cached_embedding_threshold
    assert params["query_match_count"] == settings.cached_embedding_match_count


async def test_cached_embeddings_failure_is_empty(compat, monkeypatch) -> None:
    monkeypatch.setattr(
        compat, "get_cached_embeddings", AsyncMock(side_effect=RuntimeError("db down"))
    )
    assert await compat.message_manager.get_cached_embeddings("hello") == []


def test_named_managers(compat) -> None:
    assert compat.message_manager.table_name == "messages"
    assert compat.description_manager.table_name == "descriptions"
    assert compat.documents_manager.table_name == "documents"
    assert compat.knowledge_manager.table_name == "fragments"
    assert compat.lore_manager.table_name == "lore"
    assert compat.get_memory_manager("messages") is compat.message_manager
    assert isinstance(compat.message_manager, MemoryManagerProxy)


# -- Embeddings --------------------------------------------------------------


async def test_add_embedding_through_engine(engine, compat) -> None:
    engine.models[ModelType.TEXT_EMBEDDING] = [0.1, 0.2]

    result = await compat.add_embedding_to_memory(legacy_message("hi"))

    assert result.embedding == [0.1, 0.2]


async def test_add_embedding_falls_back_to_model(engine, compat, monkeypatch) -> None:
    monkeypatch.setattr(
        engine, "add_embedding_to_memory", AsyncMock(side_effect=NotImplementedError)
    )
    engine.models[ModelType.TEXT_EMBEDDING] = [1, 2]

    result = await add_embedding_to_memory(compat, legacy_message("hi"))

    assert result.embedding == [1.0, 2.0]
    assert engine.model_calls == [(ModelType.TEXT_EMBEDDING, {"text": "hi"})]


async def test_add_embedding_failure_returns_memory(engine, compat) -> None:
    message = legacy_message("hi")
    assert await add_embedding_to_memory(compat, message) is message


async def test_add_embedding_skips_empty_text(engine, compat, monkeypatch) -> None:
    monkeypatch.setattr(
        engine, "add_embedding_to_memory", AsyncMock(side_effect=NotImplementedError)
    )
    message = legacy_message("   ")

    assert await add_embedding_to_memory(compat, message) is message
    assert engine.model_calls == []
