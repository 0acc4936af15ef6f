"""Tests for conversation state translation."""

from plugin_compat.current import types as cur
from plugin_compat.legacy import types as leg
from plugin_compat.legacy.types import ARRAY_FIELDS, STRING_FIELDS
from plugin_compat.records import OpenRecord
from plugin_compat.translators import state_to_current, state_to_legacy


async def _noop(*args, **kwargs):
    return True


# -- Extension records -------------------------------------------------------


def test_open_record_normalises_extension_values() -> None:
    class Thing:
        def __str__(self) -> str:
            return "thing"

    state = leg.State(mood="calm", nested={"when": Thing()})

    assert state.extensions == {"mood": "calm", "nested": {"when": "thing"}}


def test_with_updates_sets_fields_and_extensions() -> None:
    state = leg.State(bio="old")

    updated = state.with_updates({"bio": "new", "mood": "calm"})

    assert updated.bio == "new"
    assert updated.extensions == {"mood": "calm"}
    assert state.bio == "old"
    assert isinstance(updated, OpenRecord)


# -- current -> legacy -------------------------------------------------------


def test_state_to_legacy_none_gives_defaults() -> None:
    state = state_to_legacy(None)

    assert state.bio == ""
    assert state.recent_messages_data == []
    assert state.extensions == {}


def test_state_to_legacy_flattens_values_and_data() -> None:
    message = cur.Memory(id="m1", entity_id="user-1", content=cur.Content(text="hi"))
    current = cur.State(
        values={"agent_name": "Eliza", "bio": ["Line one", "Line two"], "mood": "calm"},
        data={"recent_messages_data": [message], "custom": {"k": 1}},
        text="rendered",
    )

    state = state_to_legacy(current)

    assert state.agent_name == "Eliza"
    assert state.bio == "Line one\nLine two"
    assert state.text == "rendered"
    assert isinstance(state.recent_messages_data[0], leg.Memory)
    assert state.recent_messages_data[0].user_id == "user-1"
    assert state.extensions == {"mood": "calm", "custom": {"k": 1}}


def test_state_to_legacy_prefers_values_for_character_fields() -> None:
    current = cur.State(values={"bio": "from values"}, bio="top level", topics="rust")

    state = state_to_legacy(current)

    assert state.bio == "from values"
    assert state.topics == "rust"


def test_state_to_legacy_translates_actions_data() -> None:
    action = cur.Action(name="REPLY", description="Reply", handler=_noop, validate=_noop)

    state = state_to_legacy(cur.State(data={"actions_data": [action]}))

    assert isinstance(state.actions_data[0], leg.Action)
    assert state.actions_data[0].wrapped is action


# -- legacy -> current -------------------------------------------------------


def test_state_to_current_skips_untouched_defaults() -> None:
    current = state_to_current(leg.State(agent_name="Eliza"))

    assert current.values == {"agent_name": "Eliza"}
    assert current.data == {}


def test_state_to_current_keeps_explicit_empty_fields() -> None:
    current = state_to_current(leg.State(bio=""))
    assert current.values == {"bio": ""}


def test_state_to_current_splits_scalars_and_structures() -> None:
    message = leg.Memory(id="m1", user_id="user-1", content=leg.Content(text="hi"))
    state = leg.State(
        text="rendered", recent_messages_data=[message], mood="calm", seen={"a": 1}
    )

    current = state_to_current(state)

    assert current.text == "rendered"
    assert current.values["mood"] == "calm"
    assert current.data["seen"] == {"a": 1}
    assert current.data["recent_messages_data"][0].entity_id == "user-1"


def test_extension_fields_survive_a_round_trip() -> None:
    state = leg.State(mood="calm", flags=["a", "b"], score=3)

    back = state_to_legacy(state_to_current(state))

    assert back.extensions == {"mood": "calm", "flags": ["a", "b"], "score": 3}


def test_empty_envelope_fills_every_documented_field() -> None:
    state = state_to_legacy(cur.State())

    for name in STRING_FIELDS:
        assert getattr(state, name) == "", name
    for name in ARRAY_FIELDS:
        assert getattr(state, name) == [], name


def test_envelope_survives_a_round_trip() -> None:
    current = cur.State(
        values={"bio": "b", "count": 2}, data={"custom": "flat"}, text="t", mood="calm"
    )

    back = state_to_current(state_to_legacy(current))

    assert back.values == {"bio": "b", "count": 2}
    assert back.data == {"custom": "flat"}
    assert back.text == "t"
    assert back.extensions == {"mood": "calm"}


def test_bucket_of_origin_survives_updates() -> None:
    flat = state_to_legacy(cur.State(mood="calm")).with_updates({"added": {"k": 1}})

    back = state_to_current(flat)

    assert back.extensions == {"mood": "calm"}
    assert back.data == {"added": {"k": 1}}
