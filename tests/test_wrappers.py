"""Tests for plugin bundle detection and wrapping."""

import logging
from types import SimpleNamespace

import pytest

from plugin_compat import is_legacy_plugin, unwrap_plugin, wrap_plugin
from plugin_compat.config import settings
from plugin_compat.current import types as cur
from plugin_compat.errors import PluginVersionError
from plugin_compat.legacy import types as leg
from plugin_compat.legacy.services import Service
from plugin_compat.runtime import CompatRuntime
from plugin_compat.runtime_cache import RuntimeCache
from plugin_compat.wrappers import plugin_api_version


async def _yes(*args, **kwargs) -> bool:
    return True


class PdfService(Service):
    service_type = leg.ServiceType.PDF

    def __init__(self) -> None:
        self.initialized_with = None

    async def initialize(self, runtime) -> None:
        self.initialized_with = runtime


def _legacy_plugin(**overrides) -> leg.Plugin:
    fields = {
        "name": "greeter",
        "actions": [
            leg.Action(
                name="WAVE", description="Wave", handler=_yes, validate=_yes, similes=["HI"]
            )
        ],
        "providers": [leg.Provider(get=_yes, name="time")],
        "evaluators": [
            leg.Evaluator(name="FACTS", description="Facts", handler=_yes, validate=_yes)
        ],
    }
    fields.update(overrides)
    return leg.Plugin(**fields)


# -- Detection ---------------------------------------------------------------


def test_tagged_bundles() -> None:
    assert is_legacy_plugin(_legacy_plugin()) is True
    assert is_legacy_plugin(cur.Plugin(name="core")) is False


def test_tag_beats_shape() -> None:
    # Has similes, which untagged bundles would be sniffed as legacy for
    plugin = _legacy_plugin(api_version="current")
    assert plugin_api_version(plugin) == "current"


def test_unknown_tag_is_rejected() -> None:
    with pytest.raises(PluginVersionError, match="v3"):
        plugin_api_version(SimpleNamespace(name="odd", api_version="v3"))


@pytest.mark.parametrize(
    ("bundle", "expected"),
    [
        (SimpleNamespace(name="a", actions=[SimpleNamespace(similes=["X"])]), "legacy"),
        (SimpleNamespace(name="b", actions=[SimpleNamespace(similes=[])], init=None), "legacy"),
        (SimpleNamespace(name="c", clients=[object()]), "legacy"),
        (SimpleNamespace(name="d", actions=[SimpleNamespace(similes=[])], init=_yes), "current"),
        (SimpleNamespace(name="e"), "current"),
    ],
)
def test_untagged_bundles_are_sniffed(bundle, expected, caplog) -> None:
    with caplog.at_level(logging.WARNING):
        assert plugin_api_version(bundle) == expected
    assert "no api_version tag" in caplog.text


def test_untagged_bundle_rejected_when_tag_required(monkeypatch) -> None:
    monkeypatch.setattr(settings, "require_plugin_version_tag", True)

    with pytest.raises(PluginVersionError, match="no api_version"):
        plugin_api_version(SimpleNamespace(name="bare"))


# -- Wrapping ----------------------------------------------------------------


def test_wrap_plugin_translates_components() -> None:
    legacy = _legacy_plugin(description="Says hi", config={"GREETING": "hi"})

    wrapped = wrap_plugin(legacy)

    assert isinstance(wrapped, cur.Plugin)
    assert wrapped.api_version == "current"
    assert wrapped.description == "Says hi"
    assert wrapped.config == {"GREETING": "hi"}
    assert [a.name for a in wrapped.actions] == ["WAVE"]
    assert wrapped.actions[0].similes == ["HI"]
    assert [p.name for p in wrapped.providers] == ["time"]
    assert [e.name for e in wrapped.evaluators] == ["FACTS"]


def test_wrap_plugin_returns_current_bundle_unchanged() -> None:
    plugin = cur.Plugin(name="core")
    assert wrap_plugin(plugin) is plugin


async def test_wrapped_init_starts_services(engine) -> None:
    service = PdfService()
    runtimes = RuntimeCache()
    wrapped = wrap_plugin(_legacy_plugin(services=[service]), runtimes)

    await wrapped.init({}, engine)

    compat = runtimes.get(engine)
    assert isinstance(compat, CompatRuntime)
    assert compat.get_service(leg.ServiceType.PDF) is service
    assert service.initialized_with is compat


async def test_wrapped_init_without_services_is_a_no_op(engine) -> None:
    runtimes = RuntimeCache()
    wrapped = wrap_plugin(_legacy_plugin(), runtimes)

    await wrapped.init({}, engine)

    assert engine not in runtimes


def test_unwrap_plugin_round_trip_keeps_originals() -> None:
    action = cur.Action(name="REPLY", description="Reply", handler=_yes, validate=_yes)
    provider = cur.Provider(name="time", get=_yes)
    evaluator = cur.Evaluator(name="FACTS", description="", handler=_yes, validate=_yes)
    plugin = cur.Plugin(
        name="core", actions=[action], providers=[provider], evaluators=[evaluator]
    )

    legacy = unwrap_plugin(plugin)
    again = wrap_plugin(legacy)

    assert legacy.api_version == "legacy"
    assert again.actions[0] is action
    assert again.providers[0] is provider
    assert again.evaluators[0] is evaluator
