"""Tests for legacy model calls routed through use_model."""

import pytest

from plugin_compat.current.types import ModelType
from plugin_compat.legacy.types import ModelClass
from plugin_compat.models import generate_embedding, generate_image, generate_text, model_type_for


class TestModelTypeFor:
    def test_known_classes(self):
        assert model_type_for(ModelClass.SMALL) == ModelType.TEXT_SMALL
        assert model_type_for("medium") == ModelType.TEXT_LARGE
        assert model_type_for(ModelClass.EMBEDDING) == ModelType.TEXT_EMBEDDING

    def test_unknown_class_defaults_to_large(self, caplog):
        assert model_type_for("gigantic") == ModelType.TEXT_LARGE
        assert "gigantic" in caplog.text


class TestGenerateText:
    async def test_passes_sampling_parameters(self, engine, compat):
        engine.models[ModelType.TEXT_SMALL] = "hi there"

        result = await generate_text(compat, "Say hi", ModelClass.SMALL, stop=["\n"])

        assert result == "hi there"
        model_type, params = engine.model_calls[0]
        assert model_type == ModelType.TEXT_SMALL
        assert params["prompt"] == "Say hi"
        assert params["stop_sequences"] == ["\n"]
        assert params["max_tokens"] == 2048

    async def test_accepts_bare_engine(self, engine):
        engine.models[ModelType.TEXT_LARGE] = 42

        assert await generate_text(engine, "Count") == "42"

    async def test_failure_propagates(self, engine, compat):
        engine.models[ModelType.TEXT_LARGE] = RuntimeError("quota")

        with pytest.raises(RuntimeError, match="quota"):
            await generate_text(compat, "Say hi")


async def test_generate_embedding_returns_floats(engine, compat):
    engine.models[ModelType.TEXT_EMBEDDING] = [1, 2, 3]

    assert await generate_embedding(compat, "tea") == [1.0, 2.0, 3.0]


async def test_generate_image(engine, compat):
    engine.models[ModelType.IMAGE] = lambda params: [{"url": params["prompt"]}]

    images = await generate_image(compat, "a teapot", size="512x512")

    assert images == [{"url": "a teapot"}]
    assert engine.model_calls[0][1] == {"prompt": "a teapot", "count": 1, "size": "512x512"}
