"""Legacy model calls on top of the engine's ``use_model``."""

from __future__ import annotations

import logging
from typing import Any

from plugin_compat.current.types import ModelType
from plugin_compat.legacy.types import ModelClass
from plugin_compat.translators.action import engine_of

logger = logging.getLogger(__name__)

MODEL_TYPES: dict[ModelClass, ModelType] = {
    ModelClass.SMALL: ModelType.TEXT_SMALL,
    ModelClass.MEDIUM: ModelType.TEXT_LARGE,
    ModelClass.LARGE: ModelType.TEXT_LARGE,
    ModelClass.EMBEDDING: ModelType.TEXT_EMBEDDING,
    ModelClass.IMAGE: ModelType.IMAGE,
}


def model_type_for(model_class: ModelClass | str) -> ModelType:
    """Map a legacy model class to a model type. Unknown classes use TEXT_LARGE."""
    try:
        return MODEL_TYPES[ModelClass(model_class)]
    except ValueError:
        logger.warning("Unknown model class %s, defaulting to TEXT_LARGE", model_class)
        return ModelType.TEXT_LARGE


async def generate_text(
    runtime: Any,
    context: str,
    model_class: ModelClass | str = ModelClass.LARGE,
    *,
    temperature: float = 0.7,
    max_tokens: int = 2048,
    stop: list[str] | None = None,
    frequency_penalty: float = 0.0,
    presence_penalty: float = 0.0,
) -> str:
    engine = engine_of(runtime)
    model_type = model_type_for(model_class)
    logger.debug("Generating text with %s", model_type)
    try:
        result = await engine.use_model(
            model_type,
            {
                "prompt": context,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "stop_sequences": stop or [],
                "frequency_penalty": frequency_penalty,
                "presence_penalty": presence_penalty,
            },
        )
    except Exception:
        logger.exception("Text generation with %s failed", model_type)
        raise
    return result if isinstance(result, str) else str(result)


async def generate_embedding(runtime: Any, text: str) -> list[float]:
    try:
        result = await engine_of(runtime).use_model(ModelType.TEXT_EMBEDDING, {"text": text})
    except Exception:
        logger.exception("Embedding generation failed")
        raise
    return [float(x) for x in result]


async def generate_image(
    runtime: Any, prompt: str, *, count: int = 1, size: str = "1024x1024"
) -> list[dict[str, Any]]:
    """Returns a list of ``{"url": ...}`` records."""
    try:
        return await engine_of(runtime).use_model(
            ModelType.IMAGE, {"prompt": prompt, "count": count, "size": size}
        )
    except Exception:
        logger.exception("Image generation failed")
        raise
