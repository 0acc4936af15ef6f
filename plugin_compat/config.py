"""Compatibility layer settings loaded from environment variables."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """plugin-compat configuration. Every value can be set via PLUGIN_COMPAT_* env vars."""

    # Logging
    log_level: str = Field(default="INFO")

    # State composition
    conversation_length: int = Field(default=32)
    action_example_count: int = Field(default=5)
    state_cache_size: int = Field(default=256)

    # Knowledge chunking
    knowledge_target_tokens: int = Field(default=1500)
    knowledge_overlap: int = Field(default=200)
    knowledge_model_context_size: int = Field(default=4096)

    # Embedding cache lookups
    cached_embedding_threshold: int = Field(default=2)
    cached_embedding_match_count: int = Field(default=10)

    # Plugins without an api_version tag fail to load instead of being sniffed
    require_plugin_version_tag: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="PLUGIN_COMPAT_",
        env_file=_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def get_knowledge_options(self) -> dict[str, int]:
        """Chunking options passed to the engine when adding knowledge."""
        return {
            "target_tokens": self.knowledge_target_tokens,
            "overlap": self.knowledge_overlap,
            "model_context_size": self.knowledge_model_context_size,
        }


settings = Settings()
