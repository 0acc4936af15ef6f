"""Records and component shapes of the current runtime API."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from plugin_compat.records import OpenRecord


class ModelType(StrEnum):
    TEXT_SMALL = "TEXT_SMALL"
    TEXT_LARGE = "TEXT_LARGE"
    TEXT_EMBEDDING = "TEXT_EMBEDDING"
    IMAGE = "IMAGE"
    IMAGE_DESCRIPTION = "IMAGE_DESCRIPTION"
    TRANSCRIPTION = "TRANSCRIPTION"
    TEXT_TO_SPEECH = "TEXT_TO_SPEECH"


class MemoryType(StrEnum):
    MESSAGE = "message"
    DOCUMENT = "document"
    FRAGMENT = "fragment"
    DESCRIPTION = "description"
    CUSTOM = "custom"


class Content(BaseModel):
    """Message content. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    text: str | None = None
    thought: str | None = None
    actions: list[str] = Field(default_factory=list)
    providers: list[str] | None = None
    source: str | None = None
    url: str | None = None
    in_reply_to: str | None = None
    attachments: list[dict[str, Any]] | None = None


class Memory(BaseModel):
    id: str | None = None
    entity_id: str = ""
    agent_id: str | None = None
    room_id: str = ""
    world_id: str | None = None
    created_at: int | None = None  # ms since epoch
    content: Content = Field(default_factory=Content)
    embedding: list[float] | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    similarity: float | None = None


class State(OpenRecord):
    """Composed conversation state: scalar ``values``, structured ``data``, rendered ``text``."""

    values: dict[str, Any] = Field(default_factory=dict)
    data: dict[str, Any] = Field(default_factory=dict)
    text: str = ""


class Task(BaseModel):
    id: str | None = None
    name: str
    description: str = ""
    room_id: str | None = None
    world_id: str | None = None
    entity_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    updated_at: int | None = None


class Entity(BaseModel):
    id: str | None = None
    names: list[str] = Field(default_factory=list)
    agent_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class Participant(BaseModel):
    id: str
    entity: Entity


class Relationship(BaseModel):
    id: str | None = None
    source_entity_id: str
    target_entity_id: str
    agent_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: str | None = None


class Room(BaseModel):
    id: str
    name: str | None = None
    agent_id: str | None = None
    source: str = ""
    type: str = "GROUP"
    channel_id: str | None = None
    server_id: str | None = None
    world_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class KnowledgeItem(BaseModel):
    id: str
    content: Content = Field(default_factory=Content)
    metadata: dict[str, Any] = Field(default_factory=dict)
    similarity: float | None = None


class ProviderResult(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)
    data: dict[str, Any] = Field(default_factory=dict)
    text: str = ""


class ActionExample(BaseModel):
    name: str
    content: Content = Field(default_factory=Content)


class EvaluationExample(BaseModel):
    prompt: str
    messages: list[ActionExample] = Field(default_factory=list)
    outcome: str = ""


# -- Components --------------------------------------------------------------

HandlerCallback = Callable[..., Awaitable[list[Memory]]]
Handler = Callable[..., Awaitable[Any]]
Validator = Callable[..., Awaitable[bool]]


@dataclass
class Action:
    """An action the agent can take.

    ``handler(runtime, message, state, options, callback, responses)``
    ``validate(runtime, message, state) -> bool``
    """

    name: str
    description: str
    handler: Handler
    validate: Validator
    similes: list[str] = field(default_factory=list)
    examples: list[list[ActionExample]] = field(default_factory=list)
    # The object this action was translated from, if any
    wrapped: Any = field(default=None, compare=False, repr=False)


@dataclass
class Provider:
    """Contributes context to state composition via ``get(runtime, message, state)``."""

    name: str
    get: Callable[..., Awaitable[ProviderResult]]
    description: str = ""
    dynamic: bool = False
    private: bool = False
    position: int = 0
    wrapped: Any = field(default=None, compare=False, repr=False)


@dataclass
class Evaluator:
    name: str
    description: str
    handler: Handler
    validate: Validator
    similes: list[str] = field(default_factory=list)
    examples: list[EvaluationExample] = field(default_factory=list)
    always_run: bool = False
    wrapped: Any = field(default=None, compare=False, repr=False)


@dataclass
class Plugin:
    name: str
    description: str = ""
    init: Callable[..., Awaitable[None]] | None = None
    config: dict[str, Any] = field(default_factory=dict)
    actions: list[Action] = field(default_factory=list)
    providers: list[Provider] = field(default_factory=list)
    evaluators: list[Evaluator] = field(default_factory=list)
    services: list[Any] = field(default_factory=list)
    api_version: str | None = "current"
