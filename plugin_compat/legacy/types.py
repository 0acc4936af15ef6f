"""Records and component shapes of the legacy runtime API."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from plugin_compat.records import OpenRecord


class ModelClass(StrEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EMBEDDING = "embedding"
    IMAGE = "image"


class ServiceType(StrEnum):
    IMAGE_DESCRIPTION = "image_description"
    TRANSCRIPTION = "transcription"
    VIDEO = "video"
    TEXT_GENERATION = "text_generation"
    BROWSER = "browser"
    SPEECH_GENERATION = "speech_generation"
    PDF = "pdf"
    INTIFACE = "intiface"
    AWS_S3 = "aws_s3"
    SLACK = "slack"
    VERIFIABLE_LOGGING = "verifiable_logging"
    IRYS = "irys"
    TEE_LOG = "tee_log"
    GOPLUS_SECURITY = "goplus_security"
    WEB_SEARCH = "web_search"
    EMAIL_AUTOMATION = "email_automation"
    NKN_CLIENT_SERVICE = "nkn_client_service"


class GoalStatus(StrEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    FAILED = "failed"


class Content(BaseModel):
    """Message content with a single ``action``. Unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    text: str = ""
    action: str | None = None
    source: str | None = None
    url: str | None = None
    in_reply_to: str | None = None
    attachments: list[dict[str, Any]] | None = None


class Memory(OpenRecord):
    id: str | None = None
    user_id: str = ""
    agent_id: str | None = None
    room_id: str = ""
    created_at: int | None = None  # ms since epoch
    content: Content = Field(default_factory=Content)
    embedding: list[float] | None = None
    unique: bool | None = None
    similarity: float | None = None


class ActionExample(BaseModel):
    user: str
    content: Content = Field(default_factory=Content)


class EvaluationExample(BaseModel):
    context: str
    messages: list[ActionExample] = Field(default_factory=list)
    outcome: str = ""


class State(OpenRecord):
    """Flat conversation state.

    Every documented field is always present: strings default to ``""`` and
    arrays to ``[]``.
    """

    # Envelope bucket ("values", "data" or "top") of each extension field
    _origins: dict[str, str] = PrivateAttr(default_factory=dict)

    # Identity
    agent_id: str = ""
    user_id: str = ""
    room_id: str = ""
    agent_name: str = ""
    sender_name: str = ""

    # Character
    bio: str = ""
    lore: str = ""
    adjective: str = ""
    topic: str = ""
    topics: str = ""
    message_directions: str = ""
    post_directions: str = ""
    character_post_examples: str = ""
    character_message_examples: str = ""

    # Conversation
    actors: str = ""
    recent_messages: str = ""
    recent_posts: str = ""
    recent_message_interactions: str = ""
    recent_post_interactions: str = ""
    attachments: str = ""
    goals: str = ""
    knowledge: str = ""
    providers: str = ""
    text: str = ""

    # Components
    action_names: str = ""
    actions: str = ""
    action_examples: str = ""
    evaluators: str = ""
    evaluator_names: str = ""
    evaluator_examples: str = ""

    # Structured
    recent_messages_data: list[Any] = Field(default_factory=list)
    recent_interactions_data: list[Any] = Field(default_factory=list)
    actors_data: list[Any] = Field(default_factory=list)
    goals_data: list[Any] = Field(default_factory=list)
    knowledge_data: list[Any] = Field(default_factory=list)
    rag_knowledge_data: list[Any] = Field(default_factory=list)
    actions_data: list[Any] = Field(default_factory=list)
    evaluators_data: list[Any] = Field(default_factory=list)


STRING_FIELDS: tuple[str, ...] = tuple(
    name for name, info in State.model_fields.items() if info.annotation is str
)
ARRAY_FIELDS: tuple[str, ...] = tuple(
    name for name in State.model_fields if name not in STRING_FIELDS
)


class Objective(BaseModel):
    id: str | None = None
    description: str
    completed: bool = False


class Goal(BaseModel):
    id: str | None = None
    room_id: str = ""
    user_id: str = ""
    name: str
    status: GoalStatus = GoalStatus.IN_PROGRESS
    objectives: list[Objective] = Field(default_factory=list)
    created_at: int | None = None


class Account(BaseModel):
    id: str
    name: str = ""
    username: str = ""
    email: str | None = None
    avatar_url: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class ActorDetails(BaseModel):
    tagline: str = ""
    summary: str = ""
    quote: str = ""


class Actor(BaseModel):
    id: str
    name: str = ""
    username: str = ""
    details: ActorDetails = Field(default_factory=ActorDetails)


class Participant(BaseModel):
    id: str
    account: Account


class Relationship(BaseModel):
    id: str | None = None
    user_a: str
    user_b: str
    user_id: str = ""
    room_id: str = ""
    status: str = ""
    created_at: str | None = None


class RAGContent(BaseModel):
    text: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class RAGKnowledgeItem(BaseModel):
    id: str
    agent_id: str = ""
    content: RAGContent = Field(default_factory=RAGContent)
    embedding: list[float] | None = None
    created_at: int | None = None
    similarity: float | None = None
    score: float | None = None


# -- Components --------------------------------------------------------------

HandlerCallback = Callable[..., Awaitable[list[Memory]]]
Handler = Callable[..., Awaitable[Any]]
Validator = Callable[..., Awaitable[bool]]


@dataclass
class Action:
    """A legacy action.

    ``handler(runtime, message, state, options, callback)``
    ``validate(runtime, message, state) -> bool``
    """

    name: str
    description: str
    handler: Handler
    validate: Validator
    similes: list[str] = field(default_factory=list)
    examples: list[list[ActionExample]] = field(default_factory=list)
    suppress_initial_message: bool = False
    wrapped: Any = field(default=None, compare=False, repr=False)


@dataclass
class Provider:
    """A legacy provider. ``get`` may return a string, a mapping, or None."""

    get: Callable[..., Awaitable[Any]]
    name: str = ""
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
    config: dict[str, Any] = field(default_factory=dict)
    actions: list[Action] = field(default_factory=list)
    providers: list[Provider] = field(default_factory=list)
    evaluators: list[Evaluator] = field(default_factory=list)
    services: list[Any] = field(default_factory=list)
    clients: list[Any] = field(default_factory=list)
    adapters: list[Any] = field(default_factory=list)
    api_version: str | None = "legacy"
