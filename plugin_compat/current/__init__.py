"""Current runtime API shapes."""

from plugin_compat.current.runtime import CurrentRuntime
from plugin_compat.current.types import (
    Action,
    ActionExample,
    Content,
    Entity,
    EvaluationExample,
    Evaluator,
    KnowledgeItem,
    Memory,
    MemoryType,
    ModelType,
    Participant,
    Plugin,
    Provider,
    ProviderResult,
    Relationship,
    Room,
    State,
    Task,
)

__all__ = [
    "Action",
    "ActionExample",
    "Content",
    "CurrentRuntime",
    "Entity",
    "EvaluationExample",
    "Evaluator",
    "KnowledgeItem",
    "Memory",
    "MemoryType",
    "ModelType",
    "Participant",
    "Plugin",
    "Provider",
    "ProviderResult",
    "Relationship",
    "Room",
    "State",
    "Task",
]
