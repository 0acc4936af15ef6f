"""Legacy runtime API shapes."""

from plugin_compat.legacy.services import (
    ImageDescription,
    PageContent,
    Service,
    UploadResult,
)
from plugin_compat.legacy.types import (
    Account,
    Action,
    ActionExample,
    Actor,
    ActorDetails,
    Content,
    EvaluationExample,
    Evaluator,
    Goal,
    GoalStatus,
    Memory,
    ModelClass,
    Objective,
    Participant,
    Plugin,
    Provider,
    RAGContent,
    RAGKnowledgeItem,
    Relationship,
    ServiceType,
    State,
)

__all__ = [
    "Account",
    "Action",
    "ActionExample",
    "Actor",
    "ActorDetails",
    "Content",
    "EvaluationExample",
    "Evaluator",
    "Goal",
    "GoalStatus",
    "ImageDescription",
    "Memory",
    "ModelClass",
    "Objective",
    "PageContent",
    "Participant",
    "Plugin",
    "Provider",
    "RAGContent",
    "RAGKnowledgeItem",
    "Relationship",
    "Service",
    "ServiceType",
    "State",
    "UploadResult",
]
