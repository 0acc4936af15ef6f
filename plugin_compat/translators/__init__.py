"""Field translators between the legacy and current shapes.

Every translator is total: a missing input yields a minimally populated
default, never an error.
"""

from plugin_compat.translators.action import (
    action_to_current,
    action_to_legacy,
    callback_to_current,
    callback_to_legacy,
)
from plugin_compat.translators.content import (
    content_to_current,
    content_to_legacy,
    example_to_current,
    example_to_legacy,
)
from plugin_compat.translators.entities import (
    account_to_entity,
    entity_to_account,
    entity_to_actor,
    participant_to_legacy,
    relationship_to_legacy,
)
from plugin_compat.translators.evaluator import (
    evaluation_example_to_current,
    evaluation_example_to_legacy,
    evaluator_to_current,
    evaluator_to_legacy,
)
from plugin_compat.translators.goal_task import (
    COMPAT_TAG,
    goal_to_task,
    is_legacy_task,
    task_to_goal,
)
from plugin_compat.translators.knowledge import (
    knowledge_item_to_current,
    memory_to_knowledge_item,
)
from plugin_compat.translators.memory import memory_to_current, memory_to_legacy
from plugin_compat.translators.provider import (
    normalize_provider_result,
    provider_to_current,
    provider_to_legacy,
)
from plugin_compat.translators.state import state_to_current, state_to_legacy

__all__ = [
    "COMPAT_TAG",
    "account_to_entity",
    "action_to_current",
    "action_to_legacy",
    "callback_to_current",
    "callback_to_legacy",
    "content_to_current",
    "content_to_legacy",
    "entity_to_account",
    "entity_to_actor",
    "evaluation_example_to_current",
    "evaluation_example_to_legacy",
    "evaluator_to_current",
    "evaluator_to_legacy",
    "example_to_current",
    "example_to_legacy",
    "goal_to_task",
    "is_legacy_task",
    "knowledge_item_to_current",
    "memory_to_current",
    "memory_to_knowledge_item",
    "memory_to_legacy",
    "normalize_provider_result",
    "participant_to_legacy",
    "provider_to_current",
    "provider_to_legacy",
    "relationship_to_legacy",
    "state_to_current",
    "state_to_legacy",
]
