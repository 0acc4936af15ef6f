"""Goals are stored as tagged tasks; only tagged tasks translate back."""

from __future__ import annotations

import logging

from plugin_compat.current import types as cur
from plugin_compat.legacy import types as leg

logger = logging.getLogger(__name__)

COMPAT_TAG = "legacy_goal_compat"

_MARKER = "legacy_compat"
_USER_ID = "legacy_user_id"
_STATUS = "legacy_status"
_OBJECTIVES = "legacy_objectives"
_CREATED_AT = "legacy_created_at"
_REQUIRED = (_MARKER, _USER_ID, _STATUS, _OBJECTIVES)


def goal_to_task(goal: leg.Goal | None) -> cur.Task:
    """Store a goal as a task tagged ``legacy_goal_compat``.

    The description is the objectives joined with ``"; "``. Everything the
    task shape has no field for goes into ``metadata``.
    """
    if goal is None:
        goal = leg.Goal(name="")
    description = "; ".join(o.description for o in goal.objectives) or goal.name
    return cur.Task(
        id=goal.id,
        name=goal.name,
        description=description,
        room_id=goal.room_id or None,
        tags=[COMPAT_TAG],
        metadata={
            _MARKER: True,
            _USER_ID: goal.user_id,
            _STATUS: goal.status.value,
            _OBJECTIVES: [o.model_dump() for o in goal.objectives],
            _CREATED_AT: goal.created_at,
        },
    )


def is_legacy_task(task: cur.Task | None) -> bool:
    return task is not None and COMPAT_TAG in task.tags


def task_to_goal(task: cur.Task | None) -> leg.Goal | None:
    """Rebuild the goal a tagged task was created from.

    Returns None for missing or untagged tasks, and for tagged tasks whose
    metadata is incomplete or does not parse.
    """
    if task is None:
        return None
    if not is_legacy_task(task):
        logger.debug("Task %s is not a legacy goal, skipping", task.id)
        return None
    missing = [key for key in _REQUIRED if task.metadata.get(key) is None]
    if missing:
        logger.error("Task %s is tagged as a goal but lacks %s", task.id, ", ".join(missing))
        return None

    created_at = task.metadata.get(_CREATED_AT)
    try:
        return leg.Goal(
            id=task.id,
            name=task.name,
            room_id=task.room_id or "",
            user_id=task.metadata[_USER_ID],
            status=leg.GoalStatus(task.metadata[_STATUS]),
            objectives=[leg.Objective.model_validate(o) for o in task.metadata[_OBJECTIVES]],
            created_at=int(created_at) if created_at is not None else None,
        )
    except (TypeError, ValueError):
        # ValidationError is a ValueError
        logger.exception("Task %s has unreadable goal metadata", task.id)
        return None
