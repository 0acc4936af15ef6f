"""Text rendering helpers that legacy plugins import alongside the runtime."""

from __future__ import annotations

import json
import random
import re
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from plugin_compat.config import settings
from plugin_compat.legacy.types import (
    ActionExample,
    Actor,
    Goal,
    Memory,
    State,
)

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


# -- Actions -----------------------------------------------------------------


def _format_example_line(example: ActionExample) -> str:
    line = f"{example.user}: {example.content.text}"
    if example.content.action:
        line += f" ({example.content.action})"
    return line


def compose_action_examples(actions: Sequence[Any], count: int | None = None) -> str:
    """Pick up to ``count`` example conversations, at most one per action, at random."""
    count = settings.action_example_count if count is None else count
    candidates = [a for a in actions if getattr(a, "examples", None)]
    picked: list[str] = []
    while candidates and len(picked) < count:
        action = candidates.pop(random.randrange(len(candidates)))
        group = random.choice(action.examples)
        picked.append("\n".join(_format_example_line(e) for e in group))
    return "\n\n".join(picked)


def format_action_names(actions: Sequence[Any]) -> str:
    if not actions:
        return "none"
    return ", ".join(f"'{a.name}'" for a in actions)


def format_actions(actions: Sequence[Any]) -> str:
    """Render ``name: description`` blocks, with similes when present."""
    blocks = []
    for action in actions:
        block = f"{action.name}:"
        if action.description:
            block += f" {action.description}"
        if action.similes:
            block += f"\nSimilar to: {', '.join(action.similes)}"
        blocks.append(block)
    return "\n\n".join(blocks)


# -- Evaluators --------------------------------------------------------------


def format_evaluator_names(evaluators: Sequence[Any]) -> str:
    return ",\n".join(f"'{e.name}'" for e in evaluators)


def format_evaluators(evaluators: Sequence[Any]) -> str:
    return ",\n".join(f"'{e.name}: {e.description}'" for e in evaluators)


def format_evaluator_examples(evaluators: Sequence[Any]) -> str:
    """Render each example as Context / Messages / Outcome sections."""
    rendered = []
    for evaluator in evaluators:
        parts = []
        for example in evaluator.examples or []:
            messages = "\n".join(_format_example_line(m) for m in example.messages)
            parts.append(
                f"Context:\n{example.context}\n\n"
                f"Messages:\n{messages}\n\n"
                f"Outcome:\n{example.outcome}"
            )
        rendered.append("\n\n".join(parts))
    return "\n\n".join(rendered)


def format_evaluator_example_descriptions(evaluators: Sequence[Any]) -> str:
    return "\n\n".join(
        "\n".join(
            f"{e.name} Example {i + 1}: {e.description}" for i in range(len(e.examples or []))
        )
        for e in evaluators
    )


# -- Goals, knowledge, actors, messages --------------------------------------


def format_goals_as_string(goals: Sequence[Goal]) -> str:
    blocks = []
    for goal in goals:
        lines = [f"Goal: {goal.name}", f"id: {goal.id}", "Objectives:"]
        for objective in goal.objectives:
            mark = "x" if objective.completed else " "
            status = "DONE" if objective.completed else "IN PROGRESS"
            lines.append(f"- [{mark}] {objective.description} ({status})")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def format_knowledge(items: Sequence[Any]) -> str:
    """Render knowledge entries of mixed shape as text blocks."""
    rendered = []
    for item in items:
        if isinstance(item, str):
            rendered.append(item)
            continue
        if hasattr(item, "model_dump"):
            item = item.model_dump()
        if not isinstance(item, dict):
            rendered.append(json.dumps(item, default=str))
            continue
        content = item.get("content")
        if isinstance(content, dict):
            content = content.get("text")
        text = content or item.get("text")
        if text:
            title = f"# {item['title']}\n" if item.get("title") else ""
            rendered.append(f"{title}{text}")
        else:
            rendered.append(json.dumps(item, default=str))
    return "\n\n".join(rendered)


def format_actors(actors: Sequence[Actor]) -> str:
    return "\n\n".join(
        f"{a.name}: {a.details.summary or 'No summary available.'}" for a in actors
    )


def format_timestamp(created_at: int) -> str:
    return datetime.fromtimestamp(created_at / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")


def format_messages(messages: Sequence[Memory], actors: Sequence[Actor]) -> str:
    """Render messages oldest first as ``(time) Name: text (action)`` lines."""
    names = {a.id: a.name for a in actors}
    ordered = sorted(messages, key=lambda m: m.created_at or 0)
    lines = []
    for message in ordered:
        name = names.get(message.user_id, "Unknown User")
        line = f"{name}: {message.content.text}"
        if message.content.action and message.content.action != "null":
            line += f" ({message.content.action})"
        if message.created_at:
            line = f"({format_timestamp(message.created_at)}) {line}"
        lines.append(line)
    return "\n".join(lines)


# -- Templates ---------------------------------------------------------------


def add_header(header: str, body: str) -> str:
    if not body:
        return ""
    return f"{header}\n{body}\n" if header else f"{body}\n"


def compose_context(
    state: State,
    template: str | Callable[[State], str],
) -> str:
    """Fill ``{{key}}`` placeholders in ``template`` from ``state``.

    Keys may be given in snake_case or camelCase. A callable template is
    called with the state instead. Unknown keys render as empty strings.
    """
    if callable(template):
        return template(state)
    fields = state.model_dump()

    def _sub(match: re.Match[str]) -> str:
        key = match.group(1)
        # Legacy templates use camelCase keys
        value = fields.get(key, fields.get(_CAMEL_BOUNDARY.sub("_", key).lower()))
        if value is None:
            return ""
        return value if isinstance(value, str) else json.dumps(value, default=str)

    return _PLACEHOLDER.sub(_sub, template)
