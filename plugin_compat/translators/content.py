"""Content and action example translation."""

from __future__ import annotations

from plugin_compat.current import types as cur
from plugin_compat.legacy import types as leg


def content_to_legacy(content: cur.Content | None) -> leg.Content:
    """Collapse ``actions`` to a single ``action``; other fields pass through.

    Only the first action survives. Current-only fields such as ``thought``
    and ``providers`` ride along as extension fields.
    """
    if content is None:
        return leg.Content()
    data = content.model_dump(exclude={"actions"}, exclude_none=True)
    data["text"] = content.text or ""
    data["action"] = content.actions[0] if content.actions else None
    return leg.Content.model_validate(data)


def content_to_current(content: leg.Content | None) -> cur.Content:
    """Expand ``action`` into a one-element ``actions`` list (or ``[]``)."""
    if content is None:
        return cur.Content()
    data = content.model_dump(exclude={"action"}, exclude_none=True)
    data["actions"] = [content.action] if content.action else []
    return cur.Content.model_validate(data)


def example_to_legacy(example: cur.ActionExample | None) -> leg.ActionExample:
    if example is None:
        return leg.ActionExample(user="")
    return leg.ActionExample(user=example.name, content=content_to_legacy(example.content))


def example_to_current(example: leg.ActionExample | None) -> cur.ActionExample:
    if example is None:
        return cur.ActionExample(name="")
    return cur.ActionExample(name=example.user, content=content_to_current(example.content))
