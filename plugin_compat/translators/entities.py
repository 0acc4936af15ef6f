"""Accounts, actors, participants and relationships."""

from __future__ import annotations

from plugin_compat.current import types as cur
from plugin_compat.legacy import types as leg

_ACCOUNT_KEYS = ("username", "email", "avatar_url")
_ACTOR_KEYS = ("tagline", "summary", "quote")


def entity_to_account(entity: cur.Entity | None) -> leg.Account:
    if entity is None:
        return leg.Account(id="")
    metadata = dict(entity.metadata)
    name = entity.names[0] if entity.names else ""
    return leg.Account(
        id=entity.id or "",
        name=name,
        username=metadata.pop("username", None) or name,
        email=metadata.pop("email", None),
        avatar_url=metadata.pop("avatar_url", None),
        details=metadata,
    )


def account_to_entity(account: leg.Account | None, agent_id: str | None = None) -> cur.Entity:
    if account is None:
        return cur.Entity(agent_id=agent_id)
    names = [n for n in dict.fromkeys((account.name, account.username)) if n]
    metadata = {
        **account.details,
        **{k: v for k in _ACCOUNT_KEYS if (v := getattr(account, k)) is not None},
    }
    return cur.Entity(id=account.id, names=names, agent_id=agent_id, metadata=metadata)


def entity_to_actor(entity: cur.Entity | None) -> leg.Actor:
    """Actor details come from ``metadata["details"]`` or the top-level metadata keys."""
    if entity is None:
        return leg.Actor(id="")
    account = entity_to_account(entity)
    source = entity.metadata.get("details")
    if not isinstance(source, dict):
        source = entity.metadata
    details = {k: str(source[k]) for k in _ACTOR_KEYS if source.get(k)}
    return leg.Actor(
        id=account.id,
        name=account.name,
        username=account.username,
        details=leg.ActorDetails(**details),
    )


def participant_to_legacy(participant: cur.Participant | None) -> leg.Participant:
    if participant is None:
        return leg.Participant(id="", account=entity_to_account(None))
    return leg.Participant(id=participant.id, account=entity_to_account(participant.entity))


def relationship_to_legacy(relationship: cur.Relationship | None) -> leg.Relationship:
    if relationship is None:
        return leg.Relationship(user_a="", user_b="")
    status = relationship.metadata.get("status")
    if status is None and relationship.tags:
        status = relationship.tags[0]
    return leg.Relationship(
        id=relationship.id,
        user_a=relationship.source_entity_id,
        user_b=relationship.target_entity_id,
        user_id=relationship.source_entity_id,
        room_id=relationship.metadata.get("room_id") or "",
        status=status or "",
        created_at=relationship.created_at,
    )
