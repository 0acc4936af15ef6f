"""Identifier helpers."""

import uuid

# Fixed namespace so the same input always yields the same id
_NAMESPACE = uuid.UUID("6f1f4d9a-3c1b-5b8e-9a7e-2d4c8b0e1f37")


def new_id() -> str:
    return str(uuid.uuid4())


def uuid_from_string(value: str) -> str:
    """Deterministic UUID for an arbitrary string."""
    return str(uuid.uuid5(_NAMESPACE, value))
