"""
Regeneration state machine.

    ABSENT --create--> CREATED
    CREATED/STABLE --update, inputs unchanged--> STABLE
    CREATED/STABLE --update, inputs changed--> REGENERATED --persist--> STABLE
    any --delete--> DELETED

Every transition is a pure function from the old entity (and new snapshot)
to a new entity; the caller persists the result.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from .entity import EntityState, GeneratedEntity, Snapshot
from .generator import NameGenerator, default_generator, should_regenerate

__all__ = ["create", "read", "update", "delete", "settle", "should_regenerate"]


def create(address: str, snapshot: Snapshot, generator: Optional[NameGenerator] = None) -> GeneratedEntity:
    """Generate a new entity. Always generates, with or without triggers."""
    gen = generator or default_generator
    name = gen.for_snapshot(snapshot)
    return GeneratedEntity(address=address, name=name, snapshot=snapshot, state=EntityState.CREATED)


def read(entity: GeneratedEntity) -> GeneratedEntity:
    """Echo the persisted entity; reads never regenerate."""
    return entity


def update(
    entity: GeneratedEntity,
    snapshot: Snapshot,
    generator: Optional[NameGenerator] = None,
) -> GeneratedEntity:
    """Apply a new snapshot, regenerating only when ``should_regenerate`` says so.

    The returned entity always carries the new snapshot. Its state is
    REGENERATED when a new name was produced, STABLE otherwise.
    """
    if entity.state in (EntityState.ABSENT, EntityState.DELETED):
        raise ValueError(f"cannot update entity in state {entity.state.value}")

    if should_regenerate(entity.snapshot, snapshot):
        gen = generator or default_generator
        return entity.evolve(
            name=gen.for_snapshot(snapshot),
            snapshot=snapshot,
            state=EntityState.REGENERATED,
            updated_at=datetime.now(),
        )
    return entity.evolve(snapshot=snapshot, state=EntityState.STABLE)


def settle(entity: GeneratedEntity) -> GeneratedEntity:
    """State after persisting: REGENERATED becomes STABLE, others are unchanged."""
    if entity.state is EntityState.REGENERATED:
        return entity.evolve(state=EntityState.STABLE)
    return entity


def delete(entity: GeneratedEntity) -> GeneratedEntity:
    """Discard the entity. No generation work and no side effects."""
    return entity.evolve(state=EntityState.DELETED)
