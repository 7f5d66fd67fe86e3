"""
Name generation entry points used by the orchestrator.

    generate_single(category, triggers)      deterministic, for lookups
    generate_single_random(category)         uniform random pick
    generate_compound(parts, delim, shuffle) random multi-part name
    should_regenerate(old, new)              lifecycle predicate
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from .category import CategoryLike
from .compound import DEFAULT_DELIMITER, DEFAULT_PARTS, DEFAULT_RANDOM, NameConfig, build_name
from .entity import EntityKind, Snapshot
from .selector import select_deterministic
from .words import pick_random


def generate_single(category: CategoryLike, triggers: Optional[Mapping[Any, Any]] = None) -> str:
    return select_deterministic(category, triggers)


def generate_single_random(category: CategoryLike) -> str:
    return pick_random(category)


def generate_compound(
    categories: Sequence[CategoryLike] = DEFAULT_PARTS,
    delimiter: str = DEFAULT_DELIMITER,
    shuffle: bool = DEFAULT_RANDOM,
) -> str:
    return build_name(categories, delimiter, shuffle)


def should_regenerate(old: Snapshot, new: Snapshot) -> bool:
    """Whether an entity generated from ``old`` needs a new name for ``new``.

    Single-category snapshots compare their trigger maps. Compound snapshots
    compare parts (in order), delimiter, shuffle flag and trigger maps.
    """
    return old.requires_regeneration(new)


class NameGenerator:
    """Generation calls bundled as an object so a lifecycle can take its own.

    Subclass to observe or stub generation, e.g. to count calls in tests.
    """

    def single(self, category: CategoryLike, triggers: Optional[Mapping[Any, Any]] = None) -> str:
        return generate_single(category, triggers)

    def single_random(self, category: CategoryLike) -> str:
        return generate_single_random(category)

    def compound(self, config: NameConfig) -> str:
        return generate_compound(config.categories, config.delimiter, config.shuffle)

    def for_snapshot(self, snapshot: Snapshot) -> str:
        """Fresh name for a snapshot: seeded by triggers for single, random for compound."""
        if snapshot.kind is EntityKind.SINGLE:
            return self.single(snapshot.category, snapshot.triggers)
        return self.compound(snapshot.config)


default_generator = NameGenerator()
