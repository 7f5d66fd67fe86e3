"""
Deterministic word selection.

A (category, triggers) key is reduced to a reproducible index into the
category's WordSet:

    seed string = category + "key=value;" for each trigger, keys ascending
    seed        = first 8 bytes of SHA-256(seed string), big-endian unsigned
    index       = random.Random(seed).randrange(len(words))

Each call builds its own ``random.Random`` so the result never depends on
the process-wide generator.
"""
from __future__ import annotations

import hashlib
import random
from typing import Any, Mapping, Optional

from .category import Category, CategoryLike
from .errors import EmptyWordSetError
from .triggers import canonical_triggers
from .words import words


def seed_string(category: CategoryLike, triggers: Optional[Mapping[Any, Any]] = None) -> str:
    """Canonical key for a category and trigger map."""
    cat = Category.parse(category)
    parts = [cat.value]
    for key, value in canonical_triggers(triggers):
        parts.append(f"{key}={value};")
    return "".join(parts)


def seed_from_string(value: str) -> int:
    """Unsigned 64-bit seed from the head of the SHA-256 digest."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def select_index(seed: int, n: int) -> int:
    if n <= 0:
        raise ValueError("n must be positive")
    return random.Random(seed).randrange(n)


def select_deterministic(category: CategoryLike, triggers: Optional[Mapping[Any, Any]] = None) -> str:
    """Pick the word for (category, triggers); same inputs, same word.

    Raises:
        UnknownCategoryError: category is not plant, animal or color
        EmptyWordSetError: the category has no words
    """
    cat = Category.parse(category)
    word_set = words(cat)
    if not len(word_set):
        raise EmptyWordSetError(cat.value)
    seed = seed_from_string(seed_string(cat, triggers))
    return word_set[select_index(seed, len(word_set))]
