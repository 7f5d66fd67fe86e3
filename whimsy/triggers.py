"""Trigger maps: arbitrary string pairs whose change forces regeneration."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import InvalidTriggerError

TriggerMap = Dict[str, str]
CanonicalTriggers = Tuple[Tuple[str, str], ...]


def _to_str(value: Any) -> str:
    # YAML booleans arrive as bool; keep the lowercase spelling users wrote
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_triggers(triggers: Optional[Mapping[Any, Any]]) -> TriggerMap:
    """Return a plain str -> str copy; an absent map becomes an empty one.

    Raises:
        InvalidTriggerError: a value is None
    """
    if not triggers:
        return {}
    for key, value in triggers.items():
        if value is None:
            raise InvalidTriggerError(key)
    return {_to_str(k): _to_str(v) for k, v in triggers.items()}


def canonical_triggers(triggers: Optional[Mapping[Any, Any]]) -> CanonicalTriggers:
    """Sorted-by-key pairs; two maps are equal iff their canonical forms are."""
    return tuple(sorted(normalize_triggers(triggers).items()))


def triggers_equal(old: Optional[Mapping[Any, Any]], new: Optional[Mapping[Any, Any]]) -> bool:
    return canonical_triggers(old) == canonical_triggers(new)


def parse_trigger_args(pairs: Optional[list]) -> TriggerMap:
    """Parse CLI-style ``key=value`` strings into a trigger map.

    The value may itself contain ``=``; only the first one separates.
    """
    result: TriggerMap = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"trigger must be key=value, got '{pair}'")
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"trigger key cannot be empty in '{pair}'")
        result[key] = value
    return result
