"""
whimsy: memorable names from plants, animals and colors.

This package provides:
- Word catalog: three disjoint word sets and uniform random picks.
- Deterministic selector: the same (category, triggers) always gives the same word.
- Compound names: several categories joined by a delimiter, optionally shuffled.
- Lifecycle: create/read/update/delete transitions that keep a name until
  its triggers or configuration change.
- Provider, state store and manifests: the orchestration around the core,
  with a typer CLI on top.
"""

__version__ = "0.4.0"

from .category import Category
from .words import WordSet, pick_random, PLANTS, ANIMALS, COLORS
from .selector import select_deterministic, seed_string, seed_from_string
from .compound import NameConfig, build_name, secure_shuffle
from .triggers import normalize_triggers, canonical_triggers
from .entity import EntityKind, EntityState, GeneratedEntity, Snapshot
from .generator import (
    NameGenerator,
    generate_single,
    generate_single_random,
    generate_compound,
    should_regenerate,
)
from .data import Data, SqliteData
from .config import Config
from .events import Event, EventBus, get_event_bus
from .provider import Provider, SingleResource, NameResource, DataSource
from .manifest import Manifest, Declaration, PlannedAction, plan, apply
from .errors import (
    WhimsyError,
    GenerationError,
    ValidationError,
    UnknownCategoryError,
    EmptyCategoryListError,
    InvalidTriggerError,
    EmptyWordSetError,
    RandomSourceError,
    ManifestError,
    UnknownTypeError,
    EntityNotFoundError,
    EntityExistsError,
)
from . import lifecycle

__all__ = [
    "__version__",
    # Catalog
    "Category",
    "WordSet",
    "pick_random",
    "PLANTS",
    "ANIMALS",
    "COLORS",
    # Deterministic selection
    "select_deterministic",
    "seed_string",
    "seed_from_string",
    # Compound names
    "NameConfig",
    "build_name",
    "secure_shuffle",
    # Triggers & entities
    "normalize_triggers",
    "canonical_triggers",
    "EntityKind",
    "EntityState",
    "GeneratedEntity",
    "Snapshot",
    "lifecycle",
    # Generation entry points
    "NameGenerator",
    "generate_single",
    "generate_single_random",
    "generate_compound",
    "should_regenerate",
    # Orchestration
    "Data",
    "SqliteData",
    "Config",
    "Event",
    "EventBus",
    "get_event_bus",
    "Provider",
    "SingleResource",
    "NameResource",
    "DataSource",
    "Manifest",
    "Declaration",
    "PlannedAction",
    "plan",
    "apply",
    # Errors
    "WhimsyError",
    "GenerationError",
    "ValidationError",
    "UnknownCategoryError",
    "EmptyCategoryListError",
    "InvalidTriggerError",
    "EmptyWordSetError",
    "RandomSourceError",
    "ManifestError",
    "UnknownTypeError",
    "EntityNotFoundError",
    "EntityExistsError",
]
