"""
The whimsy provider: resource and lookup types over the generation core.

Resources are stateful. Their names persist in the state store until the
snapshot (triggers, and for compound names the parts/delimiter/random
settings) changes. Lookups are stateless: they recompute the same word for
the same triggers every time.

    whimsy_plant / whimsy_animal / whimsy_color   single-category resource
    whimsy_name                                   compound-name resource
    whimsy_plant / whimsy_animal / whimsy_color   lookup (data source)
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from . import lifecycle
from .category import Category
from .compound import NameConfig, validate_categories
from .config import Config
from .data import SqliteData
from .entity import TYPE_PREFIX, EntityState, GeneratedEntity, Snapshot
from .errors import EntityExistsError, EntityNotFoundError, UnknownTypeError
from .events import (
    ENTITY_CREATED,
    ENTITY_DELETED,
    ENTITY_REGENERATED,
    ENTITY_UPDATED,
    EventBus,
    get_event_bus,
)
from .generator import NameGenerator, default_generator, generate_single
from .triggers import normalize_triggers

logger = logging.getLogger(__name__)

ACTION_CREATE = "create"
ACTION_REPLACE = "replace"
ACTION_DELETE = "delete"
ACTION_NOOP = "noop"


class Resource(ABC):
    """A stateful entity type backed by the state store.

    Subclasses only describe how declared attributes map to a Snapshot; the
    create/read/update/delete flow is shared.
    """

    description = "name"

    def __init__(
        self,
        data: SqliteData,
        config: Optional[Config] = None,
        bus: Optional[EventBus] = None,
        generator: Optional[NameGenerator] = None,
    ) -> None:
        self.data = data
        self.config = config
        self.bus = bus or get_event_bus()
        self.generator = generator or default_generator

    @property
    @abstractmethod
    def type_name(self) -> str:
        """Fully qualified type name, e.g. ``whimsy_plant``."""

    @abstractmethod
    def snapshot(self, attributes: Optional[Mapping[str, Any]] = None) -> Snapshot:
        """Normalize declared attributes into a Snapshot (defaults applied)."""

    def _load(self, address: str) -> GeneratedEntity:
        entity = GeneratedEntity.from_db(self.data, address)
        if entity is None:
            raise EntityNotFoundError(address)
        return entity

    def create(self, address: str, attributes: Optional[Mapping[str, Any]] = None) -> GeneratedEntity:
        if GeneratedEntity.from_db(self.data, address) is not None:
            raise EntityExistsError(address)
        snap = self.snapshot(attributes)
        logger.debug(f"Creating {self.type_name} resource {address}")

        entity = lifecycle.create(address, snap, self.generator)
        stored = entity.save_to_db(self.data)

        logger.debug(f"Created {self.type_name} resource {address}: name={stored.name}")
        self.bus.emit(ENTITY_CREATED, {"entity": stored.to_dict()})
        return stored

    def read(self, address: str) -> GeneratedEntity:
        entity = lifecycle.read(self._load(address))
        logger.debug(f"Reading {self.type_name} resource {address}: name={entity.name}")
        return entity

    def update(self, address: str, attributes: Optional[Mapping[str, Any]] = None) -> GeneratedEntity:
        """Apply new attributes.

        Returns the lifecycle result, whose state tells the caller whether the
        name was REGENERATED or kept (STABLE). The stored copy is always STABLE.
        """
        current = self._load(address)
        snap = self.snapshot(attributes)
        logger.debug(f"Updating {self.type_name} resource {address}")

        result = lifecycle.update(current, snap, self.generator)
        stored = result.save_to_db(self.data)

        if result.state is EntityState.REGENERATED:
            logger.debug(f"Regenerated {self.type_name} {address} due to configuration change: new_name={stored.name}")
            self.bus.emit(ENTITY_REGENERATED, {"entity": stored.to_dict(), "previous_name": current.name})
        else:
            logger.debug(f"Keeping existing {self.type_name} name for {address}: name={stored.name}")
            self.bus.emit(ENTITY_UPDATED, {"entity": stored.to_dict()})
        return result

    def delete(self, address: str) -> GeneratedEntity:
        current = self._load(address)
        current.delete_from_db(self.data)
        deleted = lifecycle.delete(current)
        logger.debug(f"Deleted {self.type_name} resource {address}")
        self.bus.emit(ENTITY_DELETED, {"entity": deleted.to_dict()})
        return deleted

    def apply(self, address: str, attributes: Optional[Mapping[str, Any]] = None) -> GeneratedEntity:
        """Create when absent, otherwise update."""
        if GeneratedEntity.from_db(self.data, address) is None:
            return self.create(address, attributes)
        return self.update(address, attributes)

    def plan(self, address: str, attributes: Optional[Mapping[str, Any]] = None) -> str:
        """The action ``apply`` would take, without generating anything."""
        snap = self.snapshot(attributes)
        current = GeneratedEntity.from_db(self.data, address)
        if current is None:
            return ACTION_CREATE
        if lifecycle.should_regenerate(current.snapshot, snap):
            return ACTION_REPLACE
        return ACTION_NOOP


class SingleResource(Resource):
    """One word from a single category, seeded by the triggers."""

    def __init__(self, category: Category, data: SqliteData, **kwargs: Any) -> None:
        super().__init__(data, **kwargs)
        self.category = Category.parse(category)
        self.description = f"{self.category.value} name"

    @property
    def type_name(self) -> str:
        return f"{TYPE_PREFIX}_{self.category.value}"

    def snapshot(self, attributes: Optional[Mapping[str, Any]] = None) -> Snapshot:
        attributes = attributes or {}
        return Snapshot.single(self.category, attributes.get("triggers"))


class NameResource(Resource):
    """Several category words joined by a delimiter."""

    description = "combined name"

    @property
    def type_name(self) -> str:
        return f"{TYPE_PREFIX}_name"

    def snapshot(self, attributes: Optional[Mapping[str, Any]] = None) -> Snapshot:
        attributes = attributes or {}
        defaults = self.config.name_defaults() if self.config else None
        name_config = NameConfig.from_dict(attributes, defaults)
        # Reject bad parts before any state is touched
        validate_categories(name_config.categories)
        return Snapshot.compound(name_config, attributes.get("triggers"))


class DataSource:
    """Stateless single-category lookup; same triggers always give the same word."""

    def __init__(self, category: Category) -> None:
        self.category = Category.parse(category)
        self.description = f"{self.category.value} name"

    @property
    def type_name(self) -> str:
        return f"{TYPE_PREFIX}_{self.category.value}"

    def read(self, attributes: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        attributes = attributes or {}
        triggers = normalize_triggers(attributes.get("triggers"))
        logger.debug(f"Reading {self.type_name} data source")
        name = generate_single(self.category, triggers)
        logger.debug(f"Generated {self.type_name} name: {name}")
        return {"id": name, "name": name, "triggers": triggers}


class Provider:
    """Registry of whimsy resource and lookup types sharing one state store."""

    name = TYPE_PREFIX

    def __init__(
        self,
        data: SqliteData,
        config: Optional[Config] = None,
        bus: Optional[EventBus] = None,
        generator: Optional[NameGenerator] = None,
        version: Optional[str] = None,
    ) -> None:
        from . import __version__

        self.data = data
        self.config = config
        self.version = version or __version__
        shared = {"config": config, "bus": bus, "generator": generator}

        resources: List[Resource] = [SingleResource(c, data, **shared) for c in Category]
        resources.append(NameResource(data, **shared))
        self._resources: Dict[str, Resource] = {r.type_name: r for r in resources}
        self._data_sources: Dict[str, DataSource] = {
            ds.type_name: ds for ds in (DataSource(c) for c in Category)
        }

    def resource_types(self) -> List[str]:
        return sorted(self._resources)

    def data_source_types(self) -> List[str]:
        return sorted(self._data_sources)

    def resource(self, type_name: str) -> Resource:
        try:
            return self._resources[type_name]
        except KeyError:
            raise UnknownTypeError(type_name, "resource") from None

    def data_source(self, type_name: str) -> DataSource:
        try:
            return self._data_sources[type_name]
        except KeyError:
            raise UnknownTypeError(type_name, "lookup") from None

    def entities(self) -> List[GeneratedEntity]:
        return GeneratedEntity.list_all(self.data)

    def get(self, address: str) -> GeneratedEntity:
        """Read any persisted entity, whatever its type"""
        entity = GeneratedEntity.from_db(self.data, address)
        if entity is None:
            raise EntityNotFoundError(address)
        return self.resource(entity.type_name).read(address)

    def destroy(self, address: str) -> GeneratedEntity:
        """Delete any persisted entity, whatever its type"""
        entity = GeneratedEntity.from_db(self.data, address)
        if entity is None:
            raise EntityNotFoundError(address)
        return self.resource(entity.type_name).delete(address)
