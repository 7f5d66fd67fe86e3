"""
Generated entities and the snapshots they were generated from.

A GeneratedEntity is what the orchestrator persists between calls: the name
(which doubles as the entity id), the Snapshot of inputs that produced it,
and its lifecycle state.
"""
from __future__ import annotations

import copy
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .category import Category, CategoryLike
from .compound import NameConfig
from .data import SqliteData
from .errors import EntityNotFoundError
from .triggers import TriggerMap, canonical_triggers, normalize_triggers

TYPE_PREFIX = "whimsy"


class EntityKind(str, Enum):
    SINGLE = "single"
    COMPOUND = "compound"


class EntityState(str, Enum):
    """Lifecycle states; REGENERATED settles to STABLE once persisted."""

    ABSENT = "absent"
    CREATED = "created"
    STABLE = "stable"
    REGENERATED = "regenerated"
    DELETED = "deleted"


class Snapshot:
    """The inputs a name was generated from.

    Single-category snapshots carry a category; compound snapshots carry a
    NameConfig. Both carry a trigger map, kept in normalized form.
    """

    __slots__ = ("kind", "category", "config", "triggers")

    def __init__(
        self,
        kind: EntityKind,
        category: Optional[CategoryLike] = None,
        config: Optional[NameConfig] = None,
        triggers: Optional[Mapping[Any, Any]] = None,
    ):
        self.kind = EntityKind(kind)
        if self.kind is EntityKind.SINGLE:
            if category is None:
                raise ValueError("single-category snapshot requires a category")
            self.category: Optional[Category] = Category.parse(category)
            self.config: Optional[NameConfig] = None
        else:
            self.category = None
            self.config = config if config is not None else NameConfig()
        self.triggers: TriggerMap = normalize_triggers(triggers)

    @classmethod
    def single(cls, category: CategoryLike, triggers: Optional[Mapping[Any, Any]] = None) -> Snapshot:
        return cls(EntityKind.SINGLE, category=category, triggers=triggers)

    @classmethod
    def compound(cls, config: Optional[NameConfig] = None, triggers: Optional[Mapping[Any, Any]] = None) -> Snapshot:
        return cls(EntityKind.COMPOUND, config=config, triggers=triggers)

    @property
    def type_name(self) -> str:
        if self.kind is EntityKind.SINGLE:
            return f"{TYPE_PREFIX}_{self.category.value}"
        return f"{TYPE_PREFIX}_name"

    def canonical(self) -> tuple:
        """Order-independent form of the triggers, order-preserving form of the parts."""
        if self.kind is EntityKind.SINGLE:
            return (self.kind.value, self.category.value, canonical_triggers(self.triggers))
        return (
            self.kind.value,
            self.config.categories,
            self.config.delimiter,
            self.config.shuffle,
            canonical_triggers(self.triggers),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return self.canonical() == other.canonical()

    def __hash__(self) -> int:
        return hash(self.canonical())

    def __repr__(self) -> str:
        if self.kind is EntityKind.SINGLE:
            return f"Snapshot(single, {self.category.value}, triggers={self.triggers})"
        return f"Snapshot(compound, {self.config!r}, triggers={self.triggers})"

    def requires_regeneration(self, new: Snapshot) -> bool:
        """True when a name generated from self is stale for ``new``."""
        if self.kind is not new.kind:
            return True
        if self.kind is EntityKind.SINGLE:
            # Category differs only if the entity was re-declared under another type
            if self.category is not new.category:
                return True
            return canonical_triggers(self.triggers) != canonical_triggers(new.triggers)
        return (
            self.config.categories != new.config.categories
            or self.config.delimiter != new.config.delimiter
            or self.config.shuffle != new.config.shuffle
            or canonical_triggers(self.triggers) != canonical_triggers(new.triggers)
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"kind": self.kind.value, "triggers": dict(self.triggers)}
        if self.kind is EntityKind.SINGLE:
            result["category"] = self.category.value
        else:
            result.update(self.config.to_dict())
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Snapshot:
        kind = EntityKind(data["kind"])
        if kind is EntityKind.SINGLE:
            return cls.single(data["category"], data.get("triggers"))
        return cls.compound(NameConfig.from_dict(data), data.get("triggers"))


class GeneratedEntity:
    """Persisted state of one named entity.

    Attributes:
        address: orchestrator key (e.g. manifest address)
        entity_id: always equal to ``name``
        name: the generated name
        snapshot: inputs the current name was produced from
        state: lifecycle state
    """

    def __init__(
        self,
        address: str,
        name: str,
        snapshot: Snapshot,
        state: EntityState = EntityState.CREATED,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.address = address
        self.name = name
        self.entity_id = name
        self.snapshot = snapshot
        self.state = EntityState(state)
        self.created_at = created_at or datetime.now()
        self.updated_at = updated_at or self.created_at

    @property
    def kind(self) -> EntityKind:
        return self.snapshot.kind

    @property
    def type_name(self) -> str:
        return self.snapshot.type_name

    def evolve(self, **changes: Any) -> GeneratedEntity:
        """Return a copy with fields replaced; ``name`` also replaces the id."""
        clone = copy.copy(self)
        for key, value in changes.items():
            if key == "entity_id":
                raise AttributeError("entity_id follows name and cannot be set directly")
            setattr(clone, key, value)
        clone.entity_id = clone.name
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeneratedEntity):
            return NotImplemented
        return (
            self.address == other.address
            and self.name == other.name
            and self.snapshot == other.snapshot
            and self.state is other.state
        )

    def __repr__(self) -> str:
        return f"GeneratedEntity({self.address!r}, {self.name!r}, {self.state.value})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "type": self.type_name,
            "id": self.entity_id,
            "name": self.name,
            "state": self.state.value,
            "snapshot": self.snapshot.to_dict(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GeneratedEntity:
        return cls(
            address=data["address"],
            name=data["name"],
            snapshot=Snapshot.from_dict(data["snapshot"]),
            state=EntityState(data.get("state", EntityState.STABLE.value)),
            created_at=_parse_dt(data.get("created_at")),
            updated_at=_parse_dt(data.get("updated_at")),
        )

    @classmethod
    def from_db(cls, data: SqliteData, address: str) -> Optional[GeneratedEntity]:
        """Load an entity from the database, or None if the address is unknown"""
        rows = data.query("SELECT * FROM entities WHERE address = ?", (address,))
        if not rows:
            return None
        return cls._from_row(rows[0])

    @classmethod
    def _from_row(cls, row: Dict[str, Any]) -> GeneratedEntity:
        snap: Dict[str, Any] = dict(row.get("config_json") or {})
        snap["kind"] = row["kind"]
        snap["triggers"] = row.get("triggers_json") or {}
        if row.get("category"):
            snap["category"] = row["category"]
        return cls(
            address=row["address"],
            name=row["name"],
            snapshot=Snapshot.from_dict(snap),
            state=EntityState(row["state"]),
            created_at=_parse_dt(row.get("created_at")),
            updated_at=_parse_dt(row.get("updated_at")),
        )

    @staticmethod
    def list_all(data: SqliteData) -> List[GeneratedEntity]:
        """List every persisted entity ordered by address"""
        rows = data.query("SELECT * FROM entities ORDER BY address")
        return [GeneratedEntity._from_row(row) for row in rows]

    def save_to_db(self, data: SqliteData) -> GeneratedEntity:
        """Persist this entity and return the settled copy that was stored.

        A REGENERATED entity is stored as STABLE.
        """
        from .lifecycle import settle

        stored = settle(self)
        if stored.state in (EntityState.ABSENT, EntityState.DELETED):
            raise ValueError(f"cannot persist entity in state {stored.state.value}")

        snap = stored.snapshot
        row = {
            "type_name": stored.type_name,
            "kind": stored.kind.value,
            "entity_id": stored.entity_id,
            "name": stored.name,
            "category": snap.category.value if snap.category else None,
            "config_json": snap.config.to_dict() if snap.config else {},
            "triggers_json": dict(snap.triggers),
            "state": stored.state.value,
            "updated_at": stored.updated_at.isoformat(),
        }
        existing = data.query("SELECT address FROM entities WHERE address = ?", (stored.address,))
        if existing:
            data.update("entities", row, "address = ?", (stored.address,))
        else:
            row["address"] = stored.address
            row["created_at"] = stored.created_at.isoformat()
            data.insert("entities", row)
        return stored

    def delete_from_db(self, data: SqliteData) -> None:
        existing = data.query("SELECT address FROM entities WHERE address = ?", (self.address,))
        if not existing:
            raise EntityNotFoundError(self.address)
        data.delete("entities", "address = ?", (self.address,))


def _parse_dt(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime) or value is None:
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
