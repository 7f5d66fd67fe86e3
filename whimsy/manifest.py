"""
Manifests: declared whimsy entities in YAML.

    resources:
      - address: app
        type: whimsy_name
        parts: [color, animal]
        delimiter: "-"
        triggers:
          env: prod
      - address: db
        type: whimsy_plant
    lookups:
      - address: region_color
        type: whimsy_color
        triggers: {region: eu}

``plan`` compares the manifest against the state store without generating
anything; ``apply`` converges the store to the manifest.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

from .errors import ManifestError
from .provider import ACTION_CREATE, ACTION_DELETE, ACTION_NOOP, ACTION_REPLACE, Provider

SCHEMA_PATH = Path(__file__).parent / "schemas" / "manifest.json"


class Declaration:
    """One declared resource or lookup"""

    def __init__(self, address: str, type_name: str, attributes: Optional[Dict[str, Any]] = None):
        self.address = address
        self.type_name = type_name
        self.attributes = attributes or {}

    def to_dict(self) -> Dict[str, Any]:
        result = {"address": self.address, "type": self.type_name}
        result.update(self.attributes)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Declaration:
        attributes = {k: v for k, v in data.items() if k not in ("address", "type")}
        return cls(address=data["address"], type_name=data["type"], attributes=attributes)


class Manifest:
    """Validated set of resource and lookup declarations"""

    def __init__(
        self,
        resources: Optional[List[Declaration]] = None,
        lookups: Optional[List[Declaration]] = None,
        source: str = "<manifest>",
    ):
        self.resources = resources or []
        self.lookups = lookups or []
        self.source = source

    @classmethod
    def from_yaml_file(cls, path: Path) -> Manifest:
        """Load and validate a manifest file"""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ManifestError(str(path), f"cannot read manifest: {e}") from e
        except yaml.YAMLError as e:
            raise ManifestError(str(path), f"invalid YAML: {e}") from e
        return cls.from_dict(data or {}, source=str(path))

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = "<manifest>") -> Manifest:
        cls._validate_schema(data, source)
        resources = [Declaration.from_dict(d) for d in data.get("resources", [])]
        lookups = [Declaration.from_dict(d) for d in data.get("lookups", [])]

        seen: Dict[str, str] = {}
        for decl in resources + lookups:
            if decl.address in seen:
                raise ManifestError(source, f"duplicate address '{decl.address}'", {"address": decl.address})
            seen[decl.address] = decl.type_name
        return cls(resources=resources, lookups=lookups, source=source)

    @staticmethod
    def _validate_schema(data: Any, source: str) -> None:
        """Validate manifest data against the bundled JSON schema"""
        with open(SCHEMA_PATH, "r") as f:
            schema = json.load(f)
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path) or "(root)"
            raise ManifestError(source, f"{location}: {e.message}", {"path": list(e.absolute_path)}) from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resources": [d.to_dict() for d in self.resources],
            "lookups": [d.to_dict() for d in self.lookups],
        }


class PlannedAction:
    """What apply will do at one address"""

    def __init__(self, address: str, type_name: str, action: str, current_name: Optional[str] = None):
        self.address = address
        self.type_name = type_name
        self.action = action
        self.current_name = current_name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "type": self.type_name,
            "action": self.action,
            "current_name": self.current_name,
        }

    def __repr__(self) -> str:
        return f"PlannedAction({self.address!r}, {self.action})"


def plan(provider: Provider, manifest: Manifest, prune: bool = True) -> List[PlannedAction]:
    """Actions needed to converge the state store to ``manifest``.

    With ``prune``, persisted entities missing from the manifest are planned
    for deletion. Lookups are stateless and never appear in a plan.
    """
    actions: List[PlannedAction] = []
    declared = set()
    for decl in manifest.resources:
        declared.add(decl.address)
        resource = provider.resource(decl.type_name)
        action = resource.plan(decl.address, decl.attributes)
        current = None
        if action != ACTION_CREATE:
            current = provider.get(decl.address).name
        actions.append(PlannedAction(decl.address, decl.type_name, action, current))

    if prune:
        for entity in provider.entities():
            if entity.address not in declared:
                actions.append(PlannedAction(entity.address, entity.type_name, ACTION_DELETE, entity.name))
    return actions


def apply(provider: Provider, manifest: Manifest, prune: bool = True) -> Dict[str, Any]:
    """Converge the state store to ``manifest`` and resolve lookups.

    Returns a dict with the executed ``actions``, the resulting
    ``resources`` (address -> entity dict) and ``lookups`` (address -> result).
    """
    planned = plan(provider, manifest, prune=prune)
    by_address = {d.address: d for d in manifest.resources}
    resources: Dict[str, Any] = {}

    for step in planned:
        if step.action == ACTION_DELETE:
            provider.destroy(step.address)
            continue
        decl = by_address[step.address]
        resource = provider.resource(decl.type_name)
        if step.action == ACTION_CREATE:
            entity = resource.create(decl.address, decl.attributes)
        elif step.action in (ACTION_REPLACE, ACTION_NOOP):
            entity = resource.update(decl.address, decl.attributes)
        else:  # pragma: no cover
            raise ValueError(f"unknown action {step.action}")
        resources[decl.address] = entity.to_dict()

    lookups: Dict[str, Any] = {}
    for decl in manifest.lookups:
        lookups[decl.address] = provider.data_source(decl.type_name).read(decl.attributes)

    return {
        "actions": [a.to_dict() for a in planned],
        "resources": resources,
        "lookups": lookups,
    }
