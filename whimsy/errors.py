"""Exception hierarchy for whimsy name generation."""
from __future__ import annotations

from typing import Any, Dict, Optional


class WhimsyError(Exception):
    """Base class for all whimsy errors"""


class GenerationError(WhimsyError):
    """Raised when a name cannot be generated"""


class ValidationError(GenerationError):
    """Raised when caller-supplied generation input is invalid"""


class UnknownCategoryError(ValidationError):
    """Raised for a category tag outside plant/animal/color"""

    def __init__(self, tag: Any):
        self.tag = tag
        super().__init__(f"invalid part '{tag}': must be one of 'plant', 'animal', 'color'")


class EmptyCategoryListError(ValidationError):
    """Raised when a compound name is requested with no categories"""

    def __init__(self) -> None:
        super().__init__("parts list cannot be empty: must contain at least one of 'plant', 'animal', 'color'")


class InvalidTriggerError(ValidationError):
    """Raised for a trigger whose value is missing (None)"""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"trigger '{key}' has no value: trigger values must be strings, numbers or booleans")


class EmptyWordSetError(GenerationError):
    """Raised when a catalog category has no words"""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"no words available for {category}")


class RandomSourceError(GenerationError):
    """Raised when the system entropy source fails"""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"failed to generate random number: {cause}")


class ManifestError(WhimsyError):
    """Raised when a manifest cannot be read or fails schema validation"""

    def __init__(self, source: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.source = source
        self.message = message
        self.details = details or {}
        super().__init__(f"{source}: {message}")


class UnknownTypeError(WhimsyError):
    """Raised when a provider is asked for a type it does not register"""

    def __init__(self, type_name: str, kind: str = "resource"):
        self.type_name = type_name
        self.kind = kind
        super().__init__(f"unknown {kind} type: {type_name}")


class EntityNotFoundError(WhimsyError):
    """Raised when an address has no persisted entity"""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"no entity found at address '{address}'")


class EntityExistsError(WhimsyError):
    """Raised when creating an entity at an address that is already taken"""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"entity already exists at address '{address}'")
