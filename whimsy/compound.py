"""
Compound names built from several categories.

A compound name draws one random word per category and joins the words with
a delimiter, e.g. ``["color", "animal"]`` with ``"-"`` gives ``"teal-otter"``.
Compound generation is always random; only single-category names have a
deterministic mode (see ``whimsy.selector``).
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, MutableSequence, Optional, Sequence, Tuple, TypeVar

from .category import Category, CategoryLike
from .errors import EmptyCategoryListError
from .words import pick_random, random_index

DEFAULT_PARTS: Tuple[str, ...] = ("color", "animal")
DEFAULT_DELIMITER = "-"
DEFAULT_RANDOM = False

T = TypeVar("T")


class NameConfig:
    """Declared configuration of a compound name.

    Attributes:
        categories: ordered category tags; order matters for equality
        delimiter: string placed between words
        shuffle: when True the category order is randomized per generation
    """

    __slots__ = ("categories", "delimiter", "shuffle")

    def __init__(
        self,
        categories: Optional[Sequence[CategoryLike]] = None,
        delimiter: Optional[str] = None,
        shuffle: Optional[bool] = None,
    ):
        if categories is None:
            categories = DEFAULT_PARTS
        self.categories: Tuple[str, ...] = tuple(
            c.value if isinstance(c, Category) else c for c in categories
        )
        self.delimiter = DEFAULT_DELIMITER if delimiter is None else delimiter
        self.shuffle = DEFAULT_RANDOM if shuffle is None else bool(shuffle)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NameConfig):
            return NotImplemented
        return (
            self.categories == other.categories
            and self.delimiter == other.delimiter
            and self.shuffle == other.shuffle
        )

    def __hash__(self) -> int:
        return hash((self.categories, self.delimiter, self.shuffle))

    def __repr__(self) -> str:
        return f"NameConfig(categories={list(self.categories)}, delimiter={self.delimiter!r}, shuffle={self.shuffle})"

    def to_dict(self) -> Dict[str, Any]:
        # Attribute names follow the declared resource schema
        return {
            "parts": list(self.categories),
            "delimiter": self.delimiter,
            "random": self.shuffle,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]], defaults: Optional[Mapping[str, Any]] = None) -> NameConfig:
        """Build from resource attributes, filling gaps from ``defaults`` then built-ins."""
        data = data or {}
        defaults = defaults or {}

        def pick(key: str) -> Any:
            value = data.get(key)
            return defaults.get(key) if value is None else value

        return cls(categories=pick("parts"), delimiter=pick("delimiter"), shuffle=pick("random"))


def validate_categories(categories: Sequence[CategoryLike]) -> List[Category]:
    """Resolve every tag up front so no word is drawn for a bad list."""
    if not categories:
        raise EmptyCategoryListError()
    return [Category.parse(c) for c in categories]


def secure_shuffle(items: MutableSequence[T]) -> MutableSequence[T]:
    """Fisher-Yates shuffle in place using the system CSPRNG."""
    for i in range(len(items) - 1, 0, -1):
        j = random_index(i + 1)
        items[i], items[j] = items[j], items[i]
    return items


def build_parts(categories: Sequence[CategoryLike], shuffle: bool = False) -> List[Tuple[Category, str]]:
    """Return (category, word) pairs in output order."""
    order = validate_categories(categories)
    if shuffle:
        secure_shuffle(order)
    return [(cat, pick_random(cat)) for cat in order]


def build_name(
    categories: Sequence[CategoryLike] = DEFAULT_PARTS,
    delimiter: str = DEFAULT_DELIMITER,
    shuffle: bool = DEFAULT_RANDOM,
) -> str:
    """Generate a compound name.

    The delimiter is inserted verbatim; it is not escaped even if it also
    occurs inside a word.

    Raises:
        EmptyCategoryListError: no categories given
        UnknownCategoryError: a tag is not plant, animal or color
        RandomSourceError: the entropy source failed
    """
    return delimiter.join(word for _, word in build_parts(categories, shuffle))
