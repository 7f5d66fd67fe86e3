"""Name categories."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Union

from .errors import UnknownCategoryError

if TYPE_CHECKING:
    from .words import WordSet


class Category(str, Enum):
    """A word category; each member resolves to one WordSet in the catalog."""

    PLANT = "plant"
    ANIMAL = "animal"
    COLOR = "color"

    @classmethod
    def parse(cls, tag: Union["Category", str]) -> "Category":
        """Resolve a tag to a Category, raising UnknownCategoryError otherwise.

        Tags are matched exactly: "Plant" or " plant" are not valid.
        """
        if isinstance(tag, Category):
            return tag
        try:
            return cls(tag)
        except ValueError:
            raise UnknownCategoryError(tag) from None

    @property
    def words(self) -> "WordSet":
        from .words import words

        return words(self)

    def __str__(self) -> str:
        return self.value


CategoryLike = Union[Category, str]
