"""
Word catalog for whimsy names.

Three disjoint word sets (plants, animals, colors), each an immutable,
alphabetically sorted, deduplicated tuple of lowercase tokens of at most six
letters. The sets are built once at import time and only read afterwards.
"""
from __future__ import annotations

import re
import secrets
from typing import Dict, Iterable, Iterator, Tuple

from .category import Category, CategoryLike
from .errors import EmptyWordSetError, RandomSourceError

MAX_WORD_LENGTH = 6
_WORD_RE = re.compile(r"[a-z]{1,%d}" % MAX_WORD_LENGTH)


PLANTS = [
    "acacia", "agave", "alder", "allium", "almond", "aloe", "anise", "apple",
    "arnica", "aster", "avens", "azalea", "bamboo", "banana", "barley", "basil",
    "bean", "beech", "beet", "birch", "borage", "box", "briar", "broom",
    "cacao", "cactus", "canna", "caper", "carob", "carrot", "cassia", "cedar",
    "celery", "chard", "chive", "cicely", "citron", "clove", "clover", "coffee",
    "corn", "cosmos", "cotton", "cress", "crocus", "cumin", "cycad", "daisy",
    "date", "dill", "dock", "elder", "elm", "endive", "fennel", "fern",
    "fig", "fir", "flax", "gorse", "gourd", "grape", "guava", "hazel",
    "heath", "hebe", "hemp", "holly", "hops", "hosta", "hyssop", "iris",
    "ivy", "jasmin", "kale", "kapok", "kelp", "kudzu", "larch", "laurel",
    "leek", "lentil", "lily", "linden", "lotus", "lupin", "mallow", "mango",
    "maple", "melon", "millet", "myrtle", "nettle", "nutmeg", "oak", "oat",
    "onion", "orchid", "pansy", "papaya", "pear", "pecan", "peony", "pepper",
    "phlox", "pine", "poppy", "potato", "privet", "quince", "radish", "reed",
    "rice", "rowan", "rue", "rush", "rye", "savory", "sedge", "sedum",
    "senna", "sorrel", "spruce", "squash", "sumac", "tansy", "taro", "tea",
    "teak", "thyme", "tulip", "turnip", "vetch", "vine", "willow", "yam",
    "yarrow", "yew", "yucca", "zinnia",
]

ANIMALS = [
    "adder", "alpaca", "ant", "ape", "auk", "badger", "bat", "bear",
    "beaver", "bee", "beetle", "bison", "boar", "bobcat", "bongo", "camel",
    "carp", "cat", "chough", "civet", "clam", "cobra", "cod", "condor",
    "cougar", "cow", "coyote", "crab", "crane", "crow", "cuckoo", "dingo",
    "dodo", "dog", "donkey", "dove", "duck", "eagle", "eel", "egret",
    "eland", "elk", "emu", "falcon", "ferret", "finch", "fly", "fox",
    "frog", "gannet", "gaur", "gecko", "gerbil", "gibbon", "gnat", "gnu",
    "goat", "goose", "gopher", "grouse", "gull", "hare", "hawk", "heron",
    "hippo", "hornet", "horse", "hound", "hyena", "ibex", "ibis", "iguana",
    "impala", "jackal", "jaguar", "jay", "kiwi", "koala", "koi", "krill",
    "kudu", "lamb", "lark", "lemur", "lion", "lizard", "llama", "locust",
    "loon", "lynx", "macaw", "magpie", "mamba", "marten", "mink", "mole",
    "moose", "moth", "mouse", "mule", "newt", "ocelot", "okapi", "orca",
    "oriole", "oryx", "osprey", "otter", "owl", "ox", "oyster", "panda",
    "parrot", "pigeon", "pika", "plover", "pony", "possum", "puffin", "puma",
    "python", "quail", "rabbit", "ram", "rat", "raven", "rhea", "robin",
    "rook", "salmon", "seal", "shark", "sheep", "shrew", "shrimp", "skink",
    "skunk", "sloth", "slug", "snail", "snake", "squid", "stoat", "stork",
    "swan", "tapir", "tern", "tiger", "toad", "trout", "tuna", "turkey",
    "turtle", "viper", "vole", "walrus", "wasp", "weasel", "whale", "wolf",
    "wombat", "wren", "yak", "zebra", "zebu",
]

COLORS = [
    "amber", "aqua", "ash", "auburn", "azure", "beige", "bisque", "black",
    "blond", "blue", "blush", "bone", "brass", "brick", "bronze", "brown",
    "buff", "cerise", "cherry", "chrome", "cider", "claret", "clay", "cobalt",
    "cocoa", "copper", "coral", "cream", "cyan", "denim", "dun", "ebony",
    "ecru", "fawn", "flame", "ginger", "gold", "gray", "green", "henna",
    "honey", "indigo", "ivory", "jade", "jet", "khaki", "lava", "lemon",
    "lilac", "lime", "linen", "magma", "maize", "maroon", "mauve", "mint",
    "mocha", "navy", "neon", "nickel", "night", "ochre", "olive", "onyx",
    "opal", "orange", "pastel", "peach", "pearl", "pebble", "pewter", "pink",
    "plum", "puce", "purple", "quartz", "red", "rose", "rosy", "rouge",
    "royal", "ruby", "ruddy", "russet", "rust", "sable", "sage", "sand",
    "sepia", "shadow", "shell", "sienna", "silver", "sky", "slate", "smoke",
    "snow", "steel", "stone", "straw", "sunset", "tan", "taupe", "tawny",
    "teal", "tomato", "topaz", "umber", "violet", "walnut", "wheat", "white",
    "wine", "yellow", "zinc",
]


class WordSet:
    """An immutable, sorted, deduplicated sequence of catalog words.

    Construction sorts and deduplicates the input and rejects any token that
    is not 1-6 lowercase ASCII letters.
    """

    __slots__ = ("category", "_words")

    def __init__(self, category: CategoryLike, words: Iterable[str]):
        self.category = Category.parse(category)
        tokens = list(words)
        for word in tokens:
            if not isinstance(word, str) or not _WORD_RE.fullmatch(word):
                raise ValueError(f"invalid {self.category} word: {word!r}")
        self._words: Tuple[str, ...] = tuple(sorted(set(tokens)))

    def __len__(self) -> int:
        return len(self._words)

    def __getitem__(self, index: int) -> str:
        return self._words[index]

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WordSet):
            return NotImplemented
        return self.category == other.category and self._words == other._words

    def __hash__(self) -> int:
        return hash((self.category, self._words))

    def __repr__(self) -> str:
        return f"WordSet({self.category.value}, {len(self._words)} words)"


_CATALOG: Dict[Category, WordSet] = {
    Category.PLANT: WordSet(Category.PLANT, PLANTS),
    Category.ANIMAL: WordSet(Category.ANIMAL, ANIMALS),
    Category.COLOR: WordSet(Category.COLOR, COLORS),
}


def words(category: CategoryLike) -> WordSet:
    """Return the WordSet for a category tag or Category."""
    return _CATALOG[Category.parse(category)]


def random_index(n: int) -> int:
    """Uniform integer in [0, n) from the system CSPRNG."""
    try:
        return secrets.randbelow(n)
    except OSError as e:
        raise RandomSourceError(e) from e


def pick_random(category: CategoryLike) -> str:
    """Pick one word of a category uniformly at random.

    Raises:
        UnknownCategoryError: category is not plant, animal or color
        EmptyWordSetError: the category has no words
        RandomSourceError: the entropy source failed
    """
    word_set = words(category)
    if not len(word_set):
        raise EmptyWordSetError(word_set.category.value)
    return word_set[random_index(len(word_set))]
