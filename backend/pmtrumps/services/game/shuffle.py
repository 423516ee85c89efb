import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar('T')


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Seeded generator when ``seed`` is given, otherwise system-seeded."""
    return random.Random(seed)


class Shuffler:
    """Permutes sequences with an injected random source."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or make_rng()

    def shuffled(self, items: Sequence[T]) -> List[T]:
        """Return a shuffled copy of ``items``; the input is left untouched."""
        copy = list(items)
        self.rng.shuffle(copy)
        return copy
