import random
from typing import List, Sequence, TypeVar

T = TypeVar('T')


def shuffle(sequence: Sequence[T], rng=None) -> List[T]:
    """Return a uniformly shuffled copy of ``sequence`` (Fisher-Yates). The input is left alone."""
    rng = rng or random
    items = list(sequence)
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items
