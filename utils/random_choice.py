import random
from typing import Optional, Sequence, TypeVar

T = TypeVar("T")


def choose_random(items: Sequence[T]) -> Optional[T]:
    """Pick one element uniformly at random, None for an empty sequence"""
    if not items:
        return None
    return random.choice(items)
