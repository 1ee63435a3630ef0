"""
Randomness at the edges of the engine.

Commands stay deterministic given their inputs; the only random steps are
the bowl shuffle at phase (re)initialization and fresh identifiers at
session creation. Both are injectable so tests can pin them down.
"""

from __future__ import annotations
import random
import uuid
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

Shuffler = Callable[[Sequence[str]], list[str]]
IdGenerator = Callable[[], str]


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a uniformly random permutation of `items` (input untouched)."""
    result = list(items)
    (rng or random).shuffle(result)
    return result


def seeded_shuffler(seed: int) -> Shuffler:
    """Shuffler with its own seeded generator, for reproducible games."""
    rng = random.Random(seed)
    return lambda items: shuffle(items, rng)


def generate_id() -> str:
    return uuid.uuid4().hex
