"""Weighted random sampling without replacement."""

import bisect
import itertools
import random
from typing import List, Sequence, TypeVar

T = TypeVar("T")


def weighted_sample(
    items: Sequence[T],
    weights: Sequence[float],
    k: int,
    rng: random.Random,
) -> List[T]:
    """Draw ``k`` distinct items, each draw proportional to the remaining weights.

    Args:
        items: Candidates
        weights: Positive weight per candidate
        k: Number of items to draw (clamped to len(items))
        rng: Random number generator

    Returns:
        The drawn items in draw order
    """
    if len(items) != len(weights):
        raise ValueError(f"{len(items)} items but {len(weights)} weights")

    remaining_items = list(items)
    remaining_weights = list(weights)
    chosen: List[T] = []
    for _ in range(min(k, len(remaining_items))):
        cumulative = list(itertools.accumulate(remaining_weights))
        index = bisect.bisect_right(cumulative, rng.random() * cumulative[-1])
        index = min(index, len(remaining_items) - 1)
        chosen.append(remaining_items.pop(index))
        remaining_weights.pop(index)
    return chosen
