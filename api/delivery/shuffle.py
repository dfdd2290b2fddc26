"""
Ordering helpers for client-side quote delivery.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def shuffle_ids(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """
    Fisher-Yates shuffle into a new list; `items` is left untouched.
    """
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def next_batch(items: Sequence[T], index: int, batch_size: int) -> list[T]:
    return list(items[index:index + batch_size])
