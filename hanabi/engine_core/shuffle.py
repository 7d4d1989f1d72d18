"""
Seeded shuffling.

Seeded games must be bit-for-bit reproducible across runs and across
implementations, so the generator is an explicit 32-bit LCG rather than
the interpreter's Mersenne Twister.
"""

from __future__ import annotations
import math
import random
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

_MODULUS = 0x100000000
_MULTIPLIER = 1664525
_INCREMENT = 1013904223


class SeededRandom:
    """
    Linear congruential generator returning floats in [0, 1).

    The seed is reduced to an unsigned 32-bit integer; zero is replaced by 1.
    """

    def __init__(self, seed: int | float):
        if not math.isfinite(seed):
            raise ValueError("shuffleSeed must be a finite number")
        self._state = (int(seed) % _MODULUS) or 1

    def random(self) -> float:
        self._state = (self._state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self._state / _MODULUS

    def __call__(self) -> float:
        return self.random()


def shuffle_deck(deck: Sequence[T], seed: int | float | None = None) -> list[T]:
    """
    Fisher-Yates shuffle, walking from the last index down.

    Returns a new list. Without a seed the platform generator is used.
    """
    shuffled = list(deck)
    rand: Callable[[], float] = random.random if seed is None else SeededRandom(seed)

    for index in range(len(shuffled) - 1, 0, -1):
        swap_index = math.floor(rand() * (index + 1))
        shuffled[index], shuffled[swap_index] = shuffled[swap_index], shuffled[index]

    return shuffled
