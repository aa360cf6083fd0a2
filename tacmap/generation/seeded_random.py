import random
from typing import Optional


class SeededRandom:
    """Linear congruential generator (Numerical Recipes constants).

    Same seed and same call sequence give the same outputs in every process,
    which lets a networked peer rebuild a map from its seed alone.
    """

    A = 1664525
    C = 1013904223
    M = 2 ** 32

    def __init__(self, seed: Optional[int] = None):
        # None => fresh seed from process entropy
        self._initial_seed = seed if seed is not None else random.randint(0, 2147483646)
        self._state = self._initial_seed

    def next(self) -> int:
        self._state = (self.A * self._state + self.C) % self.M
        return self._state

    def next_float(self) -> float:
        return self.next() / self.M

    def next_int(self, max_value: int) -> int:
        """Integer in [0, max_value); 0 without consuming state when max_value <= 1."""
        if max_value <= 1:
            return 0
        return int(self.next_float() * max_value)

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self._initial_seed = seed
        self._state = self._initial_seed

    def get_seed(self) -> int:
        return self._initial_seed


__all__ = ["SeededRandom"]
