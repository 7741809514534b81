"""Seedable uniform random source for jitter and fallback choices."""

from __future__ import annotations

import math
import random
from typing import Optional

from qlemu.utils.seed import time_seed


class RandomPolicy:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = time_seed() if seed is None else int(seed)
        self._rng = random.Random(self.seed)

    def uniform(self) -> float:
        return self._rng.random()

    def choose_random_rank0(self, n_emu: int) -> int:
        if n_emu <= 0:
            raise ValueError(f"cannot choose a rank from an empty vocabulary (n_emu={n_emu})")
        return min(int(math.floor(self.uniform() * n_emu)), n_emu - 1)
