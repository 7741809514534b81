"""Seed helpers for determinism."""

from __future__ import annotations

import time
from typing import Optional

SEED_MODULUS = 100000


def time_seed(now: Optional[float] = None) -> int:
    """Seed derived from wall-clock seconds, as used when no seed is given."""
    if now is None:
        now = time.time()
    return int(now % SEED_MODULUS)
