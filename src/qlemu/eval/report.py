"""Run statistics and reporting."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Any

from qlemu.utils.io import save_json


@dataclass
class RunStats:
    queries_in: int = 0
    queries_out: int = 0
    words_out: int = 0
    lookup_misses: int = 0
    overflows: int = 0
    placeholders: int = 0
    random_substitutes: int = 0
    jitter_up: int = 0
    jitter_down: int = 0
    setup_seconds: float = 0.0
    generation_seconds: float = 0.0

    @property
    def average_query_length(self) -> float:
        if self.queries_out == 0:
            return 0.0
        return self.words_out / self.queries_out

    @property
    def msec_per_query(self) -> float:
        if self.queries_out == 0:
            return 0.0
        return 1000.0 * self.generation_seconds / self.queries_out

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["average_query_length"] = self.average_query_length
        data["msec_per_query"] = self.msec_per_query
        return data


def save_report(metrics: dict[str, Any], path: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    save_json(path, metrics)
