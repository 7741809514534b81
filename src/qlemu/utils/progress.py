"""Console progress and summary output."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console


class ProgressLogger:
    """Prints ``key=value`` lines, optionally mirrored to a JSONL file.

    Progress lines come out at geometrically growing intervals: every 10
    queries up to 100, every 100 up to 1000, and so on.
    """

    def __init__(self, log_path: str | None = None, interval: int = 10, console: Console | None = None) -> None:
        self.console = console or Console()
        self.interval = interval
        self.log_path = Path(log_path) if log_path else None
        if self.log_path:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._fp = self.log_path.open("w", encoding="utf-8")
        else:
            self._fp = None

    def log(self, data: dict[str, Any]) -> None:
        msg = " ".join(f"{k}={v}" for k, v in data.items())
        self.console.print(msg, markup=False, highlight=False, soft_wrap=True)
        if self._fp:
            self._fp.write(json.dumps(data) + "\n")
            self._fp.flush()

    def due(self, count: int) -> bool:
        if count <= 0 or count % self.interval != 0:
            return False
        if count % (self.interval * 10) == 0:
            self.interval *= 10
        return True

    def progress(self, count: int, elapsed: float) -> None:
        if not self.due(count):
            return
        self.log(
            {
                "progress_queries": count,
                "msec_per_query": round(1000.0 * elapsed / count, 3),
            }
        )

    def close(self) -> None:
        if self._fp:
            self._fp.close()
            self._fp = None

    def __enter__(self) -> "ProgressLogger":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
