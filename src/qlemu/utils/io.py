"""IO utilities for configs, reports and text files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TextIO

import yaml


TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def load_yaml(path: str | Path) -> dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data or {}


def save_json(path: str | Path, data: dict[str, Any]) -> None:
    with Path(path).open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)


def open_text(path: str | Path, mode: str = "r") -> TextIO:
    # Lines end at "\n" only; "\r" and other control chars stay visible to the caller.
    return Path(path).open(mode, encoding=TEXT_ENCODING, errors=TEXT_ERRORS, newline="\n")


def read_lines(path: str | Path) -> list[str]:
    with open_text(path) as f:
        return [line.rstrip("\r\n") for line in f]
