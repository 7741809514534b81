"""Immutable run configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from qlemu.data.vocab import FORMAT_ERROR_MODES
from qlemu.utils.io import load_yaml


@dataclass(frozen=True)
class EmulatorConfig:
    base_stem: Optional[str] = None
    emu_stem: Optional[str] = None
    verbose: bool = False
    obfuscate: bool = False
    preserve_no_exists: bool = False
    placeholder_prefix: str = "noexist"
    max_words: int = 500
    max_word_len: int = 100
    token_break_chars: str = ""
    on_format_error: str = "raise"
    check_sorted: bool = True
    seed: Optional[int] = None
    report_path: Optional[str] = None

    def __post_init__(self) -> None:
        if self.on_format_error not in FORMAT_ERROR_MODES:
            raise ValueError(
                f"on_format_error must be one of {FORMAT_ERROR_MODES}, got {self.on_format_error!r}"
            )
        if self.max_words < 1:
            raise ValueError(f"max_words must be >= 1, got {self.max_words}")
        if self.max_word_len < 1:
            raise ValueError(f"max_word_len must be >= 1, got {self.max_word_len}")
        if not self.placeholder_prefix:
            raise ValueError("placeholder_prefix must not be empty")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EmulatorConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config key(s): {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EmulatorConfig":
        data = load_yaml(path)
        # Accept either a flat mapping or one nested under "emulator".
        if "emulator" in data and isinstance(data["emulator"], dict):
            data = data["emulator"]
        return cls.from_dict(data)

    def with_overrides(self, **overrides: Any) -> "EmulatorConfig":
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)
