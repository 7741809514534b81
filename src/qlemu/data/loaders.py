"""Input/output file locations and query log reading."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List

from qlemu.data.schemas import TERMINATOR_MAX
from qlemu.data.vocab import QleError


BASE_VOCAB_SUFFIX = "_vocab.tsv"
QLOG_SUFFIX = ".qlog"
EMU_VOCAB_SUFFIX = "_vocab_by_freq.tsv"


class MissingInputError(QleError, FileNotFoundError):
    pass


@dataclass(frozen=True)
class RunPaths:
    base_vocab: Path
    base_qlog: Path
    emu_vocab: Path
    emu_qlog: Path


def stem_path(stem: str | Path, suffix: str) -> Path:
    return Path(str(stem) + suffix)


def run_paths(base_stem: str | Path, emu_stem: str | Path) -> RunPaths:
    return RunPaths(
        base_vocab=stem_path(base_stem, BASE_VOCAB_SUFFIX),
        base_qlog=stem_path(base_stem, QLOG_SUFFIX),
        emu_vocab=stem_path(emu_stem, EMU_VOCAB_SUFFIX),
        emu_qlog=stem_path(emu_stem, QLOG_SUFFIX),
    )


def missing_inputs(base_stem: str | Path, emu_stem: str | Path) -> List[Path]:
    paths = run_paths(base_stem, emu_stem)
    required = [paths.base_vocab, paths.base_qlog, paths.emu_vocab]
    return [p for p in required if not p.is_file()]


def check_inputs(base_stem: str | Path | None, emu_stem: str | Path | None) -> RunPaths:
    if not base_stem or not emu_stem:
        raise MissingInputError("both base_stem and emu_stem are required")
    missing = missing_inputs(base_stem, emu_stem)
    if missing:
        raise MissingInputError("missing input file(s): " + ", ".join(str(p) for p in missing))
    return run_paths(base_stem, emu_stem)


def strip_query_line(line: str) -> str:
    end = len(line)
    while end > 0 and ord(line[end - 1]) < TERMINATOR_MAX:
        end -= 1
    return line[:end]


def iter_queries(lines: Iterable[str]) -> Iterator[str]:
    """Yield query lines with trailing newlines and control chars removed."""
    for line in lines:
        yield strip_query_line(line)
