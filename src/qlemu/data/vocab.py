"""Vocabulary tables: alphabetical base table and frequency-ordered emulated index."""

from __future__ import annotations

import logging
import re
from bisect import bisect_left
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from qlemu.data.schemas import Number, VocabRecord, word_key
from qlemu.utils.io import read_lines


FORMAT_ERROR_MODES = ("raise", "warn")

# Plain ASCII decimal numbers only: no "_" separators, nan, inf or non-ASCII digits.
_INT_RE = re.compile(r"[+-]?[0-9]+")
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

logger = logging.getLogger("qlemu.vocab")


class QleError(Exception):
    """Base class for query log emulator errors."""


class VocabFormatError(QleError, ValueError):
    pass


class VocabOrderError(QleError):
    pass


class RankOutOfRange(QleError, IndexError):
    pass


def vocab_cmp(a: str, b: str) -> int:
    """Compare two vocabulary entries on their words only.

    Each side is cut at its first terminator (any char <= 0x20), so
    ``"cat\\t10"`` and ``"cat\\n"`` compare equal while ``"ca"`` sorts
    before ``"cat"``.
    """
    ka = word_key(a)
    kb = word_key(b)
    if ka == kb:
        return 0
    return -1 if ka < kb else 1


def _parse_number(field: str) -> Number:
    text = field.strip()
    if not _NUMBER_RE.fullmatch(text):
        raise ValueError(f"not a number: {field!r}")
    if _INT_RE.fullmatch(text):
        return int(text)
    return float(text)


def _parse_rank(field: str) -> int:
    value = _parse_number(field)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"rank is not an integer: {field!r}")
        value = int(value)
    if value < 1:
        raise ValueError(f"rank must be >= 1: {field!r}")
    return value


def parse_vocab_line(line: str) -> VocabRecord:
    """Parse ``word<TAB>occFreq<TAB>DF[<TAB>rank]`` into a record.

    A two-number legacy row yields ``rank=None``; callers decide whether that
    is acceptable. Fields after the rank are ignored.
    """
    word = word_key(line)
    if not word:
        raise VocabFormatError(f"missing word in vocab record: {line!r}")
    fields = line[len(word) + 1 :].split("\t")
    if len(fields) < 2:
        raise VocabFormatError(f"missing field in vocab record: {line!r}")
    try:
        occurrence_frequency = _parse_number(fields[0])
        document_frequency = _parse_number(fields[1])
        rank = _parse_rank(fields[2]) if len(fields) > 2 else None
    except ValueError as exc:
        raise VocabFormatError(f"malformed numeric field in vocab record: {line!r} ({exc})") from exc
    return VocabRecord(word, occurrence_frequency, document_frequency, rank)


class VocabTable:
    """Alphabetically sorted vocabulary searched by word.

    The table never re-sorts its input. ``check_sorted`` verifies the order
    at build time; without it an unsorted table gives unreliable lookups.
    """

    def __init__(self, records: Sequence[VocabRecord]) -> None:
        self._records: Tuple[VocabRecord, ...] = tuple(records)
        self._keys: List[str] = [r.word for r in self._records]

    @classmethod
    def build(
        cls,
        lines: Iterable[str],
        *,
        on_format_error: str = "raise",
        check_sorted: bool = True,
    ) -> "VocabTable":
        if on_format_error not in FORMAT_ERROR_MODES:
            raise ValueError(f"on_format_error must be one of {FORMAT_ERROR_MODES}, got {on_format_error!r}")
        strict = on_format_error == "raise"
        records: List[VocabRecord] = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                record = parse_vocab_line(line)
            except VocabFormatError as exc:
                if strict:
                    raise VocabFormatError(f"line {lineno}: {exc}") from exc
                logger.warning("vocab_format_error line=%s error=%s", lineno, exc)
                continue
            if record.rank is None:
                if strict:
                    raise VocabFormatError(f"line {lineno}: missing rank field in vocab record: {line!r}")
                logger.warning("vocab_missing_rank line=%s word=%s", lineno, record.word)
                continue
            if check_sorted and records and records[-1].word > record.word:
                raise VocabOrderError(
                    f"line {lineno}: vocab not sorted, {records[-1].word!r} precedes {record.word!r}"
                )
            records.append(record)
        return cls(records)

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        *,
        on_format_error: str = "raise",
        check_sorted: bool = True,
    ) -> "VocabTable":
        table = cls.build(read_lines(path), on_format_error=on_format_error, check_sorted=check_sorted)
        logger.info("vocab_loaded kind=base path=%s records=%s", path, len(table))
        return table

    def find(self, word: str) -> Optional[VocabRecord]:
        key = word_key(word)
        idx = bisect_left(self._keys, key)
        if idx < len(self._keys) and self._keys[idx] == key:
            return self._records[idx]
        return None

    def lookup(self, word: str) -> Optional[int]:
        """Return the 1-origin rank of ``word``, or ``None`` if absent."""
        record = self.find(word)
        if record is None:
            return None
        return record.rank

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[VocabRecord]:
        return iter(self._records)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.find(word) is not None


class EmulatedVocabIndex:
    """Emulated-corpus vocabulary in descending frequency order.

    Position ``r`` holds the word of rank ``r + 1``; the file's own rank
    column is not consulted.
    """

    def __init__(self, words: Sequence[str]) -> None:
        self._words: Tuple[str, ...] = tuple(words)
        self._word_set: Optional[frozenset[str]] = None

    @classmethod
    def build(cls, lines: Iterable[str]) -> "EmulatedVocabIndex":
        words: List[str] = []
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            word = word_key(line)
            if not word:
                raise VocabFormatError(f"line {lineno}: missing word in vocab record: {line!r}")
            words.append(word)
        if not words:
            raise VocabFormatError("emulated vocabulary is empty")
        return cls(words)

    @classmethod
    def from_path(cls, path: str | Path) -> "EmulatedVocabIndex":
        index = cls.build(read_lines(path))
        logger.info("vocab_loaded kind=emu path=%s records=%s", path, len(index))
        return index

    def get(self, rank0: int) -> str:
        if not 0 <= rank0 < len(self._words):
            raise RankOutOfRange(f"rank0 {rank0} outside [0, {len(self._words)})")
        return self._words[rank0]

    def size(self) -> int:
        return len(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        if self._word_set is None:
            self._word_set = frozenset(self._words)
        return word in self._word_set
