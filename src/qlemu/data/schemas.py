"""Vocabulary record schema and query tokenizer."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Union


# Any character at or below this code point ends a word: space, tab, CR, LF, NUL ...
TERMINATOR_MAX = 0x20

_WORD_RE = re.compile(r"[^\x00-\x20]+")

Number = Union[int, float]

logger = logging.getLogger("qlemu.tokenizer")


def word_key(text: str) -> str:
    """Return the prefix of ``text`` up to its first terminator character."""
    for i, ch in enumerate(text):
        if ord(ch) <= TERMINATOR_MAX:
            return text[:i]
    return text


@dataclass(frozen=True)
class VocabRecord:
    word: str
    occurrence_frequency: Number
    document_frequency: Number
    rank: Optional[int] = None


class QueryTokenizer:
    """Whitespace/control-char tokenizer with enforced size limits.

    Characters in ``break_chars`` also split words, e.g. ``",;"`` turns
    ``"cat, dog"`` into ``["cat", "dog"]``. Words longer than
    ``max_word_len`` are truncated and words beyond ``max_words`` are
    dropped, so oversized input is handled the same way on every run.
    """

    def __init__(self, max_words: int = 500, max_word_len: int = 100, break_chars: str = "") -> None:
        if max_words < 1:
            raise ValueError(f"max_words must be >= 1, got {max_words}")
        if max_word_len < 1:
            raise ValueError(f"max_word_len must be >= 1, got {max_word_len}")
        self.max_words = max_words
        self.max_word_len = max_word_len
        self.break_chars = break_chars
        self._word_re = _WORD_RE
        if break_chars:
            self._word_re = re.compile(r"[^\x00-\x20" + re.escape(break_chars) + "]+")

    def split(self, line: str) -> List[str]:
        words = self._word_re.findall(line)
        if len(words) > self.max_words:
            logger.warning(
                "query_truncated words=%s max_words=%s", len(words), self.max_words
            )
            words = words[: self.max_words]
        out: List[str] = []
        for word in words:
            if len(word) > self.max_word_len:
                logger.debug("word_truncated word=%s max_word_len=%s", word, self.max_word_len)
                word = word[: self.max_word_len]
            out.append(word)
        return out
