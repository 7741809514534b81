"""Rank-substitution of query words from the base to the emulated vocabulary."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, List, Optional, Sequence

from qlemu.data.schemas import QueryTokenizer
from qlemu.data.vocab import EmulatedVocabIndex, VocabTable
from qlemu.emulate.config import EmulatorConfig
from qlemu.emulate.policy import RandomPolicy
from qlemu.emulate.resolver import resolve_base_rank
from qlemu.eval.report import RunStats
from qlemu.utils.progress import ProgressLogger


JITTER_UP = 2.0 / 3.0
JITTER_DOWN = 1.0 / 3.0
NOT_FOUND = -1

logger = logging.getLogger("qlemu.transformer")


class QueryTransformer:
    """Maps each query word to the emulated word of the same frequency rank.

    Fallbacks:
      - word missing from the base vocabulary: a ``<prefix><n>`` placeholder
        when ``preserve_no_exists`` is set, otherwise a random emulated word;
      - rank beyond the emulated vocabulary: a random emulated word.

    The placeholder counter belongs to the transformer, so it keeps growing
    across all queries of a run.
    """

    def __init__(
        self,
        base: VocabTable,
        emu: EmulatedVocabIndex,
        config: EmulatorConfig | None = None,
        policy: RandomPolicy | None = None,
        tokenizer: QueryTokenizer | None = None,
    ) -> None:
        self.config = config or EmulatorConfig()
        if emu.size() == 0:
            raise ValueError("emulated vocabulary is empty")
        self.base = base
        self.emu = emu
        self.policy = policy or RandomPolicy(self.config.seed)
        self.tokenizer = tokenizer or QueryTokenizer(
            max_words=self.config.max_words,
            max_word_len=self.config.max_word_len,
            break_chars=self.config.token_break_chars,
        )
        self.stats = RunStats()
        self._noexist_num = 0

    def _jitter(self, rank0: int) -> int:
        r = self.policy.uniform()
        if r > JITTER_UP:
            self.stats.jitter_up += 1
            return rank0 + 1
        if r < JITTER_DOWN and rank0 > 0:
            self.stats.jitter_down += 1
            return rank0 - 1
        return rank0

    def _placeholder(self) -> str:
        while True:
            candidate = f"{self.config.placeholder_prefix}{self._noexist_num}"
            self._noexist_num += 1
            if candidate not in self.emu:
                self.stats.placeholders += 1
                return candidate

    def _random_word(self) -> str:
        self.stats.random_substitutes += 1
        return self.emu.get(self.policy.choose_random_rank0(self.emu.size()))

    def transform_word(self, word: str) -> str:
        rank0 = resolve_base_rank(word, self.base)
        if rank0 is None:
            rank0 = NOT_FOUND
        if self.config.obfuscate and rank0 >= 0:
            rank0 = self._jitter(rank0)

        if rank0 < 0:
            self.stats.lookup_misses += 1
            logger.debug("lookup_miss word=%s", word)
            if self.config.preserve_no_exists:
                return self._placeholder()
            return self._random_word()
        if rank0 >= self.emu.size():
            self.stats.overflows += 1
            logger.debug("rank_overflow word=%s rank0=%s n_emu=%s", word, rank0, self.emu.size())
            return self._random_word()
        logger.debug("rank_hit word=%s rank0=%s", word, rank0)
        return self.emu.get(rank0)

    def transform_words(self, words: Sequence[str]) -> List[str]:
        out = [self.transform_word(word) for word in words]
        self.stats.words_out += len(out)
        return out

    def transform_query(self, line: str) -> str:
        self.stats.queries_in += 1
        words = self.tokenizer.split(line)
        logger.debug("input_query=%s length=%s", line, len(words))
        return " ".join(self.transform_words(words))

    def run(
        self,
        queries: Iterable[str],
        sink: Callable[[str], Any],
        progress: Optional[ProgressLogger] = None,
    ) -> RunStats:
        """Transform every query and write one output line per input line."""
        started = time.perf_counter()
        for line in queries:
            sink(self.transform_query(line) + "\n")
            self.stats.queries_out += 1
            if progress is not None:
                progress.progress(self.stats.queries_out, time.perf_counter() - started)
        self.stats.generation_seconds += time.perf_counter() - started
        return self.stats
