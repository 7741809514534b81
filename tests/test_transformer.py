import re

import pytest

from qlemu.data.schemas import QueryTokenizer
from qlemu.data.vocab import EmulatedVocabIndex, VocabTable
from qlemu.emulate.config import EmulatorConfig
from qlemu.emulate.policy import RandomPolicy
from qlemu.emulate.transformer import QueryTransformer
from qlemu.utils.seed import time_seed


BASE_LINES = ["cat\t10\t5\t1", "dog\t8\t4\t2", "fish\t2\t1\t3"]
EMU_LINES = ["feline\t100\t50\t1", "canine\t90\t40\t2", "pike\t5\t3\t3"]


def _transformer(
    base_lines=BASE_LINES,
    emu_lines=EMU_LINES,
    seed: int = 7,
    **config_kwargs,
) -> QueryTransformer:
    config = EmulatorConfig(seed=seed, **config_kwargs)
    return QueryTransformer(
        VocabTable.build(base_lines),
        EmulatedVocabIndex.build(emu_lines),
        config,
        RandomPolicy(seed),
    )


def _ranked_vocab(prefix: str, n: int) -> list[str]:
    words = [f"{prefix}{i:04d}" for i in range(n)]
    return [f"{w}\t{n - i}\t{n - i}\t{i + 1}" for i, w in enumerate(words)]


def test_cat_dog_fish_scenario() -> None:
    transformer = _transformer()
    assert transformer.transform_query("cat dog fish") == "feline canine pike"


def test_rank_round_trip() -> None:
    base = _ranked_vocab("b", 50)
    emu = _ranked_vocab("e", 80)
    transformer = _transformer(base, emu)
    for k in range(1, 51):
        assert transformer.transform_words([f"b{k - 1:04d}"]) == [f"e{k - 1:04d}"]


def test_order_and_length_preserved() -> None:
    transformer = _transformer()
    words = ["fish", "zzz", "cat", "dog", "cat", "qqq"]
    out = transformer.transform_words(words)
    assert len(out) == len(words)
    assert out[0] == "pike"
    assert out[2] == "feline"
    assert out[3] == "canine"
    assert out[4] == "feline"


def test_placeholders_count_up_across_queries() -> None:
    transformer = _transformer(preserve_no_exists=True)
    assert transformer.transform_query("zzz") == "noexist0"
    assert transformer.transform_query("yyy cat zzz") == "noexist1 feline noexist2"
    assert transformer.stats.placeholders == 3
    assert transformer.stats.lookup_misses == 3


def test_placeholder_skips_emulated_words() -> None:
    transformer = _transformer(emu_lines=EMU_LINES + ["noexist0\t1\t1\t4"], preserve_no_exists=True)
    assert transformer.transform_query("zzz") == "noexist1"


def test_custom_placeholder_prefix() -> None:
    transformer = _transformer(preserve_no_exists=True, placeholder_prefix="oov_")
    assert transformer.transform_query("zzz zzz") == "oov_0 oov_1"


def test_misses_without_placeholders_use_emulated_words() -> None:
    transformer = _transformer()
    emu_words = {"feline", "canine", "pike"}
    for _ in range(200):
        (word,) = transformer.transform_words(["zzz"])
        assert word in emu_words
        assert not re.fullmatch(r"noexist\d+", word)
    assert transformer.stats.random_substitutes == 200


def test_rank_overflow_draws_valid_indices() -> None:
    base = ["rare\t1\t1\t100"]
    emu = _ranked_vocab("e", 10)
    transformer = _transformer(base, emu)
    seen = set()
    for _ in range(1000):
        (word,) = transformer.transform_words(["rare"])
        index = int(word[1:])
        assert 0 <= index < 10
        seen.add(index)
    assert seen == set(range(10))
    assert transformer.stats.overflows == 1000


def test_jitter_stays_within_one_rank() -> None:
    base = _ranked_vocab("b", 10)
    emu = _ranked_vocab("e", 20)
    transformer = _transformer(base, emu, obfuscate=True)
    shifts = set()
    for _ in range(500):
        for k in range(10):
            (word,) = transformer.transform_words([f"b{k:04d}"])
            out_rank0 = int(word[1:])
            assert out_rank0 >= 0
            assert abs(out_rank0 - k) <= 1
            shifts.add(out_rank0 - k)
    assert shifts == {-1, 0, 1}


def test_jitter_never_decrements_top_rank() -> None:
    base = _ranked_vocab("b", 3)
    emu = _ranked_vocab("e", 5)
    transformer = _transformer(base, emu, obfuscate=True)
    outputs = {transformer.transform_words(["b0000"])[0] for _ in range(300)}
    assert outputs == {"e0000", "e0001"}


def test_jitter_past_end_falls_back_to_random() -> None:
    transformer = _transformer(obfuscate=True)
    for _ in range(200):
        assert transformer.transform_words(["fish"])[0] in {"canine", "pike", "feline"}


def test_jitter_disabled_is_exact() -> None:
    transformer = _transformer()
    assert {transformer.transform_words(["dog"])[0] for _ in range(50)} == {"canine"}
    assert transformer.stats.jitter_up == 0
    assert transformer.stats.jitter_down == 0


def test_fixed_seed_is_deterministic() -> None:
    queries = ["cat zzz dog", "fish qqq", "www cat"]
    out1 = [_transformer(seed=99, obfuscate=True).transform_query(q) for q in queries]
    out2 = [_transformer(seed=99, obfuscate=True).transform_query(q) for q in queries]
    assert out1 == out2


def test_run_writes_one_line_per_query() -> None:
    transformer = _transformer()
    written: list[str] = []
    stats = transformer.run(["cat dog", "", "  fish  "], written.append)
    assert written == ["feline canine\n", "\n", "pike\n"]
    assert stats.queries_in == 3
    assert stats.queries_out == 3
    assert stats.words_out == 3
    assert stats.average_query_length == pytest.approx(1.0)


def test_tokenizer_limits_are_enforced() -> None:
    tokenizer = QueryTokenizer(max_words=2, max_word_len=3)
    assert tokenizer.split("catalog dog fish") == ["cat", "dog"]
    assert QueryTokenizer().split(" a\tb  c\r") == ["a", "b", "c"]
    with pytest.raises(ValueError):
        QueryTokenizer(max_words=0)


def test_tokenizer_break_chars() -> None:
    assert QueryTokenizer().split("cat, dog") == ["cat,", "dog"]
    tokenizer = QueryTokenizer(break_chars=",;-]")
    assert tokenizer.split("cat, dog;fish-pike]") == ["cat", "dog", "fish", "pike"]


def test_break_chars_from_config() -> None:
    transformer = _transformer(token_break_chars=",")
    assert transformer.transform_query("cat,dog, fish") == "feline canine pike"


def test_truncated_word_is_looked_up() -> None:
    transformer = _transformer(max_word_len=3)
    assert transformer.transform_query("catalog") == "feline"


def test_random_policy_range_and_seed() -> None:
    p1 = RandomPolicy(5)
    p2 = RandomPolicy(5)
    draws = [p1.choose_random_rank0(7) for _ in range(500)]
    assert draws == [p2.choose_random_rank0(7) for _ in range(500)]
    assert set(draws) <= set(range(7))
    assert all(0.0 <= RandomPolicy(1).uniform() < 1.0 for _ in range(10))
    with pytest.raises(ValueError):
        p1.choose_random_rank0(0)


def test_time_seed() -> None:
    assert time_seed(1234567.9) == 34567
    assert 0 <= time_seed() < 100000
    assert 0 <= RandomPolicy().seed < 100000
