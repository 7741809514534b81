"""Base-vocabulary rank resolution."""

from __future__ import annotations

from typing import Optional

from qlemu.data.vocab import VocabFormatError, VocabTable


def resolve_base_rank(word: str, table: VocabTable) -> Optional[int]:
    """Return the 0-origin frequency rank of ``word`` in ``table``.

    ``None`` means the word is not in the table. A matching record that
    carries no rank is a table-format error, not a miss.
    """
    record = table.find(word)
    if record is None:
        return None
    if record.rank is None:
        raise VocabFormatError(f"vocab record for {record.word!r} has no rank field")
    return record.rank - 1
