"""End-to-end emulation of a query log from file stems."""

from __future__ import annotations

import logging
import time
from typing import Optional

from qlemu.data.loaders import check_inputs, iter_queries
from qlemu.data.vocab import EmulatedVocabIndex, VocabTable
from qlemu.emulate.config import EmulatorConfig
from qlemu.emulate.policy import RandomPolicy
from qlemu.emulate.transformer import QueryTransformer
from qlemu.eval.report import RunStats, save_report
from qlemu.utils.io import open_text
from qlemu.utils.progress import ProgressLogger


logger = logging.getLogger("qlemu.pipeline")


def emulate_query_log(
    config: EmulatorConfig,
    policy: Optional[RandomPolicy] = None,
    progress: Optional[ProgressLogger] = None,
) -> RunStats:
    """Read ``<base>.qlog`` and write ``<emu>.qlog`` using both vocabularies.

    Raises ``MissingInputError`` before touching any file if a stem or input
    file is missing, and ``VocabFormatError``/``VocabOrderError`` if a
    vocabulary cannot be loaded.
    """
    started = time.perf_counter()
    paths = check_inputs(config.base_stem, config.emu_stem)
    if policy is None:
        policy = RandomPolicy(config.seed)
    logger.info("seed=%s obfuscate=%s preserve_no_exists=%s", policy.seed, config.obfuscate, config.preserve_no_exists)

    base = VocabTable.from_path(
        paths.base_vocab,
        on_format_error=config.on_format_error,
        check_sorted=config.check_sorted,
    )
    emu = EmulatedVocabIndex.from_path(paths.emu_vocab)
    transformer = QueryTransformer(base, emu, config, policy)
    transformer.stats.setup_seconds = time.perf_counter() - started
    logger.info("setup_complete elapsed_sec=%.3f", transformer.stats.setup_seconds)

    with open_text(paths.base_qlog) as in_fp, open_text(paths.emu_qlog, "w") as out_fp:
        stats = transformer.run(iter_queries(in_fp), out_fp.write, progress=progress)

    summary = {
        "queries_in": stats.queries_in,
        "queries_out": stats.queries_out,
        "ave_query_length": round(stats.average_query_length, 2),
        "setup_sec": round(stats.setup_seconds, 1),
        "generation_sec": round(stats.generation_seconds, 1),
        "msec_per_query": round(stats.msec_per_query, 4),
        "out": str(paths.emu_qlog),
    }
    if progress is not None:
        progress.log(summary)
    logger.info("done %s", " ".join(f"{k}={v}" for k, v in summary.items()))

    if config.report_path:
        report = stats.to_dict()
        report.update({"seed": policy.seed, "out": str(paths.emu_qlog)})
        save_report(report, config.report_path)
        logger.info("report_written path=%s", config.report_path)
    return stats
