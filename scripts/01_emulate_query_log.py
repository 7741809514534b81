"""Emulate a query log for another corpus by frequency-rank substitution."""

from __future__ import annotations

import argparse
import sys

from qlemu.data.loaders import MissingInputError
from qlemu.data.vocab import QleError
from qlemu.emulate.config import EmulatorConfig
from qlemu.emulate.pipeline import emulate_query_log
from qlemu.utils.progress import ProgressLogger
from qlemu.utils.runtime import setup_logging


USAGE_NOTE = (
    "<base-stem>_vocab.tsv, <base-stem>.qlog and <emu-stem>_vocab_by_freq.tsv "
    "must all exist. <emu-stem>.qlog will be created."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, epilog=USAGE_NOTE)
    parser.add_argument("--base-stem", default=None)
    parser.add_argument("--emu-stem", default=None)
    parser.add_argument("--config", default=None, help="YAML file with EmulatorConfig fields")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--verbose", action="store_true", default=None)
    parser.add_argument("--obfuscate", action="store_true", default=None, help="jitter ranks by +/-1")
    parser.add_argument(
        "--preserve-no-exists",
        action="store_true",
        default=None,
        help="emit noexist<N> placeholders for words missing from the base vocab",
    )
    parser.add_argument("--placeholder-prefix", default=None)
    parser.add_argument("--max-words", type=int, default=None)
    parser.add_argument("--max-word-len", type=int, default=None)
    parser.add_argument(
        "--token-break-chars",
        default=None,
        help="extra characters that split query words, e.g. ',;'",
    )
    parser.add_argument(
        "--lenient",
        dest="on_format_error",
        action="store_const",
        const="warn",
        default=None,
        help="warn about malformed vocab records instead of aborting",
    )
    parser.add_argument("--no-check-sorted", dest="check_sorted", action="store_const", const=False, default=None)
    parser.add_argument("--report", dest="report_path", default=None, help="write a JSON run report here")
    parser.add_argument("--progress-log", default=None, help="mirror progress lines to this JSONL file")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    try:
        config = EmulatorConfig.from_yaml(args.config) if args.config else EmulatorConfig()
        config = config.with_overrides(
            base_stem=args.base_stem,
            emu_stem=args.emu_stem,
            seed=args.seed,
            verbose=args.verbose,
            obfuscate=args.obfuscate,
            preserve_no_exists=args.preserve_no_exists,
            placeholder_prefix=args.placeholder_prefix,
            max_words=args.max_words,
            max_word_len=args.max_word_len,
            token_break_chars=args.token_break_chars,
            on_format_error=args.on_format_error,
            check_sorted=args.check_sorted,
            report_path=args.report_path,
        )
    except (OSError, ValueError) as exc:
        parser.print_usage(sys.stderr)
        print(f"\n -- {exc} --\n", file=sys.stderr)
        sys.exit(1)

    logger = setup_logging("qlemu.emulate_query_log", verbose=config.verbose)
    try:
        with ProgressLogger(args.progress_log) as progress:
            emulate_query_log(config, progress=progress)
    except MissingInputError as exc:
        parser.print_help(sys.stderr)
        print(f"\n -- {exc} --\n", file=sys.stderr)
        sys.exit(1)
    except QleError as exc:
        logger.error("emulation_failed error=%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
