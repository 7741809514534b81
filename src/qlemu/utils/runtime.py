"""Runtime logging setup."""

from __future__ import annotations

import logging


def setup_logging(name: str = "qlemu", verbose: bool = False) -> logging.Logger:
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if verbose:
        logging.getLogger("qlemu").setLevel(logging.DEBUG)
    return logging.getLogger(name)
