"""Utilities to configure consistent logging for the CLI and dashboard."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Third-party loggers that are too chatty at INFO.
NOISY_LOGGERS = ("pymongo", "fsspec", "asyncio")


def configure_logging(log_path: Path | None = None, level: int = logging.INFO) -> None:
    """Configure root logging handlers and formatting.

    Replaces any handlers installed by an earlier call so the CLI and the
    dashboard can both call this on start-up.

    Args:
        log_path: Optional path to a file where logs will be written.
        level: Logging level for the `covid_stats` loggers (defaults to INFO).
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=handlers,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
