from __future__ import annotations

import logging
from pathlib import Path

from covid_stats.logging_config import configure_logging


def test_reconfiguring_replaces_handlers() -> None:
    configure_logging(None)
    configure_logging(None)
    root = logging.getLogger()
    streams = [h for h in root.handlers if type(h) is logging.StreamHandler]
    assert len(streams) == 1
    assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)


def test_configure_logging_writes_file_and_quiets_pymongo(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "covid.log"
    configure_logging(log_path, logging.DEBUG)
    logging.getLogger("covid_stats.test").info("hello")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello" in log_path.read_text(encoding="utf-8")
    assert logging.getLogger("pymongo").level == logging.WARNING
    assert logging.getLogger().level == logging.DEBUG
    configure_logging(None)
