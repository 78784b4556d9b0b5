"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the data source and logging options from the environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

@dataclass(frozen=True)
class Settings:
    """Container for engine configuration read from the environment.

    Attributes:
        data_path: CSV file holding the daily borough records.
        mongo_uri: Optional MongoDB URI; when set the CLI can load from Mongo.
        mongo_db: MongoDB database name.
        mongo_collection: Collection holding one document per record.
        log_path: Optional file that receives a copy of the log output.
        log_level: Numeric logging level.
    """
    data_path: Path
    mongo_uri: str | None
    mongo_db: str
    mongo_collection: str
    log_path: Path | None
    log_level: int



def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `LOG_LEVEL` is not a recognised logging level name.
    """
    data_path = Path(os.getenv("COVID_DATA_PATH", "data/covid_london.csv"))
    mongo_uri = os.getenv("MONGO_URI", "").strip() or None
    mongo_db = os.getenv("MONGO_DB", "covid")
    mongo_collection = os.getenv("MONGO_COLLECTION", "covid_records")
    log_path_raw = os.getenv("LOG_PATH", "").strip()

    level_name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise RuntimeError(
            f"LOG_LEVEL={level_name!r} is not a logging level "
            "(use DEBUG, INFO, WARNING or ERROR)."
        )

    return Settings(
        data_path=data_path,
        mongo_uri=mongo_uri,
        mongo_db=mongo_db,
        mongo_collection=mongo_collection,
        log_path=Path(log_path_raw) if log_path_raw else None,
        log_level=log_level,
    )
