"""MongoDB helpers.

Centralizes creation of Mongo clients and the batched collection read used
when the daily records live in Mongo instead of a CSV file.
"""

from __future__ import annotations

import logging
from typing import Any

import certifi
import pandas as pd
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

log = logging.getLogger(__name__)


def get_client(uri: str) -> MongoClient:
    """Return a configured PyMongo MongoClient for the provided URI.

    TLS (with the certifi CA bundle) is only enabled for `mongodb+srv` URIs,
    so a plain local `mongodb://` server keeps working.

    Args:
        uri: MongoDB connection URI.

    Returns:
        Configured MongoClient instance.
    """
    options: dict[str, Any] = {
        "serverSelectionTimeoutMS": 30000,
        "socketTimeoutMS": 30000,
        "connectTimeoutMS": 30000,
    }
    if uri.startswith("mongodb+srv://"):
        options.update(tls=True, tlsCAFile=certifi.where())
    return MongoClient(uri, **options)


def get_db(
    client: MongoClient[dict[str, Any]],
    db_name: str,
) -> Database[dict[str, Any]]:
    """Return the named Database instance from a MongoClient."""
    return client[db_name]


def read_collection(
    collection: Collection[dict[str, Any]],
    batch_size: int = 50_000,
) -> pd.DataFrame:
    """Read a whole collection into a pandas DataFrame using batched reads.

    Documents come back in natural (insertion) order and `_id` is dropped.

    Args:
        collection: Source PyMongo collection.
        batch_size: Cursor batch size and DataFrame chunk size.

    Returns:
        DataFrame with one row per document, or an empty DataFrame.
    """
    cursor = collection.find({}, {"_id": False}).batch_size(batch_size)

    frames: list[pd.DataFrame] = []
    buffer: list[dict[str, Any]] = []

    for doc in cursor:
        buffer.append(doc)
        if len(buffer) >= batch_size:
            frames.append(pd.DataFrame(buffer))
            buffer.clear()

    if buffer:
        frames.append(pd.DataFrame(buffer))

    if not frames:
        return pd.DataFrame()

    pdf = pd.concat(frames, ignore_index=True)
    log.info("Read %d documents from %s", len(pdf), collection.name)
    return pdf
