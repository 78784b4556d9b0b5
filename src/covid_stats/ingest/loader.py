"""Parse raw tabular sources into validated `CovidRecord`s.

Module notes:
- Column headers are matched case-insensitively against `COLUMN_ALIASES`.
- `date` and `region` are required; any metric column may be absent.
- Missing or non-numeric metric cells become the `UNKNOWN` sentinel.
- A fractional metric cell is malformed and raises `LoadError`.
- Row order of the source is preserved.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable
from typing import cast, Any as TypingAny

import pandas as pd
import dask.dataframe as dd
from pydantic import ValidationError
from pymongo.collection import Collection

from covid_stats.db import read_collection
from covid_stats.errors import LoadError
from covid_stats.models import CovidRecord, METRIC_FIELDS, UNKNOWN

log = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("date", "region")

COLUMN_ALIASES = {
    "date": "date",
    "region": "region",
    "borough": "region",
    "area_name": "region",
    "new_cases": "new_cases",
    "total_cases": "total_cases",
    "new_deaths": "new_deaths",
    "total_deaths": "total_deaths",
    "retail_recreation": "retail_recreation",
    "retail_and_recreation_change_from_baseline": "retail_recreation",
    "retail_and_recreation_percent_change_from_baseline": "retail_recreation",
    "grocery_pharmacy": "grocery_pharmacy",
    "grocery_and_pharmacy_change_from_baseline": "grocery_pharmacy",
    "grocery_and_pharmacy_percent_change_from_baseline": "grocery_pharmacy",
    "parks": "parks",
    "parks_change_from_baseline": "parks",
    "parks_percent_change_from_baseline": "parks",
    "transit": "transit",
    "transit_stations_change_from_baseline": "transit",
    "transit_stations_percent_change_from_baseline": "transit",
    "workplaces": "workplaces",
    "workplaces_change_from_baseline": "workplaces",
    "workplaces_percent_change_from_baseline": "workplaces",
    "residential": "residential",
    "residential_change_from_baseline": "residential",
    "residential_percent_change_from_baseline": "residential",
}

OUTPUT_COLUMNS = list(REQUIRED_COLUMNS) + list(METRIC_FIELDS)

_META = pd.DataFrame(
    {
        "date": pd.Series(dtype="datetime64[ns]"),
        "region": pd.Series(dtype="object"),
        **{col: pd.Series(dtype="float64") for col in METRIC_FIELDS},
    }
)


def _canonical(column: object) -> str:
    key = str(column).strip().lower()
    return COLUMN_ALIASES.get(key, key)


def _check_columns(columns: Iterable[object]) -> None:
    """Raise `LoadError` if a required column is missing after aliasing."""
    present = {_canonical(c) for c in columns}
    missing = [c for c in REQUIRED_COLUMNS if c not in present]
    if missing:
        raise LoadError(f"source is missing required column(s): {', '.join(missing)}")


def normalize_frame(pdf: pd.DataFrame) -> pd.DataFrame:
    """Rename, coerce and complete one partition.

    Args:
        pdf: Raw partition with source headers.

    Returns:
        DataFrame with exactly `OUTPUT_COLUMNS`: `date` as datetime64
        (NaT where unparseable), `region` as stripped text and every metric
        as float64 with NaN for gaps. Integer conversion happens in
        `frame_to_records`, which can name the offending row.
    """
    pdf = pdf.rename(columns=_canonical)
    # first occurrence wins if two aliases map onto the same name
    pdf = pdf.loc[:, ~pdf.columns.duplicated()].copy()

    pdf["date"] = pd.to_datetime(pdf["date"], errors="coerce")
    pdf["region"] = pdf["region"].fillna("").astype(str).str.strip()

    for col in METRIC_FIELDS:
        if col not in pdf.columns:
            pdf[col] = float("nan")
            continue
        pdf[col] = pd.to_numeric(pdf[col], errors="coerce").astype("float64")

    return pdf[OUTPUT_COLUMNS]


def frame_to_records(pdf: pd.DataFrame) -> list[CovidRecord]:
    """Validate a normalised frame row by row into `CovidRecord`s.

    Args:
        pdf: Output of `normalize_frame`.

    Returns:
        Records in row order.

    Raises:
        LoadError: on an unparseable date, an empty region, a fractional
            metric or a value that fails model validation. The message names
            the 1-based data row.
    """
    records: list[CovidRecord] = []

    for row_no, rec in enumerate(pdf.to_dict(orient="records"), start=1):
        if pd.isna(rec["date"]):
            raise LoadError(f"row {row_no}: date is missing or unparseable")
        if not rec["region"]:
            raise LoadError(f"row {row_no}: region is empty")

        fields: dict[str, Any] = {}
        for col in METRIC_FIELDS:
            value = rec[col]
            if pd.isna(value):
                fields[col] = UNKNOWN
            elif value % 1 != 0:
                raise LoadError(f"row {row_no}: {col} is not a whole number ({value})")
            else:
                fields[col] = int(value)

        try:
            records.append(
                CovidRecord(date=rec["date"].date(), region=rec["region"], **fields)
            )
        except ValidationError as e:
            raise LoadError(f"row {row_no}: {e}") from e

    return records


def load_frame(pdf: pd.DataFrame) -> list[CovidRecord]:
    """Load records from an in-memory pandas DataFrame."""
    _check_columns(pdf.columns)
    return frame_to_records(normalize_frame(pdf))


def load_csv(path: Path | str) -> list[CovidRecord]:
    """Read a CSV file of daily borough records.

    The file is read as text with Dask (one partition per block) and each
    partition is normalised with `normalize_frame` before the result is
    materialised and validated.

    Args:
        path: CSV file path.

    Returns:
        Records in file order.

    Raises:
        LoadError: if the file is missing, empty, unparseable or malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise LoadError(f"data file not found: {path}")

    log.info("Reading %s", path)
    dd_mod = cast(TypingAny, dd)
    try:
        ddf = dd_mod.read_csv(str(path), dtype=str, blocksize=None)
        _check_columns(ddf.columns)
        pdf = ddf.map_partitions(normalize_frame, meta=_META).compute()
    except LoadError:
        raise
    except (OSError, ValueError, pd.errors.ParserError) as e:
        # EmptyDataError is a ValueError
        raise LoadError(f"cannot read {path}: {e}") from e

    records = frame_to_records(pdf.reset_index(drop=True))
    log.info("Loaded %d records from %s", len(records), path.name)
    return records


def load_collection(collection: Collection[dict[str, Any]]) -> list[CovidRecord]:
    """Load records from a MongoDB collection with one document per row."""
    pdf = read_collection(collection)
    if pdf.empty:
        raise LoadError(f"collection {collection.name} is empty")
    records = load_frame(pdf)
    log.info("Loaded %d records from collection %s", len(records), collection.name)
    return records
