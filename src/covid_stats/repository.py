"""In-memory repository of daily borough records.

`CovidRepository` owns the canonical record set, the selected date window and
the current region selection. It is constructed explicitly and passed to
whatever needs it; there is no shared global instance.

State rules:
- The record set is loaded once and never mutated afterwards.
- Setting a date bound does not touch the window. The window only changes
  when `recompute_window` runs, so it can be stale in between.
- `selection` holds the result of the latest `filter_by_region` call only.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from covid_stats.aggregate.lookup import RegionIndex, latest_known_total_deaths
from covid_stats.aggregate.stats import summarize, sum_known
from covid_stats.errors import (
    IncompleteRangeError,
    LoadError,
    NoKnownValueError,
    NotLoadedError,
    WindowNotSetError,
)
from covid_stats.ingest.loader import load_csv, load_frame
from covid_stats.models import CovidRecord, Metric, WindowSummary

log = logging.getLogger(__name__)

Source = Union[str, Path, pd.DataFrame, Iterable[CovidRecord]]


@dataclass(frozen=True)
class RegionSelection:
    """Result of the most recent region filter.

    Attributes:
        region: Region name that was filtered on.
        use_window: Whether the window subset (True) or the full set was scanned.
        records: Matching records in their original order.
    """
    region: str
    use_window: bool
    records: tuple[CovidRecord, ...]


def _as_date(day: date | None) -> date | None:
    """Drop the time part of a datetime bound; reject anything else.

    Raises:
        TypeError: if `day` is neither None nor a date.
    """
    if day is None:
        return None
    if isinstance(day, datetime):
        return day.date()
    if not isinstance(day, date):
        raise TypeError(f"date bound must be a datetime.date, got {type(day).__name__}")
    return day


class CovidRepository:
    """Filter and aggregate queries over a loaded record set."""

    def __init__(self) -> None:
        self._records: tuple[CovidRecord, ...] | None = None
        self._dates: frozenset[date] = frozenset()
        self._index: RegionIndex | None = None
        self._from_date: date | None = None
        self._to_date: date | None = None
        self._window: list[CovidRecord] | None = None
        self.selection: RegionSelection | None = None

    @classmethod
    def from_source(cls, source: Source) -> CovidRepository:
        """Construct a repository and load it in one step."""
        repo = cls()
        repo.load(source)
        return repo

    # --------------------------------------------------
    # Loading
    # --------------------------------------------------
    def load(self, source: Source) -> int:
        """Load the canonical record set.

        Args:
            source: CSV path, pandas DataFrame, or an iterable of records
                already produced by a loader.

        Returns:
            Number of records loaded.

        Raises:
            LoadError: if the source cannot be read or is malformed, or if the
                repository was already loaded. A failed load leaves the
                repository unloaded.
        """
        if self._records is not None:
            raise LoadError("repository is already loaded")

        if isinstance(source, (str, Path)):
            records = load_csv(source)
        elif isinstance(source, pd.DataFrame):
            records = load_frame(source)
        else:
            records = list(source)
            bad = [r for r in records if not isinstance(r, CovidRecord)]
            if bad:
                raise LoadError(f"expected CovidRecord items, got {type(bad[0]).__name__}")

        self._records = tuple(records)
        self._dates = frozenset(r.date for r in records)
        self._index = RegionIndex(records)
        log.info(
            "Repository loaded: %d records, %d regions, %d distinct dates",
            len(records),
            len(self._index.regions()),
            len(self._dates),
        )
        return len(records)

    @property
    def loaded(self) -> bool:
        return self._records is not None

    def _require_records(self) -> tuple[CovidRecord, ...]:
        if self._records is None:
            raise NotLoadedError("no data loaded; call load() first")
        return self._records

    @property
    def records(self) -> tuple[CovidRecord, ...]:
        """The canonical record set, in load order."""
        return self._require_records()

    def regions(self) -> list[str]:
        """Distinct region names in order of first appearance."""
        self._require_records()
        assert self._index is not None
        return self._index.regions()

    def date_bounds(self) -> tuple[date, date] | None:
        """Earliest and latest dates in the data, or None if it is empty."""
        self._require_records()
        if not self._dates:
            return None
        return min(self._dates), max(self._dates)

    def is_valid_date(self, day: date) -> bool:
        """Return True iff at least one record is dated `day`."""
        self._require_records()
        return day in self._dates

    # --------------------------------------------------
    # Window
    # --------------------------------------------------
    @property
    def from_date(self) -> date | None:
        return self._from_date

    @property
    def to_date(self) -> date | None:
        return self._to_date

    def set_from_date(self, day: date | None) -> None:
        """Store the start bound. No validation; see `is_valid_date`."""
        self._from_date = _as_date(day)

    def set_to_date(self, day: date | None) -> None:
        """Store the end bound. No validation; see `is_valid_date`."""
        self._to_date = _as_date(day)

    def recompute_window(self) -> list[CovidRecord]:
        """Rebuild the window from the current bounds, inclusive on both ends.

        A start bound after the end bound yields an empty window.

        Returns:
            A copy of the new window subset, in load order.

        Raises:
            NotLoadedError: if nothing is loaded.
            IncompleteRangeError: if either bound is unset.
        """
        records = self._require_records()
        if self._from_date is None or self._to_date is None:
            raise IncompleteRangeError(
                f"both bounds are required (from={self._from_date}, to={self._to_date})"
            )

        start, end = self._from_date, self._to_date
        self._window = [r for r in records if start <= r.date <= end]
        log.debug("Window %s..%s holds %d records", start, end, len(self._window))
        return list(self._window)

    @property
    def window(self) -> list[CovidRecord]:
        """The subset from the last `recompute_window` call.

        Raises:
            WindowNotSetError: if the window was never computed.
        """
        self._require_records()
        if self._window is None:
            raise WindowNotSetError("window has not been computed; call recompute_window()")
        return list(self._window)

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------
    def filter_by_region(self, region: str, use_window: bool = False) -> list[CovidRecord]:
        """Return the records whose region equals `region` exactly.

        Also replaces `selection` with this result.

        Args:
            region: Case-sensitive region name.
            use_window: Scan the window subset instead of the full set.

        Returns:
            Matching records in original order; empty if none match.

        Raises:
            WindowNotSetError: if `use_window` is set before any recompute.
        """
        scope = self.window if use_window else self.records
        matches = [r for r in scope if r.region == region]
        self.selection = RegionSelection(region=region, use_window=use_window, records=tuple(matches))
        return matches

    def latest_known_total_deaths(self, records: Iterable[CovidRecord]) -> int:
        """Newest reported cumulative deaths among `records`.

        Raises:
            NoKnownValueError: if `records` is empty or reports no deaths.
        """
        return latest_known_total_deaths(list(records))

    def latest_total_deaths_by_region(self) -> dict[str, int]:
        """Newest reported cumulative deaths for every region.

        Regions that never report deaths are left out.
        """
        self._require_records()
        assert self._index is not None
        out: dict[str, int] = {}
        for region in self._index.regions():
            try:
                out[region] = self._index.latest_known(region, "total_deaths")
            except NoKnownValueError:
                continue
        return out

    def summarize_window(self) -> WindowSummary:
        """Stats-panel aggregates over the current window."""
        return summarize(self.window)

    def region_total(self, region: str, metric: Metric | str) -> int:
        """Sum `metric` over the window records of one region.

        Raw counts only; display scaling is applied by the caller. A region
        with nothing reported in the window charts as 0.

        Raises:
            WindowNotSetError: if the window was never computed.
            ValueError: if `metric` is not a `Metric`.
        """
        metric = Metric(metric)
        matches = [r for r in self.window if r.region == region]
        total = sum_known(matches, metric.value)
        return 0 if total is None else total
