"""Newest-known-value lookups.

Daily feeds often leave the latest rows blank for cumulative fields, so "the
current total" has to skip back past unreported days. Two implementations
share the same semantics:

- `latest_known_value` works on any unordered sequence by repeatedly taking
  the newest record that has not been ruled out yet.
- `RegionIndex` sorts each region's records once and answers by scanning
  backwards, stopping at the first reported value.

Among records sharing the newest date, both prefer the one that appears
first in the input.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Sequence

from covid_stats.errors import NoKnownValueError
from covid_stats.models import CovidRecord, UNKNOWN

log = logging.getLogger(__name__)


def latest_known_value(records: Sequence[CovidRecord], field: str) -> int:
    """Return `field` from the newest record that reports it.

    Args:
        records: Records for one region, in any order; duplicates allowed.
        field: Name of an integer field on `CovidRecord`.

    Returns:
        The reported value.

    Raises:
        NoKnownValueError: if `records` is empty or every record holds the
            sentinel for `field`.
    """
    if not records:
        raise NoKnownValueError(f"no records to search for {field}")

    excluded: set[int] = set()
    while len(excluded) < len(records):
        newest: int | None = None
        for idx, record in enumerate(records):
            if idx in excluded:
                continue
            if newest is None or record.date > records[newest].date:
                newest = idx

        # no candidate left
        if newest is None:
            break

        value = getattr(records[newest], field)
        if value != UNKNOWN:
            return value
        log.debug("Skipping %s on %s: %s not reported",
                  records[newest].region, records[newest].date, field)
        excluded.add(newest)

    raise NoKnownValueError(
        f"none of the {len(records)} records report {field}"
    )


def latest_known_total_deaths(records: Sequence[CovidRecord]) -> int:
    """Cumulative deaths from the newest record that reports them."""
    return latest_known_value(records, "total_deaths")


class RegionIndex:
    """Per-region record lists sorted by date, built once after load."""

    def __init__(self, records: Iterable[CovidRecord]) -> None:
        positioned: dict[str, list[tuple[int, CovidRecord]]] = defaultdict(list)
        for pos, record in enumerate(records):
            positioned[record.region].append((pos, record))

        # newest first; ties keep input order
        self._by_region: dict[str, list[CovidRecord]] = {
            region: [r for _, r in sorted(items, key=lambda p: (-p[1].date.toordinal(), p[0]))]
            for region, items in positioned.items()
        }

    def regions(self) -> list[str]:
        return list(self._by_region)

    def latest_known(self, region: str, field: str) -> int:
        """Return the newest reported `field` for `region`.

        Raises:
            NoKnownValueError: if the region is unknown or never reports `field`.
        """
        for record in self._by_region.get(region, ()):
            value = getattr(record, field)
            if value != UNKNOWN:
                return value
        raise NoKnownValueError(f"{region!r} never reports {field}")
