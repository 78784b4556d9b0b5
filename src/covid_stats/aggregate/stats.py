"""Window statistics.

Every aggregate here skips the `UNKNOWN` sentinel: sums add reported values
only and means divide by the number of reported values. A sum or mean with
nothing reported is `None`, never 0 and never a division by zero.
"""
from __future__ import annotations

from typing import Sequence

from covid_stats.models import CovidRecord, WindowSummary


def _known(records: Sequence[CovidRecord], field: str) -> list[int]:
    return [getattr(r, field) for r in records if r.is_known(field)]


def sum_known(records: Sequence[CovidRecord], field: str) -> int | None:
    """Return the sum of the reported values of `field`, or None."""
    values = _known(records, field)
    if not values:
        return None
    return sum(values)


def mean_known(records: Sequence[CovidRecord], field: str) -> float | None:
    """Return the mean of the reported values of `field`, or None."""
    values = _known(records, field)
    if not values:
        return None
    return sum(values) / len(values)


def sum_total_deaths(records: Sequence[CovidRecord]) -> int | None:
    """Sum of cumulative deaths across the records."""
    return sum_known(records, "total_deaths")


def mean_total_cases(records: Sequence[CovidRecord]) -> float | None:
    return mean_known(records, "total_cases")


def mean_parks_mobility(records: Sequence[CovidRecord]) -> float | None:
    return mean_known(records, "parks")


def mean_transit_mobility(records: Sequence[CovidRecord]) -> float | None:
    return mean_known(records, "transit")


def summarize(records: Sequence[CovidRecord]) -> WindowSummary:
    """Compute the four stats-panel aggregates over a window.

    Args:
        records: Records of one window, in any order.

    Returns:
        `WindowSummary`; `has_data` is False when `records` is empty.
    """
    if not records:
        return WindowSummary(record_count=0)

    return WindowSummary(
        record_count=len(records),
        sum_total_deaths=sum_total_deaths(records),
        mean_total_cases=mean_total_cases(records),
        mean_parks_mobility=mean_parks_mobility(records),
        mean_transit_mobility=mean_transit_mobility(records),
    )
