"""Pydantic models for daily borough records and window aggregates.

`CovidRecord` is the single data entity flowing through the engine. Fields
that the source did not report hold the `UNKNOWN` sentinel rather than
`None`, so every record has the same fully-populated integer schema.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

# -1 is a legal mobility change, so the marker sits below every domain.
UNKNOWN: Final[int] = -2_147_483_648

COUNT_FIELDS: Final[tuple[str, ...]] = (
    "new_cases",
    "total_cases",
    "new_deaths",
    "total_deaths",
)

MOBILITY_FIELDS: Final[tuple[str, ...]] = (
    "retail_recreation",
    "grocery_pharmacy",
    "parks",
    "transit",
    "workplaces",
    "residential",
)

METRIC_FIELDS: Final[tuple[str, ...]] = COUNT_FIELDS + MOBILITY_FIELDS


class Metric(str, Enum):
    """Metrics that can be totalled per region for the comparison chart."""

    NEW_CASES = "new_cases"
    NEW_DEATHS = "new_deaths"


class CovidRecord(BaseModel):
    """One borough's observation for one day.

    Attributes:
        date: Calendar date of the observation.
        region: Borough name exactly as stored in the source.
        new_cases: Cases reported that day.
        total_cases: Cumulative cases.
        new_deaths: Deaths reported that day.
        total_deaths: Cumulative deaths.
        retail_recreation: Mobility change from baseline, percent.
        grocery_pharmacy: Mobility change from baseline, percent.
        parks: Mobility change from baseline, percent.
        transit: Mobility change from baseline, percent.
        workplaces: Mobility change from baseline, percent.
        residential: Mobility change from baseline, percent.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    date: dt.date
    region: str = Field(..., min_length=1)
    new_cases: int = UNKNOWN
    total_cases: int = UNKNOWN
    new_deaths: int = UNKNOWN
    total_deaths: int = UNKNOWN
    retail_recreation: int = UNKNOWN
    grocery_pharmacy: int = UNKNOWN
    parks: int = UNKNOWN
    transit: int = UNKNOWN
    workplaces: int = UNKNOWN
    residential: int = UNKNOWN

    @field_validator(*COUNT_FIELDS)
    @classmethod
    def _count_in_domain(cls, value: int) -> int:
        if value < 0 and value != UNKNOWN:
            raise ValueError(f"count must be >= 0 or UNKNOWN, got {value}")
        return value

    def is_known(self, field: str) -> bool:
        """Return True when `field` holds a reported value."""
        return getattr(self, field) != UNKNOWN

    @property
    def average_mobility(self) -> int:
        """Mean of the reported mobility fields, truncated toward zero."""
        known = [getattr(self, f) for f in MOBILITY_FIELDS if self.is_known(f)]
        if not known:
            return UNKNOWN
        return int(sum(known) / len(known))


class WindowSummary(BaseModel):
    """Aggregates over the records of one date window.

    Aggregates are `None` when no record in the window reports the field;
    a window without records has `record_count == 0` and `has_data` false.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    record_count: int = Field(..., ge=0)
    sum_total_deaths: int | None = None
    mean_total_cases: float | None = None
    mean_parks_mobility: float | None = None
    mean_transit_mobility: float | None = None

    @property
    def has_data(self) -> bool:
        return self.record_count > 0
