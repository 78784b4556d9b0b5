from __future__ import annotations

from datetime import date
from typing import Any

from covid_stats.models import CovidRecord


def make_record(day: str, region: str = "Borough1", value: int = 1, **overrides: Any) -> CovidRecord:
    """Record for `region` on `day` with every metric set to `value`, then `overrides` applied."""
    fields: dict[str, Any] = {
        "new_cases": value,
        "total_cases": value,
        "new_deaths": value,
        "total_deaths": value,
        "retail_recreation": value,
        "grocery_pharmacy": value,
        "parks": value,
        "transit": value,
        "workplaces": value,
        "residential": value,
    }
    fields.update(overrides)
    return CovidRecord(date=date.fromisoformat(day), region=region, **fields)
