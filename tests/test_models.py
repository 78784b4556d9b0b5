from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from covid_stats.models import CovidRecord, UNKNOWN, WindowSummary
from factories import make_record


def test_missing_metrics_default_to_unknown() -> None:
    rec = CovidRecord(date=date(2022, 1, 1), region="Camden")
    assert rec.total_deaths == UNKNOWN
    assert not rec.is_known("parks")


def test_negative_mobility_is_a_real_value() -> None:
    rec = make_record("2022-01-01", parks=-1)
    assert rec.is_known("parks")
    assert rec.parks == -1


def test_negative_count_rejected() -> None:
    with pytest.raises(ValidationError):
        make_record("2022-01-01", new_cases=-5)


def test_record_is_frozen() -> None:
    rec = make_record("2022-01-01")
    with pytest.raises(ValidationError):
        rec.total_deaths = 10  # type: ignore[misc]


def test_empty_region_rejected() -> None:
    with pytest.raises(ValidationError):
        CovidRecord(date=date(2022, 1, 1), region="")


def test_average_mobility_ignores_unknown() -> None:
    rec = make_record(
        "2022-01-01",
        retail_recreation=-10,
        grocery_pharmacy=UNKNOWN,
        parks=5,
        transit=UNKNOWN,
        workplaces=-20,
        residential=UNKNOWN,
    )
    # (-10 + 5 - 20) / 3 truncated toward zero
    assert rec.average_mobility == -8


def test_average_mobility_all_unknown() -> None:
    rec = CovidRecord(date=date(2022, 1, 1), region="Camden")
    assert rec.average_mobility == UNKNOWN


def test_window_summary_has_data() -> None:
    assert not WindowSummary(record_count=0).has_data
    assert WindowSummary(record_count=3).has_data
