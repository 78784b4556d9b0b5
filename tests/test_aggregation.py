from __future__ import annotations

import pytest

from covid_stats.aggregate.stats import (
    mean_parks_mobility,
    mean_total_cases,
    mean_transit_mobility,
    sum_total_deaths,
    summarize,
)
from covid_stats.models import UNKNOWN
from factories import make_record


def _window() -> list:
    return [
        make_record("2022-01-01", "Camden", total_deaths=10, total_cases=100, parks=-20, transit=-40),
        make_record("2022-01-01", "Brent", total_deaths=5, total_cases=50, parks=10, transit=-30),
        make_record("2022-01-02", "Camden", total_deaths=UNKNOWN, total_cases=UNKNOWN, parks=UNKNOWN, transit=-35),
    ]


def test_sum_total_deaths_skips_unknown() -> None:
    assert sum_total_deaths(_window()) == 15


def test_means_divide_by_known_count() -> None:
    window = _window()
    assert mean_total_cases(window) == pytest.approx(75.0)
    assert mean_parks_mobility(window) == pytest.approx(-5.0)
    assert mean_transit_mobility(window) == pytest.approx(-35.0)


def test_mean_with_nothing_known_is_none() -> None:
    window = [make_record("2022-01-01", parks=UNKNOWN)]
    assert mean_parks_mobility(window) is None


def test_summarize_empty_window_is_no_data() -> None:
    summary = summarize([])
    assert not summary.has_data
    assert summary.record_count == 0
    assert summary.mean_total_cases is None
    assert summary.sum_total_deaths is None


def test_summarize_populated_window() -> None:
    summary = summarize(_window())
    assert summary.has_data
    assert summary.record_count == 3
    assert summary.sum_total_deaths == 15
    assert summary.mean_transit_mobility == pytest.approx(-35.0)


def test_sum_with_nothing_known_is_none() -> None:
    window = [make_record("2022-01-01", total_deaths=UNKNOWN), make_record("2022-01-02", total_deaths=UNKNOWN)]
    assert sum_total_deaths(window) is None
    summary = summarize(window)
    assert summary.has_data
    assert summary.sum_total_deaths is None
    assert summary.mean_total_cases == pytest.approx(1.0)
