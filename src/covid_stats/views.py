"""Presentation helpers shared by the CLI and the Streamlit dashboard.

Nothing here touches the repository's state; functions take records or
aggregates and return plain values (strings, numbers, DataFrames).
"""
from __future__ import annotations

from datetime import date
from typing import Callable, Iterable, Sequence

import pandas as pd

from covid_stats.models import CovidRecord, Metric, UNKNOWN, WindowSummary

# Map tile labels → borough names as stored in the data.
LONDON_BOROUGHS = {
    "ENFI": "Enfield",
    "WALT": "Waltham Forest",
    "HRGY": "Haringey",
    "BARN": "Barnet",
    "BREN": "Brent",
    "CAMD": "Camden",
    "ISLI": "Islington",
    "HACK": "Hackney",
    "REDB": "Redbridge",
    "HRRW": "Harrow",
    "HAVE": "Havering",
    "HILL": "Hillingdon",
    "EALI": "Ealing",
    "KENS": "Kensington And Chelsea",
    "WSTM": "Westminster",
    "TOWH": "Tower Hamlets",
    "NEWH": "Newham",
    "BARK": "Barking And Dagenham",
    "HOUN": "Hounslow",
    "HAMM": "Hammersmith And Fulham",
    "WAND": "Wandsworth",
    "CITY": "City Of London",
    "GWCH": "Greenwich",
    "BEXL": "Bexley",
    "LEWS": "Lewisham",
    "STHW": "Southwark",
    "RICH": "Richmond Upon Thames",
    "MERT": "Merton",
    "LAMB": "Lambeth",
    "KING": "Kingston Upon Thames",
    "SUTT": "Sutton",
    "CROY": "Croydon",
    "BROM": "Bromley",
}

# (low, high, colour), inclusive bounds on cumulative deaths
DEATH_BANDS = (
    (343, 552, "#66FF99"),
    (553, 762, "#FFFF66"),
    (763, 972, "#FFCC66"),
    (973, 1182, "#FF6666"),
)
NO_BAND_COLOUR = "#CCCCCC"

# New deaths are tiny next to new cases on a shared axis.
DEATHS_DISPLAY_SCALE = 100

STAT_LABELS = (
    "Parks Mobility Average % Change:",
    "Transit Mobility Average % Change:",
    "Total Number of Total Deaths",
    "Total Cases Average:",
)

NO_DATA = "No data"

TABLE_COLUMNS = {
    "date": "Date",
    "new_cases": "New cases",
    "total_cases": "Total cases",
    "new_deaths": "New deaths",
    "total_deaths": "Total deaths",
    "retail_recreation": "Retail & recreation",
    "grocery_pharmacy": "Grocery & pharmacy",
    "parks": "Parks",
    "transit": "Transit stations",
    "workplaces": "Workplaces",
    "residential": "Residential",
}

SORT_KEYS: dict[str, Callable[[CovidRecord], object]] = {
    "Date": lambda r: r.date,
    "New cases": lambda r: r.new_cases,
    "Total cases": lambda r: r.total_cases,
    "New deaths": lambda r: r.new_deaths,
    "Google mobility data": lambda r: r.average_mobility,
}


def death_band_colour(total_deaths: int) -> str:
    """Return the map colour for a borough's cumulative deaths."""
    for low, high, colour in DEATH_BANDS:
        if low <= total_deaths <= high:
            return colour
    return NO_BAND_COLOUR


def scale_for_display(total: int, metric: Metric | str) -> int:
    """Apply the chart scaling for `metric` to a raw region total."""
    if Metric(metric) is Metric.NEW_DEATHS:
        return total * DEATHS_DISPLAY_SCALE
    return total


def sort_records(records: Iterable[CovidRecord], option: str | None) -> list[CovidRecord]:
    """Sort records for the borough table, descending by the chosen column.

    Unknown `option` values (including None) keep the given order.
    """
    out = list(records)
    key = SORT_KEYS.get(option or "")
    if key is not None:
        out.sort(key=key, reverse=True)
    return out


def format_summary(summary: WindowSummary) -> list[tuple[str, str]]:
    """Label/value pairs for the stats panel, means to two decimals."""
    if not summary.has_data:
        return [(NO_DATA, "")]

    def _fmt(value: float | None) -> str:
        return "n/a" if value is None else f"{value:.2f}"

    deaths = "n/a" if summary.sum_total_deaths is None else str(summary.sum_total_deaths)

    values = (
        _fmt(summary.mean_parks_mobility),
        _fmt(summary.mean_transit_mobility),
        deaths,
        _fmt(summary.mean_total_cases),
    )
    return list(zip(STAT_LABELS, values))


def date_range_problems(
    is_valid_date: Callable[[date], bool],
    from_date: date | None,
    to_date: date | None,
) -> list[str]:
    """Return user-facing complaints about a chosen date range.

    An empty list means the range can be applied (once both ends are set).
    """
    problems: list[str] = []
    if from_date is not None and not is_valid_date(from_date):
        problems.append("Please select a valid start date.")
    if to_date is not None and not is_valid_date(to_date):
        problems.append("Please select a valid end date.")
    if from_date is not None and to_date is not None and from_date > to_date:
        problems.append("Start date cannot be after End date.")
    return problems


def comparison_problems(region_a: str | None, region_b: str | None) -> list[str]:
    if region_a is None or region_b is None:
        return ["Select two boroughs to compare."]
    if region_a == region_b:
        return ["Selected boroughs cannot be the same."]
    return []


def records_to_frame(records: Sequence[CovidRecord]) -> pd.DataFrame:
    """Tabulate records with display headers; unreported cells become NA."""
    rows = [r.model_dump(include=set(TABLE_COLUMNS)) for r in records]
    pdf = pd.DataFrame(rows, columns=list(TABLE_COLUMNS))
    metric_cols = [c for c in TABLE_COLUMNS if c != "date"]
    pdf[metric_cols] = pdf[metric_cols].replace(UNKNOWN, pd.NA).astype("Int64")
    return pdf.rename(columns=TABLE_COLUMNS)
