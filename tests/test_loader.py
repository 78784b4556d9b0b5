from __future__ import annotations

from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from covid_stats.errors import LoadError
from covid_stats.ingest.loader import load_csv, load_frame
from covid_stats.models import UNKNOWN

HEADER = (
    "date,area_name,area_code,"
    "retail_and_recreation_percent_change_from_baseline,"
    "grocery_and_pharmacy_percent_change_from_baseline,"
    "parks_percent_change_from_baseline,"
    "transit_stations_percent_change_from_baseline,"
    "workplaces_percent_change_from_baseline,"
    "residential_percent_change_from_baseline,"
    "new_cases,total_cases,new_deaths,total_deaths"
)


def _write(tmp_path: Path, *lines: str) -> Path:
    path = tmp_path / "covid.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_load_csv_maps_columns_and_keeps_order(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        HEADER,
        "2022-01-02,Camden,E09000007,-20,-5,30,-40,-35,10,120,5000,1,300",
        "2022-01-01,Brent,E09000005,-21,-6,31,-41,-36,11,130,6000,2,400",
    )
    records = load_csv(path)
    assert [r.region for r in records] == ["Camden", "Brent"]
    first = records[0]
    assert first.date == date(2022, 1, 2)
    assert first.retail_recreation == -20
    assert first.parks == 30
    assert first.transit == -40
    assert first.residential == 10
    assert first.new_cases == 120
    assert first.total_deaths == 300


def test_load_csv_blank_cells_become_unknown(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        HEADER,
        "2022-01-02,Camden,E09000007,,,,,,,120,5000,,",
    )
    (rec,) = load_csv(path)
    assert rec.new_cases == 120
    assert rec.parks == UNKNOWN
    assert rec.new_deaths == UNKNOWN
    assert rec.total_deaths == UNKNOWN


def test_load_csv_missing_metric_columns(tmp_path: Path) -> None:
    path = _write(tmp_path, "Date,Borough,new_cases", "2022-01-02, Camden ,7")
    (rec,) = load_csv(path)
    assert rec.region == "Camden"
    assert rec.new_cases == 7
    assert rec.total_cases == UNKNOWN


def test_load_csv_missing_file(tmp_path: Path) -> None:
    with pytest.raises(LoadError):
        load_csv(tmp_path / "nope.csv")


def test_load_csv_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(LoadError):
        load_csv(path)


def test_load_csv_without_region_column(tmp_path: Path) -> None:
    path = _write(tmp_path, "date,new_cases", "2022-01-02,7")
    with pytest.raises(LoadError, match="region"):
        load_csv(path)


def test_load_csv_bad_date_names_row(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        HEADER,
        "2022-01-02,Camden,E09000007,1,1,1,1,1,1,1,1,1,1",
        "not-a-date,Camden,E09000007,1,1,1,1,1,1,1,1,1,1",
    )
    with pytest.raises(LoadError, match="row 2"):
        load_csv(path)


def test_load_frame_rejects_negative_counts() -> None:
    pdf = pd.DataFrame([{"date": "2022-01-01", "region": "Camden", "new_cases": -3}])
    with pytest.raises(LoadError, match="row 1"):
        load_frame(pdf)


def test_load_frame_rejects_empty_region() -> None:
    pdf = pd.DataFrame([{"date": "2022-01-01", "region": None, "new_cases": 3}])
    with pytest.raises(LoadError, match="region is empty"):
        load_frame(pdf)


def test_load_csv_rejects_fractional_metric(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "date,borough,new_cases,parks",
        "2022-01-01,Camden,2,-3",
        "2022-01-02,Camden,1.9,-0.7",
    )
    with pytest.raises(LoadError, match="row 2: new_cases is not a whole number"):
        load_csv(path)


def test_load_frame_accepts_whole_floats() -> None:
    pdf = pd.DataFrame([{"date": "2022-01-01", "region": "Camden", "new_cases": 4.0, "parks": -12.0}])
    (rec,) = load_frame(pdf)
    assert rec.new_cases == 4
    assert rec.parks == -12
