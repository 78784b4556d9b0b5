from __future__ import annotations

from pathlib import Path

import pytest

from covid_stats.cli import main


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "covid.csv"
    path.write_text(
        "date,borough,parks,transit,new_cases,total_cases,new_deaths,total_deaths\n"
        "2022-01-01,Camden,10,-20,5,100,1,400\n"
        "2022-01-01,Brent,20,-30,7,200,2,600\n"
        "2022-01-02,Camden,12,-22,6,106,0,\n"
        "2022-01-02,Brent,22,-32,8,208,1,601\n",
        encoding="utf-8",
    )
    return path


def test_dates(data_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--data", str(data_file), "dates"]) == 0
    assert "4 records, 2 regions, 2022-01-01 .. 2022-01-02" in capsys.readouterr().out


def test_summary(data_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--data", str(data_file), "summary", "--from-date", "2022-01-01", "--to-date", "2022-01-02"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "Total Number of Total Deaths 1601" in out
    assert "Parks Mobility Average % Change: 16.00" in out


def test_summary_rejects_reversed_range(data_file: Path) -> None:
    rc = main(["--data", str(data_file), "summary", "--from-date", "2022-01-02", "--to-date", "2022-01-01"])
    assert rc == 1


def test_latest_uses_newest_known(data_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--data", str(data_file), "latest"]) == 0
    out = capsys.readouterr().out
    assert "Camden" in out and "400" in out and "#66FF99" in out
    assert "601" in out


def test_compare_scales_deaths(data_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main([
        "--data", str(data_file), "compare", "Camden", "Brent",
        "--from-date", "2022-01-01", "--to-date", "2022-01-02", "--metric", "new_deaths",
    ])
    assert rc == 0
    out = capsys.readouterr().out
    assert "(chart value 100)" in out
    assert "(chart value 300)" in out


def test_compare_same_region(data_file: Path) -> None:
    rc = main([
        "--data", str(data_file), "compare", "Camden", "Camden",
        "--from-date", "2022-01-01", "--to-date", "2022-01-02",
    ])
    assert rc == 1


def test_region_table(data_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--data", str(data_file), "region", "Brent", "--sort", "Date"]) == 0
    out = capsys.readouterr().out
    assert out.index("2022-01-02") < out.index("2022-01-01")


def test_missing_file_exits_2(tmp_path: Path) -> None:
    assert main(["--data", str(tmp_path / "none.csv"), "dates"]) == 2


def test_region_with_one_bound_exits_2(data_file: Path) -> None:
    assert main(["--data", str(data_file), "region", "Brent", "--from-date", "2022-01-01"]) == 2
