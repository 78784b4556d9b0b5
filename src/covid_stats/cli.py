"""Command-line interface for querying the borough records.

Provides subcommands: `dates`, `summary`, `region`, `latest` and `compare`.
Each command is implemented as a `cmd_*` function that accepts the loaded
repository and an argparse namespace.
"""
from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path

from covid_stats.config import get_settings
from covid_stats.db import get_client, get_db
from covid_stats.errors import CovidStatsError
from covid_stats.ingest.loader import load_collection
from covid_stats.logging_config import configure_logging
from covid_stats.models import Metric
from covid_stats.repository import CovidRepository
from covid_stats.views import (
    SORT_KEYS,
    comparison_problems,
    date_range_problems,
    death_band_colour,
    format_summary,
    records_to_frame,
    scale_for_display,
    sort_records,
)

log = logging.getLogger(__name__)


# --------------------------------------------------
# Helpers
# --------------------------------------------------
def _open_repository(args: argparse.Namespace) -> CovidRepository:
    """Load the repository from Mongo (`--mongo`) or from a CSV file."""
    s = get_settings()
    repo = CovidRepository()

    if args.mongo:
        if s.mongo_uri is None:
            raise CovidStatsError("--mongo given but MONGO_URI is not set")
        client = get_client(s.mongo_uri)
        try:
            repo.load(load_collection(get_db(client, s.mongo_db)[s.mongo_collection]))
        finally:
            client.close()
        return repo

    repo.load(args.data or s.data_path)
    return repo


def _apply_window(repo: CovidRepository, args: argparse.Namespace) -> bool:
    """Set and recompute the window; return False if the range was rejected."""
    problems = date_range_problems(repo.is_valid_date, args.from_date, args.to_date)
    if problems:
        for p in problems:
            log.error(p)
        return False
    repo.set_from_date(args.from_date)
    repo.set_to_date(args.to_date)
    repo.recompute_window()
    return True


# --------------------------------------------------
# Commands
# --------------------------------------------------
def cmd_dates(repo: CovidRepository, _: argparse.Namespace) -> int:
    """Print the date coverage of the data."""
    bounds = repo.date_bounds()
    if bounds is None:
        print("No records loaded.")
        return 0
    print(f"{len(repo.records)} records, {len(repo.regions())} regions, {bounds[0]} .. {bounds[1]}")
    return 0


def cmd_summary(repo: CovidRepository, args: argparse.Namespace) -> int:
    """Print the stats-panel aggregates for a date window."""
    if not _apply_window(repo, args):
        return 1
    for label, value in format_summary(repo.summarize_window()):
        print(f"{label} {value}".rstrip())
    return 0


def cmd_region(repo: CovidRepository, args: argparse.Namespace) -> int:
    """Print one region's records, optionally limited to a window."""
    use_window = args.from_date is not None or args.to_date is not None
    if use_window and not _apply_window(repo, args):
        return 1

    records = repo.filter_by_region(args.name, use_window=use_window)
    if not records:
        print(f"No records for {args.name!r}.")
        return 0
    print(records_to_frame(sort_records(records, args.sort)).to_string(index=False))
    return 0


def cmd_latest(repo: CovidRepository, _: argparse.Namespace) -> int:
    """Print each region's newest reported cumulative deaths and map colour."""
    for region, deaths in sorted(repo.latest_total_deaths_by_region().items()):
        print(f"{region:<28} {deaths:>6}  {death_band_colour(deaths)}")
    return 0


def cmd_compare(repo: CovidRepository, args: argparse.Namespace) -> int:
    """Print the chart totals of a metric for two regions."""
    problems = comparison_problems(args.region_a, args.region_b)
    if problems:
        for p in problems:
            log.error(p)
        return 1
    if not _apply_window(repo, args):
        return 1

    for region in (args.region_a, args.region_b):
        raw = repo.region_total(region, args.metric)
        print(f"{region:<28} {raw:>8}  (chart value {scale_for_display(raw, args.metric)})")
    return 0


COMMANDS = {
    "dates": cmd_dates,
    "summary": cmd_summary,
    "region": cmd_region,
    "latest": cmd_latest,
    "compare": cmd_compare,
}


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="covid-stats")
    p.add_argument("--data", type=Path, default=None, help="CSV file (overrides COVID_DATA_PATH)")
    p.add_argument("--mongo", action="store_true", help="load from MONGO_URI instead of a CSV")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("dates")

    p_summary = sub.add_parser("summary")
    p_summary.add_argument("--from-date", type=date.fromisoformat, required=True)
    p_summary.add_argument("--to-date", type=date.fromisoformat, required=True)

    p_region = sub.add_parser("region")
    p_region.add_argument("name")
    p_region.add_argument("--from-date", type=date.fromisoformat, default=None)
    p_region.add_argument("--to-date", type=date.fromisoformat, default=None)
    p_region.add_argument("--sort", choices=sorted(SORT_KEYS), default=None)

    sub.add_parser("latest")

    p_compare = sub.add_parser("compare")
    p_compare.add_argument("region_a")
    p_compare.add_argument("region_b")
    p_compare.add_argument("--from-date", type=date.fromisoformat, required=True)
    p_compare.add_argument("--to-date", type=date.fromisoformat, required=True)
    p_compare.add_argument(
        "--metric",
        choices=[m.value for m in Metric],
        default=Metric.NEW_CASES.value,
    )

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    args = build_parser().parse_args(argv)

    s = get_settings()
    configure_logging(s.log_path, s.log_level)

    try:
        repo = _open_repository(args)
        return COMMANDS[args.cmd](repo, args)
    except CovidStatsError as e:
        log.error("%s: %s", type(e).__name__, e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
