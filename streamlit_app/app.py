from __future__ import annotations

import altair as alt
import pandas as pd
import streamlit as st

from covid_stats.config import get_settings
from covid_stats.errors import CovidStatsError
from covid_stats.logging_config import configure_logging
from covid_stats.models import Metric
from covid_stats.repository import CovidRepository
from covid_stats.views import (
    LONDON_BOROUGHS,
    SORT_KEYS,
    comparison_problems,
    date_range_problems,
    death_band_colour,
    format_summary,
    records_to_frame,
    scale_for_display,
    sort_records,
)

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="London COVID-19 Data Viewer", layout="wide")
st.title("London COVID-19 Data Viewer")


# =====================================================
# Repository (one per server process, read-only records)
# =====================================================
@st.cache_resource
def load_records() -> CovidRepository:
    """Load the canonical record set once for the whole server process."""
    s = get_settings()
    configure_logging(s.log_path, s.log_level)
    return CovidRepository.from_source(s.data_path)


try:
    shared = load_records()
except CovidStatsError as exc:  # pragma: no cover - runtime failure handling
    st.error(f"Unable to load data: {exc}")
    st.stop()

# Window and selection are per-session state.
if "repo" not in st.session_state:
    st.session_state["repo"] = CovidRepository.from_source(shared.records)
repo: CovidRepository = st.session_state["repo"]

bounds = repo.date_bounds()
if bounds is None:
    st.warning("The data file holds no records.")
    st.stop()

# =====================================================
# Date range
# =====================================================
c1, c2 = st.columns(2)
from_date = c1.date_input("From", value=None, min_value=bounds[0], max_value=bounds[1])
to_date = c2.date_input("To", value=None, min_value=bounds[0], max_value=bounds[1])

problems = date_range_problems(repo.is_valid_date, from_date, to_date)
for p in problems:
    st.error(p)

if problems or from_date is None or to_date is None:
    st.info("Pick a valid start and end date to explore the data.")
    st.stop()

repo.set_from_date(from_date)
repo.set_to_date(to_date)
repo.recompute_window()

tab_map, tab_stats, tab_compare = st.tabs(["Map", "Statistics", "Compare"])

# =====================================================
# Map: newest known total deaths per borough
# =====================================================
with tab_map:
    latest = repo.latest_total_deaths_by_region()
    tiles = pd.DataFrame(
        [
            {
                "code": code,
                "borough": name,
                "total_deaths": latest.get(name),
                "colour": death_band_colour(latest.get(name, -1)),
            }
            for code, name in LONDON_BOROUGHS.items()
        ]
    )
    st.dataframe(
        tiles.style.apply(
            lambda row: [f"background-color: {row['colour']}"] * len(row), axis=1
        ),
        hide_index=True,
        use_container_width=True,
    )

    code = st.selectbox("Borough details", list(LONDON_BOROUGHS), format_func=LONDON_BOROUGHS.get)
    sort_option = st.selectbox("Sort by", [None, *SORT_KEYS])
    records = repo.filter_by_region(LONDON_BOROUGHS[code], use_window=True)
    if records:
        st.dataframe(records_to_frame(sort_records(records, sort_option)), hide_index=True)
    else:
        st.write("No records for this borough in the selected range.")

# =====================================================
# Statistics
# =====================================================
with tab_stats:
    for label, value in format_summary(repo.summarize_window()):
        st.metric(label, value)

# =====================================================
# Compare two boroughs
# =====================================================
with tab_compare:
    names = sorted(LONDON_BOROUGHS.values())
    b1, b2 = st.columns(2)
    region_a = b1.selectbox("Borough 1", names, index=None)
    region_b = b2.selectbox("Borough 2", names, index=None)
    metrics = st.multiselect(
        "Series",
        [m.value for m in Metric],
        default=[Metric.NEW_CASES.value],
        format_func=lambda m: m.replace("_", " ").capitalize(),
    )

    issues = comparison_problems(region_a, region_b)
    if issues:
        st.info(issues[0])
    elif metrics:
        rows = [
            {
                "borough": region,
                "series": metric,
                "value": scale_for_display(repo.region_total(region, metric), metric),
            }
            for metric in metrics
            for region in (region_a, region_b)
        ]
        chart = (
            alt.Chart(pd.DataFrame(rows))
            .mark_bar()
            .encode(
                x=alt.X("borough:N", title=None),
                xOffset="series:N",
                y=alt.Y("value:Q", title="Total in range (deaths x100)"),
                color="series:N",
                tooltip=["borough", "series", "value"],
            )
            .properties(title=f"{region_a} vs {region_b}")
        )
        st.altair_chart(chart, use_container_width=True)
