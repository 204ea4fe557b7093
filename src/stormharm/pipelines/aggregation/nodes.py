"""Event-level → event-type aggregation nodes.

Architecture:
    aggregate → one groupby on the raw event-type label
    rank      → top-N views per measure (stable, descending)
    series    → per-year totals for one exact event-type label

Event-type labels are deliberately not canonicalised: "TORNADO",
"Tornado" and "TORNADOES" are three separate groups.
"""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

# ── Measures an aggregate row can be ranked by ───────────────────
MEASURES: tuple[str, ...] = (
    "fatalities",
    "injuries",
    "property_damage_dollars",
    "crop_damage_dollars",
    "economic_damage_dollars",
)

_SERIES_COLUMNS: list[str] = [
    "year",
    "fatalities",
    "injuries",
    "property_damage_dollars",
    "crop_damage_dollars",
]


# ── Node 1: Event-type totals ────────────────────────────────────
def aggregate_by_event_type(storm_events: pd.DataFrame) -> pd.DataFrame:
    """Sum the four impact measures per distinct event-type label.

    Groups appear in the order their label is first seen in the data,
    which is what makes ties in the ranked views deterministic.

    Args:
        storm_events: Event-level DataFrame from data_processing.

    Returns:
        One row per event_type with event_count, fatalities, injuries,
        property/crop damage dollars and their sum.
    """
    totals = storm_events.groupby(
        "event_type", sort=False, dropna=False, as_index=False
    ).agg(
        event_count=("fatalities", "size"),
        fatalities=("fatalities", "sum"),
        injuries=("injuries", "sum"),
        property_damage_dollars=("property_damage_dollars", "sum"),
        crop_damage_dollars=("crop_damage_dollars", "sum"),
    )
    totals["economic_damage_dollars"] = (
        totals["property_damage_dollars"] + totals["crop_damage_dollars"]
    )

    int_cols = ["event_count", "fatalities", "injuries"]
    totals[int_cols] = totals[int_cols].astype("int64")

    logger.info(
        "Aggregated %s events into %s event types",
        f"{len(storm_events):,}",
        f"{len(totals):,}",
    )
    return totals


# ── Ranked views ─────────────────────────────────────────────────
def top_n_by_measure(
    event_type_totals: pd.DataFrame,
    measure: str,
    n: int,
) -> pd.DataFrame:
    """Return the ``n`` event types with the highest ``measure``.

    The sort is stable, so event types with equal totals keep their
    first-appearance order.

    Raises:
        ValueError: Unknown measure or negative n.
    """
    if measure not in MEASURES:
        raise ValueError(f"Unknown measure {measure!r}; expected one of {MEASURES}")
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")

    return (
        event_type_totals.sort_values(measure, ascending=False, kind="stable")
        .head(n)
        .reset_index(drop=True)
    )


def rank_event_types(
    event_type_totals: pd.DataFrame,
    top_n: int,
) -> dict[str, pd.DataFrame]:
    """Build the top-N view for every measure in MEASURES."""
    rankings = {
        measure: top_n_by_measure(event_type_totals, measure, top_n)
        for measure in MEASURES
    }
    for measure, ranked in rankings.items():
        if len(ranked) > 0:
            logger.info(
                "Top event type by %s: %s (%s)",
                measure,
                ranked["event_type"].iloc[0],
                f"{ranked[measure].iloc[0]:,.0f}",
            )
    return rankings


def select_focus_event_types(
    rankings: dict[str, pd.DataFrame],
    reporting: dict[str, Any],
) -> tuple[str | None, str | None]:
    """Pick the event types the two charts follow.

    A label configured in ``reporting.harmful_event_type`` or
    ``reporting.costly_event_type`` wins.  Otherwise the leader by
    fatalities (most harmful) and by economic damage (costliest) is
    used.  Both are None when there is nothing to rank.
    """

    def _leader(measure: str) -> str | None:
        ranked = rankings[measure]
        return ranked["event_type"].iloc[0] if len(ranked) > 0 else None

    harmful = reporting.get("harmful_event_type") or _leader("fatalities")
    costly = reporting.get("costly_event_type") or _leader("economic_damage_dollars")

    logger.info("Most harmful event type: %s | costliest: %s", harmful, costly)
    return harmful, costly


# ── Per-year series ──────────────────────────────────────────────
def event_type_time_series(
    storm_events: pd.DataFrame,
    event_type: str | None,
) -> pd.DataFrame:
    """Per-year totals for one event-type label (exact match).

    Rows without an event_date are left out.  Years are ascending and
    only years with at least one matching event are present.

    Args:
        storm_events: Event-level DataFrame from data_processing.
        event_type: Exact label to keep, e.g. "TORNADO".

    Returns:
        DataFrame with year, fatalities, injuries and damage columns.
    """
    mask = (storm_events["event_type"] == event_type) & storm_events[
        "event_date"
    ].notna()
    matches = storm_events[mask]
    n_undated = int((storm_events["event_type"] == event_type).sum() - mask.sum())

    series = (
        matches.assign(year=matches["event_date"].dt.year.astype("int64"))
        .groupby("year", as_index=False)
        .agg(
            fatalities=("fatalities", "sum"),
            injuries=("injuries", "sum"),
            property_damage_dollars=("property_damage_dollars", "sum"),
            crop_damage_dollars=("crop_damage_dollars", "sum"),
        )
    )[_SERIES_COLUMNS]

    if n_undated > 0:
        logger.warning(
            "%s: %s events without a date left out of the yearly series",
            event_type,
            f"{n_undated:,}",
        )
    logger.info(
        "Yearly series for %s: %d years from %s events",
        event_type,
        len(series),
        f"{len(matches):,}",
    )
    return series
