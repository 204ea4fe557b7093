"""Node functions for the reporting pipeline.

Turns the ranked views and yearly series from the aggregation pipeline
into a Markdown report with tables and two line charts.

Flow:
    rankings → Markdown tables
    yearly series → compose_layout → matplotlib panels → PNG
    tables + charts + narrative → report.md
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import matplotlib
import matplotlib.pyplot as plt
import pandas as pd

matplotlib.use("Agg")  # non-interactive backend for CI / headless runs

logger = logging.getLogger(__name__)

# ── Display names for report columns ────────────────────────────
COLUMN_LABELS: dict[str, str] = {
    "event_type": "Event type",
    "event_count": "Events",
    "year": "Year",
    "fatalities": "Fatalities",
    "injuries": "Injuries",
    "property_damage_dollars": "Property damage ($)",
    "crop_damage_dollars": "Crop damage ($)",
    "economic_damage_dollars": "Total damage ($)",
}

HEALTH_MEASURES: list[str] = ["fatalities", "injuries"]
ECONOMIC_MEASURES: list[str] = ["property_damage_dollars", "crop_damage_dollars"]


# ── Layout ──────────────────────────────────────────────────────
@dataclass(frozen=True)
class PanelPlacement:
    """Where one panel sits in a chart grid (0-based, spans in cells)."""

    panel: Any
    row: int
    col: int
    rowspan: int = 1
    colspan: int = 1


@dataclass(frozen=True)
class Layout:
    nrows: int
    ncols: int
    placements: list[PanelPlacement]


def compose_layout(
    panels: Sequence[Any],
    ncol: int | None = None,
    layout: Sequence[Sequence[int | None]] | None = None,
) -> Layout:
    """Arrange panels on a grid, either by column count or explicitly.

    With ``ncol`` the panels fill the grid row by row.  Without either
    argument ``ncol`` defaults to ceil(sqrt(len(panels))).  An explicit
    ``layout`` is a list of rows of panel indexes (None for an empty
    cell); a panel repeated over a rectangle of cells spans it.

    Examples:
        compose_layout(["a", "b", "c"], ncol=2)
            → 2×2 grid, a at (0,0), b at (0,1), c at (1,0)
        compose_layout(["a", "b", "c"], layout=[[0, 0], [1, 2]])
            → a spans the top row, b and c share the bottom

    Raises:
        ValueError: Both arguments given, ncol < 1, a ragged or
            non-rectangular layout, or a panel index that is out of
            range or missing from the layout.
    """
    if ncol is not None and layout is not None:
        raise ValueError("Pass either ncol or layout, not both")
    if not panels:
        return Layout(nrows=0, ncols=0, placements=[])

    if layout is None:
        ncols = ncol if ncol is not None else math.ceil(math.sqrt(len(panels)))
        if ncols < 1:
            raise ValueError(f"ncol must be at least 1, got {ncols}")
        ncols = min(ncols, len(panels))
        placements = [
            PanelPlacement(panel=panel, row=i // ncols, col=i % ncols)
            for i, panel in enumerate(panels)
        ]
        return Layout(
            nrows=math.ceil(len(panels) / ncols), ncols=ncols, placements=placements
        )

    return _compose_explicit(panels, layout)


def _compose_explicit(
    panels: Sequence[Any],
    layout: Sequence[Sequence[int | None]],
) -> Layout:
    nrows = len(layout)
    ncols = len(layout[0]) if nrows else 0
    if ncols == 0 or any(len(row) != ncols for row in layout):
        raise ValueError("layout must be a non-empty list of equal-length rows")

    cells: dict[int, list[tuple[int, int]]] = {}
    for r, row in enumerate(layout):
        for c, index in enumerate(row):
            if index is None:
                continue
            if not 0 <= index < len(panels):
                raise ValueError(f"layout references unknown panel {index}")
            cells.setdefault(index, []).append((r, c))

    missing = [i for i in range(len(panels)) if i not in cells]
    if missing:
        raise ValueError(f"Panels {missing} are not placed in the layout")

    placements = []
    for index in range(len(panels)):
        rows = [r for r, _ in cells[index]]
        cols = [c for _, c in cells[index]]
        top, left = min(rows), min(cols)
        rowspan, colspan = max(rows) - top + 1, max(cols) - left + 1
        if rowspan * colspan != len(cells[index]):
            raise ValueError(f"Panel {index} does not cover a rectangle")
        placements.append(
            PanelPlacement(
                panel=panels[index],
                row=top,
                col=left,
                rowspan=rowspan,
                colspan=colspan,
            )
        )
    return Layout(nrows=nrows, ncols=ncols, placements=placements)


# ── Tables ──────────────────────────────────────────────────────
def render_table(view: pd.DataFrame, columns: Sequence[str]) -> str:
    """Render ``columns`` of ``view`` as a Markdown table.

    Numeric columns are right-aligned with thousands separators and no
    decimals (years are printed as-is); text columns are left-aligned
    with ``|`` escaped so a label cannot split a cell.
    """
    table = view[list(columns)].copy()
    aligns = []
    for col in columns:
        if col == "year":
            table[col] = table[col].astype(str)
            aligns.append("right")
        elif pd.api.types.is_numeric_dtype(table[col]):
            table[col] = table[col].map(lambda v: f"{v:,.0f}")
            aligns.append("right")
        else:
            table[col] = table[col].astype(str).str.replace("|", r"\|", regex=False)
            aligns.append("left")

    table = table.rename(columns=COLUMN_LABELS)
    return table.to_markdown(index=False, colalign=aligns, disable_numparse=True)


# ── Charts ──────────────────────────────────────────────────────
def plot_time_series(
    series: pd.DataFrame,
    measures: Sequence[str],
    title: str,
    path: Path,
    ncol: int | None = None,
) -> Path:
    """Draw one line panel per measure against year and save as PNG."""
    layout = compose_layout(list(measures), ncol=ncol)

    fig = plt.figure(figsize=(5 * max(layout.ncols, 1), 3.5 * max(layout.nrows, 1)))
    if layout.placements:
        grid = fig.add_gridspec(layout.nrows, layout.ncols)
        for placement in layout.placements:
            measure = placement.panel
            ax = fig.add_subplot(
                grid[
                    placement.row : placement.row + placement.rowspan,
                    placement.col : placement.col + placement.colspan,
                ]
            )
            ax.plot(series["year"], series[measure], linewidth=1.5)
            ax.set_xlabel("Year")
            ax.set_ylabel(COLUMN_LABELS.get(measure, measure))
            ax.set_title(COLUMN_LABELS.get(measure, measure))
            ax.grid(alpha=0.3)

    fig.suptitle(title)
    fig.tight_layout()
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=150)
    plt.close(fig)

    logger.info("Chart saved: %s (%d panels, %d years)", path, len(measures), len(series))
    return path


# ── Node ────────────────────────────────────────────────────────
def render_report(
    event_type_rankings: dict[str, pd.DataFrame],
    harmful_event_type: str | None,
    costly_event_type: str | None,
    harmful_event_series: pd.DataFrame,
    costly_event_series: pd.DataFrame,
    reporting: dict[str, Any],
) -> str:
    """Write report.md plus its two chart PNGs into ``reporting.output_dir``.

    Returns:
        Path of the written report, as a string.
    """
    output_dir = Path(reporting["output_dir"])
    output_dir.mkdir(parents=True, exist_ok=True)
    top_n = reporting["top_n"]
    chart_columns = reporting.get("chart_columns")

    harmful_chart = plot_time_series(
        harmful_event_series,
        HEALTH_MEASURES,
        f"{harmful_event_type}: fatalities and injuries per year",
        output_dir / "harmful_event_by_year.png",
        ncol=chart_columns,
    )
    costly_chart = plot_time_series(
        costly_event_series,
        ECONOMIC_MEASURES,
        f"{costly_event_type}: property and crop damage per year",
        output_dir / "costly_event_by_year.png",
        ncol=chart_columns,
    )

    def _ranking(measure: str) -> str:
        return render_table(
            event_type_rankings[measure],
            ["event_type", measure, "event_count"],
        )

    sections = [
        "# Health and economic impact of severe weather events in the U.S.",
        "## Synopsis",
        (
            "This report explores the U.S. storm events database (1950–2011) "
            "and ranks event types by the harm they do to population health "
            "(fatalities, injuries) and by their economic cost (property and "
            "crop damage in dollars)."
        ),
        "## Data processing",
        (
            "Damage is recorded as a magnitude plus a unit code. The codes "
            "k/K, m/M and B are read as thousands, millions and billions. "
            "Every other code, including the digits 0–9, leaves the "
            "magnitude unchanged: cross-checking those rows against their "
            "remarks does not reveal a consistent scale. Event dates come "
            "from the date part of BGN_DATE; rows whose date cannot be "
            "parsed are left out of the yearly charts."
        ),
        "## Results",
        "### Events most harmful to population health",
        f"Top {top_n} event types by fatalities:",
        _ranking("fatalities"),
        f"Top {top_n} event types by injuries:",
        _ranking("injuries"),
        f"![{harmful_event_type} by year]({harmful_chart.name})",
        "### Events with the greatest economic consequences",
        f"Top {top_n} event types by property damage:",
        _ranking("property_damage_dollars"),
        f"Top {top_n} event types by crop damage:",
        _ranking("crop_damage_dollars"),
        f"Top {top_n} event types by total damage:",
        _ranking("economic_damage_dollars"),
        f"![{costly_event_type} by year]({costly_chart.name})",
        "## Limitations",
        (
            "Event-type labels are used exactly as recorded. Variants such "
            'as "TSTM WIND" and "THUNDERSTORM WIND" are counted separately, '
            "which understates the totals of some event types."
        ),
    ]

    report_path = output_dir / "report.md"
    report_path.write_text("\n\n".join(sections) + "\n", encoding="utf-8")

    logger.info("Report written to %s", report_path)
    return str(report_path)
