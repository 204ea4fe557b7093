"""Tests for the reporting helpers: layout, tables, charts, report."""

import pandas as pd
import pytest

from stormharm.pipelines.reporting.nodes import (
    Layout,
    PanelPlacement,
    compose_layout,
    plot_time_series,
    render_report,
    render_table,
)


@pytest.fixture()
def series():
    return pd.DataFrame(
        {
            "year": [1953, 1974, 2011],
            "fatalities": [519, 366, 587],
            "injuries": [5131, 6824, 6163],
            "property_damage_dollars": [1.0e6, 2.5e7, 9.8e9],
            "crop_damage_dollars": [0.0, 0.0, 1.2e6],
        }
    )


@pytest.fixture()
def ranking():
    return pd.DataFrame(
        {
            "event_type": ["TORNADO", "EXCESSIVE HEAT"],
            "fatalities": [5633, 1903],
            "event_count": [60652, 1678],
        }
    )


# ── Layout ──────────────────────────────────────────────────────
class TestComposeLayout:
    def test_fills_rows_by_column_count(self):
        layout = compose_layout(["a", "b", "c"], ncol=2)

        assert (layout.nrows, layout.ncols) == (2, 2)
        assert [(p.panel, p.row, p.col) for p in layout.placements] == [
            ("a", 0, 0),
            ("b", 0, 1),
            ("c", 1, 0),
        ]

    def test_default_column_count_is_square_root(self):
        layout = compose_layout(list("abcde"))

        assert (layout.nrows, layout.ncols) == (2, 3)

    def test_single_column(self):
        layout = compose_layout(["a", "b"], ncol=1)

        assert (layout.nrows, layout.ncols) == (2, 1)

    def test_more_columns_than_panels(self):
        layout = compose_layout(["a"], ncol=4)

        assert (layout.nrows, layout.ncols) == (1, 1)

    def test_explicit_grid_with_span(self):
        layout = compose_layout(["a", "b", "c"], layout=[[0, 0], [1, 2]])

        assert layout == Layout(
            nrows=2,
            ncols=2,
            placements=[
                PanelPlacement("a", row=0, col=0, rowspan=1, colspan=2),
                PanelPlacement("b", row=1, col=0),
                PanelPlacement("c", row=1, col=1),
            ],
        )

    def test_explicit_grid_with_empty_cell(self):
        layout = compose_layout(["a", "b"], layout=[[0, None], [0, 1]])

        assert layout.placements[0].rowspan == 2
        assert (layout.placements[1].row, layout.placements[1].col) == (1, 1)

    def test_no_panels(self):
        assert compose_layout([]) == Layout(nrows=0, ncols=0, placements=[])

    def test_is_pure(self):
        panels = ["a", "b"]

        assert compose_layout(panels, ncol=2) == compose_layout(panels, ncol=2)
        assert panels == ["a", "b"]

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"ncol": 2, "layout": [[0, 1]]}, "either"),
            ({"ncol": 0}, "at least 1"),
            ({"layout": [[0, 1], [1]]}, "equal-length"),
            ({"layout": [[0, 5]]}, "unknown panel"),
            ({"layout": [[0, 0]]}, "not placed"),
            ({"layout": [[0, 1], [1, 0]]}, "rectangle"),
        ],
    )
    def test_invalid_requests(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            compose_layout(["a", "b"], **kwargs)


# ── Tables ──────────────────────────────────────────────────────
class TestRenderTable:
    def test_thousands_separators_and_labels(self, ranking):
        table = render_table(ranking, ["event_type", "fatalities"])

        assert "| Event type" in table
        assert "Fatalities |" in table
        assert "5,633" in table
        assert "EXCESSIVE HEAT" in table

    def test_numeric_columns_right_aligned(self, ranking):
        table = render_table(ranking, ["event_type", "fatalities"])
        separator = table.splitlines()[1]

        assert separator.startswith("|:")
        assert separator.endswith(":|")

    def test_dollars_have_no_decimals(self, series):
        table = render_table(series, ["year", "property_damage_dollars"])

        assert "9,800,000,000" in table
        assert "." not in table

    def test_pipe_in_label_is_escaped(self, ranking):
        ranking.loc[0, "event_type"] = "HAIL|WIND"

        table = render_table(ranking, ["event_type", "fatalities"])

        assert r"HAIL\|WIND" in table
        cell_borders = [line.replace(r"\|", "").count("|") for line in table.splitlines()]
        assert set(cell_borders) == {3}


# ── Charts and report ───────────────────────────────────────────
class TestPlotTimeSeries:
    def test_writes_png(self, series, tmp_path):
        path = plot_time_series(
            series, ["fatalities", "injuries"], "TORNADO", tmp_path / "c" / "t.png"
        )

        assert path.exists()
        assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"

    def test_empty_series_still_renders(self, series, tmp_path):
        path = plot_time_series(
            series.iloc[0:0], ["fatalities"], "None", tmp_path / "empty.png", ncol=1
        )

        assert path.exists()


class TestRenderReport:
    def test_writes_report_with_tables_and_charts(self, ranking, series, tmp_path):
        rankings = {
            measure: ranking.assign(**{measure: ranking["fatalities"]})
            for measure in [
                "fatalities",
                "injuries",
                "property_damage_dollars",
                "crop_damage_dollars",
                "economic_damage_dollars",
            ]
        }

        report = render_report(
            rankings,
            "TORNADO",
            "FLOOD",
            series,
            series,
            {"output_dir": str(tmp_path / "out"), "top_n": 2, "chart_columns": 1},
        )

        text = (tmp_path / "out" / "report.md").read_text(encoding="utf-8")
        assert report == str(tmp_path / "out" / "report.md")
        assert "Top 2 event types by fatalities" in text
        assert "![TORNADO by year](harmful_event_by_year.png)" in text
        assert "![FLOOD by year](costly_event_by_year.png)" in text
        assert (tmp_path / "out" / "harmful_event_by_year.png").exists()
        assert (tmp_path / "out" / "costly_event_by_year.png").exists()
