"""Reporting pipeline — ranked views and yearly series → report.md.

Node dependency graph:
    event_type_rankings, harmful/costly event types and series
        → [render_report] → storm_report_path
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import render_report


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the reporting pipeline."""
    return pipeline(
        [
            node(
                func=render_report,
                inputs=[
                    "event_type_rankings",
                    "harmful_event_type",
                    "costly_event_type",
                    "harmful_event_series",
                    "costly_event_series",
                    "params:reporting",
                ],
                outputs="storm_report_path",
                name="render_report",
            ),
        ]
    )
