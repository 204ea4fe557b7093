"""Aggregation pipeline — cleaned events → ranked views and yearly series.

Node dependency graph:
    storm_events → [aggregate_by_event_type] → event_type_totals
    event_type_totals → [rank_event_types] → event_type_rankings
    event_type_rankings → [select_focus_event_types]
        → harmful_event_type, costly_event_type
    storm_events, harmful_event_type → [harmful_event_series]
    storm_events, costly_event_type  → [costly_event_series]

The two series nodes are independent of each other.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import (
    aggregate_by_event_type,
    event_type_time_series,
    rank_event_types,
    select_focus_event_types,
)


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the aggregation pipeline."""
    return pipeline(
        [
            node(
                func=aggregate_by_event_type,
                inputs="storm_events",
                outputs="event_type_totals",
                name="aggregate_by_event_type",
            ),
            node(
                func=rank_event_types,
                inputs=["event_type_totals", "params:reporting.top_n"],
                outputs="event_type_rankings",
                name="rank_event_types",
            ),
            node(
                func=select_focus_event_types,
                inputs=["event_type_rankings", "params:reporting"],
                outputs=["harmful_event_type", "costly_event_type"],
                name="select_focus_event_types",
            ),
            node(
                func=event_type_time_series,
                inputs=["storm_events", "harmful_event_type"],
                outputs="harmful_event_series",
                name="harmful_event_series",
            ),
            node(
                func=event_type_time_series,
                inputs=["storm_events", "costly_event_type"],
                outputs="costly_event_series",
                name="costly_event_series",
            ),
        ]
    )
