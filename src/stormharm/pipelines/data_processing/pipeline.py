"""Raw → cleaned pipeline for the U.S. storm events dataset.

This pipeline reads the raw storm data file, applies four sequential
transformation nodes, and outputs one row per event with a calendar
date and damage in actual dollars, ready for aggregation.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import (
    load_raw_events,
    normalize_damage,
    parse_event_dates,
    select_report_columns,
)


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the data_processing pipeline.

    Node chain:
        raw CSV → load → select columns → parse dates → normalise damage
    """
    return pipeline(
        [
            node(
                func=load_raw_events,
                inputs="params:raw_data_path",
                outputs="storm_data_raw",
                name="load_raw_events",
            ),
            node(
                func=select_report_columns,
                inputs="storm_data_raw",
                outputs="storm_data_selected",
                name="select_report_columns",
            ),
            node(
                func=parse_event_dates,
                inputs="storm_data_selected",
                outputs="storm_data_dated",
                name="parse_event_dates",
            ),
            node(
                func=normalize_damage,
                inputs="storm_data_dated",
                outputs="storm_events",
                name="normalize_damage",
            ),
        ]
    )
