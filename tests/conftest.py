"""Shared fixtures: tiny storm data files and frames built in memory."""

from pathlib import Path

import pandas as pd
import pytest

RAW_HEADER = [
    "STATE__",
    "BGN_DATE",
    "BGN_TIME",
    "EVTYPE",
    "FATALITIES",
    "INJURIES",
    "PROPDMG",
    "PROPDMGEXP",
    "CROPDMG",
    "CROPDMGEXP",
    "REMARKS",
]


def make_raw_frame(rows: list[dict]) -> pd.DataFrame:
    """Raw-shaped frame: every column text, blanks as empty strings."""
    defaults = {
        "STATE__": "1",
        "BGN_DATE": "4/18/1950 0:00:00",
        "BGN_TIME": "0130",
        "EVTYPE": "TORNADO",
        "FATALITIES": "0",
        "INJURIES": "0",
        "PROPDMG": "0",
        "PROPDMGEXP": "",
        "CROPDMG": "0",
        "CROPDMGEXP": "",
        "REMARKS": "",
    }
    return pd.DataFrame([{**defaults, **row} for row in rows], columns=RAW_HEADER)


@pytest.fixture()
def raw_events() -> pd.DataFrame:
    """Six events covering date, unit-code and label edge cases."""
    return make_raw_frame(
        [
            {"EVTYPE": "TORNADO", "BGN_DATE": "4/28/2011 0:00:00", "FATALITIES": "5",
             "INJURIES": "20", "PROPDMG": "2.5", "PROPDMGEXP": "M"},
            {"EVTYPE": "TORNADO", "BGN_DATE": "5/22/2011 0:00:00", "FATALITIES": "3",
             "INJURIES": "10", "PROPDMG": "25", "PROPDMGEXP": "K"},
            {"EVTYPE": "Tornado", "BGN_DATE": "6/1/2010 0:00:00", "FATALITIES": "1",
             "INJURIES": "1"},
            {"EVTYPE": "FLOOD", "BGN_DATE": "1/1/2006 0:00:00", "PROPDMG": "1.7",
             "PROPDMGEXP": "5", "CROPDMG": "3", "CROPDMGEXP": "B"},
            {"EVTYPE": "TORNADO", "BGN_DATE": "", "FATALITIES": "2", "INJURIES": "",
             "PROPDMG": "oops", "PROPDMGEXP": "b"},
            {"EVTYPE": "HAIL", "BGN_DATE": "not a date", "CROPDMG": "4",
             "CROPDMGEXP": "k", "REMARKS": "Hail, \"golf ball\" size"},
        ]
    )


@pytest.fixture()
def write_csv(tmp_path: Path):
    """Write a frame to a CSV under tmp_path, compressed by extension."""

    def _write(df: pd.DataFrame, name: str = "StormData.csv") -> Path:
        path = tmp_path / name
        df.to_csv(path, index=False, compression="infer")
        return path

    return _write


@pytest.fixture()
def make_raw():
    """Factory for raw-shaped frames; unspecified columns get defaults."""
    return make_raw_frame
