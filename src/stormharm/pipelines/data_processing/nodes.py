"""Raw → cleaned transformation nodes for the U.S. storm events dataset.

The four ``Node N`` functions make up the data_processing pipeline:
the loader reads the raw (bz2-compressed) storm data CSV, and the
others return new frames without touching their input.  The result
is one row per event with a calendar date and damage figures in
actual dollars.  parse_begin_date and unit_multiplier are the scalar
rules the nodes apply per row.
"""

from __future__ import annotations

import logging
import lzma
import re
import zipfile
from pathlib import Path

import numpy as np
import pandas as pd

from stormharm.errors import MalformedInputError

logger = logging.getLogger(__name__)

# ── Columns the report needs, raw header → snake_case ───────────────
REPORT_COLUMNS: dict[str, str] = {
    "EVTYPE": "event_type",
    "BGN_DATE": "bgn_date",
    "FATALITIES": "fatalities",
    "INJURIES": "injuries",
    "PROPDMG": "propdmg",
    "PROPDMGEXP": "propdmgexp",
    "CROPDMG": "cropdmg",
    "CROPDMGEXP": "cropdmgexp",
    "REMARKS": "remarks",
}

# ── Multipliers for the single-character damage unit codes ──────────
# Case-sensitive: a lowercase "b" is not a billion in this dataset.
_UNIT_MULTIPLIERS: dict[str, int] = {
    "k": 1_000,
    "K": 1_000,
    "m": 1_000_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}

# First token of BGN_DATE, e.g. "4/28/2011" out of "4/28/2011 0:00:00"
_DATE_TOKEN_PATTERN: re.Pattern = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

# Largest count stored exactly by the float64 values to_numeric yields
_MAX_COUNT: int = 2**53

# Exceptions pandas and the decompressors raise for unreadable input
_READ_ERRORS = (OSError, EOFError, ValueError, zipfile.BadZipFile, lzma.LZMAError)


# ── Node 1 ───────────────────────────────────────────────────────────
def load_raw_events(raw_data_path: str) -> pd.DataFrame:
    """Read the storm data file into a DataFrame, preserving file order.

    Compression is inferred from the file extension, so the original
    ``StormData.csv.bz2`` is read as-is.  Every column is read as text;
    lenient numeric conversion happens in the following nodes.

    Args:
        raw_data_path: Path to the (optionally compressed) CSV file.

    Returns:
        DataFrame with all raw columns.

    Raises:
        MalformedInputError: The file is missing, cannot be decompressed
            or parsed, or lacks one of the REPORT_COLUMNS.
    """
    path = Path(raw_data_path)
    if not path.is_file():
        raise MalformedInputError(f"Storm data file not found: {path}")

    try:
        df = pd.read_csv(
            path,
            compression="infer",
            dtype=str,
            keep_default_na=False,
            encoding="latin-1",
        )
    except _READ_ERRORS as exc:
        raise MalformedInputError(f"Cannot read storm data from {path}: {exc}") from exc

    missing = [c for c in REPORT_COLUMNS if c not in df.columns]
    if missing:
        raise MalformedInputError(
            f"Expected columns not found in {path.name}: {missing}"
        )

    logger.info(
        "Loaded %s: %s rows, %s columns",
        path.name,
        f"{len(df):,}",
        len(df.columns),
    )
    return df


# ── Node 2 ───────────────────────────────────────────────────────────
def select_report_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Keep only the nine columns the report uses and tidy their types.

    Fatality and injury counts and damage magnitudes that are blank or
    not numeric count as 0, and so do infinite magnitudes and counts
    that are negative, infinite or beyond 2**53.  Missing unit codes
    become the empty string.
    Event-type labels are left exactly as recorded.

    Args:
        df: Raw DataFrame from load_raw_events.

    Returns:
        DataFrame with snake_case REPORT_COLUMNS, same rows and order.
    """
    missing = [c for c in REPORT_COLUMNS if c not in df.columns]
    if missing:
        raise MalformedInputError(f"Expected columns not found in data: {missing}")

    before_cols = len(df.columns)
    selected = df[list(REPORT_COLUMNS)].rename(columns=REPORT_COLUMNS).copy()

    for col in ["fatalities", "injuries"]:
        counts = pd.to_numeric(selected[col], errors="coerce")
        valid = counts.between(0, _MAX_COUNT)
        _warn_replaced(col, selected[col], counts.notna() & ~valid)
        selected[col] = counts.where(valid, 0).astype("int64")
    for col in ["propdmg", "cropdmg"]:
        magnitudes = pd.to_numeric(selected[col], errors="coerce").astype("float64")
        finite = np.isfinite(magnitudes)
        _warn_replaced(col, selected[col], magnitudes.notna() & ~finite)
        selected[col] = magnitudes.where(finite, 0.0)
    for col in ["propdmgexp", "cropdmgexp"]:
        selected[col] = selected[col].fillna("").astype(str)

    logger.info(
        "Column selection: kept %d of %d columns across %s rows",
        len(REPORT_COLUMNS),
        before_cols,
        f"{len(selected):,}",
    )
    return selected


def _warn_replaced(col: str, raw: pd.Series, replaced: pd.Series) -> None:
    if replaced.any():
        logger.warning(
            "%s: %s out-of-range values counted as 0. Samples: %s",
            col,
            f"{replaced.sum():,}",
            list(raw[replaced].unique()[:10]),
        )


# ── Node 3 ───────────────────────────────────────────────────────────
def parse_begin_date(raw: object) -> pd.Timestamp | None:
    """Parse the date part of a BGN_DATE value like '4/28/2011 0:00:00'.

    Only the first whitespace-delimited token is used, and it must look
    like month/day/four-digit-year.  Returns None instead of raising
    for anything else, including impossible dates such as 2/30/2011.
    """
    if not isinstance(raw, str):
        return None

    tokens = raw.split()
    if not tokens:
        return None

    match = _DATE_TOKEN_PATTERN.match(tokens[0])
    if match is None:
        return None

    month, day, year = (int(part) for part in match.groups())
    try:
        return pd.Timestamp(year=year, month=month, day=day)
    except ValueError:
        return None


def parse_event_dates(df: pd.DataFrame) -> pd.DataFrame:
    """Add an ``event_date`` column derived from ``bgn_date``.

    Unparseable values become NaT.  They are counted and logged but
    never stop the report; such rows simply drop out of per-year views.

    Args:
        df: DataFrame after column selection.

    Returns:
        DataFrame with a datetime64 ``event_date`` column added.
    """
    df = df.copy()
    df["event_date"] = pd.to_datetime(df["bgn_date"].map(parse_begin_date))

    n_null = df["event_date"].isna().sum()
    if n_null > 0:
        bad_samples = df.loc[df["event_date"].isna(), "bgn_date"].unique()[:10]
        logger.warning(
            "bgn_date: %s values could not be parsed to a date. Samples: %s",
            f"{n_null:,}",
            list(bad_samples),
        )

    dated = df["event_date"].dropna()
    if len(dated) > 0:
        logger.info(
            "Event dates parsed. Year range: %d–%d",
            dated.dt.year.min(),
            dated.dt.year.max(),
        )
    return df


# ── Node 4 ───────────────────────────────────────────────────────────
def unit_multiplier(code: object) -> int:
    """Map a damage unit code to its dollar multiplier.

    k/K → thousand, m/M → million, B → billion.  Every other code maps
    to 1, including blanks, lowercase "b", symbols and the digits 0–9.
    The digit codes cannot be reconciled with the event remarks to any
    consistent scale, so they are left as plain dollars.
    """
    if not isinstance(code, str):
        return 1
    return _UNIT_MULTIPLIERS.get(code, 1)


def normalize_damage(df: pd.DataFrame) -> pd.DataFrame:
    """Convert property and crop damage to actual dollar amounts.

    The raw data stores damage as a magnitude plus a unit code:
    - 25.0 and "K" → 25,000.0
    - 1.5 and "M"  → 1,500,000.0
    - 1.7 and "5"  → 1.7 (unrecognised code, multiplier 1)

    Creates property_damage_dollars and crop_damage_dollars and keeps
    the originals for auditability.

    Args:
        df: DataFrame after date parsing.

    Returns:
        DataFrame with the two dollar columns added.
    """
    df = df.copy()

    for magnitude_col, code_col, new_col in [
        ("propdmg", "propdmgexp", "property_damage_dollars"),
        ("cropdmg", "cropdmgexp", "crop_damage_dollars"),
    ]:
        multipliers = df[code_col].map(unit_multiplier).astype("int64")
        df[new_col] = df[magnitude_col].astype("float64") * multipliers

        unrecognised = df[code_col].notna() & (df[code_col] != "") & (multipliers == 1)
        if unrecognised.any():
            code_counts = df.loc[unrecognised, code_col].value_counts().to_dict()
            logger.warning(
                "%s: %s rows carry an unrecognised unit code, used as-is: %s",
                code_col,
                f"{unrecognised.sum():,}",
                code_counts,
            )

        logger.info(
            "%s: %s total across %s rows",
            new_col,
            f"${df[new_col].sum():,.0f}",
            f"{len(df):,}",
        )

    return df
