import logging
from pathlib import Path

import numpy as np
import pandas as pd

from .config import TOP_N
from .errors import DataLoadError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("state", "value")


def clean_values(series):
    """Coerce a raw value column to floats; blanks and junk become NaN."""
    cleaned = (
        series.astype(str)
        .str.strip()
        .str.replace(",", "", regex=False)
        .str.replace("$", "", regex=False)
        .replace({"": np.nan, "nan": np.nan, "None": np.nan})
    )
    return pd.to_numeric(cleaned, errors="coerce")


def load_state_values(path):
    path = Path(path)
    if not path.exists():
        raise DataLoadError(f"CSV not found: {path}")

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Could not read {path}: {e}") from e

    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataLoadError(f"{path} is missing column(s): {', '.join(missing)}")

    df = df[list(REQUIRED_COLUMNS)].copy()
    df["state"] = df["state"].astype(str).str.strip()
    df = df[df["state"] != ""]
    df["value"] = clean_values(df["value"])
    df = df.reset_index(drop=True)

    logger.info("Loaded %d rows from %s (%d without a value)",
                len(df), path, int(df["value"].isna().sum()))
    return df


def value_lookup(df):
    """State name -> value. A repeated state keeps its last value."""
    lookup = {}
    for state, value in zip(df["state"], df["value"]):
        lookup[state] = float(value)
    return lookup


def value_extent(df):
    values = df["value"].dropna()
    if values.empty:
        raise DataLoadError("No numeric values in dataset")
    return float(values.min()), float(values.max())


def top_states(df, n=TOP_N):
    return (
        df.dropna(subset=["value"])
        .sort_values("value", ascending=False, kind="mergesort")
        .head(n)
        .reset_index(drop=True)
    )
