import io
from dataclasses import dataclass, field

import numpy as np
from scipy.stats import zscore

from .config import MATCH_OK_THRESHOLD
from .scales import format_currency, format_value


@dataclass
class MatchSummary:
    features: int
    rows: int
    matched: int
    unmatched: int
    unmatched_names: list = field(default_factory=list)
    value_range: tuple = (None, None)

    @property
    def ok(self):
        return self.matched >= MATCH_OK_THRESHOLD

    @property
    def status(self):
        return "ok" if self.ok else "warning"


def match_summary(join, df):
    values = df["value"].dropna()
    vrange = (float(values.min()), float(values.max())) if not values.empty else (None, None)
    return MatchSummary(
        features=len(join.features),
        rows=len(df),
        matched=len(join.matched),
        unmatched=len(join.unmatched),
        unmatched_names=list(join.unmatched),
        value_range=vrange,
    )


def format_match_summary(summary, money=True):
    fmt = format_currency if money else format_value
    lo, hi = summary.value_range
    lines = [
        f"Geo features: {summary.features}",
        f"CSV rows: {summary.rows}",
        f"Value range: {fmt(lo)} - {fmt(hi)}",
        f"Matched states: {summary.matched}",
        f"Unmatched states: {summary.unmatched}",
    ]
    if summary.unmatched_names:
        lines.append("List: " + ", ".join(summary.unmatched_names))
    return "\n".join(lines)


def outliers(df, threshold=3.0):
    """Rows whose value lies more than `threshold` standard deviations out."""
    vals = df.dropna(subset=["value"])
    if len(vals) < 3:
        return vals.iloc[0:0].assign(z=[])
    z = zscore(vals["value"].to_numpy(dtype=float))
    if np.all(np.isnan(z)):
        return vals.iloc[0:0].assign(z=[])
    out = vals.assign(z=np.round(z, 2))
    return out[np.abs(out["z"]) > threshold].reset_index(drop=True)


def generate_summary_report(df, join, title="STATE VALUES"):
    buffer = io.StringIO()
    print("=" * 70, file=buffer)
    print(f"{title} - SUMMARY REPORT", file=buffer)
    print("=" * 70, file=buffer)
    print(f"Total Records: {len(df)}", file=buffer)
    print(f"Total States: {df['state'].nunique()}", file=buffer)
    print(f"Missing Values: {int(df['value'].isna().sum())}", file=buffer)
    print("-" * 70, file=buffer)

    print("\nBASIC DESCRIPTIVE STATISTICS\n", file=buffer)
    print(df["value"].describe().round(2).to_string(), file=buffer)

    print("\nOUTLIER SUMMARY (|Z-Score| > 3)\n", file=buffer)
    out = outliers(df)
    if out.empty:
        print("None", file=buffer)
    else:
        print(out.to_string(index=False), file=buffer)

    print("\nMATCHING RESULTS\n", file=buffer)
    summary = match_summary(join, df)
    print(format_match_summary(summary, money=False), file=buffer)
    print(f"Status: {summary.status}", file=buffer)
    print("=" * 70, file=buffer)

    return buffer.getvalue()


def bin_counts(df, scale):
    """Number of states falling in each quantize bin, in palette order."""
    counts = [0] * len(scale.colors)
    for v in df.drop_duplicates("state", keep="last")["value"].dropna():
        counts[scale.bin_index(v)] += 1
    return counts
