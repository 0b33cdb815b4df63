import math
from bisect import bisect_right

import plotly.express as px
from plotly.colors import sample_colorscale, unlabel_rgb

from .config import DEFAULT_SCHEME, LEGEND_STEPS, QUANTIZE_STEPS

# ------------------------------------------------------------
# Color schemes (nine colors each)
# ------------------------------------------------------------
VIRIDIS_SAMPLES = [(i + 1) / (QUANTIZE_STEPS + 1) for i in range(QUANTIZE_STEPS)]

SCHEMES = {
    "Blues": px.colors.sequential.Blues,
    "Greens": px.colors.sequential.Greens,
    "Oranges": px.colors.sequential.Oranges,
    "Purples": px.colors.sequential.Purples,
    "Reds": px.colors.sequential.Reds,
    "Greys": px.colors.sequential.Greys,
    "BuGn": px.colors.sequential.BuGn,
    "OrRd": px.colors.sequential.OrRd,
    "YlGnBu": px.colors.sequential.YlGnBu,
    "Viridis": sample_colorscale("Viridis", VIRIDIS_SAMPLES),
}


def resolve_scheme(name):
    return name if name in SCHEMES else DEFAULT_SCHEME


def scheme_colors(name):
    return list(SCHEMES[resolve_scheme(name)])


def _is_missing(value):
    return value is None or (isinstance(value, float) and math.isnan(value))


def round_half_up(x):
    return int(math.floor(x + 0.5))


def mpl_color(color):
    """plotly "rgb(r, g, b)" string as a matplotlib 0-1 tuple."""
    return tuple(c / 255.0 for c in unlabel_rgb(color))


# ------------------------------------------------------------
# Quantize
# ------------------------------------------------------------
class QuantizeScale:
    """Split a numeric domain into equal bins, one color per bin.

    Values below or above the domain clamp to the first or last color. A
    degenerate domain (min == max) sends every value to the last color.
    """

    def __init__(self, domain, colors):
        lo, hi = float(domain[0]), float(domain[1])
        if lo > hi:
            lo, hi = hi, lo
        if not colors:
            raise ValueError("QuantizeScale needs at least one color")
        self.domain = (lo, hi)
        self.colors = list(colors)
        k = len(self.colors)
        self.thresholds = [lo + (i + 1) * (hi - lo) / k for i in range(k - 1)]

    @classmethod
    def from_scheme(cls, domain, scheme):
        return cls(domain, scheme_colors(scheme))

    def bin_index(self, value):
        return bisect_right(self.thresholds, float(value))

    def __call__(self, value):
        if _is_missing(value):
            return None
        return self.colors[self.bin_index(value)]

    def invert_extent(self, color):
        i = self.colors.index(color)
        lo, hi = self.domain
        start = self.thresholds[i - 1] if i > 0 else lo
        end = self.thresholds[i] if i < len(self.thresholds) else hi
        return start, end

    def legend_bins(self):
        """[(color, lo, hi)] with bounds rounded to whole numbers."""
        bins = []
        for c in self.colors:
            lo, hi = self.invert_extent(c)
            bins.append((c, round_half_up(lo), round_half_up(hi)))
        return bins


# ------------------------------------------------------------
# Sequential
# ------------------------------------------------------------
class SequentialScale:
    def __init__(self, domain, name="Viridis"):
        lo, hi = float(domain[0]), float(domain[1])
        self.domain = (min(lo, hi), max(lo, hi))
        self.name = name

    def position(self, value):
        lo, hi = self.domain
        if hi == lo:
            return 0.0
        return min(1.0, max(0.0, (float(value) - lo) / (hi - lo)))

    def __call__(self, value):
        if _is_missing(value):
            return None
        return sample_colorscale(self.name, [self.position(value)])[0]

    def legend_stops(self, steps=LEGEND_STEPS):
        lo, hi = self.domain
        if steps < 2:
            return [(lo, self(lo))]
        values = [lo + (i / (steps - 1)) * (hi - lo) for i in range(steps)]
        return [(v, self(v)) for v in values]


# ------------------------------------------------------------
# Formatting
# ------------------------------------------------------------
def format_value(v):
    if _is_missing(v):
        return "N/A"
    v = float(v)
    if v.is_integer():
        return f"{int(v):,}"
    return f"{v:,.12g}"


def format_currency(v):
    if _is_missing(v):
        return "N/A"
    v = float(v)
    sign = "-" if v < 0 else ""
    return f"{sign}${abs(v):,.0f}"
