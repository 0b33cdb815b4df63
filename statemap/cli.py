import argparse
import logging
import sys
from pathlib import Path

from .charts import build_choropleth, build_top_bars
from .config import DATA_CSV_PATH, GEOJSON_FALLBACK_PATH, GEOJSON_URL, TOP_N
from .data import load_state_values, value_extent, value_lookup
from .errors import StatemapError
from .geo import join_values, load_geojson_with_fallback
from .legend import legend_html
from .prefs import load_scheme
from .report import format_match_summary, match_summary
from .scales import SCHEMES, QuantizeScale, resolve_scheme

logger = logging.getLogger(__name__)

PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8" />
<title>{title}</title>
<style>
  body {{ font-family: system-ui, sans-serif; margin: 1rem 2rem; }}
  .layout {{ display: flex; gap: 1.5rem; align-items: flex-start; }}
  .map {{ flex: 3; }}
  .side {{ flex: 1; min-width: 280px; }}
  .swatch-row {{ margin: 2px 0; }}
</style>
</head>
<body>
<h3>{title}</h3>
<div class="layout">
  <div class="map">{map_div}</div>
  <div class="side">
    <div id="legend">{legend}</div>
    {bars_div}
  </div>
</div>
</body>
</html>
"""


def load_inputs(csv_path, url, fallback):
    df = load_state_values(csv_path)
    geo = load_geojson_with_fallback(url, fallback)
    join = join_values(geo, value_lookup(df))
    return df, join


def export_html(out, csv_path=DATA_CSV_PATH, scheme=None, url=GEOJSON_URL,
                fallback=GEOJSON_FALLBACK_PATH, title="US States by Value"):
    scheme = resolve_scheme(scheme or load_scheme())
    df, join = load_inputs(csv_path, url, fallback)
    extent = value_extent(df)
    scale = QuantizeScale.from_scheme(extent, scheme)

    fig_map = build_choropleth(join, scale)
    fig_bars = build_top_bars(df, TOP_N, scale=scale)
    page = PAGE.format(
        title=title,
        map_div=fig_map.to_html(full_html=False, include_plotlyjs="cdn", config={"scrollZoom": True}),
        bars_div=fig_bars.to_html(full_html=False, include_plotlyjs=False),
        legend=legend_html(scale, extent, scheme),
    )

    out = Path(out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(page, encoding="utf-8")
    logger.info("Wrote %s (%d matched, %d unmatched)", out, len(join.matched), len(join.unmatched))
    return out


def _add_source_args(parser, default=None):
    def pick(value):
        return value if default is None else default

    parser.add_argument("--csv", default=pick(str(DATA_CSV_PATH)),
                        help=f"state,value CSV (default: {DATA_CSV_PATH})")
    parser.add_argument("--geojson-url", default=pick(GEOJSON_URL), help="Remote state boundaries")
    parser.add_argument("--fallback", default=pick(str(GEOJSON_FALLBACK_PATH)),
                        help="Local boundaries fallback")


def main(argv=None):
    p = argparse.ArgumentParser(prog="statemap", description="US states choropleth tools")
    _add_source_args(p)
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="cmd")

    # subcommands accept the source options too, without overriding the top-level ones
    common = argparse.ArgumentParser(add_help=False)
    _add_source_args(common, default=argparse.SUPPRESS)

    pe = sub.add_parser("export", parents=[common], help="Write a standalone interactive HTML map")
    pe.add_argument("--out", required=True, help="Output HTML path")
    pe.add_argument("--scheme", choices=sorted(SCHEMES), help="Color scheme (default: saved preference)")
    pe.add_argument("--title", default="US States by Value")

    sub.add_parser("summary", parents=[common], help="Print how dataset rows matched the boundaries")

    args = p.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    if args.cmd == "export":
        try:
            out = export_html(args.out, csv_path=args.csv, scheme=args.scheme,
                              url=args.geojson_url, fallback=args.fallback, title=args.title)
        except StatemapError as e:
            print("Error:", e, file=sys.stderr)
            return 3
        print(f"Wrote {out}")
        return 0
    elif args.cmd == "summary":
        try:
            df, join = load_inputs(args.csv, args.geojson_url, args.fallback)
        except StatemapError as e:
            print("Error:", e, file=sys.stderr)
            return 3
        summary = match_summary(join, df)
        print(format_match_summary(summary, money=False))
        return 0 if summary.ok else 2
    else:
        p.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
