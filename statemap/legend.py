from html import escape

from .scales import format_currency, format_value

SWATCH = (
    '<span style="display:inline-block;width:30px;height:14px;background:{color};'
    'margin-right:8px;border:1px solid #ccc;vertical-align:middle"></span>'
)

HELP_TEXT = "Click a state to zoom. Use Reset zoom to return to the full map."
SIMPLE_HELP_TEXT = (
    "Hover states for details. Click a state to zoom in, reset to return. "
    "Data: US Census Bureau ACS 2023 estimates."
)


def legend_html(scale, extent, scheme):
    """Swatch per quantize bin, then the data min/max and a usage hint."""
    parts = [f'<div class="legend-title"><strong>Value scale ({escape(scheme)})</strong></div>']
    for color, lo, hi in scale.legend_bins():
        parts.append(
            '<div class="swatch-row">' + SWATCH.format(color=color)
            + f"{format_value(lo)} &ndash; {format_value(hi)}</div>"
        )
    parts.append(
        f'<div style="margin-top:0.25rem">Min: {format_value(extent[0])}'
        f" &nbsp;Max: {format_value(extent[1])}</div>"
    )
    parts.append(f'<div style="opacity:0.6">{HELP_TEXT}</div>')
    return "\n".join(parts)


def sequential_legend_html(scale, steps, title="Median Household Income ($)"):
    parts = [f"<strong>{escape(title)}</strong>"]
    for value, color in scale.legend_stops(steps):
        parts.append('<div class="legend-item">' + SWATCH.format(color=color) + format_currency(value) + "</div>")
    parts.append(
        '<div style="margin-top:12px;font-size:13px;color:#666">'
        f"<em>{SIMPLE_HELP_TEXT}</em></div>"
    )
    return "\n".join(parts)


def details_html(name, value):
    return f"<strong>{escape(name)}</strong><br>Value: {format_value(value)}"
