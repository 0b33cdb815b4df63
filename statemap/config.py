import os
from pathlib import Path

# ------------------------------------------------------------
# File Paths
# ------------------------------------------------------------
ROOT_DIR = Path(__file__).resolve().parent.parent

GEOJSON_URL = os.environ.get(
    "STATEMAP_GEOJSON_URL",
    "https://raw.githubusercontent.com/PublicaMundi/MappingAPI/master/data/geojson/us-states.json",
)
GEOJSON_FALLBACK_PATH = Path(
    os.environ.get("STATEMAP_GEOJSON_FALLBACK", ROOT_DIR / "data" / "us-states-temp.json")
)
DATA_CSV_PATH = Path(os.environ.get("STATEMAP_DATA_CSV", ROOT_DIR / "data" / "states_data.csv"))
PREFS_PATH = Path(
    os.environ.get("STATEMAP_PREFS", Path.home() / ".statemap" / "prefs.json")
)

REQUEST_TIMEOUT = float(os.environ.get("STATEMAP_TIMEOUT", "15"))

# ------------------------------------------------------------
# Loading & Matching
# ------------------------------------------------------------
MIN_FEATURES = 50          # remote files with fewer features are suspicious
MATCH_OK_THRESHOLD = 49    # fewer matched states flags the summary

# ------------------------------------------------------------
# Map View
# ------------------------------------------------------------
ZOOM_SCALE_EXTENT = (1, 8)
ZOOM_PADDING = 0.9

# contiguous US in degrees, the extent a scale of 1 shows
REF_LON_SPAN = 58.0
REF_LAT_SPAN = 25.0
DEFAULT_CENTER = (-96.0, 38.0)

MAP_HEIGHT = 600
BAR_HEIGHT = 420

# ------------------------------------------------------------
# Colors & Legend
# ------------------------------------------------------------
DEFAULT_SCHEME = "Blues"
QUANTIZE_STEPS = 9
LEGEND_STEPS = 7
TOP_N = 10

UNMATCHED_FILL = "#333"
SIMPLE_UNMATCHED_FILL = "#eee"
FOCUS_OUTLINE = "#ffb703"
STATE_OUTLINE = "#ffffff"
