import copy
import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np
import requests

from .config import (
    DEFAULT_CENTER,
    GEOJSON_FALLBACK_PATH,
    GEOJSON_URL,
    MIN_FEATURES,
    REF_LAT_SPAN,
    REF_LON_SPAN,
    REQUEST_TIMEOUT,
    ZOOM_PADDING,
    ZOOM_SCALE_EXTENT,
)
from .errors import GeoLoadError

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Loading
# ------------------------------------------------------------
def fetch_geojson(url, timeout=REQUEST_TIMEOUT):
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.json()


def read_geojson(path):
    with Path(path).open("r", encoding="utf-8") as f:
        return json.load(f)


def feature_count(geo):
    if not isinstance(geo, dict) or not isinstance(geo.get("features"), list):
        return 0
    return len(geo["features"])


def load_geojson_with_fallback(url=GEOJSON_URL, fallback_path=GEOJSON_FALLBACK_PATH,
                               min_features=MIN_FEATURES):
    """Load state boundaries, falling back to a local copy.

    The remote file is preferred. When it cannot be fetched the local file is
    used instead. When it arrives but looks incomplete (fewer than
    ``min_features`` features) the local file is tried, and the remote payload
    is kept if the local file is unusable too.
    """
    try:
        remote = fetch_geojson(url)
    except (requests.RequestException, ValueError) as e:
        logger.warning("Remote GeoJSON failed (%s), attempting local fallback %s", e, fallback_path)
        try:
            local = read_geojson(fallback_path)
        except (OSError, ValueError) as e2:
            raise GeoLoadError(f"Remote GeoJSON failed and fallback {fallback_path} unusable: {e2}") from e2
        if feature_count(local) == 0:
            raise GeoLoadError(f"Remote GeoJSON failed and fallback {fallback_path} has no features")
        logger.info("Loaded local fallback GeoJSON with features: %d", feature_count(local))
        return local

    n = feature_count(remote)
    if n >= min_features:
        logger.info("Loaded remote GeoJSON with %d features", n)
        return remote

    logger.warning("Remote GeoJSON suspicious (features: %d), trying local fallback", n)
    try:
        local = read_geojson(fallback_path)
    except (OSError, ValueError) as e:
        logger.error("Local fallback failed: %s", e)
        local = None
    if feature_count(local) == 0:
        if n == 0:
            raise GeoLoadError("Remote GeoJSON has no features and the fallback is unusable")
        logger.warning("Local fallback unusable, keeping remote GeoJSON with %d features", n)
        return remote
    logger.info("Loaded local fallback GeoJSON with features: %d", feature_count(local))
    return local


# ------------------------------------------------------------
# Join
# ------------------------------------------------------------
def feature_name(feature):
    props = feature.get("properties") or {}
    name = props.get("name")
    if name is None:
        return None
    name = str(name).strip()
    return name or None


@dataclass
class JoinResult:
    features: list
    matched: list = field(default_factory=list)
    unmatched: list = field(default_factory=list)

    @property
    def geojson(self):
        return {"type": "FeatureCollection", "features": self.features}

    @property
    def names(self):
        return [f["properties"]["name"] for f in self.features]

    def value_of(self, name):
        for f in self.features:
            if f["properties"]["name"] == name:
                return f["properties"]["value"]
        return None

    def feature(self, name):
        for f in self.features:
            if f["properties"]["name"] == name:
                return f
        return None


def join_values(geo, lookup):
    """Attach each feature's value by name. Unmatched or NaN values become None."""
    if not isinstance(geo, dict):
        raise GeoLoadError(f"Expected a GeoJSON FeatureCollection, got {type(geo).__name__}")
    features, matched, unmatched = [], [], []
    for raw in geo.get("features", []):
        name = feature_name(raw)
        if name is None:
            logger.warning("Skipping feature without a name (id=%s)", raw.get("id"))
            continue

        f = copy.deepcopy(raw)
        f["properties"]["name"] = name
        val = lookup.get(name)
        if val is None or (isinstance(val, float) and math.isnan(val)):
            f["properties"]["value"] = None
            unmatched.append(name)
        else:
            f["properties"]["value"] = float(val)
            matched.append(name)
        features.append(f)

    if unmatched:
        logger.info("States without data: %s", ", ".join(unmatched))
    return JoinResult(features=features, matched=matched, unmatched=unmatched)


# ------------------------------------------------------------
# Bounds & Zoom
# ------------------------------------------------------------
def _coordinates(geometry):
    gtype = geometry.get("type")
    coords = geometry.get("coordinates") or []
    if gtype == "Polygon":
        rings = coords
    elif gtype == "MultiPolygon":
        rings = [ring for poly in coords for ring in poly]
    elif gtype == "GeometryCollection":
        return np.vstack([_coordinates(g) for g in geometry.get("geometries", [])])
    else:
        raise ValueError(f"Unsupported geometry type: {gtype}")
    return np.array([pt[:2] for ring in rings for pt in ring], dtype=float)


def feature_bounds(feature):
    """((lon0, lat0), (lon1, lat1)) of a Polygon or MultiPolygon feature."""
    pts = _coordinates(feature["geometry"])
    lons, lats = pts[:, 0], pts[:, 1]
    # Aleutians cross the antimeridian
    if lons.max() - lons.min() > 180:
        lons = np.where(lons > 0, lons - 360, lons)
    return (float(lons.min()), float(lats.min())), (float(lons.max()), float(lats.max()))


@dataclass(frozen=True)
class ZoomTarget:
    center_lon: float
    center_lat: float
    scale: float

    @classmethod
    def identity(cls):
        return cls(DEFAULT_CENTER[0], DEFAULT_CENTER[1], 1.0)

    @property
    def is_identity(self):
        return self == ZoomTarget.identity()


def zoom_to_bounds(bounds):
    (x0, y0), (x1, y1) = bounds
    dx = max(x1 - x0, 1e-9)
    dy = max(y1 - y0, 1e-9)
    lo, hi = ZOOM_SCALE_EXTENT
    scale = min(hi, ZOOM_PADDING / max(dx / REF_LON_SPAN, dy / REF_LAT_SPAN))
    scale = max(lo, scale)
    return ZoomTarget((x0 + x1) / 2, (y0 + y1) / 2, scale)


def zoom_to_feature(feature):
    return zoom_to_bounds(feature_bounds(feature))
