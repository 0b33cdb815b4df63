import json
import logging
from pathlib import Path

from .config import DEFAULT_SCHEME, PREFS_PATH
from .scales import SCHEMES

logger = logging.getLogger(__name__)

KEY = "colorScheme"


def load_scheme(path=PREFS_PATH):
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            stored = json.load(f).get(KEY)
    except FileNotFoundError:
        return DEFAULT_SCHEME
    except (OSError, ValueError, AttributeError) as e:
        logger.warning("Ignoring unreadable preferences %s: %s", path, e)
        return DEFAULT_SCHEME
    if not isinstance(stored, str) or stored not in SCHEMES:
        return DEFAULT_SCHEME
    return stored


def save_scheme(name, path=PREFS_PATH):
    if name not in SCHEMES:
        raise ValueError(f"Unknown color scheme: {name}")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    prefs = {}
    if path.exists():
        try:
            prefs = json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            prefs = {}
        if not isinstance(prefs, dict):
            prefs = {}
    prefs[KEY] = name
    path.write_text(json.dumps(prefs, indent=2), encoding="utf-8")
    logger.info("Saved color scheme %s to %s", name, path)
