# gods_catalog.py
# Shared catalog plumbing for the port tracker scripts:
# config constants, logging setup, gods.json load/save, id + wiki URL helpers.
#
# Catalog file (data/gods.json) is a JSON list of god records:
# [
#   {
#     "id": 1,
#     "name": "Achilles",
#     "pantheon": "Greek",
#     "class": "Warrior",
#     "status": "ported" | "not_ported" | "exclusive",
#     "releaseDate": "2015-03-10" | null,
#     "portedDate": "2024-05-02",            # optional, may be raw text
#     "sourceAUrl": "https://smite.fandom.com/wiki/Achilles",   # optional
#     "sourceBUrl": "https://wiki.smite2.com/w/Achilles",       # optional
#     "imagePath": "/images/gods/smite2/card/achilles.png",     # optional
#     "thumbnailPath": "...", "sourceAThumbnailPath": "...", "sourceBThumbnailPath": "...",
#     "sourceACardPath": "...", "sourceBCardPath": "..."        # optional
#   }
# ]
# Absent optional fields are omitted, never written as "".

import json
import logging
import re
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional

# ------------ Config -------------
ROOT = Path(__file__).resolve().parent
DATA_DIR = ROOT / "data"
CATALOG_PATH = DATA_DIR / "gods.json"
PANTHEONS_PATH = DATA_DIR / "pantheons.json"
IMAGES_ROOT = ROOT / "public"          # web paths "/images/..." live under here
LOGDIR = ROOT / "output" / "logs"

SOURCE_A_BASE = "https://smite.fandom.com"
SOURCE_B_BASE = "https://wiki.smite2.com"

STATUS_PORTED = "ported"
STATUS_NOT_PORTED = "not_ported"
STATUS_EXCLUSIVE = "exclusive"
STATUSES = (STATUS_PORTED, STATUS_NOT_PORTED, STATUS_EXCLUSIVE)

UNKNOWN = "Unknown"
VALID_CLASSES = ("Mage", "Hunter", "Guardian", "Warrior", "Assassin")

PANTHEON_KEYWORDS = [
    "Greek", "Egyptian", "Norse", "Hindu", "Chinese", "Roman", "Maya",
    "Celtic", "Japanese", "Arthurian", "Babylonian", "Slavic", "Voodoo",
    "Polynesian", "Yoruba", "Korean", "Arabian",
]

IMAGE_FIELDS = (
    "imagePath",
    "thumbnailPath",
    "sourceAThumbnailPath",
    "sourceBThumbnailPath",
    "sourceACardPath",
    "sourceBCardPath",
)


class CatalogError(RuntimeError):
    """The catalog file could not be read or written. Fatal for the run."""


# ------------ Logging -------------
def setup_logging(logdir: Optional[Path] = None) -> Path:
    logdir = logdir or LOGDIR
    logdir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logdir / f"run-{stamp}.log"

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    fh = logging.FileHandler(log_path, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))

    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))

    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.addHandler(fh)
    logger.addHandler(ch)

    logging.info("Logging to %s", log_path)
    return log_path


# ------------ Catalog I/O -------------
def load_catalog(path: Optional[Path] = None) -> List[Dict]:
    path = path or CATALOG_PATH
    if not path.exists():
        raise CatalogError(f"Catalog not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise CatalogError(f"Failed to read catalog {path}: {e}") from e
    if not isinstance(data, list) or not all(isinstance(g, dict) for g in data):
        raise CatalogError(f"Catalog {path} is not a list of god records")
    return data


def load_catalog_if_exists(path: Optional[Path] = None) -> List[Dict]:
    path = path or CATALOG_PATH
    if not path.exists():
        return []
    return load_catalog(path)


def save_catalog(gods: List[Dict], path: Optional[Path] = None) -> Path:
    path = path or CATALOG_PATH
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps([compact_god(g) for g in gods], ensure_ascii=False, indent=2), encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Failed to write catalog {path}: {e}") from e
    logging.info("Saved %d gods to %s", len(gods), path)
    return path


def compact_god(god: Dict) -> Dict:
    """Drop optional fields that are None or empty so absence stays absence."""
    out = {}
    for k, v in god.items():
        if k == "releaseDate":
            out[k] = v or None
            continue
        if v is None or v == "":
            continue
        out[k] = v
    return out


# ------------ Helpers -------------
def wiki_slug(name: str) -> str:
    return re.sub(r"\s+", "_", name.strip())


def source_a_url(name: str) -> str:
    return f"{SOURCE_A_BASE}/wiki/{wiki_slug(name)}"


def source_b_url(name: str) -> str:
    return f"{SOURCE_B_BASE}/w/{wiki_slug(name)}"


def image_filename(name: str, ext: str = "png") -> str:
    return f"{re.sub(r'[^a-z0-9]', '_', name.lower())}.{ext}"


def next_id(gods: Iterable[Dict]) -> int:
    ids = [int(g["id"]) for g in gods if g.get("id")]
    return max(ids) + 1 if ids else 1


def status_counts(gods: Iterable[Dict]) -> Counter:
    counts = Counter(g.get("status") for g in gods)
    return Counter({s: counts.get(s, 0) for s in STATUSES})


def log_summary(stage: str, summary: Counter) -> None:
    parts = ", ".join(f"{k}={v}" for k, v in summary.items())
    logging.info("%s summary: %s", stage, parts or "nothing to do")
