# pantheon_icons.py
# One icon per distinct pantheon in data/gods.json -> data/pantheons.json
#   [{"name": "Greek", "iconPath": "/images/pantheons/greek.png"}, {"name": "Yoruba"}, ...]
#
# Icons are looked up on a handful of SMITE 1 wiki pages by file-name pattern
# and saved under public/images/pantheons/. An existing non-empty icon file is reused.
#
# Usage:
#   python pantheon_icons.py

import json
import logging
import re
from collections import Counter
from pathlib import Path
from typing import Callable, Dict, List, Optional

import gods_catalog as catalog
from wiki_http import Fetcher, download_file, fetch_html, is_cached

# ------------ Config -------------
SOURCE_PAGES = [
    "{base}/wiki/Category:{p}_pantheon",
    "{base}/wiki/Category:{p}_Gods",
    "{base}/wiki/{p}_Pantheon",
    "{base}/wiki/{p}_pantheon",
    "{base}/wiki/Pantheon",
    "{base}/wiki/List_of_gods",
]
STATIC_PREFIX = r"https://static\.wikia\.nocookie\.net/smite_gamepedia/images/"
ICON_PATTERNS = [
    STATIC_PREFIX + r'[^"]*T_{p}[^"]*Icon[^"]*\.(?:png|jpg|jpeg)[^"]*',
    STATIC_PREFIX + r'[^"]*{p}[^"]*Pantheon[^"]*Icon[^"]*\.(?:png|jpg|jpeg)[^"]*',
    STATIC_PREFIX + r'[^"]*{p}[^"]*Symbol[^"]*\.(?:png|jpg|jpeg)[^"]*',
    STATIC_PREFIX + r'[^"]*{p}[^"]*Logo[^"]*\.(?:png|jpg|jpeg)[^"]*',
    STATIC_PREFIX + r'[^"]*Pantheon[^"]*{p}[^"]*\.(?:png|jpg|jpeg)[^"]*',
    STATIC_PREFIX + r'[^"]*{p}[^"]*\.(?:png|jpg|jpeg)[^"]*',
]
NOT_PANTHEON = ("Default_Icon", "Card_", "Ability_", "Item_")
PANTHEON_HINTS = ("Pantheon", "Symbol", "Logo", "Icon")


def _is_pantheon_icon(url: str) -> bool:
    if any(s in url for s in NOT_PANTHEON):
        return False
    return any(h in url for h in PANTHEON_HINTS)


def find_icon_url(html: str, pantheon: str) -> Optional[str]:
    p = re.escape(pantheon)
    for pattern in ICON_PATTERNS:
        for m in re.finditer(pattern.format(p=p), html, re.IGNORECASE):
            if _is_pantheon_icon(m.group(0)):
                return m.group(0)
    return None


def extract_pantheon_icon(pantheon: str, fetch: Fetcher = fetch_html) -> Optional[str]:
    slug = catalog.wiki_slug(pantheon)
    for template in SOURCE_PAGES:
        url = template.format(base=catalog.SOURCE_A_BASE, p=slug)
        logging.debug("  Checking: %s", url)
        html = fetch(url)
        if not html:
            continue
        icon = find_icon_url(html, pantheon)
        if icon:
            logging.info("  Found pantheon icon: %s", icon)
            return icon
    return None


def distinct_pantheons(gods: List[Dict]) -> List[str]:
    return sorted({g["pantheon"] for g in gods if g.get("pantheon")})


def download_pantheon_icons(catalog_path: Optional[Path] = None, pantheons_path: Optional[Path] = None,
                            images_root: Optional[Path] = None, fetch: Fetcher = fetch_html,
                            download: Callable[[str, Path], bool] = download_file) -> Counter:
    gods = catalog.load_catalog(catalog_path)
    pantheons_path = pantheons_path or catalog.PANTHEONS_PATH
    icons_dir = (images_root or catalog.IMAGES_ROOT) / "images" / "pantheons"

    pantheons = distinct_pantheons(gods)
    logging.info("Found %d unique pantheons: %s", len(pantheons), ", ".join(pantheons))

    summary = Counter(processed=0, downloaded=0, cached=0, missing=0)
    records: List[Dict] = []
    for pantheon in pantheons:
        summary["processed"] += 1
        logging.info("Processing %s pantheon...", pantheon)
        filename = catalog.image_filename(pantheon)
        target = icons_dir / filename
        record = {"name": pantheon}

        if is_cached(target):
            summary["cached"] += 1
            record["iconPath"] = f"/images/pantheons/{filename}"
        else:
            icon_url = extract_pantheon_icon(pantheon, fetch)
            if icon_url and download(icon_url, target):
                summary["downloaded"] += 1
                record["iconPath"] = f"/images/pantheons/{filename}"
            else:
                logging.warning("No icon for the %s pantheon", pantheon)
                summary["missing"] += 1
        records.append(record)

    try:
        pantheons_path.parent.mkdir(parents=True, exist_ok=True)
        pantheons_path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
    except OSError as e:
        raise catalog.CatalogError(f"Failed to write {pantheons_path}: {e}") from e

    missing = [r["name"] for r in records if "iconPath" not in r]
    if missing:
        logging.info("Missing pantheon icons: %s", ", ".join(missing))
    catalog.log_summary("pantheon-icons", summary)
    return summary


def main():
    catalog.setup_logging()
    download_pantheon_icons()


if __name__ == "__main__":
    main()
