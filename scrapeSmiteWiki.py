# scrapeSmiteWiki.py
# SMITE 1 wiki (smite.fandom.com) -> base catalog data/gods.json
#
# Primary strategy: the "List of gods" table (name / pantheon / class / release date).
# Fallback (only when the table yields nothing): god-shaped /wiki/ links, with
# pantheon + class guessed from the surrounding text. Lower precision, capped.
#
# Re-running keeps ids (and already resolved image paths) of gods the catalog
# already knows; new names get ids above the current maximum.
#
# Usage:
#   python scrapeSmiteWiki.py

import logging
import re
from collections import Counter
from pathlib import Path
from typing import Callable, Dict, List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag

import gods_catalog as catalog
from normalize_dates import normalize_date
from wiki_http import fetch_html

# ------------ Config -------------
LIST_URL = f"{catalog.SOURCE_A_BASE}/wiki/List_of_gods"

MIN_ROW_CELLS = 10
COL_NAME, COL_PANTHEON, COL_CLASS, COL_RELEASE = 1, 2, 5, 9

FALLBACK_MAX_GODS = 200
FALLBACK_HREF_RE = re.compile(r"/wiki/[A-Z][a-z]+(?:_[A-Z][a-z]+)*$")
FALLBACK_SKIP_HREF = ("Category:", "Template:", "File:")
FALLBACK_SKIP_TEXT = ("edit", "Category")
FALLBACK_PANTHEONS = catalog.PANTHEON_KEYWORDS[:15]   # the SMITE 1 era pantheons


# ------------ Parsing -------------
def parse_gods_table(soup: BeautifulSoup) -> List[Dict]:
    table = soup.find("table")
    if not table:
        logging.warning("No table found on the gods list page")
        return []
    logging.info("Found main table with %d rows", len(table.find_all("tr")))

    rows: List[Dict] = []
    for tr in table.find_all("tr"):
        cells = tr.find_all("td")
        if len(cells) < MIN_ROW_CELLS:
            continue

        link = cells[COL_NAME].find("a")
        name = (link.get_text(strip=True) if link else "").strip()
        pantheon = cells[COL_PANTHEON].get_text(" ", strip=True)
        god_class = cells[COL_CLASS].get_text(" ", strip=True)
        release = cells[COL_RELEASE].get_text(" ", strip=True)

        if not name or not pantheon:
            continue
        if god_class not in catalog.VALID_CLASSES:
            logging.debug("Rejecting row %r: class %r not a god class", name, god_class)
            continue

        rows.append({
            "name": name,
            "pantheon": pantheon,
            "class": god_class,
            "releaseRaw": release,
        })
    return rows


def _first_keyword(text: str, keywords: List[str]) -> str:
    for kw in keywords:
        if kw in text:
            return kw
    return catalog.UNKNOWN


def parse_god_links(soup: BeautifulSoup, limit: int = FALLBACK_MAX_GODS) -> List[Dict]:
    rows: List[Dict] = []
    seen = set()
    for a in soup.select('a[href*="/wiki/"]'):
        if len(rows) >= limit:
            logging.info("Fallback link scan hit the %d god cap", limit)
            break
        href = a.get("href") or ""
        text = a.get_text(strip=True)

        if any(s in href for s in FALLBACK_SKIP_HREF):
            continue
        if any(s in text for s in FALLBACK_SKIP_TEXT) or len(text) < 3 or len(text) > 25:
            continue
        if not FALLBACK_HREF_RE.search(urlparse(href).path or href):
            continue

        parent = a.find_parent(["tr", "div", "p"])
        context = parent.get_text(" ", strip=True) if isinstance(parent, Tag) else ""
        pantheon = _first_keyword(context, FALLBACK_PANTHEONS)
        god_class = _first_keyword(context, list(catalog.VALID_CLASSES))
        if pantheon == catalog.UNKNOWN or god_class == catalog.UNKNOWN:
            continue
        if text in seen:
            continue
        seen.add(text)

        rows.append({"name": text, "pantheon": pantheon, "class": god_class, "releaseRaw": ""})
        logging.info("Added god from link: %s (%s, %s)", text, pantheon, god_class)
    return rows


def scrape_listing(html: str) -> List[Dict]:
    soup = BeautifulSoup(html, "lxml")
    logging.info("Found %d tables", len(soup.find_all("table")))
    rows = parse_gods_table(soup)
    if not rows:
        logging.info("No gods found in tables, trying link fallback...")
        rows = parse_god_links(soup)
    logging.info("Scraped %d gods from the SMITE 1 wiki", len(rows))
    return rows


# ------------ Catalog -------------
def build_catalog(rows: List[Dict], existing: Optional[List[Dict]] = None) -> List[Dict]:
    existing = existing or []
    by_name = {g.get("name", "").casefold(): g for g in existing}
    new_id = catalog.next_id(existing)

    gods: List[Dict] = []
    seen_names = set()
    for row in rows:
        key = row["name"].casefold()
        if key in seen_names:
            logging.debug("Duplicate listing row for %s skipped", row["name"])
            continue
        seen_names.add(key)

        prior = by_name.get(key)
        if prior:
            god_id = prior["id"]
        else:
            god_id = new_id
            new_id += 1

        god = {
            "id": god_id,
            "name": row["name"],
            "pantheon": row["pantheon"],
            "class": row["class"],
            "status": catalog.STATUS_NOT_PORTED,
            "releaseDate": normalize_date(row.get("releaseRaw")),
            "sourceAUrl": catalog.source_a_url(row["name"]),
        }
        if prior:
            for field in catalog.IMAGE_FIELDS:
                if prior.get(field):
                    god[field] = prior[field]
        gods.append(god)

    # gods only the old catalog knows (e.g. SMITE 2 exclusives) keep their ids
    carried = [g for g in existing if g.get("name", "").casefold() not in seen_names]
    if carried:
        logging.info("Carrying forward %d gods not on the SMITE 1 list", len(carried))
    return gods + carried


def scrape_smite_gods(catalog_path: Optional[Path] = None,
                      fetch: Callable[[str], Optional[str]] = fetch_html) -> Counter:
    logging.info("Fetching SMITE 1 gods from %s", LIST_URL)
    html = fetch(LIST_URL)
    if not html:
        logging.error("Could not fetch the SMITE 1 gods list; catalog left unchanged")
        return Counter(processed=0, failed=1)

    rows = scrape_listing(html)
    existing = catalog.load_catalog_if_exists(catalog_path)
    gods = build_catalog(rows, existing)
    catalog.save_catalog(gods, catalog_path)

    summary = Counter(
        processed=len(rows),
        created=len([g for g in gods if g["id"] not in {e.get("id") for e in existing}]),
        undated=len([g for g in gods if not g.get("releaseDate")]),
        total=len(gods),
    )
    catalog.log_summary("scrape-smite1", summary)
    return summary


def main():
    catalog.setup_logging()
    scrape_smite_gods()


if __name__ == "__main__":
    main()
