# scrapeSmite2Wiki.py
# SMITE 2 wiki (wiki.smite2.com) -> port status for every god in data/gods.json
#
# For each catalog god (in catalog order) the FIRST SMITE 2 listing name that
# matches (name_matcher.matches) is taken; listing order = anchor order on the
# /w/Gods page with duplicates dropped.
#   no match                       -> not_ported  (sourceBUrl/portedDate removed)
#   match, releaseDate present     -> ported      (portedDate from the SMITE 2 page)
#   match, releaseDate null        -> exclusive
# Listing names matching no catalog god become new "exclusive" gods with fresh ids.
#
# Usage:
#   python scrapeSmite2Wiki.py

import logging
import re
from collections import Counter
from pathlib import Path
from typing import Callable, Dict, List, Optional

from bs4 import BeautifulSoup

import gods_catalog as catalog
from name_matcher import find_first_match, unmatched
from normalize_dates import normalize_date
from wiki_http import fetch_html

# ------------ Config -------------
GODS_URL = f"{catalog.SOURCE_B_BASE}/w/Gods"

GOD_HREF_RE = re.compile(r"^/w/[A-Z][a-zA-Z_']+(?:\s[A-Z][a-zA-Z_']+)?$")
NON_GOD_PAGES = {
    "Gods", "Items", "Game Modes", "Patch notes", "Gems", "SMITE 2", "Main Page",
    "Community", "Help", "Special", "Random", "Recent Changes", "Upload", "File",
    "Category", "Template", "User", "Talk", "Project", "MediaWiki", "System",
    "Interface", "Gadget", "Gadget definition",
}
NON_GOD_KEYWORDS = ("patch", "update", "news", "blog")
MIN_NAME_LEN, MAX_NAME_LEN = 3, 25

PANTHEON_RE = re.compile(
    r"\b(Greek|Egyptian|Norse|Hindu|Chinese|Roman|Maya|Celtic|Japanese|Arthurian|"
    r"Babylonian|Slavic|Voodoo|Polynesian|Yoruba|Korean|Arabian|Tales of Arabia)\b"
)
ROLE_TO_CLASS = {
    "Solo": "Warrior",
    "Jungle": "Assassin",
    "Mid": "Mage",
    "ADC": "Hunter",
    "Carry": "Hunter",
    "Support": "Guardian",
}
CATEGORY_ROLE_TO_CLASS = [
    ("Solo gods", "Warrior"),
    ("Jungle gods", "Assassin"),
    ("Mid gods", "Mage"),
    ("ADC gods", "Hunter"),
    ("Support gods", "Guardian"),
]
WG_CATEGORIES_RE = re.compile(r'"wgCategories":\[(.*?)\]')

Fetcher = Callable[[str], Optional[str]]


# ------------ Listing -------------
def parse_gods_listing(html: str) -> List[str]:
    soup = BeautifulSoup(html, "lxml")
    names: List[str] = []
    for a in soup.select('a[href^="/w/"]'):
        href = a.get("href") or ""
        if not GOD_HREF_RE.match(href):
            continue
        page_name = href.rsplit("/", 1)[-1]
        if not page_name:
            continue
        name = page_name.replace("_", " ").strip()

        low = name.lower()
        if name in NON_GOD_PAGES or any(k in low for k in NON_GOD_KEYWORDS):
            continue
        if len(name) < MIN_NAME_LEN or len(name) > MAX_NAME_LEN:
            continue
        if name not in names:
            names.append(name)
            logging.debug("Found SMITE 2 god: %s", name)
    logging.info("Found %d gods in SMITE 2", len(names))
    return names


# ------------ Detail page -------------
def _infobox_rows(soup: BeautifulSoup) -> List[tuple]:
    rows = []
    for table in soup.select("table.infobox"):
        for tr in table.find_all("tr"):
            cells = tr.find_all(["th", "td"])
            if len(cells) >= 2:
                rows.append((cells[0].get_text(strip=True), cells[1].get_text(" ", strip=True)))
    return rows


def parse_god_details(html: str) -> Dict[str, Optional[str]]:
    """Returns {"pantheon", "class", "portedDateRaw"}; Unknown/None when absent."""
    soup = BeautifulSoup(html, "lxml")
    pantheon = catalog.UNKNOWN
    god_class = catalog.UNKNOWN
    ported_raw: Optional[str] = None

    for header, value in _infobox_rows(soup):
        if header == "Pantheon:":
            m = PANTHEON_RE.search(value)
            if m:
                pantheon = m.group(1)
        elif header == "Roles:":
            for role, mapped in ROLE_TO_CLASS.items():
                if role in value:
                    god_class = mapped
                    break
        elif header == "Release date:":
            ported_raw = value.strip() or None

    if pantheon == catalog.UNKNOWN or god_class == catalog.UNKNOWN:
        m = WG_CATEGORIES_RE.search(html)
        if m:
            categories = m.group(1)
            if pantheon == catalog.UNKNOWN:
                for p in catalog.PANTHEON_KEYWORDS:
                    if f"{p} gods" in categories:
                        pantheon = p
                        break
            if god_class == catalog.UNKNOWN:
                for needle, mapped in CATEGORY_ROLE_TO_CLASS:
                    if needle in categories:
                        god_class = mapped
                        break

    return {"pantheon": pantheon, "class": god_class, "portedDateRaw": ported_raw}


def fetch_god_details(name: str, fetch: Fetcher = fetch_html) -> Optional[Dict[str, Optional[str]]]:
    """Parsed detail page, or None when the page could not be fetched."""
    url = catalog.source_b_url(name)
    logging.debug("  Fetching: %s", url)
    html = fetch(url)
    if not html:
        logging.warning("  Could not fetch %s; keeping stored values for %s", url, name)
        return None
    details = parse_god_details(html)
    logging.info("  %s: %s %s (%s)", name, details["pantheon"], details["class"], details["portedDateRaw"])
    return details


def ported_date_value(raw: Optional[str]) -> Optional[str]:
    """Canonical date when parseable, else the raw wiki text, else None."""
    if not raw or raw == catalog.UNKNOWN:
        return None
    return normalize_date(raw) or raw


# ------------ Reconcile -------------
def classify(god: Dict, matched: bool) -> str:
    if not matched:
        return catalog.STATUS_NOT_PORTED
    if god.get("releaseDate"):
        return catalog.STATUS_PORTED
    return catalog.STATUS_EXCLUSIVE


def reconcile(gods: List[Dict], smite2_names: List[str],
              details_for: Callable[[str], Optional[Dict[str, Optional[str]]]]) -> Counter:
    """Mutates gods in place and appends new exclusives. Returns counts.

    details_for returns None when a detail page could not be fetched; the
    god then keeps its stored portedDate.
    """
    summary = Counter(ported=0, not_ported=0, exclusive=0, new_exclusive=0)

    for god in gods:
        s2_name = find_first_match(god.get("name", ""), smite2_names)
        status = classify(god, s2_name is not None)
        god["status"] = status
        summary[status] += 1

        if s2_name is None:
            god.pop("sourceBUrl", None)
            god.pop("portedDate", None)
            continue

        logging.info("Fetching ported date for: %s (%s)", god["name"], s2_name)
        god["sourceBUrl"] = catalog.source_b_url(s2_name)
        if status == catalog.STATUS_PORTED and not god.get("sourceAUrl"):
            god["sourceAUrl"] = catalog.source_a_url(god["name"])

        details = details_for(s2_name)
        if details is None:
            summary["details_failed"] += 1
            continue
        ported = ported_date_value(details.get("portedDateRaw"))
        if ported:
            god["portedDate"] = ported
        else:
            god.pop("portedDate", None)

    exclusives = unmatched(smite2_names, [g.get("name", "") for g in gods])
    logging.info("Getting details for %d SMITE 2 exclusives...", len(exclusives))
    new_id = catalog.next_id(gods)
    for name in exclusives:
        logging.info("Fetching details for: %s", name)
        details = details_for(name)
        if details is None:
            summary["details_failed"] += 1
            details = {}
        god = {
            "id": new_id,
            "name": name,
            "pantheon": details.get("pantheon") or catalog.UNKNOWN,
            "class": details.get("class") or catalog.UNKNOWN,
            "status": catalog.STATUS_EXCLUSIVE,
            "releaseDate": None,
            "sourceBUrl": catalog.source_b_url(name),
        }
        ported = ported_date_value(details.get("portedDateRaw"))
        if ported:
            god["portedDate"] = ported
        gods.append(god)
        new_id += 1
        summary["exclusive"] += 1
        summary["new_exclusive"] += 1

    summary["total"] = len(gods)
    return summary


def scrape_smite2_gods(catalog_path: Optional[Path] = None, fetch: Fetcher = fetch_html) -> Counter:
    gods = catalog.load_catalog(catalog_path)

    logging.info("Fetching SMITE 2 gods from %s", GODS_URL)
    html = fetch(GODS_URL)
    smite2_names = parse_gods_listing(html) if html else []
    if not smite2_names:
        logging.error("SMITE 2 gods list empty or unreachable; catalog left unchanged")
        return Counter(processed=0, failed=1)

    summary = reconcile(gods, smite2_names, lambda name: fetch_god_details(name, fetch))
    catalog.save_catalog(gods, catalog_path)

    catalog.log_summary("scrape-smite2", summary)
    return summary


def main():
    catalog.setup_logging()
    scrape_smite2_gods()


if __name__ == "__main__":
    main()
