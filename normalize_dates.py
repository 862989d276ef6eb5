# normalize_dates.py
# Free-text wiki dates -> canonical YYYY-MM-DD, plus the catalog stage that
# rewrites every stored releaseDate / portedDate in that form.
#
# Usage:
#   python normalize_dates.py

import logging
import re
from collections import Counter
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from dateutil import parser as dateparser

import gods_catalog as catalog

CANONICAL_FORMAT = "%Y-%m-%d"
CANONICAL_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

EMPTY_MARKERS = ("missing", "unreleased")

# Tried in order; first successful parse wins.
FULL_FORMATS = [
    "%B %d, %Y",    # May 2, 2024
    "%B %d %Y",     # May 2 2024
    "%b %d, %Y",    # Sep 10, 2015
    "%b %d %Y",
    "%d %B, %Y",    # 2 May, 2024
    "%d %B %Y",
    "%d %b %Y",
    "%Y-%m-%d",     # 2024-05-02
    "%m/%d/%Y",     # 05/02/2024
]
MONTH_DAY_FORMATS = ["%B %d", "%b %d"]     # current year
MONTH_YEAR_FORMATS = ["%B %Y", "%b %Y"]    # day 1

ORDINAL_RE = re.compile(r"(\d+)(st|nd|rd|th)", re.IGNORECASE)


def clean_date_text(raw: str) -> str:
    text = re.sub(r"\s+", " ", raw).strip()
    text = re.sub(r"\.$", "", text)
    return ORDINAL_RE.sub(r"\1", text)


def _try_formats(text: str, today: date) -> Optional[date]:
    for fmt in FULL_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    # strptime without a year defaults to 1900 (no Feb 29), so append the year instead
    for fmt in MONTH_DAY_FORMATS:
        try:
            return datetime.strptime(f"{text} {today.year}", f"{fmt} %Y").date()
        except ValueError:
            continue
    for fmt in MONTH_YEAR_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(raw: Optional[str], today: Optional[date] = None) -> Optional[str]:
    """Return the canonical YYYY-MM-DD form of raw, or None.

    None means either "intentionally empty" (blank, Missing, Unreleased) or
    "could not be parsed"; only the log tells them apart.
    """
    if raw is None:
        return None
    if not raw.strip():
        return None
    low = raw.lower()
    if any(marker in low for marker in EMPTY_MARKERS):
        logging.debug("Date marked empty: %r", raw)
        return None

    today = today or date.today()
    text = clean_date_text(raw)

    parsed = _try_formats(text, today)
    if parsed is None:
        try:
            parsed = dateparser.parse(text, default=datetime(today.year, 1, 1)).date()
        except (ValueError, OverflowError):
            parsed = None

    if parsed is None:
        logging.warning('Could not parse date: "%s"', raw)
        return None
    return parsed.strftime(CANONICAL_FORMAT)


def is_canonical(value: Optional[str]) -> bool:
    return bool(value) and bool(CANONICAL_RE.match(value))


# ------------ Stage -------------
def normalize_catalog_dates(catalog_path: Optional[Path] = None) -> Counter:
    gods: List[dict] = catalog.load_catalog(catalog_path)
    logging.info("Normalizing dates for %d gods...", len(gods))

    summary = Counter(processed=0, release_normalized=0, ported_normalized=0, ported_total=0)
    for god in gods:
        summary["processed"] += 1

        release = god.get("releaseDate")
        if release:
            canon = normalize_date(release)
            if canon:
                god["releaseDate"] = canon
                summary["release_normalized"] += 1
            else:
                logging.warning("Keeping unparsed releaseDate for %s: %r", god.get("name"), release)

        ported = god.get("portedDate")
        if ported:
            summary["ported_total"] += 1
            canon = normalize_date(ported)
            if canon:
                god["portedDate"] = canon
                summary["ported_normalized"] += 1
            # otherwise keep the raw text ("Unreleased", "TBA", ...)

    catalog.save_catalog(gods, catalog_path)
    logging.info("Normalized %d/%d ported dates", summary["ported_normalized"], summary["ported_total"])
    catalog.log_summary("normalize-dates", summary)
    return summary


def main():
    catalog.setup_logging()
    normalize_catalog_dates()


if __name__ == "__main__":
    main()
