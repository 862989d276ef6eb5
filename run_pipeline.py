# run_pipeline.py
# Runs the tracker stages in order:
#   smite1 -> smite2 -> dates -> images -> pantheons
# or any subset of them (--stages). Exit code 1 only when the catalog itself
# cannot be read or written; per-god failures are logged and the run goes on.
#
# Usage:
#   python run_pipeline.py
#   python run_pipeline.py --stages images --god "Zeus" --dry-run
#   python run_pipeline.py --browser          # fetch wiki pages with headless Chromium
#   python run_pipeline.py --clean            # wipe images first

import argparse
import logging
import sys
from contextlib import ExitStack
from typing import List, Optional

import gods_catalog as catalog
from clean_images import clean_images
from download_images import download_images, kinds_from_args
from normalize_dates import normalize_catalog_dates
from pantheon_icons import download_pantheon_icons
from scrapeSmite2Wiki import scrape_smite2_gods
from scrapeSmiteWiki import scrape_smite_gods
from wiki_http import BrowserFetcher, fetch_html, set_min_interval

# ------------ Config -------------
STAGES = ["smite1", "smite2", "dates", "images", "pantheons"]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Scrape both SMITE wikis and track which gods were ported")
    ap.add_argument("--stages", nargs="+", choices=STAGES, default=STAGES,
                    help="stages to run (always in pipeline order)")
    ap.add_argument("--clean", action="store_true", help="remove all images and image paths before running")
    ap.add_argument("--browser", action="store_true", help="fetch wiki pages with headless Chromium")
    ap.add_argument("--headful", action="store_true", help="with --browser: show the browser window")
    ap.add_argument("--dry-run", action="store_true", help="images: resolve only, no downloads")
    ap.add_argument("--god", help="images: only this god (case-insensitive)")
    group = ap.add_mutually_exclusive_group()
    group.add_argument("--thumbnails-only", action="store_true")
    group.add_argument("--cards-only", action="store_true")
    ap.add_argument("--min-interval", type=float, default=None,
                    help="minimum seconds between requests (default 0.2)")
    return ap.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    if args.min_interval is not None:
        set_min_interval(args.min_interval)

    stages = [s for s in STAGES if s in args.stages]
    logging.info("Running stages: %s", ", ".join(stages))

    with ExitStack() as stack:
        fetch = fetch_html
        if args.browser:
            fetch = stack.enter_context(BrowserFetcher(headless=not args.headful))
            logging.info("Using headless browser for page fetches")

        if args.clean:
            clean_images()
        if "smite1" in stages:
            scrape_smite_gods(fetch=fetch)
        if "smite2" in stages:
            scrape_smite2_gods(fetch=fetch)
        if "dates" in stages:
            normalize_catalog_dates()
        if "images" in stages:
            # worker threads; a playwright page only works on the thread that opened it
            download_images(dry_run=args.dry_run, only=args.god, kinds=kinds_from_args(args), fetch=fetch_html)
        if "pantheons" in stages:
            download_pantheon_icons(fetch=fetch)

    status = catalog.status_counts(catalog.load_catalog())
    logging.info("Catalog: %d ported, %d not ported, %d exclusive",
                 status["ported"], status["not_ported"], status["exclusive"])


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    catalog.setup_logging()
    try:
        run(args)
    except catalog.CatalogError as e:
        logging.error("Fatal: %s", e)
        return 1
    logging.info("Done.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
