# download_images.py
# Resolve + download god thumbnails and full cards from both wikis.
#
# Jobs per god: (smite1 thumb, smite1 card) when sourceAUrl is set,
#               (smite2 thumb, smite2 card) when sourceBUrl is set.
# Files:        public/images/gods/{smite1|smite2}/{thumb|card}/<slug>.png
# Stored paths: /images/gods/{smite1|smite2}/{thumb|card}/<slug>.png
#
# A non-empty local file counts as cached: its path is reused with no network call.
# Stored paths are only ever replaced by a new non-null path.
#
# Usage:
#   python download_images.py [--dry-run] [--god "Ah Muzen Cab"] [--thumbnails-only | --cards-only]

import argparse
import logging
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import gods_catalog as catalog
from asset_resolver import FULL_IMAGE, KINDS, SITE_A, SITE_B, THUMBNAIL, resolve
from wiki_http import Fetcher, Probe, download_file, fetch_html, is_cached, probe_url

# ------------ Config -------------
MAX_WORKERS = 5
DOWNLOAD_DELAY = 0.5   # seconds, after each download

PATH_FIELDS = {
    (SITE_A, THUMBNAIL): "sourceAThumbnailPath",
    (SITE_A, FULL_IMAGE): "sourceACardPath",
    (SITE_B, THUMBNAIL): "sourceBThumbnailPath",
    (SITE_B, FULL_IMAGE): "sourceBCardPath",
}
URL_FIELDS = {SITE_A: "sourceAUrl", SITE_B: "sourceBUrl"}

Downloader = Callable[[str, Path], bool]


def web_path(name: str, site: str, kind: str) -> str:
    return f"/images/gods/{site}/{kind}/{catalog.image_filename(name)}"


def local_path(images_root: Path, name: str, site: str, kind: str) -> Path:
    return images_root / "images" / "gods" / site / kind / catalog.image_filename(name)


def jobs_for(god: Dict, kinds: Iterable[str] = KINDS) -> List[Tuple[str, str]]:
    jobs = []
    for site in (SITE_A, SITE_B):
        if not god.get(URL_FIELDS[site]):
            continue
        for kind in KINDS:
            if kind in kinds:
                jobs.append((site, kind))
    return jobs


def preferred_paths(god: Dict) -> Dict[str, str]:
    """thumbnailPath / imagePath: source B first, then A. Never None."""
    out = {}
    thumb = god.get("sourceBThumbnailPath") or god.get("sourceAThumbnailPath")
    card = god.get("sourceBCardPath") or god.get("sourceACardPath")
    if thumb:
        out["thumbnailPath"] = thumb
    if card:
        out["imagePath"] = card
    return out


def process_god(god: Dict, images_root: Path, kinds: Iterable[str] = KINDS, dry_run: bool = False,
                probe: Probe = probe_url, fetch: Fetcher = fetch_html,
                download: Downloader = download_file, delay: float = DOWNLOAD_DELAY) -> Tuple[Dict[str, str], Counter]:
    """Returns (new path fields, counts) for one god. Does not touch god."""
    name = god["name"]
    updates: Dict[str, str] = {}
    counts = Counter()

    jobs = jobs_for(god, kinds)
    if not jobs:
        logging.debug("No wiki URLs for %s, skipping", name)
        counts["skipped"] += 1
        return updates, counts

    logging.info("Processing %s...", name)
    for site, kind in jobs:
        target = local_path(images_root, name, site, kind)
        path = web_path(name, site, kind)

        if is_cached(target):
            logging.debug("  %s %s already exists for %s", site, kind, name)
            counts["cached"] += 1
            updates[PATH_FIELDS[(site, kind)]] = path
            continue

        url = resolve(name, site, kind, detail_url=god.get(URL_FIELDS[site]), probe=probe, fetch=fetch)
        if not url:
            logging.warning("  No %s %s found for %s", site, kind, name)
            counts["failed"] += 1
            continue
        counts["resolved"] += 1

        if dry_run:
            logging.info("  Would download %s %s: %s", site, kind, url)
            continue

        if download(url, target):
            counts["downloaded"] += 1
            updates[PATH_FIELDS[(site, kind)]] = path
        else:
            logging.warning("  Could not download %s %s for %s", site, kind, name)
            counts["failed"] += 1
        if delay:
            time.sleep(delay)

    return updates, counts


def apply_updates(god: Dict, updates: Dict[str, str]) -> None:
    for field, value in updates.items():
        if value:
            god[field] = value
    for field, value in preferred_paths(god).items():
        god[field] = value


def download_images(catalog_path: Optional[Path] = None, images_root: Optional[Path] = None,
                    dry_run: bool = False, only: Optional[str] = None, kinds: Iterable[str] = KINDS,
                    probe: Probe = probe_url, fetch: Fetcher = fetch_html,
                    download: Downloader = download_file, max_workers: int = MAX_WORKERS,
                    delay: float = DOWNLOAD_DELAY) -> Counter:
    gods = catalog.load_catalog(catalog_path)
    images_root = images_root or catalog.IMAGES_ROOT
    kinds = tuple(kinds)

    selected = [g for g in gods if not only or g.get("name", "").casefold() == only.casefold()]
    if only and not selected:
        logging.error('God "%s" not found in the catalog', only)
        return Counter(processed=0)

    mode = "thumbnails only" if kinds == (THUMBNAIL,) else "cards only" if kinds == (FULL_IMAGE,) else "thumbnails and cards"
    logging.info("Downloading %s for %d gods%s", mode, len(selected), " (dry run)" if dry_run else "")

    summary = Counter(processed=0, resolved=0, downloaded=0, cached=0, skipped=0, failed=0)
    results: List[Tuple[Dict, Dict[str, str]]] = []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_god = {
            executor.submit(process_god, god, images_root, kinds, dry_run, probe, fetch, download, delay): god
            for god in selected
        }
        for future in as_completed(future_to_god):
            god = future_to_god[future]
            summary["processed"] += 1
            try:
                updates, counts = future.result()
            except Exception as e:
                logging.error("Image job failed for %s: %s", god.get("name"), e)
                summary["failed"] += 1
                continue
            summary.update(counts)
            results.append((god, updates))

    if dry_run:
        logging.info("Dry run: gods.json was not updated")
    else:
        for god, updates in results:
            apply_updates(god, updates)
        catalog.save_catalog(gods, catalog_path)

    with_images = len([g for g in gods if g.get("thumbnailPath") or g.get("imagePath")])
    logging.info("Gods with at least one image: %d/%d", with_images, len(gods))
    catalog.log_summary("download-images", summary)
    return summary


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Download god thumbnails and cards from both wikis")
    ap.add_argument("--dry-run", action="store_true", help="resolve URLs only; no downloads, no catalog write")
    ap.add_argument("--god", help="process a single god (case-insensitive name)")
    group = ap.add_mutually_exclusive_group()
    group.add_argument("--thumbnails-only", action="store_true")
    group.add_argument("--cards-only", action="store_true")
    return ap.parse_args(argv)


def kinds_from_args(args: argparse.Namespace) -> Tuple[str, ...]:
    if getattr(args, "thumbnails_only", False):
        return (THUMBNAIL,)
    if getattr(args, "cards_only", False):
        return (FULL_IMAGE,)
    return KINDS


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    catalog.setup_logging()
    download_images(dry_run=args.dry_run, only=args.god, kinds=kinds_from_args(args))


if __name__ == "__main__":
    main()
