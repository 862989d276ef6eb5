# clean_images.py
# Full image reset: delete every downloaded image directory and strip all
# image path fields from data/gods.json. The next image run starts from scratch.
#
# Usage:
#   python clean_images.py

import logging
import shutil
from collections import Counter
from pathlib import Path
from typing import List, Optional

import gods_catalog as catalog

IMAGE_DIRS = ("thumbnails", "gods", "pantheons")   # under <images_root>/images/


def clean_images(catalog_path: Optional[Path] = None, images_root: Optional[Path] = None) -> Counter:
    images_root = images_root or catalog.IMAGES_ROOT
    summary = Counter(dirs_removed=0, gods_cleaned=0)

    for name in IMAGE_DIRS:
        d = images_root / "images" / name
        if d.is_dir():
            shutil.rmtree(d)
            logging.info("Removed directory: %s", d)
            summary["dirs_removed"] += 1
        else:
            logging.debug("Directory not found or already removed: %s", d)

    gods: List[dict] = catalog.load_catalog(catalog_path)
    for god in gods:
        stripped = [f for f in catalog.IMAGE_FIELDS if f in god]
        for field in stripped:
            del god[field]
        if stripped:
            summary["gods_cleaned"] += 1
    catalog.save_catalog(gods, catalog_path)

    catalog.log_summary("clean-images", summary)
    return summary


def main():
    catalog.setup_logging()
    clean_images()


if __name__ == "__main__":
    main()
