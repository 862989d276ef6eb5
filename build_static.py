#!/usr/bin/env python3
import json, logging, shutil
from pathlib import Path
from contextlib import contextmanager
from typing import Optional

import gods_catalog as catalog
import gods_site as site

ROOT = Path(__file__).resolve().parent
DIST = ROOT / "dist"

@contextmanager
def ctx():
    with site.app.app_context():
        yield

def ensure_clean_dir(p: Path):
    if p.exists():
        shutil.rmtree(p)
    p.mkdir(parents=True, exist_ok=True)

def build(dist: Optional[Path] = None) -> Path:
    dist = dist or DIST
    api = dist / "api"
    ensure_clean_dir(dist)
    (api / "gods").mkdir(parents=True, exist_ok=True)

    # copy downloaded images (public/images/**)
    if site.IMAGES_ROOT.exists():
        shutil.copytree(site.IMAGES_ROOT, dist / "images", dirs_exist_ok=True)
    else:
        logging.warning("Images folder not found at %s", site.IMAGES_ROOT)

    site.load_gods.cache_clear()
    site.load_pantheons.cache_clear()
    with ctx():
        gods = site.load_gods()

        # HOME (unfiltered, sorted by name; filtering is a server feature)
        (dist / "index.html").write_text(site.render_index(gods), encoding="utf-8")

        # JSON endpoints (static)
        payload = {"stats": site.compute_stats(gods), "gods": site.table_rows(gods, {})}
        (api / "gods.json").write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
        for g in gods:
            (api / "gods" / f"{g['id']}.json").write_text(json.dumps(g, ensure_ascii=False), encoding="utf-8")

    headers = dist / "_headers"
    headers.write_text(
        "/images/*\n  Cache-Control: public, max-age=86400\n",
        encoding="utf-8",
    )
    logging.info("Built %d gods -> %s", len(gods), dist)
    return dist

def main():
    catalog.setup_logging()
    build()

if __name__ == "__main__":
    main()
