import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, abort, jsonify, render_template_string, request, send_file

import gods_catalog as catalog

# --------------------------------------------------------------------------------------
# Paths
# --------------------------------------------------------------------------------------
CATALOG_PATH = catalog.CATALOG_PATH
PANTHEONS_PATH = catalog.PANTHEONS_PATH
IMAGES_ROOT = catalog.IMAGES_ROOT / "images"   # serves /images/...

# --------------------------------------------------------------------------------------
# App
# --------------------------------------------------------------------------------------
app = Flask(__name__)

STATUS_LABELS = {
    catalog.STATUS_PORTED: "Ported",
    catalog.STATUS_NOT_PORTED: "Not ported",
    catalog.STATUS_EXCLUSIVE: "SMITE 2 exclusive",
}
SORT_KEYS = ("name", "pantheon", "class", "status", "releaseDate", "portedDate")

# --------------------------------------------------------------------------------------
# Utils
# --------------------------------------------------------------------------------------
def norm_rel(rel: str) -> str:
    return (rel or "").replace("\\", "/").lstrip("/")

def _arg(name: str) -> Optional[str]:
    v = (request.args.get(name) or "").strip()
    return v or None

# --------------------------------------------------------------------------------------
# Data loading
# --------------------------------------------------------------------------------------
@lru_cache(maxsize=1)
def load_gods() -> List[Dict]:
    try:
        return catalog.load_catalog(CATALOG_PATH)
    except catalog.CatalogError as e:
        logging.warning("No catalog to show: %s", e)
        return []

@lru_cache(maxsize=1)
def load_pantheons() -> Dict[str, Optional[str]]:
    if not PANTHEONS_PATH.exists():
        return {}
    try:
        rows = json.loads(PANTHEONS_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logging.warning("Failed reading %s: %s", PANTHEONS_PATH, e)
        return {}
    return {r["name"]: r.get("iconPath") for r in rows if isinstance(r, dict) and r.get("name")}

def clear_cache_if_requested():
    if request.args.get("reload") == "1":
        load_gods.cache_clear()
        load_pantheons.cache_clear()

# --------------------------------------------------------------------------------------
# Table logic
# --------------------------------------------------------------------------------------
def filter_gods(gods: List[Dict], status: Optional[str] = None, pantheon: Optional[str] = None,
                god_class: Optional[str] = None, q: Optional[str] = None) -> List[Dict]:
    out = []
    needle = (q or "").strip().casefold()
    for g in gods:
        if status and g.get("status") != status:
            continue
        if pantheon and g.get("pantheon") != pantheon:
            continue
        if god_class and g.get("class") != god_class:
            continue
        if needle and needle not in (g.get("name") or "").casefold():
            continue
        out.append(g)
    return out

def sort_gods(gods: List[Dict], sort: Optional[str] = None) -> List[Dict]:
    """sort = field name, "-" prefix for descending. Missing values always last."""
    sort = sort or "name"
    desc = sort.startswith("-")
    field = sort.lstrip("-")
    if field not in SORT_KEYS:
        field, desc = "name", False

    present = [g for g in gods if g.get(field)]
    missing = [g for g in gods if not g.get(field)]
    present.sort(key=lambda g: (str(g[field]).casefold(), g.get("id", 0)), reverse=desc)
    missing.sort(key=lambda g: (g.get("name") or "").casefold())
    return present + missing

def compute_stats(gods: List[Dict]) -> Dict[str, Any]:
    counts = catalog.status_counts(gods)
    # exclusives never existed in SMITE 1, so the port ratio ignores them
    base = counts[catalog.STATUS_PORTED] + counts[catalog.STATUS_NOT_PORTED]

    def pct(n: int) -> float:
        return round(100.0 * n / base, 1) if base else 0.0

    return {
        "total": len(gods),
        "ported": counts[catalog.STATUS_PORTED],
        "not_ported": counts[catalog.STATUS_NOT_PORTED],
        "exclusive": counts[catalog.STATUS_EXCLUSIVE],
        "ported_pct": pct(counts[catalog.STATUS_PORTED]),
        "not_ported_pct": pct(counts[catalog.STATUS_NOT_PORTED]),
    }

def compute_facets(gods: List[Dict]) -> Tuple[List[str], List[str]]:
    pantheons = sorted({g["pantheon"] for g in gods if g.get("pantheon")})
    classes = sorted({g["class"] for g in gods if g.get("class")})
    return pantheons, classes

def to_god_row(god: Dict) -> Dict:
    icons = load_pantheons()
    return {
        "id": god.get("id"),
        "name": god.get("name"),
        "pantheon": god.get("pantheon"),
        "pantheonIcon": icons.get(god.get("pantheon")),
        "class": god.get("class"),
        "status": god.get("status"),
        "statusLabel": STATUS_LABELS.get(god.get("status"), god.get("status")),
        "releaseDate": god.get("releaseDate"),
        "portedDate": god.get("portedDate"),
        "thumb": god.get("thumbnailPath"),
        "img": god.get("imagePath") or god.get("thumbnailPath"),
        "smite1": god.get("sourceAUrl"),
        "smite2": god.get("sourceBUrl"),
    }

def table_rows(gods: List[Dict], args: Dict[str, Optional[str]]) -> List[Dict]:
    rows = filter_gods(gods, args.get("status"), args.get("pantheon"), args.get("class"), args.get("q"))
    return [to_god_row(g) for g in sort_gods(rows, args.get("sort"))]

def request_filters() -> Dict[str, Optional[str]]:
    return {k: _arg(k) for k in ("status", "pantheon", "class", "q", "sort")}

# --------------------------------------------------------------------------------------
# Template
# --------------------------------------------------------------------------------------
INDEX_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Are we SMITE 2 yet?</title>
  <style>
    body { font-family: system-ui, sans-serif; margin: 2rem; background: #111; color: #eee; }
    .stats { display: flex; gap: 1rem; margin-bottom: 1.5rem; }
    .stat { background: #1d1d1d; border-radius: 8px; padding: .75rem 1.25rem; min-width: 9rem; }
    .stat b { display: block; font-size: 1.6rem; }
    form { margin-bottom: 1rem; display: flex; gap: .5rem; flex-wrap: wrap; }
    table { border-collapse: collapse; width: 100%; }
    th, td { padding: .35rem .6rem; border-bottom: 1px solid #2a2a2a; text-align: left; }
    th a { color: inherit; }
    img.thumb { width: 36px; height: 36px; border-radius: 4px; vertical-align: middle; }
    img.pantheon { width: 18px; height: 18px; vertical-align: middle; }
    .ported { color: #6fd16f; } .not_ported { color: #e06c6c; } .exclusive { color: #c9a0ff; }
  </style>
</head>
<body>
  <h1>Are we SMITE 2 yet?</h1>
  <div class="stats">
    <div class="stat"><b>{{ stats.total }}</b>Total gods</div>
    <div class="stat"><b>{{ stats.ported_pct }}%</b>Ported ({{ stats.ported }})</div>
    <div class="stat"><b>{{ stats.not_ported_pct }}%</b>Not ported ({{ stats.not_ported }})</div>
    <div class="stat"><b>{{ stats.exclusive }}</b>SMITE 2 exclusives</div>
  </div>

  <form method="get">
    <input type="search" name="q" placeholder="Search gods" value="{{ f.q or '' }}">
    <select name="status">
      <option value="">All statuses</option>
      {% for key, label in statuses %}
      <option value="{{ key }}" {% if f.status == key %}selected{% endif %}>{{ label }}</option>
      {% endfor %}
    </select>
    <select name="pantheon">
      <option value="">All pantheons</option>
      {% for p in pantheons %}
      <option {% if f.pantheon == p %}selected{% endif %}>{{ p }}</option>
      {% endfor %}
    </select>
    <select name="class">
      <option value="">All classes</option>
      {% for c in classes %}
      <option {% if f['class'] == c %}selected{% endif %}>{{ c }}</option>
      {% endfor %}
    </select>
    <input type="hidden" name="sort" value="{{ f.sort or '' }}">
    <button type="submit">Filter</button>
  </form>

  <table id="gods">
    <thead>
      <tr>
        <th></th>
        {% for key, label in columns %}
        <th><a href="?sort={% if f.sort == key %}-{% endif %}{{ key }}">{{ label }}</a></th>
        {% endfor %}
      </tr>
    </thead>
    <tbody>
      {% for g in rows %}
      <tr data-id="{{ g.id }}">
        <td>{% if g.thumb %}<img class="thumb" src="{{ g.thumb }}" alt="{{ g.name }}" loading="lazy">{% endif %}</td>
        <td>{% if g.smite2 %}<a href="{{ g.smite2 }}">{{ g.name }}</a>{% elif g.smite1 %}<a href="{{ g.smite1 }}">{{ g.name }}</a>{% else %}{{ g.name }}{% endif %}</td>
        <td>{% if g.pantheonIcon %}<img class="pantheon" src="{{ g.pantheonIcon }}" alt="">{% endif %} {{ g.pantheon }}</td>
        <td>{{ g['class'] }}</td>
        <td class="{{ g.status }}">{{ g.statusLabel }}</td>
        <td>{{ g.releaseDate or '' }}</td>
        <td>{{ g.portedDate or '' }}</td>
      </tr>
      {% else %}
      <tr><td colspan="7">No gods match.</td></tr>
      {% endfor %}
    </tbody>
  </table>
  <p>{{ rows|length }} of {{ stats.total }} gods shown.</p>
</body>
</html>
"""

COLUMNS = [
    ("name", "Name"),
    ("pantheon", "Pantheon"),
    ("class", "Class"),
    ("status", "Status"),
    ("releaseDate", "SMITE 1 release"),
    ("portedDate", "SMITE 2 release"),
]

def render_index(gods: List[Dict], f: Optional[Dict[str, Optional[str]]] = None) -> str:
    f = f or {}
    pantheons, classes = compute_facets(gods)
    return render_template_string(
        INDEX_HTML,
        rows=table_rows(gods, f),
        stats=compute_stats(gods),
        pantheons=pantheons,
        classes=classes,
        statuses=list(STATUS_LABELS.items()),
        columns=COLUMNS,
        f=f,
    )

# --------------------------------------------------------------------------------------
# Images
# --------------------------------------------------------------------------------------
def secure_path_under(root: Path, rel: str) -> Optional[Path]:
    rel = norm_rel(rel)
    target = root.joinpath(*rel.split("/")).resolve()
    root_resolved = root.resolve()
    if target != root_resolved and root_resolved not in target.parents:
        return None
    if not target.is_file():
        return None
    return target

@app.route("/images/<path:relpath>")
def serve_image(relpath: str):
    full = secure_path_under(IMAGES_ROOT, relpath)
    if not full:
        abort(404)
    resp = send_file(str(full))
    resp.headers["Cache-Control"] = "public, max-age=86400"
    return resp

@app.route("/__exists")
def exists_probe():
    rel = request.args.get("rel", "")
    rel = norm_rel(rel)
    if rel.startswith("images/"):
        rel = rel[len("images/"):]
    full = secure_path_under(IMAGES_ROOT, rel)
    ok = bool(full)
    logging.debug("[EXISTS] rel=%r -> %s exists=%s", rel, full, ok)
    return jsonify({"exists": ok})

# --------------------------------------------------------------------------------------
# Routes
# --------------------------------------------------------------------------------------
@app.route("/")
def home():
    clear_cache_if_requested()
    return render_index(load_gods(), request_filters())

# -------- JSON APIs --------
@app.route("/api/gods")
def api_gods():
    clear_cache_if_requested()
    gods = load_gods()
    return jsonify({
        "stats": compute_stats(gods),
        "gods": table_rows(gods, request_filters()),
    })

@app.route("/api/gods/<int:god_id>")
def api_god(god_id: int):
    god = next((g for g in load_gods() if g.get("id") == god_id), None)
    if not god:
        abort(404)
    return jsonify(god)

# --------------------------------------------------------------------------------------
# Main
# --------------------------------------------------------------------------------------
if __name__ == "__main__":
    catalog.setup_logging()
    logging.info("Serving gods from: %s", CATALOG_PATH)
    logging.info("Serving images from: %s", IMAGES_ROOT)
    app.run(debug=True)
