# asset_resolver.py
# God name -> remote image URL (thumbnail or full card) on either wiki.
#
# Cascade, first accepted candidate wins:
#   1. templated URLs for every name variant, each checked with a HEAD probe
#   2. scan of the god's detail page (fetched only if step 1 found nothing)
# Nothing found -> None; callers keep whatever path they already had.

import logging
import re
from typing import Callable, Dict, Iterator, List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup

import gods_catalog as catalog
from wiki_http import Fetcher, Probe, fetch_html, probe_url

# ------------ Config -------------
SITE_A = "smite1"
SITE_B = "smite2"
SITES = (SITE_A, SITE_B)

THUMBNAIL = "thumb"
FULL_IMAGE = "card"
KINDS = (THUMBNAIL, FULL_IMAGE)

SOURCE_A_IMAGES = "https://static.wikia.nocookie.net/smite_gamepedia/images"
SOURCE_B_IMAGES = f"{catalog.SOURCE_B_BASE}/images"

TEMPLATES: Dict[Tuple[str, str], List[str]] = {
    (SITE_A, THUMBNAIL): [SOURCE_A_IMAGES + "/T_{v}_Default_Icon.png"],
    (SITE_A, FULL_IMAGE): [SOURCE_A_IMAGES + "/T_{v}_Default_Card.png"],
    (SITE_B, THUMBNAIL): [
        SOURCE_B_IMAGES + "/T_{v}%28S2%29_Default_Icon.png",
        SOURCE_B_IMAGES + "/T_{v}_Default_Icon.png",
    ],
    (SITE_B, FULL_IMAGE): [
        SOURCE_B_IMAGES + "/T_{v}S2_Default.png",
        SOURCE_B_IMAGES + "/T_{v}_Default.png",
        SOURCE_B_IMAGES + "/GodCard_{v}.png",
    ],
}

# File tokens the wikis use for multi-word names. Tried before the generic variants.
_JOINED = {
    "Ah Puch": "AhPuch",
    "Chang'e": "Change",
    "Cu Chulainn": "CuChulainn",
    "Da Ji": "DaJi",
    "Erlang Shen": "ErlangShen",
    "He Bo": "HeBo",
    "Hou Yi": "HouYi",
    "Ix Chel": "IxChel",
    "Jing Wei": "JingWei",
    "King Arthur": "KingArthur",
    "Maman Brigitte": "MamanBrigitte",
    "Morgan Le Fay": "MorganLeFay",
    "Ne Zha": "NeZha",
    "Sun Wukong": "SunWukong",
    "Xing Tian": "XingTian",
    "Yu Huang": "YuHuang",
    "Zhong Kui": "ZhongKui",
    "Baba Yaga": "BabaYaga",
    "Bake Kujira": "BakeKujira",
}
SPECIAL_NAMES: Dict[str, Dict[str, str]] = {
    SITE_A: {
        **_JOINED,
        "Ah Muzen Cab": "AMC",
        "Guan Yu": "GuanYu",
        "Hun Batz": "HunBatz",
        "Nu Wa": "NuWa",
        "The Morrigan": "TheMorrigan",
        "Baron Samedi": "BaronSamedi",
        "Princess Bari": "PrincessBari",
    },
    SITE_B: {
        **_JOINED,
        "Ah Muzen Cab": "AhMuzenCab",
        "Guan Yu": "Guan_Yu",
        "Hun Batz": "Hun_Batz",
        "Nu Wa": "Nu_Wa",
        "The Morrigan": "The_Morrigan",
        "Baron Samedi": "Baron_Samedi",
        "Princess Bari": "Princess_Bari",
    },
}

SOURCE_A_STATIC_RE = re.compile(
    r"https://static\.wikia\.nocookie\.net/smite_gamepedia/images/[^\"'\s)]+", re.IGNORECASE
)
A_SKIP_ALWAYS = ("Icons_", "Ability_", "Item_")
A_FULL_PREFER_RE = re.compile(r"Card_|Default|\d{3}x\d{3}|250px")
B_THUMB_SIZE_RE = re.compile(r"/\d+px-")

Generator = Callable[[str, str, str, Optional[str], Fetcher], Iterator[str]]


# ------------ Name variants -------------
def name_variants(name: str, site: str) -> List[str]:
    variants = []
    special = SPECIAL_NAMES.get(site, {}).get(name)
    if special:
        variants.append(special)
    variants += [
        name,
        re.sub(r"[^a-zA-Z0-9]", "", name),
        re.sub(r"\s+", "", name),
        re.sub(r"['\s]", "", name),
        re.sub(r"[^a-zA-Z]", "", name),
        re.sub(r"\s+", "_", name),
        re.sub(r"\s+", "_", re.sub(r"[^a-zA-Z0-9\s]", "", name)),
    ]
    out: List[str] = []
    for v in variants:
        if v and v not in out:
            out.append(v)
    return out


def _squash(text: str) -> str:
    return re.sub(r"[^a-z0-9]", "", text.lower())


def candidate_urls(name: str, site: str, kind: str) -> Iterator[str]:
    for v in name_variants(name, site):
        for template in TEMPLATES[(site, kind)]:
            yield template.format(v=v)


def detail_page_url(name: str, site: str) -> str:
    return catalog.source_a_url(name) if site == SITE_A else catalog.source_b_url(name)


# ------------ Page scans -------------
def scan_source_a_page(html: str, name: str, kind: str) -> Iterator[str]:
    soup = BeautifulSoup(html, "lxml")
    suffix = "_default_icon.png" if kind == THUMBNAIL else "_default_card.png"
    wanted = [_squash(v) for v in name_variants(name, SITE_A)]

    for img in soup.select("img[data-image-key]"):
        key = (img.get("data-image-key") or "").lower()
        src = img.get("data-src") or img.get("src") or ""
        if not key.endswith(suffix) or not src:
            continue
        part = key[:-len(suffix)]
        if part.startswith("t_"):
            part = part[2:]
        part = _squash(part)
        if part and any(w and (w == part or w in part or part in w) for w in wanted):
            yield src.split("/revision/latest")[0] + "/revision/latest"

    urls = [u for u in SOURCE_A_STATIC_RE.findall(html)
            if not any(s in u for s in A_SKIP_ALWAYS)]
    if kind == THUMBNAIL:
        for v in name_variants(name, SITE_A):
            for u in urls:
                if f"T_{v}_Default_Icon" in u:
                    yield u
    else:
        urls = [u for u in urls if "_Icon" not in u]
        for u in urls:
            if A_FULL_PREFER_RE.search(u):
                yield u


def scan_source_b_page(html: str, name: str, kind: str) -> Iterator[str]:
    if kind == THUMBNAIL:
        clean = re.sub(r"[^a-zA-Z0-9]", "", name)
        icon = re.compile(
            rf"/images/thumb/T_{re.escape(clean)}%28S2%29_Default_Icon\.png/35px-"
            rf"T_{re.escape(clean)}%28S2%29_Default_Icon\.png[^\"'\s]*"
        )
        m = icon.search(html)
        if m:
            yield urljoin(catalog.SOURCE_B_BASE, m.group(0))
        card = re.compile(rf"/images/thumb/T_{re.escape(clean)}S2_Default[^\"'\s]*")
        m = card.search(html)
        if m:
            yield urljoin(catalog.SOURCE_B_BASE, B_THUMB_SIZE_RE.sub("/35px-", m.group(0)))

    soup = BeautifulSoup(html, "lxml")
    img = soup.select_one("table.infobox img")
    if img is not None and img.get("src"):
        yield urljoin(catalog.SOURCE_B_BASE, img["src"])


def _template_step(name: str, site: str, kind: str, detail_url: Optional[str], fetch: Fetcher) -> Iterator[str]:
    return candidate_urls(name, site, kind)


def _page_step(name: str, site: str, kind: str, detail_url: Optional[str], fetch: Fetcher) -> Iterator[str]:
    url = detail_url or detail_page_url(name, site)
    logging.debug("Scanning %s for %s %s", url, name, kind)
    html = fetch(url)
    if not html:
        return
    scan = scan_source_a_page if site == SITE_A else scan_source_b_page
    yield from scan(html, name, kind)


# (step name, candidate generator, probe each candidate?)
CASCADE: List[Tuple[str, Generator, bool]] = [
    ("templates", _template_step, True),
    ("page scan", _page_step, False),
]


def resolve(name: str, site: str, kind: str, detail_url: Optional[str] = None,
            probe: Probe = probe_url, fetch: Fetcher = fetch_html) -> Optional[str]:
    """Return the first usable image URL for name on site, or None."""
    if site not in SITES or kind not in KINDS:
        raise ValueError(f"Unknown site/kind: {site}/{kind}")

    for step, generate, needs_probe in CASCADE:
        for url in generate(name, site, kind, detail_url, fetch):
            if needs_probe and not probe(url):
                continue
            logging.info("Found %s %s for %s via %s: %s", site, kind, name, step, url)
            return url
    logging.debug("No %s %s found for %s", site, kind, name)
    return None
