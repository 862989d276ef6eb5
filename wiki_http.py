# wiki_http.py
# Network helpers shared by every stage: one paced requests.Session,
# HTML fetch, HEAD existence probe, streamed binary download,
# and an optional Playwright fetcher for pages that need a real browser.

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

import requests
from playwright.sync_api import sync_playwright, TimeoutError as PWTimeoutError

# ------------ Config -------------
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)
REQUEST_HEADERS = {"User-Agent": USER_AGENT}

FETCH_TIMEOUT = 10
PROBE_TIMEOUT = 5
DOWNLOAD_TIMEOUT = 15
MIN_REQUEST_INTERVAL = 0.2   # seconds between any two requests of a run
BROWSER_TIMEOUT = 60_000     # ms

Fetcher = Callable[[str], Optional[str]]
Probe = Callable[[str], bool]


class Pacer:
    """Thread-safe minimum interval between consecutive network operations."""

    def __init__(self, min_interval: float = MIN_REQUEST_INTERVAL):
        self.min_interval = min_interval
        self._lock = threading.Lock()
        self._last = 0.0

    def wait(self) -> None:
        with self._lock:
            delay = self._last + self.min_interval - time.monotonic()
            if delay > 0:
                time.sleep(delay)
            self._last = time.monotonic()


_pacer = Pacer()
_session: Optional[requests.Session] = None


def get_session() -> requests.Session:
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update(REQUEST_HEADERS)
    return _session


def set_min_interval(seconds: float) -> None:
    _pacer.min_interval = seconds


def fetch_html(url: str, session: Optional[requests.Session] = None) -> Optional[str]:
    """GET a page; None on any network error or non-2xx status."""
    sess = session or get_session()
    _pacer.wait()
    try:
        r = sess.get(url, timeout=FETCH_TIMEOUT)
    except requests.RequestException as e:
        logging.warning("Fetch failed: %s -> %s", url, e)
        return None
    if not r.ok:
        logging.warning("Non-OK response %s for %s", r.status_code, url)
        return None
    return r.text


def probe_url(url: str, session: Optional[requests.Session] = None) -> bool:
    """HEAD request; True only for a 200. Errors and timeouts count as absent."""
    sess = session or get_session()
    _pacer.wait()
    try:
        r = sess.head(url, timeout=PROBE_TIMEOUT, allow_redirects=True)
    except requests.RequestException as e:
        logging.debug("Probe failed: %s -> %s", url, e)
        return False
    logging.debug("Probe %s -> %s", url, r.status_code)
    return r.status_code == 200


def download_file(url: str, target: Path, session: Optional[requests.Session] = None) -> bool:
    """Stream url into target. Writes to a .part file first so a failed
    download never leaves a truncated file that would later look cached."""
    sess = session or get_session()
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(target.name + ".part")
    _pacer.wait()
    try:
        with sess.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT) as r:
            r.raise_for_status()
            with open(tmp, "wb") as f:
                for chunk in r.iter_content(65536):
                    if chunk:
                        f.write(chunk)
        tmp.replace(target)
    except (requests.RequestException, OSError) as e:
        logging.warning("Download failed: %s -> %s", url, e)
        tmp.unlink(missing_ok=True)
        return False
    logging.info("Downloaded: %s", target)
    return True


def is_cached(target: Path) -> bool:
    return target.exists() and target.stat().st_size > 0


# ------------ Browser fetch -------------
class BrowserFetcher:
    """Same contract as fetch_html, backed by headless Chromium.

    Usage:
        with BrowserFetcher() as fetch:
            html = fetch(url)
    """

    def __init__(self, headless: bool = True, timeout: int = BROWSER_TIMEOUT):
        self.headless = headless
        self.timeout = timeout
        self._pw = None
        self._browser = None
        self._page = None

    def __enter__(self) -> "BrowserFetcher":
        self._pw = sync_playwright().start()
        self._browser = self._pw.chromium.launch(headless=self.headless)
        context = self._browser.new_context(
            user_agent=USER_AGENT,
            locale="en-US",
            viewport={"width": 1400, "height": 900},
        )
        self._page = context.new_page()
        return self

    def __exit__(self, *exc) -> None:
        if self._browser is not None:
            self._browser.close()
        if self._pw is not None:
            self._pw.stop()
        self._browser = self._page = self._pw = None

    def __call__(self, url: str) -> Optional[str]:
        if self._page is None:
            raise RuntimeError("BrowserFetcher used outside of its with-block")
        _pacer.wait()
        try:
            resp = self._page.goto(url, wait_until="domcontentloaded", timeout=self.timeout)
        except PWTimeoutError as e:
            logging.warning("Load timeout for %s -> %s", url, e)
            return None
        except Exception as e:
            logging.warning("Navigation error for %s -> %s", url, e)
            return None
        if not (resp and resp.ok):
            logging.warning("Non-OK response %s for %s", resp.status if resp else None, url)
            return None
        self._page.wait_for_timeout(700)
        return self._page.content()
