"""
Tests for the HTTP helpers (requests mocked with responses).
"""

import time

import pytest
import requests
import responses

from wiki_http import (
    BrowserFetcher,
    Pacer,
    download_file,
    fetch_html,
    is_cached,
    probe_url,
)


URL = "https://wiki.smite2.com/w/Zeus"
IMG = "https://wiki.smite2.com/images/T_Zeus_Default_Icon.png"


@pytest.fixture
def session():
    return requests.Session()


class TestFetchHtml:

    @responses.activate
    def test_ok(self, session):
        responses.add(responses.GET, URL, body="<html>Zeus</html>", status=200)
        assert fetch_html(URL, session) == "<html>Zeus</html>"

    @responses.activate
    def test_non_ok_is_none(self, session):
        responses.add(responses.GET, URL, status=404)
        assert fetch_html(URL, session) is None

    @responses.activate
    def test_network_error_is_none(self, session):
        responses.add(responses.GET, URL, body=requests.ConnectionError("boom"))
        assert fetch_html(URL, session) is None

    @responses.activate
    def test_default_session_sends_user_agent(self):
        responses.add(responses.GET, URL, body="ok")
        fetch_html(URL)
        assert "Mozilla/5.0" in responses.calls[0].request.headers["User-Agent"]


class TestProbeUrl:

    @responses.activate
    def test_200_is_present(self, session):
        responses.add(responses.HEAD, IMG, status=200)
        assert probe_url(IMG, session) is True

    @responses.activate
    def test_404_is_absent(self, session):
        responses.add(responses.HEAD, IMG, status=404)
        assert probe_url(IMG, session) is False

    @responses.activate
    def test_timeout_is_absent(self, session):
        responses.add(responses.HEAD, IMG, body=requests.Timeout())
        assert probe_url(IMG, session) is False


class TestDownloadFile:

    @responses.activate
    def test_writes_file(self, session, tmp_path):
        responses.add(responses.GET, IMG, body=b"\x89PNG data", status=200)
        target = tmp_path / "thumb" / "zeus.png"

        assert download_file(IMG, target, session) is True
        assert target.read_bytes() == b"\x89PNG data"
        assert is_cached(target)

    @responses.activate
    def test_failure_leaves_nothing_behind(self, session, tmp_path):
        """Should not leave a partial file that would later look cached."""
        responses.add(responses.GET, IMG, status=500)
        target = tmp_path / "zeus.png"

        assert download_file(IMG, target, session) is False
        assert not target.exists()
        assert not (tmp_path / "zeus.png.part").exists()


class TestPacer:

    def test_enforces_min_interval(self):
        pacer = Pacer(0.05)
        start = time.monotonic()
        pacer.wait()
        pacer.wait()
        pacer.wait()
        assert time.monotonic() - start >= 0.1

    def test_is_cached_missing(self, tmp_path):
        assert not is_cached(tmp_path / "nope.png")


class TestBrowserFetcher:

    def test_requires_with_block(self):
        with pytest.raises(RuntimeError):
            BrowserFetcher()(URL)
