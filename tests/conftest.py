"""
Shared fixtures: temp catalog files, no request pacing.
"""

import json

import pytest

import wiki_http


@pytest.fixture(autouse=True)
def no_pacing():
    wiki_http.set_min_interval(0)
    yield
    wiki_http.set_min_interval(wiki_http.MIN_REQUEST_INTERVAL)


@pytest.fixture
def catalog_path(tmp_path):
    return tmp_path / "data" / "gods.json"


@pytest.fixture
def write_catalog(catalog_path):
    def _write(gods):
        catalog_path.parent.mkdir(parents=True, exist_ok=True)
        catalog_path.write_text(json.dumps(gods), encoding="utf-8")
        return catalog_path
    return _write


@pytest.fixture
def read_catalog(catalog_path):
    def _read():
        return json.loads(catalog_path.read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def sample_gods():
    return [
        {"id": 1, "name": "Zeus", "pantheon": "Greek", "class": "Mage", "status": "not_ported",
         "releaseDate": "2012-05-31", "sourceAUrl": "https://smite.fandom.com/wiki/Zeus"},
        {"id": 2, "name": "Hera", "pantheon": "Greek", "class": "Mage", "status": "not_ported",
         "releaseDate": None, "sourceAUrl": "https://smite.fandom.com/wiki/Hera"},
        {"id": 3, "name": "Thor", "pantheon": "Norse", "class": "Assassin", "status": "ported",
         "releaseDate": "2013-01-05", "sourceAUrl": "https://smite.fandom.com/wiki/Thor",
         "sourceBUrl": "https://wiki.smite2.com/w/Thor", "portedDate": "2024-05-02"},
    ]
