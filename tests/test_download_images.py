"""
Tests for the image stage: caching, path preference, dry runs, filters.
"""

from download_images import (
    apply_updates,
    download_images,
    jobs_for,
    local_path,
    preferred_paths,
    web_path,
)


class FakeDownloader:

    def __init__(self, ok=True):
        self.ok = ok
        self.calls = []

    def __call__(self, url, target):
        self.calls.append((url, target))
        if self.ok:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"png")
        return self.ok


def probe_all(url):
    return True


def probe_none(url):
    return False


def fetch_none(url):
    return None


def run(catalog_path, images_root, **kw):
    kw.setdefault("probe", probe_all)
    kw.setdefault("fetch", fetch_none)
    kw.setdefault("delay", 0)
    return download_images(catalog_path, images_root, **kw)


class TestHelpers:

    def test_paths(self, tmp_path):
        assert web_path("Ah Muzen Cab", "smite2", "thumb") == "/images/gods/smite2/thumb/ah_muzen_cab.png"
        assert local_path(tmp_path, "Chang'e", "smite1", "card") == (
            tmp_path / "images" / "gods" / "smite1" / "card" / "chang_e.png"
        )

    def test_jobs_follow_source_urls(self):
        god = {"name": "Zeus", "sourceAUrl": "a", "sourceBUrl": "b"}
        assert jobs_for(god) == [("smite1", "thumb"), ("smite1", "card"), ("smite2", "thumb"), ("smite2", "card")]
        assert jobs_for({"name": "Baldur", "sourceBUrl": "b"}, kinds=("thumb",)) == [("smite2", "thumb")]
        assert jobs_for({"name": "Nobody"}) == []

    def test_preferred_paths_source_b_first(self):
        god = {"sourceAThumbnailPath": "/a/t.png", "sourceBThumbnailPath": "/b/t.png", "sourceACardPath": "/a/c.png"}
        assert preferred_paths(god) == {"thumbnailPath": "/b/t.png", "imagePath": "/a/c.png"}

    def test_apply_updates_never_clears(self):
        god = {"thumbnailPath": "/old.png", "sourceBThumbnailPath": "/old.png"}
        apply_updates(god, {})
        assert god["thumbnailPath"] == "/old.png"
        assert "imagePath" not in god


class TestDownloadImages:

    def test_downloads_and_records_paths(self, sample_gods, write_catalog, read_catalog, catalog_path, tmp_path):
        write_catalog(sample_gods)
        download = FakeDownloader()

        summary = run(catalog_path, tmp_path / "public", download=download)

        thor = read_catalog()[2]
        assert thor["sourceAThumbnailPath"] == "/images/gods/smite1/thumb/thor.png"
        assert thor["sourceBCardPath"] == "/images/gods/smite2/card/thor.png"
        assert thor["thumbnailPath"] == "/images/gods/smite2/thumb/thor.png"
        assert thor["imagePath"] == "/images/gods/smite2/card/thor.png"
        zeus = read_catalog()[0]
        assert zeus["thumbnailPath"] == "/images/gods/smite1/thumb/zeus.png"
        assert summary["processed"] == 3
        assert summary["downloaded"] == 8
        assert len(download.calls) == 8

    def test_cached_files_skip_network(self, sample_gods, write_catalog, read_catalog, catalog_path, tmp_path):
        """Should reuse a non-empty local file without probing or downloading."""
        write_catalog([sample_gods[0]])
        root = tmp_path / "public"
        for kind in ("thumb", "card"):
            target = local_path(root, "Zeus", "smite1", kind)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"png")

        def probe(url):
            raise AssertionError("probed a cached image")

        download = FakeDownloader()
        summary = run(catalog_path, root, probe=probe, download=download)

        assert download.calls == []
        assert summary["cached"] == 2
        assert read_catalog()[0]["imagePath"] == "/images/gods/smite1/card/zeus.png"

    def test_empty_file_is_not_cached(self, sample_gods, write_catalog, catalog_path, tmp_path):
        write_catalog([sample_gods[0]])
        root = tmp_path / "public"
        target = local_path(root, "Zeus", "smite1", "thumb")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.touch()

        summary = run(catalog_path, root, download=FakeDownloader(), kinds=("thumb",))

        assert summary["cached"] == 0
        assert summary["downloaded"] == 1

    def test_misses_keep_existing_paths(self, sample_gods, write_catalog, read_catalog, catalog_path, tmp_path):
        """Should never overwrite a stored path with nothing."""
        thor = dict(sample_gods[2], thumbnailPath="/images/old.png", imagePath="/images/old_card.png")
        write_catalog([thor])

        summary = run(catalog_path, tmp_path / "public", probe=probe_none, download=FakeDownloader())

        stored = read_catalog()[0]
        assert stored["thumbnailPath"] == "/images/old.png"
        assert stored["imagePath"] == "/images/old_card.png"
        assert summary["failed"] == 4
        assert summary["resolved"] == 0

    def test_failed_download_keeps_existing_paths(self, sample_gods, write_catalog, read_catalog, catalog_path, tmp_path):
        zeus = dict(sample_gods[0], sourceAThumbnailPath="/images/old.png", thumbnailPath="/images/old.png")
        write_catalog([zeus])

        summary = run(catalog_path, tmp_path / "public", download=FakeDownloader(ok=False))

        stored = read_catalog()[0]
        assert stored["sourceAThumbnailPath"] == "/images/old.png"
        assert stored["thumbnailPath"] == "/images/old.png"
        assert summary["failed"] == 2

    def test_dry_run_writes_nothing(self, sample_gods, write_catalog, read_catalog, catalog_path, tmp_path):
        write_catalog(sample_gods)
        download = FakeDownloader()

        summary = run(catalog_path, tmp_path / "public", download=download, dry_run=True)

        assert download.calls == []
        assert summary["resolved"] == 8
        assert read_catalog() == sample_gods

    def test_only_one_god(self, sample_gods, write_catalog, read_catalog, catalog_path, tmp_path):
        write_catalog(sample_gods)
        download = FakeDownloader()

        summary = run(catalog_path, tmp_path / "public", download=download, only="zEUS", kinds=("card",))

        assert summary["processed"] == 1
        assert [t.name for _, t in download.calls] == ["zeus.png"]
        gods = read_catalog()
        assert gods[0]["imagePath"] == "/images/gods/smite1/card/zeus.png"
        assert "imagePath" not in gods[1]

    def test_unknown_god(self, sample_gods, write_catalog, catalog_path, tmp_path):
        write_catalog(sample_gods)
        assert run(catalog_path, tmp_path / "public", only="Nobody")["processed"] == 0
