"""Tests for the catalog service."""

from pathlib import Path

import pytest

from fileserver.classification import FileCategory
from fileserver.config import ServerConfig
from fileserver.exceptions import NotFoundError, ValidationError
from fileserver.services.catalog_service import CatalogService, validate_filename


BASE_MTIME = 1_700_000_000


class TestScan:
    """Directory scanning and metadata derivation."""

    def test_scan_reconstructs_metadata(self, catalog, make_stored_file):
        make_stored_file("1718000000000-abc123-my-photo.PNG", b"12345")

        files = catalog.scan()

        assert len(files) == 1
        stored = files[0]
        assert stored.stored_name == "1718000000000-abc123-my-photo.PNG"
        assert stored.original_name == "my-photo.PNG"
        assert stored.size == 5
        assert stored.category == FileCategory.IMAGE
        assert stored.extension == ".png"

    def test_scan_skips_directories(self, catalog, make_stored_file, upload_dir):
        make_stored_file("1-a-file.txt")
        (upload_dir / "subdir").mkdir()

        assert [f.stored_name for f in catalog.scan()] == ["1-a-file.txt"]

    def test_missing_directory_is_empty_catalog(self, tmp_path):
        catalog = CatalogService(ServerConfig(upload_path=tmp_path / "missing"))

        assert catalog.scan() == []
        assert catalog.list_files().total_files == 0

    def test_file_added_out_of_band_appears(self, catalog, make_stored_file):
        assert catalog.scan() == []
        make_stored_file("manual.bin")
        assert len(catalog.scan()) == 1


class TestListFiles:
    """Filtering, ordering and pagination."""

    def test_sorted_most_recent_first(self, catalog, make_stored_file):
        make_stored_file("1-a-old.txt", mtime=BASE_MTIME)
        make_stored_file("1-b-new.txt", mtime=BASE_MTIME + 100)
        make_stored_file("1-c-mid.txt", mtime=BASE_MTIME + 50)

        page = catalog.list_files()

        assert [f.original_name for f in page.files] == ["new.txt", "mid.txt", "old.txt"]

    def test_type_filter(self, catalog, make_stored_file):
        make_stored_file("1-a-a.png")
        make_stored_file("1-a-b.mp4")
        make_stored_file("1-a-c.jpg")

        page = catalog.list_files(type_filter=FileCategory.IMAGE)

        assert page.total_files == 2
        assert {f.category for f in page.files} == {FileCategory.IMAGE}

    def test_pagination_of_250_files(self, catalog, make_stored_file):
        for i in range(250):
            make_stored_file(f"{i}-tok-file{i}.txt", mtime=BASE_MTIME + i)

        first = catalog.list_files(page=1, limit=100)
        assert len(first.files) == 100
        assert first.has_next is True
        assert first.has_prev is False
        assert first.total_pages == 3
        assert first.total_files == 250
        assert first.files[0].original_name == "file249.txt"

        last = catalog.list_files(page=3, limit=100)
        assert len(last.files) == 50
        assert last.has_next is False
        assert last.has_prev is True
        assert last.total_pages == 3
        assert last.files[-1].original_name == "file0.txt"

    def test_page_past_the_end_is_empty(self, catalog, make_stored_file):
        make_stored_file("1-a-a.txt")

        page = catalog.list_files(page=5, limit=10)

        assert page.files == []
        assert page.has_prev is True
        assert page.has_next is False

    def test_empty_catalog_has_zero_pages(self, catalog):
        page = catalog.list_files()

        assert page.total_pages == 0
        assert page.has_next is False
        assert page.has_prev is False

    @pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (-1, 5)])
    def test_invalid_page_or_limit(self, catalog, page, limit):
        with pytest.raises(ValidationError):
            catalog.list_files(page=page, limit=limit)


class TestStorageInfo:

    def test_totals_and_counts(self, catalog, make_stored_file):
        make_stored_file("1-a-a.png", b"123")
        make_stored_file("1-a-b.png", b"45")
        make_stored_file("1-a-c.zip", b"6")

        info = catalog.storage_info()

        assert info.total_files == 3
        assert info.total_size == 6
        assert info.files_by_type["image"] == 2
        assert info.files_by_type["archive"] == 1
        assert info.files_by_type["video"] == 0
        assert info.max_files_per_request == 50


class TestDelete:
    """Single and batch deletion."""

    @pytest.mark.parametrize("name", ["../../etc/passwd", "a/b", "a\\b", "..", ""])
    def test_path_safety(self, catalog, name):
        with pytest.raises(ValidationError):
            catalog.delete_file(name)

    @pytest.mark.parametrize("name", ["../../etc/passwd", "a/b", "a\\b"])
    def test_path_safety_independent_of_filesystem(self, tmp_path, name):
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "b").write_text("x")
        catalog = CatalogService(ServerConfig(upload_path=tmp_path))

        with pytest.raises(ValidationError):
            catalog.delete_file(name)
        assert (tmp_path / "a" / "b").exists()

    def test_validate_filename_accepts_stored_names(self):
        validate_filename("1718000000000-abc123-photo.v2.png")

    def test_delete_removes_file(self, catalog, make_stored_file):
        path = make_stored_file("1-a-doomed.txt")

        assert catalog.delete_file("1-a-doomed.txt") == "1-a-doomed.txt"
        assert not path.exists()

    def test_delete_missing_file(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.delete_file("missing.txt")

    def test_second_delete_is_not_found(self, catalog, make_stored_file):
        make_stored_file("1-a-once.txt")
        catalog.delete_file("1-a-once.txt")

        with pytest.raises(NotFoundError):
            catalog.delete_file("1-a-once.txt")

    def test_delete_directory_is_not_found(self, catalog, upload_dir):
        (upload_dir / "folder").mkdir()

        with pytest.raises(NotFoundError):
            catalog.delete_file("folder")
        assert (upload_dir / "folder").exists()

    def test_file_vanishing_before_unlink_is_not_found(self, catalog, upload_dir, monkeypatch):
        monkeypatch.setattr(
            CatalogService, "resolve_existing", lambda self, name: upload_dir / "gone.txt"
        )

        with pytest.raises(NotFoundError):
            catalog.delete_file("gone.txt")

    def test_batch_partial_failure(self, catalog, make_stored_file):
        real = make_stored_file("real.txt")

        result = catalog.delete_files(["real.txt", "missing.txt", "../escape"])

        assert result.deleted == ["real.txt"]
        assert result.deleted_count == 1
        assert result.failed_count == 2
        failures = {f.filename: f.code for f in result.failed}
        assert failures == {"missing.txt": "FILE_NOT_FOUND", "../escape": "VALIDATION_ERROR"}
        assert not real.exists()

    def test_batch_processes_duplicates_once(self, catalog, make_stored_file):
        make_stored_file("dup.txt")

        result = catalog.delete_files(["dup.txt", "dup.txt"])

        assert result.deleted == ["dup.txt"]
        assert result.failed == []

    def test_batch_requires_names(self, catalog):
        with pytest.raises(ValidationError):
            catalog.delete_files([])

    def test_resolve_existing_returns_path(self, catalog, make_stored_file, upload_dir):
        make_stored_file("1-a-here.txt")

        assert catalog.resolve_existing("1-a-here.txt") == Path(upload_dir / "1-a-here.txt")
