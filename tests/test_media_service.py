import os

import pytest

from portfolio_cms.services.media_service import MediaService, UploadedFile, format_file_size
from portfolio_cms.services.results import NOT_FOUND, VALIDATION_FAILED
from portfolio_cms.services.storage import LocalStorage


def _png(name="photo.png", size=2048):
    return UploadedFile(filename=name, content_type="image/png", data=b"\x89PNG" + b"0" * (size - 4))


class FlakyStorage(LocalStorage):
    """Local storage whose delete fails for chosen keys."""

    def __init__(self, root_dir, failing=()):
        super().__init__(root_dir)
        self.failing = set(failing)

    def delete(self, key):
        if key in self.failing:
            raise PermissionError(f"cannot remove {key}")
        return super().delete(key)


def test_empty_file_reports_only_missing_file(media_service):
    result = media_service.validate(UploadedFile(filename="empty.exe", content_type="text/plain", data=b""))

    assert result.code == VALIDATION_FAILED
    assert result.errors == ["No file provided"]


def test_validation_collects_every_error(media_service):
    big = UploadedFile(filename="report.exe", content_type="application/pdf", data=b"0" * (11 * 1024 * 1024))

    result = media_service.validate(big)

    assert len(result.errors) == 2
    assert "10MB" in result.errors[0]
    assert "'.exe'" in result.errors[1]


def test_validation_rejects_content_type(media_service):
    result = media_service.validate(UploadedFile(filename="notes.pdf", content_type="text/html", data=b"x"))

    assert len(result.errors) == 1
    assert "text/html" in result.errors[0]


def test_upload_writes_bytes_under_generated_name(media_service, storage, events):
    result = media_service.upload(_png(), category="Blog", uploader_id="admin-1")

    assert result.success
    data = result.data
    stem, ext = os.path.splitext(data["file_name"])
    assert ext == ".png"
    assert len(stem) == 32
    assert data["original_file_name"] == "photo.png"
    assert data["url"] == f"/static/uploads/{data['file_name']}"
    assert data["uploaded_by"] == "admin-1"
    assert storage.exists(data["file_name"])
    assert events.names()[-1] == "MediaFileUploaded"


def test_upload_for_missing_owner_is_not_found(media_service, storage):
    result = media_service.upload(_png(), article_id=12345)

    assert result.code == NOT_FOUND
    assert not os.path.isdir(storage.root_dir) or os.listdir(storage.root_dir) == []


def test_invalid_upload_stores_nothing(media_service, uow):
    result = media_service.upload(UploadedFile("virus.exe", "application/x-msdownload", b"MZ"))

    assert result.code == VALIDATION_FAILED
    assert uow.media_files.count() == 0


def test_delete_removes_row_and_bytes(media_service, storage, uow):
    data = media_service.upload(_png()).data

    assert media_service.delete(data["id"], "admin-1").success
    assert uow.media_files.count() == 0
    assert not storage.exists(data["file_name"])


def test_delete_tolerates_missing_bytes(media_service, storage, uow):
    data = media_service.upload(_png()).data
    os.remove(os.path.join(storage.root_dir, data["file_name"]))

    assert media_service.delete(data["id"], "admin-1").success
    assert uow.media_files.count() == 0


def test_delete_missing_row_is_not_found(media_service):
    assert media_service.delete(42, "admin-1").code == NOT_FOUND


def test_update_reassigns_owner(media_service, published_article):
    media_id = media_service.upload(_png()).data["id"]

    result = media_service.update(media_id, "Covers", published_article["id"], None, "admin-1")

    assert result.data["article_id"] == published_article["id"]
    assert result.data["category"] == "Covers"
    assert [m["id"] for m in media_service.files_for_article(published_article["id"])] == [media_id]


def test_deleting_owner_turns_media_into_orphan(media_service, content_service, published_article):
    media_service.upload(_png(), article_id=published_article["id"])
    assert media_service.find_orphans() == []

    content_service.delete(published_article["id"], "admin-1")

    orphans = media_service.find_orphans()
    assert len(orphans) == 1
    assert orphans[0]["article_id"] is None


def test_cleanup_orphans_keeps_owned_files(media_service, project_service, uow):
    project = project_service.create_project({"title": "CMS", "description": "Portfolio backend"}).data
    media_service.upload(_png("owned.png"), project_id=project["id"])
    media_service.upload(_png("loose.png"))

    result = media_service.cleanup_orphans("admin-1")

    assert result.data == {"deleted_count": 1, "failed_ids": []}
    assert [m["original_file_name"] for m in media_service.list_files().items] == ["owned.png"]


def test_cleanup_continues_past_storage_failures(uow, events, clock, tmp_path):
    storage = FlakyStorage(str(tmp_path / "flaky"))
    service = MediaService(uow, storage, events, clock=clock)
    stuck = service.upload(_png("stuck.png")).data
    service.upload(_png("gone.png"))
    storage.failing.add(stuck["file_name"])

    result = service.cleanup_orphans("admin-1")

    assert result.success
    assert result.data == {"deleted_count": 1, "failed_ids": [stuck["id"]]}
    assert [m["id"] for m in service.find_orphans()] == [stuck["id"]]
    assert storage.exists(stuck["file_name"])


def test_storage_statistics(media_service, published_article):
    media_service.upload(_png("a.png", size=1024), category="Blog", article_id=published_article["id"])
    media_service.upload(
        UploadedFile("cv.pdf", "application/pdf", b"%PDF" + b"0" * 1020)
    )

    stats = media_service.storage_statistics()

    assert stats["total_files"] == 2
    assert stats["total_size_bytes"] == 2048
    assert stats["total_size_formatted"] == "2 KB"
    assert stats["files_by_category"] == {"Blog": 1, "Uncategorized": 1}
    assert stats["files_by_type"] == {"image/png": 1, "application/pdf": 1}
    assert stats["orphaned_files"] == 1


def test_format_file_size():
    assert format_file_size(0) == "0 B"
    assert format_file_size(512) == "512 B"
    assert format_file_size(1536) == "1.5 KB"
    assert format_file_size(10 * 1024 * 1024) == "10 MB"
    assert format_file_size(1234567) == "1.18 MB"


def test_cleanup_orphans_keeps_article_files(media_service, published_article, storage):
    owned = media_service.upload(_png("cover.png"), article_id=published_article["id"]).data
    loose = media_service.upload(_png("loose.png")).data

    result = media_service.cleanup_orphans("admin-1")

    assert result.data == {"deleted_count": 1, "failed_ids": []}
    assert [m["id"] for m in media_service.list_files().items] == [owned["id"]]
    assert storage.exists(owned["file_name"])
    assert not storage.exists(loose["file_name"])


def test_delete_commits_row_even_when_bytes_stay(uow, events, clock, tmp_path, caplog):
    storage = FlakyStorage(str(tmp_path / "flaky"))
    service = MediaService(uow, storage, events, clock=clock)
    data = service.upload(_png()).data
    storage.failing.add(data["file_name"])

    result = service.delete(data["id"], "admin-1")

    assert result.success
    assert uow.media_files.get(data["id"]) is None
    assert storage.exists(data["file_name"])
    assert "remains" in caplog.text


def test_failed_row_delete_keeps_bytes(media_service, storage, uow, monkeypatch):
    data = media_service.upload(_png()).data

    def broken_delete(entity):
        raise RuntimeError("database went away")

    monkeypatch.setattr(uow.media_files, "delete", broken_delete)
    with pytest.raises(RuntimeError):
        media_service.delete(data["id"], "admin-1")
    monkeypatch.undo()

    assert uow.media_files.get(data["id"]) is not None
    assert storage.exists(data["file_name"])
