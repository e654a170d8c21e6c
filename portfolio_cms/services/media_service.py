"""Media uploads: validation, storage handoff and orphan cleanup.

An orphan is a media row with neither an article nor a project owner.
Cleanup deletes each orphan's bytes and then its row inside one
transaction. If the storage backend raises for a file, that row is kept
(so the bytes are not left without a record) and reported back, and the
rest of the batch carries on. A file that is already missing from storage
is not a failure.
"""
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime

from werkzeug.utils import secure_filename

from portfolio_cms.models.media_file import MediaFile
from portfolio_cms.services.results import PagedResult, ServiceResult, normalize_page

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")
ALLOWED_DOCUMENT_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)
ALLOWED_CONTENT_TYPES = ALLOWED_IMAGE_TYPES + ALLOWED_DOCUMENT_TYPES
ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".pdf", ".doc", ".docx")
MAX_FILE_SIZE = 10 * 1024 * 1024


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self):
        return len(self.data or b"")

    @property
    def extension(self):
        return os.path.splitext(self.filename or "")[1].lower()

    @classmethod
    def from_storage(cls, file_storage):
        """Build from a werkzeug FileStorage (request.files[...])."""
        return cls(
            filename=file_storage.filename or "",
            content_type=file_storage.mimetype or "application/octet-stream",
            data=file_storage.read(),
        )


def format_file_size(size):
    units = ["B", "KB", "MB", "GB", "TB"]
    value = float(size)
    order = 0
    while value >= 1024 and order < len(units) - 1:
        order += 1
        value /= 1024
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[order]}"


class MediaService:
    def __init__(self, uow, storage, events, clock=datetime.utcnow, max_file_size=MAX_FILE_SIZE, page_size=20):
        self.uow = uow
        self.storage = storage
        self.events = events
        self.clock = clock
        self.max_file_size = max_file_size
        self.page_size = page_size

    def validate(self, file):
        """Every problem at once, not just the first."""
        errors = []
        if file is None or file.size == 0:
            errors.append("No file provided")
            return ServiceResult.invalid(errors, "File validation failed")

        if file.size > self.max_file_size:
            errors.append(
                f"File size exceeds maximum allowed size of {self.max_file_size // (1024 * 1024)}MB"
            )

        content_type = (file.content_type or "").lower()
        if content_type not in ALLOWED_CONTENT_TYPES:
            errors.append(
                f"File type '{file.content_type}' is not allowed. Allowed types: {', '.join(ALLOWED_CONTENT_TYPES)}"
            )

        if file.extension not in ALLOWED_EXTENSIONS:
            errors.append(
                f"File extension '{file.extension}' is not allowed. Allowed extensions: {', '.join(ALLOWED_EXTENSIONS)}"
            )

        if errors:
            return ServiceResult.invalid(errors, "File validation failed")
        return ServiceResult.ok(message="File is valid")

    def upload(self, file, category=None, article_id=None, project_id=None, uploader_id=None):
        validation = self.validate(file)
        if not validation.success:
            return validation

        if article_id is not None and self.uow.articles.get(article_id) is None:
            return ServiceResult.not_found("Article not found")
        if project_id is not None and self.uow.projects.get(project_id) is None:
            return ServiceResult.not_found("Project not found")

        stored_name = f"{uuid.uuid4().hex}{file.extension}"
        url = self.storage.write(file.data, stored_name)

        try:
            with self.uow.transaction():
                media = self.uow.media_files.add(
                    MediaFile(
                        file_name=stored_name,
                        original_file_name=secure_filename(file.filename) or "unknown",
                        content_type=file.content_type or "application/octet-stream",
                        file_size=file.size,
                        url=url,
                        category=(category or "").strip()[:50],
                        uploaded_at=self.clock(),
                        uploaded_by=uploader_id,
                        article_id=article_id,
                        project_id=project_id,
                    )
                )
        except Exception:
            # no row, so do not leave the bytes behind
            self.storage.delete(stored_name)
            raise

        self.events.emit(
            "MediaFileUploaded",
            media_file_id=media.id,
            file_name=media.original_file_name,
            file_size=media.file_size,
            content_type=media.content_type,
            category=media.category or "Unknown",
        )
        return ServiceResult.ok(media.to_dict(), "File uploaded successfully")

    # ------------------------------------------------------------------ reads

    def list_files(self, page=1, page_size=None, category=None):
        page, page_size = normalize_page(page, page_size or self.page_size, self.page_size)
        items, total = self.uow.media_files.paginate(self.uow.media_files.newest_first(category), page, page_size)
        return PagedResult([m.to_dict() for m in items], total, page, page_size)

    def get(self, media_id):
        media = self.uow.media_files.get(media_id)
        if media is None:
            return ServiceResult.not_found("Media file not found")
        return ServiceResult.ok(media.to_dict())

    def files_by_category(self, category):
        return [m.to_dict() for m in self.uow.media_files.by_category(category)]

    def files_for_article(self, article_id):
        return [m.to_dict() for m in self.uow.media_files.for_article(article_id)]

    def files_for_project(self, project_id):
        return [m.to_dict() for m in self.uow.media_files.for_project(project_id)]

    # ----------------------------------------------------------------- writes

    def update(self, media_id, category=None, article_id=None, project_id=None, caller_id=None):
        media = self.uow.media_files.get(media_id)
        if media is None:
            return ServiceResult.not_found("Media file not found")
        if article_id is not None and self.uow.articles.get(article_id) is None:
            return ServiceResult.not_found("Article not found")
        if project_id is not None and self.uow.projects.get(project_id) is None:
            return ServiceResult.not_found("Project not found")

        with self.uow.transaction():
            media.category = (category or "").strip()[:50]
            media.article_id = article_id
            media.project_id = project_id

        self.events.emit("MediaFileUpdated", media_file_id=media.id, updated_by=caller_id)
        return ServiceResult.ok(media.to_dict(), "Media file updated successfully")

    def delete(self, media_id, caller_id=None):
        media = self.uow.media_files.get(media_id)
        if media is None:
            return ServiceResult.not_found("Media file not found")

        original_name = media.original_file_name
        stored_name = media.file_name
        with self.uow.transaction():
            self.uow.media_files.delete(media)

        # after commit, so a failed commit keeps the row and its bytes together
        try:
            self.storage.delete(stored_name)
        except OSError as exc:
            logger.warning("Media %s deleted but stored file %s remains: %s", media_id, stored_name, exc)

        self.events.emit("MediaFileDeleted", media_file_id=media_id, file_name=original_name, deleted_by=caller_id)
        return ServiceResult.ok(message="Media file deleted successfully")

    # ---------------------------------------------------------------- orphans

    def find_orphans(self):
        return [m.to_dict() for m in self.uow.media_files.orphans()]

    def cleanup_orphans(self, caller_id=None):
        deleted = 0
        failed = []
        try:
            with self.uow.transaction():
                for media in self.uow.media_files.orphans():
                    try:
                        self.storage.delete(media.file_name)
                    except OSError as exc:
                        logger.warning("Could not delete stored file %s: %s", media.file_name, exc)
                        failed.append(media.id)
                        continue
                    self.uow.media_files.delete(media)
                    deleted += 1
        except Exception as exc:
            logger.exception("Orphan cleanup failed, row deletes rolled back (caller=%s)", caller_id)
            return ServiceResult.failed("Failed to cleanup orphaned files", exc)

        self.events.emit("OrphanedFilesCleanup", deleted_count=deleted, failed_count=len(failed), cleaned_by=caller_id)
        result = ServiceResult.ok(
            {"deleted_count": deleted, "failed_ids": failed},
            f"Successfully cleaned up {deleted} orphaned files",
        )
        if failed:
            result.errors = [f"Stored file for media {media_id} could not be deleted" for media_id in failed]
        return result

    def storage_statistics(self):
        """Fresh aggregate on every call."""
        repo = self.uow.media_files
        total_size = int(repo.total_size() or 0)
        by_category = {}
        for category, count in repo.count_by(MediaFile.category).items():
            key = category or "Uncategorized"
            by_category[key] = by_category.get(key, 0) + count
        return {
            "total_files": repo.count(),
            "total_size_bytes": total_size,
            "total_size_formatted": format_file_size(total_size),
            "files_by_category": by_category,
            "files_by_type": repo.count_by(MediaFile.content_type),
            "orphaned_files": repo.orphans_query().count(),
        }
