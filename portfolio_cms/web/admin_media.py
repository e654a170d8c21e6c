from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from portfolio_cms.services.media_service import UploadedFile
from portfolio_cms.utils.response import success, error, from_result

admin_media_bp = Blueprint("admin_media", __name__, url_prefix="/api/admin/media")


def _media():
    return current_app.extensions["media_service"]


def _optional_int(source, key):
    value = source.get(key)
    if value in (None, ""):
        return None, None
    try:
        return int(value), None
    except (TypeError, ValueError):
        return None, f"{key} must be an integer"


@admin_media_bp.route("", methods=["GET"])
@jwt_required()
def list_files():
    result = _media().list_files(
        request.args.get("page", 1), request.args.get("page_size"), request.args.get("category")
    )
    return success(result.to_dict(), "Media files retrieved successfully")


@admin_media_bp.route("/upload", methods=["POST"])
@jwt_required()
def upload():
    # multipart/form-data: file + optional category, article_id, project_id
    file_storage = request.files.get("file")
    file = UploadedFile.from_storage(file_storage) if file_storage else None

    article_id, article_err = _optional_int(request.form, "article_id")
    project_id, project_err = _optional_int(request.form, "project_id")
    errors = [e for e in (article_err, project_err) if e]
    if errors:
        return error("Validation failed", 400, code="VALIDATION_FAILED", errors=errors)

    result = _media().upload(
        file,
        category=request.form.get("category"),
        article_id=article_id,
        project_id=project_id,
        uploader_id=get_jwt_identity(),
    )
    return from_result(result, status_code=201, detailed=True)


@admin_media_bp.route("/<int:media_id>", methods=["GET"])
@jwt_required()
def get_file(media_id):
    return from_result(_media().get(media_id), detailed=True)


@admin_media_bp.route("/article/<int:article_id>", methods=["GET"])
@jwt_required()
def files_for_article(article_id):
    return success(_media().files_for_article(article_id), "Media files retrieved successfully")


@admin_media_bp.route("/project/<int:project_id>", methods=["GET"])
@jwt_required()
def files_for_project(project_id):
    return success(_media().files_for_project(project_id), "Media files retrieved successfully")


@admin_media_bp.route("/category/<string:category>", methods=["GET"])
@jwt_required()
def files_by_category(category):
    return success(_media().files_by_category(category), "Media files retrieved successfully")


@admin_media_bp.route("/<int:media_id>", methods=["PUT"])
@jwt_required()
def update_file(media_id):
    data = request.get_json(silent=True) or {}
    article_id, article_err = _optional_int(data, "article_id")
    project_id, project_err = _optional_int(data, "project_id")
    errors = [e for e in (article_err, project_err) if e]
    category = (data.get("category") or "").strip()
    if len(category) > 50:
        errors.append("Category must not exceed 50 characters")
    if errors:
        return error("Validation failed", 400, code="VALIDATION_FAILED", errors=errors)

    result = _media().update(media_id, category, article_id, project_id, get_jwt_identity())
    return from_result(result, detailed=True)


@admin_media_bp.route("/<int:media_id>", methods=["DELETE"])
@jwt_required()
def delete_file(media_id):
    return from_result(_media().delete(media_id, get_jwt_identity()), detailed=True)


@admin_media_bp.route("/statistics", methods=["GET"])
@jwt_required()
def storage_statistics():
    return success(_media().storage_statistics(), "Storage statistics retrieved successfully")


@admin_media_bp.route("/orphans", methods=["GET"])
@jwt_required()
def find_orphans():
    return success(_media().find_orphans(), "Orphaned files retrieved successfully")


@admin_media_bp.route("/orphans/cleanup", methods=["POST"])
@jwt_required()
def cleanup_orphans():
    return from_result(_media().cleanup_orphans(get_jwt_identity()), detailed=True)
