from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from portfolio_cms.utils.response import success, error, from_result
from portfolio_cms.utils.validators import validate_article_input, validate_tag_input

admin_article_bp = Blueprint("admin_article", __name__, url_prefix="/api/admin")


def _content():
    return current_app.extensions["content_service"]


def _invalid(errors):
    return error("Validation failed", 400, code="VALIDATION_FAILED", errors=errors)


# ===========================
# ARTICLES
# ===========================
@admin_article_bp.route("/articles", methods=["GET"])
@jwt_required()
def list_articles():
    result = _content().list_all(
        search=request.args.get("search"),
        tag=request.args.get("tag"),
        status=request.args.get("status"),
        sort_by=request.args.get("sort_by"),
        sort_order=request.args.get("sort_order"),
        page=request.args.get("page", 1),
        page_size=request.args.get("page_size"),
    )
    return success(result.to_dict(), "Articles retrieved successfully")


@admin_article_bp.route("/articles/<int:article_id>", methods=["GET"])
@jwt_required()
def get_article_for_edit(article_id):
    return from_result(_content().get_for_edit(article_id), detailed=True)


@admin_article_bp.route("/articles", methods=["POST"])
@jwt_required()
def create_article():
    fields, errors = validate_article_input(request.get_json(silent=True) or {})
    if errors:
        return _invalid(errors)
    return from_result(_content().create(fields, get_jwt_identity()), status_code=201, detailed=True)


@admin_article_bp.route("/articles/<int:article_id>", methods=["PUT"])
@jwt_required()
def update_article(article_id):
    fields, errors = validate_article_input(request.get_json(silent=True) or {})
    if errors:
        return _invalid(errors)
    return from_result(_content().update(article_id, fields, get_jwt_identity()), detailed=True)


@admin_article_bp.route("/articles/<int:article_id>/publish", methods=["POST"])
@jwt_required()
def publish_article(article_id):
    return from_result(_content().publish(article_id, get_jwt_identity()), detailed=True)


@admin_article_bp.route("/articles/<int:article_id>/unpublish", methods=["POST"])
@jwt_required()
def unpublish_article(article_id):
    return from_result(_content().unpublish(article_id, get_jwt_identity()), detailed=True)


@admin_article_bp.route("/articles/<int:article_id>", methods=["DELETE"])
@jwt_required()
def delete_article(article_id):
    return from_result(_content().delete(article_id, get_jwt_identity()), detailed=True)


# ===========================
# TAGS
# ===========================
@admin_article_bp.route("/tags", methods=["GET"])
@jwt_required()
def list_tags():
    return success(_content().list_tags(), "Tags retrieved successfully")


@admin_article_bp.route("/tags", methods=["POST"])
@jwt_required()
def create_tag():
    fields, errors = validate_tag_input(request.get_json(silent=True) or {})
    if errors:
        return _invalid(errors)
    result = _content().create_tag(fields["name"], fields["description"], get_jwt_identity())
    return from_result(result, status_code=201, detailed=True)


@admin_article_bp.route("/tags/<int:tag_id>", methods=["PUT"])
@jwt_required()
def update_tag(tag_id):
    fields, errors = validate_tag_input(request.get_json(silent=True) or {})
    if errors:
        return _invalid(errors)
    result = _content().update_tag(tag_id, fields["name"], fields["description"], get_jwt_identity())
    return from_result(result, detailed=True)


@admin_article_bp.route("/tags/<int:tag_id>", methods=["DELETE"])
@jwt_required()
def delete_tag(tag_id):
    return from_result(_content().delete_tag(tag_id, get_jwt_identity()), detailed=True)
