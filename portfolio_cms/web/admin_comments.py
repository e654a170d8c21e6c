from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from portfolio_cms.utils.response import success, error, from_result

admin_comment_bp = Blueprint("admin_comment", __name__, url_prefix="/api/admin/comments")

_BULK_ACTIONS = {
    "approve": "bulk_approve",
    "reject": "bulk_reject",
    "delete": "bulk_delete",
}


def _comments():
    return current_app.extensions["comment_service"]


# ===========================
# MODERATION QUEUE
# ===========================
@admin_comment_bp.route("/pending", methods=["GET"])
@jwt_required()
def list_pending():
    result = _comments().list_pending(request.args.get("page", 1), request.args.get("page_size"))
    return success(result.to_dict(), "Pending comments retrieved successfully")


@admin_comment_bp.route("", methods=["GET"])
@jwt_required()
def list_all():
    result = _comments().list_all(request.args.get("page", 1), request.args.get("page_size"))
    return success(result.to_dict(), "Comments retrieved successfully")


@admin_comment_bp.route("/statistics", methods=["GET"])
@jwt_required()
def statistics():
    return success(_comments().statistics(), "Comment statistics retrieved successfully")


# ===========================
# SINGLE COMMENT
# ===========================
@admin_comment_bp.route("/<int:comment_id>/approve", methods=["POST"])
@jwt_required()
def approve(comment_id):
    return from_result(_comments().approve(comment_id, get_jwt_identity()), detailed=True)


@admin_comment_bp.route("/<int:comment_id>/reject", methods=["POST"])
@jwt_required()
def reject(comment_id):
    return from_result(_comments().reject(comment_id, get_jwt_identity()), detailed=True)


@admin_comment_bp.route("/<int:comment_id>", methods=["DELETE"])
@jwt_required()
def delete(comment_id):
    return from_result(_comments().delete(comment_id, get_jwt_identity()), detailed=True)


# ===========================
# BULK
# ===========================
@admin_comment_bp.route("/bulk", methods=["POST"])
@jwt_required()
def bulk():
    data = request.get_json(silent=True) or {}
    action = (data.get("action") or "").strip().lower()
    comment_ids = data.get("comment_ids")

    errors = []
    if action not in _BULK_ACTIONS:
        errors.append("action must be one of: approve, reject, delete")
    if not isinstance(comment_ids, list) or not comment_ids:
        errors.append("comment_ids must be a non-empty list")
    elif not all(isinstance(i, int) and not isinstance(i, bool) for i in comment_ids):
        errors.append("comment_ids must contain integers only")
    if errors:
        return error("Validation failed", 400, code="VALIDATION_FAILED", errors=errors)

    handler = getattr(_comments(), _BULK_ACTIONS[action])
    result = handler(comment_ids, get_jwt_identity())
    if result.success:
        return success({"affected_count": result.data}, result.message)
    return from_result(result, detailed=True)
