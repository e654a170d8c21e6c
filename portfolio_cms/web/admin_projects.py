from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from portfolio_cms.utils.response import success, error, from_result
from portfolio_cms.utils.validators import validate_project_input

admin_project_bp = Blueprint("admin_project", __name__, url_prefix="/api/admin/projects")


def _projects():
    return current_app.extensions["project_service"]


@admin_project_bp.route("", methods=["GET"])
@jwt_required()
def list_projects():
    active_only = request.args.get("active_only", "false").lower() in {"1", "true", "yes"}
    return success(_projects().list_projects(active_only=active_only), "Projects retrieved successfully")


@admin_project_bp.route("/<int:project_id>", methods=["GET"])
@jwt_required()
def get_project(project_id):
    return from_result(_projects().get_project(project_id), detailed=True)


@admin_project_bp.route("", methods=["POST"])
@jwt_required()
def create_project():
    fields, errors = validate_project_input(request.get_json(silent=True) or {})
    if errors:
        return error("Validation failed", 400, code="VALIDATION_FAILED", errors=errors)
    return from_result(_projects().create_project(fields, get_jwt_identity()), status_code=201, detailed=True)


@admin_project_bp.route("/<int:project_id>", methods=["PUT"])
@jwt_required()
def update_project(project_id):
    fields, errors = validate_project_input(request.get_json(silent=True) or {})
    if errors:
        return error("Validation failed", 400, code="VALIDATION_FAILED", errors=errors)
    return from_result(_projects().update_project(project_id, fields, get_jwt_identity()), detailed=True)


@admin_project_bp.route("/<int:project_id>", methods=["DELETE"])
@jwt_required()
def delete_project(project_id):
    return from_result(_projects().delete_project(project_id, get_jwt_identity()), detailed=True)
