from flask import Blueprint, current_app

from portfolio_cms.utils.rate_limit import rate_limited
from portfolio_cms.utils.response import success, from_result
from portfolio_cms.utils.security import screen_query_string

project_bp = Blueprint('project_api', __name__, url_prefix='/api/projects')
project_bp.before_request(screen_query_string)


def _projects():
    return current_app.extensions['project_service']


@project_bp.route('', methods=['GET'])
@rate_limited
def get_projects():
    return success(_projects().list_projects(active_only=True), "Projects retrieved successfully")


@project_bp.route('/<int:project_id>', methods=['GET'])
@rate_limited
def get_project_detail(project_id):
    # inactive projects are hidden from the public site
    return from_result(_projects().get_project(project_id, active_only=True), "Project retrieved successfully")
