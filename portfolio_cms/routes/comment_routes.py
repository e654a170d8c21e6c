from flask import Blueprint, request, current_app

from portfolio_cms.utils.rate_limit import rate_limited
from portfolio_cms.utils.response import success, error, from_result
from portfolio_cms.utils.security import screen_query_string
from portfolio_cms.utils.validators import validate_comment_input

comment_bp = Blueprint('comment_api', __name__, url_prefix='/api/comments')
comment_bp.before_request(screen_query_string)


def _comments():
    return current_app.extensions['comment_service']


# --- 1. SUBMIT COMMENT (lands in the moderation queue) ---
@comment_bp.route('', methods=['POST'])
@rate_limited
def submit_comment():
    data = request.get_json(silent=True) or {}
    fields, errors = validate_comment_input(data)
    if errors:
        return error("Validation failed", 400, code="VALIDATION_FAILED", errors=errors)

    result = _comments().submit(
        fields['article_id'],
        fields['author_name'],
        fields['author_email'],
        fields['content'],
        ip_address=(request.headers.get('X-Forwarded-For') or '').split(',')[0].strip() or request.remote_addr,
        user_agent=request.headers.get('User-Agent'),
    )
    return from_result(result, status_code=201)


# --- 2. APPROVED COMMENTS FOR ONE ARTICLE ---
@comment_bp.route('/article/<int:article_id>', methods=['GET'])
@rate_limited
def get_article_comments(article_id):
    return success(_comments().list_approved(article_id), "Comments retrieved successfully")
