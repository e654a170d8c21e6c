from flask import Blueprint, request, current_app

from portfolio_cms.utils.rate_limit import rate_limited
from portfolio_cms.utils.response import success, from_result
from portfolio_cms.utils.security import screen_query_string

article_bp = Blueprint('article_api', __name__, url_prefix='/api')
article_bp.before_request(screen_query_string)


def _content():
    return current_app.extensions['content_service']


def _paging():
    return {
        'page': request.args.get('page', 1),
        'page_size': request.args.get('page_size') or request.args.get('pageSize'),
    }


# --- 1. LIST PUBLISHED ARTICLES (search, tag filter, sort, paging) ---
@article_bp.route('/articles', methods=['GET'])
@rate_limited
def get_articles():
    result = _content().list_published(
        search=request.args.get('search') or request.args.get('q'),
        tag=request.args.get('tag'),
        sort_by=request.args.get('sort_by') or request.args.get('sortBy'),
        sort_order=request.args.get('sort_order') or request.args.get('sortOrder'),
        **_paging(),
    )
    return success(result.to_dict(), "Articles retrieved successfully")


# --- 2. SEARCH (shortcut for ?search=) ---
@article_bp.route('/articles/search', methods=['GET'])
@rate_limited
def search_articles():
    term = (request.args.get('q') or request.args.get('term') or '').strip()
    result = _content().search(term, **_paging())
    return success(result.to_dict(), "Search completed successfully")


# --- 3. ARTICLES BY TAG SLUG ---
@article_bp.route('/articles/by-tag/<string:tag_slug>', methods=['GET'])
@rate_limited
def get_articles_by_tag(tag_slug):
    result = _content().by_tag(tag_slug, **_paging())
    return success(result.to_dict(), "Articles retrieved successfully")


# --- 4. ARTICLE DETAIL (published only, approved comments) ---
@article_bp.route('/articles/<int:article_id>', methods=['GET'])
@rate_limited
def get_article_detail(article_id):
    return from_result(_content().get_published(article_id), "Article retrieved successfully")


# --- 5. TAGS WITH PUBLISHED ARTICLE COUNT ---
@article_bp.route('/tags', methods=['GET'])
@rate_limited
def get_tags():
    return success(_content().list_tags(), "Tags retrieved successfully")


@article_bp.route('/tags/popular', methods=['GET'])
@rate_limited
def get_popular_tags():
    count = request.args.get('count', 10, type=int)
    return success(_content().popular_tags(max(1, min(count, 50))), "Popular tags retrieved successfully")
