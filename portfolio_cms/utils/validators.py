import re
from datetime import datetime

from portfolio_cms.models.article import ArticleStatus
from portfolio_cms.utils.sanitizer import is_safe_content, sanitize_url, strip_html

EMAIL_REGEX = r"^[\w\.\+-]+@[\w\.-]+\.\w+$"

TITLE_MAX = 200
CONTENT_MAX = 50000
SUMMARY_MAX = 500
META_DESCRIPTION_MAX = 160
META_KEYWORDS_MAX = 255
TAG_NAME_MAX = 50
TAG_DESCRIPTION_MAX = 200

AUTHOR_NAME_MAX = 100
AUTHOR_EMAIL_MAX = 200
COMMENT_MAX = 2000

PROJECT_DESCRIPTION_MAX = 2000
URL_MAX = 500


def _text(data, key):
    return (data.get(key) or "").strip()


def _optional(data, key):
    value = _text(data, key)
    return value or None


def parse_tag_names(raw):
    """Accept a list of names or a comma separated string ("Flask,Python")."""
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    names = []
    for name in raw:
        name = strip_html(str(name))
        if name:
            names.append(name)
    return names


def parse_status(raw):
    value = (raw or ArticleStatus.DRAFT).strip().capitalize()
    return value if value in ArticleStatus.ALL else None


def validate_article_input(data: dict) -> tuple[dict, list[str]]:
    errors: list[str] = []

    title = _text(data, "title")
    content = (data.get("content") or "").strip()
    summary = _text(data, "summary")
    status = parse_status(data.get("status"))
    featured_image_url = _optional(data, "featured_image_url")
    meta_description = _optional(data, "meta_description")
    meta_keywords = _optional(data, "meta_keywords")
    tag_names = parse_tag_names(data.get("tags"))

    if not title:
        errors.append("Title is required")
    elif len(title) > TITLE_MAX:
        errors.append(f"Title must not exceed {TITLE_MAX} characters")
    elif strip_html(title) != title:
        errors.append("Title contains invalid characters")

    if not content:
        errors.append("Content is required")
    elif len(content) > CONTENT_MAX:
        errors.append(f"Content must not exceed {CONTENT_MAX} characters")
    elif not is_safe_content(content):
        errors.append("Content contains potentially dangerous HTML")

    if len(summary) > SUMMARY_MAX:
        errors.append(f"Summary must not exceed {SUMMARY_MAX} characters")

    if status is None:
        errors.append("Status must be Draft or Published")

    if featured_image_url and not sanitize_url(featured_image_url):
        errors.append("Featured image URL is invalid")

    if meta_description and len(meta_description) > META_DESCRIPTION_MAX:
        errors.append(f"Meta description must not exceed {META_DESCRIPTION_MAX} characters")

    if meta_keywords and len(meta_keywords) > META_KEYWORDS_MAX:
        errors.append(f"Meta keywords must not exceed {META_KEYWORDS_MAX} characters")

    for name in tag_names:
        if len(name) > TAG_NAME_MAX:
            errors.append(f"Tag '{name[:20]}...' must not exceed {TAG_NAME_MAX} characters")

    fields = {
        "title": title,
        "content": content,
        "summary": summary,
        "status": status,
        "featured_image_url": featured_image_url,
        "meta_description": meta_description,
        "meta_keywords": meta_keywords,
        "tag_names": tag_names,
    }
    return fields, errors


def validate_comment_input(data: dict) -> tuple[dict, list[str]]:
    errors: list[str] = []

    author_name = strip_html(data.get("author_name"))
    author_email = _text(data, "author_email").lower()
    content = strip_html(data.get("content"))

    if not author_name:
        errors.append("Author name is required")
    elif len(author_name) > AUTHOR_NAME_MAX:
        errors.append(f"Author name must not exceed {AUTHOR_NAME_MAX} characters")

    if not author_email:
        errors.append("Email is required")
    elif len(author_email) > AUTHOR_EMAIL_MAX:
        errors.append(f"Email must not exceed {AUTHOR_EMAIL_MAX} characters")
    elif not re.match(EMAIL_REGEX, author_email):
        errors.append("Invalid email format")

    if not content:
        errors.append("Comment content is required")
    elif len(content) > COMMENT_MAX:
        errors.append(f"Comment must not exceed {COMMENT_MAX} characters")

    article_id = data.get("article_id")
    try:
        article_id = int(article_id)
    except (TypeError, ValueError):
        errors.append("article_id must be an integer")
        article_id = None

    fields = {
        "article_id": article_id,
        "author_name": author_name,
        "author_email": author_email,
        "content": content,
    }
    return fields, errors


def validate_tag_input(data: dict) -> tuple[dict, list[str]]:
    errors: list[str] = []
    name = strip_html(data.get("name"))
    description = _optional(data, "description")

    if not name:
        errors.append("Tag name is required")
    elif len(name) > TAG_NAME_MAX:
        errors.append(f"Tag name must not exceed {TAG_NAME_MAX} characters")

    if description and len(description) > TAG_DESCRIPTION_MAX:
        errors.append(f"Description must not exceed {TAG_DESCRIPTION_MAX} characters")

    return {"name": name, "description": description}, errors


def validate_project_input(data: dict) -> tuple[dict, list[str]]:
    errors: list[str] = []

    title = _text(data, "title")
    description = _text(data, "description")

    if not title:
        errors.append("Title is required")
    elif len(title) > TITLE_MAX:
        errors.append(f"Title must not exceed {TITLE_MAX} characters")

    if not description:
        errors.append("Description is required")
    elif len(description) > PROJECT_DESCRIPTION_MAX:
        errors.append(f"Description must not exceed {PROJECT_DESCRIPTION_MAX} characters")

    urls = {}
    for key in ("project_url", "github_url", "image_url"):
        value = _optional(data, key)
        if value and (len(value) > URL_MAX or not sanitize_url(value)):
            errors.append(f"{key} is invalid")
        urls[key] = value

    display_order = data.get("display_order", 0)
    try:
        display_order = int(display_order)
    except (TypeError, ValueError):
        errors.append("display_order must be an integer")
        display_order = 0

    completed_at = _optional(data, "completed_at")
    if completed_at:
        try:
            completed_at = datetime.fromisoformat(completed_at)
        except ValueError:
            errors.append("completed_at must be an ISO date")
            completed_at = None

    is_active = data.get("is_active", True)
    if isinstance(is_active, str):
        is_active = is_active.strip().lower() in {"1", "true", "yes", "on"}

    fields = {
        "title": title,
        "description": description,
        "technology_stack": _optional(data, "technology_stack"),
        "completed_at": completed_at,
        "display_order": display_order,
        "is_active": bool(is_active),
        **urls,
    }
    return fields, errors
