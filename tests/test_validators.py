import pytest

from portfolio_cms.utils.sanitizer import is_safe_content, sanitize_url, strip_html
from portfolio_cms.utils.security import looks_malicious
from portfolio_cms.utils.slug import generate_slug
from portfolio_cms.utils.validators import (
    parse_tag_names,
    validate_article_input,
    validate_comment_input,
    validate_project_input,
)


@pytest.mark.parametrize(
    "name, slug",
    [
        ("C# & .NET!", "c#-&-net"),
        ("Hello World", "hello-world"),
        ("What's New?", "whats-new"),
        ("Node.js, Deno", "nodejs-deno"),
    ],
)
def test_generate_slug(name, slug):
    assert generate_slug(name) == slug


def test_strip_html_removes_tags_and_decodes_entities():
    assert strip_html("<b>Hi</b> &amp; <script>x</script>bye") == "Hi & xbye"
    assert strip_html("   ") == ""


def test_unsafe_content_markers():
    assert not is_safe_content('<p onerror="x">')
    assert not is_safe_content("<SCRIPT>alert(1)</SCRIPT>")
    assert is_safe_content("<p>plain <em>html</em></p>")


def test_sanitize_url():
    assert sanitize_url("https://example.com/a.png") == "https://example.com/a.png"
    assert sanitize_url("/static/uploads/a.png") == "/static/uploads/a.png"
    assert sanitize_url("//evil.example.com") is None
    assert sanitize_url("javascript:alert(1)") is None


def test_parse_tag_names_accepts_list_or_comma_string():
    assert parse_tag_names("Flask, Python ,,") == ["Flask", "Python"]
    assert parse_tag_names(["SQL", " "]) == ["SQL"]
    assert parse_tag_names(None) == []


def test_article_validation_lists_every_problem():
    fields, errors = validate_article_input(
        {"title": "", "content": "<script>bad()</script>", "status": "Archived", "featured_image_url": "ftp://x"}
    )

    assert "Title is required" in errors
    assert "Content contains potentially dangerous HTML" in errors
    assert "Status must be Draft or Published" in errors
    assert "Featured image URL is invalid" in errors


def test_article_validation_normalizes_status_and_tags():
    fields, errors = validate_article_input(
        {"title": "Hello", "content": "Body", "status": "published", "tags": "Flask,Python"}
    )

    assert errors == []
    assert fields["status"] == "Published"
    assert fields["tag_names"] == ["Flask", "Python"]


def test_comment_validation_strips_html_and_lowercases_email():
    fields, errors = validate_comment_input(
        {"article_id": "3", "author_name": "<i>Ann</i>", "author_email": "Ann@Example.COM", "content": "<b>hi</b>"}
    )

    assert errors == []
    assert fields == {"article_id": 3, "author_name": "Ann", "author_email": "ann@example.com", "content": "hi"}


def test_comment_validation_rejects_bad_email_and_empty_content():
    _, errors = validate_comment_input({"article_id": 1, "author_name": "Ann", "author_email": "nope", "content": "<p></p>"})

    assert errors == ["Invalid email format", "Comment content is required"]


def test_project_validation():
    fields, errors = validate_project_input(
        {"title": "CMS", "description": "Backend", "completed_at": "2024-01-31", "display_order": "2", "is_active": "false"}
    )

    assert errors == []
    assert fields["display_order"] == 2
    assert fields["is_active"] is False
    assert fields["completed_at"].year == 2024


def test_seo_metadata_length_limits():
    _, errors = validate_article_input(
        {"title": "Hello", "content": "Body", "meta_description": "d" * 161, "meta_keywords": "k" * 256}
    )
    assert errors == [
        "Meta description must not exceed 160 characters",
        "Meta keywords must not exceed 255 characters",
    ]

    fields, errors = validate_article_input(
        {"title": "Hello", "content": "Body", "meta_description": "d" * 160, "meta_keywords": "k" * 255}
    )
    assert errors == []
    assert len(fields["meta_keywords"]) == 255


@pytest.mark.parametrize(
    "value",
    ["<script>alert(1)</script>", "x onerror=y", "' OR '1'='1", "a; drop table tags", "../../etc", "%2E%2E%2F"],
)
def test_suspicious_values_are_detected(value):
    assert looks_malicious(value)


@pytest.mark.parametrize("value", ["", "flask tips", "select statements", "C# & .NET", "2024-05-15"])
def test_plain_values_pass(value):
    assert not looks_malicious(value)
