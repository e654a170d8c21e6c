import re
from html import unescape
from urllib.parse import urlparse

HTML_TAG_PATTERN = re.compile(r"<[^>]*>", re.IGNORECASE)

UNSAFE_CONTENT_MARKERS = ("<script", "javascript:", "vbscript:", "onerror=", "onload=", "<iframe")


def strip_html(value):
    """Remove every tag and decode entities. Used for plain-text fields like comments."""
    if not value or not value.strip():
        return ""
    stripped = HTML_TAG_PATTERN.sub("", value)
    return unescape(stripped).strip()


def is_safe_content(value):
    lowered = (value or "").lower()
    return not any(marker in lowered for marker in UNSAFE_CONTENT_MARKERS)


def sanitize_url(value):
    """Return the URL if it is an absolute http(s) URL or a site-relative path, else None."""
    if not value or not value.strip():
        return None
    value = value.strip()
    if value.startswith("/") and not value.startswith("//"):
        return value
    parsed = urlparse(value)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return value
    return None
