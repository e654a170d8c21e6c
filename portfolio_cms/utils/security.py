import logging
import re

from flask import current_app, request

from portfolio_cms.utils.response import error
from portfolio_cms.utils.sanitizer import is_safe_content

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self'; style-src 'self'; img-src 'self' data: https:; "
        "frame-ancestors 'none'; base-uri 'self'; form-action 'self'"
    ),
    "Permissions-Policy": "geolocation=(), microphone=(), camera=(), payment=()",
}

SCRIPT_CALL_PATTERN = re.compile(r"eval\(|expression\(", re.IGNORECASE)
SQL_INJECTION_PATTERN = re.compile(
    r"\bunion\b.*\bselect\b"
    r"|;\s*(drop|delete|insert|update|alter|exec)\b"
    r"|'\s*or\s+'?\w*'?\s*="
    r"|--|/\*|\*/",
    re.IGNORECASE,
)
PATH_TRAVERSAL_PATTERN = re.compile(r"\.\./|\.\.\\|%2e%2e|%252e%252e", re.IGNORECASE)


def looks_malicious(value):
    """True for script injection, SQL injection or path traversal markers."""
    if not value or not value.strip():
        return False
    if not is_safe_content(value) or SCRIPT_CALL_PATTERN.search(value):
        return True
    return bool(SQL_INJECTION_PATTERN.search(value) or PATH_TRAVERSAL_PATTERN.search(value))


def screen_query_string():
    """before_request hook for public blueprints: reject suspicious query values."""
    for key, values in request.args.lists():
        if any(looks_malicious(value) for value in values):
            logger.warning("Rejected query parameter %r on %s from %s", key, request.path, request.remote_addr)
            return error("Invalid input detected in request", 400, code="INVALID_INPUT")
    return None


def add_security_headers(response):
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    if current_app.config.get("SECURITY_HSTS_ENABLED"):
        response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
    return response
