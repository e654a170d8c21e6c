from functools import wraps

from flask import current_app, request


def rate_limited(view):
    """Count the request against the app's RateLimiter before running the view."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        limiter = current_app.extensions.get("rate_limiter")
        if limiter is not None:
            client_id = limiter.client_identity(
                request.remote_addr,
                request.headers.get("X-Forwarded-For"),
                request.headers.get("User-Agent"),
            )
            # raises RateLimitExceeded, handled by the app as 429
            limiter.hit(client_id)
        return view(*args, **kwargs)

    return wrapper
