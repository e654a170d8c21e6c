from datetime import datetime

from flask import jsonify


def response(status_code, message, data=None, **extra):
    """
    Standard API response envelope
    """
    res_structure = {
        "status": status_code,
        "message": message,
        "data": data,
    }
    res_structure.update(extra)
    return jsonify(res_structure), status_code


def success(data=None, message="Success", status_code=200):
    return response(status_code, message, data)


def error(message="Something went wrong", status_code=400, data=None, code=None, errors=None):
    # Stable code + human message + timestamp; detail only when the caller passes it
    payload = {
        "error": {
            "code": code or _default_code(status_code),
            "message": message,
            "timestamp": datetime.utcnow().isoformat() + "Z",
        }
    }
    if errors:
        payload["errors"] = list(errors)
    return response(status_code, message, data, **payload)


def from_result(result, success_message=None, status_code=200, serialize=None, detailed=False):
    """Turn a ServiceResult into a response, mapping its error code to an HTTP status."""
    if result.success:
        data = serialize(result.data) if serialize and result.data is not None else result.data
        return success(data, success_message or result.message, status_code)
    return error(
        result.message,
        _STATUS_BY_CODE.get(result.code, 400),
        code=result.code,
        errors=result.errors if detailed or result.code == "VALIDATION_FAILED" else None,
    )


_STATUS_BY_CODE = {
    "NOT_FOUND": 404,
    "VALIDATION_FAILED": 400,
    "CONFLICT": 409,
    "TRANSACTION_FAILED": 500,
}


def _default_code(status_code):
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        413: "PAYLOAD_TOO_LARGE",
        429: "RATE_LIMIT_EXCEEDED",
    }.get(status_code, "INTERNAL_ERROR")
