"""Uniform response envelopes.

Every route answers with ``{success, statusCode, message, data}`` and every
error with ``{success, statusCode, error, message, details?}``.
"""

from http import HTTPStatus
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data: Any = None, message: str = "Success", status_code: int = 200) -> dict:
    return {
        "success": True,
        "statusCode": status_code,
        "message": message,
        "data": jsonable_encoder(data),
    }


def created(data: Any, message: str = "Resource created successfully") -> dict:
    return success(data, message, status_code=201)


def deleted(message: str = "Resource deleted successfully") -> dict:
    return success(None, message)


ERROR_LABELS = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    413: "Payload Too Large",
    429: "Too Many Requests",
    500: "Internal Server Error",
}


def reason(status_code: int) -> str:
    if status_code in ERROR_LABELS:
        return ERROR_LABELS[status_code]
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error(status_code: int = 500, message: str = "An error occurred",
          error_type: str | None = None, details: dict | None = None) -> dict:
    body = {
        "success": False,
        "statusCode": status_code,
        "error": error_type or reason(status_code),
        "message": message,
    }
    if details:
        body["details"] = details
    return body


def validation_error(errors: list[dict], message: str | None = None) -> dict:
    by_field: dict[str, list[dict]] = {}
    for e in errors:
        by_field.setdefault(e["field"], []).append(e)

    if not message:
        if len(errors) == 1:
            message = errors[0]["message"]
        elif len(by_field) == 1:
            message = f"{next(iter(by_field))} field has {len(errors)} validation errors"
        else:
            message = f"Validation failed for {len(by_field)} fields: {', '.join(by_field)}"

    return error(400, message, "Validation Error", {"errors": errors, "errorsByField": by_field})


def error_response(status_code: int, message: str, headers: dict | None = None, **kwargs) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error(status_code, message, **kwargs),
        headers=headers,
    )
