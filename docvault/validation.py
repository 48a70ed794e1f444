from typing import Any, TypeVar

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)

_SOURCES = {"body", "query", "path", "form", "header", "cookie"}

LABELS = {
    "email": "Email",
    "password": "Password",
    "name": "Name",
    "title": "Title",
    "description": "Description",
    "isPublic": "Public flag",
    "query": "Search query",
}


def validate(model: type[M], data: dict[str, Any]) -> M:
    """Validate ``data`` against ``model``, reporting every violated field.

    Used for multipart forms, which FastAPI can only hand over as loose
    fields. Failures raise the same ``RequestValidationError`` FastAPI uses
    for JSON bodies so both produce one response shape.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False)) from None


def field_name(err: dict) -> str:
    loc = [str(p) for p in err.get("loc", ())]
    if loc and loc[0] in _SOURCES:
        loc = loc[1:]
    if not loc or err.get("type") == "json_invalid":
        return "body"
    return ".".join(loc)


def message_for(field: str, err: dict) -> str:
    kind = err.get("type", "")
    ctx = err.get("ctx") or {}
    label = LABELS.get(field, field.capitalize())

    if kind == "missing":
        return f"{label} is required"
    if kind == "string_too_short":
        n = ctx.get("min_length", 1)
        return f"{label} is required" if n <= 1 else f"{label} must be at least {n} characters"
    if kind == "string_too_long":
        return f"{label} must be at most {ctx.get('max_length')} characters"
    if field == "email" and kind == "value_error":
        return "Invalid email format"
    return err.get("msg", "Invalid value")


def to_field_errors(errors) -> list[dict]:
    out = []
    for err in errors:
        field = field_name(err)
        out.append({
            "field": field,
            "message": message_for(field, err),
            "code": err.get("type", "invalid"),
        })
    return out
