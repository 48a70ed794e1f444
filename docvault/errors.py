import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from docvault import responses
from docvault.validation import to_field_errors

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI, *, expose_details: bool = True) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else responses.reason(exc.status_code)
        return responses.error_response(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        errors = to_field_errors(exc.errors())
        logger.debug("validation failed on %s: %s", request.url.path, errors)
        return JSONResponse(status_code=400, content=responses.validation_error(errors))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("%s on %s (500): %s", type(exc).__name__, request.url.path, exc, exc_info=exc)
        details = None
        if expose_details:
            details = {
                "type": type(exc).__name__,
                "originalError": str(exc),
                "stack": "".join(traceback.format_exception(exc)),
            }
        message = str(exc) if expose_details and str(exc) else "Internal Server Error"
        return JSONResponse(status_code=500, content=responses.error(500, message, details=details))
