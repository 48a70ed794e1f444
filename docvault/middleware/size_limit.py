from starlette.middleware.base import BaseHTTPMiddleware

from docvault import responses

MULTIPART_OVERHEAD = 64 * 1024


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Turns away upload requests whose declared length is over the limit.

    Runs before the body is read. Bodies sent without a Content-Length are
    still capped while the file is copied to storage.
    """

    def __init__(self, app, max_bytes: int, include_path_prefixes=("/api/upload",)):
        super().__init__(app)
        self.max_bytes = max_bytes + MULTIPART_OVERHEAD
        self.include_paths = tuple(include_path_prefixes)

    async def dispatch(self, request, call_next):
        if not request.url.path.startswith(self.include_paths):
            return await call_next(request)

        length = request.headers.get("content-length")
        try:
            size = int(length) if length is not None else None
        except ValueError:
            size = None
        if size is not None and size > self.max_bytes:
            return responses.error_response(413, "Request body exceeds the upload size limit")
        return await call_next(request)
