"""Request body size limit."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from lingofy.domain.constants import MAX_BODY_BYTES


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Enforce server.max_body_bytes on request bodies.

    - Content-Length over the limit → 413
    - chunked body without Content-Length → 411

    The limit is read from app.state.config at request time, so it follows
    the config loaded at startup.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        config = getattr(request.app.state, "config", None) or {}
        max_bytes = int((config.get("server", {}) or {}).get("max_body_bytes", MAX_BODY_BYTES))

        content_length = request.headers.get("content-length")
        if content_length is None:
            if "chunked" in request.headers.get("transfer-encoding", "").lower():
                return JSONResponse(
                    status_code=411,
                    content={"error": "Content-Length header is required."},
                )
            return await call_next(request)

        try:
            length = int(content_length)
        except ValueError:
            return JSONResponse(
                status_code=400,
                content={"error": "Invalid Content-Length header."},
            )
        if length > max_bytes:
            return JSONResponse(
                status_code=413,
                content={"error": f"Request body exceeds {max_bytes} bytes."},
            )

        return await call_next(request)
