"""HTTP middleware: request logging and user identification."""

import time
import uuid
import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

USER_ID_COOKIE = "user_id"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for request/response logging."""

    def __init__(self, app, logger: logging.Logger = None):
        """Initialize logging middleware."""
        super().__init__(app)
        self.logger = logger or logging.getLogger("shortener.http")

    async def dispatch(self, request: Request, call_next: Callable):
        """Log request and response."""
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        self.logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - Duration: {duration_ms:.2f}ms - "
            f"Size: {response.headers.get('content-length', '-')}"
        )
        return response


class UserCookieMiddleware(BaseHTTPMiddleware):
    """Identify the caller by the ``user_id`` cookie.

    Requests without the cookie get a fresh UUID4, which is stored in
    ``request.state.user_id`` and set as an HttpOnly cookie on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        user_id = request.cookies.get(USER_ID_COOKIE)
        issued = not user_id
        if issued:
            user_id = str(uuid.uuid4())
        request.state.user_id = user_id

        response = await call_next(request)
        if issued:
            response.set_cookie(USER_ID_COOKIE, user_id, path="/", httponly=True)
        return response
