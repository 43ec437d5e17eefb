"""Transparent decompression of gzip-encoded request bodies.

Response compression is handled by Starlette's GZipMiddleware; this module
covers the request direction through a custom route class.
"""

import gzip
import zlib
from typing import Callable

from fastapi import HTTPException, Request, Response
from fastapi.routing import APIRoute


class GzipRequest(Request):
    """Request whose body is decompressed when sent with Content-Encoding: gzip."""

    async def body(self) -> bytes:
        if not hasattr(self, "_body"):
            body = await super().body()
            if "gzip" in self.headers.getlist("Content-Encoding"):
                try:
                    body = gzip.decompress(body)
                except (OSError, EOFError, zlib.error) as e:
                    raise HTTPException(status_code=400, detail=f"invalid gzip body: {e}") from e
            self._body = body
        return self._body


class GzipRoute(APIRoute):
    """API route that hands endpoints a GzipRequest."""

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def custom_route_handler(request: Request) -> Response:
            request = GzipRequest(request.scope, request.receive)
            return await original_route_handler(request)

        return custom_route_handler
