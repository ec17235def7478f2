# notekeeper/core/middleware.py
"""
Request body size limit.

The cap applies to the bytes actually received as well as to the declared
Content-Length. A chunked upload or a header that understates the length is
cut off as soon as the running total passes the limit.
"""
import logging

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from notekeeper.core.errors import PayloadTooLargeError
from notekeeper.core.responses import error_response

logger = logging.getLogger("uvicorn.error")


class BodySizeLimitMiddleware:
    """
    Reject requests whose body exceeds `max_body_bytes` with a 413 envelope.

    Usage:
        app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=32 * 1024)
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > self.max_body_bytes:
            self._log_rejected(scope, length)
            await self._reject(scope, receive, send)
            return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    self._log_rejected(scope, f">{self.max_body_bytes}")
                    raise PayloadTooLargeError()
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except PayloadTooLargeError:
            # Raised while the body was read outside the app's own handlers
            if response_started:
                raise
            await self._reject(scope, receive, send)

    @staticmethod
    def _log_rejected(scope: Scope, size: str) -> None:
        logger.warning("[body-limit] rejected %s %s (%s bytes)", scope.get("method"), scope.get("path"), size)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send) -> None:
        exc = PayloadTooLargeError()
        response = error_response(exc.status_code, exc.message)
        await response(scope, receive, send)
