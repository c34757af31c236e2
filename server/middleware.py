"""ASGI middleware capping management request bodies."""

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from common.logging_config import get_logger
from server import config
from server.exceptions import RequestTooLargeError

logger = get_logger(__name__)


class RequestBodyLimitMiddleware:
    """
    Reject request bodies larger than config.MAX_REQUEST_BODY under a path
    prefix.

    A declared Content-Length above the limit is refused before the app
    runs. Bodies without one (chunked transfer encoding) are counted as they
    are received; once the count passes the limit, reading fails with
    RequestTooLargeError and whatever the app would have answered is
    replaced by a 413 response.
    """

    def __init__(self, app: ASGIApp, path_prefix: str = "/manage"):
        self.app = app
        self.path_prefix = path_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope["path"].startswith(self.path_prefix):
            await self.app(scope, receive, send)
            return

        limit = config.MAX_REQUEST_BODY

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > limit:
            logger.warning(f"Request body too large: {content_length} bytes path={scope['path']}")
            await self._reject(scope, receive, send, limit)
            return

        received = 0
        exceeded = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    exceeded = True
                    raise RequestTooLargeError(limit)
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            if exceeded and not response_started:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except RequestTooLargeError:
            if response_started:
                raise

        if exceeded and not response_started:
            logger.warning(f"Streamed request body passed {limit} bytes path={scope['path']}")
            await self._reject(scope, receive, send, limit)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send, limit: int) -> None:
        response = JSONResponse(
            status_code=413,
            content={
                "detail": f"Request body too large (max {limit} bytes)",
                "code": "REQUEST_TOO_LARGE"
            }
        )
        await response(scope, receive, send)
