"""
HTTP Middleware for Product Catalog Service.

Provides middleware components for request processing.

Both middlewares are plain ASGI callables so the endpoint keeps direct
access to the client's ``http.disconnect`` message.
"""
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from pkg.logger.logger import reset_request_id, set_request_id
from .metrics import MetricsMiddleware

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware:
    """
    Add request ID to context for logging and tracing.

    Reuses the client's X-Request-ID header when present.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        context_token = set_request_id(request_id)
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            reset_request_id(context_token)


__all__ = [
    "MetricsMiddleware",
    "RequestIdMiddleware",
    "REQUEST_ID_HEADER",
]
