from starlette.types import ASGIApp, Message, Receive, Scope, Send
import uuid

from app.core.logging import request_id_ctx_var


class CorrelationIdMiddleware:
    """Reuse the caller's X-Request-ID (or mint one), expose it to logging and echo it back."""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        # Only act on HTTP requests
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        request_id = headers.get(b"x-request-id")
        if request_id is None:
            request_id = str(uuid.uuid4()).encode()

        token = request_id_ctx_var.set(request_id.decode("latin-1"))

        async def send_with_request_id(message: Message):
            if message["type"] == "http.response.start":
                message["headers"] = list(message.get("headers", [])) + [(b"x-request-id", request_id)]
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            request_id_ctx_var.reset(token)
