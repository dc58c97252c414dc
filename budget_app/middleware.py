import logging
from typing import Optional

import anyio
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send


logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware:
    """Bound every HTTP request by a wall-clock budget.

    The downstream app runs as a separate task. When the budget runs out
    before the response has started, a single 504 is sent right away and
    anything the handler sends afterwards is dropped. A handler blocked in a
    worker thread cannot be interrupted; the request only returns once that
    thread finishes. Once headers are out the response is left to finish.
    """

    def __init__(self, app: ASGIApp, timeout_seconds: float) -> None:
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False
        timed_out = False
        error: Optional[Exception] = None
        done = anyio.Event()

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if timed_out:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        async def call_downstream() -> None:
            nonlocal error
            try:
                await self.app(scope, receive, send_wrapper)
            except Exception as exc:
                error = exc
            finally:
                done.set()

        async with anyio.create_task_group() as tg:
            tg.start_soon(call_downstream)
            with anyio.move_on_after(self.timeout_seconds):
                await done.wait()

            if not done.is_set() and not response_started:
                timed_out = True
                logger.warning("Request %s %s timed out", scope.get("method"), scope.get("path"))
                response = JSONResponse({"detail": "Request timed out"}, status_code=504)
                await response(scope, receive, send)
                tg.cancel_scope.cancel()

        if error is not None and not timed_out:
            raise error
