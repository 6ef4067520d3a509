"""
HTTP Server Module

This module implements the HTTP transport for Shard.

The application is a FastAPI app with a single catch-all route that
accepts every method on every path and hands the request to the
RequestRouter. Routing is done by the router, not by FastAPI, because
the key-value family is matched on a literal path prefix and /health
and /metrics answer any method.

Per request:
    1. Read the full body on the event loop
    2. Run RequestRouter.dispatch() on a worker thread
    3. Write the Response
    4. Emit one access log record (AccessLogMiddleware)

The server itself is run by uvicorn.
"""

import asyncio
import logging
from time import perf_counter
from typing import Any, Callable, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi import Request
from fastapi import Response as HTTPResponse
from fastapi.concurrency import run_in_threadpool

from .. import __version__
from ..cache.store import KVStore
from ..cache.uptime import UptimeTracker
from ..config.settings import settings
from ..protocol.responses import Response
from ..protocol.router import RequestRouter
from .access_log import RequestLogger

logger = logging.getLogger(__name__)


def request_target(scope: Dict[str, Any]) -> str:
    """
    Rebuild the request target exactly as the client sent it.

    Uses the undecoded raw path when the ASGI server provides one, and
    re-appends the query string so that routing sees the same string
    that was on the request line.
    """
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = scope.get("path", "")

    query = scope.get("query_string", b"")
    if query:
        path = f"{path}?{query.decode('latin-1')}"
    return path


class AccessLogMiddleware:
    """Times each HTTP request and reports it to a RequestLogger once the response is sent."""

    def __init__(self, app: Callable[..., Any], request_logger: RequestLogger) -> None:
        self.app = app
        self.request_logger = request_logger

    async def __call__(self, scope: Dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        start = perf_counter()
        status_code: int = 500

        async def send_wrapper(message: Dict[str, Any]) -> None:
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 500))
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (perf_counter() - start) * 1000.0
            # The response is already on the wire; a broken logger must not change that.
            try:
                self.request_logger.log(scope.get("method", ""), request_target(scope), status_code, elapsed_ms)
            except Exception as exc:
                logger.exception(f"Request logger failed: {exc}")


class KVEndpoint:
    """Raw ASGI endpoint bridging every HTTP request to ShardServer.handle()."""

    def __init__(self, server: "ShardServer"):
        self.server = server

    async def __call__(self, scope: Dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        request = Request(scope, receive)
        body = await request.body()

        response = await self.server.handle(request.method, request_target(scope), body)

        http_response = HTTPResponse(
            content=response.body or b"",
            status_code=response.status,
            media_type=response.content_type,
        )
        await http_response(scope, receive, send)


class ShardServer:
    """
    HTTP server for the Shard key-value service.

    Owns the service state (store, uptime tracker) and wires it into a
    RequestRouter. Each request is dispatched on a worker thread, so
    requests run concurrently and rely on the store's own locking.

    Usage:
        server = ShardServer(host='0.0.0.0', port=8080)
        await server.start()  # Runs until stop() or a signal

    Attributes:
        host: Server bind address (e.g., '0.0.0.0')
        port: Server port number (e.g., 8080)
        store: The KVStore instance shared by all requests
        uptime: UptimeTracker started when the server was created
        router: RequestRouter dispatching requests against store/uptime
        app: The ASGI application (usable directly in tests)
    """

    def __init__(
            self,
            host: str = None,
            port: int = None,
            store: KVStore = None,
            uptime: UptimeTracker = None,
            request_logger: RequestLogger = None,
    ):
        """
        Initialize the server.

        Args:
            host: Bind address (default from settings)
            port: Port number (default from settings)
            store: KVStore instance (creates new one if not provided)
            uptime: UptimeTracker instance (starts a new one if not provided)
            request_logger: Access logger (default logs to "shard.access")
        """
        self.host = host if host is not None else settings.HOST
        self.port = port if port is not None else settings.PORT
        self.store = store if store is not None else KVStore()
        self.uptime = uptime if uptime is not None else UptimeTracker()
        self.request_logger = request_logger if request_logger is not None else RequestLogger()
        self.router = RequestRouter(self.store, self.uptime)
        self.app = self._build_app()

        # Server state
        self._server: Optional[uvicorn.Server] = None
        self._running = False
        self._total_requests = 0

    def _build_app(self) -> FastAPI:
        app = FastAPI(
            title="Shard",
            version=__version__,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )
        app.add_middleware(AccessLogMiddleware, request_logger=self.request_logger)
        app.add_route("/{path:path}", KVEndpoint(self), include_in_schema=False)
        return app

    async def handle(self, method: str, path: str, body: bytes) -> Response:
        """
        Dispatch one request on a worker thread.

        Unexpected errors are logged and turned into a 500 so that a
        single failing request never takes the server down.
        """
        self._total_requests += 1
        try:
            return await run_in_threadpool(self.router.dispatch, method, path, body)
        except Exception as exc:
            logger.exception(f"Error handling {method} {path}: {exc}")
            return Response.internal_error()

    async def start(self) -> None:
        """
        Start the server and serve requests until stopped.

        Signal handling (SIGINT/SIGTERM) is done by uvicorn, which shuts
        down gracefully and returns from this coroutine.
        """
        if self._running:
            return

        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            lifespan="off",
            access_log=False,
            log_config=None,
        )
        self._server = uvicorn.Server(config)
        self._running = True
        logger.info(f"Serving on {self.host}:{self.port}")

        try:
            await self._server.serve()
        except asyncio.CancelledError:
            # Expected during shutdown/fixture cleanup
            logger.debug("Server start cancelled")
        finally:
            self._running = False

    async def stop(self) -> None:
        """
        Stop the server gracefully.

        Asks uvicorn to exit and waits for start() to return.
        """
        if self._server is None:
            return

        self._server.should_exit = True
        try:
            while self._running:
                await asyncio.sleep(0.05)
        finally:
            self._server = None

    def is_running(self) -> bool:
        """Check if the server is currently running."""
        return self._running

    def is_ready(self) -> bool:
        """Check if the listening socket is bound and accepting requests."""
        return self._server is not None and self._server.started

    def get_stats(self) -> dict:
        """
        Get server statistics.

        Returns:
            Dictionary with server state, request count and live
            uptime/key figures.
        """
        return {
            "running": self._running,
            "host": self.host,
            "port": self.port,
            "total_requests": self._total_requests,
            "uptime_seconds": self.uptime.elapsed_seconds(),
            "keys": self.store.size(),
        }
