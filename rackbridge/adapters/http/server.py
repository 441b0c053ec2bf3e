"""HTTP server adapter hosting a servlet.

Provides a simple HTTP host using Python's built-in http.server module,
with asyncio used to drive the server's lifecycle. Every request, for
any method, is handed to the servlet's service() method.
"""

import asyncio
import logging
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from rackbridge.adapters.http.exchange import HandlerServletRequest, HandlerServletResponse
from rackbridge.core.ports import Servlet

logger = logging.getLogger(__name__)


def make_servlet_handler(servlet: Servlet) -> type[BaseHTTPRequestHandler]:
    """Factory to create a ServletHTTPHandler class bound to a servlet.

    Creates a handler class with closure-captured dependencies instead
    of class-level mutable state.

    Args:
        servlet: Servlet that services every request.

    Returns:
        A ServletHTTPHandler class configured with the provided servlet
    """

    class ServletHTTPHandler(BaseHTTPRequestHandler):
        """HTTP request handler that delegates to the servlet."""

        server_version = "rackbridge"

        def _service(self) -> None:
            try:
                request = HandlerServletRequest(self)
            except ValueError as e:
                self.send_error(413, str(e))
                return

            response = HandlerServletResponse(self)
            try:
                servlet.service(request, response)
            except Exception as e:
                # Log full exception server-side for debugging
                logger.error(f"Error servicing {self.command} {self.path}: {e}", exc_info=True)
                if not response.committed:
                    # Return generic error to client without details
                    self.send_error(500, "Internal server error")

        do_GET = _service
        do_HEAD = _service
        do_POST = _service
        do_PUT = _service
        do_PATCH = _service
        do_DELETE = _service
        do_OPTIONS = _service

        def log_message(self, format: str, *args: Any) -> None:
            """Log HTTP request."""
            logger.debug(f"HTTP {self.client_address[0]}: {format % args}")

    return ServletHTTPHandler


class ServletHTTPServer:
    """HTTP host for a servlet.

    Runs the blocking http.server loop in a worker thread so that it can
    be started and stopped from asyncio code.
    """

    def __init__(self, servlet: Servlet, host: str = "0.0.0.0", port: int = 8080):
        """Initialize the HTTP server.

        Args:
            servlet: Servlet instance to handle requests.
            host: Host to listen on (default 0.0.0.0).
            port: Port to listen on (default 8080, 0 picks a free port).
        """
        self.servlet = servlet
        self.host = host
        self.port = port
        self.server: ThreadingHTTPServer | None = None
        self._server_task: asyncio.Task[None] | None = None

    @property
    def bound_port(self) -> int | None:
        """Port the server is actually listening on, once started."""
        if not self.server:
            return None
        return self.server.server_address[1]

    async def start(self) -> None:
        """Start the HTTP server."""
        logger.info(f"Starting HTTP server on {self.host}:{self.port} for {self.servlet.get_servlet_info()}")

        handler_class = make_servlet_handler(self.servlet)
        self.server = ThreadingHTTPServer((self.host, self.port), handler_class)

        # Run server in a separate thread to avoid blocking
        self._server_task = asyncio.create_task(self._run_server())
        logger.info(f"HTTP server listening on port {self.bound_port}")

    async def _run_server(self) -> None:
        """Run the HTTP server loop in a thread pool."""
        if not self.server:
            return

        try:
            await asyncio.to_thread(self.server.serve_forever)
        except asyncio.CancelledError:
            # Normal shutdown
            pass
        except Exception as e:
            logger.error(f"HTTP server error: {e}", exc_info=True)

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self.server:
            # shutdown() blocks until serve_forever returns
            await asyncio.to_thread(self.server.shutdown)
            self.server.server_close()
        if self._server_task:
            self._server_task.cancel()
            try:
                await self._server_task
            except asyncio.CancelledError:
                pass
        logger.info("HTTP server stopped")
