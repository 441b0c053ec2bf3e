"""Servlet request/response views over a BaseHTTPRequestHandler."""

import io
import logging
from collections.abc import Iterable
from http.server import BaseHTTPRequestHandler
from typing import BinaryIO
from urllib.parse import urlsplit

from rackbridge.core.ports import HttpServletRequest, HttpServletResponse

logger = logging.getLogger(__name__)

MAX_BODY_SIZE = 10 * 1024 * 1024


class HandlerServletRequest(HttpServletRequest):
    """HttpServletRequest backed by an http.server request handler.

    The body is read eagerly, bounded by Content-Length, so that the
    application can never block on a keep-alive socket.
    """

    def __init__(self, handler: BaseHTTPRequestHandler, scheme: str = "http"):
        self._handler = handler
        self._scheme = scheme
        parts = urlsplit(handler.path)
        self._request_uri = parts.path or "/"
        self._query_string = parts.query if "?" in handler.path else None

        content_length = self.get_content_length()
        if content_length > MAX_BODY_SIZE:
            raise ValueError(f"Request body too large: {content_length} bytes")
        body = handler.rfile.read(content_length) if content_length > 0 else b""
        self._input = io.BytesIO(body)

    def get_input_stream(self) -> BinaryIO:
        return self._input

    def get_content_type(self) -> str | None:
        return self._handler.headers.get("Content-Type")

    def get_content_length(self) -> int:
        value = self._handler.headers.get("Content-Length")
        if value is None:
            return -1
        try:
            return int(value)
        except ValueError:
            return -1

    def get_scheme(self) -> str:
        return self._scheme

    def get_server_name(self) -> str:
        host = self._handler.headers.get("Host")
        if host:
            return host.rsplit(":", 1)[0] if not host.endswith("]") else host
        return self._handler.server.server_address[0]

    def get_server_port(self) -> int:
        return self._handler.server.server_address[1]

    def get_remote_addr(self) -> str | None:
        return self._handler.client_address[0]

    def get_protocol(self) -> str:
        return self._handler.request_version

    def get_method(self) -> str:
        return self._handler.command

    def get_request_uri(self) -> str:
        return self._request_uri

    def get_query_string(self) -> str | None:
        return self._query_string

    def get_header_names(self) -> Iterable[str]:
        # Message.keys() repeats names sent more than once
        return list(dict.fromkeys(self._handler.headers.keys()))

    def get_headers(self, name: str) -> Iterable[str]:
        return self._handler.headers.get_all(name) or []


class _HandlerOutputStream:
    """Writable stream that commits the response before the first byte."""

    def __init__(self, response: "HandlerServletResponse"):
        self._response = response

    def write(self, data: bytes) -> int:
        self._response.commit()
        if not self._response.head_request:
            self._response.handler.wfile.write(data)
        return len(data)

    def flush(self) -> None:
        self._response.handler.wfile.flush()


class HandlerServletResponse(HttpServletResponse):
    """HttpServletResponse backed by an http.server request handler.

    Status and headers are buffered until the first body write or
    flush_buffer(), mirroring a servlet container's commit semantics.
    Body bytes are discarded for HEAD requests.
    """

    def __init__(self, handler: BaseHTTPRequestHandler):
        self.handler = handler
        self._status = 200
        self._headers: list[tuple[str, str]] = []
        self._output = _HandlerOutputStream(self)
        self.committed = False
        self.head_request = handler.command == "HEAD"

    def set_status(self, code: int) -> None:
        if self.committed:
            logger.warning(f"Ignoring status {code}: response already committed")
            return
        self._status = code

    def add_header(self, name: str, value: str) -> None:
        if self.committed:
            logger.warning(f"Ignoring header {name}: response already committed")
            return
        self._headers.append((name, value))

    def get_output_stream(self) -> BinaryIO:
        return self._output  # type: ignore[return-value]

    def commit(self) -> None:
        """Send the status line and headers if not already sent."""
        if self.committed:
            return
        self.committed = True
        self.handler.send_response(self._status)
        for name, value in self._headers:
            self.handler.send_header(name, value)
        self.handler.end_headers()

    def flush_buffer(self) -> None:
        self.commit()
        self.handler.wfile.flush()
