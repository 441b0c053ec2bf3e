"""Fake servlet request/response implementations for testing."""

import io
from collections.abc import Iterable

from rackbridge.core.ports import (
    HttpServletRequest,
    HttpServletResponse,
    ServletRequest,
    ServletResponse,
)


class FakeHttpServletRequest(HttpServletRequest):
    """In-memory HTTP request.

    Headers are given as (name, value) pairs so tests can repeat names.
    """

    def __init__(
        self,
        method: str = "GET",
        request_uri: str = "/",
        query_string: str | None = None,
        body: bytes = b"",
        headers: list[tuple[str, str]] | None = None,
        content_type: str | None = None,
        content_length: int | None = None,
        scheme: str = "http",
        server_name: str = "TestServer",
        server_port: int = 8080,
        context_path: str = "",
        remote_addr: str | None = None,
    ) -> None:
        """Initialize with request data; content_length defaults to len(body) if body is set."""
        self.method = method
        self.request_uri = request_uri
        self.query_string = query_string
        self.input_stream = io.BytesIO(body)
        self.headers = list(headers or [])
        self.content_type = content_type
        if content_length is None:
            content_length = len(body) if body else -1
        self.content_length = content_length
        self.scheme = scheme
        self.server_name = server_name
        self.server_port = server_port
        self.context_path = context_path
        self.remote_addr = remote_addr

    def get_input_stream(self) -> io.BytesIO:
        return self.input_stream

    def get_content_type(self) -> str | None:
        return self.content_type

    def get_content_length(self) -> int:
        return self.content_length

    def get_scheme(self) -> str:
        return self.scheme

    def get_server_name(self) -> str:
        return self.server_name

    def get_server_port(self) -> int:
        return self.server_port

    def get_remote_addr(self) -> str | None:
        return self.remote_addr

    def get_method(self) -> str:
        return self.method

    def get_request_uri(self) -> str:
        return self.request_uri

    def get_query_string(self) -> str | None:
        return self.query_string

    def get_context_path(self) -> str:
        return self.context_path

    def get_header_names(self) -> Iterable[str]:
        return list(dict.fromkeys(name for name, _ in self.headers))

    def get_headers(self, name: str) -> Iterable[str]:
        return [value for header, value in self.headers if header.lower() == name.lower()]


class FakeHttpServletResponse(HttpServletResponse):
    """In-memory HTTP response capturing status, headers and body."""

    def __init__(self) -> None:
        self.status: int | None = None
        self.headers: list[tuple[str, str]] = []
        self.output_stream = io.BytesIO()
        self.flush_count = 0

    def set_status(self, code: int) -> None:
        self.status = code

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def get_output_stream(self) -> io.BytesIO:
        return self.output_stream

    def flush_buffer(self) -> None:
        self.flush_count += 1

    @property
    def body(self) -> bytes:
        return self.output_stream.getvalue()

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    def header(self, name: str) -> str | None:
        """Return the first value of a captured header."""
        for header, value in self.headers:
            if header.lower() == name.lower():
                return value
        return None


class FakeServletRequest(ServletRequest):
    """Request without HTTP capabilities."""

    def get_input_stream(self) -> io.BytesIO:
        return io.BytesIO()

    def get_content_type(self) -> str | None:
        return None

    def get_content_length(self) -> int:
        return -1

    def get_scheme(self) -> str:
        return "http"

    def get_server_name(self) -> str:
        return "TestServer"

    def get_server_port(self) -> int:
        return 8080


class FakeServletResponse(ServletResponse):
    """Response without HTTP capabilities."""

    def get_output_stream(self) -> io.BytesIO:
        return io.BytesIO()
