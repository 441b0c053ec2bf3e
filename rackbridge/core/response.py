"""Translation of WSGI application results onto host responses."""

import logging
import re
from collections.abc import Callable, Iterable
from types import TracebackType
from typing import Any

from .ports import HttpServletResponse

logger = logging.getLogger(__name__)

STATUS_PATTERN = re.compile(r"^(\d{3}) .+$")

ExcInfo = tuple[type[BaseException], BaseException, TracebackType | None]


def parse_status(status: str) -> int:
    """Extract the numeric code from a WSGI status line.

    Args:
        status: Status line such as "200 OK".

    Returns:
        The integer status code.

    Raises:
        TypeError: If status is not a string.
        ValueError: If status is not of the form "<3 digits> <reason>".
    """
    if not isinstance(status, str):
        raise TypeError(f"status must be a string, got {type(status).__name__}")
    match = STATUS_PATTERN.match(status)
    if not match:
        raise ValueError(f"Invalid status line: {status!r}")
    return int(match.group(1))


class ResponseWriter:
    """Implements start_response and write for one request.

    Status and headers are applied to the host response lazily: at the
    first non-empty body chunk, or in finish() for empty bodies. Until
    then the application may replace them by calling start_response
    again with exc_info.
    """

    def __init__(self, response: HttpServletResponse):
        self._response = response
        self._output = None
        self._status: str | None = None
        self._headers: list[tuple[str, str]] = []
        self.headers_sent = False

    @property
    def status(self) -> str | None:
        return self._status

    def start_response(
        self,
        status: str,
        headers: list[tuple[str, str]],
        exc_info: ExcInfo | None = None,
    ) -> Callable[[bytes], None]:
        """WSGI start_response callable."""
        if exc_info:
            try:
                if self.headers_sent:
                    raise exc_info[1].with_traceback(exc_info[2])
            finally:
                exc_info = None
        elif self._status is not None:
            raise RuntimeError("start_response() called twice without exc_info")

        parse_status(status)
        for name, value in headers:
            if not isinstance(name, str) or not isinstance(value, str):
                raise TypeError(f"Header names and values must be strings: {(name, value)!r}")

        self._status = status
        self._headers = list(headers)
        return self.write

    def _send_headers(self) -> None:
        if self._status is None:
            raise RuntimeError("Response body written before start_response()")

        self._response.set_status(parse_status(self._status))
        for name, value in self._headers:
            self._response.add_header(name, value)
        self.headers_sent = True

    def write(self, data: bytes) -> None:
        """Write a body chunk, committing headers first if needed."""
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"Response body chunks must be bytes, got {type(data).__name__}")
        if self._status is None:
            raise RuntimeError("write() called before start_response()")
        if not data:
            return

        if not self.headers_sent:
            self._send_headers()
        if self._output is None:
            self._output = self._response.get_output_stream()
        self._output.write(data)

    def write_body(self, body: Iterable[bytes]) -> None:
        """Write every chunk of an application result, then close it."""
        try:
            for chunk in body:
                self.write(chunk)
        finally:
            close = getattr(body, "close", None)
            if close is not None:
                close()

    def finish(self) -> None:
        """Commit headers for empty bodies and flush the host response."""
        if not self.headers_sent:
            self._send_headers()
        if self._output is not None:
            self._output.flush()
        self._response.flush_buffer()


def run_application(
    application: Callable[..., Iterable[bytes]],
    environ: dict[str, Any],
    response: HttpServletResponse,
) -> str:
    """Run a WSGI application and write its result onto the host response.

    Returns:
        The status line the application answered with.
    """
    writer = ResponseWriter(response)
    body = application(environ, writer.start_response)
    writer.write_body(body)
    writer.finish()
    logger.debug(
        "Application responded",
        extra={"status": writer.status, "path_info": environ.get("PATH_INFO")},
    )
    return writer.status or ""
