"""Streams handed to the application as wsgi.input and wsgi.errors."""

import logging
from collections.abc import Iterable, Iterator
from typing import BinaryIO

CHUNK_SIZE = 8192


class RackInput:
    """Rewindable request body stream.

    Reads lazily from the host input stream and never past the declared
    content length. Everything read is retained so that the body can be
    consumed again after rewind(), which lets middleware inspect the body
    before the endpoint reads it.
    """

    def __init__(self, stream: BinaryIO, content_length: int | None = None):
        """Initialize the input wrapper.

        Args:
            stream: Host input stream (anything with read(size)).
            content_length: Declared body length; None or negative means
                read until the host stream reports EOF.
        """
        self._stream = stream
        self._remaining = content_length if content_length is not None and content_length >= 0 else None
        self._buffer = bytearray()
        self._position = 0
        self._exhausted = self._remaining == 0

    def _read_chunk(self) -> bool:
        """Pull one chunk from the host stream into the buffer.

        Returns:
            False once the host stream has nothing more to give.
        """
        if self._exhausted:
            return False

        size = CHUNK_SIZE
        if self._remaining is not None:
            size = min(size, self._remaining)

        chunk = self._stream.read(size)
        if not chunk:
            self._exhausted = True
            return False

        self._buffer += chunk
        if self._remaining is not None:
            self._remaining -= len(chunk)
            if self._remaining <= 0:
                self._exhausted = True
        return True

    def _available(self) -> int:
        return len(self._buffer) - self._position

    def _take(self, size: int) -> bytes:
        data = bytes(self._buffer[self._position:self._position + size])
        self._position += len(data)
        return data

    def read(self, size: int | None = -1) -> bytes:
        """Read up to size bytes, or everything left if size is negative or None."""
        if size is None or size < 0:
            while self._read_chunk():
                pass
            return self._take(self._available())

        while self._available() < size and self._read_chunk():
            pass
        return self._take(size)

    def readline(self, size: int | None = -1) -> bytes:
        """Read one line including its trailing newline."""
        limit = size if size is not None and size >= 0 else None
        while True:
            end = self._buffer.find(b"\n", self._position)
            if end != -1:
                length = end - self._position + 1
                break
            if limit is not None and self._available() >= limit:
                length = limit
                break
            if not self._read_chunk():
                length = self._available()
                break

        if limit is not None:
            length = min(length, limit)
        return self._take(length)

    def readlines(self, hint: int | None = -1) -> list[bytes]:
        """Read lines until EOF, or until roughly hint bytes were read."""
        lines = []
        total = 0
        for line in self:
            lines.append(line)
            total += len(line)
            if hint is not None and 0 < hint <= total:
                break
        return lines

    def __iter__(self) -> Iterator[bytes]:
        return self

    def __next__(self) -> bytes:
        line = self.readline()
        if not line:
            raise StopIteration
        return line

    def rewind(self) -> None:
        """Move back to the start of the body."""
        self._position = 0

    def close(self) -> None:
        """No-op; the host owns the underlying stream."""


class ErrorStream:
    """Text stream that turns each written line into a log record.

    Applications write free-form diagnostics to wsgi.errors; every
    completed line is logged at ERROR level on the application logger.
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter):
        self._logger = logger
        self._pending = ""

    def write(self, text: str) -> int:
        """Buffer text and log each newline-terminated line."""
        if not isinstance(text, str):
            raise TypeError(f"wsgi.errors accepts str, got {type(text).__name__}")

        self._pending += text
        *lines, self._pending = self._pending.split("\n")
        for line in lines:
            if line:
                self._logger.error(line)
        return len(text)

    def writelines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        """Log any partial line still buffered."""
        if self._pending:
            self._logger.error(self._pending)
            self._pending = ""
