"""Port interfaces for the host server's servlet model.

These abstract base classes describe how the hosting web server hands
a request/response pair to the bridge. Implementations live in the
adapters/ package (and in tests/fakes for unit tests).

Port Interface Categories:

1. **Request/Response Ports** (host calls into the bridge with these)
   - ServletRequest / HttpServletRequest: inbound request data
   - ServletResponse / HttpServletResponse: outbound response sink

2. **Servlet Port** (host drives the bridge through this)
   - Servlet: lifecycle and per-request service entry point
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, BinaryIO


# ============================================================================
# REQUEST/RESPONSE PORTS
# ============================================================================


class ServletRequest(ABC):
    """Protocol-independent view of an inbound request."""

    @abstractmethod
    def get_input_stream(self) -> BinaryIO:
        """Return the binary stream carrying the request body."""

    @abstractmethod
    def get_content_type(self) -> str | None:
        """Return the body's MIME type, or None if not known."""

    @abstractmethod
    def get_content_length(self) -> int:
        """Return the body length in bytes, or -1 if not known."""

    @abstractmethod
    def get_scheme(self) -> str:
        """Return the URL scheme used for the request (e.g. "http")."""

    @abstractmethod
    def get_server_name(self) -> str:
        """Return the host name of the server that received the request."""

    @abstractmethod
    def get_server_port(self) -> int:
        """Return the port number on which the request was received."""

    def get_remote_addr(self) -> str | None:
        """Return the client address, or None if the host does not know it."""
        return None

    def get_protocol(self) -> str:
        """Return the protocol name and version (e.g. "HTTP/1.1")."""
        return "HTTP/1.1"


class HttpServletRequest(ServletRequest):
    """HTTP-specific request capabilities.

    The bridge only services requests implementing this interface; plain
    ServletRequest objects are rejected.
    """

    @abstractmethod
    def get_method(self) -> str:
        """Return the HTTP method (GET, POST, ...)."""

    @abstractmethod
    def get_request_uri(self) -> str:
        """Return the request path, without the query string."""

    @abstractmethod
    def get_query_string(self) -> str | None:
        """Return the raw query string, or None if the URL had none."""

    @abstractmethod
    def get_header_names(self) -> Iterable[str]:
        """Return the names of all headers sent with the request."""

    @abstractmethod
    def get_headers(self, name: str) -> Iterable[str]:
        """Return every value sent for the named header."""

    def get_context_path(self) -> str:
        """Return the path prefix the host mounted the servlet under."""
        return ""


class ServletResponse(ABC):
    """Protocol-independent view of an outbound response."""

    @abstractmethod
    def get_output_stream(self) -> BinaryIO:
        """Return the binary stream the response body is written to."""

    def flush_buffer(self) -> None:
        """Force any buffered status, headers and body out to the client."""


class HttpServletResponse(ServletResponse):
    """HTTP-specific response capabilities."""

    @abstractmethod
    def set_status(self, code: int) -> None:
        """Set the HTTP status code."""

    @abstractmethod
    def add_header(self, name: str, value: str) -> None:
        """Add a response header, keeping any existing values for it."""


# ============================================================================
# SERVLET PORT
# ============================================================================


class Servlet(ABC):
    """Port through which the host drives a request handler.

    The host calls init() once, service() once per request (possibly
    from several threads), and destroy() once at shutdown.
    """

    def init(self, servlet_config: Any) -> None:
        """Receive host-specific configuration before the first request."""

    def get_servlet_config(self) -> Any:
        """Return the configuration passed to init(), if any."""
        return None

    @abstractmethod
    def service(self, request: ServletRequest, response: ServletResponse) -> None:
        """Handle a single request.

        Args:
            request: The inbound request.
            response: The sink for the outbound response.
        """

    def get_servlet_info(self) -> str:
        """Return a short human-readable description of the servlet."""
        return self.__class__.__name__

    def destroy(self) -> None:
        """Release resources; no further service() calls will be made."""
