"""Translation of host requests into WSGI environ dictionaries."""

import logging
from typing import Any
from urllib.parse import unquote_to_bytes

from .models import CGI_HEADERS, LOGGER_KEY, REQUEST_KEY, WSGI_VERSION
from .ports import HttpServletRequest
from .streams import ErrorStream, RackInput


def to_wsgi_string(value: str) -> str:
    """Re-encode a percent-decoded path as a PEP 3333 "native string".

    WSGI requires PATH_INFO to hold the raw bytes of the decoded path,
    each byte mapped to one latin-1 character.
    """
    return unquote_to_bytes(value).decode("latin-1")


def split_request_uri(request_uri: str, context_path: str) -> tuple[str, str]:
    """Split a request URI into (SCRIPT_NAME, PATH_INFO).

    Args:
        request_uri: Path portion of the request URL.
        context_path: Prefix the host mounted the servlet under.

    Returns:
        Tuple of the script name and the remaining path.
    """
    context_path = (context_path or "").rstrip("/")
    if context_path and (request_uri == context_path or request_uri.startswith(context_path + "/")):
        return context_path, request_uri[len(context_path):]
    return "", request_uri


def header_environ_key(name: str) -> str:
    """Return the environ key a request header is published under."""
    cgi_key = CGI_HEADERS.get(name.lower())
    if cgi_key:
        return cgi_key
    return "HTTP_" + name.upper().replace("-", "_")


def build_environ(
    request: HttpServletRequest,
    wsgi_input: RackInput,
    errors: ErrorStream,
    logger: logging.Logger | logging.LoggerAdapter,
) -> dict[str, Any]:
    """Build the WSGI environ for a host request.

    Args:
        request: Host request being serviced.
        wsgi_input: Wrapped request body.
        errors: Error stream for the application.
        logger: Per-request application logger.

    Returns:
        Environ dictionary ready to pass to a WSGI application.
    """
    script_name, path_info = split_request_uri(
        request.get_request_uri() or "/", request.get_context_path()
    )

    environ: dict[str, Any] = {
        "REQUEST_METHOD": request.get_method().upper(),
        "SCRIPT_NAME": to_wsgi_string(script_name),
        "PATH_INFO": to_wsgi_string(path_info),
        "QUERY_STRING": request.get_query_string() or "",
        "SERVER_NAME": request.get_server_name(),
        "SERVER_PORT": str(request.get_server_port()),
        "SERVER_PROTOCOL": request.get_protocol(),
    }

    remote_addr = request.get_remote_addr()
    if remote_addr:
        environ["REMOTE_ADDR"] = remote_addr

    for name in request.get_header_names():
        # "X_Foo" would collide with "X-Foo" once mapped to HTTP_X_FOO
        if "_" in name:
            continue
        values = [value for value in request.get_headers(name) if value is not None]
        if not values:
            continue
        key = header_environ_key(name)
        if key in environ:
            values.insert(0, environ[key])
        environ[key] = ",".join(values)

    # The host's own view of the body takes precedence over raw headers
    content_type = request.get_content_type()
    if content_type:
        environ["CONTENT_TYPE"] = content_type
    content_length = request.get_content_length()
    if content_length is not None and content_length >= 0:
        environ["CONTENT_LENGTH"] = str(content_length)

    environ.update(
        {
            "wsgi.version": WSGI_VERSION,
            "wsgi.url_scheme": request.get_scheme() or "http",
            "wsgi.input": wsgi_input,
            "wsgi.errors": errors,
            "wsgi.multithread": True,
            "wsgi.multiprocess": False,
            "wsgi.run_once": False,
            "wsgi.input_terminated": True,
            LOGGER_KEY: logger,
            REQUEST_KEY: request,
        }
    )
    return environ
