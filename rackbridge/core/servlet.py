"""Servlet that serves a WSGI application loaded from a rackup script."""

import logging
from typing import Any

from .environ import build_environ
from .models import RackServletConfig
from .ports import HttpServletRequest, HttpServletResponse, Servlet, ServletRequest, ServletResponse
from .rackup import load_application
from .response import run_application
from .streams import ErrorStream, RackInput

logger = logging.getLogger(__name__)

APP_LOGGER_PREFIX = "rackbridge.app"


class RackServlet(Servlet):
    """Bridges host servlet requests to a WSGI application.

    The rackup script named by the config is evaluated once, at
    construction. Each service() call translates the host request into
    a WSGI environ, runs the application and writes its status, headers
    and body back onto the host response. Exceptions raised by the
    application propagate to the host unchanged.
    """

    def __init__(self, config: RackServletConfig):
        """Load the application named by config.

        Args:
            config: Servlet configuration.

        Raises:
            TypeError: If config is None.
            ValueError: If the rackup script cannot be found or defines
                no application.
        """
        if config is None:
            raise TypeError("config is None")

        self._config = config
        self._rackup = load_application(config.rack_config_path)
        self._app_logger = logging.getLogger(f"{APP_LOGGER_PREFIX}.{self._rackup.name}")
        self._servlet_config: Any = None

    @property
    def config(self) -> RackServletConfig:
        return self._config

    @property
    def application(self):
        return self._rackup.app

    def init(self, servlet_config: Any) -> None:
        self._servlet_config = servlet_config
        logger.info(f"Initialized {self.get_servlet_info()}")

    def get_servlet_config(self) -> Any:
        return self._servlet_config

    def get_servlet_info(self) -> str:
        return f"RackServlet ({self._rackup.script_path.name})"

    def service(self, request: ServletRequest, response: ServletResponse) -> None:
        """Run the application for one request.

        Raises:
            TypeError: If request or response is None.
            ValueError: If request or response lacks HTTP capabilities.
        """
        if request is None:
            raise TypeError("request is None")
        if response is None:
            raise TypeError("response is None")
        if not isinstance(request, HttpServletRequest):
            raise ValueError(f"Invalid request type: {type(request).__name__}")
        if not isinstance(response, HttpServletResponse):
            raise ValueError(f"Invalid response type: {type(response).__name__}")

        self._service(request, response)

    def _service(self, request: HttpServletRequest, response: HttpServletResponse) -> None:
        request_line = f"{request.get_method()} {request.get_request_uri()}"
        app_logger = logging.LoggerAdapter(self._app_logger, {"request_line": request_line})

        errors = ErrorStream(app_logger)
        wsgi_input = RackInput(request.get_input_stream(), request.get_content_length())
        environ = build_environ(request, wsgi_input, errors, app_logger)

        try:
            status = run_application(self._rackup.app, environ, response)
        finally:
            errors.flush()

        logger.debug(f"{request_line} -> {status}")

    def destroy(self) -> None:
        """Close the application if it holds resources."""
        close = getattr(self._rackup.app, "close", None)
        if callable(close):
            close()
        logger.info(f"Destroyed {self.get_servlet_info()}")
