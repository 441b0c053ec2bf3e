"""Core domain logic for the rack bridge.

This package contains zero external dependencies: the servlet ports,
request/response translation and rackup loading. The stdlib HTTP host
lives in the adapters package.
"""

from .models import RackServletConfig
from .ports import (
    HttpServletRequest,
    HttpServletResponse,
    Servlet,
    ServletRequest,
    ServletResponse,
)
from .servlet import RackServlet

__all__ = [
    "HttpServletRequest",
    "HttpServletResponse",
    "RackServlet",
    "RackServletConfig",
    "Servlet",
    "ServletRequest",
    "ServletResponse",
]
