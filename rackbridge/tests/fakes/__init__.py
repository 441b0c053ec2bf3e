"""Fake implementations of the servlet ports for testing.

These in-memory implementations let the servlet be exercised without
an HTTP server:

- FakeHttpServletRequest: Configurable HTTP request
- FakeHttpServletResponse: Captured status, headers and body
- FakeServletRequest / FakeServletResponse: Non-HTTP variants
"""

from .servlet import (
    FakeHttpServletRequest,
    FakeHttpServletResponse,
    FakeServletRequest,
    FakeServletResponse,
)

__all__ = [
    "FakeHttpServletRequest",
    "FakeHttpServletResponse",
    "FakeServletRequest",
    "FakeServletResponse",
]
