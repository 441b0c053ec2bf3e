"""Standard-library HTTP host.

Adapts http.server request handlers to the servlet ports so that a
RackServlet can be served without an external container.
"""
