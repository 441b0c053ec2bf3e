"""External adapters for the rack bridge.

This package contains the hosts that drive the core servlet:

- http/: Standard-library HTTP server hosting a RackServlet
"""
