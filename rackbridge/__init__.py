"""Servlet bridge for WSGI applications loaded from rackup scripts."""
