"""Test suite for the rack bridge.

Organized into three categories:

1. core/: Unit tests for the servlet and request/response translation
   - No network, uses in-memory fakes for the servlet ports

2. adapters/: Integration tests for the stdlib HTTP host
   - Real sockets, exercised with httpx

3. fakes/: Port implementations for testing

Sample rackup applications live in apps/.
"""
