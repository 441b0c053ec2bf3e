"""Unit tests for the core servlet and request/response translation."""
