"""Integration tests for the HTTP host adapter."""
