"""Shared helpers for input parsing and error types."""
