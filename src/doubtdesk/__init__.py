"""Doubt Desk: question, answer and practice-review workflow."""

__version__ = "0.1.0"
