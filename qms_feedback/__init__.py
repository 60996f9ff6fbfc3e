"""Async client core for the queue-management feedback API."""

__version__ = "0.1.0"
