"""Ephemeral photo/video capture with automatic expiry."""

__version__ = "0.1.0"
