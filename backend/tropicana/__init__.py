"""Tropicana HMS: multi-property hotel management and booking backend."""

__version__ = "0.1.0"
