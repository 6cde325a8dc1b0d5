"""Lofi Radio - lo-fi music streaming and focus timer."""

__version__ = "0.1.0"
