"""Periodized training-volume engine."""

__version__ = "0.1.0"
