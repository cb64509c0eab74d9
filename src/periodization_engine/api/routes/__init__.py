"""API route modules."""

from . import objectives, planner, programs, templates, volume

__all__ = ["objectives", "planner", "programs", "templates", "volume"]
