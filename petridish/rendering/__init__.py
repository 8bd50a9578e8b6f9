"""Template tree rendering: planning, conflict checks and commit."""

from .engine import RenderEngine

__all__ = ["RenderEngine"]
