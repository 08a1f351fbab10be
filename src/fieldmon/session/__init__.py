"""Session control for field monitoring jobs."""

from .controller import AppView, SessionController

__all__ = ["AppView", "SessionController"]
