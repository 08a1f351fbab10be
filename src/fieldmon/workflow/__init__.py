"""Category workflow for field monitoring."""

from .state_machine import CategoryStateMachine, NoteOutcome

__all__ = ["CategoryStateMachine", "NoteOutcome"]
