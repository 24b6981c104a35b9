"""Selection state machine."""

from .state import NO_SELECTION, Selection, SelectionKind, SelectionStateMachine

__all__ = ["NO_SELECTION", "Selection", "SelectionKind", "SelectionStateMachine"]
