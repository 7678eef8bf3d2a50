"""Undo/redo history over immutable snapshots."""

from .lib import HistoryState, can_redo, can_undo, make_history, push, redo, reset, undo

__all__ = [
    "HistoryState",
    "make_history",
    "push",
    "undo",
    "redo",
    "reset",
    "can_undo",
    "can_redo",
]
