"""Snapshot-based undo/redo history.

A history is an immutable value holding the past snapshots, the present
one and the undone future. Every function returns a new history; the
input is never modified. Depth is unbounded.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class HistoryState(Generic[T]):
    """Past/present/future snapshot stack.

    Attributes:
        past: Older snapshots, oldest first.
        present: The current snapshot.
        future: Undone snapshots, next redo first.
    """

    past: tuple[T, ...]
    present: T
    future: tuple[T, ...]

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)


def make_history(present: T) -> HistoryState[T]:
    return HistoryState(past=(), present=present, future=())


def push(history: HistoryState[T], next_value: T) -> HistoryState[T]:
    """Record a new present snapshot.

    Pushing the present snapshot itself is a no-op. Any other value moves
    the present into the past and drops the redo branch.
    """
    if next_value is history.present:
        return history
    return HistoryState(
        past=history.past + (history.present,),
        present=next_value,
        future=(),
    )


def undo(history: HistoryState[T]) -> HistoryState[T]:
    """Step back one snapshot (no-op with no past)."""
    if not history.past:
        return history
    return HistoryState(
        past=history.past[:-1],
        present=history.past[-1],
        future=(history.present,) + history.future,
    )


def redo(history: HistoryState[T]) -> HistoryState[T]:
    """Step forward one snapshot (no-op with no future)."""
    if not history.future:
        return history
    return HistoryState(
        past=history.past + (history.present,),
        present=history.future[0],
        future=history.future[1:],
    )


def reset(history: HistoryState[T], present: T) -> HistoryState[T]:
    """Discard all history and start over from `present`."""
    return make_history(present)


def can_undo(history: HistoryState[T]) -> bool:
    return history.can_undo


def can_redo(history: HistoryState[T]) -> bool:
    return history.can_redo


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
