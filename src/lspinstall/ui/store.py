"""
StateStore: the single owner of mutable UI state.

All mutation goes through mutate_state(); readers get deep-copied snapshots.
Every successful mutation is followed by exactly one notification carrying the
post-mutation snapshot, which is what drives a re-render.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

S = TypeVar("S")

Transform = Callable[[S], None]
Listener = Callable[[S], None]


class StateStore(Generic[S]):
    def __init__(self, initial: S) -> None:
        self._state = initial
        self._lock = threading.Lock()
        self._listeners: list[Listener[S]] = []

    def get_state(self) -> S:
        with self._lock:
            return copy.deepcopy(self._state)

    def mutate_state(self, transform: Transform[S]) -> None:
        """Apply *transform* to the live state, then notify listeners once.

        A transform that raises propagates to the caller and nobody is notified.
        """
        with self._lock:
            transform(self._state)
            snapshot = copy.deepcopy(self._state)
        for listener in list(self._listeners):
            listener(snapshot)

    def subscribe(self, listener: Listener[S]) -> Callable[[], None]:
        """Register *listener*; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
