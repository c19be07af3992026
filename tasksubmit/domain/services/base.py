from __future__ import annotations

from collections.abc import Callable

Listener = Callable[[], None]


class ObservableStore:
    """Holds a state object and tells subscribers when it changes."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class RequestSequence:
    """Tags overlapping fetches so a late, older response can be dropped.

    With ``enabled=False`` nothing is ever stale and the last response to
    arrive wins.
    """

    def __init__(self, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self._issued = 0

    def next(self) -> int:
        self._issued += 1
        return self._issued

    def is_stale(self, ticket: int) -> bool:
        return self.enabled and ticket != self._issued
