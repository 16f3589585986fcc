"""Observable value slot that view models publish state through.

The UI subscribes a callback and re-renders when the value changes. Setting a
value equal to the current one does not notify.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")
Listener = Callable[[T], None]

log = logging.getLogger(__name__)


class Observable(Generic[T]):
    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: List[Listener[T]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        for listener in list(self._listeners):
            self._notify(listener, value)

    def subscribe(self, listener: Listener[T], *, replay: bool = True) -> Callable[[], None]:
        """Register ``listener``; returns a function that unsubscribes it.

        With ``replay`` the listener is called once with the current value.
        """
        self._listeners.append(listener)
        if replay:
            self._notify(listener, self._value)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @staticmethod
    def _notify(listener: Listener[T], value: T) -> None:
        try:
            listener(value)
        except Exception:
            # Listener errors are logged and do not stop other listeners.
            log.exception("Observable listener failed")


__all__ = ["Observable"]
