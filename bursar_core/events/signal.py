from __future__ import annotations

from threading import RLock
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Signal(Generic[T]):
    """
    Minimal observer primitive used to tell read-side consumers that derived
    values (balances, availability, totals) must be re-fetched.
    """

    def __init__(self) -> None:
        self._subscribers: list[Callable[[T], None]] = []
        self._lock: RLock = RLock()

    def connect(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)

    def disconnect(self, callback: Callable[[T], None]) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def emit(self, payload: T) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        dead: list[Callable[[T], None]] = []
        for callback in subscribers:
            try:
                callback(payload)
            except ReferenceError:
                # weakref.proxy whose referent is gone
                dead.append(callback)
        if dead:
            with self._lock:
                for callback in dead:
                    if callback in self._subscribers:
                        self._subscribers.remove(callback)
