"""
Notification Center - Process-wide broadcast of named notifications.

Observers subscribe by notification name, optionally restricted to one
sender. Delivery is synchronous, in the posting context, in subscription
order.
"""

import itertools
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from loguru import logger


@dataclass(frozen=True)
class Notification:
    """A posted notification."""

    name: str
    sender: Any = None


@dataclass(frozen=True)
class _Observer:
    name: str
    callback: Callable[[Notification], None]
    sender: Any = None


class NotificationCenter:
    """Thread-safe registry of notification observers."""

    _default: Optional["NotificationCenter"] = None
    _default_lock = threading.Lock()

    def __init__(self):
        self._lock = threading.RLock()
        self._observers: Dict[int, _Observer] = {}
        self._tokens = itertools.count(1)

    @classmethod
    def default(cls) -> "NotificationCenter":
        """Shared process-wide center."""
        with cls._default_lock:
            if cls._default is None:
                cls._default = cls()
            return cls._default

    def add_observer(self, name: str, callback: Callable[[Notification], None], sender: Any = None) -> int:
        """
        Subscribe to a notification.

        Args:
            name: Notification name
            callback: Called with the Notification
            sender: Only deliver notifications posted by this object (identity)

        Returns:
            Token for remove_observer
        """
        with self._lock:
            token = next(self._tokens)
            self._observers[token] = _Observer(name, callback, sender)
            return token

    def remove_observer(self, token: int) -> bool:
        """Unsubscribe. Returns False if the token is unknown."""
        with self._lock:
            return self._observers.pop(token, None) is not None

    def observer_count(self, name: Optional[str] = None) -> int:
        with self._lock:
            if name is None:
                return len(self._observers)
            return sum(1 for o in self._observers.values() if o.name == name)

    def post(self, name: str, sender: Any = None) -> int:
        """
        Deliver a notification to matching observers.

        Observer errors are logged; remaining observers still run.

        Returns:
            Number of observers notified
        """
        with self._lock:
            matching = [
                o for o in self._observers.values() if o.name == name and (o.sender is None or o.sender is sender)
            ]

        notification = Notification(name, sender)
        for observer in matching:
            try:
                observer.callback(notification)
            except Exception as e:
                logger.error(f"[NotificationCenter] Observer error for {name}: {e}")

        return len(matching)

    def clear(self):
        with self._lock:
            self._observers.clear()
