from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

SCOREBOARD_UPDATED = "scoreboard.updated"

Subscriber = Callable[[str, dict[str, Any]], None]

_subscribers: list[Subscriber] = []
_lock = threading.Lock()


def subscribe(callback: Subscriber) -> Callable[[], None]:
    """Register ``callback`` for every published event. Returns an unsubscribe function."""
    with _lock:
        _subscribers.append(callback)

    def unsubscribe() -> None:
        with _lock:
            if callback in _subscribers:
                _subscribers.remove(callback)

    return unsubscribe


def publish(event: str, payload: dict[str, Any]) -> None:
    with _lock:
        callbacks = list(_subscribers)
    for callback in callbacks:
        try:
            callback(event, payload)
        except Exception:  # noqa: BLE001
            logger.exception("Subscriber %r failed handling %s", callback, event)
