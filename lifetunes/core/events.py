"""
Minimal change-notification emitter.

Engines emit named events after each state change; presentation layers
subscribe instead of polling the engines.
"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventEmitter:
    """Registry of listeners keyed by event name."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def subscribe(self, event: str, callback: Listener) -> None:
        self._listeners.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Listener) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event: str, payload: Any = None) -> None:
        """Calls every listener of `event` in subscription order."""
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Listener for '{event}' failed: {e}")
