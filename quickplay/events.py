"""Typed events and their delivery onto the GUI thread.

Hotkey callbacks and process watchers run on background threads. They hand
their events to :class:`EventDispatcher.post`, which queues them through a Qt
signal so every subscriber runs on the thread that owns the dispatcher.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from PySide6.QtCore import QObject, Qt, Signal


class HotkeyAction(enum.Enum):
    TOGGLE = "toggle"
    NEXT = "next"
    PREVIOUS = "previous"
    CLOSE = "close"


@dataclass(frozen=True)
class HotkeyEvent:
    action: HotkeyAction


@dataclass(frozen=True)
class ProcessExitEvent:
    process: object
    returncode: Optional[int] = None

    @property
    def pid(self) -> Optional[int]:
        return getattr(self.process, "pid", None)


EventHandler = Callable[[object], None]


class EventDispatcher(QObject):
    _posted = Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._handlers: dict[type, list[EventHandler]] = {}
        self._posted.connect(self.dispatch, Qt.QueuedConnection)

    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_type: type, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def post(self, event) -> None:
        """Queue ``event`` for delivery on the dispatcher's thread. Thread-safe."""
        self._posted.emit(event)

    def dispatch(self, event) -> None:
        for handler in list(self._handlers.get(type(event), [])):
            try:
                handler(event)
            except Exception:
                logging.exception("Event handler failed: event=%r handler=%r", event, handler)
