import logging
from typing import Optional

from pynput import keyboard

from .events import EventDispatcher, HotkeyAction, HotkeyEvent

CONTROL_KEYS = {keyboard.Key.ctrl, keyboard.Key.ctrl_l, keyboard.Key.ctrl_r}

# macOS virtual key codes, used when deciding which key downs to swallow.
_KEYCODE_SPACE = 49
_KEYCODE_ESCAPE = 53
_KEYCODE_DOWN = 125
_KEYCODE_UP = 126

_PREVIEW_KEYS = {
    keyboard.Key.up: HotkeyAction.PREVIOUS,
    keyboard.Key.down: HotkeyAction.NEXT,
    keyboard.Key.esc: HotkeyAction.CLOSE,
}


def classify(key, ctrl_down: bool, preview_active: bool) -> Optional[HotkeyAction]:
    if key == keyboard.Key.space and ctrl_down:
        return HotkeyAction.TOGGLE
    if preview_active:
        return _PREVIEW_KEYS.get(key)
    return None


class HotkeyListener:
    """Global key listener: Control+Space toggles, arrows and Escape drive the preview.

    Arrow keys and Escape only count while ``preview_active`` is set, so they
    keep their normal meaning in other apps the rest of the time.
    """

    def __init__(self, dispatcher: EventDispatcher):
        self._dispatcher = dispatcher
        self._listener: Optional[keyboard.Listener] = None
        self._ctrl_down = False
        self.preview_active = False

    @property
    def running(self) -> bool:
        return self._listener is not None

    @property
    def is_trusted(self) -> bool:
        if self._listener is None:
            return True
        return bool(getattr(self._listener, "IS_TRUSTED", True))

    def start(self) -> None:
        if self._listener is not None:
            return
        self._listener = keyboard.Listener(
            on_press=self._on_press,
            on_release=self._on_release,
            darwin_intercept=self._darwin_intercept,
        )
        self._listener.start()
        logging.info("Hotkey listener started")

    def stop(self) -> None:
        if self._listener is None:
            return
        self._listener.stop()
        self._listener = None
        self._ctrl_down = False
        logging.info("Hotkey listener stopped")

    def _on_press(self, key) -> None:
        if key in CONTROL_KEYS:
            self._ctrl_down = True
            return
        action = classify(key, self._ctrl_down, self.preview_active)
        if action is not None:
            self._dispatcher.post(HotkeyEvent(action))

    def _on_release(self, key) -> None:
        if key in CONTROL_KEYS:
            self._ctrl_down = False

    def _darwin_intercept(self, event_type, event):
        import Quartz

        if event_type != Quartz.kCGEventKeyDown:
            return event
        keycode = Quartz.CGEventGetIntegerValueField(event, Quartz.kCGKeyboardEventKeycode)
        flags = Quartz.CGEventGetFlags(event)
        if keycode == _KEYCODE_SPACE and flags & Quartz.kCGEventFlagMaskControl:
            return None
        if self.preview_active and keycode in (_KEYCODE_UP, _KEYCODE_DOWN, _KEYCODE_ESCAPE):
            return None
        return event
