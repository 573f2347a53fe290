import logging
from typing import Iterable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from .events import EventDispatcher, HotkeyAction, HotkeyEvent
from .logic import SiblingNavigator
from .mpv_launcher import MpvLauncher
from .selection import FinderSelection
from .ui.dialogs import DialogNotifier
from .utils import MediaPath

DEFAULT_CLOSE_SUPPRESS_MS = 500


class PreviewCoordinator(QObject):
    """Turns hotkeys, menu actions and "Open With" requests into launcher calls.

    Tracks which file is being previewed and whether a preview is active, and
    mirrors that flag to the hotkey listener and the status icon.
    """

    activeChanged = Signal(bool)

    def __init__(
        self,
        launcher: MpvLauncher,
        dispatcher: EventDispatcher,
        selection: Optional[FinderSelection] = None,
        navigator: Optional[SiblingNavigator] = None,
        hotkeys=None,
        tray=None,
        notifier=None,
        close_suppress_ms: int = DEFAULT_CLOSE_SUPPRESS_MS,
        parent=None,
    ):
        super().__init__(parent)
        self.launcher = launcher
        self.selection = selection or FinderSelection()
        self.navigator = navigator or SiblingNavigator()
        self.hotkeys = hotkeys
        self.tray = tray
        self.notifier = notifier or DialogNotifier()
        self.close_suppress_ms = max(0, int(close_suppress_ms))

        self.current: Optional[MediaPath] = None
        self.preview_active = False
        self.just_closed = False
        self._replacing = False

        launcher.previewStarted.connect(self._on_preview_started)
        launcher.previewEnded.connect(self._on_preview_ended)
        launcher.playerNotFound.connect(self._on_player_not_found)
        launcher.launchFailed.connect(self._on_launch_failed)
        dispatcher.subscribe(HotkeyEvent, self.handle_hotkey)

        if tray is not None:
            tray.previewRequested.connect(self.request_preview)
            tray.closeRequested.connect(self.request_close)

    # ── trigger inputs ───────────────────────────────────────────────────

    def handle_hotkey(self, event: HotkeyEvent) -> None:
        if event.action is HotkeyAction.TOGGLE:
            self.request_toggle()
        elif event.action is HotkeyAction.NEXT:
            self.request_next()
        elif event.action is HotkeyAction.PREVIOUS:
            self.request_previous()
        elif event.action is HotkeyAction.CLOSE:
            self.request_close()

    def request_toggle(self) -> None:
        if self.launcher.is_playing:
            self.request_close()
        else:
            self.request_preview()

    def request_preview(self) -> bool:
        if self.just_closed:
            logging.debug("Preview request ignored right after close")
            return False
        if not self.selection.is_host_app_frontmost():
            return False
        path = self.selection.selected_video()
        if path is None:
            logging.info("Preview requested but no video is selected")
            return False
        return self.play(path)

    def request_next(self) -> bool:
        return self._navigate(forward=True)

    def request_previous(self) -> bool:
        return self._navigate(forward=False)

    def request_close(self) -> None:
        self.just_closed = True
        self.launcher.stop()
        self.current = None
        self._set_active(False)
        QTimer.singleShot(self.close_suppress_ms, self._clear_just_closed)

    def open_paths(self, paths: Iterable[str]) -> bool:
        for path in paths:
            path = str(path or "").strip()
            if path:
                return self.play(path)
        return False

    def play(self, path) -> bool:
        media = MediaPath.from_path(path)
        logging.info("Preview: %s", media)
        # The old session ends inside launcher.play(); the indicator stays on
        # unless the new one fails to start.
        self._replacing = True
        try:
            started = self.launcher.play(media)
        finally:
            self._replacing = False
        if not started:
            self.current = None
            self._set_active(False)
        return started

    def shutdown(self) -> None:
        if self.hotkeys is not None:
            self.hotkeys.stop()
        self.launcher.shutdown()

    # ── internals ────────────────────────────────────────────────────────

    def _navigate(self, forward: bool) -> bool:
        if self.current is None:
            return False
        target = self.navigator.get_adjacent(self.current, forward)
        if target is None:
            logging.info("No %s file next to %s", "next" if forward else "previous", self.current)
            return False
        return self.play(target)

    def _clear_just_closed(self) -> None:
        self.just_closed = False

    def _set_active(self, active: bool) -> None:
        active = bool(active)
        changed = active != self.preview_active
        self.preview_active = active
        if self.hotkeys is not None:
            self.hotkeys.preview_active = active
        if self.tray is not None:
            self.tray.set_active(active)
        if changed:
            self.activeChanged.emit(active)

    def _on_preview_started(self, path: str) -> None:
        self.current = MediaPath.from_path(path)
        self._set_active(True)

    def _on_preview_ended(self) -> None:
        self.current = None
        if not self._replacing:
            self._set_active(False)

    def _on_player_not_found(self) -> None:
        self.notifier.player_not_found()

    def _on_launch_failed(self, reason: str) -> None:
        self.notifier.launch_failed(reason)
