import logging

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QSystemTrayIcon

from .dialogs import show_about
from .icons import get_status_icon
from .menus import create_status_menu

TOOLTIP = "QuickPlay - Control+Space to preview"


class StatusBarController(QObject):
    """Menu bar item: shows whether a preview is running and offers the menu."""

    previewRequested = Signal()
    closeRequested = Signal()
    quitRequested = Signal()
    activeChanged = Signal(bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._active = False
        self._idle_icon = get_status_icon(active=False)
        self._active_icon = get_status_icon(active=True)
        self.menu = create_status_menu(self)
        self.tray_icon = QSystemTrayIcon(self._idle_icon, self)
        self.tray_icon.setToolTip(TOOLTIP)
        self.tray_icon.setContextMenu(self.menu)

    @property
    def active(self) -> bool:
        return self._active

    def show(self) -> None:
        if not QSystemTrayIcon.isSystemTrayAvailable():
            logging.warning("System tray not available; status icon hidden")
            return
        self.tray_icon.show()

    def hide(self) -> None:
        self.tray_icon.hide()

    def set_active(self, active: bool) -> None:
        active = bool(active)
        if active == self._active:
            return
        self._active = active
        self.tray_icon.setIcon(self._active_icon if active else self._idle_icon)
        self.activeChanged.emit(active)

    def show_about(self) -> None:
        show_about()
