from PySide6.QtGui import QKeySequence
from PySide6.QtWidgets import QMenu

HOTKEY_HINT = "Control+Space to preview video"
NAVIGATION_HINT = "Up/Down arrows to navigate"


def create_status_menu(controller, parent=None) -> QMenu:
    menu = QMenu(parent)

    hotkey_item = menu.addAction(HOTKEY_HINT)
    hotkey_item.setEnabled(False)
    nav_item = menu.addAction(NAVIGATION_HINT)
    nav_item.setEnabled(False)

    menu.addSeparator()

    preview_action = menu.addAction("Preview Selected Video")
    preview_action.setShortcut(QKeySequence("Meta+Space"))
    preview_action.triggered.connect(controller.previewRequested)

    close_action = menu.addAction("Close Preview")
    close_action.setEnabled(False)
    close_action.triggered.connect(controller.closeRequested)
    controller.activeChanged.connect(close_action.setEnabled)

    menu.addSeparator()

    about_action = menu.addAction("About QuickPlay")
    about_action.triggered.connect(controller.show_about)

    menu.addSeparator()

    quit_action = menu.addAction("Quit")
    quit_action.setShortcut(QKeySequence.Quit)
    quit_action.triggered.connect(controller.quitRequested)

    return menu
