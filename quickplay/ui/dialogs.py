from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices
from PySide6.QtWidgets import QMessageBox

ACCESSIBILITY_SETTINGS_URL = "x-apple.systempreferences:com.apple.preference.security?Privacy_Accessibility"

ABOUT_TEXT = """Quick video preview for macOS.

Control+Space: Preview selected video
Up/Down arrows: Navigate videos
Escape: Close preview

Requires mpv: brew install mpv"""


def _build_message_box(
    icon: QMessageBox.Icon,
    title: str,
    text: str,
    informative: str = "",
    parent=None,
) -> QMessageBox:
    box = QMessageBox(parent)
    box.setIcon(icon)
    box.setWindowTitle(title)
    box.setText(text)
    if informative:
        box.setInformativeText(informative)
    return box


def show_player_not_found(parent=None) -> None:
    box = _build_message_box(
        QMessageBox.Critical,
        "QuickPlay",
        "mpv Not Found",
        "QuickPlay requires mpv to play videos.\n\nInstall using Homebrew:\nbrew install mpv",
        parent,
    )
    box.setStandardButtons(QMessageBox.Ok)
    box.exec()


def show_launch_failed(reason: str, parent=None) -> None:
    box = _build_message_box(QMessageBox.Critical, "QuickPlay", "Failed to Launch mpv", reason, parent)
    box.setStandardButtons(QMessageBox.Ok)
    box.exec()


def show_accessibility_required(parent=None) -> None:
    box = _build_message_box(
        QMessageBox.Warning,
        "QuickPlay",
        "Accessibility Permission Required",
        "QuickPlay needs accessibility permission to detect the Control+Space hotkey.\n\n"
        "Please grant permission in System Settings > Privacy & Security > Accessibility.",
        parent,
    )
    open_button = box.addButton("Open System Settings", QMessageBox.AcceptRole)
    box.addButton("Later", QMessageBox.RejectRole)
    box.exec()
    if box.clickedButton() == open_button:
        QDesktopServices.openUrl(QUrl(ACCESSIBILITY_SETTINGS_URL))


def show_about(parent=None) -> None:
    box = _build_message_box(QMessageBox.Information, "About QuickPlay", "QuickPlay", ABOUT_TEXT, parent)
    box.setStandardButtons(QMessageBox.Ok)
    box.exec()


class DialogNotifier:
    """Routes launcher failures to modal alerts."""

    def player_not_found(self) -> None:
        show_player_not_found()

    def launch_failed(self, reason: str) -> None:
        show_launch_failed(reason)
