import locale
import logging
import sys

from PySide6.QtCore import QEvent, Signal
from PySide6.QtGui import QFileOpenEvent
from PySide6.QtNetwork import QLocalServer, QLocalSocket
from PySide6.QtWidgets import QApplication

from . import __version__
from .app_logging import setup_app_logging
from .events import EventDispatcher
from .mpv_launcher import DEFAULT_MPV_CANDIDATES, MpvLauncher, PlayerOptions, find_mpv
from .preview import PreviewCoordinator
from .selection import FinderSelection
from .settings import AppSettings, load_app_settings
from .ui.dialogs import show_accessibility_required
from .ui.icons import get_status_icon
from .ui.tray import StatusBarController

SERVER_NAME = "quickplay_single_instance_server"


class QuickPlayApplication(QApplication):
    """QApplication that turns macOS "Open With" events into a signal."""

    fileOpenRequested = Signal(str)

    def event(self, event):
        if event.type() == QEvent.FileOpen and isinstance(event, QFileOpenEvent):
            path = event.file()
            if path:
                self.fileOpenRequested.emit(path)
            return True
        return super().event(event)


def mpv_candidates(config: AppSettings) -> list[str]:
    candidates = list(DEFAULT_MPV_CANDIDATES)
    if config.extra_mpv_path:
        candidates.insert(0, config.extra_mpv_path)
    return candidates


def forward_to_running_instance(paths: list[str], timeout_ms: int = 300) -> bool:
    """Hand ``paths`` to an already running QuickPlay. False if none is running."""
    socket = QLocalSocket()
    socket.connectToServer(SERVER_NAME)
    if not socket.waitForConnected(timeout_ms):
        return False
    if paths:
        socket.write("\n".join(paths).encode("utf-8"))
        socket.flush()
        socket.waitForBytesWritten(1000)
    socket.disconnectFromServer()
    if socket.state() != QLocalSocket.UnconnectedState:
        socket.waitForDisconnected(500)
    return True


def start_instance_server(on_paths) -> QLocalServer:
    server = QLocalServer()
    server.removeServer(SERVER_NAME)
    if not server.listen(SERVER_NAME):
        logging.warning("Single-instance server failed: %s", server.errorString())

    def on_new_connection() -> None:
        client = server.nextPendingConnection()
        if not client:
            return
        if client.bytesAvailable() == 0:
            client.waitForReadyRead(500)
        data = client.readAll().data().decode("utf-8")
        paths = [p for p in data.split("\n") if p.strip()]
        if paths:
            logging.info("Received paths from another instance: %s", paths)
            on_paths(paths)
        client.disconnectFromServer()

    server.newConnection.connect(on_new_connection)
    return server


def build_coordinator(config: AppSettings, hotkeys=None, tray=None) -> PreviewCoordinator:
    dispatcher = EventDispatcher()
    launcher = MpvLauncher(
        dispatcher=dispatcher,
        candidates=mpv_candidates(config),
        terminate_grace=config.terminate_grace_ms / 1000.0,
        options=PlayerOptions(hwdec=config.hwdec, autofit_percent=config.autofit_percent),
    )
    if hotkeys is None:
        from .hotkeys import HotkeyListener

        hotkeys = HotkeyListener(dispatcher)
    coordinator = PreviewCoordinator(
        launcher=launcher,
        dispatcher=dispatcher,
        selection=FinderSelection(),
        hotkeys=hotkeys,
        tray=tray,
        close_suppress_ms=config.close_suppress_ms,
    )
    # Keep the dispatcher alive as long as the coordinator.
    dispatcher.setParent(coordinator)
    launcher.setParent(coordinator)
    return coordinator


def run_as_menu_bar_agent() -> None:
    """No Dock icon and no focus stealing; the status item is the only UI."""
    from AppKit import NSApplication, NSApplicationActivationPolicyAccessory

    NSApplication.sharedApplication().setActivationPolicy_(NSApplicationActivationPolicyAccessory)


def _log_runtime_diagnostics(config: AppSettings) -> None:
    logging.info("QuickPlay %s starting", __version__)
    logging.info("mpv candidates=%s resolved=%s", mpv_candidates(config), find_mpv(mpv_candidates(config)) or "not found")
    logging.info("Settings: %s", config)


def run() -> int:
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logging.debug("Collation locale not applied: %s", e)

    setup_app_logging()
    config = load_app_settings()
    _log_runtime_diagnostics(config)

    app = QuickPlayApplication(sys.argv)
    app.setApplicationName("QuickPlay")
    app.setQuitOnLastWindowClosed(False)
    if sys.platform == "darwin":
        run_as_menu_bar_agent()
    app.setWindowIcon(get_status_icon())

    args = [a for a in sys.argv[1:] if a.strip()]
    if forward_to_running_instance(args):
        logging.info("Another instance is running; forwarded %d path(s)", len(args))
        return 0

    tray = StatusBarController()
    coordinator = build_coordinator(config, tray=tray)
    tray.quitRequested.connect(app.quit)
    tray.show()

    server = start_instance_server(coordinator.open_paths)

    app.fileOpenRequested.connect(lambda path: coordinator.open_paths([path]))

    coordinator.hotkeys.start()
    if not coordinator.hotkeys.is_trusted:
        logging.warning("Accessibility permission missing; hotkeys will not work")
        show_accessibility_required()

    app.aboutToQuit.connect(coordinator.shutdown)

    if args:
        coordinator.open_paths(args)

    logging.info("Ready - Control+Space to preview")
    exit_code = app.exec()

    server.close()
    QLocalServer.removeServer(SERVER_NAME)
    return int(exit_code)


if __name__ == "__main__":
    raise SystemExit(run())
