import enum
import logging
import os
import subprocess
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from PySide6.QtCore import QObject, Signal

from .events import EventDispatcher, ProcessExitEvent
from .utils import MediaPath

DEFAULT_MPV_CANDIDATES = (
    "/opt/homebrew/bin/mpv",
    "/usr/local/bin/mpv",
    "/Applications/mpv.app/Contents/MacOS/mpv",
)
DEFAULT_TERMINATE_GRACE = 0.1


class PlayerState(enum.Enum):
    IDLE = "idle"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


@dataclass
class PlayerOptions:
    hwdec: str = "auto"
    autofit_percent: int = 80


@dataclass
class PlaybackSession:
    media: MediaPath
    process: subprocess.Popen

    @property
    def pid(self) -> int:
        return self.process.pid


def find_mpv(candidates: Iterable[str]) -> Optional[str]:
    for candidate in candidates:
        if not candidate:
            continue
        if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
            return candidate
    return None


def build_mpv_args(executable: str, media: MediaPath, options: PlayerOptions) -> list[str]:
    return [
        executable,
        f"--hwdec={options.hwdec}",
        "--keep-open=yes",
        "--osc=yes",
        "--osd-level=1",
        f"--autofit={int(options.autofit_percent)}%",
        "--auto-window-resize=yes",
        f"--title={media.name}",
        "--force-window=immediate",
        # Our global hotkeys stay authoritative while mpv has focus.
        "--input-default-bindings=no",
        "--input-vo-keyboard=no",
        str(media.path),
    ]


class MpvLauncher(QObject):
    """Owns the single external mpv process used for previews.

    ``play`` always retires the running process before starting another one, so
    at most one session exists. A session ends either through ``stop`` or when
    mpv exits on its own; both paths clear the session and emit
    ``previewEnded`` exactly once. Exit notifications come from a watcher
    thread and are marshaled through the dispatcher onto the GUI thread, where
    they are matched against the current session by pid.
    """

    previewStarted = Signal(str)
    previewEnded = Signal()
    playerNotFound = Signal()
    launchFailed = Signal(str)

    def __init__(
        self,
        dispatcher: Optional[EventDispatcher] = None,
        candidates: Sequence[str] = DEFAULT_MPV_CANDIDATES,
        spawn: Callable[..., subprocess.Popen] = subprocess.Popen,
        terminate_grace: float = DEFAULT_TERMINATE_GRACE,
        options: Optional[PlayerOptions] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._dispatcher = dispatcher if dispatcher is not None else EventDispatcher(self)
        self._dispatcher.subscribe(ProcessExitEvent, self.handle_process_exit)
        self._candidates = tuple(candidates)
        self._spawn = spawn
        self._terminate_grace = max(0.0, float(terminate_grace))
        self._options = options or PlayerOptions()
        self._session: Optional[PlaybackSession] = None
        self._state = PlayerState.IDLE

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def session(self) -> Optional[PlaybackSession]:
        return self._session

    @property
    def current(self) -> Optional[MediaPath]:
        return self._session.media if self._session else None

    @property
    def is_playing(self) -> bool:
        session = self._session
        if session is None:
            return False
        return session.process.poll() is None

    def find_executable(self) -> Optional[str]:
        return find_mpv(self._candidates)

    def play(self, path) -> bool:
        media = MediaPath.from_path(path)
        self.stop()
        self._state = PlayerState.STARTING

        executable = self.find_executable()
        if executable is None:
            logging.warning("mpv not found: candidates=%s", list(self._candidates))
            self._state = PlayerState.IDLE
            self.playerNotFound.emit()
            return False

        args = build_mpv_args(executable, media, self._options)
        try:
            process = self._spawn(
                args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            logging.error("mpv launch failed: exe=%s file=%s error=%s", executable, media, e)
            self._state = PlayerState.IDLE
            self.launchFailed.emit(str(e))
            return False

        self._session = PlaybackSession(media=media, process=process)
        self._state = PlayerState.RUNNING
        self._watch(process)
        logging.info("mpv started: pid=%s file=%s", process.pid, media)
        self.previewStarted.emit(str(media))
        return True

    def stop(self) -> bool:
        session = self._session
        if session is None:
            return False

        # Cleared before the process is confirmed dead.
        self._session = None
        self._state = PlayerState.STOPPING
        self._terminate(session.process)
        self._state = PlayerState.IDLE
        logging.info("mpv stopped: pid=%s file=%s", session.pid, session.media)
        self.previewEnded.emit()
        return True

    def shutdown(self) -> None:
        self.stop()

    def handle_process_exit(self, event: ProcessExitEvent) -> None:
        session = self._session
        if session is None or session.process is not event.process:
            logging.debug("Ignoring stale mpv exit: pid=%s", event.pid)
            return
        self._session = None
        self._state = PlayerState.IDLE
        logging.info("mpv exited: pid=%s returncode=%s file=%s", event.pid, event.returncode, session.media)
        self.previewEnded.emit()

    def _terminate(self, process) -> None:
        if process.poll() is not None:
            return
        try:
            process.terminate()
            process.wait(timeout=self._terminate_grace)
        except subprocess.TimeoutExpired:
            logging.info("mpv ignored SIGTERM, killing: pid=%s", process.pid)
            try:
                process.kill()
            except ProcessLookupError:
                logging.debug("mpv already gone before kill: pid=%s", process.pid)
        except ProcessLookupError:
            logging.debug("mpv already gone before terminate: pid=%s", process.pid)

    def _watch(self, process) -> None:
        dispatcher = self._dispatcher

        def _wait_for_exit():
            returncode = process.wait()
            try:
                dispatcher.post(ProcessExitEvent(process=process, returncode=returncode))
            except RuntimeError as e:
                # Dispatcher was destroyed during application shutdown.
                logging.debug("Dropped mpv exit event: pid=%s error=%s", process.pid, e)

        watcher = threading.Thread(
            target=_wait_for_exit,
            name=f"mpv-watch-{process.pid}",
            daemon=True,
        )
        watcher.start()
