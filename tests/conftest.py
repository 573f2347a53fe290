from __future__ import annotations

import os
import stat
import subprocess
import threading
import time
from pathlib import Path
from typing import Callable, cast

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication  # noqa: E402
from PySide6.QtWidgets import QApplication  # noqa: E402

from quickplay.main import QuickPlayApplication  # noqa: E402


@pytest.fixture(scope="session")
def qt_app() -> QApplication:
    app = QApplication.instance()
    if app is None:
        app = QuickPlayApplication([])
    return cast(QApplication, app)


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    """Pump the Qt event loop until ``predicate`` holds or ``timeout`` passes."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if predicate():
            return True
        time.sleep(0.01)
    QCoreApplication.processEvents()
    return predicate()


class FakeProcess:
    """Stands in for subprocess.Popen; exits only when told to."""

    _next_pid = 40000

    def __init__(self, args, ignore_terminate: bool = False, **kwargs):
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self.args = list(args)
        self.kwargs = kwargs
        self.ignore_terminate = ignore_terminate
        self.returncode = None
        self.terminate_calls = 0
        self.kill_calls = 0
        self._exited = threading.Event()

    def poll(self):
        return self.returncode

    def wait(self, timeout=None):
        if not self._exited.wait(timeout):
            raise subprocess.TimeoutExpired(self.args, timeout)
        return self.returncode

    def terminate(self):
        self.terminate_calls += 1
        if not self.ignore_terminate:
            self.exit(-15)

    def kill(self):
        self.kill_calls += 1
        self.exit(-9)

    def exit(self, code: int = 0):
        if self.returncode is None:
            self.returncode = code
        self._exited.set()


class FakeSpawner:
    def __init__(self):
        self.processes: list[FakeProcess] = []
        self.error: Exception | None = None
        self.ignore_terminate = False

    def __call__(self, args, **kwargs):
        if self.error is not None:
            raise self.error
        process = FakeProcess(args, ignore_terminate=self.ignore_terminate, **kwargs)
        self.processes.append(process)
        return process

    def finish_all(self):
        for process in self.processes:
            process.exit(0)


@pytest.fixture
def spawner():
    fake = FakeSpawner()
    yield fake
    fake.finish_all()


@pytest.fixture
def fake_mpv(tmp_path: Path) -> str:
    exe = tmp_path / "bin" / "mpv"
    exe.parent.mkdir()
    exe.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    exe.chmod(exe.stat().st_mode | stat.S_IXUSR)
    return str(exe)


@pytest.fixture
def video_dir(tmp_path: Path) -> Path:
    folder = tmp_path / "videos"
    folder.mkdir()
    for name in ("ep10.mkv", "ep1.mkv", "ep2.mkv"):
        (folder / name).write_bytes(b"")
    return folder


class Recorder:
    """Collects the launcher's notifications."""

    def __init__(self, launcher):
        self.started: list[str] = []
        self.ended = 0
        self.not_found = 0
        self.failed: list[str] = []
        launcher.previewStarted.connect(self.started.append)
        launcher.previewEnded.connect(self._on_ended)
        launcher.playerNotFound.connect(self._on_not_found)
        launcher.launchFailed.connect(self.failed.append)

    def _on_ended(self):
        self.ended += 1

    def _on_not_found(self):
        self.not_found += 1
