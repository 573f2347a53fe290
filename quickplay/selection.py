import logging
import subprocess
from pathlib import Path
from typing import Optional

from .utils import is_video_file

FINDER_BUNDLE_ID = "com.apple.finder"
OSASCRIPT_TIMEOUT = 3

_SELECTION_SCRIPT = """
tell application "Finder"
    set selectedItems to selection
    set filePaths to ""
    repeat with anItem in selectedItems
        try
            set filePaths to filePaths & (POSIX path of (anItem as alias)) & linefeed
        end try
    end repeat
    return filePaths
end tell
"""


def frontmost_bundle_id() -> Optional[str]:
    from AppKit import NSWorkspace

    app = NSWorkspace.sharedWorkspace().frontmostApplication()
    if app is None:
        return None
    return app.bundleIdentifier()


def run_osascript(script: str, timeout: float = OSASCRIPT_TIMEOUT) -> Optional[str]:
    try:
        proc = subprocess.run(
            ["osascript", "-e", script],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logging.warning("osascript failed: %s", e)
        return None
    if proc.returncode != 0:
        logging.warning("osascript error: code=%s stderr=%s", proc.returncode, (proc.stderr or "").strip())
        return None
    return proc.stdout or ""


class FinderSelection:
    """Asks Finder what is selected and whether it is the active app."""

    def __init__(
        self,
        runner=run_osascript,
        frontmost=frontmost_bundle_id,
        bundle_id: str = FINDER_BUNDLE_ID,
    ):
        self._run = runner
        self._frontmost = frontmost
        self._bundle_id = bundle_id

    def current_selection(self) -> list[Path]:
        output = self._run(_SELECTION_SCRIPT)
        if not output:
            return []
        paths = []
        for line in output.splitlines():
            line = line.strip()
            if line:
                paths.append(Path(line))
        return paths

    def is_host_app_frontmost(self) -> bool:
        return self._frontmost() == self._bundle_id

    def selected_video(self) -> Optional[Path]:
        for path in self.current_selection():
            if is_video_file(path):
                return path
        return None
